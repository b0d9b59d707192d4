"""Operator commands for Babelfish.

Provides Discord commands for inspecting the running relay: relay state
(``!relaystatus``) and DeepL character usage (``!usage``).

Usage::

    # In bot startup:
    await bot.load_extension("babelfish.commands.admin")
"""

from __future__ import annotations

import logging

import discord
from discord.ext import commands

from babelfish.translation.base import TranslationError

log = logging.getLogger(__name__)


class AdminCommands(commands.Cog):
    """Relay monitoring commands.

    Attributes:
        bot: The parent bot that owns the relay.
    """

    def __init__(self, bot: commands.Bot) -> None:
        self.bot = bot

    # ------------------------------------------------------------------
    # !relaystatus -- relay configuration and record count
    # ------------------------------------------------------------------

    @commands.command(name="relaystatus")
    async def relay_status(self, ctx: commands.Context) -> None:
        """Show relay channels, languages and stored records."""
        config = self.bot.relay_config
        embed = discord.Embed(title="Relay Status", color=0x3498DB)

        if config is None:
            embed.description = "Relay not initialised yet."
            await ctx.send(embed=embed)
            return

        embed.add_field(
            name="Aggregate",
            value=f"<#{config.aggregate_channel_id}> ({config.default_language})",
            inline=False,
        )
        sources = "\n".join(
            f"<#{channel_id}> ({language})"
            for channel_id, language in sorted(config.source_channel_language.items())
        )
        embed.add_field(name="Sources", value=sources or "none", inline=False)
        embed.add_field(name="Relay records", value=str(len(self.bot.store)), inline=True)

        await ctx.send(embed=embed)

    # ------------------------------------------------------------------
    # !usage -- DeepL billing-period usage
    # ------------------------------------------------------------------

    @commands.command(name="usage")
    async def usage(self, ctx: commands.Context) -> None:
        """Show DeepL character usage for the current billing period."""
        try:
            usage = await self.bot.translator.usage()
        except TranslationError as e:
            log.warning("DeepL usage lookup failed: %s", e)
            await ctx.send(f"Could not fetch DeepL usage: {e.message}")
            return

        embed = discord.Embed(title="DeepL Usage", color=0xE67E22)
        embed.add_field(name="Used", value=f"{usage.character_count:,}", inline=True)
        embed.add_field(name="Limit", value=f"{usage.character_limit:,}", inline=True)
        embed.add_field(name="Remaining", value=f"{usage.remaining:,}", inline=True)

        if usage.character_limit and usage.character_count > usage.character_limit * 0.8:
            embed.add_field(
                name="Warning",
                value="Over 80% of the character quota is used.",
                inline=False,
            )

        await ctx.send(embed=embed)


async def setup(bot: commands.Bot) -> None:
    """Entry point for ``bot.load_extension``."""
    await bot.add_cog(AdminCommands(bot))

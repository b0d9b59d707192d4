"""BabelfishBot: the Discord bot that hosts the translation relay."""

from __future__ import annotations

import logging

import discord
from discord.ext import commands

from babelfish.channels.events import event_from_message
from babelfish.channels.gateway import DiscordGateway
from babelfish.commands import COMMAND_EXTENSIONS
from babelfish.config import BabelfishSettings, get_settings
from babelfish.relay.models import RelayConfig
from babelfish.relay.orchestrator import RelayOrchestrator
from babelfish.relay.store import InMemoryRelayStore, RelayStore
from babelfish.translation.deepl import DeepLClient

log = logging.getLogger(__name__)


class BabelfishBot(commands.Bot):
    """Relays messages between source channels and the aggregate channel.

    Wires together:
    - DeepL translation client
    - in-memory relay record store
    - Discord gateway for posting
    - the relay orchestrator (built on login, once the bot's id is known)

    discord.py dispatches every ``on_message`` in its own task, so messages
    are relayed concurrently.
    """

    def __init__(
        self,
        settings: BabelfishSettings | None = None,
        store: RelayStore | None = None,
    ) -> None:
        settings = settings or get_settings()

        intents = discord.Intents.default()
        intents.message_content = True
        intents.guilds = True
        intents.members = False

        super().__init__(command_prefix=settings.COMMAND_PREFIX, intents=intents)

        self.settings = settings
        self.store: RelayStore = store if store is not None else InMemoryRelayStore()
        self.translator = DeepLClient(
            api_key=settings.DEEPL_API_KEY,
            base_url=settings.DEEPL_API_URL,
            timeout=settings.TRANSLATION_TIMEOUT,
        )
        self.gateway = DiscordGateway(self)
        self.relay_config: RelayConfig | None = None
        self.orchestrator: RelayOrchestrator | None = None

    async def setup_hook(self) -> None:
        """Called after login, before the bot starts processing events."""
        self.relay_config = RelayConfig.from_settings(self.settings, self.user.id)
        self.orchestrator = RelayOrchestrator(
            config=self.relay_config,
            store=self.store,
            translator=self.translator,
            gateway=self.gateway,
        )
        for ext in COMMAND_EXTENSIONS:
            await self.load_extension(ext)
        log.info("Relay ready (bot user id %d)", self.relay_config.bot_user_id)

    async def on_ready(self) -> None:
        log.info(f"Logged in as {self.user} (ID: {self.user.id})")
        for channel_id in (
            self.settings.AGGREGATE_CHANNEL_ID,
            *self.settings.SOURCE_CHANNEL_LANGUAGE,
        ):
            if self.get_channel(channel_id) is None:
                log.warning("Configured channel %d is not visible to the bot", channel_id)

    async def on_message(self, message: discord.Message) -> None:
        """Handle incoming Discord messages."""
        if self.orchestrator is None:
            return

        # Only text that resolves to a registered command skips the relay.
        if message.content.startswith(self.settings.COMMAND_PREFIX):
            ctx = await self.get_context(message)
            if ctx.valid:
                await self.invoke(ctx)
                return

        # Skip before resolving references, which may cost an API call.
        classifier = self.orchestrator.classifier
        if classifier.is_bot_message(message.author.id):
            return
        if not classifier.is_monitored_channel(message.channel.id):
            return

        try:
            event = await event_from_message(message)
            await self.orchestrator.handle(event)
        except Exception as e:
            log.error("Error relaying message %d: %s", message.id, e, exc_info=True)

    async def close(self) -> None:
        """Clean shutdown."""
        log.info("Shutting down Babelfish...")
        await self.translator.close()
        await super().close()

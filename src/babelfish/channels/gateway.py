"""Discord implementation of the relay's chat gateway."""

from __future__ import annotations

import logging

import discord

from babelfish.relay.errors import SendError

log = logging.getLogger(__name__)

# Translations may contain @everyone or role pings copied from the source.
_ALLOWED_MENTIONS = discord.AllowedMentions(everyone=False, roles=False, replied_user=False)


class DiscordGateway:
    """Posts relay messages through a connected :class:`discord.Client`.

    Args:
        client: The bot client.  Must be logged in before
            :meth:`send_message` is called.
    """

    def __init__(self, client: discord.Client) -> None:
        self._client = client

    async def _resolve_channel(self, channel_id: int) -> discord.abc.Messageable:
        channel = self._client.get_channel(channel_id)
        if channel is None:
            channel = await self._client.fetch_channel(channel_id)
        if not isinstance(channel, discord.abc.Messageable):
            raise SendError("channel does not accept messages", channel_id)
        return channel

    async def send_message(
        self,
        channel_id: int,
        content: str,
        reply_to_message_id: int | None = None,
    ) -> int:
        """Post *content* in *channel_id* and return the new message id.

        When *reply_to_message_id* is given the post is threaded under that
        message.  If the message no longer exists the post goes out
        unthreaded instead of failing.

        Raises:
            SendError: The channel can't be found or Discord rejected the post.
        """
        reference = None
        if reply_to_message_id is not None:
            reference = discord.MessageReference(
                message_id=reply_to_message_id,
                channel_id=channel_id,
                fail_if_not_exists=False,
            )

        try:
            channel = await self._resolve_channel(channel_id)
            sent = await channel.send(
                content,
                reference=reference,
                allowed_mentions=_ALLOWED_MENTIONS,
            )
        except discord.HTTPException as exc:
            raise SendError(exc.text or str(exc), channel_id, exc.status) from exc
        except discord.InvalidData as exc:
            raise SendError(str(exc), channel_id) from exc

        log.debug("Posted message %d in channel %d", sent.id, channel_id)
        return sent.id

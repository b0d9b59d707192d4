"""Discord adapters for the relay.

Public API:
    :class:`DiscordGateway` -- posts translations into Discord channels.
    :func:`event_from_message` -- turns a :class:`discord.Message` into a
    :class:`~babelfish.relay.models.MessageEvent`.
    :func:`format_relay_text` -- attribution formatting for relayed posts.
"""

from babelfish.channels.events import event_from_message, resolve_display_name
from babelfish.channels.formatter import MESSAGE_CHAR_LIMIT, format_relay_text
from babelfish.channels.gateway import DiscordGateway

__all__ = [
    "DiscordGateway",
    "MESSAGE_CHAR_LIMIT",
    "event_from_message",
    "format_relay_text",
    "resolve_display_name",
]

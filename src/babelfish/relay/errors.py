"""Exceptions raised by the relay core."""

from __future__ import annotations


class RelayError(Exception):
    """Base class for relay errors."""


class UnmonitoredChannelError(RelayError):
    """The channel is neither a source channel nor the aggregate channel."""

    def __init__(self, channel_id: int) -> None:
        self.channel_id = channel_id
        super().__init__(f"Channel {channel_id} is not monitored by the relay")


class SendError(RelayError):
    """The chat platform refused or failed to post a message.

    Attributes:
        channel_id: Channel the post was aimed at.
        status_code: HTTP status from the platform, when known.
    """

    def __init__(
        self,
        message: str,
        channel_id: int,
        status_code: int | None = None,
    ) -> None:
        self.message = message
        self.channel_id = channel_id
        self.status_code = status_code
        super().__init__(
            f"Send to channel {channel_id} failed"
            f"{f' ({status_code})' if status_code else ''}: {message}"
        )

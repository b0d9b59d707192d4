"""Channel and author classification."""

from __future__ import annotations

from babelfish.relay.errors import UnmonitoredChannelError
from babelfish.relay.models import RelayConfig


class ChannelClassifier:
    """Answers "should the relay care about this message?" questions.

    All methods are pure lookups against the config snapshot.
    """

    def __init__(self, config: RelayConfig) -> None:
        self.config = config

    def is_bot_message(self, author_id: int) -> bool:
        """Return ``True`` if *author_id* is the relay bot itself."""
        return author_id == self.config.bot_user_id

    def is_aggregate_channel(self, channel_id: int) -> bool:
        return channel_id == self.config.aggregate_channel_id

    def is_monitored_channel(self, channel_id: int) -> bool:
        """Return ``True`` for the aggregate channel or any source channel."""
        return (
            self.is_aggregate_channel(channel_id)
            or channel_id in self.config.source_channel_language
        )

    def resolve_source_language(self, channel_id: int) -> str:
        """Return the language a message posted in *channel_id* is expected in.

        Raises:
            UnmonitoredChannelError: *channel_id* is neither a source channel
                nor the aggregate channel.
        """
        language = self.config.source_channel_language.get(channel_id)
        if language is not None:
            return language
        if self.is_aggregate_channel(channel_id):
            return self.config.default_language
        raise UnmonitoredChannelError(channel_id)

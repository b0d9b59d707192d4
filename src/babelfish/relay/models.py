"""Data model shared by the relay core.

Everything here is immutable.  Records and routes are created once per
message and never mutated; the :class:`RelayConfig` snapshot is shared by
every concurrent relay run without locking.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    from babelfish.config import BabelfishSettings


@dataclass(frozen=True, slots=True)
class RelayRecord:
    """Message *message_id* in *channel_id* carries text in *language*."""

    channel_id: int
    message_id: int
    language: str


@dataclass(frozen=True, slots=True)
class PendingRoute:
    """Where the translated post goes.

    Attributes:
        target_channel_id: Channel to post the translation into.
        target_language: DeepL language code to translate into.
        target_reply_to_message_id: Message the post should be threaded
            under, or ``None`` for a top-level post.
    """

    target_channel_id: int
    target_language: str
    target_reply_to_message_id: int | None


@dataclass(frozen=True, slots=True)
class ReplyContext:
    """Normalised view of the message the current message replies to."""

    message_id: int | None = None
    author_id: int | None = None

    @classmethod
    def none(cls) -> ReplyContext:
        return cls()

    @property
    def referenced_message_present(self) -> bool:
        return self.message_id is not None


@dataclass(frozen=True, slots=True)
class ReferencedMessage:
    id: int
    author_id: int


@dataclass(frozen=True, slots=True)
class MessageEvent:
    """A platform-neutral inbound chat message."""

    id: int
    channel_id: int
    author_id: int
    author_display_name: str
    content: str
    referenced: ReferencedMessage | None = None


@dataclass(frozen=True)
class RelayConfig:
    """Read-only routing configuration.

    Attributes:
        bot_user_id: User id the bot posts as.  Messages by this user are
            never relayed.
        aggregate_channel_id: The single channel receiving translations.
        source_channel_language: Source channel id -> DeepL language code.
        default_language: Language of the aggregate channel.
    """

    bot_user_id: int
    aggregate_channel_id: int
    source_channel_language: Mapping[int, str] = field(default_factory=dict)
    default_language: str = "EN-GB"

    def __post_init__(self) -> None:
        # Freeze the mapping so a snapshot can't drift after load.
        object.__setattr__(
            self,
            "source_channel_language",
            MappingProxyType(dict(self.source_channel_language)),
        )

    @classmethod
    def from_settings(
        cls, settings: BabelfishSettings, bot_user_id: int | None = None
    ) -> RelayConfig:
        """Build a snapshot from settings.

        *bot_user_id* is used when ``BOT_USER_ID`` is not configured, which
        is the normal case: the bot learns its own id at login.
        """
        resolved = settings.BOT_USER_ID or bot_user_id
        if resolved is None:
            raise ValueError("bot user id is unknown; set BOT_USER_ID or log in first")
        return cls(
            bot_user_id=resolved,
            aggregate_channel_id=settings.AGGREGATE_CHANNEL_ID,
            source_channel_language=settings.SOURCE_CHANNEL_LANGUAGE,
            default_language=settings.DEFAULT_LANGUAGE,
        )

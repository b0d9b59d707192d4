"""Per-message relay workflow.

:class:`RelayOrchestrator` drives one inbound message through::

    RECEIVED -> CLASSIFIED -> REJECTED
                           -> ROUTED -> TRANSLATED -> POSTED -> RECORDED

The original message is recorded right after translation, before anything
is posted, so a later reply to it still routes correctly if the post fails.
Errors from the translator or the chat platform end the run; store writes
already made are kept.

Usage::

    orchestrator = RelayOrchestrator(config, store, translator, gateway)
    outcome = await orchestrator.handle(event)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from babelfish.channels.formatter import format_relay_text
from babelfish.relay.classifier import ChannelClassifier
from babelfish.relay.errors import SendError
from babelfish.relay.models import MessageEvent, PendingRoute, RelayConfig, RelayRecord, ReplyContext
from babelfish.relay.reply import resolve_reply
from babelfish.relay.routing import RejectReason, decide_route
from babelfish.relay.store import RelayStore
from babelfish.translation.base import TranslationError, TranslationResult, Translator

log = logging.getLogger(__name__)


class ChatGateway(Protocol):
    async def send_message(
        self,
        channel_id: int,
        content: str,
        reply_to_message_id: int | None = None,
    ) -> int: ...


class RelayState(Enum):
    RECEIVED = "received"
    CLASSIFIED = "classified"
    REJECTED = "rejected"
    ROUTED = "routed"
    TRANSLATED = "translated"
    POSTED = "posted"
    RECORDED = "recorded"


@dataclass(frozen=True, slots=True)
class RelayOutcome:
    """What happened to one message.

    *state* is the last state reached.  A run that ends in ``TRANSLATED``
    without an *error* had nothing to post.
    """

    state: RelayState
    route: PendingRoute | None = None
    rejection: RejectReason | None = None
    translation: TranslationResult | None = None
    posted_message_id: int | None = None
    error: Exception | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class RelayOrchestrator:
    """Classifies, routes, translates, posts and records relayed messages.

    One instance serves every message; runs for different messages may
    interleave freely.  The only shared mutable state is *store*.

    Args:
        config: Routing configuration snapshot.
        store: Relay record store.
        translator: Translation provider.
        gateway: Chat platform used to post translations.
    """

    def __init__(
        self,
        config: RelayConfig,
        store: RelayStore,
        translator: Translator,
        gateway: ChatGateway,
    ) -> None:
        self.config = config
        self.store = store
        self.translator = translator
        self.gateway = gateway
        self.classifier = ChannelClassifier(config)

    def classify(self, event: MessageEvent, reply: ReplyContext) -> RejectReason | None:
        """Return why *event* should be ignored, or ``None`` to relay it."""
        if self.classifier.is_bot_message(event.author_id):
            return RejectReason.BOT_AUTHOR
        if not self.classifier.is_monitored_channel(event.channel_id):
            return RejectReason.UNMONITORED_CHANNEL
        if (
            self.classifier.is_aggregate_channel(event.channel_id)
            and not reply.referenced_message_present
        ):
            return RejectReason.STANDALONE_AGGREGATE
        if not event.content.strip():
            return RejectReason.EMPTY_CONTENT
        return None

    async def handle(self, event: MessageEvent) -> RelayOutcome:
        """Run the relay workflow for one inbound message."""
        log.debug(
            "Received message %d from %d in channel %d",
            event.id, event.author_id, event.channel_id,
        )
        reply = resolve_reply(event.referenced)

        rejection = self.classify(event, reply)
        if rejection is not None:
            log.debug("Ignoring message %d: %s", event.id, rejection.value)
            return RelayOutcome(state=RelayState.REJECTED, rejection=rejection)

        decision = decide_route(
            event.channel_id, event.id, reply, self.config, self.store.get,
        )
        if decision.rejected:
            log.debug("Ignoring message %d: %s", event.id, decision.rejection.value)
            return RelayOutcome(state=RelayState.REJECTED, rejection=decision.rejection)
        route = decision.route

        log.info(
            "Translating message %d to %s for channel %d",
            event.id, route.target_language, route.target_channel_id,
        )
        try:
            translation = await self.translator.translate(event.content, route.target_language)
        except TranslationError as exc:
            log.warning("Translation of message %d failed: %s", event.id, exc)
            return RelayOutcome(state=RelayState.ROUTED, route=route, error=exc)

        self.store.put_if_absent(
            event.id,
            RelayRecord(
                channel_id=event.channel_id,
                message_id=event.id,
                language=self.classifier.resolve_source_language(event.channel_id),
            ),
        )

        if not translation.text or translation.text == event.content:
            log.info(
                "Message %d is already in %s; nothing to post",
                event.id, route.target_language,
            )
            return RelayOutcome(state=RelayState.TRANSLATED, route=route, translation=translation)

        # Thread the post only when answering one of our own relays.
        reply_to = None
        if reply.referenced_message_present and self.classifier.is_bot_message(reply.author_id):
            reply_to = route.target_reply_to_message_id

        content = format_relay_text(translation.text, event.author_display_name)
        try:
            posted_id = await self.gateway.send_message(route.target_channel_id, content, reply_to)
        except SendError as exc:
            log.error("Posting translation of message %d failed: %s", event.id, exc)
            return RelayOutcome(
                state=RelayState.TRANSLATED, route=route, translation=translation, error=exc,
            )

        self.store.put_if_absent(
            posted_id,
            RelayRecord(
                channel_id=event.channel_id,
                message_id=event.id,
                language=translation.detected_source_language,
            ),
        )
        log.info(
            "Relayed message %d as %d in channel %d",
            event.id, posted_id, route.target_channel_id,
        )
        return RelayOutcome(
            state=RelayState.RECORDED,
            route=route,
            translation=translation,
            posted_message_id=posted_id,
        )

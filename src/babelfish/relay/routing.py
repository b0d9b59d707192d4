"""Route decision for an outgoing translated post.

A message starts with the base route "translate into the default language
and post in the aggregate channel".  The override rules in
:data:`ROUTE_RULES` are then applied in order.  Each rule receives the
inputs and the route so far and either returns a (possibly new) route or a
:class:`RejectReason`, which ends evaluation.  Later rules win.

Rules, in priority order:

- **reject_standalone_aggregate** -- a non-reply in the aggregate channel is
  never relayed.
- **reverse_past_translation** -- replying to a message with a relay record
  sends the reply back to the record's channel and language, threaded under
  the record's message.
- **fresh_aggregate_for_source_reply** -- replying to a human in a source
  channel starts a new top-level post in the aggregate channel.

Usage::

    decision = decide_route(channel_id, message_id, reply, config, store.get)
    if decision.rejected:
        return
    route = decision.route
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Union

from babelfish.relay.models import PendingRoute, RelayConfig, RelayRecord, ReplyContext

log = logging.getLogger(__name__)

Lookup = Callable[[int], Union[RelayRecord, None]]


class RejectReason(Enum):
    """Why a message produced no relay."""

    BOT_AUTHOR = "bot_author"
    UNMONITORED_CHANNEL = "unmonitored_channel"
    STANDALONE_AGGREGATE = "standalone_aggregate"
    EMPTY_CONTENT = "empty_content"


@dataclass(frozen=True, slots=True)
class RoutingInput:
    channel_id: int
    message_id: int
    reply: ReplyContext
    config: RelayConfig
    lookup: Lookup


@dataclass(frozen=True, slots=True)
class RouteDecision:
    """Result of :func:`decide_route`.

    Exactly one of *route* and *rejection* is set.  *applied_rules* names
    the rules that changed the outcome, in evaluation order.
    """

    route: PendingRoute | None = None
    rejection: RejectReason | None = None
    applied_rules: tuple[str, ...] = ()

    @property
    def rejected(self) -> bool:
        return self.rejection is not None


RuleResult = Union[PendingRoute, RejectReason]
RouteRule = Callable[[RoutingInput, PendingRoute], RuleResult]


def base_route(inputs: RoutingInput) -> PendingRoute:
    return PendingRoute(
        target_channel_id=inputs.config.aggregate_channel_id,
        target_language=inputs.config.default_language,
        target_reply_to_message_id=inputs.message_id,
    )


def reject_standalone_aggregate(inputs: RoutingInput, route: PendingRoute) -> RuleResult:
    if (
        inputs.channel_id == inputs.config.aggregate_channel_id
        and not inputs.reply.referenced_message_present
    ):
        return RejectReason.STANDALONE_AGGREGATE
    return route


def reverse_past_translation(inputs: RoutingInput, route: PendingRoute) -> RuleResult:
    if inputs.reply.message_id is None:
        return route
    record = inputs.lookup(inputs.reply.message_id)
    if record is None:
        return route
    return PendingRoute(
        target_channel_id=record.channel_id,
        target_language=record.language,
        target_reply_to_message_id=record.message_id,
    )


def fresh_aggregate_for_source_reply(inputs: RoutingInput, route: PendingRoute) -> RuleResult:
    # No relay record to anchor a reply to a human's source message, so it
    # becomes a new top-level aggregate post.
    if (
        inputs.reply.referenced_message_present
        and inputs.reply.author_id != inputs.config.bot_user_id
        and inputs.channel_id != inputs.config.aggregate_channel_id
    ):
        return PendingRoute(
            target_channel_id=inputs.config.aggregate_channel_id,
            target_language=inputs.config.default_language,
            target_reply_to_message_id=None,
        )
    return route


ROUTE_RULES: tuple[RouteRule, ...] = (
    reject_standalone_aggregate,
    reverse_past_translation,
    fresh_aggregate_for_source_reply,
)


def decide_route(
    channel_id: int,
    message_id: int,
    reply: ReplyContext,
    config: RelayConfig,
    lookup: Lookup,
    rules: tuple[RouteRule, ...] = ROUTE_RULES,
) -> RouteDecision:
    """Compute the route for a message, or reject it.

    Pure apart from *lookup*: the same inputs and store contents always give
    the same decision.
    """
    inputs = RoutingInput(
        channel_id=channel_id,
        message_id=message_id,
        reply=reply,
        config=config,
        lookup=lookup,
    )
    route = base_route(inputs)
    applied: list[str] = []

    for rule in rules:
        result = rule(inputs, route)
        if isinstance(result, RejectReason):
            applied.append(rule.__name__)
            log.debug("Message %d rejected by %s", message_id, rule.__name__)
            return RouteDecision(rejection=result, applied_rules=tuple(applied))
        if result != route:
            applied.append(rule.__name__)
            route = result

    log.debug(
        "Message %d routed to channel %d (%s, reply to %s) via %s",
        message_id,
        route.target_channel_id,
        route.target_language,
        route.target_reply_to_message_id,
        ", ".join(applied) or "base route",
    )
    return RouteDecision(route=route, applied_rules=tuple(applied))

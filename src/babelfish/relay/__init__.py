"""Translation relay core: classification, routing, storage and workflow.

Public API:
    :class:`RelayOrchestrator` -- runs one message through the relay.
    :func:`decide_route` / :data:`ROUTE_RULES` -- route decision.
    :class:`RelayStore` / :class:`InMemoryRelayStore` -- relay records.
    :class:`ChannelClassifier` -- bot/channel/language checks.
    :func:`resolve_reply` -- reply context normalisation.
"""

from babelfish.relay.classifier import ChannelClassifier
from babelfish.relay.errors import RelayError, SendError, UnmonitoredChannelError
from babelfish.relay.models import (
    MessageEvent,
    PendingRoute,
    ReferencedMessage,
    RelayConfig,
    RelayRecord,
    ReplyContext,
)
from babelfish.relay.orchestrator import ChatGateway, RelayOrchestrator, RelayOutcome, RelayState
from babelfish.relay.reply import resolve_reply
from babelfish.relay.routing import ROUTE_RULES, RejectReason, RouteDecision, decide_route
from babelfish.relay.store import InMemoryRelayStore, ReadWriteLock, RelayStore

__all__ = [
    "ChannelClassifier",
    "ChatGateway",
    "InMemoryRelayStore",
    "MessageEvent",
    "PendingRoute",
    "ROUTE_RULES",
    "ReadWriteLock",
    "ReferencedMessage",
    "RejectReason",
    "RelayConfig",
    "RelayError",
    "RelayOrchestrator",
    "RelayOutcome",
    "RelayRecord",
    "RelayState",
    "RelayStore",
    "ReplyContext",
    "RouteDecision",
    "SendError",
    "UnmonitoredChannelError",
    "decide_route",
    "resolve_reply",
]

"""Tests for route decisions and the individual override rules."""

import pytest

from babelfish.relay.models import PendingRoute, RelayRecord, ReplyContext
from babelfish.relay.routing import (
    ROUTE_RULES,
    RejectReason,
    RoutingInput,
    base_route,
    decide_route,
    fresh_aggregate_for_source_reply,
    reject_standalone_aggregate,
    reverse_past_translation,
)


def _no_records(message_id):
    return None


def _inputs(relay_config, channel_id, message_id, reply=None, lookup=_no_records):
    return RoutingInput(
        channel_id=channel_id,
        message_id=message_id,
        reply=reply or ReplyContext.none(),
        config=relay_config,
        lookup=lookup,
    )


def test_rules_are_in_priority_order():
    assert ROUTE_RULES == (
        reject_standalone_aggregate,
        reverse_past_translation,
        fresh_aggregate_for_source_reply,
    )


# ---------------------------------------------------------------------------
# Individual rules
# ---------------------------------------------------------------------------


def test_base_route_targets_aggregate(relay_config):
    route = base_route(_inputs(relay_config, 100, 10))
    assert route == PendingRoute(200, "EN-GB", 10)


def test_standalone_aggregate_rule(relay_config):
    inputs = _inputs(relay_config, 200, 30)
    assert reject_standalone_aggregate(inputs, base_route(inputs)) is RejectReason.STANDALONE_AGGREGATE


def test_standalone_rule_allows_aggregate_replies(relay_config):
    inputs = _inputs(relay_config, 200, 30, ReplyContext(message_id=20, author_id=1))
    route = base_route(inputs)
    assert reject_standalone_aggregate(inputs, route) == route


def test_reverse_rule_uses_record(relay_config):
    records = {20: RelayRecord(channel_id=100, message_id=10, language="FR")}
    inputs = _inputs(relay_config, 200, 30, ReplyContext(20, 1), records.get)
    assert reverse_past_translation(inputs, base_route(inputs)) == PendingRoute(100, "FR", 10)


def test_reverse_rule_without_record_keeps_route(relay_config):
    inputs = _inputs(relay_config, 200, 30, ReplyContext(20, 1))
    route = base_route(inputs)
    assert reverse_past_translation(inputs, route) == route


def test_reverse_rule_does_not_look_up_without_reply(relay_config):
    looked_up = []

    def lookup(message_id):
        looked_up.append(message_id)
        return None

    inputs = _inputs(relay_config, 100, 10, lookup=lookup)
    reverse_past_translation(inputs, base_route(inputs))
    assert looked_up == []


def test_fresh_aggregate_rule_for_human_reply_in_source(relay_config):
    inputs = _inputs(relay_config, 100, 11, ReplyContext(10, 8))
    assert fresh_aggregate_for_source_reply(inputs, PendingRoute(101, "DE", 5)) == PendingRoute(
        200, "EN-GB", None
    )


def test_fresh_aggregate_rule_ignores_bot_replies(relay_config):
    inputs = _inputs(relay_config, 100, 11, ReplyContext(40, 1))
    route = PendingRoute(200, "EN-GB", 30)
    assert fresh_aggregate_for_source_reply(inputs, route) == route


def test_fresh_aggregate_rule_ignores_aggregate_channel(relay_config):
    inputs = _inputs(relay_config, 200, 31, ReplyContext(30, 8))
    route = base_route(inputs)
    assert fresh_aggregate_for_source_reply(inputs, route) == route


# ---------------------------------------------------------------------------
# decide_route
# ---------------------------------------------------------------------------


def test_source_message_routes_to_aggregate(relay_config):
    decision = decide_route(100, 10, ReplyContext.none(), relay_config, _no_records)
    assert not decision.rejected
    assert decision.route == PendingRoute(200, "EN-GB", 10)
    assert decision.applied_rules == ()


def test_standalone_aggregate_is_rejected(relay_config):
    decision = decide_route(200, 30, ReplyContext.none(), relay_config, _no_records)
    assert decision.rejected
    assert decision.route is None
    assert decision.rejection is RejectReason.STANDALONE_AGGREGATE
    assert decision.applied_rules == ("reject_standalone_aggregate",)


def test_reply_to_translation_routes_home(relay_config):
    records = {
        10: RelayRecord(channel_id=100, message_id=10, language="FR"),
        20: RelayRecord(channel_id=100, message_id=10, language="FR"),
    }
    decision = decide_route(200, 30, ReplyContext(20, 1), relay_config, records.get)
    assert decision.route == PendingRoute(100, "FR", 10)
    assert decision.applied_rules == ("reverse_past_translation",)


def test_human_reply_in_source_overrides_record(relay_config):
    # The replied-to human message has a record, but the later rule wins.
    records = {10: RelayRecord(channel_id=100, message_id=10, language="FR")}
    decision = decide_route(100, 11, ReplyContext(10, 8), relay_config, records.get)
    assert decision.route == PendingRoute(200, "EN-GB", None)
    assert decision.applied_rules == (
        "reverse_past_translation",
        "fresh_aggregate_for_source_reply",
    )


def test_reply_to_bot_without_record_keeps_base_route(relay_config):
    decision = decide_route(100, 12, ReplyContext(99, 1), relay_config, _no_records)
    assert decision.route == PendingRoute(200, "EN-GB", 12)


def test_aggregate_reply_to_human_keeps_base_route(relay_config):
    decision = decide_route(200, 31, ReplyContext(30, 8), relay_config, _no_records)
    assert decision.route == PendingRoute(200, "EN-GB", 31)


@pytest.mark.parametrize(
    "channel_id,reply",
    [
        (100, ReplyContext.none()),
        (200, ReplyContext(20, 1)),
        (100, ReplyContext(10, 8)),
        (200, ReplyContext.none()),
    ],
)
def test_decisions_are_deterministic(relay_config, channel_id, reply):
    records = {20: RelayRecord(channel_id=100, message_id=10, language="FR")}
    first = decide_route(channel_id, 50, reply, relay_config, records.get)
    second = decide_route(channel_id, 50, reply, relay_config, records.get)
    assert first == second


def test_custom_rule_order(relay_config):
    def always_german(inputs, route):
        return PendingRoute(101, "DE", None)

    decision = decide_route(
        100, 10, ReplyContext.none(), relay_config, _no_records,
        rules=ROUTE_RULES + (always_german,),
    )
    assert decision.route == PendingRoute(101, "DE", None)
    assert decision.applied_rules == ("always_german",)

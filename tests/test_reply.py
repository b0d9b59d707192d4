"""Tests for reply context resolution."""

from babelfish.relay.models import ReferencedMessage, ReplyContext
from babelfish.relay.reply import resolve_reply


def test_no_reference_gives_empty_context():
    reply = resolve_reply(None)
    assert reply == ReplyContext.none()
    assert reply.referenced_message_present is False
    assert reply.message_id is None
    assert reply.author_id is None


def test_reference_is_copied():
    reply = resolve_reply(ReferencedMessage(id=20, author_id=1))
    assert reply.referenced_message_present is True
    assert reply.message_id == 20
    assert reply.author_id == 1


def test_message_id_zero_is_a_real_reply():
    # 0 is not reserved: only None means "no reply".
    reply = resolve_reply(ReferencedMessage(id=0, author_id=0))
    assert reply.referenced_message_present is True

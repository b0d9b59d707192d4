"""Reply context resolution."""

from __future__ import annotations

from babelfish.relay.models import ReferencedMessage, ReplyContext


def resolve_reply(referenced: ReferencedMessage | None) -> ReplyContext:
    """Normalise an optional referenced message into a :class:`ReplyContext`.

    A missing reference is the common case and yields ``ReplyContext.none()``.
    """
    if referenced is None:
        return ReplyContext.none()
    return ReplyContext(message_id=referenced.id, author_id=referenced.author_id)

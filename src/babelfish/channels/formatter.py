"""Text formatting for relayed posts.

Usage::

    from babelfish.channels.formatter import format_relay_text

    await channel.send(format_relay_text("Hello", "Alice"))  # "Hello (from: Alice)"
"""

from __future__ import annotations

# Discord hard limit
MESSAGE_CHAR_LIMIT: int = 2000

_ELLIPSIS: str = "…"


def format_attribution(display_name: str) -> str:
    return f" (from: {display_name})"


def format_relay_text(text: str, display_name: str, limit: int = MESSAGE_CHAR_LIMIT) -> str:
    """Append the sender's name to a translation.

    The translation is truncated so the whole message fits in *limit*
    characters; the attribution is always kept intact.

    Args:
        text: Translated message body.
        display_name: Name of the person who wrote the original.
        limit: Maximum length of the returned string.

    Returns:
        ``"{text} (from: {display_name})"``, shortened if needed.
    """
    suffix = format_attribution(display_name)
    if len(text) + len(suffix) <= limit:
        return f"{text}{suffix}"
    room = max(limit - len(suffix) - len(_ELLIPSIS), 0)
    return f"{text[:room]}{_ELLIPSIS}{suffix}"

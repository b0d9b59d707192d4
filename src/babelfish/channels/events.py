"""Conversion of discord.py messages into relay events."""

from __future__ import annotations

import logging

import discord

from babelfish.relay.models import MessageEvent, ReferencedMessage

log = logging.getLogger(__name__)


def resolve_display_name(author: discord.User | discord.Member) -> str:
    """Guild nickname when the author has one, otherwise their username."""
    if isinstance(author, discord.Member) and author.nick:
        return author.nick
    return author.name


async def resolve_referenced_message(message: discord.Message) -> discord.Message | None:
    """Return the message *message* replies to, or ``None``.

    Discord usually ships the replied-to message with the event.  When it
    doesn't, it is fetched; a deleted or inaccessible message counts as no
    reply.
    """
    reference = message.reference
    if reference is None or reference.message_id is None:
        return None
    if isinstance(reference.resolved, discord.Message):
        return reference.resolved
    if isinstance(reference.resolved, discord.DeletedReferencedMessage):
        return None

    try:
        return await message.channel.fetch_message(reference.message_id)
    except (discord.NotFound, discord.Forbidden):
        log.info(
            "Referenced message %d is gone or hidden; treating %d as a non-reply",
            reference.message_id, message.id,
        )
        return None


async def event_from_message(message: discord.Message) -> MessageEvent:
    referenced = await resolve_referenced_message(message)
    return MessageEvent(
        id=message.id,
        channel_id=message.channel.id,
        author_id=message.author.id,
        author_display_name=resolve_display_name(message.author),
        content=message.content,
        referenced=(
            ReferencedMessage(id=referenced.id, author_id=referenced.author.id)
            if referenced is not None
            else None
        ),
    )

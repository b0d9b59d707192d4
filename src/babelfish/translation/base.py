"""Translator interface shared by the relay and provider clients."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


class TranslationError(Exception):
    """Raised when the translation provider can't produce a translation.

    Attributes:
        message: Human-readable error description.
        status_code: HTTP status code of the failed response, if any.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(
            f"Translation failed{f' ({status_code})' if status_code else ''}: {message}"
        )


@dataclass(frozen=True, slots=True)
class TranslationResult:
    """A translated text and the language the provider detected.

    ``text`` is empty when the source was already in the target language.
    """

    text: str
    detected_source_language: str


@runtime_checkable
class Translator(Protocol):
    async def translate(self, text: str, target_language: str) -> TranslationResult: ...

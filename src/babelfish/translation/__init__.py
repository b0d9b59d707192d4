"""Translation provider clients."""

from babelfish.translation.base import TranslationError, TranslationResult, Translator
from babelfish.translation.deepl import DeepLClient, DeepLUsage

__all__ = [
    "DeepLClient",
    "DeepLUsage",
    "TranslationError",
    "TranslationResult",
    "Translator",
]

"""Central configuration for Babelfish.

All settings are loaded from environment variables (with ``.env`` file support
via *python-dotenv*).  Validation and type coercion are handled by
``pydantic-settings``.

Usage::

    from babelfish.config import get_settings

    settings = get_settings()
    print(settings.AGGREGATE_CHANNEL_ID)

The :func:`get_settings` helper creates the :class:`BabelfishSettings`
singleton lazily so that importing this module never triggers validation
before the caller has had a chance to load a ``.env`` file or populate the
environment.
"""

from __future__ import annotations

import functools
import json
import logging
import os
from pathlib import Path
from typing import Annotated, Any, ClassVar

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

logger = logging.getLogger(__name__)

# Canonical .env locations (checked in order of priority).
ENV_PATHS: list[str] = ["config/.env", ".env"]

REQUIRED_KEYS: tuple[str, ...] = ("DISCORD_TOKEN", "DEEPL_API_KEY", "AGGREGATE_CHANNEL_ID")

_LOG_LEVELS: frozenset[str] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def parse_channel_languages(value: str) -> dict[str, str]:
    """Parse ``"123:FR, 456:DE"`` into ``{"123": "FR", "456": "DE"}``.

    Raises:
        ValueError: An entry is not of the form ``channel_id:LANG``.
    """
    mapping: dict[str, str] = {}
    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        channel_id, sep, language = entry.partition(":")
        if not sep or not channel_id.strip() or not language.strip():
            raise ValueError(
                f"SOURCE_CHANNEL_LANGUAGE entry {entry!r} must look like 'channel_id:LANG'."
            )
        mapping[channel_id.strip()] = language.strip()
    return mapping


# ---------------------------------------------------------------------------
# Settings model
# ---------------------------------------------------------------------------


class BabelfishSettings(BaseSettings):
    """Validated configuration for the relay bot.

    Required fields (no defaults):
        ``DISCORD_TOKEN``, ``DEEPL_API_KEY``, ``AGGREGATE_CHANNEL_ID``
    """

    model_config = SettingsConfigDict(
        # .env loading is handled by load_dotenv() in __main__.py.
        # Do NOT set env_file here.
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Required -- no defaults
    # ------------------------------------------------------------------
    DISCORD_TOKEN: str = Field(
        ...,
        description="Discord bot token from the Developer Portal.",
    )
    DEEPL_API_KEY: str = Field(
        ...,
        description="DeepL authentication key.  Free-tier keys end in ':fx'.",
    )
    AGGREGATE_CHANNEL_ID: int = Field(
        ...,
        description="Channel that receives translations from every source channel.",
    )

    # ------------------------------------------------------------------
    # Relay
    # ------------------------------------------------------------------
    SOURCE_CHANNEL_LANGUAGE: Annotated[dict[int, str], NoDecode] = Field(
        default_factory=dict,
        description=(
            "Source channel id -> DeepL language code.  JSON object or "
            "comma-separated 'channel_id:LANG' pairs in env."
        ),
    )
    DEFAULT_LANGUAGE: str = Field(
        default="EN-GB",
        description="Language of the aggregate channel (DeepL target code).",
    )
    BOT_USER_ID: int | None = Field(
        default=None,
        description=(
            "User id the bot posts as.  When ``None`` the id of the "
            "logged-in bot account is used."
        ),
    )
    COMMAND_PREFIX: str = Field(
        default="!",
        description=(
            "Prefix for operator commands.  Registered commands are not "
            "relayed; other text that starts with the prefix is."
        ),
    )

    # ------------------------------------------------------------------
    # DeepL
    # ------------------------------------------------------------------
    DEEPL_API_URL: str | None = Field(
        default=None,
        description="Override the DeepL host.  Chosen from the key when unset.",
    )
    TRANSLATION_TIMEOUT: float = Field(
        default=30.0,
        gt=0,
        description="Seconds before a DeepL request is abandoned.",
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    LOG_LEVEL: str = Field(default="INFO", description="Root log level.")

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("SOURCE_CHANNEL_LANGUAGE", mode="before")
    @classmethod
    def _parse_source_channels(cls, value: Any) -> Any:
        """Accept a JSON object, ``channel_id:LANG`` pairs, or a mapping.

        The field is marked ``NoDecode`` so raw environment strings arrive
        here unparsed.  An empty or blank string means no source channels.
        """
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return {}
            if value.startswith("{"):
                return json.loads(value)
            return parse_channel_languages(value)
        return value

    @field_validator("SOURCE_CHANNEL_LANGUAGE")
    @classmethod
    def _normalise_source_languages(cls, value: dict[int, str]) -> dict[int, str]:
        normalised = {channel_id: lang.strip().upper() for channel_id, lang in value.items()}
        empty = [channel_id for channel_id, lang in normalised.items() if not lang]
        if empty:
            raise ValueError(f"Source channels without a language: {empty}")
        return normalised

    @field_validator("DEFAULT_LANGUAGE")
    @classmethod
    def _normalise_default_language(cls, value: str) -> str:
        value = value.strip().upper()
        if not value:
            raise ValueError("DEFAULT_LANGUAGE must not be empty.")
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.strip().upper()
        if value not in _LOG_LEVELS:
            raise ValueError(f"Invalid LOG_LEVEL: {value}")
        return value

    @model_validator(mode="after")
    def _aggregate_is_not_a_source(self) -> BabelfishSettings:
        if self.AGGREGATE_CHANNEL_ID in self.SOURCE_CHANNEL_LANGUAGE:
            raise ValueError(
                "AGGREGATE_CHANNEL_ID must not also be listed in SOURCE_CHANNEL_LANGUAGE."
            )
        return self

    # ------------------------------------------------------------------
    # Repr safety -- redact secrets in logs / debug output
    # ------------------------------------------------------------------

    _SENSITIVE_FIELDS: ClassVar[set[str]] = {"DISCORD_TOKEN", "DEEPL_API_KEY"}

    def __repr__(self) -> str:
        fields = []
        for name in type(self).model_fields:
            val = getattr(self, name)
            if name in self._SENSITIVE_FIELDS:
                val = "***" if val else None
            fields.append(f"{name}={val!r}")
        return f"BabelfishSettings({', '.join(fields)})"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def find_env_file() -> Path | None:
    """Return the first existing ``.env`` file from :data:`ENV_PATHS`."""
    for candidate in ENV_PATHS:
        p = Path(candidate)
        if p.is_file():
            return p
    return None


def has_config() -> bool:
    """Return ``True`` if every required key is set in the environment or a ``.env`` file."""
    missing = [key for key in REQUIRED_KEYS if not os.environ.get(key)]
    if not missing:
        return True
    env_file = find_env_file()
    if env_file is None:
        return False
    text = env_file.read_text(encoding="utf-8", errors="replace")
    present = {
        line.split("=", 1)[0].strip()
        for line in text.splitlines()
        if "=" in line and line.split("=", 1)[1].strip()
    }
    return all(key in present for key in missing)


# ---------------------------------------------------------------------------
# Lazy singleton accessor
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=1)
def get_settings() -> BabelfishSettings:
    """Return the global :class:`BabelfishSettings` singleton.

    The instance is created on first call so that the module can be imported
    safely before any ``.env`` file has been loaded or environment variables
    have been set.  Subsequent calls return the cached instance.

    Raises:
        pydantic.ValidationError: If required settings are missing or any
            value fails validation.
    """
    logger.debug("Initialising BabelfishSettings from environment.")
    return BabelfishSettings()  # type: ignore[call-arg]

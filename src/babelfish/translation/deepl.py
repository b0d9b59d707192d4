"""Async DeepL API client.

Implements the :class:`~babelfish.translation.base.Translator` interface on
top of DeepL's REST API (``/v2/translate``).  Free-tier keys end in ``:fx``
and are served from a different host; the client picks the right one unless
a base URL is given explicitly.

Usage::

    from babelfish.translation.deepl import DeepLClient

    async with DeepLClient(api_key="...:fx") as client:
        result = await client.translate("Bonjour", "EN-GB")
        print(result.text, result.detected_source_language)

The client implements :meth:`__aenter__` / :meth:`__aexit__` so the
underlying ``aiohttp`` session is closed on exit.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import aiohttp

from babelfish.translation.base import TranslationError, TranslationResult

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

FREE_API_URL: str = "https://api-free.deepl.com"
PRO_API_URL: str = "https://api.deepl.com"

_FREE_KEY_SUFFIX: str = ":fx"

_MAX_RETRIES: int = 3
"""Attempts made when DeepL answers 429 (rate limit) or 503 (overloaded)."""

_RETRY_BACKOFF_BASE: float = 1.0
"""Base delay in seconds for exponential backoff (1s, 2s, 4s, ...)."""

_RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 503})

_USER_AGENT: str = "babelfish-relay"


def default_base_url(api_key: str) -> str:
    """Return the API host that serves *api_key*."""
    return FREE_API_URL if api_key.endswith(_FREE_KEY_SUFFIX) else PRO_API_URL


@dataclass(frozen=True, slots=True)
class DeepLUsage:
    """Character usage for the current billing period."""

    character_count: int
    character_limit: int

    @property
    def remaining(self) -> int:
        return max(self.character_limit - self.character_count, 0)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class DeepLClient:
    """Async client for the DeepL translation API.

    The HTTP session is created lazily on first use and reused for the
    lifetime of the client.  Call :meth:`close` (or use the client as an
    async context manager) to release the connection pool.

    Args:
        api_key: DeepL authentication key.
        base_url: API host.  Defaults to the free or pro host depending on
            the key.
        timeout: Total timeout in seconds for a single HTTP request.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._api_key: str = api_key
        self._base_url: str = (base_url or default_base_url(api_key)).rstrip("/")
        self._timeout: float = timeout
        self._session: aiohttp.ClientSession | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    # -- Async context manager ----------------------------------------------

    async def __aenter__(self) -> DeepLClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.close()

    # -- Internal helpers ---------------------------------------------------

    def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"DeepL-Auth-Key {self._api_key}",
            "User-Agent": _USER_AGENT,
        }

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Return the shared session, creating it lazily if needed.

        Created outside ``__init__`` so construction doesn't need a running
        event loop.
        """
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers=self._get_headers(),
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            )
        return self._session

    async def _request_with_retries(
        self,
        method: str,
        endpoint: str,
        data: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Execute an HTTP request with exponential-backoff retry.

        Args:
            method: HTTP method (``"GET"`` or ``"POST"``).
            endpoint: Path appended to the base URL (e.g. ``"/v2/translate"``).
            data: Form fields to send.

        Returns:
            The decoded JSON body.

        Raises:
            TranslationError: On network errors, non-retryable API errors, or
                after exhausting all retry attempts.
        """
        session = await self._ensure_session()
        url = f"{self._base_url}{endpoint}"
        last_error: TranslationError | None = None

        for attempt in range(_MAX_RETRIES):
            try:
                async with session.request(method, url, data=data) as resp:
                    if resp.status in _RETRYABLE_STATUSES:
                        last_error = TranslationError(
                            message=f"DeepL unavailable ({resp.status})",
                            status_code=resp.status,
                        )
                        if attempt == _MAX_RETRIES - 1:
                            break
                        delay = _RETRY_BACKOFF_BASE * (2 ** attempt)
                        logger.warning(
                            "DeepL returned %d. Retrying in %.1fs (attempt %d/%d).",
                            resp.status,
                            delay,
                            attempt + 1,
                            _MAX_RETRIES,
                        )
                        await asyncio.sleep(delay)
                        continue

                    if resp.status >= 400:
                        text = await resp.text()
                        raise TranslationError(
                            message=f"HTTP {resp.status}: {text[:200]}",
                            status_code=resp.status,
                        )

                    try:
                        return await resp.json(content_type=None)
                    except ValueError as exc:
                        raise TranslationError(
                            message=f"Malformed response body: {exc}",
                            status_code=resp.status,
                        ) from exc
            except aiohttp.ClientError as exc:
                raise TranslationError(message=f"{type(exc).__name__}: {exc}") from exc
            except asyncio.TimeoutError as exc:
                raise TranslationError(message=f"Timed out after {self._timeout}s") from exc

        raise last_error or TranslationError(message="Request failed after all retries.")

    # -- Public API ---------------------------------------------------------

    async def translate(self, text: str, target_language: str) -> TranslationResult:
        """Translate *text* into *target_language*.

        If DeepL detects that *text* is already in *target_language* the
        result has empty ``text``, meaning there is nothing to relay.

        Raises:
            TranslationError: On API errors or an unusable response.
        """
        body = await self._request_with_retries(
            "POST",
            "/v2/translate",
            {"text": text, "target_lang": target_language},
        )

        translations = body.get("translations") if isinstance(body, dict) else None
        if not translations:
            raise TranslationError(message="No translations returned.")

        first = translations[0]
        try:
            translated: str = first["text"]
            detected: str = first["detected_source_language"].upper()
        except (KeyError, TypeError, AttributeError) as exc:
            raise TranslationError(message=f"Unexpected translation payload: {first!r}") from exc

        logger.debug(
            "Translated %d chars %s -> %s", len(text), detected, target_language
        )

        if detected == target_language.upper():
            return TranslationResult(text="", detected_source_language=detected)
        return TranslationResult(text=translated, detected_source_language=detected)

    async def usage(self) -> DeepLUsage:
        """Return character usage for the current billing period."""
        body = await self._request_with_retries("GET", "/v2/usage")
        try:
            return DeepLUsage(
                character_count=int(body["character_count"]),
                character_limit=int(body["character_limit"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise TranslationError(message=f"Unexpected usage payload: {body!r}") from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
            self._session = None

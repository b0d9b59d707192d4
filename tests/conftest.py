"""Shared fixtures for the Babelfish test suite.

Channel layout used throughout: ``100`` is French, ``101`` is German,
``200`` is the English (``EN-GB``) aggregate channel and the bot is user ``1``.
"""

from unittest.mock import AsyncMock

import pytest

from babelfish.relay.models import RelayConfig
from babelfish.relay.orchestrator import RelayOrchestrator
from babelfish.relay.store import InMemoryRelayStore


@pytest.fixture
def relay_config():
    return RelayConfig(
        bot_user_id=1,
        aggregate_channel_id=200,
        source_channel_language={100: "FR", 101: "DE"},
        default_language="EN-GB",
    )


@pytest.fixture
def store():
    return InMemoryRelayStore()


@pytest.fixture
def mock_translator():
    """Mock translation provider."""
    translator = AsyncMock()
    translator.translate = AsyncMock()
    return translator


@pytest.fixture
def mock_gateway():
    """Mock chat gateway."""
    gateway = AsyncMock()
    gateway.send_message = AsyncMock()
    return gateway


@pytest.fixture
def orchestrator(relay_config, store, mock_translator, mock_gateway):
    return RelayOrchestrator(relay_config, store, mock_translator, mock_gateway)

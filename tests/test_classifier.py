"""Tests for channel classification."""

import pytest

from babelfish.relay.classifier import ChannelClassifier
from babelfish.relay.errors import UnmonitoredChannelError


@pytest.fixture
def classifier(relay_config):
    return ChannelClassifier(relay_config)


def test_bot_message(classifier):
    assert classifier.is_bot_message(1) is True
    assert classifier.is_bot_message(7) is False


@pytest.mark.parametrize("channel_id", [100, 101, 200])
def test_monitored_channels(classifier, channel_id):
    assert classifier.is_monitored_channel(channel_id) is True


def test_unmonitored_channel(classifier):
    assert classifier.is_monitored_channel(999) is False


def test_source_language_from_config(classifier):
    assert classifier.resolve_source_language(100) == "FR"
    assert classifier.resolve_source_language(101) == "DE"


def test_aggregate_uses_default_language(classifier):
    assert classifier.resolve_source_language(200) == "EN-GB"


def test_unmonitored_language_raises(classifier):
    with pytest.raises(UnmonitoredChannelError) as exc_info:
        classifier.resolve_source_language(999)
    assert exc_info.value.channel_id == 999

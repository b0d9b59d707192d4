"""Tests for the in-memory relay record store."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from babelfish.relay.models import RelayRecord
from babelfish.relay.store import InMemoryRelayStore, ReadWriteLock


def test_get_unknown_key_returns_none(store):
    assert store.get(999) is None
    assert 999 not in store


def test_put_then_get(store):
    record = RelayRecord(channel_id=100, message_id=10, language="FR")
    assert store.put_if_absent(10, record) is True
    assert store.get(10) == record
    assert 10 in store
    assert len(store) == 1


def test_first_writer_wins(store):
    first = RelayRecord(channel_id=100, message_id=10, language="FR")
    second = RelayRecord(channel_id=101, message_id=10, language="DE")
    store.put_if_absent(10, first)
    assert store.put_if_absent(10, second) is False
    assert store.get(10) == first
    assert len(store) == 1


def test_records_are_immutable():
    record = RelayRecord(channel_id=100, message_id=10, language="FR")
    with pytest.raises(AttributeError):
        record.language = "DE"


def test_concurrent_writers_to_distinct_keys():
    store = InMemoryRelayStore()

    def write(i):
        return store.put_if_absent(i, RelayRecord(channel_id=100, message_id=i, language="FR"))

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(write, range(500)))

    assert all(results)
    assert len(store) == 500
    assert all(store.get(i).message_id == i for i in range(500))


def test_concurrent_writers_to_same_key_keep_exactly_one():
    store = InMemoryRelayStore()
    barrier = threading.Barrier(8)

    def write(i):
        barrier.wait()
        return store.put_if_absent(42, RelayRecord(channel_id=i, message_id=42, language="FR"))

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(write, range(8)))

    assert results.count(True) == 1
    winner = results.index(True)
    assert store.get(42).channel_id == winner


def test_readers_share_the_lock():
    lock = ReadWriteLock()
    both_inside = threading.Barrier(2, timeout=2)

    def reader():
        with lock.read():
            both_inside.wait()

    threads = [threading.Thread(target=reader) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)
    assert not both_inside.broken


def test_writer_excludes_readers():
    lock = ReadWriteLock()
    events = []
    writer_in = threading.Event()

    def writer():
        with lock.write():
            writer_in.set()
            events.append("write-start")
            threading.Event().wait(0.05)
            events.append("write-end")

    def reader():
        writer_in.wait()
        with lock.read():
            events.append("read")

    w = threading.Thread(target=writer)
    r = threading.Thread(target=reader)
    w.start()
    r.start()
    w.join(timeout=5)
    r.join(timeout=5)
    assert events == ["write-start", "write-end", "read"]

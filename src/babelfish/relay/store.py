"""Relay record storage.

The store maps a Discord message id to the :class:`RelayRecord` needed to
send a reply back where it came from.  Writes are insert-if-absent only: the
first record written for a message id is the one that sticks.

:class:`InMemoryRelayStore` is the only backend.  It is lost on restart and
grows without bound; callers go through the :class:`RelayStore` interface so
a persistent backend can replace it.

Usage::

    store = InMemoryRelayStore()
    store.put_if_absent(10, RelayRecord(channel_id=1, message_id=10, language="FR"))
    store.get(10)
"""

from __future__ import annotations

import abc
import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from babelfish.relay.models import RelayRecord

log = logging.getLogger(__name__)


class RelayStore(abc.ABC):
    """Interface for relay record backends."""

    @abc.abstractmethod
    def get(self, message_id: int) -> RelayRecord | None:
        """Return the record for *message_id*, or ``None`` if unknown."""

    @abc.abstractmethod
    def put_if_absent(self, message_id: int, record: RelayRecord) -> bool:
        """Store *record* unless *message_id* already has one.

        Returns:
            ``True`` if the record was written, ``False`` if an earlier
            record was kept.
        """

    @abc.abstractmethod
    def __len__(self) -> int: ...

    def __contains__(self, message_id: object) -> bool:
        return isinstance(message_id, int) and self.get(message_id) is not None


class ReadWriteLock:
    """Shared-read / exclusive-write lock.

    Any number of readers may hold the lock together.  A writer waits for
    active readers to drain and blocks new readers while it waits, so a
    steady stream of lookups can't starve a write.  Not reentrant.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class InMemoryRelayStore(RelayStore):
    """Dict-backed store guarded by a :class:`ReadWriteLock`.

    Critical sections never await or do I/O, so calling this from the event
    loop does not stall it; it is also safe to share with worker threads.
    """

    def __init__(self) -> None:
        self._records: dict[int, RelayRecord] = {}
        self._lock = ReadWriteLock()

    def get(self, message_id: int) -> RelayRecord | None:
        with self._lock.read():
            return self._records.get(message_id)

    def put_if_absent(self, message_id: int, record: RelayRecord) -> bool:
        with self._lock.write():
            if message_id in self._records:
                written = False
            else:
                self._records[message_id] = record
                written = True
        if written:
            log.debug("Stored relay record %s for message %d", record, message_id)
        else:
            log.debug("Message %d already has a relay record; keeping it", message_id)
        return written

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._records)

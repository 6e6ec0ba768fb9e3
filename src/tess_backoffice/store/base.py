"""Record store interface.

A record store maps collection names to JSON arrays of records. Services
receive a store instance instead of touching storage globals, so the SQL
backend and the in-memory backend are interchangeable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator

from tess_backoffice.store.codec import decode_collection, encode_collection
from tess_backoffice.store.events import ChangeNotifier, CollectionChanged
from tess_backoffice.store.types import Collection, Snapshot


class RecordStore(ABC):
    """Abstract record store.

    Contract:
        - ``load`` returns the decoded collection and its version token
          (0 for a collection that was never written).
        - ``save`` replaces the whole collection. When ``expected_version`` is
          given the write only succeeds if the stored version still matches,
          otherwise ``ConcurrentWriteError`` is raised and nothing changes.
        - Work inside ``transaction()`` is committed or rolled back as a unit.
          Transactions nest; only the outermost one commits.
        - Change notifications are published after the outermost commit.
    """

    def __init__(self, notifier: ChangeNotifier | None = None) -> None:
        self.notifier = notifier or ChangeNotifier()
        self._depth = 0
        self._pending: list[CollectionChanged] = []

    # ----- backend hooks -----

    @abstractmethod
    def _read_payload(self, collection: Collection) -> tuple[str | None, int]:
        """Return the raw JSON payload and version of a collection."""
        ...

    @abstractmethod
    def _write_payload(
        self, collection: Collection, payload: str, expected_version: int | None
    ) -> int:
        """Store a payload, returning the new version."""
        ...

    @abstractmethod
    def _begin(self) -> None: ...

    @abstractmethod
    def _commit(self) -> None: ...

    @abstractmethod
    def _rollback(self) -> None: ...

    def _end(self) -> None:
        """Release per-transaction resources."""

    # ----- public API -----

    @contextmanager
    def transaction(self) -> Iterator[RecordStore]:
        """Group reads and writes into one atomic unit."""
        if self._depth:
            self._depth += 1
            try:
                yield self
            finally:
                self._depth -= 1
            return

        self._begin()
        self._depth = 1
        try:
            yield self
            self._commit()
        except Exception:
            self._pending.clear()
            self._rollback()
            raise
        finally:
            self._depth = 0
            self._end()

        changes, self._pending = self._pending, []
        for change in changes:
            self.notifier.publish(change)

    def load(self, collection: Collection) -> Snapshot:
        with self.transaction():
            payload, version = self._read_payload(collection)
        return Snapshot(collection, decode_collection(collection, payload), version)

    def save(
        self,
        collection: Collection,
        items: list[Any],
        expected_version: int | None = None,
    ) -> int:
        payload = encode_collection(collection, items)
        with self.transaction():
            version = self._write_payload(collection, payload, expected_version)
            self._pending.append(CollectionChanged(collection, version))
        return version

    def read_all(self, collection: Collection) -> list[Any]:
        """Read every record of a collection."""
        return self.load(collection).items

    def write_all(self, collection: Collection, items: list[Any]) -> int:
        """Replace every record of a collection (last writer wins)."""
        return self.save(collection, items)

    def version(self, collection: Collection) -> int:
        with self.transaction():
            _, version = self._read_payload(collection)
        return version

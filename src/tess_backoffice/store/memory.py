"""In-memory record store used by tests and single-process tools."""

from __future__ import annotations

from tess_backoffice.store.base import RecordStore
from tess_backoffice.store.events import ChangeNotifier
from tess_backoffice.store.types import Collection, ConcurrentWriteError


class InMemoryRecordStore(RecordStore):
    """Keeps each collection as its serialized JSON payload.

    Reads decode the payload on every call, so records handed out are never
    aliased with stored state.
    """

    def __init__(self, notifier: ChangeNotifier | None = None) -> None:
        super().__init__(notifier)
        self._data: dict[Collection, tuple[str, int]] = {}
        self._backup: dict[Collection, tuple[str, int]] | None = None

    def _read_payload(self, collection: Collection) -> tuple[str | None, int]:
        if collection not in self._data:
            return None, 0
        return self._data[collection]

    def _write_payload(
        self, collection: Collection, payload: str, expected_version: int | None
    ) -> int:
        _, current = self._read_payload(collection)
        if expected_version is not None and expected_version != current:
            raise ConcurrentWriteError(collection, expected_version, current)
        self._data[collection] = (payload, current + 1)
        return current + 1

    def _begin(self) -> None:
        self._backup = dict(self._data)

    def _commit(self) -> None:
        self._backup = None

    def _rollback(self) -> None:
        if self._backup is not None:
            self._data = self._backup
        self._backup = None

    def raw_payload(self, collection: Collection) -> str | None:
        """Stored JSON text of a collection, for inspection."""
        payload, _ = self._read_payload(collection)
        return payload

"""SQL-backed record store (one row per collection)."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from tess_backoffice.models import RecordCollection
from tess_backoffice.store.base import RecordStore
from tess_backoffice.store.events import ChangeNotifier
from tess_backoffice.store.types import Collection, ConcurrentWriteError, StorageError

logger = logging.getLogger(__name__)


class SqlRecordStore(RecordStore):
    """Record store persisted through SQLAlchemy.

    Each transaction uses one session. Writes are conditional updates on the
    collection's version column:

        UPDATE record_collection SET payload = :p, version = :v + 1
        WHERE name = :name AND version = :v

    Zero affected rows means another writer got there first.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        notifier: ChangeNotifier | None = None,
    ) -> None:
        super().__init__(notifier)
        self._session_factory = session_factory
        self._session: Session | None = None

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("No active transaction")
        return self._session

    @contextmanager
    def _guard(self, collection: Collection, operation: str) -> Iterator[None]:
        """Translate backend failures into StorageError."""
        try:
            yield
        except ConcurrentWriteError:
            raise
        except SQLAlchemyError as exc:
            logger.exception("Error during %s of %s", operation, collection.value)
            raise StorageError(collection, operation, str(exc)) from exc

    def _read_payload(self, collection: Collection) -> tuple[str | None, int]:
        with self._guard(collection, "read"):
            row = self.session.get(RecordCollection, collection.value)
            if row is None:
                return None, 0
            return row.payload, row.version

    def _write_payload(
        self, collection: Collection, payload: str, expected_version: int | None
    ) -> int:
        with self._guard(collection, "write"):
            row = self.session.get(RecordCollection, collection.value)

            if row is None:
                if expected_version not in (None, 0):
                    raise ConcurrentWriteError(collection, expected_version, None)
                self.session.add(
                    RecordCollection(name=collection.value, payload=payload, version=1)
                )
                try:
                    self.session.flush()
                except IntegrityError as exc:
                    raise ConcurrentWriteError(collection, 0, None) from exc
                return 1

            if expected_version is None:
                expected_version = row.version

            result = self.session.execute(
                update(RecordCollection)
                .where(
                    RecordCollection.name == collection.value,
                    RecordCollection.version == expected_version,
                )
                .values(payload=payload, version=expected_version + 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.session.refresh(row)
                raise ConcurrentWriteError(collection, expected_version, row.version)

            self.session.expire(row)
            return expected_version + 1

    def _begin(self) -> None:
        self._session = self._session_factory()

    def _commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            logger.exception("Error committing record store transaction")
            raise StorageError(None, "commit", str(exc)) from exc

    def _rollback(self) -> None:
        if self._session is not None:
            self._session.rollback()

    def _end(self) -> None:
        if self._session is not None:
            self._session.close()
        self._session = None

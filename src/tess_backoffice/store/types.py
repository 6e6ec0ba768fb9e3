"""Collection names, snapshots and storage errors."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Collection(str, Enum):
    """Stable keys of the persisted collections."""

    INVENTORY = "tess_inventory"
    SALES = "tess_sales"
    USERS = "tess_users"
    EMPLOYEES = "tess_employees"
    PRODUCTION_RECORDS = "tess_production_records"
    SALARY_RECORDS = "tess_salary_records"


@dataclass
class Snapshot:
    """Decoded contents of a collection together with its version token."""

    collection: Collection
    items: list[Any] = field(default_factory=list)
    version: int = 0


class StorageError(Exception):
    """Raised when a collection cannot be read, decoded, encoded or written.

    The failed operation is rolled back; previously stored state is unchanged.
    """

    def __init__(
        self, collection: Collection | None, operation: str, reason: str | None = None
    ):
        self.collection = collection
        self.operation = operation
        self.reason = reason
        target = collection.value if collection is not None else "record store"
        msg = f"Storage {operation} failed for '{target}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class ConcurrentWriteError(StorageError):
    """Raised when a collection changed between read and conditional write."""

    def __init__(self, collection: Collection, expected_version: int, actual_version: int | None):
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            collection,
            "write",
            f"expected version {expected_version}, found {actual_version}",
        )

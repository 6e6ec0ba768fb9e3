"""Service-level errors shared across the business services."""

from __future__ import annotations


class ValidationFailedError(Exception):
    """Raised when input fails validation. Nothing is written."""

    def __init__(self, errors: list[str] | str):
        self.errors = [errors] if isinstance(errors, str) else list(errors)
        super().__init__("; ".join(self.errors))


class RecordNotFoundError(Exception):
    """Raised when a record id does not exist in its collection."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} '{record_id}' not found")


class RecordLockedError(Exception):
    """Raised when a finalized record is edited."""

    def __init__(self, kind: str, record_id: str, reason: str | None = None):
        self.kind = kind
        self.record_id = record_id
        self.reason = reason
        msg = f"{kind} '{record_id}' is locked"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)

"""Production logging service."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from uuid import uuid4

from tess_backoffice.clock import Clock, SystemClock
from tess_backoffice.models import (
    Employee,
    ProductionPaymentStatus,
    ProductionRecord,
    ProductionStatus,
)
from tess_backoffice.money import round_to_cents
from tess_backoffice.services.errors import RecordNotFoundError, ValidationFailedError
from tess_backoffice.services.state_machine import InvalidTransitionError
from tess_backoffice.store import Collection, RecordStore

logger = logging.getLogger(__name__)


class ProductionService:
    """Service for production records.

    Employees submit records; admins review or force-delete them. The paid
    status is written only by SalaryService when a salary is paid.
    """

    def __init__(self, store: RecordStore, clock: Clock | None = None):
        self.store = store
        self.clock = clock or SystemClock()

    def submit(
        self,
        employee: Employee,
        work_date: date,
        item_name: str,
        quantity: Decimal | str | int,
        unit_price: Decimal | str | int,
        category: str = "",
        unit: str | None = None,
        remarks: str | None = None,
    ) -> ProductionRecord:
        """Log a unit of work. Total earnings are fixed at creation."""
        errors: list[str] = []
        item_name = (item_name or "").strip()
        if not item_name:
            errors.append("Item name is required")
        qty = _to_decimal("Quantity", quantity, errors)
        price = _to_decimal("Unit price", unit_price, errors)
        if qty is not None and qty <= 0:
            errors.append("Quantity must be greater than zero")
        if price is not None and price < 0:
            errors.append("Unit price cannot be negative")
        if errors:
            raise ValidationFailedError(errors)

        now = self.clock.now()
        record = ProductionRecord(
            id=f"prod-{employee.id}-{uuid4().hex}",
            employee_id=employee.id,
            employee_name=employee.name or "Unknown Employee",
            item_name=item_name,
            category=(category or "").strip(),
            quantity=qty,
            unit=(unit or "").strip() or "pcs",
            unit_price=price,
            total_earnings=round_to_cents(qty * price),
            work_date=work_date,
            status=ProductionStatus.PENDING,
            payment_status=ProductionPaymentStatus.UNPAID,
            remarks=remarks,
            submitted_at=now,
            updated_at=now,
        )

        with self.store.transaction():
            snapshot = self.store.load(Collection.PRODUCTION_RECORDS)
            self.store.save(
                Collection.PRODUCTION_RECORDS,
                [*snapshot.items, record],
                expected_version=snapshot.version,
            )

        logger.info(
            "Production %s logged by %s: %s x %s = %s",
            record.id,
            employee.id,
            record.quantity,
            record.unit_price,
            record.total_earnings,
        )
        return record

    def list_all(
        self,
        search: str | None = None,
        payment_status: ProductionPaymentStatus | str | None = None,
    ) -> list[ProductionRecord]:
        """All production records, newest work date first."""
        records: list[ProductionRecord] = self.store.read_all(Collection.PRODUCTION_RECORDS)
        if search:
            needle = search.strip().lower()
            records = [
                r
                for r in records
                if needle in r.item_name.lower() or needle in r.employee_name.lower()
            ]
        if payment_status and payment_status != "all":
            records = [r for r in records if r.payment_status == payment_status]
        return sorted(records, key=lambda r: (r.work_date, r.submitted_at), reverse=True)

    def list_for_employee(self, employee_id: str) -> list[ProductionRecord]:
        return [r for r in self.list_all() if r.employee_id == employee_id]

    def get(self, record_id: str) -> ProductionRecord:
        for record in self.store.read_all(Collection.PRODUCTION_RECORDS):
            if record.id == record_id:
                return record
        raise RecordNotFoundError("Production record", record_id)

    def mark_reviewed(self, record_id: str) -> ProductionRecord:
        """Admin review: pending → reviewed."""
        with self.store.transaction():
            snapshot = self.store.load(Collection.PRODUCTION_RECORDS)
            records: list[ProductionRecord] = snapshot.items
            for i, record in enumerate(records):
                if record.id == record_id:
                    break
            else:
                raise RecordNotFoundError("Production record", record_id)

            if record.status != ProductionStatus.PENDING:
                raise InvalidTransitionError(
                    record.status, ProductionStatus.REVIEWED, "only pending records can be reviewed"
                )
            updated = record.model_copy(
                update={"status": ProductionStatus.REVIEWED, "updated_at": self.clock.now()}
            )
            records[i] = updated
            self.store.save(
                Collection.PRODUCTION_RECORDS, records, expected_version=snapshot.version
            )

        logger.info("Production %s reviewed", record_id)
        return updated

    def delete(self, record_id: str) -> ProductionRecord:
        """Admin force-delete. Salary snapshots of the record are left as they are."""
        with self.store.transaction():
            snapshot = self.store.load(Collection.PRODUCTION_RECORDS)
            records: list[ProductionRecord] = snapshot.items
            remaining = [r for r in records if r.id != record_id]
            if len(remaining) == len(records):
                raise RecordNotFoundError("Production record", record_id)
            removed = next(r for r in records if r.id == record_id)
            self.store.save(
                Collection.PRODUCTION_RECORDS, remaining, expected_version=snapshot.version
            )

        logger.info("Production %s deleted (%s)", record_id, removed.payment_status.value)
        return removed


def _to_decimal(label: str, value: Decimal | str | int, errors: list[str]) -> Decimal | None:
    try:
        amount = Decimal(str(value))
    except ArithmeticError:
        errors.append(f"{label} must be a number")
        return None
    if not amount.is_finite():
        errors.append(f"{label} must be a number")
        return None
    return amount

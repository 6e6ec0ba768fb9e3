"""Salary service - payroll generation, payment and adjustments."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from tess_backoffice.calculators import PeriodSelector, SalaryCalculator, resolve_period
from tess_backoffice.clock import Clock, SystemClock
from tess_backoffice.models import (
    Employee,
    PaymentMethod,
    ProductionPaymentStatus,
    ProductionRecord,
    ProductionStatus,
    SalaryRecord,
    SalaryStatus,
)
from tess_backoffice.money import ZERO, round_to_cents, sum_money
from tess_backoffice.services.employees import load_employees
from tess_backoffice.services.errors import (
    RecordLockedError,
    RecordNotFoundError,
    ValidationFailedError,
)
from tess_backoffice.services.state_machine import InvalidTransitionError, SalaryStateMachine
from tess_backoffice.store import Collection, RecordStore

logger = logging.getLogger(__name__)


@dataclass
class SalaryTotals:
    """Column totals of a salary listing."""

    base_salary: Decimal = ZERO
    production_earnings: Decimal = ZERO
    bonuses: Decimal = ZERO
    deductions: Decimal = ZERO
    net_pay: Decimal = ZERO


@dataclass
class SalaryListing:
    """Filtered salary records plus their totals."""

    items: list[SalaryRecord] = field(default_factory=list)
    totals: SalaryTotals = field(default_factory=SalaryTotals)
    period_label: str = ""


@dataclass
class PaymentResult:
    """Outcome of a payment status change."""

    salary: SalaryRecord
    updated_production_ids: list[str] = field(default_factory=list)


class SalaryService:
    """Service for the salary record lifecycle.

    Operations:
    - generate_or_update_salaries: reconcile production into Pending records
    - advance_payment: Pending → Processing → Paid, cascading onto production
    - edit_adjustments: change bonuses/deductions/payment method before Paid
    - delete_salary: remove a record in any state
    """

    def __init__(self, store: RecordStore, clock: Clock | None = None):
        self.store = store
        self.clock = clock or SystemClock()
        self.calculator = SalaryCalculator(self.clock)

    # ----- reads -----

    def list_all(self) -> list[SalaryRecord]:
        return self.store.read_all(Collection.SALARY_RECORDS)

    def get_salary(self, salary_id: str) -> SalaryRecord:
        for salary in self.list_all():
            if salary.id == salary_id:
                return salary
        raise RecordNotFoundError("Salary record", salary_id)

    def list_salaries(
        self,
        period_selector: PeriodSelector | str = PeriodSelector.CURRENT,
        status: SalaryStatus | str | None = None,
        search: str | None = None,
        employee_id: str | None = None,
    ) -> SalaryListing:
        """List salary records newest first, with column totals.

        The period filter matches labels by prefix, so adjustment records
        are listed with their period. ``all`` lists every record.
        """
        period = resolve_period(period_selector, self.clock.now())
        items = self.list_all()

        if period.selector != PeriodSelector.ALL.value:
            items = [s for s in items if period.matches_label(s.period)]
        if status:
            items = [s for s in items if s.status == status]
        if employee_id:
            items = [s for s in items if s.employee_id == employee_id]
        if search:
            needle = search.strip().lower()
            items = [s for s in items if needle in s.employee_name.lower()]

        items.sort(key=lambda s: s.updated_at, reverse=True)
        totals = SalaryTotals(
            base_salary=sum_money(s.base_salary for s in items),
            production_earnings=sum_money(s.production_earnings for s in items),
            bonuses=sum_money(s.bonuses for s in items),
            deductions=sum_money(s.deductions for s in items),
            net_pay=sum_money(s.net_pay for s in items),
        )
        return SalaryListing(items=items, totals=totals, period_label=period.label)

    # ----- generation -----

    def generate_or_update_salaries(
        self,
        employees: list[Employee] | None = None,
        period_selector: PeriodSelector | str = PeriodSelector.CURRENT,
    ) -> list[SalaryRecord]:
        """Generate salary records for unpaid production in a period.

        Returns only the records created by this call. Running it again with
        no new production returns an empty list.
        """
        with self.store.transaction():
            if employees is None:
                employees = load_employees(self.store)
            production: list[ProductionRecord] = self.store.read_all(
                Collection.PRODUCTION_RECORDS
            )
            snapshot = self.store.load(Collection.SALARY_RECORDS)
            salaries: list[SalaryRecord] = snapshot.items

            candidates = self.calculator.calculate_all(
                employees, period_selector, production, salaries
            )
            if not candidates:
                logger.info("No new salary records for period %s", period_selector)
                return []

            by_id = {s.id: s for s in salaries}
            for candidate in candidates:
                by_id[candidate.id] = candidate
            self.store.save(
                Collection.SALARY_RECORDS,
                list(by_id.values()),
                expected_version=snapshot.version,
            )

        for candidate in candidates:
            logger.info(
                "Generated salary %s for %s (%s): net pay %s",
                candidate.id,
                candidate.employee_id,
                candidate.period,
                candidate.net_pay,
            )
        return candidates

    # ----- payment -----

    def advance_payment(
        self,
        salary_id: str,
        target_status: SalaryStatus | str,
        payment_method: PaymentMethod | str | None = None,
        notes: str | None = None,
    ) -> PaymentResult:
        """Move a salary record one step along Pending → Processing → Paid.

        Marking a record Paid stamps every referenced production record as
        paid. Salary and production writes are committed together.

        Raises InvalidTransitionError for illegal transitions.
        """
        try:
            target = SalaryStatus(target_status)
            method = PaymentMethod(payment_method) if payment_method else None
        except ValueError as e:
            raise ValidationFailedError(str(e)) from e

        with self.store.transaction():
            snapshot = self.store.load(Collection.SALARY_RECORDS)
            salaries: list[SalaryRecord] = snapshot.items
            index = _index_of(salaries, salary_id, "Salary record")
            salary = salaries[index]

            errors = SalaryStateMachine.validate_salary_for_transition(salary, target, method)
            if errors:
                raise InvalidTransitionError(salary.status, target, "; ".join(errors))

            now = self.clock.now()
            changes: dict = {"status": target, "updated_at": now}
            if method is not None:
                changes["payment_method"] = method
            if target == SalaryStatus.PAID:
                changes["payment_date"] = now
                changes["payment_notes"] = notes
            updated = salary.model_copy(update=changes)
            salaries[index] = updated

            touched: list[str] = []
            if target == SalaryStatus.PAID:
                touched = self._mark_production_paid(updated)

            self.store.save(
                Collection.SALARY_RECORDS, salaries, expected_version=snapshot.version
            )

        logger.info(
            "Salary %s moved %s -> %s (%d production records paid)",
            salary_id,
            salary.status.value,
            target.value,
            len(touched),
        )
        return PaymentResult(salary=updated, updated_production_ids=touched)

    def _mark_production_paid(self, salary: SalaryRecord) -> list[str]:
        snapshot = self.store.load(Collection.PRODUCTION_RECORDS)
        production: list[ProductionRecord] = snapshot.items
        referenced = salary.production_record_ids
        touched: list[str] = []

        for i, record in enumerate(production):
            if record.id not in referenced:
                continue
            production[i] = record.model_copy(
                update={
                    "status": ProductionStatus.PAID,
                    "payment_status": ProductionPaymentStatus.PAID,
                    "payment_date": salary.payment_date,
                    "payment_method": salary.payment_method,
                    "payment_notes": salary.payment_notes,
                    "updated_at": salary.updated_at,
                }
            )
            touched.append(record.id)

        missing = referenced.difference(touched)
        if missing:
            logger.warning(
                "Salary %s references %d production records that no longer exist",
                salary.id,
                len(missing),
            )
        if touched:
            self.store.save(
                Collection.PRODUCTION_RECORDS, production, expected_version=snapshot.version
            )
        return touched

    # ----- manual edits -----

    def edit_adjustments(
        self,
        salary_id: str,
        bonuses: Decimal | str | int | None = None,
        deductions: Decimal | str | int | None = None,
        payment_method: PaymentMethod | str | None = None,
    ) -> SalaryRecord:
        """Edit bonuses, deductions and payment method of an unpaid record.

        Raises RecordLockedError once the record is Paid and
        ValidationFailedError for malformed or negative amounts.
        """
        errors: list[str] = []
        new_bonuses = _parse_amount("Bonuses", bonuses, errors)
        new_deductions = _parse_amount("Deductions", deductions, errors)
        method = None
        if payment_method is not None:
            try:
                method = PaymentMethod(payment_method)
            except ValueError:
                errors.append(f"Unknown payment method '{payment_method}'")

        with self.store.transaction():
            snapshot = self.store.load(Collection.SALARY_RECORDS)
            salaries: list[SalaryRecord] = snapshot.items
            index = _index_of(salaries, salary_id, "Salary record")
            salary = salaries[index]

            if not SalaryStateMachine.can_edit(salary.status):
                raise RecordLockedError("Salary record", salary_id, "paid records cannot be edited")
            if errors:
                raise ValidationFailedError(errors)

            changes: dict = {"updated_at": self.clock.now()}
            if new_bonuses is not None:
                changes["bonuses"] = new_bonuses
            if new_deductions is not None:
                changes["deductions"] = new_deductions
            if method is not None:
                changes["payment_method"] = method
            updated = salary.model_copy(update=changes)
            salaries[index] = updated
            self.store.save(
                Collection.SALARY_RECORDS, salaries, expected_version=snapshot.version
            )

        logger.info("Salary %s adjusted: net pay %s", salary_id, updated.net_pay)
        return updated

    def delete_salary(self, salary_id: str) -> SalaryRecord:
        """Delete a salary record in any status.

        Production records already marked paid keep their paid flag so the
        payment history survives the deletion.
        """
        with self.store.transaction():
            snapshot = self.store.load(Collection.SALARY_RECORDS)
            salaries: list[SalaryRecord] = snapshot.items
            index = _index_of(salaries, salary_id, "Salary record")
            removed = salaries.pop(index)
            self.store.save(
                Collection.SALARY_RECORDS, salaries, expected_version=snapshot.version
            )

        if removed.status == SalaryStatus.PAID:
            logger.warning(
                "Deleted paid salary %s; %d production records stay marked paid",
                salary_id,
                len(removed.production_records),
            )
        else:
            logger.info("Deleted salary %s (%s)", salary_id, removed.status.value)
        return removed


def _index_of(records: list, record_id: str, kind: str) -> int:
    for i, record in enumerate(records):
        if record.id == record_id:
            return i
    raise RecordNotFoundError(kind, record_id)


def _parse_amount(label: str, value: Decimal | str | int | None, errors: list[str]) -> Decimal | None:
    if value is None or value == "":
        return None
    try:
        amount = Decimal(str(value))
    except ArithmeticError:
        errors.append(f"{label} must be a number")
        return None
    if not amount.is_finite():
        errors.append(f"{label} must be a number")
        return None
    if amount < 0:
        errors.append(f"{label} cannot be negative")
        return None
    return round_to_cents(amount)

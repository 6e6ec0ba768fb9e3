"""Salary reconciliation: turn unpaid production into salary records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Iterable
from uuid import uuid4

from tess_backoffice.calculators.period import PeriodSelector, ResolvedPeriod, resolve_period
from tess_backoffice.clock import Clock, SystemClock
from tess_backoffice.models import (
    ADJUSTMENT_SUFFIX,
    Employee,
    ProductionRecord,
    ProductionReference,
    ProductionStatus,
    SalaryRecord,
    SalaryStatus,
)
from tess_backoffice.money import ZERO, sum_money


@dataclass
class EmployeeReconciliation:
    """Partition of one employee's production for one period."""

    employee_id: str
    period: ResolvedPeriod
    unpaid: list[ProductionRecord] = field(default_factory=list)
    covered_ids: set[str] = field(default_factory=set)
    existing: list[SalaryRecord] = field(default_factory=list)

    @property
    def new_production(self) -> list[ProductionRecord]:
        return [p for p in self.unpaid if p.id not in self.covered_ids]

    @property
    def new_earnings(self) -> Decimal:
        return sum_money(p.total_earnings for p in self.new_production)

    @property
    def is_first_record(self) -> bool:
        return not self.existing


class SalaryCalculator:
    """Reconciles production records against existing salary records.

    Per employee and period:
    1) Take the employee's production dated inside the period
    2) Keep records whose status is not ``paid``
    3) Collect salary records whose period label starts with the period label
       (primary and adjustment records alike)
    4) New production = unpaid records referenced by none of the employee's
       salary records, whatever their period, so an ``All Time`` run never
       re-covers work already on a monthly record (and vice versa)
    5) Emit one ``Pending`` record covering exactly the new production:
       the primary record (with base salary) if the period has none yet,
       otherwise an adjustment record (no base salary)

    The calculator is pure; persisting candidates is the caller's job.
    """

    def __init__(self, clock: Clock | None = None):
        self.clock = clock or SystemClock()

    def reconcile(
        self,
        employee: Employee,
        period: ResolvedPeriod,
        production: Iterable[ProductionRecord],
        salaries: Iterable[SalaryRecord],
    ) -> EmployeeReconciliation:
        """Partition an employee's production into covered and new work."""
        result = EmployeeReconciliation(employee_id=employee.id, period=period)
        result.unpaid = [
            p
            for p in production
            if p.employee_id == employee.id
            and period.contains(p.work_date)
            and p.status != ProductionStatus.PAID
        ]
        own_salaries = [s for s in salaries if s.employee_id == employee.id]
        result.existing = [s for s in own_salaries if period.matches_label(s.period)]
        for salary in own_salaries:
            result.covered_ids |= salary.production_record_ids
        return result

    def calculate(
        self,
        employee: Employee,
        period: ResolvedPeriod,
        production: Iterable[ProductionRecord],
        salaries: Iterable[SalaryRecord],
    ) -> SalaryRecord | None:
        """Build the next salary record for one employee, or None if nothing is owed."""
        reconciliation = self.reconcile(employee, period, production, salaries)
        if not reconciliation.unpaid:
            return None

        new_production = reconciliation.new_production
        if not new_production:
            return None

        now = self.clock.now()
        first = reconciliation.is_first_record
        return SalaryRecord(
            id=self._salary_id(employee, now),
            employee_id=employee.id,
            employee_name=employee.name,
            period=period.label if first else f"{period.label}{ADJUSTMENT_SUFFIX}",
            base_salary=employee.base_salary if first else ZERO,
            production_earnings=reconciliation.new_earnings,
            bonuses=ZERO,
            deductions=ZERO,
            status=SalaryStatus.PENDING,
            payment_method=employee.payment_method,
            production_records=[ProductionReference.from_record(p) for p in new_production],
            created_at=now,
            updated_at=now,
        )

    def calculate_all(
        self,
        employees: Iterable[Employee],
        selector: PeriodSelector | str,
        production: list[ProductionRecord],
        salaries: list[SalaryRecord],
    ) -> list[SalaryRecord]:
        """Run the calculator for every employee; skips employees owed nothing."""
        period = resolve_period(selector, self.clock.now())
        candidates: list[SalaryRecord] = []
        seen: set[str] = set()
        for employee in employees:
            if employee.id in seen:
                continue
            seen.add(employee.id)
            record = self.calculate(employee, period, production, salaries)
            if record is not None:
                candidates.append(record)
        return candidates

    @staticmethod
    def _salary_id(employee: Employee, now: datetime) -> str:
        return f"salary-{employee.id}-{int(now.timestamp() * 1000)}-{uuid4().hex[:8]}"

"""Employee directory: payroll identities of employee accounts."""

from __future__ import annotations

import logging
from decimal import Decimal

from tess_backoffice.clock import Clock, SystemClock
from tess_backoffice.models import Employee, PaymentMethod, Role, User
from tess_backoffice.money import round_to_cents
from tess_backoffice.services.errors import RecordNotFoundError, ValidationFailedError
from tess_backoffice.store import Collection, RecordStore

logger = logging.getLogger(__name__)


def derive_employee(user: User) -> Employee:
    """Payroll identity for an employee account that has no record yet."""
    return Employee(
        id=user.id,
        name=user.name or user.username,
        username=user.username,
        position="Production Staff",
        base_salary=Decimal("0"),
        payment_method=PaymentMethod.CASH,
        created_at=user.created_at,
    )


def load_employees(store: RecordStore) -> list[Employee]:
    """Stored employee records plus derived ones for unmatched employee users."""
    with store.transaction():
        employees: list[Employee] = store.read_all(Collection.EMPLOYEES)
        users: list[User] = store.read_all(Collection.USERS)

    known = {e.id for e in employees}
    for user in users:
        if user.role == Role.EMPLOYEE and user.id not in known:
            employees.append(derive_employee(user))
            known.add(user.id)
    return employees


class EmployeeService:
    """Service for reading and editing employee payroll settings."""

    def __init__(self, store: RecordStore, clock: Clock | None = None):
        self.store = store
        self.clock = clock or SystemClock()

    def list_employees(self, search: str | None = None) -> list[Employee]:
        employees = load_employees(self.store)
        if search:
            needle = search.strip().lower()
            employees = [
                e
                for e in employees
                if needle in e.name.lower() or needle in (e.username or "").lower()
            ]
        return sorted(employees, key=lambda e: e.name.lower())

    def get_employee(self, employee_id: str) -> Employee:
        for employee in load_employees(self.store):
            if employee.id == employee_id:
                return employee
        raise RecordNotFoundError("Employee", employee_id)

    def update_employee(
        self,
        employee_id: str,
        base_salary: Decimal | str | int | None = None,
        payment_method: PaymentMethod | str | None = None,
        position: str | None = None,
        department: str | None = None,
    ) -> Employee:
        """Update payroll settings, persisting a derived employee on first edit."""
        errors: list[str] = []
        changes: dict = {}

        if base_salary is not None:
            try:
                amount = Decimal(str(base_salary))
            except ArithmeticError:
                amount = None
                errors.append("Base salary must be a number")
            if amount is not None:
                if not amount.is_finite() or amount < 0:
                    errors.append("Base salary must be a non-negative number")
                else:
                    changes["base_salary"] = round_to_cents(amount)
        if payment_method is not None:
            try:
                changes["payment_method"] = PaymentMethod(payment_method)
            except ValueError:
                errors.append(f"Unknown payment method '{payment_method}'")
        if position is not None:
            if not position.strip():
                errors.append("Position cannot be empty")
            changes["position"] = position.strip()
        if department is not None:
            if not department.strip():
                errors.append("Department cannot be empty")
            changes["department"] = department.strip()
        if errors:
            raise ValidationFailedError(errors)

        with self.store.transaction():
            employee = self.get_employee(employee_id)
            snapshot = self.store.load(Collection.EMPLOYEES)
            stored: list[Employee] = snapshot.items
            changes["updated_at"] = self.clock.now()
            updated = employee.model_copy(update=changes)

            for i, existing in enumerate(stored):
                if existing.id == employee_id:
                    stored[i] = updated
                    break
            else:
                stored.append(updated)
            self.store.save(Collection.EMPLOYEES, stored, expected_version=snapshot.version)

        logger.info("Updated employee %s", employee_id)
        return updated

"""Pytest fixtures for back office tests."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Callable

import pytest

from tess_backoffice.clock import FixedClock
from tess_backoffice.config import Settings
from tess_backoffice.models import Employee, PaymentMethod, ProductionRecord
from tess_backoffice.services import (
    InventoryService,
    ProductionService,
    ReportService,
    SalaryService,
    SalesService,
    UserService,
)
from tess_backoffice.store import Collection, InMemoryRecordStore

# Mid-January so "last" resolves to December of the previous year
NOW = datetime(2024, 1, 15, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def settings() -> Settings:
    """Settings with cheap password hashing and a fixed signing key."""
    return Settings(
        database_url="sqlite://",
        host="127.0.0.1",
        port=8000,
        debug=False,
        log_level="INFO",
        default_admin_password=None,
        password_hash_iterations=1000,
        secret_key="test-secret-key-that-is-long-enough-for-hs256",
        token_expire_minutes=60,
        default_critical_level=10,
        expiry_window_days=30,
        sales_tax_rate=Decimal("0.12"),
    )


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def employee(store: InMemoryRecordStore) -> Employee:
    """An employee with no base salary."""
    emp = Employee(
        id="emp-1",
        name="Maria Santos",
        username="maria",
        base_salary=Decimal("0"),
        payment_method=PaymentMethod.CASH,
    )
    store.write_all(Collection.EMPLOYEES, [*store.read_all(Collection.EMPLOYEES), emp])
    return emp


@pytest.fixture
def second_employee(store: InMemoryRecordStore) -> Employee:
    """An employee paid online with a base salary."""
    emp = Employee(
        id="emp-2",
        name="Jose Reyes",
        username="jose",
        base_salary=Decimal("1000"),
        payment_method=PaymentMethod.ONLINE,
    )
    store.write_all(Collection.EMPLOYEES, [*store.read_all(Collection.EMPLOYEES), emp])
    return emp


@pytest.fixture
def production_service(store, clock) -> ProductionService:
    return ProductionService(store, clock)


@pytest.fixture
def salary_service(store, clock) -> SalaryService:
    return SalaryService(store, clock)


@pytest.fixture
def inventory_service(store, clock, settings) -> InventoryService:
    return InventoryService(store, clock, settings)


@pytest.fixture
def sales_service(store, clock, settings) -> SalesService:
    return SalesService(store, clock, settings)


@pytest.fixture
def user_service(store, clock, settings) -> UserService:
    return UserService(store, clock, settings)


@pytest.fixture
def report_service(store, clock, settings) -> ReportService:
    return ReportService(store, clock, settings)


@pytest.fixture
def log_production(
    production_service: ProductionService,
) -> Callable[..., ProductionRecord]:
    """Log one production record worth ``amount`` (quantity 1)."""

    def _log(
        employee: Employee,
        amount: str | int,
        work_date: date = date(2024, 1, 10),
        item_name: str = "Siomai",
    ) -> ProductionRecord:
        return production_service.submit(
            employee,
            work_date=work_date,
            item_name=item_name,
            quantity=1,
            unit_price=Decimal(str(amount)),
        )

    return _log

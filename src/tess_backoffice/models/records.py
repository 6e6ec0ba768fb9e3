"""Typed record variants stored in the record collections.

Records are validated whenever they cross the storage boundary. Stored JSON
keys are camelCase; Python attributes are snake_case.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from tess_backoffice.money import ZERO


class RecordModel(BaseModel):
    """Base for all persisted records."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# ===== Enumerations =====


class Role(str, Enum):
    """User roles; each role has its own portal."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class PaymentMethod(str, Enum):
    """Salary disbursement methods."""

    CASH = "Cash"
    ONLINE = "OnlinePayment"


class ProductionStatus(str, Enum):
    """Production record lifecycle."""

    PENDING = "pending"
    REVIEWED = "reviewed"
    PAID = "paid"


class ProductionPaymentStatus(str, Enum):
    """Payment state mirrored onto production records."""

    UNPAID = "unpaid"
    PAID = "paid"


class SalaryStatus(str, Enum):
    """Salary record payment status values."""

    PENDING = "Pending"
    PROCESSING = "Processing"
    PAID = "Paid"


class StockStatus(str, Enum):
    """Inventory stock level derived from quantity and critical level."""

    IN_STOCK = "in-stock"
    LOW_STOCK = "low-stock"
    OUT_OF_STOCK = "out-of-stock"


class SalePaymentMethod(str, Enum):
    """Point-of-sale tender types."""

    CASH = "cash"
    CARD = "card"
    GCASH = "gcash"
    BANK_TRANSFER = "bank_transfer"


# ===== Accounts =====


class User(RecordModel):
    """Login account. Only the password hash is ever stored."""

    id: str
    username: str
    password_hash: str
    role: Role
    name: str
    created_at: datetime | None = None


class Employee(RecordModel):
    """Payroll identity of an employee account."""

    id: str
    name: str
    username: str | None = None
    position: str = "Production Staff"
    department: str = "Operations"
    status: str = "active"
    base_salary: Decimal = ZERO
    payment_method: PaymentMethod = PaymentMethod.CASH
    hire_date: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ===== Production & payroll =====


class ProductionRecord(RecordModel):
    """One unit of work logged by an employee."""

    id: str
    employee_id: str
    employee_name: str
    item_name: str
    category: str = ""
    quantity: Decimal
    unit: str = "pcs"
    unit_price: Decimal
    total_earnings: Decimal
    work_date: date = Field(alias="date")
    status: ProductionStatus = ProductionStatus.PENDING
    payment_status: ProductionPaymentStatus = ProductionPaymentStatus.UNPAID
    remarks: str | None = None
    submitted_at: datetime
    updated_at: datetime | None = None
    payment_date: datetime | None = None
    payment_method: PaymentMethod | None = None
    payment_notes: str | None = None


class ProductionReference(RecordModel):
    """Snapshot of a production record covered by a salary record."""

    id: str
    item_name: str
    quantity: Decimal
    unit: str
    unit_price: Decimal
    total_earnings: Decimal
    work_date: date = Field(alias="date")

    @classmethod
    def from_record(cls, record: ProductionRecord) -> ProductionReference:
        return cls(
            id=record.id,
            item_name=record.item_name,
            quantity=record.quantity,
            unit=record.unit,
            unit_price=record.unit_price,
            total_earnings=record.total_earnings,
            work_date=record.work_date,
        )


ADJUSTMENT_SUFFIX = " (Adjustment)"


class SalaryRecord(RecordModel):
    """One payroll disbursement unit for one employee and one period."""

    id: str
    employee_id: str
    employee_name: str
    period: str
    base_salary: Decimal = ZERO
    production_earnings: Decimal = ZERO
    bonuses: Decimal = ZERO
    deductions: Decimal = ZERO
    status: SalaryStatus = SalaryStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_date: datetime | None = None
    payment_notes: str | None = None
    production_records: list[ProductionReference] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @computed_field(alias="netPay")  # type: ignore[prop-decorator]
    @property
    def net_pay(self) -> Decimal:
        """Net pay, always derived from its components."""
        return self.base_salary + self.production_earnings + self.bonuses - self.deductions

    @property
    def production_record_ids(self) -> set[str]:
        return {ref.id for ref in self.production_records}

    @property
    def is_adjustment(self) -> bool:
        return self.period.endswith(ADJUSTMENT_SUFFIX)


# ===== Inventory & sales =====


def stock_status_for(quantity: int, critical_level: int) -> StockStatus:
    """Derive the stock status for a quantity against its critical level."""
    if quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= critical_level:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


class Product(RecordModel):
    """Inventory item."""

    id: str
    name: str
    sku: str
    category: str = ""
    quantity: int = 0
    price: Decimal = ZERO
    critical_level: int = 10
    expiry_date: date | None = None
    last_updated: datetime

    @computed_field(alias="status")  # type: ignore[prop-decorator]
    @property
    def status(self) -> StockStatus:
        return stock_status_for(self.quantity, self.critical_level)


class SaleItem(RecordModel):
    """A sold line, priced at the time of sale."""

    product_id: str
    name: str
    quantity: int
    price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class Sale(RecordModel):
    """Completed point-of-sale transaction."""

    id: str
    items: list[SaleItem]
    total: Decimal
    payment_method: SalePaymentMethod = SalePaymentMethod.CASH
    customer_name: str = "Walk-in Customer"
    status: str = "completed"
    sold_at: datetime = Field(alias="date")

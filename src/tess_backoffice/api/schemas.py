"""Pydantic schemas for API request/response models.

Wire format is camelCase, matching the stored record layout. Requests may
use either camelCase or snake_case keys.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tess_backoffice.calculators import PeriodSelector
from tess_backoffice.models import (
    Employee,
    PaymentMethod,
    Product,
    ProductionRecord,
    Role,
    SalaryRecord,
    SalaryStatus,
    Sale,
    SaleItem,
    SalePaymentMethod,
)


class ApiModel(BaseModel):
    """Base for API schemas."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(ApiModel):
    """Error body returned by every failing endpoint."""

    detail: str
    code: str
    errors: list[str] = Field(default_factory=list)


# ============================================================================
# Accounts
# ============================================================================


class LoginRequest(ApiModel):
    username: str
    password: str
    role: Role


class SignupRequest(ApiModel):
    username: str = ""
    password: str = ""
    confirm_password: str = ""


class CreateAdminRequest(SignupRequest):
    name: str = ""


class UserResponse(ApiModel):
    """Public view of a user account (no password hash)."""

    id: str
    username: str
    role: Role
    name: str
    created_at: datetime | None = None


class LoginResponse(ApiModel):
    """Access token for the bearer header plus the logged-in account."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class EmployeeUpdate(ApiModel):
    base_salary: Decimal | None = None
    payment_method: PaymentMethod | None = None
    position: str | None = None
    department: str | None = None


class EmployeeListResponse(ApiModel):
    items: list[Employee]
    total: int


# ============================================================================
# Production
# ============================================================================


class ProductionCreate(ApiModel):
    """Schema for logging production."""

    work_date: date = Field(alias="date")
    item_name: str
    category: str = ""
    quantity: Decimal
    unit_price: Decimal
    unit: str | None = None
    remarks: str | None = None


class ProductionListResponse(ApiModel):
    items: list[ProductionRecord]
    total: int
    total_earnings: Decimal


# ============================================================================
# Inventory
# ============================================================================


class ProductCreate(ApiModel):
    name: str
    sku: str
    category: str = ""
    quantity: int = 0
    price: Decimal = Decimal("0")
    critical_level: int | None = None
    expiry_date: date | None = None


class ProductUpdate(ApiModel):
    name: str | None = None
    sku: str | None = None
    category: str | None = None
    quantity: int | None = None
    price: Decimal | None = None
    critical_level: int | None = None
    expiry_date: date | None = None


class ProductListResponse(ApiModel):
    items: list[Product]
    total: int


# ============================================================================
# Sales
# ============================================================================


class SaleLine(ApiModel):
    product_id: str
    quantity: int


class CartRequest(ApiModel):
    items: list[SaleLine]


class SaleCreate(CartRequest):
    payment_method: SalePaymentMethod = SalePaymentMethod.CASH
    customer_name: str | None = None


class CartSummaryResponse(ApiModel):
    items: list[SaleItem]
    subtotal: Decimal
    tax: Decimal
    total: Decimal


class SaleListResponse(ApiModel):
    items: list[Sale]
    total: int
    total_amount: Decimal


# ============================================================================
# Salaries
# ============================================================================


class SalaryGenerateRequest(ApiModel):
    """Schema for generating salary records."""

    period: PeriodSelector = PeriodSelector.CURRENT
    employee_ids: list[str] | None = None


class SalaryGenerateResponse(ApiModel):
    created: list[SalaryRecord]
    count: int


class PaymentStatusRequest(ApiModel):
    """Schema for advancing a salary's payment status."""

    status: SalaryStatus
    payment_method: PaymentMethod | None = None
    notes: str | None = None


class PaymentStatusResponse(ApiModel):
    salary: SalaryRecord
    updated_production_ids: list[str]


class SalaryAdjustmentRequest(ApiModel):
    bonuses: Decimal | None = None
    deductions: Decimal | None = None
    payment_method: PaymentMethod | None = None


class SalaryTotalsResponse(ApiModel):
    base_salary: Decimal
    production_earnings: Decimal
    bonuses: Decimal
    deductions: Decimal
    net_pay: Decimal


class SalaryListResponse(ApiModel):
    items: list[SalaryRecord]
    totals: SalaryTotalsResponse
    period_label: str
    total: int


# ============================================================================
# Reports
# ============================================================================


class SalesReportResponse(ApiModel):
    label: str
    sales: list[Sale]
    total: Decimal
    count: int


class InventoryStatusResponse(ApiModel):
    total_products: int
    total_quantity: int
    low_stock_count: int
    out_of_stock_count: int
    inventory_value: Decimal


class ExpiryReportResponse(ApiModel):
    expiring: list[Product]
    expired_by_month: dict[str, list[Product]]
    window_days: int


class CategoryBreakdownResponse(ApiModel):
    category: str
    quantity: int
    value: Decimal


class AdminDashboardResponse(ApiModel):
    today_sales: Decimal
    yesterday_sales: Decimal
    sales_change_percent: Decimal
    weekly_sales: Decimal
    monthly_sales: Decimal
    total_sales: Decimal
    total_products: int
    total_stock: int
    critical_items: int
    inventory_value: Decimal
    categories: list[CategoryBreakdownResponse]


class EmployeeDashboardResponse(ApiModel):
    employee_id: str
    latest_salary: SalaryRecord | None
    monthly_production_quantity: Decimal
    pending_earnings: Decimal

"""ORM tables and typed record variants."""

from tess_backoffice.models.base import Base, TimestampMixin
from tess_backoffice.models.collection import RecordCollection
from tess_backoffice.models.records import (
    ADJUSTMENT_SUFFIX,
    Employee,
    PaymentMethod,
    Product,
    ProductionPaymentStatus,
    ProductionRecord,
    ProductionStatus,
    ProductionReference,
    Role,
    SalaryRecord,
    SalaryStatus,
    Sale,
    SaleItem,
    SalePaymentMethod,
    StockStatus,
    User,
    stock_status_for,
)

__all__ = [
    "ADJUSTMENT_SUFFIX",
    "Base",
    "Employee",
    "PaymentMethod",
    "Product",
    "ProductionPaymentStatus",
    "ProductionRecord",
    "ProductionStatus",
    "ProductionReference",
    "RecordCollection",
    "Role",
    "SalaryRecord",
    "SalaryStatus",
    "Sale",
    "SaleItem",
    "SalePaymentMethod",
    "StockStatus",
    "TimestampMixin",
    "User",
    "stock_status_for",
]

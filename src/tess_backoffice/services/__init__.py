"""Back office services."""

from tess_backoffice.services.employees import EmployeeService, load_employees
from tess_backoffice.services.errors import (
    RecordLockedError,
    RecordNotFoundError,
    ValidationFailedError,
)
from tess_backoffice.services.inventory_service import InventoryService
from tess_backoffice.services.production_service import ProductionService
from tess_backoffice.services.report_service import ReportService
from tess_backoffice.services.salary_service import PaymentResult, SalaryListing, SalaryService
from tess_backoffice.services.sales_service import CartLine, SalesService
from tess_backoffice.services.state_machine import InvalidTransitionError, SalaryStateMachine
from tess_backoffice.services.user_service import UserService

__all__ = [
    "CartLine",
    "EmployeeService",
    "InvalidTransitionError",
    "InventoryService",
    "PaymentResult",
    "ProductionService",
    "RecordLockedError",
    "RecordNotFoundError",
    "ReportService",
    "SalaryListing",
    "SalaryService",
    "SalaryStateMachine",
    "SalesService",
    "UserService",
    "ValidationFailedError",
    "load_employees",
]

"""FastAPI dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tess_backoffice.clock import Clock
from tess_backoffice.config import Settings
from tess_backoffice.models import Role, User
from tess_backoffice.services import (
    EmployeeService,
    InventoryService,
    ProductionService,
    ReportService,
    SalaryService,
    SalesService,
    UserService,
)
from tess_backoffice.store import RecordStore


def get_store(request: Request) -> RecordStore:
    """Get the record store of the running application."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Record store is not initialized",
        )
    return store


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


Store = Annotated[RecordStore, Depends(get_store)]
AppClock = Annotated[Clock, Depends(get_clock)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]


bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    store: Store,
    clock: AppClock,
    settings: AppSettings,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> User:
    """Resolve the calling user from the bearer token issued at login."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user = UserService(store, clock, settings).resolve_token(credentials.credentials)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


async def require_admin(user: CurrentUser) -> User:
    if user.role != Role.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role required",
        )
    return user


async def require_employee(user: CurrentUser) -> User:
    if user.role != Role.EMPLOYEE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Employee role required",
        )
    return user


AdminUser = Annotated[User, Depends(require_admin)]
EmployeeUser = Annotated[User, Depends(require_employee)]


# Service factories


def get_user_service(store: Store, clock: AppClock, settings: AppSettings) -> UserService:
    return UserService(store, clock, settings)


def get_employee_service(store: Store, clock: AppClock) -> EmployeeService:
    return EmployeeService(store, clock)


def get_production_service(store: Store, clock: AppClock) -> ProductionService:
    return ProductionService(store, clock)


def get_inventory_service(
    store: Store, clock: AppClock, settings: AppSettings
) -> InventoryService:
    return InventoryService(store, clock, settings)


def get_sales_service(store: Store, clock: AppClock, settings: AppSettings) -> SalesService:
    return SalesService(store, clock, settings)


def get_salary_service(store: Store, clock: AppClock) -> SalaryService:
    return SalaryService(store, clock)


def get_report_service(store: Store, clock: AppClock, settings: AppSettings) -> ReportService:
    return ReportService(store, clock, settings)


Users = Annotated[UserService, Depends(get_user_service)]
Employees = Annotated[EmployeeService, Depends(get_employee_service)]
Production = Annotated[ProductionService, Depends(get_production_service)]
Inventory = Annotated[InventoryService, Depends(get_inventory_service)]
Sales = Annotated[SalesService, Depends(get_sales_service)]
Salaries = Annotated[SalaryService, Depends(get_salary_service)]
Reports = Annotated[ReportService, Depends(get_report_service)]

"""Report and dashboard endpoints."""

from fastapi import APIRouter

from tess_backoffice.api.dependencies import AdminUser, CurrentUser, Reports
from tess_backoffice.api.schemas import (
    AdminDashboardResponse,
    EmployeeDashboardResponse,
    ExpiryReportResponse,
    InventoryStatusResponse,
    SalesReportResponse,
)

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/daily-sales", response_model=SalesReportResponse)
async def daily_sales(reports: Reports, _: AdminUser) -> SalesReportResponse:
    return SalesReportResponse.model_validate(reports.daily_sales())


@router.get("/monthly-sales", response_model=SalesReportResponse)
async def monthly_sales(reports: Reports, _: AdminUser) -> SalesReportResponse:
    return SalesReportResponse.model_validate(reports.monthly_sales())


@router.get("/inventory-status", response_model=InventoryStatusResponse)
async def inventory_status(reports: Reports, _: CurrentUser) -> InventoryStatusResponse:
    return InventoryStatusResponse.model_validate(reports.inventory_status())


@router.get("/expiring-items", response_model=ExpiryReportResponse)
async def expiring_items(reports: Reports, _: CurrentUser) -> ExpiryReportResponse:
    return ExpiryReportResponse.model_validate(reports.expiring_items())


@router.get("/dashboard/admin", response_model=AdminDashboardResponse)
async def admin_dashboard(reports: Reports, _: AdminUser) -> AdminDashboardResponse:
    return AdminDashboardResponse.model_validate(reports.admin_dashboard())


@router.get("/dashboard/employee", response_model=EmployeeDashboardResponse)
async def employee_dashboard(reports: Reports, user: CurrentUser) -> EmployeeDashboardResponse:
    """Dashboard numbers for the calling user."""
    return EmployeeDashboardResponse.model_validate(reports.employee_dashboard(user.id))

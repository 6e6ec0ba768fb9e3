"""Employee directory endpoints (admin portal)."""

from typing import Annotated

from fastapi import APIRouter, Path, Query

from tess_backoffice.api.dependencies import AdminUser, Employees
from tess_backoffice.api.schemas import EmployeeListResponse, EmployeeUpdate, ErrorResponse
from tess_backoffice.models import Employee

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("", response_model=EmployeeListResponse)
async def list_employees(
    employees: Employees,
    _: AdminUser,
    search: Annotated[str | None, Query()] = None,
) -> EmployeeListResponse:
    items = employees.list_employees(search)
    return EmployeeListResponse(items=items, total=len(items))


@router.get(
    "/{employee_id}",
    response_model=Employee,
    responses={404: {"model": ErrorResponse}},
)
async def get_employee(
    employees: Employees,
    _: AdminUser,
    employee_id: Annotated[str, Path()],
) -> Employee:
    return employees.get_employee(employee_id)


@router.patch(
    "/{employee_id}",
    response_model=Employee,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def update_employee(
    employees: Employees,
    _: AdminUser,
    employee_id: Annotated[str, Path()],
    payload: EmployeeUpdate,
) -> Employee:
    """Update base salary, payment method, position or department."""
    return employees.update_employee(
        employee_id,
        base_salary=payload.base_salary,
        payment_method=payload.payment_method,
        position=payload.position,
        department=payload.department,
    )

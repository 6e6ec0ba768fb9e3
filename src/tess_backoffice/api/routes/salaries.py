"""Salary endpoints."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, Query, status

from tess_backoffice.api.dependencies import (
    AdminUser,
    CurrentUser,
    EmployeeUser,
    Employees,
    Salaries,
)
from tess_backoffice.api.schemas import (
    ErrorResponse,
    PaymentStatusRequest,
    PaymentStatusResponse,
    SalaryAdjustmentRequest,
    SalaryGenerateRequest,
    SalaryGenerateResponse,
    SalaryListResponse,
    SalaryTotalsResponse,
)
from tess_backoffice.calculators import PeriodSelector
from tess_backoffice.models import Role, SalaryRecord, SalaryStatus
from tess_backoffice.services import SalaryListing

router = APIRouter(prefix="/salaries", tags=["salaries"])


def _listing_response(listing: SalaryListing) -> SalaryListResponse:
    return SalaryListResponse(
        items=listing.items,
        totals=SalaryTotalsResponse.model_validate(listing.totals),
        period_label=listing.period_label,
        total=len(listing.items),
    )


# ============================================================================
# Generation
# ============================================================================


@router.post(
    "/generate",
    response_model=SalaryGenerateResponse,
    responses={409: {"model": ErrorResponse}},
)
async def generate_salaries(
    salaries: Salaries,
    employees: Employees,
    _: AdminUser,
    payload: SalaryGenerateRequest,
) -> SalaryGenerateResponse:
    """Generate salary records for unpaid production in a period.

    Returns only the records created by this call.
    """
    selected = None
    if payload.employee_ids is not None:
        selected = [employees.get_employee(employee_id) for employee_id in payload.employee_ids]
    created = salaries.generate_or_update_salaries(selected, payload.period)
    return SalaryGenerateResponse(created=created, count=len(created))


# ============================================================================
# Listing
# ============================================================================


@router.get("", response_model=SalaryListResponse)
async def list_salaries(
    salaries: Salaries,
    _: AdminUser,
    period: Annotated[str, Query()] = PeriodSelector.CURRENT.value,
    salary_status: Annotated[SalaryStatus | None, Query(alias="status")] = None,
    search: Annotated[str | None, Query()] = None,
) -> SalaryListResponse:
    """List salary records, newest first, with column totals."""
    return _listing_response(
        salaries.list_salaries(period_selector=period, status=salary_status, search=search)
    )


@router.get("/mine", response_model=SalaryListResponse)
async def list_my_salaries(
    salaries: Salaries,
    user: EmployeeUser,
    period: Annotated[str, Query()] = PeriodSelector.ALL.value,
    salary_status: Annotated[SalaryStatus | None, Query(alias="status")] = None,
) -> SalaryListResponse:
    return _listing_response(
        salaries.list_salaries(period_selector=period, status=salary_status, employee_id=user.id)
    )


@router.get(
    "/{salary_id}",
    response_model=SalaryRecord,
    responses={404: {"model": ErrorResponse}},
)
async def get_salary(
    salaries: Salaries,
    user: CurrentUser,
    salary_id: Annotated[str, Path()],
) -> SalaryRecord:
    salary = salaries.get_salary(salary_id)
    if user.role != Role.ADMIN and salary.employee_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Salary record not found",
        )
    return salary


# ============================================================================
# Payment and edits
# ============================================================================


@router.post(
    "/{salary_id}/status",
    response_model=PaymentStatusResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def advance_payment(
    salaries: Salaries,
    _: AdminUser,
    salary_id: Annotated[str, Path()],
    payload: PaymentStatusRequest,
) -> PaymentStatusResponse:
    """Move a salary to the next payment status."""
    result = salaries.advance_payment(
        salary_id,
        payload.status,
        payment_method=payload.payment_method,
        notes=payload.notes,
    )
    return PaymentStatusResponse(
        salary=result.salary,
        updated_production_ids=result.updated_production_ids,
    )


@router.patch(
    "/{salary_id}",
    response_model=SalaryRecord,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def edit_adjustments(
    salaries: Salaries,
    _: AdminUser,
    salary_id: Annotated[str, Path()],
    payload: SalaryAdjustmentRequest,
) -> SalaryRecord:
    """Edit bonuses, deductions or payment method of an unpaid salary."""
    return salaries.edit_adjustments(
        salary_id,
        bonuses=payload.bonuses,
        deductions=payload.deductions,
        payment_method=payload.payment_method,
    )


@router.delete(
    "/{salary_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_salary(
    salaries: Salaries,
    _: AdminUser,
    salary_id: Annotated[str, Path()],
) -> None:
    salaries.delete_salary(salary_id)

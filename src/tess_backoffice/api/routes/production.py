"""Production record endpoints."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, Query, status

from tess_backoffice.api.dependencies import (
    AdminUser,
    CurrentUser,
    EmployeeUser,
    Employees,
    Production,
)
from tess_backoffice.api.schemas import (
    ErrorResponse,
    ProductionCreate,
    ProductionListResponse,
)
from tess_backoffice.models import ProductionPaymentStatus, ProductionRecord, Role
from tess_backoffice.money import sum_money

router = APIRouter(prefix="/production", tags=["production"])


def _listing(records: list[ProductionRecord]) -> ProductionListResponse:
    return ProductionListResponse(
        items=records,
        total=len(records),
        total_earnings=sum_money(r.total_earnings for r in records),
    )


@router.post(
    "",
    response_model=ProductionRecord,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def submit_production(
    production: Production,
    employees: Employees,
    user: EmployeeUser,
    payload: ProductionCreate,
) -> ProductionRecord:
    """Log production for the calling employee."""
    employee = employees.get_employee(user.id)
    return production.submit(
        employee,
        work_date=payload.work_date,
        item_name=payload.item_name,
        quantity=payload.quantity,
        unit_price=payload.unit_price,
        category=payload.category,
        unit=payload.unit,
        remarks=payload.remarks,
    )


@router.get("/mine", response_model=ProductionListResponse)
async def list_my_production(
    production: Production,
    user: EmployeeUser,
) -> ProductionListResponse:
    return _listing(production.list_for_employee(user.id))


@router.get("", response_model=ProductionListResponse)
async def list_production(
    production: Production,
    _: AdminUser,
    search: Annotated[str | None, Query()] = None,
    payment_status: Annotated[
        ProductionPaymentStatus | None, Query(alias="paymentStatus")
    ] = None,
) -> ProductionListResponse:
    """List all production records with optional filters."""
    return _listing(production.list_all(search=search, payment_status=payment_status))


@router.get(
    "/{record_id}",
    response_model=ProductionRecord,
    responses={404: {"model": ErrorResponse}},
)
async def get_production(
    production: Production,
    user: CurrentUser,
    record_id: Annotated[str, Path()],
) -> ProductionRecord:
    record = production.get(record_id)
    if user.role != Role.ADMIN and record.employee_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Production record not found",
        )
    return record


@router.post(
    "/{record_id}/review",
    response_model=ProductionRecord,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def review_production(
    production: Production,
    _: AdminUser,
    record_id: Annotated[str, Path()],
) -> ProductionRecord:
    return production.mark_reviewed(record_id)


@router.delete(
    "/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_production(
    production: Production,
    _: AdminUser,
    record_id: Annotated[str, Path()],
) -> None:
    production.delete(record_id)

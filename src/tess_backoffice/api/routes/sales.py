"""Point-of-sale endpoints (admin portal)."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Query, status

from tess_backoffice.api.dependencies import AdminUser, Sales
from tess_backoffice.api.schemas import (
    CartRequest,
    CartSummaryResponse,
    ErrorResponse,
    SaleCreate,
    SaleListResponse,
)
from tess_backoffice.models import Sale
from tess_backoffice.money import sum_money
from tess_backoffice.services import CartLine

router = APIRouter(prefix="/sales", tags=["sales"])


def _lines(payload: CartRequest) -> list[CartLine]:
    return [CartLine(item.product_id, item.quantity) for item in payload.items]


@router.post(
    "/cart-summary",
    response_model=CartSummaryResponse,
    responses={422: {"model": ErrorResponse}},
)
async def cart_summary(
    sales: Sales,
    _: AdminUser,
    payload: CartRequest,
) -> CartSummaryResponse:
    """Price a cart and show tax without completing the sale."""
    return CartSummaryResponse.model_validate(sales.cart_summary(_lines(payload)))


@router.post(
    "",
    response_model=Sale,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def complete_sale(
    sales: Sales,
    _: AdminUser,
    payload: SaleCreate,
) -> Sale:
    """Complete a sale, decrementing inventory."""
    return sales.complete_sale(
        _lines(payload),
        payment_method=payload.payment_method,
        customer_name=payload.customer_name,
    )


@router.get("", response_model=SaleListResponse)
async def list_sales(
    sales: Sales,
    _: AdminUser,
    start: Annotated[datetime | None, Query()] = None,
    end: Annotated[datetime | None, Query()] = None,
) -> SaleListResponse:
    """List sales, newest first, optionally within [start, end]."""
    if start is not None and end is not None:
        items = sales.sales_between(start, end)
    else:
        items = sales.list_sales()
        if start is not None:
            items = [s for s in items if s.sold_at >= start]
        if end is not None:
            items = [s for s in items if s.sold_at <= end]
    return SaleListResponse(
        items=items,
        total=len(items),
        total_amount=sum_money(s.total for s in items),
    )

"""Inventory endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from tess_backoffice.api.dependencies import AdminUser, CurrentUser, Inventory
from tess_backoffice.api.schemas import (
    ErrorResponse,
    ProductCreate,
    ProductListResponse,
    ProductUpdate,
)
from tess_backoffice.models import Product, StockStatus

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("", response_model=ProductListResponse)
async def list_products(
    inventory: Inventory,
    _: CurrentUser,
    search: Annotated[str | None, Query()] = None,
    category: Annotated[str | None, Query()] = None,
    stock_status: Annotated[StockStatus | None, Query(alias="status")] = None,
) -> ProductListResponse:
    items = inventory.list_products(search=search, category=category, status=stock_status)
    return ProductListResponse(items=items, total=len(items))


@router.get("/categories", response_model=list[str])
async def list_categories(inventory: Inventory, _: CurrentUser) -> list[str]:
    return inventory.categories()


@router.get(
    "/{product_id}",
    response_model=Product,
    responses={404: {"model": ErrorResponse}},
)
async def get_product(
    inventory: Inventory,
    _: CurrentUser,
    product_id: Annotated[str, Path()],
) -> Product:
    return inventory.get(product_id)


@router.post(
    "",
    response_model=Product,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def create_product(
    inventory: Inventory,
    _: AdminUser,
    payload: ProductCreate,
) -> Product:
    return inventory.create(**payload.model_dump())


@router.patch(
    "/{product_id}",
    response_model=Product,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def update_product(
    inventory: Inventory,
    _: AdminUser,
    product_id: Annotated[str, Path()],
    payload: ProductUpdate,
) -> Product:
    return inventory.update(product_id, **payload.model_dump(exclude_unset=True))


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_product(
    inventory: Inventory,
    _: AdminUser,
    product_id: Annotated[str, Path()],
) -> None:
    inventory.delete(product_id)

"""Inventory service."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import uuid4

from tess_backoffice.clock import Clock, SystemClock
from tess_backoffice.config import Settings, get_settings
from tess_backoffice.models import Product, StockStatus
from tess_backoffice.money import round_to_cents
from tess_backoffice.services.errors import RecordNotFoundError, ValidationFailedError
from tess_backoffice.store import Collection, RecordStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {"name", "sku", "category", "quantity", "price", "critical_level", "expiry_date"}


class InventoryService:
    """Service for inventory items.

    Stock status is never stored as input; it is derived from quantity and
    critical level on every read.
    """

    def __init__(
        self,
        store: RecordStore,
        clock: Clock | None = None,
        settings: Settings | None = None,
    ):
        self.store = store
        self.clock = clock or SystemClock()
        self.settings = settings or get_settings()

    def list_products(
        self,
        search: str | None = None,
        category: str | None = None,
        status: StockStatus | str | None = None,
    ) -> list[Product]:
        products: list[Product] = self.store.read_all(Collection.INVENTORY)
        if search:
            needle = search.strip().lower()
            products = [
                p for p in products if needle in p.name.lower() or needle in p.sku.lower()
            ]
        if category and category != "all":
            products = [p for p in products if p.category == category]
        if status and status != "all":
            products = [p for p in products if p.status == status]
        return products

    def categories(self) -> list[str]:
        """Distinct non-empty categories, sorted."""
        return sorted({p.category for p in self.list_products() if p.category})

    def get(self, product_id: str) -> Product:
        for product in self.list_products():
            if product.id == product_id:
                return product
        raise RecordNotFoundError("Product", product_id)

    def create(
        self,
        name: str,
        sku: str,
        quantity: int | str = 0,
        price: Decimal | str | int = 0,
        category: str = "",
        critical_level: int | str | None = None,
        expiry_date: date | None = None,
    ) -> Product:
        fields = _validate(
            {
                "name": name,
                "sku": sku,
                "category": category,
                "quantity": quantity,
                "price": price,
                "critical_level": (
                    self.settings.default_critical_level if critical_level is None else critical_level
                ),
                "expiry_date": expiry_date,
            }
        )

        with self.store.transaction():
            snapshot = self.store.load(Collection.INVENTORY)
            products: list[Product] = snapshot.items
            _check_unique_sku(products, fields["sku"])
            product = Product(id=uuid4().hex, last_updated=self.clock.now(), **fields)
            self.store.save(
                Collection.INVENTORY, [*products, product], expected_version=snapshot.version
            )

        logger.info("Created product %s (%s) status %s", product.sku, product.id, product.status.value)
        return product

    def update(self, product_id: str, **changes: Any) -> Product:
        """Update editable fields of a product."""
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationFailedError(f"Unknown fields: {', '.join(sorted(unknown))}")

        with self.store.transaction():
            snapshot = self.store.load(Collection.INVENTORY)
            products: list[Product] = snapshot.items
            index = next((i for i, p in enumerate(products) if p.id == product_id), None)
            if index is None:
                raise RecordNotFoundError("Product", product_id)

            current = products[index]
            merged = {name: getattr(current, name) for name in EDITABLE_FIELDS}
            merged.update(changes)
            fields = _validate(merged)
            if fields["sku"] != current.sku:
                _check_unique_sku([p for p in products if p.id != product_id], fields["sku"])

            updated = Product(id=product_id, last_updated=self.clock.now(), **fields)
            products[index] = updated
            self.store.save(Collection.INVENTORY, products, expected_version=snapshot.version)

        logger.info("Updated product %s status %s", product_id, updated.status.value)
        return updated

    def delete(self, product_id: str) -> Product:
        with self.store.transaction():
            snapshot = self.store.load(Collection.INVENTORY)
            products: list[Product] = snapshot.items
            removed = next((p for p in products if p.id == product_id), None)
            if removed is None:
                raise RecordNotFoundError("Product", product_id)
            self.store.save(
                Collection.INVENTORY,
                [p for p in products if p.id != product_id],
                expected_version=snapshot.version,
            )

        logger.info("Deleted product %s", product_id)
        return removed


def _check_unique_sku(products: list[Product], sku: str) -> None:
    if any(p.sku == sku for p in products):
        raise ValidationFailedError("SKU already exists")


def _validate(fields: dict[str, Any]) -> dict[str, Any]:
    """Normalize product fields, collecting every problem before raising."""
    errors: list[str] = []
    name = str(fields.get("name") or "").strip()
    sku = str(fields.get("sku") or "").strip()
    if not name:
        errors.append("Name is required")
    if not sku:
        errors.append("SKU is required")

    quantity = _to_int("Quantity", fields.get("quantity"), errors)
    critical_level = _to_int("Critical level", fields.get("critical_level"), errors)
    price = None
    try:
        price = Decimal(str(fields.get("price")))
        if not price.is_finite():
            raise ArithmeticError
    except ArithmeticError:
        errors.append("Price must be a number")
        price = None
    if price is not None and price < 0:
        errors.append("Price cannot be negative")

    expiry = fields.get("expiry_date")
    if isinstance(expiry, str):
        try:
            expiry = date.fromisoformat(expiry[:10]) if expiry else None
        except ValueError:
            errors.append("Expiry date must be an ISO date")

    if errors:
        raise ValidationFailedError(errors)
    return {
        "name": name,
        "sku": sku,
        "category": str(fields.get("category") or "").strip(),
        "quantity": quantity,
        "price": round_to_cents(price),
        "critical_level": critical_level,
        "expiry_date": expiry,
    }


def _to_int(label: str, value: Any, errors: list[str]) -> int | None:
    try:
        number = Decimal(str(value))
    except ArithmeticError:
        errors.append(f"{label} must be a whole number")
        return None
    if not number.is_finite() or number != number.to_integral_value():
        errors.append(f"{label} must be a whole number")
        return None
    if number < 0:
        errors.append(f"{label} cannot be negative")
        return None
    return int(number)

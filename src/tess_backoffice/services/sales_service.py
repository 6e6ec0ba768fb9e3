"""Point-of-sale service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from tess_backoffice.clock import Clock, SystemClock
from tess_backoffice.config import Settings, get_settings
from tess_backoffice.models import Product, Sale, SaleItem, SalePaymentMethod
from tess_backoffice.money import round_to_cents, sum_money
from tess_backoffice.services.errors import ValidationFailedError
from tess_backoffice.store import Collection, RecordStore

logger = logging.getLogger(__name__)

DEFAULT_CUSTOMER = "Walk-in Customer"


@dataclass(frozen=True)
class CartLine:
    """A requested product and quantity."""

    product_id: str
    quantity: int


@dataclass(frozen=True)
class CartSummary:
    """Priced cart with display tax."""

    items: list[SaleItem]
    subtotal: Decimal
    tax: Decimal
    total: Decimal


def merge_lines(lines: list[CartLine]) -> list[CartLine]:
    """Combine repeated products into one line, keeping first-seen order."""
    merged: dict[str, int] = {}
    for line in lines:
        merged[line.product_id] = merged.get(line.product_id, 0) + line.quantity
    return [CartLine(product_id, quantity) for product_id, quantity in merged.items()]


class SalesService:
    """Service for completing sales against inventory.

    A sale either decrements every product and records the sale, or changes
    nothing at all.
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

    def cart_summary(self, lines: list[CartLine]) -> CartSummary:
        """Price a cart at current prices. Tax is shown, not charged."""
        products = {p.id: p for p in self.store.read_all(Collection.INVENTORY)}
        items = self._price_lines(merge_lines(lines), products)
        subtotal = sum_money(item.line_total for item in items)
        tax = round_to_cents(subtotal * self.settings.sales_tax_rate)
        return CartSummary(items=items, subtotal=subtotal, tax=tax, total=subtotal + tax)

    def complete_sale(
        self,
        lines: list[CartLine],
        payment_method: SalePaymentMethod | str = SalePaymentMethod.CASH,
        customer_name: str | None = None,
    ) -> Sale:
        """Validate stock for every line, then decrement inventory and record the sale."""
        try:
            method = SalePaymentMethod(payment_method)
        except ValueError as e:
            raise ValidationFailedError(f"Unknown payment method '{payment_method}'") from e
        merged = merge_lines(lines)
        if not merged:
            raise ValidationFailedError("Cart is empty")

        with self.store.transaction():
            inventory = self.store.load(Collection.INVENTORY)
            products: list[Product] = inventory.items
            by_id = {p.id: p for p in products}
            items = self._price_lines(merged, by_id)

            now = self.clock.now()
            sold = {line.product_id: line.quantity for line in merged}
            updated_products = [
                p.model_copy(update={"quantity": p.quantity - sold[p.id], "last_updated": now})
                if p.id in sold
                else p
                for p in products
            ]
            sale = Sale(
                id=uuid4().hex,
                items=items,
                total=sum_money(item.line_total for item in items),
                payment_method=method,
                customer_name=(customer_name or "").strip() or DEFAULT_CUSTOMER,
                status="completed",
                sold_at=now,
            )

            self.store.save(
                Collection.INVENTORY, updated_products, expected_version=inventory.version
            )
            sales = self.store.load(Collection.SALES)
            self.store.save(
                Collection.SALES, [*sales.items, sale], expected_version=sales.version
            )

        for product in updated_products:
            if product.id in sold:
                logger.info(
                    "Product %s now %d (%s)", product.sku, product.quantity, product.status.value
                )
        logger.info("Sale %s completed: %d items, total %s", sale.id, len(items), sale.total)
        return sale

    def list_sales(self) -> list[Sale]:
        """All sales, newest first."""
        sales: list[Sale] = self.store.read_all(Collection.SALES)
        return sorted(sales, key=lambda s: s.sold_at, reverse=True)

    def sales_between(self, start: datetime, end: datetime) -> list[Sale]:
        """Sales with start <= date <= end."""
        return [s for s in self.list_sales() if start <= s.sold_at <= end]

    def _price_lines(self, lines: list[CartLine], products: dict[str, Product]) -> list[SaleItem]:
        errors: list[str] = []
        items: list[SaleItem] = []
        for line in lines:
            product = products.get(line.product_id)
            if product is None:
                errors.append(f"Unknown product '{line.product_id}'")
                continue
            if line.quantity <= 0:
                errors.append(f"Quantity for {product.name} must be greater than zero")
                continue
            if product.quantity < line.quantity:
                errors.append(
                    f"Insufficient stock for {product.name}. Available: {product.quantity}"
                )
                continue
            items.append(
                SaleItem(
                    product_id=product.id,
                    name=product.name,
                    quantity=line.quantity,
                    price=product.price,
                )
            )
        if errors:
            raise ValidationFailedError(errors)
        return items


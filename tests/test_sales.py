"""Tests for point-of-sale transactions."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from tess_backoffice.models import SalePaymentMethod, StockStatus
from tess_backoffice.services import CartLine, ValidationFailedError
from tess_backoffice.services.sales_service import merge_lines
from tess_backoffice.store import Collection


@pytest.fixture
def siomai(inventory_service):
    return inventory_service.create(
        name="Chicken Siomai", sku="SIO-1", quantity=20, price="150", critical_level=5
    )


@pytest.fixture
def tocino(inventory_service):
    return inventory_service.create(name="Pork Tocino", sku="TOC-1", quantity=3, price="210.50")


class TestMergeLines:
    def test_repeated_products_are_combined(self):
        merged = merge_lines([CartLine("a", 1), CartLine("b", 2), CartLine("a", 3)])

        assert merged == [CartLine("a", 4), CartLine("b", 2)]


class TestCompleteSale:
    """A sale decrements stock and records itself, or changes nothing."""

    def test_sale_decrements_inventory(self, sales_service, inventory_service, siomai, tocino, clock):
        sale = sales_service.complete_sale(
            [CartLine(siomai.id, 2), CartLine(tocino.id, 1)],
            payment_method="gcash",
        )

        assert sale.total == Decimal("510.50")
        assert sale.payment_method == SalePaymentMethod.GCASH
        assert sale.customer_name == "Walk-in Customer"
        assert sale.status == "completed"
        assert sale.sold_at == clock.now()
        assert [(i.name, i.quantity, i.price) for i in sale.items] == [
            ("Chicken Siomai", 2, Decimal("150.00")),
            ("Pork Tocino", 1, Decimal("210.50")),
        ]
        assert inventory_service.get(siomai.id).quantity == 18
        assert inventory_service.get(tocino.id).quantity == 2
        assert [s.id for s in sales_service.list_sales()] == [sale.id]

    def test_status_follows_each_products_critical_level(
        self, sales_service, inventory_service, siomai, tocino
    ):
        sales_service.complete_sale([CartLine(siomai.id, 15), CartLine(tocino.id, 3)])

        assert inventory_service.get(siomai.id).status == StockStatus.LOW_STOCK
        assert inventory_service.get(tocino.id).status == StockStatus.OUT_OF_STOCK

    def test_customer_name(self, sales_service, siomai):
        sale = sales_service.complete_sale([CartLine(siomai.id, 1)], customer_name=" Aling Nena ")

        assert sale.customer_name == "Aling Nena"

    def test_insufficient_stock_changes_nothing(
        self, sales_service, inventory_service, store, siomai, tocino
    ):
        """Stock is validated for every line before anything is decremented."""
        version = store.version(Collection.INVENTORY)

        with pytest.raises(ValidationFailedError) as exc_info:
            sales_service.complete_sale([CartLine(siomai.id, 2), CartLine(tocino.id, 5)])

        assert exc_info.value.errors == ["Insufficient stock for Pork Tocino. Available: 3"]
        assert inventory_service.get(siomai.id).quantity == 20
        assert store.version(Collection.INVENTORY) == version
        assert sales_service.list_sales() == []

    def test_merged_lines_are_checked_together(self, sales_service, tocino):
        with pytest.raises(ValidationFailedError):
            sales_service.complete_sale([CartLine(tocino.id, 2), CartLine(tocino.id, 2)])

    def test_unknown_product(self, sales_service):
        with pytest.raises(ValidationFailedError) as exc_info:
            sales_service.complete_sale([CartLine("ghost", 1)])

        assert exc_info.value.errors == ["Unknown product 'ghost'"]

    def test_empty_cart(self, sales_service):
        with pytest.raises(ValidationFailedError):
            sales_service.complete_sale([])

    def test_zero_quantity(self, sales_service, siomai):
        with pytest.raises(ValidationFailedError):
            sales_service.complete_sale([CartLine(siomai.id, 0)])

    def test_unknown_payment_method(self, sales_service, siomai):
        with pytest.raises(ValidationFailedError):
            sales_service.complete_sale([CartLine(siomai.id, 1)], payment_method="barter")


class TestCartSummary:
    def test_tax_is_shown_on_top_of_subtotal(self, sales_service, siomai, tocino):
        summary = sales_service.cart_summary([CartLine(siomai.id, 2), CartLine(tocino.id, 1)])

        assert summary.subtotal == Decimal("510.50")
        assert summary.tax == Decimal("61.26")
        assert summary.total == Decimal("571.76")

    def test_summary_does_not_touch_stock(self, sales_service, inventory_service, siomai):
        sales_service.cart_summary([CartLine(siomai.id, 5)])

        assert inventory_service.get(siomai.id).quantity == 20


class TestSalesListing:
    def test_sales_between(self, sales_service, siomai, clock):
        first = sales_service.complete_sale([CartLine(siomai.id, 1)])
        clock.advance(3600)
        second = sales_service.complete_sale([CartLine(siomai.id, 1)])

        start = datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)
        window = sales_service.sales_between(start, start + timedelta(hours=1))

        assert [s.id for s in window] == [second.id]
        assert [s.id for s in sales_service.list_sales()] == [second.id, first.id]

"""Read-only reports and dashboards."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal

from tess_backoffice.calculators import month_label
from tess_backoffice.clock import Clock, SystemClock
from tess_backoffice.config import Settings, get_settings
from tess_backoffice.models import (
    Product,
    ProductionRecord,
    ProductionStatus,
    SalaryRecord,
    Sale,
    StockStatus,
)
from tess_backoffice.money import ZERO, round_to_cents, sum_money
from tess_backoffice.store import Collection, RecordStore


@dataclass
class SalesReport:
    """Sales in a window with their total."""

    label: str
    sales: list[Sale]
    total: Decimal
    count: int


@dataclass
class InventoryStatusReport:
    total_products: int
    total_quantity: int
    low_stock_count: int
    out_of_stock_count: int
    inventory_value: Decimal


@dataclass
class ExpiryReport:
    """Products expiring soon, and expired products grouped by month."""

    expiring: list[Product]
    expired_by_month: dict[str, list[Product]]
    window_days: int


@dataclass
class CategoryBreakdown:
    category: str
    quantity: int
    value: Decimal


@dataclass
class AdminDashboard:
    """Headline numbers of the admin portal."""

    today_sales: Decimal
    yesterday_sales: Decimal
    sales_change_percent: Decimal
    weekly_sales: Decimal
    monthly_sales: Decimal
    total_sales: Decimal
    total_products: int
    total_stock: int
    critical_items: int
    inventory_value: Decimal
    categories: list[CategoryBreakdown] = field(default_factory=list)


@dataclass
class EmployeeDashboard:
    """Headline numbers of the employee portal."""

    employee_id: str
    latest_salary: SalaryRecord | None
    monthly_production_quantity: Decimal
    pending_earnings: Decimal


class ReportService:
    """Computes reports from the current collections. Never writes."""

    def __init__(
        self,
        store: RecordStore,
        clock: Clock | None = None,
        settings: Settings | None = None,
    ):
        self.store = store
        self.clock = clock or SystemClock()
        self.settings = settings or get_settings()

    # ----- sales -----

    def daily_sales(self, day: date | None = None) -> SalesReport:
        day = day or self.clock.today()
        sales = [s for s in self._sales() if s.sold_at.date() == day]
        return _sales_report(day.isoformat(), sales)

    def monthly_sales(self, anchor: date | None = None) -> SalesReport:
        """Sales in the calendar month (and year) of ``anchor``."""
        anchor = anchor or self.clock.today()
        sales = [
            s
            for s in self._sales()
            if s.sold_at.year == anchor.year and s.sold_at.month == anchor.month
        ]
        return _sales_report(month_label(anchor), sales)

    # ----- inventory -----

    def inventory_status(self) -> InventoryStatusReport:
        products = self._products()
        return InventoryStatusReport(
            total_products=len(products),
            total_quantity=sum(p.quantity for p in products),
            low_stock_count=sum(1 for p in products if p.quantity <= p.critical_level),
            out_of_stock_count=sum(1 for p in products if p.status == StockStatus.OUT_OF_STOCK),
            inventory_value=_inventory_value(products),
        )

    def expiring_items(self) -> ExpiryReport:
        today = self.clock.today()
        horizon = today + timedelta(days=self.settings.expiry_window_days)
        dated = sorted(
            (p for p in self._products() if p.expiry_date is not None),
            key=lambda p: p.expiry_date,
        )

        expiring = [p for p in dated if today <= p.expiry_date <= horizon]
        expired: OrderedDict[str, list[Product]] = OrderedDict()
        for product in dated:
            if product.expiry_date < today:
                expired.setdefault(month_label(product.expiry_date), []).append(product)
        return ExpiryReport(
            expiring=expiring,
            expired_by_month=dict(expired),
            window_days=self.settings.expiry_window_days,
        )

    # ----- dashboards -----

    def admin_dashboard(self) -> AdminDashboard:
        today = self.clock.today()
        yesterday = today - timedelta(days=1)
        sales = self._sales()
        products = self._products()

        today_total = sum_money(s.total for s in sales if s.sold_at.date() == today)
        yesterday_total = sum_money(s.total for s in sales if s.sold_at.date() == yesterday)
        if yesterday_total > 0:
            change = round_to_cents((today_total - yesterday_total) / yesterday_total * 100)
        else:
            change = ZERO

        week_start = today - timedelta(days=7)
        month_start = today - timedelta(days=30)

        categories: OrderedDict[str, CategoryBreakdown] = OrderedDict()
        for product in products:
            name = product.category or "Uncategorized"
            entry = categories.setdefault(name, CategoryBreakdown(name, 0, ZERO))
            entry.quantity += product.quantity
            entry.value = round_to_cents(entry.value + product.price * product.quantity)

        return AdminDashboard(
            today_sales=today_total,
            yesterday_sales=yesterday_total,
            sales_change_percent=change,
            weekly_sales=sum_money(s.total for s in sales if s.sold_at.date() >= week_start),
            monthly_sales=sum_money(s.total for s in sales if s.sold_at.date() >= month_start),
            total_sales=sum_money(s.total for s in sales),
            total_products=len(products),
            total_stock=sum(p.quantity for p in products),
            critical_items=sum(1 for p in products if p.quantity <= p.critical_level),
            inventory_value=_inventory_value(products),
            categories=list(categories.values()),
        )

    def employee_dashboard(self, employee_id: str) -> EmployeeDashboard:
        today = self.clock.today()
        with self.store.transaction():
            salaries: list[SalaryRecord] = self.store.read_all(Collection.SALARY_RECORDS)
            production: list[ProductionRecord] = self.store.read_all(
                Collection.PRODUCTION_RECORDS
            )

        own_salaries = sorted(
            (s for s in salaries if s.employee_id == employee_id),
            key=lambda s: s.created_at,
            reverse=True,
        )
        own_production = [p for p in production if p.employee_id == employee_id]
        return EmployeeDashboard(
            employee_id=employee_id,
            latest_salary=own_salaries[0] if own_salaries else None,
            monthly_production_quantity=sum(
                (
                    p.quantity
                    for p in own_production
                    if p.work_date.year == today.year and p.work_date.month == today.month
                ),
                Decimal("0"),
            ),
            pending_earnings=sum_money(
                p.total_earnings for p in own_production if p.status != ProductionStatus.PAID
            ),
        )

    def _sales(self) -> list[Sale]:
        return self.store.read_all(Collection.SALES)

    def _products(self) -> list[Product]:
        return self.store.read_all(Collection.INVENTORY)


def _sales_report(label: str, sales: list[Sale]) -> SalesReport:
    return SalesReport(
        label=label,
        sales=sales,
        total=sum_money(s.total for s in sales),
        count=len(sales),
    )


def _inventory_value(products: list[Product]) -> Decimal:
    return sum_money(p.price * p.quantity for p in products)

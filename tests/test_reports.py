"""Tests for reports and dashboards."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from tess_backoffice.models import Sale
from tess_backoffice.services import CartLine
from tess_backoffice.store import Collection


def _sale(sale_id: str, total: str, sold_at: datetime) -> Sale:
    return Sale(id=sale_id, items=[], total=Decimal(total), sold_at=sold_at)


@pytest.fixture
def sales_history(store):
    """Sales on days around 2024-01-15."""
    sales = [
        _sale("today-1", "300", datetime(2024, 1, 15, 8, 0, tzinfo=timezone.utc)),
        _sale("today-2", "200", datetime(2024, 1, 15, 8, 30, tzinfo=timezone.utc)),
        _sale("yesterday", "400", datetime(2024, 1, 14, 17, 0, tzinfo=timezone.utc)),
        _sale("last-week", "100", datetime(2024, 1, 9, 12, 0, tzinfo=timezone.utc)),
        _sale("december", "50", datetime(2023, 12, 20, 12, 0, tzinfo=timezone.utc)),
        _sale("last-year", "999", datetime(2023, 1, 15, 12, 0, tzinfo=timezone.utc)),
    ]
    store.write_all(Collection.SALES, sales)
    return sales


class TestSalesReports:
    def test_daily_sales(self, report_service, sales_history):
        report = report_service.daily_sales()

        assert report.label == "2024-01-15"
        assert report.count == 2
        assert report.total == Decimal("500")

    def test_daily_sales_for_other_day(self, report_service, sales_history):
        assert report_service.daily_sales(date(2024, 1, 14)).total == Decimal("400")

    def test_monthly_sales_excludes_same_month_of_prior_year(self, report_service, sales_history):
        report = report_service.monthly_sales()

        assert report.label == "January 2024"
        assert {s.id for s in report.sales} == {"today-1", "today-2", "yesterday", "last-week"}
        assert report.total == Decimal("1000")


class TestInventoryReports:
    @pytest.fixture
    def catalog(self, inventory_service):
        inventory_service.create(
            name="Siomai", sku="SIO-1", category="Dimsum", quantity=40, price="10",
            expiry_date=date(2024, 1, 20),
        )
        inventory_service.create(
            name="Tocino", sku="TOC-1", category="Cured", quantity=4, price="25.50",
            expiry_date=date(2024, 2, 20),
        )
        inventory_service.create(
            name="Longganisa", sku="LON-1", category="Cured", quantity=0, price="30",
            expiry_date=date(2023, 12, 5),
        )
        inventory_service.create(
            name="Embutido", sku="EMB-1", quantity=15, price="2",
            expiry_date=date(2024, 1, 2),
        )
        inventory_service.create(name="Kikiam", sku="KIK-1", quantity=12, price="1")
        return inventory_service

    def test_inventory_status(self, report_service, catalog):
        report = report_service.inventory_status()

        assert report.total_products == 5
        assert report.total_quantity == 71
        assert report.low_stock_count == 2
        assert report.out_of_stock_count == 1
        assert report.inventory_value == Decimal("544.00")

    def test_expiring_within_window(self, report_service, catalog):
        report = report_service.expiring_items()

        assert report.window_days == 30
        assert [p.sku for p in report.expiring] == ["SIO-1"]

    def test_expired_grouped_by_month(self, report_service, catalog):
        report = report_service.expiring_items()

        assert list(report.expired_by_month) == ["December 2023", "January 2024"]
        assert [p.sku for p in report.expired_by_month["January 2024"]] == ["EMB-1"]

    def test_admin_dashboard_inventory(self, report_service, catalog):
        dashboard = report_service.admin_dashboard()

        assert dashboard.total_products == 5
        assert dashboard.total_stock == 71
        assert dashboard.critical_items == 2
        assert [(c.category, c.quantity) for c in dashboard.categories] == [
            ("Dimsum", 40),
            ("Cured", 4),
            ("Uncategorized", 27),
        ]
        assert dashboard.categories[1].value == Decimal("102.00")


class TestAdminDashboard:
    def test_sales_figures(self, report_service, sales_history):
        dashboard = report_service.admin_dashboard()

        assert dashboard.today_sales == Decimal("500")
        assert dashboard.yesterday_sales == Decimal("400")
        assert dashboard.sales_change_percent == Decimal("25.00")
        assert dashboard.weekly_sales == Decimal("1000")
        assert dashboard.monthly_sales == Decimal("1050")
        assert dashboard.total_sales == Decimal("2049")

    def test_no_sales_yesterday_means_no_change(self, report_service, store):
        store.write_all(
            Collection.SALES,
            [_sale("only", "80", datetime(2024, 1, 15, 8, 0, tzinfo=timezone.utc))],
        )

        assert report_service.admin_dashboard().sales_change_percent == 0

    def test_sales_flow_into_dashboard(self, report_service, inventory_service, sales_service):
        product = inventory_service.create(name="Siomai", sku="SIO-1", quantity=20, price="150")
        sales_service.complete_sale([CartLine(product.id, 2)])

        dashboard = report_service.admin_dashboard()

        assert dashboard.today_sales == Decimal("300.00")
        assert dashboard.total_stock == 18


class TestEmployeeDashboard:
    def test_employee_dashboard(
        self, report_service, salary_service, employee, second_employee, log_production, clock
    ):
        log_production(employee, 100)
        log_production(employee, 50, work_date=date(2023, 12, 30))
        log_production(second_employee, 999)
        salary_service.generate_or_update_salaries([employee])
        clock.advance(60)
        log_production(employee, 25)
        (adjustment,) = salary_service.generate_or_update_salaries([employee])

        dashboard = report_service.employee_dashboard("emp-1")

        assert dashboard.latest_salary.id == adjustment.id
        assert dashboard.monthly_production_quantity == Decimal("2")
        assert dashboard.pending_earnings == Decimal("175.00")

    def test_employee_without_records(self, report_service):
        dashboard = report_service.employee_dashboard("nobody")

        assert dashboard.latest_salary is None
        assert dashboard.pending_earnings == 0

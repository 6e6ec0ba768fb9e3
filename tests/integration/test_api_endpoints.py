"""API endpoint integration tests.

Tests the FastAPI endpoints end to end over an in-memory record store.
"""

from decimal import Decimal

import jwt
import pytest
from httpx import AsyncClient

from tess_backoffice.services import UserService
from tess_backoffice.store import Collection

pytestmark = pytest.mark.asyncio


class TestHealthEndpoints:
    """Test health check endpoints."""

    async def test_health_check(self, client: AsyncClient):
        """Health endpoint should report a healthy store."""
        response = await client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["store"] == "healthy"
        assert "timestamp" in data

    async def test_readiness_check(self, client: AsyncClient):
        response = await client.get("/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    async def test_liveness_check(self, client: AsyncClient):
        response = await client.get("/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"


class TestAuth:
    """Test login, signup and caller identification."""

    async def test_admin_login(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/login",
            json={"username": "admin", "password": "admin", "role": "admin"},
        )
        assert response.status_code == 200

        data = response.json()
        assert data["tokenType"] == "bearer"
        assert data["user"]["username"] == "admin"
        assert data["user"]["role"] == "admin"
        assert "passwordHash" not in data["user"]

        response = await client.get(
            "/api/v1/auth/me", headers={"Authorization": f"Bearer {data['accessToken']}"}
        )
        assert response.status_code == 200
        assert response.json()["id"] == data["user"]["id"]

    async def test_login_to_wrong_portal(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/login",
            json={"username": "admin", "password": "admin", "role": "employee"},
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid username or password"

    async def test_signup_then_login(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/signup",
            json={"username": "jose", "password": "password1", "confirmPassword": "password1"},
        )
        assert response.status_code == 201
        assert response.json()["role"] == "employee"

        response = await client.post(
            "/api/v1/auth/login",
            json={"username": "jose", "password": "password1", "role": "employee"},
        )
        assert response.status_code == 200

    async def test_signup_validation_error_shape(self, client: AsyncClient, recwarn):
        response = await client.post(
            "/api/v1/auth/signup",
            json={"username": "jose", "password": "password1", "confirmPassword": "password2"},
        )
        assert response.status_code == 422

        data = response.json()
        assert data["code"] == "VALIDATION_FAILED"
        assert data["errors"] == ["Passwords do not match"]
        assert not [w for w in recwarn if "HTTP_422" in str(w.message)]

    async def test_missing_credentials(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me")
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_garbage_token(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/auth/me", headers={"Authorization": "Bearer ghost"}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid or expired token"

    @pytest.mark.parametrize("guess", ["1", "2", "admin"])
    async def test_guessed_user_id_cannot_create_admins(
        self, client: AsyncClient, store, guess: str
    ):
        response = await client.post(
            "/api/v1/auth/admins",
            headers={"X-User-ID": guess},
            json={
                "username": "intruder",
                "password": "password1",
                "confirmPassword": "password1",
                "name": "Intruder",
            },
        )
        assert response.status_code == 401
        assert "intruder" not in {u.username for u in store.read_all(Collection.USERS)}

    async def test_real_admin_id_is_not_a_credential(
        self, client: AsyncClient, admin_user
    ):
        response = await client.get(
            "/api/v1/auth/me", headers={"X-User-ID": admin_user.id}
        )
        assert response.status_code == 401

        response = await client.get(
            "/api/v1/auth/me", headers={"Authorization": f"Bearer {admin_user.id}"}
        )
        assert response.status_code == 401

    async def test_forged_token_cannot_create_admins(self, client: AsyncClient, admin_user):
        forged = jwt.encode(
            {"sub": admin_user.id, "role": "admin", "exp": 4102444800},
            "some-other-key-that-is-long-enough-for-hs256",
            algorithm="HS256",
        )
        response = await client.post(
            "/api/v1/auth/admins",
            headers={"Authorization": f"Bearer {forged}"},
            json={
                "username": "intruder",
                "password": "password1",
                "confirmPassword": "password1",
                "name": "Intruder",
            },
        )
        assert response.status_code == 401

    async def test_expired_token(self, client: AsyncClient, admin_headers: dict, clock):
        clock.advance(60 * 60)

        response = await client.get("/api/v1/auth/me", headers=admin_headers)
        assert response.status_code == 401

    async def test_admin_can_create_admins(self, client: AsyncClient, admin_headers: dict):
        response = await client.post(
            "/api/v1/auth/admins",
            headers=admin_headers,
            json={
                "username": "boss",
                "password": "password1",
                "confirmPassword": "password1",
                "name": "Boss",
            },
        )
        assert response.status_code == 201
        assert response.json()["role"] == "admin"

    async def test_employee_cannot_create_admins(
        self, client: AsyncClient, employee_headers: dict
    ):
        response = await client.post(
            "/api/v1/auth/admins",
            headers=employee_headers,
            json={
                "username": "boss",
                "password": "password1",
                "confirmPassword": "password1",
                "name": "Boss",
            },
        )
        assert response.status_code == 403


class TestInventoryAndSales:
    """Test product management and point of sale."""

    async def _create_product(self, client: AsyncClient, headers: dict, **overrides) -> dict:
        body = {"name": "Chicken Siomai", "sku": "SIO-1", "quantity": 20, "price": "150"}
        body.update(overrides)
        response = await client.post("/api/v1/inventory", headers=headers, json=body)
        assert response.status_code == 201
        return response.json()

    async def test_create_product(self, client: AsyncClient, admin_headers: dict):
        product = await self._create_product(client, admin_headers, criticalLevel=5)

        assert product["sku"] == "SIO-1"
        assert product["criticalLevel"] == 5
        assert product["status"] == "in-stock"

    async def test_duplicate_sku(self, client: AsyncClient, admin_headers: dict):
        await self._create_product(client, admin_headers)

        response = await client.post(
            "/api/v1/inventory",
            headers=admin_headers,
            json={"name": "Other", "sku": "SIO-1"},
        )
        assert response.status_code == 422
        assert response.json()["errors"] == ["SKU already exists"]

    async def test_employees_can_view_inventory(
        self, client: AsyncClient, admin_headers: dict, employee_headers: dict
    ):
        await self._create_product(client, admin_headers)

        response = await client.get("/api/v1/inventory", headers=employee_headers)
        assert response.status_code == 200
        assert response.json()["total"] == 1

        response = await client.delete(
            "/api/v1/inventory/anything", headers=employee_headers
        )
        assert response.status_code == 403

    async def test_complete_sale(self, client: AsyncClient, admin_headers: dict):
        product = await self._create_product(client, admin_headers)

        response = await client.post(
            "/api/v1/sales",
            headers=admin_headers,
            json={
                "items": [{"productId": product["id"], "quantity": 2}],
                "paymentMethod": "gcash",
            },
        )
        assert response.status_code == 201

        sale = response.json()
        assert Decimal(str(sale["total"])) == Decimal("300")
        assert sale["customerName"] == "Walk-in Customer"

        response = await client.get(
            f"/api/v1/inventory/{product['id']}", headers=admin_headers
        )
        assert response.json()["quantity"] == 18

    async def test_cart_summary(self, client: AsyncClient, admin_headers: dict):
        product = await self._create_product(client, admin_headers)

        response = await client.post(
            "/api/v1/sales/cart-summary",
            headers=admin_headers,
            json={"items": [{"productId": product["id"], "quantity": 1}]},
        )
        assert response.status_code == 200

        data = response.json()
        assert Decimal(str(data["tax"])) == Decimal("18.00")
        assert Decimal(str(data["total"])) == Decimal("168.00")

    async def test_insufficient_stock(self, client: AsyncClient, admin_headers: dict, store):
        product = await self._create_product(client, admin_headers, quantity=1)

        response = await client.post(
            "/api/v1/sales",
            headers=admin_headers,
            json={"items": [{"productId": product["id"], "quantity": 5}]},
        )
        assert response.status_code == 422
        assert response.json()["errors"] == [
            "Insufficient stock for Chicken Siomai. Available: 1"
        ]
        assert store.read_all(Collection.SALES) == []


class TestPayrollFlow:
    """Production through salary generation to payment."""

    async def _submit(self, client: AsyncClient, headers: dict, unit_price: str) -> dict:
        response = await client.post(
            "/api/v1/production",
            headers=headers,
            json={
                "date": "2024-01-10",
                "itemName": "Siomai",
                "quantity": "2",
                "unitPrice": unit_price,
            },
        )
        assert response.status_code == 201
        return response.json()

    async def test_full_payment_flow(
        self, client: AsyncClient, admin_headers: dict, employee_headers: dict
    ):
        record = await self._submit(client, employee_headers, "100")
        assert Decimal(str(record["totalEarnings"])) == Decimal("200.00")
        assert record["paymentStatus"] == "unpaid"

        response = await client.post(
            "/api/v1/salaries/generate", headers=admin_headers, json={"period": "current"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        salary = data["created"][0]
        assert salary["period"] == "January 2024"
        assert Decimal(str(salary["netPay"])) == Decimal("200.00")

        # Nothing new to generate
        response = await client.post(
            "/api/v1/salaries/generate", headers=admin_headers, json={}
        )
        assert response.json()["count"] == 0

        for target in ("Processing", "Paid"):
            response = await client.post(
                f"/api/v1/salaries/{salary['id']}/status",
                headers=admin_headers,
                json={"status": target, "paymentMethod": "Cash", "notes": "January payout"},
            )
            assert response.status_code == 200

        paid = response.json()
        assert paid["salary"]["status"] == "Paid"
        assert paid["updatedProductionIds"] == [record["id"]]

        response = await client.get("/api/v1/production/mine", headers=employee_headers)
        (mine,) = response.json()["items"]
        assert mine["status"] == "paid"
        assert mine["paymentStatus"] == "paid"

        response = await client.get("/api/v1/salaries/mine", headers=employee_headers)
        assert response.json()["total"] == 1

    async def test_adjustment_after_primary(
        self, client: AsyncClient, admin_headers: dict, employee_headers: dict
    ):
        await self._submit(client, employee_headers, "100")
        await client.post("/api/v1/salaries/generate", headers=admin_headers, json={})
        await self._submit(client, employee_headers, "30")

        response = await client.post(
            "/api/v1/salaries/generate", headers=admin_headers, json={}
        )
        (adjustment,) = response.json()["created"]
        assert adjustment["period"] == "January 2024 (Adjustment)"
        assert Decimal(str(adjustment["baseSalary"])) == Decimal("0")

        response = await client.get("/api/v1/salaries", headers=admin_headers)
        data = response.json()
        assert data["total"] == 2
        assert data["periodLabel"] == "January 2024"
        assert Decimal(str(data["totals"]["netPay"])) == Decimal("260.00")

    async def test_skipping_processing_is_rejected(
        self, client: AsyncClient, admin_headers: dict, employee_headers: dict
    ):
        await self._submit(client, employee_headers, "100")
        response = await client.post(
            "/api/v1/salaries/generate", headers=admin_headers, json={}
        )
        salary_id = response.json()["created"][0]["id"]

        response = await client.post(
            f"/api/v1/salaries/{salary_id}/status",
            headers=admin_headers,
            json={"status": "Paid"},
        )
        assert response.status_code == 409
        assert response.json()["code"] == "INVALID_TRANSITION"

    async def test_paid_salary_is_locked(
        self, client: AsyncClient, admin_headers: dict, employee_headers: dict
    ):
        await self._submit(client, employee_headers, "100")
        response = await client.post(
            "/api/v1/salaries/generate", headers=admin_headers, json={}
        )
        salary_id = response.json()["created"][0]["id"]
        for target in ("Processing", "Paid"):
            await client.post(
                f"/api/v1/salaries/{salary_id}/status",
                headers=admin_headers,
                json={"status": target},
            )

        response = await client.patch(
            f"/api/v1/salaries/{salary_id}", headers=admin_headers, json={"bonuses": "50"}
        )
        assert response.status_code == 409
        assert response.json()["code"] == "RECORD_LOCKED"

    async def test_edit_adjustments(
        self, client: AsyncClient, admin_headers: dict, employee_headers: dict
    ):
        await self._submit(client, employee_headers, "100")
        response = await client.post(
            "/api/v1/salaries/generate", headers=admin_headers, json={}
        )
        salary_id = response.json()["created"][0]["id"]

        response = await client.patch(
            f"/api/v1/salaries/{salary_id}",
            headers=admin_headers,
            json={"bonuses": "50", "deductions": "20"},
        )
        assert response.status_code == 200
        assert Decimal(str(response.json()["netPay"])) == Decimal("230.00")

    async def test_employees_cannot_generate(
        self, client: AsyncClient, employee_headers: dict
    ):
        response = await client.post(
            "/api/v1/salaries/generate", headers=employee_headers, json={}
        )
        assert response.status_code == 403

    async def test_admins_cannot_submit_production(
        self, client: AsyncClient, admin_headers: dict
    ):
        response = await client.post(
            "/api/v1/production",
            headers=admin_headers,
            json={"date": "2024-01-10", "itemName": "Siomai", "quantity": 1, "unitPrice": 1},
        )
        assert response.status_code == 403

    async def test_other_employees_production_is_hidden(
        self, client: AsyncClient, employee_headers: dict, bearer, store, clock, settings
    ):
        record = await self._submit(client, employee_headers, "100")
        other = UserService(store, clock, settings).sign_up_employee(
            "jose", "password1", "password1"
        )

        response = await client.get(
            f"/api/v1/production/{record['id']}", headers=bearer(other)
        )
        assert response.status_code == 404

    async def test_missing_salary(self, client: AsyncClient, admin_headers: dict):
        response = await client.get("/api/v1/salaries/nope", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"


class TestDashboards:
    async def test_employee_dashboard(
        self, client: AsyncClient, employee_headers: dict, employee_user
    ):
        response = await client.get(
            "/api/v1/reports/dashboard/employee", headers=employee_headers
        )
        assert response.status_code == 200

        data = response.json()
        assert data["employeeId"] == employee_user.id
        assert data["latestSalary"] is None

    async def test_admin_dashboard_requires_admin(
        self, client: AsyncClient, employee_headers: dict
    ):
        response = await client.get("/api/v1/reports/dashboard/admin", headers=employee_headers)
        assert response.status_code == 403

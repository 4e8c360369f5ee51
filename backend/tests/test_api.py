"""
HTTP surface tests.

Verifies:
- Unauthenticated requests return 401
- Session cookie login/logout
- Shift and transaction endpoints map domain errors to status codes
- Catalog writes are admin-only
"""

import pytest

from propos.models import Product, Transaction

from conftest import login


class TestUnauthenticatedAccess:

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/auth/me"),
            ("GET", "/api/products"),
            ("POST", "/api/products"),
            ("GET", "/api/categories"),
            ("POST", "/api/categories"),
            ("GET", "/api/shifts/active"),
            ("POST", "/api/shifts"),
            ("POST", "/api/shifts/x/close"),
            ("POST", "/api/transactions"),
            ("GET", "/api/transactions"),
            ("GET", "/api/stats"),
            ("GET", "/api/stats/weekly"),
            ("GET", "/api/stats/categories"),
        ],
    )
    def test_requires_auth(self, client, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"

    def test_health_is_public(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.get_json()["database"] == "ok"


class TestAuth:

    def test_login_sets_cookie_and_me_returns_user(self, app, cashier):
        c = app.test_client()
        resp = login(c, cashier.email)

        assert "password_hash" not in resp.get_json()["user"]
        assert app.config["SESSION_TOKEN_COOKIE"] in resp.headers.get("Set-Cookie", "")
        me = c.get("/api/auth/me")
        assert me.status_code == 200
        assert me.get_json()["user"]["email"] == cashier.email

    def test_wrong_password(self, client, cashier):
        resp = client.post("/api/auth/login", json={"email": cashier.email, "password": "nope"})
        assert resp.status_code == 401

    def test_missing_fields(self, client):
        resp = client.post("/api/auth/login", json={"email": "a@b.c"})
        assert resp.status_code == 400

    def test_logout_revokes_session(self, cashier_client):
        assert cashier_client.post("/api/auth/logout").status_code == 200
        assert cashier_client.get("/api/auth/me").status_code == 401


class TestShiftRoutes:

    def test_open_and_close_shift(self, cashier_client):
        resp = cashier_client.post("/api/shifts", json={"startCash": "100.00"})
        assert resp.status_code == 201
        shift = resp.get_json()
        assert shift["status"] == "open"
        assert shift["totalSales"] == "0.00"

        active = cashier_client.get("/api/shifts/active").get_json()
        assert active["id"] == shift["id"]

        resp = cashier_client.post(f"/api/shifts/{shift['id']}/close", json={"endCash": "100.00"})
        assert resp.status_code == 200
        assert resp.get_json()["status"] == "closed"
        assert cashier_client.get("/api/shifts/active").get_json() is None

    def test_second_open_returns_400(self, cashier_client):
        cashier_client.post("/api/shifts", json={"startCash": "100.00"})
        resp = cashier_client.post("/api/shifts", json={"startCash": "50.00"})
        assert resp.status_code == 400

    def test_close_errors(self, app, cashier_client, other_cashier):
        shift_id = cashier_client.post("/api/shifts", json={"startCash": "10"}).get_json()["id"]

        other = app.test_client()
        login(other, other_cashier.email)
        assert other.post(f"/api/shifts/{shift_id}/close", json={"endCash": "1"}).status_code == 403
        assert cashier_client.post("/api/shifts/missing/close", json={"endCash": "1"}).status_code == 404
        assert cashier_client.post(f"/api/shifts/{shift_id}/close", json={}).status_code == 400

        assert cashier_client.post(f"/api/shifts/{shift_id}/close", json={"endCash": "10"}).status_code == 200
        assert cashier_client.post(f"/api/shifts/{shift_id}/close", json={"endCash": "10"}).status_code == 400

    def test_summary(self, cashier_client):
        shift_id = cashier_client.post("/api/shifts", json={"startCash": "25.00"}).get_json()["id"]
        resp = cashier_client.get(f"/api/shifts/{shift_id}/summary")
        assert resp.status_code == 200
        assert resp.get_json()["expectedCash"] == "25.00"


def _sale_payload(shift_id, product, quantity=2, **header):
    body = {"shiftId": shift_id, "paymentMethod": "cash"}
    body.update(header)
    return {
        "transaction": body,
        "items": [{
            "productId": product.id,
            "productName": product.name,
            "quantity": quantity,
            "price": "3.50",
        }],
    }


class TestTransactionRoutes:

    @pytest.fixture
    def shift_id(self, cashier_client):
        return cashier_client.post("/api/shifts", json={"startCash": "100.00"}).get_json()["id"]

    def test_commit_sale(self, cashier_client, shift_id, espresso, db_session):
        payload = _sale_payload(shift_id, espresso, subtotal="7.00", tax="0.00", total="7.00")
        resp = cashier_client.post("/api/transactions", json=payload)

        assert resp.status_code == 201, resp.get_json()
        body = resp.get_json()
        assert body["total"] == "7.00"
        assert body["items"][0]["productName"] == "Espresso Intenso"

        db_session.expire_all()
        assert db_session.get(Product, espresso.id).stock == 43
        shift = cashier_client.get("/api/shifts/active").get_json()
        assert shift["totalSales"] == "7.00"
        assert shift["transactionCount"] == 1

        listed = cashier_client.get("/api/transactions?limit=5").get_json()
        assert [t["id"] for t in listed] == [body["id"]]
        by_shift = cashier_client.get(f"/api/transactions/shift/{shift_id}").get_json()
        assert len(by_shift) == 1
        items = cashier_client.get(f"/api/transactions/{body['id']}/items").get_json()
        assert items[0]["quantity"] == 2

    def test_tax_policy_applied_when_tax_omitted(self, app, cashier_client, shift_id, espresso):
        app.config.update(TAX_ENABLED=True, TAX_RATE_PERCENT="10")
        try:
            resp = cashier_client.post("/api/transactions", json=_sale_payload(shift_id, espresso))
        finally:
            app.config.update(TAX_ENABLED=False)
        assert resp.status_code == 201
        assert resp.get_json()["tax"] == "0.70"
        assert resp.get_json()["total"] == "7.70"

    def test_insufficient_stock(self, cashier_client, shift_id, espresso, db_session):
        espresso.stock = 1
        db_session.commit()

        resp = cashier_client.post("/api/transactions", json=_sale_payload(shift_id, espresso))

        assert resp.status_code == 400
        assert "Espresso Intenso" in resp.get_json()["error"]
        db_session.expire_all()
        assert db_session.get(Product, espresso.id).stock == 1
        assert db_session.query(Transaction).count() == 0

    def test_closed_shift(self, cashier_client, shift_id, espresso):
        cashier_client.post(f"/api/shifts/{shift_id}/close", json={"endCash": "100"})
        resp = cashier_client.post("/api/transactions", json=_sale_payload(shift_id, espresso))
        assert resp.status_code == 400

    def test_other_cashiers_shift(self, app, shift_id, other_cashier, espresso):
        other = app.test_client()
        login(other, other_cashier.email)
        resp = other.post("/api/transactions", json=_sale_payload(shift_id, espresso))
        assert resp.status_code == 403

    def test_shift_history_limited_to_owner_and_admin(
        self, app, cashier_client, admin_client, shift_id, other_cashier, espresso
    ):
        sale_id = cashier_client.post(
            "/api/transactions", json=_sale_payload(shift_id, espresso)
        ).get_json()["id"]

        other = app.test_client()
        login(other, other_cashier.email)
        assert other.get(f"/api/transactions/shift/{shift_id}").status_code == 403
        assert other.get(f"/api/transactions/{sale_id}/items").status_code == 403

        assert len(admin_client.get(f"/api/transactions/shift/{shift_id}").get_json()) == 1
        assert len(admin_client.get(f"/api/transactions/{sale_id}/items").get_json()) == 1

        assert cashier_client.get("/api/transactions/shift/missing").status_code == 404
        assert cashier_client.get("/api/transactions/missing/items").status_code == 404

    def test_unknown_product(self, cashier_client, shift_id):
        payload = {
            "transaction": {"shiftId": shift_id, "paymentMethod": "cash"},
            "items": [{"productId": "ghost", "quantity": 1, "price": "1.00"}],
        }
        assert cashier_client.post("/api/transactions", json=payload).status_code == 404

    @pytest.mark.parametrize("payload", [
        {},
        {"transaction": {"paymentMethod": "cash"}, "items": []},
        {"transaction": {"shiftId": "x", "paymentMethod": "cash"}, "items": "nope"},
    ])
    def test_malformed_body(self, cashier_client, payload):
        assert cashier_client.post("/api/transactions", json=payload).status_code == 400


class TestCatalogRoutes:

    def test_admin_creates_and_patches_product(self, admin_client):
        resp = admin_client.post("/api/products", json={
            "name": "Matcha Green Tea Latte", "category": "Tea", "price": "5.00", "stock": 15,
        })
        assert resp.status_code == 201
        product = resp.get_json()
        assert product["price"] == "5.00"

        resp = admin_client.patch(f"/api/products/{product['id']}", json={"stock": 20})
        assert resp.status_code == 200
        assert resp.get_json()["stock"] == 20

        assert admin_client.get(f"/api/products/{product['id']}").status_code == 200
        assert admin_client.delete(f"/api/products/{product['id']}").status_code == 204
        assert admin_client.get(f"/api/products/{product['id']}").status_code == 404

    @pytest.mark.parametrize("payload", [
        {"name": "X", "category": "Y"},
        {"name": "X", "category": "Y", "price": "-1"},
        {"name": "X", "category": "Y", "price": "1.00", "stock": -3},
        {"name": "", "category": "Y", "price": "1.00"},
        {"name": "X", "category": "Y", "price": "1.00", "sku": "nope"},
    ])
    def test_invalid_product(self, admin_client, payload):
        assert admin_client.post("/api/products", json=payload).status_code == 400

    def test_cashier_cannot_write_catalog(self, cashier_client, espresso, coffee_category):
        assert cashier_client.get("/api/products").status_code == 200
        assert cashier_client.post("/api/products", json={"name": "X", "category": "Y", "price": "1"}).status_code == 403
        assert cashier_client.patch(f"/api/products/{espresso.id}", json={"stock": 1}).status_code == 403
        assert cashier_client.delete(f"/api/categories/{coffee_category.id}").status_code == 403

    def test_category_rules(self, admin_client, espresso):
        resp = admin_client.post("/api/categories", json={"name": "Coffee"})
        assert resp.status_code == 201
        category_id = resp.get_json()["id"]

        assert admin_client.post("/api/categories", json={"name": "Coffee"}).status_code == 409
        assert admin_client.delete(f"/api/categories/{category_id}").status_code == 409

        admin_client.delete(f"/api/products/{espresso.id}")
        assert admin_client.delete(f"/api/categories/{category_id}").status_code == 204
        assert admin_client.delete(f"/api/categories/{category_id}").status_code == 404


class TestStatsRoutes:

    def test_stats_after_sale(self, cashier_client, espresso):
        shift_id = cashier_client.post("/api/shifts", json={"startCash": "0"}).get_json()["id"]
        cashier_client.post("/api/transactions", json=_sale_payload(shift_id, espresso))

        stats = cashier_client.get("/api/stats?days=7").get_json()
        assert stats["total"] == "7.00"
        assert stats["count"] == 1

        weekly = cashier_client.get("/api/stats/weekly").get_json()
        assert len(weekly) == 7
        assert weekly[-1]["sales"] == "7.00"

        top = cashier_client.get("/api/stats/categories").get_json()
        assert top == [{"name": "Espresso Intenso", "sales": "7.00"}]

    def test_invalid_days(self, cashier_client):
        assert cashier_client.get("/api/stats?days=0").status_code == 400

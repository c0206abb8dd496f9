"""Back-office endpoints: order management, users and the dashboard."""

import pytest

pytestmark = pytest.mark.integration

ADMIN_ORDERS_URL = "/api/v1/admin/orders/"


@pytest.fixture()
def placed_order(customer_client, margherita):
    response = customer_client.post(
        "/api/v1/orders/",
        {"items": [{"customizations": margherita}]},
        format="json",
    )
    return response.json()["order"]


def status_url(order):
    return f"{ADMIN_ORDERS_URL}{order['id']}/status/"


class TestAdminOrders:
    def test_customer_forbidden(self, customer_client):
        assert customer_client.get(ADMIN_ORDERS_URL).status_code == 403

    def test_lists_every_order(self, admin_client, placed_order):
        body = admin_client.get(ADMIN_ORDERS_URL).json()
        assert body["total"] == 1
        result = body["results"][0]
        assert result["order_number"] == placed_order["order_number"]
        assert result["item_count"] == 1
        assert result["customer"]["username"] == "alice"

    def test_filter_by_status(self, admin_client, placed_order):
        assert admin_client.get(ADMIN_ORDERS_URL, {"status": "confirmed"}).json()["total"] == 1
        assert admin_client.get(ADMIN_ORDERS_URL, {"status": "pending"}).json()["total"] == 0

    def test_filter_paid_and_order_number(self, admin_client, placed_order):
        assert admin_client.get(ADMIN_ORDERS_URL, {"paid": "true"}).json()["total"] == 1
        assert admin_client.get(ADMIN_ORDERS_URL, {"paid": "false"}).json()["total"] == 0
        assert admin_client.get(ADMIN_ORDERS_URL, {"order_number": "pz0000"}).json()["total"] == 1

    def test_search_by_order_number(self, admin_client, placed_order):
        body = admin_client.get(ADMIN_ORDERS_URL, {"search": "PZ000001"}).json()
        assert body["total"] == 1

    def test_retrieve_any_order(self, admin_client, placed_order):
        response = admin_client.get(f"{ADMIN_ORDERS_URL}{placed_order['id']}/")
        assert response.status_code == 200

    def test_walk_the_state_machine(self, admin_client, placed_order, notifier, customer):
        for target in ("in_kitchen", "out_for_delivery", "delivered"):
            response = admin_client.put(
                status_url(placed_order), {"status": target}, format="json"
            )
            assert response.status_code == 200
            assert response.json()["status"] == target

        statuses = [e.status for e in notifier.events_for(customer.pk)]
        assert statuses == ["confirmed", "in_kitchen", "out_for_delivery", "delivered"]

    def test_invalid_transition_conflicts(self, admin_client, placed_order):
        response = admin_client.put(
            status_url(placed_order), {"status": "delivered"}, format="json"
        )
        assert response.status_code == 409

    def test_unknown_status_rejected(self, admin_client, placed_order):
        response = admin_client.put(
            status_url(placed_order), {"status": "baking"}, format="json"
        )
        assert response.status_code == 400

    def test_admin_cancel_restores_stock(self, admin_client, placed_order, thin_crust):
        response = admin_client.patch(
            status_url(placed_order), {"status": "cancelled"}, format="json"
        )
        assert response.status_code == 200
        thin_crust.refresh_from_db()
        assert thin_crust.stock == 50

    def test_unknown_order(self, admin_client):
        url = f"{ADMIN_ORDERS_URL}0190a000-0000-7000-8000-000000000000/status/"
        response = admin_client.put(url, {"status": "in_kitchen"}, format="json")
        assert response.status_code == 404


class TestAdminUsers:
    def test_lists_customers_only(self, admin_client, customer, other_customer):
        body = admin_client.get("/api/v1/admin/users/").json()
        assert body["total"] == 2
        assert {u["username"] for u in body["results"]} == {"alice", "bob"}

    def test_deactivated_customer_cannot_order(
        self, admin_client, customer, customer_client, margherita
    ):
        response = admin_client.put(
            f"/api/v1/admin/users/{customer.id}/status/",
            {"is_active": False},
            format="json",
        )
        assert response.status_code == 200
        assert response.json()["is_active"] is False

        customer.refresh_from_db()
        customer_client.force_authenticate(user=customer)
        response = customer_client.post(
            "/api/v1/orders/",
            {"items": [{"customizations": margherita}]},
            format="json",
        )
        assert response.status_code == 400

    def test_create_admin(self, admin_client):
        response = admin_client.post(
            "/api/v1/admin/users/create-admin/",
            {"username": "chef", "email": "chef@example.com", "password": "kitchen1"},
            format="json",
        )
        assert response.status_code == 201
        assert response.json()["role"] == "admin"

    def test_customer_cannot_manage_users(self, customer_client):
        assert customer_client.get("/api/v1/admin/users/").status_code == 403


class TestDashboard:
    def test_summary(self, admin_client, placed_order, item_factory):
        item_factory("Olives", "vegetable", 40, stock=1, threshold=20)

        response = admin_client.get("/api/v1/admin/dashboard/")

        assert response.status_code == 200
        body = response.json()
        assert body["order_counts"]["confirmed"] == 1
        assert body["order_counts"]["delivered"] == 0
        assert body["total_orders"] == 1
        assert body["revenue"] == "210.00"
        assert [o["order_number"] for o in body["recent_orders"]] == ["PZ000001"]
        assert [i["name"] for i in body["low_stock_items"]] == ["Olives"]

    def test_customer_forbidden(self, customer_client):
        assert customer_client.get("/api/v1/admin/dashboard/").status_code == 403

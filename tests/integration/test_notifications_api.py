import pytest

pytestmark = pytest.mark.integration


def test_inbox_returns_and_clears_updates(customer_client, margherita):
    customer_client.post(
        "/api/v1/orders/", {"items": [{"customizations": margherita}]}, format="json"
    )

    body = customer_client.get("/api/v1/notifications/").json()
    assert body["count"] == 1
    [update] = body["results"]
    assert update["status"] == "confirmed"
    assert update["message"] == "Order confirmed (payment disabled mode)"

    assert customer_client.get("/api/v1/notifications/").json() == {
        "count": 0,
        "results": [],
    }


def test_inbox_is_per_user(customer_client, margherita, api_client, other_customer):
    customer_client.post(
        "/api/v1/orders/", {"items": [{"customizations": margherita}]}, format="json"
    )
    api_client.force_authenticate(user=other_customer)
    assert api_client.get("/api/v1/notifications/").json()["count"] == 0

"""Request correlation ids across storefront and back-office calls."""

import logging
import uuid

import pytest

pytestmark = pytest.mark.integration

ORDERS_URL = "/api/v1/orders/"


def events_named(caplog, name):
    return [
        record.msg
        for record in caplog.records
        if isinstance(record.msg, dict) and record.msg.get("event") == name
    ]


class TestCorrelationIdMiddleware:
    def test_checkout_logs_share_the_callers_id(self, customer_client, margherita, caplog):
        cid = "checkout-7f3a"
        with caplog.at_level(logging.INFO):
            response = customer_client.post(
                ORDERS_URL,
                {"items": [{"customizations": margherita, "quantity": 1}]},
                format="json",
                HTTP_X_REQUEST_ID=cid,
            )

        assert response.status_code == 201
        assert response["X-Request-ID"] == cid
        persisted = events_named(caplog, "order.persisted")
        assert persisted
        assert all(entry["correlation_id"] == cid for entry in persisted)

    def test_finished_line_reports_status_and_timing(self, customer_client, caplog):
        with caplog.at_level(logging.INFO):
            customer_client.get("/api/v1/catalog/", HTTP_X_REQUEST_ID="menu-1")

        (finished,) = events_named(caplog, "request_finished")
        assert finished["correlation_id"] == "menu-1"
        assert finished["status_code"] == 200
        assert finished["path"] == "/api/v1/catalog/"
        assert finished["duration_ms"] >= 0

    def test_generated_ids_differ_per_request(self, customer_client):
        first = customer_client.get(ORDERS_URL)["X-Request-ID"]
        second = customer_client.get(ORDERS_URL)["X-Request-ID"]

        assert first != second
        assert uuid.UUID(first).version == 4

    def test_previous_id_does_not_leak(self, customer_client, caplog):
        customer_client.get(ORDERS_URL, HTTP_X_REQUEST_ID="earlier-call")
        caplog.clear()
        with caplog.at_level(logging.INFO):
            customer_client.get(ORDERS_URL)

        (started,) = events_named(caplog, "request_started")
        assert started["correlation_id"] != "earlier-call"

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/api/v1/admin/dashboard/", 403),
            ("/api/v1/orders/0190a000-0000-7000-8000-000000000000/", 404),
        ],
    )
    def test_error_responses_echo_id(self, customer_client, path, expected):
        response = customer_client.get(path, HTTP_X_REQUEST_ID="support-ticket-42")
        assert response.status_code == expected
        assert response["X-Request-ID"] == "support-ticket-42"

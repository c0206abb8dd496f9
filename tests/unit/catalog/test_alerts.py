from __future__ import annotations

from unittest.mock import patch

import pytest
from django.core import mail

from modules.catalog.alerts import render_low_stock_report, send_low_stock_alert
from modules.catalog.models import Category
from modules.catalog.tasks import check_low_stock

pytestmark = pytest.mark.unit


@pytest.fixture()
def low_items(item_factory):
    return [
        item_factory("Thin Crust", Category.BASE, 150, stock=4, threshold=10),
        item_factory("Pepperoni", Category.MEAT, 60, stock=2, threshold=20),
    ]


class TestLowStockAlert:
    def test_report_groups_by_category(self, low_items):
        text, html = render_low_stock_report(low_items)
        assert "Base" in text and "Meat" in text
        assert "- Pepperoni: 2 remaining (threshold: 20)" in text
        assert "<h2>Low Stock Alert</h2>" in html

    def test_email_sent_to_admin(self, low_items):
        assert send_low_stock_alert(low_items) is True
        assert len(mail.outbox) == 1
        message = mail.outbox[0]
        assert message.to == ["admin@pizzeria.test"]
        assert message.subject == "Low Stock Alert - 2 items need restocking"

    def test_no_items_no_email(self):
        assert send_low_stock_alert([]) is False
        assert mail.outbox == []

    def test_missing_admin_email_skips(self, settings, low_items):
        settings.ADMIN_EMAIL = ""
        assert send_low_stock_alert(low_items) is False

    def test_mail_failure_is_swallowed(self, low_items):
        with patch("modules.catalog.alerts.send_mail", side_effect=OSError("smtp down")):
            assert send_low_stock_alert(low_items) is False


class TestCheckLowStockTask:
    def test_task_reports_and_notifies(self, low_items, item_factory):
        item_factory("Plenty", Category.SAUCE, 20, stock=100)
        result = check_low_stock.delay()
        assert result.successful()
        assert result.result == {"low_stock_items": 2, "notified": True}
        assert len(mail.outbox) == 1

    def test_task_with_healthy_stock(self, thin_crust):
        assert check_low_stock() == {"low_stock_items": 0, "notified": False}

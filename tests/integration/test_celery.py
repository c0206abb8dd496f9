"""Celery wiring and the scheduled low-stock check."""

import pytest
from django.core import mail

from modules.catalog.models import Category

pytestmark = pytest.mark.integration


class TestCeleryConfig:
    def test_celery_app_is_importable(self):
        from config.celery import app

        assert app.main == "pizzeria"

    def test_celery_app_exported_from_init(self):
        from config import celery_app

        assert celery_app.main == "pizzeria"

    def test_celery_serializer_is_json(self, settings):
        assert settings.CELERY_TASK_SERIALIZER == "json"
        assert settings.CELERY_RESULT_SERIALIZER == "json"
        assert settings.CELERY_ACCEPT_CONTENT == ["json"]

    def test_celery_timezone_matches_django(self, settings):
        assert settings.CELERY_TIMEZONE == settings.TIME_ZONE

    def test_low_stock_check_is_scheduled_hourly(self, settings):
        entry = settings.CELERY_BEAT_SCHEDULE["catalog-low-stock-hourly"]
        assert entry["task"] == "catalog.check_low_stock"
        assert entry["schedule"].minute == {0}

    def test_task_is_registered(self):
        from config.celery import app

        app.loader.import_default_modules()
        assert "catalog.check_low_stock" in app.tasks


class TestLowStockTask:
    def test_runs_eagerly_and_emails_admin(self, item_factory):
        from modules.catalog.tasks import check_low_stock

        item_factory("Bacon", Category.MEAT, 65, stock=3, threshold=20)
        result = check_low_stock.delay()

        assert result.successful()
        assert result.result == {"low_stock_items": 1, "notified": True}
        assert "Bacon" in mail.outbox[0].body

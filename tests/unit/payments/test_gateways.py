from __future__ import annotations

import hashlib
import hmac
import importlib.util
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests
from django.core.exceptions import ImproperlyConfigured

import config.settings as config_settings_module
from modules.payments import get_gateway, reset_gateway
from modules.payments.exceptions import PaymentGatewayError
from modules.payments.fake_adapter import FakeGateway
from modules.payments.port import compute_signature
from modules.payments.razorpay_adapter import RazorpayGateway

pytestmark = pytest.mark.unit


def test_signature_is_hmac_sha256_of_order_and_payment():
    expected = hmac.new(b"s3cret", b"order_1|pay_1", hashlib.sha256).hexdigest()
    assert compute_signature("s3cret", "order_1", "pay_1") == expected


class TestFakeGateway:
    def test_intent_is_deterministic_per_receipt(self):
        gateway = FakeGateway()
        intent = gateway.create_payment_intent(21000, "INR", "PZ000001", {"k": "v"})
        assert intent.id == "order_test_PZ000001"
        assert intent.amount_minor == 21000
        assert intent.notes == {"k": "v"}
        assert gateway.calls[0]["method"] == "create_payment_intent"

    def test_configured_failure(self):
        gateway = FakeGateway()
        gateway.configure(should_fail=True)
        with pytest.raises(PaymentGatewayError):
            gateway.create_payment_intent(100, "INR", "PZ000001")

    def test_verify_signature(self):
        gateway = FakeGateway(secret="abc")
        good = gateway.sign("order_1", "pay_1")
        assert gateway.verify_signature("order_1", "pay_1", good)
        assert not gateway.verify_signature("order_1", "pay_2", good)
        assert not gateway.verify_signature("order_1", "pay_1", "tampered")


class TestRazorpayGateway:
    def make(self, response=None, error=None):
        session = MagicMock(spec=requests.Session)
        if error is not None:
            session.post.side_effect = error
        else:
            session.post.return_value = response
        gateway = RazorpayGateway(
            key_id="rzp_key",
            key_secret="rzp_secret",
            api_url="https://gateway.test/v1/",
            timeout=3,
            session=session,
        )
        return gateway, session

    def test_create_intent_posts_order(self):
        response = MagicMock()
        response.json.return_value = {
            "id": "order_Abc",
            "amount": 21000,
            "currency": "INR",
            "receipt": "PZ000001",
            "notes": {"order_id": "x"},
        }
        gateway, session = self.make(response)

        intent = gateway.create_payment_intent(21000, "INR", "PZ000001", {"order_id": "x"})

        assert intent.id == "order_Abc"
        session.post.assert_called_once_with(
            "https://gateway.test/v1/orders",
            json={
                "amount": 21000,
                "currency": "INR",
                "receipt": "PZ000001",
                "notes": {"order_id": "x"},
            },
            auth=("rzp_key", "rzp_secret"),
            timeout=3,
        )

    def test_http_error_becomes_gateway_error(self):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("401")
        gateway, _ = self.make(response)
        with pytest.raises(PaymentGatewayError):
            gateway.create_payment_intent(100, "INR", "PZ000001")

    def test_network_error_becomes_gateway_error(self):
        gateway, _ = self.make(error=requests.ConnectionError("refused"))
        with pytest.raises(PaymentGatewayError):
            gateway.create_payment_intent(100, "INR", "PZ000001")

    def test_verify_signature_uses_key_secret(self):
        gateway, _ = self.make(MagicMock())
        signature = compute_signature("rzp_secret", "order_Abc", "pay_9")
        assert gateway.verify_signature("order_Abc", "pay_9", signature)
        assert not gateway.verify_signature("order_Abc", "pay_9", "")


class TestGatewayFactory:
    def test_test_mode_uses_fake(self, settings):
        reset_gateway()
        settings.PAYMENTS_TEST_MODE = True
        assert isinstance(get_gateway(), FakeGateway)

    def test_live_mode_uses_razorpay(self, settings):
        reset_gateway()
        settings.PAYMENTS_TEST_MODE = False
        gateway = get_gateway()
        assert isinstance(gateway, RazorpayGateway)
        assert gateway.key_id == "rzp_test_key"

    def test_live_mode_without_secret_refuses_to_start(self, settings):
        reset_gateway()
        settings.PAYMENTS_TEST_MODE = False
        settings.RAZORPAY_KEY_SECRET = ""
        with pytest.raises(ImproperlyConfigured):
            get_gateway()

    def test_live_mode_without_key_id_refuses_to_start(self, settings):
        reset_gateway()
        settings.PAYMENTS_TEST_MODE = False
        settings.RAZORPAY_KEY_ID = ""
        with pytest.raises(ImproperlyConfigured):
            get_gateway()


def test_test_mode_is_off_unless_configured(monkeypatch):
    """Loads a private copy of the production settings module."""
    monkeypatch.setenv("SECRET_KEY", "settings-default-check")
    monkeypatch.delenv("PAYMENTS_TEST_MODE", raising=False)
    monkeypatch.delenv("PAYMENTS_ENABLED", raising=False)

    path = Path(config_settings_module.__file__)
    spec = importlib.util.spec_from_file_location("_settings_defaults", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    assert module.PAYMENTS_TEST_MODE is False
    assert module.PAYMENTS_ENABLED is False

"""Payment gateway factory.

``get_gateway()`` picks the adapter from settings on first use: the fake
gateway only when ``PAYMENTS_TEST_MODE`` is switched on explicitly, Razorpay
otherwise.  Live mode without credentials is a configuration error.
``set_gateway()`` / ``reset_gateway()`` swap it out in tests.
"""

from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from modules.payments.fake_adapter import FakeGateway
from modules.payments.port import PaymentGateway

_current_gateway: PaymentGateway | None = None


def _build_default() -> PaymentGateway:
    if settings.PAYMENTS_TEST_MODE:
        return FakeGateway(secret=settings.RAZORPAY_KEY_SECRET or "test-secret")

    if not settings.RAZORPAY_KEY_ID or not settings.RAZORPAY_KEY_SECRET:
        raise ImproperlyConfigured(
            "RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET are required unless "
            "PAYMENTS_TEST_MODE is enabled."
        )

    from modules.payments.razorpay_adapter import RazorpayGateway

    return RazorpayGateway(
        key_id=settings.RAZORPAY_KEY_ID,
        key_secret=settings.RAZORPAY_KEY_SECRET,
        api_url=settings.RAZORPAY_API_URL,
        timeout=settings.RAZORPAY_TIMEOUT_SECONDS,
    )


def get_gateway() -> PaymentGateway:
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = _build_default()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    global _current_gateway
    _current_gateway = None

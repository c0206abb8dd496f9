"""Fake payment gateway used in test mode and by the test suite.

Intent ids are deterministic per receipt; signatures are real HMACs over
the configured secret so callers can produce valid ones.
"""

from __future__ import annotations

from modules.payments.exceptions import PaymentGatewayError
from modules.payments.port import PaymentGateway, PaymentIntent, compute_signature


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self, secret: str = "test-secret") -> None:
        self.secret = secret
        self.should_fail: bool = False
        self.calls: list[dict] = []

    def configure(self, should_fail: bool) -> None:
        self.should_fail = should_fail

    def sign(self, gateway_order_id: str, payment_id: str) -> str:
        return compute_signature(self.secret, gateway_order_id, payment_id)

    def create_payment_intent(
        self,
        amount_minor: int,
        currency: str,
        receipt: str,
        notes: dict | None = None,
    ) -> PaymentIntent:
        self.calls.append(
            {
                "method": "create_payment_intent",
                "amount_minor": amount_minor,
                "currency": currency,
                "receipt": receipt,
                "notes": notes or {},
            }
        )
        if self.should_fail:
            raise PaymentGatewayError("Fake gateway configured to fail")
        return PaymentIntent(
            id=f"order_test_{receipt}",
            amount_minor=amount_minor,
            currency=currency,
            receipt=receipt,
            notes=notes or {},
        )

    def verify_signature(
        self, gateway_order_id: str, payment_id: str, signature: str
    ) -> bool:
        self.calls.append(
            {
                "method": "verify_signature",
                "gateway_order_id": gateway_order_id,
                "payment_id": payment_id,
            }
        )
        return signature == self.sign(gateway_order_id, payment_id)

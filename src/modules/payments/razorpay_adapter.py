"""Razorpay adapter.

Talks to the Orders API over HTTPS with basic auth (key id / key secret).
Signature verification is local: Razorpay signs ``order_id|payment_id``
with the key secret.
"""

from __future__ import annotations

import hmac

import requests
import structlog

from modules.payments.exceptions import PaymentGatewayError
from modules.payments.port import PaymentGateway, PaymentIntent, compute_signature

logger = structlog.get_logger(__name__)


class RazorpayGateway(PaymentGateway):
    def __init__(
        self,
        key_id: str,
        key_secret: str,
        api_url: str = "https://api.razorpay.com/v1",
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.key_id = key_id
        self.key_secret = key_secret
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def create_payment_intent(
        self,
        amount_minor: int,
        currency: str,
        receipt: str,
        notes: dict | None = None,
    ) -> PaymentIntent:
        log = logger.bind(receipt=receipt, amount_minor=amount_minor)
        payload = {
            "amount": amount_minor,
            "currency": currency,
            "receipt": receipt,
            "notes": notes or {},
        }
        try:
            response = self.session.post(
                f"{self.api_url}/orders",
                json=payload,
                auth=(self.key_id, self.key_secret),
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as exc:
            log.error("payment.intent_failed", error=str(exc))
            raise PaymentGatewayError(f"Could not create payment intent: {exc}") from exc

        log.info("payment.intent_created", gateway_order_id=body.get("id"))
        return PaymentIntent(
            id=body["id"],
            amount_minor=int(body.get("amount", amount_minor)),
            currency=body.get("currency", currency),
            receipt=body.get("receipt", receipt),
            notes=body.get("notes") or {},
        )

    def verify_signature(
        self, gateway_order_id: str, payment_id: str, signature: str
    ) -> bool:
        expected = compute_signature(self.key_secret, gateway_order_id, payment_id)
        return hmac.compare_digest(expected, signature or "")

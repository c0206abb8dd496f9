"""Payment gateway port (abstract interface).

Every adapter registers payment intents and verifies the signature the
gateway hands back to the client after checkout.  Swapping between the
fake (test mode) and Razorpay adapters never touches order code.
"""

from __future__ import annotations

import hashlib
import hmac
from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class PaymentIntent:
    """A payment intent registered with the gateway."""

    id: str
    amount_minor: int
    currency: str
    receipt: str
    notes: dict = field(default_factory=dict)


def compute_signature(secret: str, gateway_order_id: str, payment_id: str) -> str:
    """HMAC-SHA256 hex digest over ``"<gateway_order_id>|<payment_id>"``."""
    message = f"{gateway_order_id}|{payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_payment_intent(
        self,
        amount_minor: int,
        currency: str,
        receipt: str,
        notes: dict | None = None,
    ) -> PaymentIntent:
        """Register a payment intent; ``receipt`` doubles as idempotency key."""
        ...

    @abstractmethod
    def verify_signature(
        self,
        gateway_order_id: str,
        payment_id: str,
        signature: str,
    ) -> bool:
        """Return True when ``signature`` authenticates the payment."""
        ...

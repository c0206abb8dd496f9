"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
HTTP responses.  Stock shortfalls surface as
``modules.catalog.exceptions.InsufficientStock`` and gateway outages as
``modules.payments.exceptions.PaymentGatewayError``.
"""

from __future__ import annotations


class OrderNotFound(Exception):
    """The requested order does not exist."""


class OrderValidationError(Exception):
    """The order request is malformed (no resolvable items, inactive user...)."""


class OrderPermissionDenied(Exception):
    """The acting user does not own the order."""


class InvalidOrderStatus(Exception):
    """The requested status transition is not allowed from the current status."""


class PaymentVerificationFailed(Exception):
    """The gateway signature did not match; the order is left untouched."""


class OrderNumberUnavailable(Exception):
    """No free order number could be allocated within the retry budget."""

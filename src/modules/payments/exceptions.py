"""Payments domain exceptions."""


class PaymentGatewayError(Exception):
    """The payment gateway could not be reached or rejected the request."""

    def __init__(self, message: str = "Payment gateway unavailable") -> None:
        super().__init__(message)

class PaymentError(Exception):
    """Base exception for payment flow errors."""


class PaymentDeclinedError(PaymentError):
    """Raised by a payment processor when the card payment did not succeed."""

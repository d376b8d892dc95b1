from abc import ABC, abstractmethod


class BasePaymentProcessor(ABC):
    """Contract for the external card payment processor."""

    @abstractmethod
    async def confirm_card_payment(self, client_secret: str) -> str:
        """Confirm the payment intent identified by ``client_secret``.

        Returns:
            The processor's transaction id.

        Raises:
            PaymentDeclinedError: if the processor reports a failed payment.
        """

from doctranslator.api.client import BackendClient
from doctranslator.api.exceptions import ApiError
from doctranslator.billing.base import BasePaymentProcessor
from doctranslator.billing.exceptions import PaymentError
from doctranslator.billing.models import PaymentOutcome
from doctranslator.logging.logger import Log

PAYMENT_SUCCESS_MESSAGE = "Thank you for your payment. You can now translate your files."
PAYMENT_FAILED_MESSAGE = "Payment failed. Please try again."


class PaymentFlow:
    """Create intent -> processor confirms the card -> backend records it."""

    def __init__(
        self,
        client: BackendClient,
        processor: BasePaymentProcessor,
        purpose: str = "file-translation",
    ) -> None:
        self._client = client
        self._processor = processor
        self._purpose = purpose

    async def pay(self, user_id: str) -> PaymentOutcome:
        """Run the whole payment. Never raises; the outcome carries the message."""
        if not user_id:
            return PaymentOutcome(succeeded=False, message="Please sign in to pay")
        try:
            client_secret = await self._client.create_payment_intent(user_id)
            transaction_id = await self._processor.confirm_card_payment(client_secret)
        except PaymentError as exc:
            Log.warning(f"Card payment for user {user_id} failed: {exc}")
            return PaymentOutcome(succeeded=False, message=f"Payment failed: {exc}")
        except ApiError as exc:
            Log.error(f"Could not start payment for user {user_id}: {exc}")
            return PaymentOutcome(succeeded=False, message=PAYMENT_FAILED_MESSAGE)

        try:
            await self._client.confirm_payment(user_id, transaction_id, self._purpose)
        except ApiError as exc:
            Log.error(f"Payment {transaction_id} could not be recorded: {exc}")
            return PaymentOutcome(
                succeeded=False,
                message=PAYMENT_FAILED_MESSAGE,
                transaction_id=transaction_id,
            )

        Log.info(f"Payment {transaction_id} confirmed for user {user_id}")
        return PaymentOutcome(
            succeeded=True,
            message=PAYMENT_SUCCESS_MESSAGE,
            transaction_id=transaction_id,
        )

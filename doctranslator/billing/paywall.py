from doctranslator.api.client import BackendClient
from doctranslator.api.exceptions import ApiError
from doctranslator.billing.models import PaywallStatus
from doctranslator.logging.logger import Log


class PaywallMonitor:
    """Keeps the last known payment status of the signed-in user.

    Refreshed only on the named triggers below, never implicitly.
    """

    def __init__(self, client: BackendClient) -> None:
        self._client = client
        self._status: PaywallStatus | None = None

    @property
    def status(self) -> PaywallStatus | None:
        return self._status

    @property
    def can_translate(self) -> bool:
        """True unless a fetched status says no requests remain."""
        return self._status is None or self._status.can_translate

    async def refresh(self) -> PaywallStatus | None:
        try:
            status = await self._client.has_paid()
        except ApiError as exc:
            Log.warning(f"Payment status check failed, keeping last status: {exc}")
            return self._status
        self._status = status
        Log.info(
            f"Payment status: paid={status.has_paid}, "
            f"remaining={status.remaining_requests}"
        )
        return status

    async def on_signed_in(self) -> PaywallStatus | None:
        return await self.refresh()

    async def on_payment_popup_closed(self) -> PaywallStatus | None:
        return await self.refresh()

    async def on_upload_completed(self) -> PaywallStatus | None:
        return await self.refresh()

    def reset(self) -> None:
        self._status = None

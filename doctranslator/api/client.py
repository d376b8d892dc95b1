from collections.abc import Callable
from typing import Any

import httpx

from doctranslator.api.exceptions import (
    BackendError,
    BackendUnreachableError,
    ResponseFormatError,
)
from doctranslator.api.parsers import (
    build_document,
    build_document_page,
    build_paywall_status,
    extract_document_id,
)
from doctranslator.billing.models import PaywallStatus
from doctranslator.documents.models import Document, DocumentPage
from doctranslator.logging.logger import Log

UNREACHABLE_MESSAGE = (
    "Unable to reach the server. Please check your connection and try again."
)

TokenProvider = Callable[[], str | None]


class BackendClient:
    """Async client for the document backend's REST API.

    Authenticated calls pick the bearer token from ``token_provider`` at
    request time, so a sign-in or sign-out is visible to the next call
    without rebuilding the client.
    """

    def __init__(
        self,
        *,
        base_url: str,
        token_provider: TokenProvider,
        timeout_seconds: float = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token_provider = token_provider
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # --- auth -----------------------------------------------------------

    async def sign_up(self, email: str, password: str, username: str) -> dict[str, Any]:
        body = await self._request(
            "POST",
            "/api/auth/signup",
            fallback="Failed to sign up",
            authenticated=False,
            json={"email": email, "password": password, "username": username},
        )
        return body if isinstance(body, dict) else {}

    async def sign_in(self, email: str, password: str) -> dict[str, Any]:
        """Returns the raw ``{token, user}`` payload."""
        body = await self._request(
            "POST",
            "/api/auth/login",
            fallback="Failed to sign in",
            authenticated=False,
            json={"email": email, "password": password},
        )
        return body if isinstance(body, dict) else {}

    async def check_username(self, username: str) -> bool:
        """Return True if the username is already taken."""
        body = await self._request(
            "GET",
            "/api/auth/check-username",
            fallback="Failed to check username",
            authenticated=False,
            params={"username": username},
        )
        if not isinstance(body, dict):
            raise ResponseFormatError("Username check response must be an object")
        return bool(body.get("exists", False))

    async def resend_verification(self, email: str) -> dict[str, Any]:
        body = await self._request(
            "GET",
            "/api/auth/resend-verification",
            fallback="Failed to resend verification email",
            authenticated=False,
            params={"email": email},
        )
        return body if isinstance(body, dict) else {}

    async def get_user(self, token: str | None = None) -> dict[str, Any]:
        """Fetch the current user's profile.

        Args:
            token: Explicit bearer token; defaults to the stored session token.
        """
        body = await self._request(
            "GET",
            "/api/auth/get-user",
            fallback="Failed to fetch user details",
            token=token,
        )
        if not isinstance(body, dict):
            raise ResponseFormatError("User profile must be an object")
        return body

    async def has_paid(self) -> PaywallStatus:
        body = await self._request(
            "GET", "/api/auth/has-paid", fallback="Failed to check payment status"
        )
        return build_paywall_status(body)

    # --- documents ------------------------------------------------------

    async def list_documents(self, page: int, limit: int) -> DocumentPage:
        body = await self._request(
            "GET",
            "/api/documents",
            fallback="Failed to load documents",
            params={"page": page, "limit": limit},
        )
        return build_document_page(body)

    async def get_document(self, document_id: str) -> Document:
        body = await self._request(
            "GET",
            f"/api/documents/{document_id}",
            fallback="Failed to load document",
        )
        return build_document(body)

    async def save_document(self, payload: dict[str, Any]) -> str:
        """Persist a document and return the backend-assigned id."""
        body = await self._request(
            "POST", "/api/documents", fallback="Failed to save document", json=payload
        )
        return extract_document_id(body)

    async def delete_document(self, document_id: str) -> None:
        await self._request(
            "DELETE",
            f"/api/documents/{document_id}",
            fallback="Failed to delete document",
        )

    async def find_by_hash(self, text_hash: str) -> Document | None:
        """Look up a stored document by content hash. 404 means no match."""
        try:
            body = await self._request(
                "GET", f"/hash/{text_hash}", fallback="Failed to look up document"
            )
        except BackendError as exc:
            if exc.status_code == 404:
                return None
            raise
        return build_document(body)

    # --- subscription ---------------------------------------------------

    async def create_payment_intent(self, user_id: str) -> str:
        """Return the payment processor's client secret for a new intent."""
        body = await self._request(
            "POST",
            "/subscription/create-payment-intent",
            fallback="Failed to create payment",
            json={"userId": user_id},
        )
        secret = body.get("clientSecret") if isinstance(body, dict) else None
        if not isinstance(secret, str) or not secret:
            raise ResponseFormatError("Payment intent response has no clientSecret")
        return secret

    async def confirm_payment(self, user_id: str, transaction_id: str, purpose: str) -> None:
        await self._request(
            "POST",
            "/subscription/confirm-payment",
            fallback="Failed to confirm payment",
            json={"userId": user_id, "transactionId": transaction_id, "purpose": purpose},
        )

    # --- transport ------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        fallback: str,
        authenticated: bool = True,
        token: str | None = None,
        **kwargs: Any,
    ) -> Any:
        headers: dict[str, str] = {}
        if authenticated:
            bearer = token or self._token_provider()
            if bearer:
                headers["Authorization"] = f"Bearer {bearer}"

        try:
            response = await self._client.request(method, path, headers=headers, **kwargs)
        except httpx.TransportError as exc:
            Log.warning(f"{method} {path} failed without response: {exc}")
            raise BackendUnreachableError(UNREACHABLE_MESSAGE) from exc

        if response.is_error:
            message = self._error_message(response, fallback)
            Log.warning(f"{method} {path} -> {response.status_code}: {message}")
            raise BackendError(message, response.status_code)

        Log.debug(f"{method} {path} -> {response.status_code}")
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ResponseFormatError(f"{method} {path} returned invalid JSON") from exc

    @staticmethod
    def _error_message(response: httpx.Response, fallback: str) -> str:
        try:
            body = response.json()
        except ValueError:
            return fallback
        if isinstance(body, dict):
            message = body.get("message")
            if isinstance(message, str) and message.strip():
                return message
        return fallback

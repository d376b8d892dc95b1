import asyncio
from typing import Any

from doctranslator.api.client import BackendClient
from doctranslator.api.exceptions import ApiError, BackendError, BackendUnreachableError
from doctranslator.auth.exceptions import InvalidInputError, LockedOutError, UsernameTakenError
from doctranslator.auth.lockout import SignInLockout, Sleep
from doctranslator.auth.models import AuthErrorKind, AuthSnapshot, AuthStatus
from doctranslator.auth.validation import is_valid_email, validate_sign_in, validate_sign_up
from doctranslator.logging.logger import Log
from doctranslator.session.exceptions import StorageError
from doctranslator.session.models import Session
from doctranslator.session.store import SessionStore

SIGN_UP_SUCCESS_MESSAGE = (
    "Account created successfully! Please check your inbox and click the "
    "link to verify your account."
)
SIGN_IN_SUCCESS_MESSAGE = "Login successful"
MISSING_TOKEN_MESSAGE = "Login failed. Please try again."


class AuthFlowController:
    """Drives sign-up, sign-in, sign-out and session hydration.

    States: anonymous -> submitting -> authenticated | error | locked.
    Every operation returns an ``AuthSnapshot``; no error escapes to the
    caller. Sign-in failures (rejected credentials or an unreachable
    backend) count toward the lockout, sign-up failures do not.
    """

    def __init__(
        self,
        client: BackendClient,
        session_store: SessionStore,
        *,
        max_failed_attempts: int = 4,
        lockout_seconds: int = 300,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._client = client
        self._session_store = session_store
        self._lockout = SignInLockout(
            max_attempts=max_failed_attempts,
            lockout_seconds=lockout_seconds,
            on_unlock=self._on_unlock,
            sleep=sleep,
        )
        self._status = AuthStatus.ANONYMOUS
        self._user: dict[str, Any] | None = None
        self._message: str | None = None
        self._error_kind: AuthErrorKind | None = None
        self._verification_pending = False
        self._hydration: asyncio.Task[AuthSnapshot] | None = None
        self._unsubscribe = session_store.subscribe(self._on_session_changed)

    @property
    def lockout(self) -> SignInLockout:
        return self._lockout

    def snapshot(self) -> AuthSnapshot:
        return AuthSnapshot(
            status=self._status,
            user=self._user,
            message=self._message,
            error_kind=self._error_kind,
            failure_count=self._lockout.failure_count,
            lock_remaining_seconds=self._lockout.remaining_seconds,
            verification_pending=self._verification_pending,
            remembered_email=self._remembered_email(),
        )

    async def hydrate(self) -> AuthSnapshot:
        """Restore an authenticated state from a stored token, if any."""
        try:
            session = self._session_store.load()
        except StorageError as exc:
            return self._storage_failed(exc)
        if session is None:
            self._set_anonymous()
            return self.snapshot()

        try:
            user = await self._client.get_user(session.token)
        except ApiError as exc:
            Log.warning(f"Stored session rejected, signing out: {exc}")
            return self.sign_out()

        self._user = user
        self._transition(AuthStatus.AUTHENTICATED)
        return self.snapshot()

    async def submit_sign_up(
        self,
        email: str,
        password: str,
        confirm_password: str,
        username: str,
    ) -> AuthSnapshot:
        if self._status is AuthStatus.SUBMITTING:
            return self.snapshot()
        self._verification_pending = False
        try:
            validate_sign_up(email, password, confirm_password, username)
            self._transition(AuthStatus.SUBMITTING)
            if await self._client.check_username(username.strip()):
                raise UsernameTakenError("Username already taken")
            await self._client.sign_up(email.strip(), password, username.strip())
        except InvalidInputError as exc:
            return self._fail(AuthErrorKind.INVALID_INPUT, str(exc))
        except UsernameTakenError as exc:
            return self._fail(AuthErrorKind.USERNAME_TAKEN, str(exc))
        except BackendUnreachableError as exc:
            return self._fail(AuthErrorKind.UNREACHABLE, str(exc))
        except ApiError as exc:
            return self._fail(AuthErrorKind.BACKEND_REJECTED, str(exc))

        Log.info(f"Account created for {email.strip()}, verification pending")
        self._verification_pending = True
        self._transition(AuthStatus.ANONYMOUS, message=SIGN_UP_SUCCESS_MESSAGE)
        return self.snapshot()

    async def resend_verification(self, email: str) -> AuthSnapshot:
        if not is_valid_email(email):
            return self._fail(
                AuthErrorKind.INVALID_INPUT, "Please enter a valid email address"
            )
        try:
            body = await self._client.resend_verification(email.strip())
        except BackendUnreachableError as exc:
            return self._fail(AuthErrorKind.UNREACHABLE, str(exc))
        except ApiError as exc:
            return self._fail(AuthErrorKind.BACKEND_REJECTED, str(exc))
        message = body.get("message")
        self._transition(
            self._status,
            message=message if isinstance(message, str) else "Verification email sent",
        )
        return self.snapshot()

    async def submit_sign_in(
        self,
        email: str,
        password: str,
        remember_me: bool = False,
    ) -> AuthSnapshot:
        if self._status is AuthStatus.SUBMITTING:
            return self.snapshot()
        try:
            self._ensure_not_locked()
            validate_sign_in(email, password)
        except LockedOutError as exc:
            return self._fail(AuthErrorKind.RATE_LIMITED, str(exc), AuthStatus.LOCKED)
        except InvalidInputError as exc:
            return self._fail(AuthErrorKind.INVALID_INPUT, str(exc))

        email = email.strip()
        self._transition(AuthStatus.SUBMITTING)
        try:
            payload = await self._client.sign_in(email, password)
        except BackendUnreachableError as exc:
            return self._sign_in_failed(AuthErrorKind.UNREACHABLE, str(exc))
        except BackendError as exc:
            return self._sign_in_failed(AuthErrorKind.CREDENTIAL_REJECTED, str(exc))
        except ApiError as exc:
            return self._sign_in_failed(AuthErrorKind.BACKEND_REJECTED, str(exc))

        token = payload.get("token")
        if not isinstance(token, str) or not token:
            return self._sign_in_failed(
                AuthErrorKind.CREDENTIAL_REJECTED, MISSING_TOKEN_MESSAGE
            )

        user = payload.get("user")
        user = user if isinstance(user, dict) else {}
        user_id = user.get("_id") or user.get("id") or ""
        self._user = user
        self._lockout.record_success()
        self._verification_pending = False
        # Set before saving so the store notification is not taken for an
        # external login.
        self._transition(AuthStatus.AUTHENTICATED, message=SIGN_IN_SUCCESS_MESSAGE)
        try:
            self._session_store.save(
                Session(
                    token=token,
                    user_id=str(user_id),
                    remember_me=remember_me,
                    last_email=email if remember_me else None,
                )
            )
        except StorageError as exc:
            snapshot = self._storage_failed(exc)
            self._discard_partial_session()
            return snapshot
        Log.info(f"Signed in as {email}")
        return self.snapshot()

    def sign_out(self) -> AuthSnapshot:
        """Drop the session. Safe to call when nobody is signed in.

        If the stored token cannot be removed the controller still leaves
        the authenticated state and reports ``storage_failed``.
        """
        try:
            self._session_store.clear()
        except StorageError as exc:
            return self._storage_failed(exc)
        self._set_anonymous()
        return self.snapshot()

    async def settle(self) -> AuthSnapshot:
        """Wait for a hydration started by an externally written session."""
        task, self._hydration = self._hydration, None
        if task is None:
            return self.snapshot()
        return await task

    def dispose(self) -> None:
        """Stop the lockout countdown and detach from the session store."""
        self._lockout.cancel()
        self._unsubscribe()
        if self._hydration is not None and not self._hydration.done():
            self._hydration.cancel()
        self._hydration = None

    def _ensure_not_locked(self) -> None:
        if self._lockout.is_locked:
            raise LockedOutError(
                "Too many failed attempts. Try again in "
                f"{self._lockout.remaining_minutes} minutes."
            )

    def _sign_in_failed(self, kind: AuthErrorKind, message: str) -> AuthSnapshot:
        Log.warning(
            f"Sign-in failed ({kind.value}), attempt {self._lockout.failure_count + 1}"
        )
        if self._lockout.record_failure():
            return self._fail(
                AuthErrorKind.RATE_LIMITED,
                "Too many failed attempts. Try again in "
                f"{self._lockout.remaining_minutes} minutes.",
                AuthStatus.LOCKED,
            )
        return self._fail(kind, message)

    def _fail(
        self,
        kind: AuthErrorKind,
        message: str,
        status: AuthStatus = AuthStatus.ERROR,
    ) -> AuthSnapshot:
        self._error_kind = kind
        self._message = message
        self._status = status
        Log.info(f"Auth state -> {status.value}: {message}")
        return self.snapshot()

    def _storage_failed(self, exc: StorageError) -> AuthSnapshot:
        Log.error(f"Session storage failed: {exc}")
        self._user = None
        self._verification_pending = False
        return self._fail(AuthErrorKind.STORAGE_FAILED, str(exc))

    def _discard_partial_session(self) -> None:
        try:
            self._session_store.clear()
        except StorageError as exc:
            Log.warning(f"Could not remove partially written session: {exc}")

    def _remembered_email(self) -> str | None:
        try:
            return self._session_store.remembered_email()
        except StorageError as exc:
            Log.warning(f"Could not read remembered email: {exc}")
            return None

    def _transition(self, status: AuthStatus, message: str | None = None) -> None:
        if status is not self._status:
            Log.info(f"Auth state {self._status.value} -> {status.value}")
        self._status = status
        self._message = message
        self._error_kind = None

    def _set_anonymous(self) -> None:
        self._user = None
        self._verification_pending = False
        self._transition(
            AuthStatus.LOCKED if self._lockout.is_locked else AuthStatus.ANONYMOUS
        )

    def _on_unlock(self) -> None:
        if self._status is AuthStatus.LOCKED:
            self._transition(AuthStatus.ANONYMOUS)

    def _on_session_changed(self, session: Session | None) -> None:
        if session is None:
            if self._status is AuthStatus.AUTHENTICATED:
                Log.info("Session removed, leaving authenticated state")
                self._set_anonymous()
            return
        if self._status in (AuthStatus.AUTHENTICATED, AuthStatus.SUBMITTING):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            Log.debug("Session appeared outside an event loop, hydrate() later")
            return
        self._hydration = loop.create_task(self.hydrate())

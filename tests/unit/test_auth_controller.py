import asyncio
from unittest.mock import MagicMock

from doctranslator.api.client import BackendClient
from doctranslator.api.exceptions import BackendError, BackendUnreachableError
from doctranslator.auth.controller import AuthFlowController
from doctranslator.auth.models import AuthErrorKind, AuthStatus
from doctranslator.session.exceptions import StorageError
from doctranslator.session.memory_storage import MemoryStorage
from doctranslator.session.models import Session
from doctranslator.session.store import SessionStore

EMAIL = "user@example.com"
PASSWORD = "secret123"


async def _instant_sleep(_seconds: float) -> None:
    await asyncio.sleep(0)


class FailingStorage(MemoryStorage):
    """Memory storage that raises StorageError for selected operations."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        super().__init__(initial)
        self.fail_set_key: str | None = None
        self.fail_remove_key: str | None = None
        self.fail_reads = False

    def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise StorageError("Failed to read session storage: permission denied")
        return super().get(key)

    def set(self, key: str, value: str) -> None:
        if key == self.fail_set_key:
            raise StorageError("Failed to write session storage: disk full")
        super().set(key, value)

    def remove(self, key: str) -> None:
        if key == self.fail_remove_key:
            raise StorageError("Failed to write session storage: disk full")
        super().remove(key)


def _make_controller(
    storage: MemoryStorage | None = None,
) -> tuple[AuthFlowController, MagicMock, SessionStore, MemoryStorage]:
    storage = storage or MemoryStorage()
    store = SessionStore(storage)
    client = MagicMock(spec=BackendClient)
    client.sign_in.return_value = {"token": "tok-1", "user": {"_id": "u1", "email": EMAIL}}
    client.get_user.return_value = {"_id": "u1", "email": EMAIL}
    client.check_username.return_value = False
    client.sign_up.return_value = {"message": "created"}
    controller = AuthFlowController(client, store, sleep=_instant_sleep)
    return controller, client, store, storage


class TestHydrate:
    def test_no_stored_token_is_anonymous(self) -> None:
        controller, client, _store, _storage = _make_controller()
        snapshot = asyncio.run(controller.hydrate())
        assert snapshot.status is AuthStatus.ANONYMOUS
        client.get_user.assert_not_called()

    def test_valid_token_authenticates(self) -> None:
        controller, client, _store, _storage = _make_controller(
            MemoryStorage({"authToken": "stored"})
        )
        snapshot = asyncio.run(controller.hydrate())
        assert snapshot.status is AuthStatus.AUTHENTICATED
        assert snapshot.user == {"_id": "u1", "email": EMAIL}
        client.get_user.assert_called_once_with("stored")

    def test_rejected_token_clears_session(self) -> None:
        controller, client, store, _storage = _make_controller(
            MemoryStorage({"authToken": "expired"})
        )
        client.get_user.side_effect = BackendError("jwt expired", 401)
        snapshot = asyncio.run(controller.hydrate())
        assert snapshot.status is AuthStatus.ANONYMOUS
        assert store.load() is None

    def test_unreadable_storage_is_reported(self) -> None:
        storage = FailingStorage({"authToken": "stored"})
        controller, client, _store, _storage = _make_controller(storage)
        storage.fail_reads = True

        snapshot = asyncio.run(controller.hydrate())

        assert snapshot.status is AuthStatus.ERROR
        assert snapshot.error_kind is AuthErrorKind.STORAGE_FAILED
        assert "permission denied" in (snapshot.message or "")
        assert snapshot.remembered_email is None
        client.get_user.assert_not_called()


class TestSignIn:
    def test_success_stores_token_from_response(self) -> None:
        controller, client, store, _storage = _make_controller()
        snapshot = asyncio.run(controller.submit_sign_in(EMAIL, PASSWORD))
        assert snapshot.status is AuthStatus.AUTHENTICATED
        assert snapshot.message == "Login successful"
        session = store.load()
        assert session is not None
        assert session.token == "tok-1"
        assert session.user_id == "u1"
        client.sign_in.assert_called_once_with(EMAIL, PASSWORD)

    def test_without_remember_me_no_email_persists(self) -> None:
        controller, _client, _store, storage = _make_controller(
            MemoryStorage({"rememberMe": "true", "lastEmail": "old@example.com"})
        )
        asyncio.run(controller.submit_sign_in(EMAIL, PASSWORD, remember_me=False))
        assert storage.get("lastEmail") is None
        assert storage.get("rememberMe") is None

    def test_with_remember_me_email_persists(self) -> None:
        controller, _client, _store, storage = _make_controller()
        snapshot = asyncio.run(controller.submit_sign_in(EMAIL, PASSWORD, remember_me=True))
        assert storage.get("lastEmail") == EMAIL
        assert snapshot.remembered_email == EMAIL

    def test_invalid_input_never_calls_backend(self) -> None:
        controller, client, _store, _storage = _make_controller()
        snapshot = asyncio.run(controller.submit_sign_in("not-an-email", PASSWORD))
        assert snapshot.error_kind is AuthErrorKind.INVALID_INPUT
        assert snapshot.status is AuthStatus.ERROR
        assert snapshot.failure_count == 0
        client.sign_in.assert_not_called()

    def test_rejected_credentials_surface_backend_message(self) -> None:
        controller, client, _store, _storage = _make_controller()
        client.sign_in.side_effect = BackendError("Invalid credentials", 401)
        snapshot = asyncio.run(controller.submit_sign_in(EMAIL, PASSWORD))
        assert snapshot.status is AuthStatus.ERROR
        assert snapshot.error_kind is AuthErrorKind.CREDENTIAL_REJECTED
        assert snapshot.message == "Invalid credentials"
        assert snapshot.failure_count == 1

    def test_unreachable_backend_is_reported(self) -> None:
        controller, client, _store, _storage = _make_controller()
        client.sign_in.side_effect = BackendUnreachableError("Unable to reach the server.")
        snapshot = asyncio.run(controller.submit_sign_in(EMAIL, PASSWORD))
        assert snapshot.error_kind is AuthErrorKind.UNREACHABLE

    def test_response_without_token_is_rejected(self) -> None:
        controller, client, store, _storage = _make_controller()
        client.sign_in.return_value = {"user": {}}
        snapshot = asyncio.run(controller.submit_sign_in(EMAIL, PASSWORD))
        assert snapshot.error_kind is AuthErrorKind.CREDENTIAL_REJECTED
        assert store.load() is None

    def test_success_resets_failure_count(self) -> None:
        controller, client, _store, _storage = _make_controller()
        client.sign_in.side_effect = [
            BackendError("Invalid credentials", 401),
            {"token": "tok-1", "user": {"_id": "u1"}},
        ]

        async def scenario() -> None:
            await controller.submit_sign_in(EMAIL, PASSWORD)
            snapshot = await controller.submit_sign_in(EMAIL, PASSWORD)
            assert snapshot.failure_count == 0

        asyncio.run(scenario())

    def test_storage_failure_rolls_back_to_error(self) -> None:
        storage = FailingStorage()
        storage.fail_set_key = "userId"
        controller, _client, store, _storage = _make_controller(storage)

        snapshot = asyncio.run(controller.submit_sign_in(EMAIL, PASSWORD))

        assert snapshot.status is AuthStatus.ERROR
        assert snapshot.error_kind is AuthErrorKind.STORAGE_FAILED
        assert snapshot.message == "Failed to write session storage: disk full"
        assert snapshot.user is None
        assert snapshot.failure_count == 0
        assert store.load() is None


class TestLockout:
    def test_three_failures_do_not_lock(self) -> None:
        controller, client, _store, _storage = _make_controller()
        client.sign_in.side_effect = BackendError("Invalid credentials", 401)

        async def scenario() -> None:
            for _ in range(3):
                snapshot = await controller.submit_sign_in(EMAIL, PASSWORD)
            assert snapshot.status is AuthStatus.ERROR
            assert snapshot.failure_count == 3

        asyncio.run(scenario())

    def test_fourth_failure_locks_and_blocks_backend(self) -> None:
        controller, client, _store, _storage = _make_controller()
        client.sign_in.side_effect = BackendError("Invalid credentials", 401)

        async def scenario() -> None:
            for _ in range(4):
                snapshot = await controller.submit_sign_in(EMAIL, PASSWORD)
            assert snapshot.status is AuthStatus.LOCKED
            assert snapshot.error_kind is AuthErrorKind.RATE_LIMITED
            assert snapshot.lock_remaining_seconds == 300

            again = await controller.submit_sign_in(EMAIL, PASSWORD)
            assert again.status is AuthStatus.LOCKED
            assert "Too many failed attempts" in (again.message or "")
            assert client.sign_in.call_count == 4
            controller.dispose()

        asyncio.run(scenario())

    def test_lock_clears_after_cooldown(self) -> None:
        controller, client, _store, _storage = _make_controller()
        client.sign_in.side_effect = BackendError("Invalid credentials", 401)

        async def scenario() -> None:
            for _ in range(4):
                await controller.submit_sign_in(EMAIL, PASSWORD)
            assert controller.snapshot().status is AuthStatus.LOCKED
            await controller.lockout.wait()
            snapshot = controller.snapshot()
            assert snapshot.status is AuthStatus.ANONYMOUS
            assert snapshot.lock_remaining_seconds == 0
            assert snapshot.failure_count == 0

        asyncio.run(scenario())

    def test_sign_up_failures_do_not_count(self) -> None:
        controller, client, _store, _storage = _make_controller()
        client.sign_up.side_effect = BackendError("Email already registered", 400)

        async def scenario() -> None:
            for _ in range(5):
                snapshot = await controller.submit_sign_up(EMAIL, PASSWORD, PASSWORD, "bob")
            assert snapshot.failure_count == 0
            assert snapshot.status is AuthStatus.ERROR

        asyncio.run(scenario())


class TestSignUp:
    def test_success_leaves_user_unauthenticated(self) -> None:
        controller, client, store, _storage = _make_controller()
        snapshot = asyncio.run(controller.submit_sign_up(EMAIL, PASSWORD, PASSWORD, "bob"))
        assert snapshot.verification_pending is True
        assert snapshot.status is AuthStatus.ANONYMOUS
        assert "verify" in (snapshot.message or "")
        assert store.load() is None
        client.sign_up.assert_called_once_with(EMAIL, PASSWORD, "bob")

    def test_taken_username(self) -> None:
        controller, client, _store, _storage = _make_controller()
        client.check_username.return_value = True
        snapshot = asyncio.run(controller.submit_sign_up(EMAIL, PASSWORD, PASSWORD, "bob"))
        assert snapshot.error_kind is AuthErrorKind.USERNAME_TAKEN
        assert snapshot.message == "Username already taken"
        client.sign_up.assert_not_called()

    def test_mismatched_passwords_never_call_backend(self) -> None:
        controller, client, _store, _storage = _make_controller()
        snapshot = asyncio.run(controller.submit_sign_up(EMAIL, PASSWORD, "other123", "bob"))
        assert snapshot.error_kind is AuthErrorKind.INVALID_INPUT
        client.check_username.assert_not_called()
        client.sign_up.assert_not_called()

    def test_short_username_rejected(self) -> None:
        controller, client, _store, _storage = _make_controller()
        snapshot = asyncio.run(controller.submit_sign_up(EMAIL, PASSWORD, PASSWORD, "bo"))
        assert snapshot.error_kind is AuthErrorKind.INVALID_INPUT
        client.check_username.assert_not_called()


class TestResendVerification:
    def test_reports_backend_message(self) -> None:
        controller, client, _store, _storage = _make_controller()
        client.resend_verification.return_value = {"message": "Verification email resent"}
        snapshot = asyncio.run(controller.resend_verification(EMAIL))
        assert snapshot.message == "Verification email resent"
        client.resend_verification.assert_called_once_with(EMAIL)

    def test_invalid_email(self) -> None:
        controller, client, _store, _storage = _make_controller()
        snapshot = asyncio.run(controller.resend_verification("nope"))
        assert snapshot.error_kind is AuthErrorKind.INVALID_INPUT
        client.resend_verification.assert_not_called()


class TestSignOut:
    def test_clears_session_and_is_idempotent(self) -> None:
        controller, _client, store, _storage = _make_controller()

        async def scenario() -> None:
            await controller.submit_sign_in(EMAIL, PASSWORD)
            assert controller.sign_out().status is AuthStatus.ANONYMOUS
            assert controller.sign_out().status is AuthStatus.ANONYMOUS

        asyncio.run(scenario())
        assert store.load() is None

    def test_storage_failure_still_signs_out_in_memory(self) -> None:
        storage = FailingStorage()
        controller, _client, _store, _storage = _make_controller(storage)

        async def scenario() -> None:
            await controller.submit_sign_in(EMAIL, PASSWORD)
            storage.fail_remove_key = "authToken"
            snapshot = controller.sign_out()
            assert snapshot.status is AuthStatus.ERROR
            assert snapshot.error_kind is AuthErrorKind.STORAGE_FAILED
            assert snapshot.user is None

        asyncio.run(scenario())


class TestExternalSessionChanges:
    def test_external_removal_signs_out(self) -> None:
        controller, _client, store, storage = _make_controller()

        async def scenario() -> None:
            await controller.submit_sign_in(EMAIL, PASSWORD)
            storage.remove("authToken")
            store.sync()
            assert controller.snapshot().status is AuthStatus.ANONYMOUS
            assert controller.snapshot().user is None

        asyncio.run(scenario())

    def test_external_sign_in_hydrates(self) -> None:
        controller, client, store, _storage = _make_controller()

        async def scenario() -> None:
            store.save(Session(token="from-elsewhere", user_id="u1"))
            for _ in range(3):
                await asyncio.sleep(0)
            assert controller.snapshot().status is AuthStatus.AUTHENTICATED

        asyncio.run(scenario())
        client.get_user.assert_called_once_with("from-elsewhere")

    def test_dispose_detaches_from_store(self) -> None:
        controller, client, store, _storage = _make_controller()
        controller.dispose()

        async def scenario() -> None:
            store.save(Session(token="later"))
            await asyncio.sleep(0)

        asyncio.run(scenario())
        client.get_user.assert_not_called()

    def test_settle_returns_external_hydration_result(self) -> None:
        controller, client, store, storage = _make_controller()

        async def scenario() -> None:
            storage.set("authToken", "from-elsewhere")
            assert store.sync() is True
            snapshot = await controller.settle()
            assert snapshot.status is AuthStatus.AUTHENTICATED
            assert (await controller.settle()).status is AuthStatus.AUTHENTICATED

        asyncio.run(scenario())
        client.get_user.assert_called_once_with("from-elsewhere")

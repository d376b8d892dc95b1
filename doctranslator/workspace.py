from pathlib import Path

import httpx

from doctranslator.api.client import BackendClient
from doctranslator.auth.controller import AuthFlowController
from doctranslator.auth.models import AuthErrorKind, AuthSnapshot
from doctranslator.billing.base import BasePaymentProcessor
from doctranslator.billing.models import PaymentOutcome
from doctranslator.billing.payments import PaymentFlow
from doctranslator.billing.paywall import PaywallMonitor
from doctranslator.config.settings import Settings
from doctranslator.documents.manager import DocumentCollectionManager
from doctranslator.documents.models import Document
from doctranslator.extraction.models import UploadedFile
from doctranslator.llm.models import AnalysisResult
from doctranslator.logging.logger import Log
from doctranslator.processor.orchestrator import FileProcessingOrchestrator, build_orchestrator
from doctranslator.session.base import BaseStorage
from doctranslator.session.exceptions import StorageError
from doctranslator.session.json_file_storage import JsonFileStorage
from doctranslator.session.models import Session
from doctranslator.session.store import SessionStore

PAYWALL_MESSAGE = "You have reached the limit; you need to pay for more."
SIGN_IN_REQUIRED_MESSAGE = "Please sign in first."


class Workspace:
    """Wires the controllers together and owns the cross-component triggers.

    Sign-in loads the first document page and the payment status, a
    finished upload refreshes both, and losing the session (sign-out here
    or elsewhere) empties the document cache.
    """

    def __init__(
        self,
        *,
        client: BackendClient,
        session_store: SessionStore,
        auth: AuthFlowController,
        documents: DocumentCollectionManager,
        orchestrator: FileProcessingOrchestrator,
        paywall: PaywallMonitor,
        payment_purpose: str = "file-translation",
    ) -> None:
        self.client = client
        self.session_store = session_store
        self.auth = auth
        self.documents = documents
        self.orchestrator = orchestrator
        self.paywall = paywall
        self.payment_purpose = payment_purpose
        self.notice: str | None = None
        self._unsubscribe = session_store.subscribe(self._on_session_changed)

    async def start(self) -> AuthSnapshot:
        """Restore a stored session and, if valid, load the user's data."""
        snapshot = await self.auth.hydrate()
        if snapshot.is_authenticated:
            await self._load_user_data()
        return snapshot

    async def sign_in(self, email: str, password: str, remember_me: bool = False) -> AuthSnapshot:
        snapshot = await self.auth.submit_sign_in(email, password, remember_me)
        if snapshot.is_authenticated:
            await self._load_user_data()
        return snapshot

    def sign_out(self) -> AuthSnapshot:
        snapshot = self.auth.sign_out()
        if snapshot.error_kind is AuthErrorKind.STORAGE_FAILED:
            # The store never notified, drop the cached data here.
            self._on_session_changed(None)
        return snapshot

    async def upload(self, file: UploadedFile) -> Document | None:
        """Process a file and, on success, refresh the list and payment status."""
        self.notice = None
        if not self.auth.snapshot().is_authenticated:
            self.notice = SIGN_IN_REQUIRED_MESSAGE
            return None
        if not self.paywall.can_translate:
            self.notice = PAYWALL_MESSAGE
            Log.info(f"Upload of {file.name} refused: no requests remaining")
            return None

        document = await self.orchestrator.process(file)
        if document is None:
            self.notice = self.orchestrator.state.error
            return None
        await self.documents.on_upload_completed(document)
        await self.paywall.on_upload_completed()
        return document

    async def preview(self, document_id: str) -> tuple[Document | None, AnalysisResult | None]:
        """Load a stored document's full text and re-run its analysis."""
        document = await self.documents.open_preview(document_id)
        if document is None or not document.original_text:
            return document, None
        analysis = await self.orchestrator.preview_analyze(document.original_text)
        return document, analysis

    def close_preview(self) -> None:
        self.documents.clear_selection()
        self.orchestrator.clear_analysis()

    async def pay(self, processor: BasePaymentProcessor) -> PaymentOutcome:
        """Buy more translations for the signed-in user, then refresh the paywall."""
        session = self.session_store.load()
        flow = PaymentFlow(self.client, processor, self.payment_purpose)
        outcome = await flow.pay(session.user_id if session else "")
        self.notice = outcome.message
        await self.on_payment_popup_closed()
        return outcome

    async def on_payment_popup_closed(self) -> None:
        await self.paywall.on_payment_popup_closed()

    async def sync_session(self) -> bool:
        """Pick up sign-ins/sign-outs made by another client sharing the storage.

        A session written elsewhere is hydrated and, once authenticated, the
        first document page and the payment status are loaded as after a
        local sign-in.

        Returns:
            True if an external change was detected.
        """
        was_authenticated = self.auth.snapshot().is_authenticated
        try:
            changed = self.session_store.sync()
        except StorageError as exc:
            Log.error(f"Could not re-read session storage: {exc}")
            self.notice = str(exc)
            return False
        if not changed:
            return False
        snapshot = await self.auth.settle()
        if snapshot.is_authenticated and not was_authenticated:
            await self._load_user_data()
        return True

    async def aclose(self) -> None:
        self._unsubscribe()
        self.auth.dispose()
        await self.client.aclose()

    async def _load_user_data(self) -> None:
        await self.documents.load_page(1)
        await self.paywall.on_signed_in()

    def _on_session_changed(self, session: Session | None) -> None:
        if session is None:
            self.documents.reset()
            self.paywall.reset()
            self.orchestrator.clear_analysis()


def build_workspace(
    settings: Settings,
    storage: BaseStorage | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Workspace:
    """Build a Workspace with all collaborators configured from settings."""
    session_store = SessionStore(
        storage or JsonFileStorage(Path(settings.session_store_path))
    )
    client = BackendClient(
        base_url=settings.api_base_url,
        token_provider=session_store.token,
        timeout_seconds=settings.api_timeout_seconds,
        transport=transport,
    )
    auth = AuthFlowController(
        client,
        session_store,
        max_failed_attempts=settings.max_failed_sign_in_attempts,
        lockout_seconds=settings.sign_in_lockout_seconds,
    )
    documents = DocumentCollectionManager(
        client,
        is_authenticated=lambda: auth.snapshot().is_authenticated,
        page_size=settings.documents_per_page,
    )
    return Workspace(
        client=client,
        session_store=session_store,
        auth=auth,
        documents=documents,
        orchestrator=build_orchestrator(settings, client),
        paywall=PaywallMonitor(client),
        payment_purpose=settings.payment_purpose,
    )

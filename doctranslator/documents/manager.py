from collections.abc import Callable
from dataclasses import replace

from doctranslator.api.client import BackendClient
from doctranslator.api.exceptions import ApiError
from doctranslator.documents.models import Document, DocumentCollectionState
from doctranslator.logging.logger import Log


class DocumentCollectionManager:
    """Paginated, append-only cache of the signed-in user's documents.

    ``load_page(1)`` replaces the cache, later pages append to it. Every
    listing request gets a sequence number and only the newest request's
    response is applied; a slower, older response is dropped. Failed calls
    leave the cache as it was and record a retryable ``connection_error``.
    """

    def __init__(
        self,
        client: BackendClient,
        is_authenticated: Callable[[], bool],
        page_size: int = 5,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self._client = client
        self._is_authenticated = is_authenticated
        self._state = DocumentCollectionState(page_size=page_size)
        self._request_seq = 0

    @property
    def state(self) -> DocumentCollectionState:
        return self._state

    async def load_page(self, page: int) -> DocumentCollectionState:
        """Fetch one page; page 1 resets the cache, later pages append.

        Raises:
            ValueError: if page < 1.
        """
        if page < 1:
            raise ValueError("page must be >= 1")
        if not self._is_authenticated():
            Log.debug(f"Skipping load of page {page}: not authenticated")
            return self._state

        self._request_seq += 1
        seq = self._request_seq
        page_size = self._state.page_size
        self._state = replace(self._state, is_loading=True)
        Log.info(f"Loading documents page {page} (size {page_size}, request {seq})")

        try:
            result = await self._client.list_documents(page, page_size)
        except ApiError as exc:
            if seq != self._request_seq:
                Log.debug(f"Ignoring failure of superseded request {seq}")
                return self._state
            Log.error(f"Failed to load documents page {page}: {exc}")
            self._state = replace(
                self._state,
                is_loading=False,
                connection_error=str(exc) or "Failed to load documents",
            )
            return self._state

        if seq != self._request_seq:
            Log.debug(f"Discarding stale response for page {page} (request {seq})")
            return self._state

        if page == 1:
            items = tuple(result.documents)
        else:
            items = self._state.items + tuple(result.documents)
        self._state = replace(
            self._state,
            items=items,
            page=page,
            total=result.total,
            has_more=result.has_more,
            connection_error=None,
            is_loading=False,
        )
        Log.info(
            f"Loaded {len(result.documents)} documents "
            f"({len(items)} of {result.total} cached)"
        )
        return self._state

    async def load_more(self) -> DocumentCollectionState:
        if not self._state.has_more:
            return self._state
        return await self.load_page(self._state.page + 1)

    async def retry(self) -> DocumentCollectionState:
        """Reload from page 1 after a connection error."""
        return await self.load_page(1)

    async def set_page_size(self, page_size: int) -> DocumentCollectionState:
        """Change the page size and reload from page 1, dropping the old cache."""
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        Log.info(f"Page size {self._state.page_size} -> {page_size}")
        self._state = replace(
            self._state, page_size=page_size, items=(), page=0, has_more=False
        )
        return await self.load_page(1)

    async def delete(self, document_id: str) -> DocumentCollectionState:
        """Delete a cached document; the cache changes only after the backend confirms."""
        if not any(doc.id == document_id for doc in self._state.items):
            Log.debug(f"Delete of unknown document {document_id} ignored")
            return self._state

        try:
            await self._client.delete_document(document_id)
        except ApiError as exc:
            Log.error(f"Failed to delete document {document_id}: {exc}")
            self._state = replace(
                self._state, connection_error=str(exc) or "Failed to delete document"
            )
            return self._state

        selected = self._state.selected
        if selected is not None and selected.id == document_id:
            selected = None
        self._state = replace(
            self._state,
            items=tuple(doc for doc in self._state.items if doc.id != document_id),
            total=max(self._state.total - 1, 0),
            selected=selected,
        )
        Log.info(f"Deleted document {document_id}")
        return self._state

    def select(self, document: Document) -> DocumentCollectionState:
        self._state = replace(self._state, selected=document)
        return self._state

    def clear_selection(self) -> DocumentCollectionState:
        self._state = replace(self._state, selected=None)
        return self._state

    async def open_preview(self, document_id: str) -> Document | None:
        """Select a document and lazily load its full text.

        On failure the error is logged and the current selection is kept.
        """
        try:
            document = await self._client.get_document(document_id)
        except ApiError as exc:
            Log.error(f"Failed to load document {document_id}: {exc}")
            return None

        cached = next((doc for doc in self._state.items if doc.id == document_id), None)
        if cached is not None:
            # The detail endpoint may omit list fields, keep what the list had.
            document = replace(
                cached,
                original_text=document.original_text,
                translated_text=document.translated_text,
                upload_date=document.upload_date,
                content_hash=document.content_hash or cached.content_hash,
            )
        self._state = replace(
            self._state,
            items=tuple(
                document if doc.id == document_id else doc for doc in self._state.items
            ),
            selected=document,
        )
        return document

    async def on_upload_completed(self, document: Document) -> DocumentCollectionState:
        """Select a freshly processed document and refresh the first page."""
        self._state = replace(self._state, selected=document)
        return await self.load_page(1)

    def reset(self) -> None:
        """Forget everything, e.g. after sign-out. In-flight responses are dropped."""
        self._request_seq += 1
        self._state = DocumentCollectionState(page_size=self._state.page_size)

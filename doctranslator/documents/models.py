from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Document:
    """A translated document as stored by the backend."""

    id: str
    name: str
    upload_date: datetime
    size: int
    mime_type: str
    original_text: str | None = None
    translated_text: str | None = None
    content_hash: str | None = None


@dataclass(frozen=True)
class DocumentPage:
    """One page of the document listing endpoint's response envelope."""

    documents: list[Document]
    has_more: bool
    total: int


@dataclass(frozen=True)
class DocumentCollectionState:
    """Snapshot of the document list as the presentation layer sees it."""

    items: tuple[Document, ...] = ()
    page: int = 0
    page_size: int = 5
    total: int = 0
    has_more: bool = False
    selected: Document | None = None
    connection_error: str | None = None
    is_loading: bool = False

"""Builds domain values from backend JSON payloads.

The backend is a MongoDB-style service: ids arrive as ``_id``, timestamps
as ISO-8601 strings with a trailing ``Z``, and text fields in snake_case.
"""

from datetime import datetime, timezone
from typing import Any

from doctranslator.api.exceptions import ResponseFormatError
from doctranslator.billing.models import PaywallStatus
from doctranslator.documents.models import Document, DocumentPage


def build_document(raw: Any) -> Document:
    """Build a Document from one item of the listing or detail endpoints.

    Raises:
        ResponseFormatError: if the payload has no usable id.
    """
    if not isinstance(raw, dict):
        raise ResponseFormatError("Document payload must be an object")
    doc_id = raw.get("_id") or raw.get("id")
    if not doc_id or not isinstance(doc_id, str):
        raise ResponseFormatError("Document payload has no id")
    return Document(
        id=doc_id,
        name=_optional_str(raw.get("name")) or "",
        upload_date=_parse_date(
            raw.get("created_at") or raw.get("createdAt") or raw.get("uploadDate")
        ),
        size=_int_or_zero(raw.get("size")),
        mime_type=_optional_str(raw.get("type")) or "text/plain",
        original_text=_optional_str(raw.get("original_text", raw.get("originalText"))),
        translated_text=_optional_str(
            raw.get("translated_text", raw.get("translatedText"))
        ),
        content_hash=_optional_str(raw.get("text_hash")),
    )


def build_document_page(raw: Any) -> DocumentPage:
    """Build a DocumentPage from the ``{documents, hasMore, total}`` envelope."""
    if not isinstance(raw, dict):
        raise ResponseFormatError("Document listing must be an object")
    items = raw.get("documents")
    if not isinstance(items, list):
        raise ResponseFormatError("Document listing must contain a 'documents' list")
    documents = [build_document(item) for item in items]
    return DocumentPage(
        documents=documents,
        has_more=bool(raw.get("hasMore", False)),
        total=_int_or_zero(raw.get("total", len(documents))),
    )


def build_paywall_status(raw: Any) -> PaywallStatus:
    if not isinstance(raw, dict):
        raise ResponseFormatError("Payment status must be an object")
    return PaywallStatus(
        has_paid=bool(raw.get("hasPaid", False)),
        remaining_requests=_int_or_zero(raw.get("remainingRequests")),
    )


def extract_document_id(raw: Any) -> str:
    """Pull the new id out of a save-document response.

    The backend answers either ``{"document": {"_id": ...}}`` or the bare
    document object.
    """
    if isinstance(raw, dict):
        inner = raw.get("document", raw)
        if isinstance(inner, dict):
            doc_id = inner.get("_id") or inner.get("id")
            if isinstance(doc_id, str) and doc_id:
                return doc_id
    raise ResponseFormatError("Saved document response has no id")


def _parse_date(raw: Any) -> datetime:
    if isinstance(raw, str) and raw:
        value = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
        try:
            return datetime.fromisoformat(value)
        except ValueError as exc:
            raise ResponseFormatError(f"Invalid date: {raw!r}") from exc
    return datetime.now(timezone.utc)


def _optional_str(raw: Any) -> str | None:
    return raw if isinstance(raw, str) else None


def _int_or_zero(raw: Any) -> int:
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, (int, float)):
        return int(raw)
    return 0

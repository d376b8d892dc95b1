import io
from collections.abc import Callable
from datetime import datetime, timezone

import pytest
from PIL import Image
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from doctranslator.documents.models import Document


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_png_bytes() -> bytes:
    """A small blank PNG image."""
    buf = io.BytesIO()
    Image.new("RGB", (32, 16), color="white").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def make_document() -> Callable[..., Document]:
    """Factory for list-style documents with fixed metadata."""

    def _make(doc_id: str, name: str | None = None) -> Document:
        return Document(
            id=doc_id,
            name=name or f"{doc_id}.txt",
            upload_date=datetime(2024, 5, 1, tzinfo=timezone.utc),
            size=100,
            mime_type="text/plain",
        )

    return _make

import io

import pdfplumber

from doctranslator.extraction.base import BaseTextExtractor
from doctranslator.extraction.exceptions import ExtractionError
from doctranslator.extraction.models import UploadedFile


class PdfPlumberAdapter(BaseTextExtractor):
    """Extracts the text layer of a PDF using pdfplumber."""

    def extract(self, file: UploadedFile) -> str:
        try:
            with pdfplumber.open(io.BytesIO(file.content)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            raise ExtractionError(f"pdfplumber could not read {file.name}: {exc}") from exc
        return "\n".join(pages).strip()

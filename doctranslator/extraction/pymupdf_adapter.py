import pymupdf

from doctranslator.extraction.base import BaseTextExtractor
from doctranslator.extraction.exceptions import ExtractionError
from doctranslator.extraction.models import UploadedFile


class PyMuPdfAdapter(BaseTextExtractor):
    """Extracts the text layer of a PDF using PyMuPDF."""

    def extract(self, file: UploadedFile) -> str:
        try:
            with pymupdf.open(stream=file.content, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text() for page in doc]
        except Exception as exc:
            raise ExtractionError(f"pymupdf could not read {file.name}: {exc}") from exc
        return "\n".join(pages).strip()

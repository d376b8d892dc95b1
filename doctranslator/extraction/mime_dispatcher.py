from doctranslator.extraction.base import BaseTextExtractor
from doctranslator.extraction.exceptions import UnsupportedFileTypeError
from doctranslator.extraction.models import UploadedFile
from doctranslator.logging.logger import Log

_TEXT_LIKE_TYPES = frozenset({"application/json", "application/xml"})


class MimeTypeDispatcher(BaseTextExtractor):
    """Routes a file to the OCR, PDF or plain-text extractor by MIME type."""

    def __init__(
        self,
        *,
        image_extractor: BaseTextExtractor,
        pdf_extractor: BaseTextExtractor,
        text_extractor: BaseTextExtractor,
    ) -> None:
        self._image_extractor = image_extractor
        self._pdf_extractor = pdf_extractor
        self._text_extractor = text_extractor

    def extract(self, file: UploadedFile) -> str:
        extractor = self._select(file.mime_type.lower())
        Log.debug(f"Extracting {file.name} ({file.mime_type}) with {type(extractor).__name__}")
        return extractor.extract(file)

    def _select(self, mime_type: str) -> BaseTextExtractor:
        if mime_type.startswith("image/"):
            return self._image_extractor
        if mime_type == "application/pdf":
            return self._pdf_extractor
        if mime_type.startswith("text/") or mime_type in _TEXT_LIKE_TYPES:
            return self._text_extractor
        raise UnsupportedFileTypeError(f"Unsupported file type: {mime_type}")

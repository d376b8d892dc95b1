import io

import pytesseract
from PIL import Image

from doctranslator.extraction.base import BaseTextExtractor
from doctranslator.extraction.exceptions import ExtractionError
from doctranslator.extraction.models import UploadedFile


class TesseractOcrAdapter(BaseTextExtractor):
    """Extracts text from images with Tesseract OCR."""

    def __init__(self, language: str = "eng") -> None:
        self._language = language

    def extract(self, file: UploadedFile) -> str:
        try:
            with Image.open(io.BytesIO(file.content)) as image:
                text = pytesseract.image_to_string(image.convert("RGB"), lang=self._language)
            return text.strip()
        except Exception as exc:
            raise ExtractionError(f"OCR failed for {file.name}: {exc}") from exc

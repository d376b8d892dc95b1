from doctranslator.config.settings import Settings
from doctranslator.extraction.base import BaseTextExtractor
from doctranslator.extraction.mime_dispatcher import MimeTypeDispatcher
from doctranslator.extraction.pdfplumber_adapter import PdfPlumberAdapter
from doctranslator.extraction.plain_text_adapter import PlainTextAdapter
from doctranslator.extraction.pymupdf_adapter import PyMuPdfAdapter
from doctranslator.extraction.tesseract_adapter import TesseractOcrAdapter


class ExtractorFactory:
    """Creates the text extractor configured in settings."""

    PDF_ADAPTERS: dict[str, type[BaseTextExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseTextExtractor:
        engine = settings.extraction_pdf_engine.lower()
        pdf_adapter_cls = cls.PDF_ADAPTERS.get(engine)
        if pdf_adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.PDF_ADAPTERS)}"
            )
        return MimeTypeDispatcher(
            image_extractor=TesseractOcrAdapter(language=settings.ocr_language),
            pdf_extractor=pdf_adapter_cls(),
            text_extractor=PlainTextAdapter(),
        )

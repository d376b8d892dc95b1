from abc import ABC, abstractmethod

from doctranslator.extraction.models import UploadedFile


class BaseTextExtractor(ABC):
    """Contract for all text extraction adapters."""

    @abstractmethod
    def extract(self, file: UploadedFile) -> str:
        """Extract plain text from an uploaded file.

        Blocking; callers on the event loop run it in a worker thread.

        Args:
            file: The uploaded file, content fully read into memory.

        Returns:
            Extracted text, stripped of leading/trailing whitespace.

        Raises:
            ExtractionError: if extraction fails for any reason.
        """

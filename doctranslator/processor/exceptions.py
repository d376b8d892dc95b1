class ProcessingError(Exception):
    """Base exception for file processing errors."""


class EmptyDocumentError(ProcessingError):
    """Raised when extraction produced no text to translate."""

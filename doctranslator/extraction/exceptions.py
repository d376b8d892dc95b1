class ExtractionError(Exception):
    """Raised when text cannot be extracted from an uploaded file."""


class UnsupportedFileTypeError(ExtractionError):
    """Raised when no extractor handles the file's MIME type."""

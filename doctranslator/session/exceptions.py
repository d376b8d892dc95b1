class StorageError(Exception):
    """Raised when durable session storage cannot be read or written."""

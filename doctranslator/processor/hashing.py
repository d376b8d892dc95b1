import hashlib


def content_hash(text: str) -> str:
    """SHA-256 of the UTF-8 text as 64 lowercase hex chars.

    Used as the de-duplication key sent along with a saved document.
    """
    return hashlib.sha256(text.encode("utf-8")).hexdigest()

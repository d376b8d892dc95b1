from abc import ABC, abstractmethod


class BaseStorage(ABC):
    """Contract for durable string key/value storage backends."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value under key, replacing any previous value."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete key. Removing a missing key is not an error."""

    def remove_many(self, keys: tuple[str, ...]) -> None:
        for key in keys:
            self.remove(key)

"""Document store port: abstract interface for verification-document storage."""

from abc import ABC, abstractmethod


class DocumentStoreError(Exception):
    """Raised when a stored document cannot be written or removed."""


class DocumentStore(ABC):
    """Abstract interface for verification-document storage adapters."""

    @abstractmethod
    def store(self, original_name: str, content_type: str, data: bytes) -> dict:
        """Persist an uploaded file under a generated name.

        Returns:
            dict with keys: filename, path
        """
        ...

    @abstractmethod
    def delete(self, path: str) -> None:
        """Remove a stored file. Raises ``DocumentStoreError`` on failure."""
        ...

"""Document store registry: singleton access to the configured store.

Uses the disk store unless ``DOCUMENT_STORE=memory`` selects the in-memory
fake (tests and local demos).
"""

import os

from reviews.documents.store_port import DocumentStore

_store_instance: DocumentStore | None = None


def get_document_store() -> DocumentStore:
    """Return the configured document store (singleton)."""
    global _store_instance
    if _store_instance is None:
        if os.getenv("DOCUMENT_STORE", "disk").lower() == "memory":
            from reviews.documents.fake_store import FakeDocumentStore

            _store_instance = FakeDocumentStore()
        else:
            from reviews.documents.disk_store import DiskDocumentStore

            _store_instance = DiskDocumentStore()
    return _store_instance


def set_document_store(store: DocumentStore) -> None:
    """Install a specific store instance (tests, alternative backends)."""
    global _store_instance
    _store_instance = store


def reset_document_store() -> None:
    """Drop the singleton so the next access rebuilds it."""
    global _store_instance
    _store_instance = None

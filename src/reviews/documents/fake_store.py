"""Fake document store: keeps files in memory for test assertions."""

from uuid import uuid4

from reviews.documents.store_port import DocumentStore, DocumentStoreError


class FakeDocumentStore(DocumentStore):
    def __init__(self):
        self.files: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.fail_deletes = False

    def configure(self, fail_deletes: bool = False):
        """Configure the fake store behavior for testing."""
        self.fail_deletes = fail_deletes

    def store(self, original_name: str, content_type: str, data: bytes) -> dict:
        extension = original_name.rsplit(".", 1)[-1].lower() if "." in original_name else ""
        filename = f"verification-{uuid4().hex[:12]}.{extension}" if extension else f"verification-{uuid4().hex[:12]}"
        path = f"memory://uploads/{filename}"
        self.files[path] = data
        return {"filename": filename, "path": path}

    def delete(self, path: str) -> None:
        if self.fail_deletes:
            raise DocumentStoreError(f"Simulated failure deleting {path}")
        if path not in self.files:
            raise DocumentStoreError(f"No such document: {path}")
        del self.files[path]
        self.deleted.append(path)

    def reset(self):
        """Clear stored files (useful between tests)."""
        self.files.clear()
        self.deleted.clear()
        self.fail_deletes = False

"""Disk-backed document store: writes uploads under ``UPLOAD_PATH``."""

import os
import random
import time
from pathlib import Path

from reviews import config
from reviews.documents.store_port import DocumentStore, DocumentStoreError


class DiskDocumentStore(DocumentStore):
    def __init__(self, root: str | None = None):
        self.root = Path(root or config.upload_path())

    def _generate_name(self, original_name: str) -> str:
        suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
        return f"verification-{suffix}{os.path.splitext(original_name)[1].lower()}"

    def store(self, original_name: str, content_type: str, data: bytes) -> dict:
        self.root.mkdir(parents=True, exist_ok=True)
        filename = self._generate_name(original_name)
        path = self.root / filename
        try:
            path.write_bytes(data)
        except OSError as exc:
            raise DocumentStoreError(f"Could not write {filename}: {exc}") from exc
        return {"filename": filename, "path": str(path)}

    def delete(self, path: str) -> None:
        try:
            os.remove(path)
        except OSError as exc:
            raise DocumentStoreError(f"Could not delete {path}: {exc}") from exc

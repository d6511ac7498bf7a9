"""Post-commit purge of verification documents.

The review is persisted first; the detached storage paths are then deleted
one by one. A failed deletion is logged and skipped so storage trouble never
undoes a moderation decision.
"""

from dataclasses import dataclass, field

import structlog

from reviews.documents import get_document_store

logger = structlog.get_logger(__name__)


@dataclass
class DocumentPurge:
    review_id: str
    paths: list[str] = field(default_factory=list)

    def run(self, store=None) -> list[str]:
        """Delete every path and return the ones that could not be removed."""
        if not self.paths:
            return []

        store = store or get_document_store()
        failed = []
        for path in self.paths:
            try:
                store.delete(path)
            except Exception as exc:
                logger.warning(
                    "Verification document purge failed",
                    review_id=self.review_id,
                    path=path,
                    error=str(exc),
                )
                failed.append(path)

        logger.info(
            "Verification documents purged",
            review_id=self.review_id,
            deleted=len(self.paths) - len(failed),
            failed=len(failed),
        )
        return failed

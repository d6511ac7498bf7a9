"""Upload checks applied before a verification document reaches the store."""

import os

from protean.exceptions import ValidationError

from reviews import config

_ALLOWED_CONTENT_TYPES = ("image/png", "image/jpeg", "image/jpg", "application/pdf")


def validate_upload(original_name: str, content_type: str | None, size: int) -> None:
    """Reject files that are not png/jpg/jpeg/pdf or exceed the size limit."""
    extension = os.path.splitext(original_name or "")[1].lower()
    if extension not in config.ALLOWED_DOCUMENT_EXTENSIONS or (content_type or "").lower() not in _ALLOWED_CONTENT_TYPES:
        raise ValidationError({"documents": ["Only .png, .jpg, .jpeg, and .pdf files are allowed"]})

    limit = config.max_file_size()
    if size > limit:
        raise ValidationError({"documents": [f"File {original_name} exceeds the {limit} byte limit"]})


def validate_document_count(count: int) -> None:
    limit = config.max_documents()
    if count > limit:
        raise ValidationError({"documents": [f"Cannot attach more than {limit} verification documents"]})

"""FastAPI routes for reviews: submission, the author's own list, the
public listing and deletion.

Each route translates between the HTTP contract and Protean commands;
reads go through the query functions in ``reviews.review.queries``.
"""

import json

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from protean.exceptions import ValidationError

from reviews import config
from reviews.account.user import User
from reviews.api.auth import api_rate_limit, client_address, get_current_user, get_optional_user
from reviews.api.commands import dispatch
from reviews.api.schemas import PublishedReviewPage, StatusResponse, SubmittedReviewResponse
from reviews.documents import get_document_store
from reviews.documents.store_port import DocumentStoreError
from reviews.documents.validation import validate_document_count, validate_upload
from reviews.review import queries
from reviews.review.removal import DeleteReview
from reviews.review.review import ReviewStatus
from reviews.review.submission import SubmitReview
from reviews.utils.logging import get_logger

logger = get_logger(__name__)

review_router = APIRouter(prefix="/reviews", tags=["reviews"], dependencies=[Depends(api_rate_limit)])


def _parse_rating(raw: str | None) -> int | None:
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValidationError({"rating": ["Rating must be a whole number between 1 and 5"]}) from exc


async def _read_document(upload: UploadFile) -> bytes:
    """Read at most one byte past the size limit, then validate type and size."""
    data = await upload.read(config.max_file_size() + 1)
    validate_upload(upload.filename, upload.content_type, len(data))
    return data


def _discard(stored: list[dict]) -> None:
    store = get_document_store()
    for document in stored:
        try:
            store.delete(document["path"])
        except DocumentStoreError as exc:
            logger.warning("Could not discard uploaded document", path=document["path"], error=str(exc))


@review_router.post("", status_code=201, response_model=SubmittedReviewResponse)
async def submit_review(
    request: Request,
    property_name: str | None = Form(None),
    property_address: str | None = Form(None),
    landlord_name: str | None = Form(None),
    rating: str | None = Form(None),
    title: str | None = Form(None),
    body: str | None = Form(None),
    documents: list[UploadFile] | None = File(None),
    user: User = Depends(get_current_user),
) -> SubmittedReviewResponse:
    """Submit a review with optional verification documents (multipart)."""
    uploads = [upload for upload in documents or [] if upload.filename]
    validate_document_count(len(uploads))

    contents = []
    for upload in uploads:
        contents.append((upload, await _read_document(upload)))

    store = get_document_store()
    stored: list[dict] = []
    try:
        for upload, data in contents:
            stored.append(store.store(upload.filename, upload.content_type, data))

        command = SubmitReview(
            user_id=str(user.id),
            property_name=property_name,
            property_address=property_address,
            landlord_name=landlord_name,
            rating=_parse_rating(rating),
            title=title,
            body=body,
            documents=json.dumps(stored) if stored else None,
            ip_address=client_address(request),
            user_agent=request.headers.get("user-agent"),
        )
        review_id = await dispatch(command)
    except Exception:
        _discard(stored)
        raise

    return SubmittedReviewResponse(review_id=review_id, status=ReviewStatus.PENDING_VERIFICATION.value)


@review_router.get("/mine")
async def my_reviews(user: User = Depends(get_current_user)) -> dict:
    """Every review the caller has submitted, newest first."""
    return queries.list_my_reviews(user.id)


@review_router.get("/published", response_model=PublishedReviewPage)
async def published_reviews(property_address: str | None = None, page: int = 1, limit: int = 10) -> dict:
    return queries.list_published(property_address=property_address, page=page, limit=limit)


@review_router.get("/{review_id}")
async def get_review(review_id: str, viewer: User | None = Depends(get_optional_user)) -> dict:
    return queries.get_review(review_id, viewer=viewer)


@review_router.delete("/{review_id}", response_model=StatusResponse)
async def delete_review(review_id: str, user: User = Depends(get_current_user)) -> StatusResponse:
    """Delete a review. Authors may delete their own until it is anonymized; admins any."""
    await dispatch(DeleteReview(actor_id=str(user.id), review_id=review_id))
    return StatusResponse()

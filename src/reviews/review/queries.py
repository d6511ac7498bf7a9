"""Read-side access to reviews and the visibility rule.

A review is public only when it is published *and* anonymized. The public
view never includes the author, the documents, the submission metadata or
the moderation notes. Authors and admins see more of their own records.
"""

import math

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from reviews.errors import Forbidden
from reviews.review.review import Review, ReviewStatus
from reviews.utils.logging import get_logger
from reviews.utils.query import iter_records

logger = get_logger(__name__)

ADMIN_SORT_FIELDS = ("created_at", "updated_at", "rating", "flag_count", "property_name", "status")


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------
def public_view(review: Review) -> dict:
    return {
        "id": str(review.id),
        "property_name": review.property_name,
        "property_address": review.property_address,
        "landlord_name": review.landlord_name,
        "rating": review.rating,
        "title": review.title,
        "body": review.body,
        "published_at": review.published_at,
        "weighting_score": review.weighting_score,
    }


def owner_view(review: Review) -> dict:
    """The author's view: moderation outcome, but no documents, metadata or admin notes."""
    return {
        **public_view(review),
        "status": review.status,
        "verification_status": review.verification_status,
        "is_anonymized": review.is_anonymized,
        "created_at": review.created_at,
        "updated_at": review.updated_at,
    }


def admin_view(review: Review) -> dict:
    submission = review.submission
    return {
        **owner_view(review),
        "user_id": str(review.user_id),
        "flag_count": review.flag_count,
        "admin_notes": review.admin_notes,
        "reviewed_by": str(review.reviewed_by) if review.reviewed_by else None,
        "reviewed_at": review.reviewed_at,
        "anonymization_date": review.anonymization_date,
        "verification_documents": [
            {"id": str(doc.id), "filename": doc.filename, "path": doc.path, "uploaded_at": doc.uploaded_at}
            for doc in review.verification_documents
        ],
        "metadata": {
            "ip_address": submission.ip_address if submission else None,
            "user_agent": submission.user_agent if submission else None,
            "submitted_at": submission.submitted_at if submission else None,
        },
    }


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
def _page(query, page, limit):
    page = max(int(page), 1)
    limit = max(int(limit), 1)
    result = query.offset((page - 1) * limit).limit(limit).all()
    return result, page, limit


def list_published(property_address=None, page=1, limit=10) -> dict:
    """Public listing, newest publication first.

    Feeds unauthenticated pages, so repository failures yield an empty page.
    """
    try:
        return _published_page(property_address, page, limit)
    except Exception as exc:
        logger.warning("Published reviews unavailable, serving empty page", error=str(exc))
        return {"items": [], "total_pages": 0, "current_page": page, "total": 0}


def _published_page(property_address, page, limit) -> dict:
    query = current_domain.repository_for(Review)._dao.query.filter(
        status=ReviewStatus.PUBLISHED.value,
        is_anonymized=True,
    )
    if property_address:
        query = query.filter(property_address__icontains=property_address.strip())
    query = query.order_by("-published_at")

    result, page, limit = _page(query, page, limit)
    return {
        "items": [public_view(review) for review in result.items],
        "total_pages": math.ceil(result.total / limit),
        "current_page": page,
        "total": result.total,
    }


def get_review(review_id, viewer=None) -> dict:
    """Fetch one review as ``viewer`` (a User or None) is allowed to see it."""
    review = current_domain.repository_for(Review).get(str(review_id))

    if viewer is not None and viewer.is_admin:
        return admin_view(review)
    if viewer is not None and review.is_owned_by(viewer.id):
        return owner_view(review)
    if review.is_publicly_visible():
        return public_view(review)

    raise Forbidden({"review": ["This review is not publicly available"]})


def list_my_reviews(user_id) -> dict:
    query = (
        current_domain.repository_for(Review)
        ._dao.query.filter(user_id=str(user_id))
        .order_by("-created_at")
    )
    items = [owner_view(review) for review in iter_records(query)]
    return {"count": len(items), "items": items}


def list_reviews_for_admin(
    status=None,
    verification_status=None,
    page=1,
    limit=20,
    sort_by="created_at",
    order="desc",
) -> dict:
    if sort_by not in ADMIN_SORT_FIELDS:
        raise ValidationError({"sort_by": [f"Cannot sort by {sort_by}"]})

    query = current_domain.repository_for(Review)._dao.query
    if status:
        query = query.filter(status=status)
    if verification_status:
        query = query.filter(verification_status=verification_status)
    query = query.order_by(f"-{sort_by}" if order == "desc" else sort_by)

    result, page, limit = _page(query, page, limit)
    return {
        "items": [admin_view(review) for review in result.items],
        "total_pages": math.ceil(result.total / limit),
        "current_page": page,
        "total": result.total,
    }


def get_review_for_admin(review_id) -> dict:
    return admin_view(current_domain.repository_for(Review).get(str(review_id)))

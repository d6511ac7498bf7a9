"""Review aggregate: the core of the landlord-review context.

A Review carries a tenant's evaluation of a rented property, the documents
that prove the tenancy to a moderator, and the moderation trail. Documents
are transient: they are detached from the review on every terminal
moderation outcome and the detached storage paths are handed back to the
caller for cleanup after the review is persisted.

State Machine (5 states):
    DRAFT → PENDING_VERIFICATION          (reserved for draft saves; unused)
    PENDING_VERIFICATION → PUBLISHED | REMOVED | FLAGGED
    FLAGGED → FLAGGED (re-flag) | PUBLISHED | REMOVED
    PUBLISHED, REMOVED → (terminal; only hard deletion remains)

``verification_status`` mirrors the outcome (pending → verified | rejected)
and always moves together with ``status``.
"""

import math
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from reviews import config
from reviews.domain import reviews
from reviews.review.events import (
    ReviewFlagged,
    ReviewRejected,
    ReviewSubmitted,
    ReviewVerified,
)

TITLE_MAX_LENGTH = 100
BODY_MIN_LENGTH = 50
BODY_MAX_LENGTH = 5000


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class ReviewStatus(Enum):
    DRAFT = "draft"
    PENDING_VERIFICATION = "pending_verification"
    PUBLISHED = "published"
    FLAGGED = "flagged"
    REMOVED = "removed"


class VerificationStatus(Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    ReviewStatus.DRAFT: {ReviewStatus.PENDING_VERIFICATION, ReviewStatus.FLAGGED, ReviewStatus.REMOVED},
    ReviewStatus.PENDING_VERIFICATION: {ReviewStatus.PUBLISHED, ReviewStatus.REMOVED, ReviewStatus.FLAGGED},
    ReviewStatus.FLAGGED: {ReviewStatus.PUBLISHED, ReviewStatus.REMOVED, ReviewStatus.FLAGGED},
    ReviewStatus.PUBLISHED: set(),
    ReviewStatus.REMOVED: set(),
}

# Verify only applies to reviews awaiting moderation, never to drafts
_VERIFIABLE = {ReviewStatus.PENDING_VERIFICATION, ReviewStatus.FLAGGED}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@reviews.value_object(part_of="Review")
class SubmissionMetadata:
    """Where a review came from. Write-once and never part of a public view."""

    ip_address = String(max_length=64)
    user_agent = String(max_length=500)
    submitted_at = DateTime()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@reviews.entity(part_of="Review")
class VerificationDocument:
    """A stored proof of tenancy (image or PDF) awaiting moderation."""

    filename = String(required=True, max_length=255)
    path = String(required=True, max_length=1000)
    uploaded_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@reviews.aggregate
class Review:
    """A tenant's review of a rented property and its moderation state."""

    # Ownership
    user_id = Identifier(required=True)

    # Content
    property_name = String(required=True, max_length=255)
    property_address = String(max_length=500, default=config.REDACTED_ADDRESS)
    landlord_name = String(max_length=255)
    rating = Integer(required=True, min_value=1, max_value=5)
    title = String(required=True, max_length=TITLE_MAX_LENGTH)
    body = Text(required=True)

    # Moderation
    verification_status = String(choices=VerificationStatus, default=VerificationStatus.PENDING.value)
    status = String(choices=ReviewStatus, default=ReviewStatus.DRAFT.value)
    flag_count = Integer(default=0, min_value=0)
    admin_notes = Text()
    reviewed_by = Identifier()
    reviewed_at = DateTime()
    published_at = DateTime()

    # Anonymization
    is_anonymized = Boolean(default=False)
    anonymization_date = DateTime()

    # Trust signal applied to the public rating display
    weighting_score = Float(default=1.0, min_value=0.0, max_value=2.0)

    verification_documents = HasMany(VerificationDocument)
    submission = ValueObject(SubmissionMetadata)

    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def anonymized_reviews_must_be_published(self):
        if self.is_anonymized and self.status != ReviewStatus.PUBLISHED.value:
            raise ValidationError({"is_anonymized": ["Only published reviews can be anonymized"]})

    @invariant.post
    def moderated_reviews_hold_no_documents(self):
        if self.status in (ReviewStatus.PUBLISHED.value, ReviewStatus.REMOVED.value) and len(
            self.verification_documents
        ):
            raise ValidationError(
                {"verification_documents": ["Published or removed reviews cannot keep verification documents"]}
            )

    @invariant.post
    def documents_cannot_exceed_maximum(self):
        limit = config.max_documents()
        if len(self.verification_documents) > limit:
            raise ValidationError(
                {"verification_documents": [f"Cannot attach more than {limit} verification documents"]}
            )

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def submit(
        cls,
        user_id,
        property_name,
        rating,
        title,
        body,
        property_address=None,
        landlord_name=None,
        documents=None,
        ip_address=None,
        user_agent=None,
    ):
        """Create a review awaiting verification.

        ``documents`` is a list of ``{"filename", "path"}`` dicts already
        written to the document store.
        """
        property_name = (property_name or "").strip()
        title = (title or "").strip()
        body = (body or "").strip()
        documents = documents or []

        rating = _validate_content(property_name, rating, title, body, documents)

        address = (property_address or "").strip() or config.REDACTED_ADDRESS
        now = datetime.now(UTC)

        review = cls(
            user_id=user_id,
            property_name=property_name,
            property_address=address,
            landlord_name=(landlord_name or "").strip() or None,
            rating=rating,
            title=title,
            body=body,
            verification_status=VerificationStatus.PENDING.value,
            status=ReviewStatus.PENDING_VERIFICATION.value,
            flag_count=0,
            is_anonymized=False,
            weighting_score=1.0,
            submission=SubmissionMetadata(
                ip_address=ip_address,
                user_agent=(user_agent or "")[:500] or None,
                submitted_at=now,
            ),
            created_at=now,
            updated_at=now,
        )

        for doc in documents:
            review.add_verification_documents(
                VerificationDocument(
                    filename=doc["filename"],
                    path=doc["path"],
                    uploaded_at=now,
                )
            )

        review.raise_(
            ReviewSubmitted(
                review_id=str(review.id),
                user_id=str(user_id),
                property_name=property_name,
                rating=rating,
                document_count=len(documents),
                submitted_at=now,
            )
        )

        return review

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate state machine transition."""
        current = ReviewStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _detach_documents(self) -> list[str]:
        """Remove every document from the review and return their storage paths."""
        paths = [doc.path for doc in self.verification_documents]
        for doc in list(self.verification_documents):
            self.remove_verification_documents(doc)
        return paths

    @property
    def document_paths(self) -> list[str]:
        return [doc.path for doc in self.verification_documents]

    def is_publicly_visible(self) -> bool:
        return self.status == ReviewStatus.PUBLISHED.value and bool(self.is_anonymized)

    def is_owned_by(self, user_id) -> bool:
        return str(self.user_id) == str(user_id)

    # -------------------------------------------------------------------
    # Moderation
    # -------------------------------------------------------------------
    def verify(self, admin_id, weighting_score=None, admin_notes=None) -> list[str]:
        """Publish and anonymize the review.

        Returns the storage paths of the detached verification documents.
        """
        current = ReviewStatus(self.status)
        if current not in _VERIFIABLE:
            raise ValidationError(
                {"status": [f"Cannot transition from {current.value} to {ReviewStatus.PUBLISHED.value}"]}
            )

        if weighting_score is not None:
            weighting_score = _validated_weighting(weighting_score)

        now = datetime.now(UTC)
        with atomic_change(self):
            paths = self._detach_documents()
            self.verification_status = VerificationStatus.VERIFIED.value
            self.status = ReviewStatus.PUBLISHED.value
            self.is_anonymized = True
            self.anonymization_date = now
            self.published_at = now
            self.reviewed_by = admin_id
            self.reviewed_at = now
            if weighting_score is not None:
                self.weighting_score = weighting_score
            if admin_notes:
                self.admin_notes = admin_notes
            self.updated_at = now

        self.raise_(
            ReviewVerified(
                review_id=str(self.id),
                user_id=str(self.user_id),
                admin_id=str(admin_id),
                rating=self.rating,
                weighting_score=self.weighting_score,
                purged_documents=len(paths),
                verified_at=now,
            )
        )

        return paths

    def reject(self, admin_id, reason) -> list[str]:
        """Remove the review from the moderation flow.

        Returns the storage paths of the detached verification documents.
        """
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError({"reason": ["Reason is required when rejecting a review"]})

        self._assert_can_transition(ReviewStatus.REMOVED)

        now = datetime.now(UTC)
        with atomic_change(self):
            paths = self._detach_documents()
            self.verification_status = VerificationStatus.REJECTED.value
            self.status = ReviewStatus.REMOVED.value
            self.admin_notes = reason
            self.reviewed_by = admin_id
            self.reviewed_at = now
            self.updated_at = now

        self.raise_(
            ReviewRejected(
                review_id=str(self.id),
                user_id=str(self.user_id),
                admin_id=str(admin_id),
                reason=reason,
                purged_documents=len(paths),
                rejected_at=now,
            )
        )

        return paths

    def flag(self, admin_id, reason=None):
        """Mark the review for further attention. Every call adds one flag."""
        self._assert_can_transition(ReviewStatus.FLAGGED)

        now = datetime.now(UTC)
        reason = (reason or "").strip()
        with atomic_change(self):
            self.status = ReviewStatus.FLAGGED.value
            self.flag_count = (self.flag_count or 0) + 1
            if reason:
                self.admin_notes = reason
            self.updated_at = now

        self.raise_(
            ReviewFlagged(
                review_id=str(self.id),
                admin_id=str(admin_id),
                reason=reason or None,
                flag_count=self.flag_count,
                flagged_at=now,
            )
        )


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------
def _parse_rating(rating) -> int | None:
    if isinstance(rating, bool):
        return None
    try:
        return int(str(rating).strip())
    except ValueError:
        return None


def _validate_content(property_name, rating, title, body, documents) -> int:
    """Check submitted content field by field and return the parsed rating."""
    errors = {}

    if not property_name:
        errors["property_name"] = ["Property name is required"]

    score = None
    if rating is None or str(rating).strip() == "":
        errors["rating"] = ["Rating is required"]
    else:
        score = _parse_rating(rating)
        if score is None or score < 1 or score > 5:
            errors["rating"] = ["Rating must be a whole number between 1 and 5"]

    if not title:
        errors["title"] = ["Review title is required"]
    elif len(title) > TITLE_MAX_LENGTH:
        errors["title"] = [f"Title cannot exceed {TITLE_MAX_LENGTH} characters"]

    if not body:
        errors["body"] = ["Review content is required"]
    elif len(body) < BODY_MIN_LENGTH:
        errors["body"] = [f"Review must be at least {BODY_MIN_LENGTH} characters"]
    elif len(body) > BODY_MAX_LENGTH:
        errors["body"] = [f"Review cannot exceed {BODY_MAX_LENGTH} characters"]

    limit = config.max_documents()
    if len(documents) > limit:
        errors["documents"] = [f"Cannot attach more than {limit} verification documents"]

    if errors:
        raise ValidationError(errors)

    return score


def _validated_weighting(value) -> float:
    if isinstance(value, bool):
        raise ValidationError({"weighting_score": ["Weighting score must be a number"]})
    try:
        score = float(value)
    except (TypeError, ValueError):
        raise ValidationError({"weighting_score": ["Weighting score must be a number"]}) from None
    if math.isnan(score) or score < 0 or score > 2:
        raise ValidationError({"weighting_score": ["Weighting score must be between 0 and 2"]})
    return score

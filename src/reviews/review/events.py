"""Domain events for the Review aggregate.

Events never carry review content beyond the rating: the submitter identity
is only present on events consumed inside this context.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from reviews.domain import reviews


@reviews.event(part_of="Review")
class ReviewSubmitted:
    """A tenant submitted a review for verification."""

    __version__ = 1

    review_id = Identifier(required=True)
    user_id = Identifier(required=True)
    property_name = String(required=True)
    rating = Integer(required=True)
    document_count = Integer(default=0)
    submitted_at = DateTime(required=True)


@reviews.event(part_of="Review")
class ReviewVerified:
    """An admin verified the review; it is now published and anonymized."""

    __version__ = 1

    review_id = Identifier(required=True)
    user_id = Identifier(required=True)
    admin_id = Identifier(required=True)
    rating = Integer(required=True)
    weighting_score = Float(required=True)
    purged_documents = Integer(default=0)
    verified_at = DateTime(required=True)


@reviews.event(part_of="Review")
class ReviewRejected:
    """An admin rejected the review; it is removed from the moderation flow."""

    __version__ = 1

    review_id = Identifier(required=True)
    user_id = Identifier(required=True)
    admin_id = Identifier(required=True)
    reason = Text(required=True)
    purged_documents = Integer(default=0)
    rejected_at = DateTime(required=True)


@reviews.event(part_of="Review")
class ReviewFlagged:
    """An admin flagged the review for further attention."""

    __version__ = 1

    review_id = Identifier(required=True)
    admin_id = Identifier(required=True)
    reason = Text()
    flag_count = Integer(required=True)
    flagged_at = DateTime(required=True)

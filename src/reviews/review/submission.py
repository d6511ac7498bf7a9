"""SubmitReview: submit a new landlord review.

The submitter must hold an active account with a verified email. Uploaded
documents are already in the document store; the command carries their
names and paths as a JSON array.
"""

import json

from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviews.account.guards import load_actor
from reviews.domain import reviews
from reviews.errors import Forbidden
from reviews.notifications.dispatch import notify
from reviews.review.review import Review
from reviews.utils.logging import get_logger

logger = get_logger(__name__)


@reviews.command(part_of="Review")
class SubmitReview:
    user_id = Identifier(required=True)
    property_name = String(max_length=255)
    property_address = String(max_length=500)
    landlord_name = String(max_length=255)
    rating = Integer()  # range checked by the aggregate
    title = String(max_length=1000)
    body = Text()
    documents = Text()  # JSON array of {filename, path}
    ip_address = String(max_length=64)
    user_agent = String(max_length=1000)


@reviews.command_handler(part_of=Review)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        author = load_actor(command.user_id)
        if not author.is_active:
            raise Forbidden({"user": ["Account is not active"]})
        if not author.is_email_verified:
            raise Forbidden({"user": ["Please verify your email before submitting reviews"]})

        documents = json.loads(command.documents) if command.documents else []

        review = Review.submit(
            user_id=command.user_id,
            property_name=command.property_name,
            property_address=command.property_address,
            landlord_name=command.landlord_name,
            rating=command.rating,
            title=command.title,
            body=command.body,
            documents=documents,
            ip_address=command.ip_address,
            user_agent=command.user_agent,
        )
        current_domain.repository_for(Review).add(review)

        logger.info(
            "Review submitted",
            review_id=str(review.id),
            user_id=str(command.user_id),
            documents=len(documents),
        )

        notify(
            author.email,
            "review_submitted",
            {"username": author.username, "property_name": review.property_name},
        )
        return str(review.id)

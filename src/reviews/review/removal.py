"""DeleteReview: permanently remove a review.

Admins may delete any review. Owners may delete their own review until it
has been anonymized. Remaining verification documents are purged after the
record is gone.
"""

from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviews.account.guards import load_actor
from reviews.domain import reviews
from reviews.errors import Conflict, Forbidden
from reviews.review.cleanup import DocumentPurge
from reviews.review.review import Review
from reviews.utils.logging import get_logger

logger = get_logger(__name__)


@reviews.command(part_of="Review")
class DeleteReview:
    actor_id = Identifier(required=True)
    review_id = Identifier(required=True)


@reviews.command_handler(part_of=Review)
class DeleteReviewHandler:
    @handle(DeleteReview)
    def delete_review(self, command):
        actor = load_actor(command.actor_id)
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        if not actor.is_admin:
            if not review.is_owned_by(actor.id):
                raise Forbidden({"review": ["Not authorized to delete this review"]})
            if review.is_anonymized:
                raise Conflict({"review": ["Cannot delete anonymized reviews"]})

        paths = review.document_paths
        repo._dao.delete(review)
        logger.info(
            "Review deleted",
            review_id=str(review.id),
            actor_id=str(actor.id),
            by_admin=actor.is_admin,
        )

        DocumentPurge(review_id=str(review.id), paths=paths).run()
        return str(review.id)

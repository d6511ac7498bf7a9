"""Review moderation: verify, reject and flag.

Only active admins moderate. Verify and reject detach the verification
documents; the handler persists the review before purging the files, and
notifies the author without letting delivery problems fail the command.
"""

from protean.fields import Float, Identifier, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviews.account.guards import find_user, require_admin
from reviews.domain import reviews
from reviews.notifications.dispatch import notify
from reviews.review.cleanup import DocumentPurge
from reviews.review.review import Review
from reviews.utils.logging import get_logger

logger = get_logger(__name__)


@reviews.command(part_of="Review")
class VerifyReview:
    actor_id = Identifier(required=True)
    review_id = Identifier(required=True)
    weighting_score = Float()
    admin_notes = Text()


@reviews.command(part_of="Review")
class RejectReview:
    actor_id = Identifier(required=True)
    review_id = Identifier(required=True)
    reason = Text()  # Required; checked before the review is touched


@reviews.command(part_of="Review")
class FlagReview:
    actor_id = Identifier(required=True)
    review_id = Identifier(required=True)
    reason = Text()


def _notify_author(review, template_name, **context):
    author = find_user(review.user_id)
    if author is None:
        logger.warning("Review author no longer exists", review_id=str(review.id))
        return
    notify(
        author.email,
        template_name,
        {"username": author.username, "property_name": review.property_name, **context},
    )


@reviews.command_handler(part_of=Review)
class ModerateReviewHandler:
    @handle(VerifyReview)
    def verify_review(self, command):
        admin = require_admin(command.actor_id)
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        paths = review.verify(
            admin_id=str(admin.id),
            weighting_score=command.weighting_score,
            admin_notes=command.admin_notes,
        )
        repo.add(review)
        logger.info("Review verified", review_id=str(review.id), admin_id=str(admin.id))

        DocumentPurge(review_id=str(review.id), paths=paths).run()
        _notify_author(review, "review_published")
        return str(review.id)

    @handle(RejectReview)
    def reject_review(self, command):
        admin = require_admin(command.actor_id)
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        paths = review.reject(admin_id=str(admin.id), reason=command.reason)
        repo.add(review)
        logger.info("Review rejected", review_id=str(review.id), admin_id=str(admin.id))

        DocumentPurge(review_id=str(review.id), paths=paths).run()
        _notify_author(review, "review_rejected", reason=review.admin_notes)
        return str(review.id)

    @handle(FlagReview)
    def flag_review(self, command):
        admin = require_admin(command.actor_id)
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        review.flag(admin_id=str(admin.id), reason=command.reason)
        repo.add(review)
        logger.info(
            "Review flagged",
            review_id=str(review.id),
            admin_id=str(admin.id),
            flag_count=review.flag_count,
        )
        return str(review.id)

"""Clear Window reviews bounded context: landlord reviews, moderation and statistics.

Handles the review lifecycle (submission, verification, rejection, flagging,
deletion), reviewer accounts, verification-document cleanup, dashboard
statistics and the public feedback inbox.
"""

from protean.domain import Domain

from reviews.utils.logging import configure_logging, get_logger

configure_logging(log_file_prefix="clearwindow")

logger = get_logger(__name__)

reviews = Domain(name="reviews")

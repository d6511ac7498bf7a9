"""Public counters for the homepage: published reviews and their average rating.

Feeds an unauthenticated page, so repository failures degrade to a fixed
snapshot instead of an error.
"""

from reviews.review.review import ReviewStatus
from reviews.stats import aggregation
from reviews.utils.logging import get_logger

logger = get_logger(__name__)

FALLBACK_PUBLIC_STATS = {
    "reviews": {"published": 0},
    "ratings": {"average": 0.0},
}


def public_stats() -> dict:
    try:
        published = aggregation.count_reviews(status=ReviewStatus.PUBLISHED.value)
        _, average = aggregation.published_rating_summary()
    except Exception as exc:
        logger.warning("Public stats unavailable, serving fallback", error=str(exc))
        return {
            "reviews": dict(FALLBACK_PUBLIC_STATS["reviews"]),
            "ratings": dict(FALLBACK_PUBLIC_STATS["ratings"]),
        }

    return {
        "reviews": {"published": published},
        "ratings": {"average": average},
    }

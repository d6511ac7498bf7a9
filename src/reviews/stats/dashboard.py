"""Admin dashboard snapshot and the unauthenticated homepage variant."""

from datetime import UTC, datetime, timedelta

from reviews.review.review import ReviewStatus
from reviews.stats import aggregation
from reviews.utils.logging import get_logger

logger = get_logger(__name__)

RECENT_WINDOW = timedelta(days=7)

FALLBACK_HOMEPAGE_STATS = {
    "users": {"total": 0, "recent_signups": 0},
    "reviews": {"total": 0, "pending": 0, "published": 0, "flagged": 0, "verified": 0, "recent": 0},
    "ratings": {"average": 0.0, "total": 0, "weighted_average": 0.0},
}


def dashboard_snapshot(now=None) -> dict:
    """Counts, 7-day activity and published rating figures for the admin dashboard."""
    since = (now or datetime.now(UTC)) - RECENT_WINDOW
    rating_total, rating_average = aggregation.published_rating_summary()

    return {
        "users": {
            "total": aggregation.count_users(),
            "recent_signups": aggregation.count_users(created_at__gte=since),
        },
        "reviews": {
            "total": aggregation.count_reviews(),
            "pending": aggregation.count_reviews(status=ReviewStatus.PENDING_VERIFICATION.value),
            "published": aggregation.count_reviews(status=ReviewStatus.PUBLISHED.value),
            "flagged": aggregation.count_reviews(status=ReviewStatus.FLAGGED.value),
            "verified": aggregation.count_verified_reviews(),
            "recent": aggregation.count_reviews(created_at__gte=since),
        },
        "ratings": {
            "average": rating_average,
            "total": rating_total,
            "weighted_average": aggregation.weighted_published_average(),
        },
        "reviews_by_status": aggregation.reviews_by_status(),
    }


def homepage_stats(now=None) -> dict:
    """Dashboard figures for the public homepage. Never raises."""
    try:
        snapshot = dashboard_snapshot(now=now)
    except Exception as exc:
        logger.warning("Homepage stats unavailable, serving fallback", error=str(exc))
        return _copy(FALLBACK_HOMEPAGE_STATS)

    snapshot.pop("reviews_by_status", None)
    return snapshot


def _copy(snapshot: dict) -> dict:
    return {section: dict(values) for section, values in snapshot.items()}

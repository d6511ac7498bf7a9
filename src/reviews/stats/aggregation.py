"""Read-only aggregation primitives over the Review and User repositories.

Rating statistics only ever consider published reviews. Every helper
returns zeros or empty collections when nothing matches.
"""

from collections import OrderedDict

from protean.utils.globals import current_domain

from reviews.account.user import User
from reviews.review.review import Review, ReviewStatus, VerificationStatus
from reviews.utils.query import count, iter_records

RATING_VALUES = (1, 2, 3, 4, 5)


def review_query(**filters):
    query = current_domain.repository_for(Review)._dao.query
    return query.filter(**filters) if filters else query


def user_query(**filters):
    query = current_domain.repository_for(User)._dao.query
    return query.filter(**filters) if filters else query


def count_reviews(**filters) -> int:
    return count(review_query(**filters))


def count_users(**filters) -> int:
    return count(user_query(**filters))


def published_rating_distribution() -> dict[int, int]:
    """Number of published reviews per star rating, 1 through 5."""
    return {
        score: count_reviews(status=ReviewStatus.PUBLISHED.value, rating=score)
        for score in RATING_VALUES
    }


def average_from_distribution(distribution: dict[int, int]) -> float:
    total = sum(distribution.values())
    if total == 0:
        return 0.0
    weighted_sum = sum(int(rating) * n for rating, n in distribution.items())
    return round(weighted_sum / total, 2)


def published_rating_summary() -> tuple[int, float]:
    """(number of published ratings, their average)."""
    distribution = published_rating_distribution()
    return sum(distribution.values()), average_from_distribution(distribution)


def weighted_published_average() -> float:
    """Average published rating with each review scaled by its weighting score."""
    weighted_sum = 0.0
    weight_total = 0.0
    for review in iter_records(review_query(status=ReviewStatus.PUBLISHED.value).order_by("created_at")):
        weight = review.weighting_score if review.weighting_score is not None else 1.0
        weighted_sum += review.rating * weight
        weight_total += weight
    if weight_total == 0:
        return 0.0
    return round(weighted_sum / weight_total, 2)


def reviews_by_status() -> dict[str, int]:
    """Count per status, omitting statuses with no reviews."""
    counts = {status.value: count_reviews(status=status.value) for status in ReviewStatus}
    return {status: n for status, n in counts.items() if n}


def count_verified_reviews() -> int:
    return count_reviews(verification_status=VerificationStatus.VERIFIED.value)


def bucket_key(moment, granularity: str) -> str:
    if granularity == "month":
        return moment.strftime("%Y-%m")
    return moment.strftime("%Y-%m-%d")


def bucket_counts(records, granularity: str) -> list[dict]:
    """Count records per creation day or month, oldest bucket first."""
    buckets: dict[str, int] = {}
    for record in records:
        if record.created_at is None:
            continue
        key = bucket_key(record.created_at, granularity)
        buckets[key] = buckets.get(key, 0) + 1
    return [{"period": key, "count": buckets[key]} for key in sorted(buckets)]


def top_published_properties(limit: int) -> list[dict]:
    """Properties ranked by published review count; ties keep first-seen order."""
    groups: OrderedDict[tuple, list[int]] = OrderedDict()
    for review in iter_records(review_query(status=ReviewStatus.PUBLISHED.value).order_by("created_at")):
        key = (review.property_name, review.property_address)
        groups.setdefault(key, []).append(review.rating)

    ranked = sorted(groups.items(), key=lambda item: -len(item[1]))
    return [
        {
            "property_name": name,
            "property_address": address,
            "count": len(ratings),
            "average_rating": round(sum(ratings) / len(ratings), 2),
        }
        for (name, address), ratings in ranked[:limit]
    ]

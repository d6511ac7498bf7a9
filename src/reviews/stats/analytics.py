"""Analytics breakdown for the admin console.

Review and user activity are bucketed by creation day or month over an
optional date range. The rating histogram and the property ranking only
consider published reviews.
"""

from protean.exceptions import ValidationError

from reviews.stats import aggregation
from reviews.utils.query import iter_records

GRANULARITIES = ("day", "month")


def _date_filters(start_date, end_date) -> dict:
    filters = {}
    if start_date is not None:
        filters["created_at__gte"] = start_date
    if end_date is not None:
        filters["created_at__lte"] = end_date
    return filters


def analytics_breakdown(start_date=None, end_date=None, granularity="day", top_n=10) -> dict:
    if granularity not in GRANULARITIES:
        raise ValidationError({"granularity": ["Granularity must be 'day' or 'month'"]})
    if start_date is not None and end_date is not None and start_date > end_date:
        raise ValidationError({"start_date": ["Start date must not be after end date"]})
    if top_n < 1:
        raise ValidationError({"top_n": ["top_n must be at least 1"]})

    filters = _date_filters(start_date, end_date)
    reviews = iter_records(aggregation.review_query(**filters).order_by("created_at"))
    users = iter_records(aggregation.user_query(**filters).order_by("created_at"))
    distribution = aggregation.published_rating_distribution()

    return {
        "reviews_over_time": aggregation.bucket_counts(reviews, granularity),
        "user_growth": aggregation.bucket_counts(users, granularity),
        "ratings_distribution": [{"rating": score, "count": n} for score, n in distribution.items()],
        "top_properties": aggregation.top_published_properties(top_n),
    }

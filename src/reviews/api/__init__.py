"""Reviews API package."""

from reviews.api.account_routes import auth_router
from reviews.api.admin_routes import admin_router
from reviews.api.feedback_routes import feedback_router
from reviews.api.routes import review_router
from reviews.api.stats_routes import stats_router

__all__ = ["review_router", "admin_router", "auth_router", "stats_router", "feedback_router"]

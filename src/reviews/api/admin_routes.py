"""Admin console routes: dashboard, analytics, moderation queue and
account administration.

Every route requires an authenticated admin. Command handlers check the
actor again, so the dependency only short-circuits obvious refusals.
"""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends

from reviews.account import queries as user_queries
from reviews.account.management import ActivateUser, ChangeUserRole, DeleteUser, SuspendUser, VerifyUserEmail
from reviews.account.user import User
from reviews.api.auth import api_rate_limit, require_admin
from reviews.api.commands import dispatch
from reviews.api.schemas import (
    ChangeRoleRequest,
    FlagReviewRequest,
    RejectReviewRequest,
    StatusResponse,
    VerifyReviewRequest,
)
from reviews.review import queries as review_queries
from reviews.review.moderation import FlagReview, RejectReview, VerifyReview
from reviews.review.removal import DeleteReview
from reviews.stats.analytics import analytics_breakdown
from reviews.stats.dashboard import dashboard_snapshot

admin_router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(api_rate_limit)])


def _as_utc(moment: datetime | None) -> datetime | None:
    if moment is None or moment.tzinfo is not None:
        return moment
    return moment.replace(tzinfo=UTC)


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------
@admin_router.get("/dashboard")
async def dashboard(admin: User = Depends(require_admin)) -> dict:
    return dashboard_snapshot()


@admin_router.get("/analytics")
async def analytics(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    granularity: str = "day",
    top_n: int = 10,
    admin: User = Depends(require_admin),
) -> dict:
    return analytics_breakdown(
        start_date=_as_utc(start_date),
        end_date=_as_utc(end_date),
        granularity=granularity,
        top_n=top_n,
    )


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------
@admin_router.get("/reviews")
async def list_reviews(
    status: str | None = None,
    verification_status: str | None = None,
    page: int = 1,
    limit: int = 20,
    sort_by: str = "created_at",
    order: str = "desc",
    admin: User = Depends(require_admin),
) -> dict:
    return review_queries.list_reviews_for_admin(
        status=status,
        verification_status=verification_status,
        page=page,
        limit=limit,
        sort_by=sort_by,
        order=order,
    )


@admin_router.get("/reviews/{review_id}")
async def review_detail(review_id: str, admin: User = Depends(require_admin)) -> dict:
    return review_queries.get_review_for_admin(review_id)


@admin_router.put("/reviews/{review_id}/verify", response_model=StatusResponse)
async def verify_review(
    review_id: str,
    body: VerifyReviewRequest,
    admin: User = Depends(require_admin),
) -> StatusResponse:
    """Publish a review and anonymize it."""
    command = VerifyReview(
        actor_id=str(admin.id),
        review_id=review_id,
        weighting_score=body.weighting_score,
        admin_notes=body.admin_notes,
    )
    await dispatch(command)
    return StatusResponse()


@admin_router.put("/reviews/{review_id}/reject", response_model=StatusResponse)
async def reject_review(
    review_id: str,
    body: RejectReviewRequest,
    admin: User = Depends(require_admin),
) -> StatusResponse:
    command = RejectReview(actor_id=str(admin.id), review_id=review_id, reason=body.reason)
    await dispatch(command)
    return StatusResponse()


@admin_router.put("/reviews/{review_id}/flag", response_model=StatusResponse)
async def flag_review(
    review_id: str,
    body: FlagReviewRequest,
    admin: User = Depends(require_admin),
) -> StatusResponse:
    command = FlagReview(actor_id=str(admin.id), review_id=review_id, reason=body.reason)
    await dispatch(command)
    return StatusResponse()


@admin_router.delete("/reviews/{review_id}", response_model=StatusResponse)
async def delete_review(review_id: str, admin: User = Depends(require_admin)) -> StatusResponse:
    await dispatch(DeleteReview(actor_id=str(admin.id), review_id=review_id))
    return StatusResponse()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
@admin_router.get("/users")
async def list_users(
    search: str | None = None,
    status: str | None = None,
    page: int = 1,
    limit: int = 20,
    admin: User = Depends(require_admin),
) -> dict:
    return user_queries.list_users(search=search, status=status, page=page, limit=limit)


@admin_router.get("/users/{user_id}")
async def user_detail(user_id: str, admin: User = Depends(require_admin)) -> dict:
    return user_queries.get_user(user_id)


@admin_router.put("/users/{user_id}/verify-email", response_model=StatusResponse)
async def verify_user_email(user_id: str, admin: User = Depends(require_admin)) -> StatusResponse:
    await dispatch(VerifyUserEmail(actor_id=str(admin.id), user_id=user_id))
    return StatusResponse()


@admin_router.put("/users/{user_id}/suspend", response_model=StatusResponse)
async def suspend_user(user_id: str, admin: User = Depends(require_admin)) -> StatusResponse:
    await dispatch(SuspendUser(actor_id=str(admin.id), user_id=user_id))
    return StatusResponse()


@admin_router.put("/users/{user_id}/activate", response_model=StatusResponse)
async def activate_user(user_id: str, admin: User = Depends(require_admin)) -> StatusResponse:
    await dispatch(ActivateUser(actor_id=str(admin.id), user_id=user_id))
    return StatusResponse()


@admin_router.put("/users/{user_id}/role", response_model=StatusResponse)
async def change_role(
    user_id: str,
    body: ChangeRoleRequest,
    admin: User = Depends(require_admin),
) -> StatusResponse:
    command = ChangeUserRole(actor_id=str(admin.id), user_id=user_id, role=body.role)
    await dispatch(command)
    return StatusResponse()


@admin_router.delete("/users/{user_id}", response_model=StatusResponse)
async def delete_user(user_id: str, admin: User = Depends(require_admin)) -> StatusResponse:
    await dispatch(DeleteUser(actor_id=str(admin.id), user_id=user_id))
    return StatusResponse()

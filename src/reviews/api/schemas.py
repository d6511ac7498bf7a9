"""Pydantic request/response schemas for the reviews API.

These are separate from Protean commands (anti-corruption pattern).
The API layer is the external contract; commands are internal domain concepts.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str


class UpdateProfileRequest(BaseModel):
    username: str
    email: str


class DeleteAccountRequest(BaseModel):
    password: str


class ResendVerificationRequest(BaseModel):
    email: str


class VerifyReviewRequest(BaseModel):
    weighting_score: float | None = None
    admin_notes: str | None = None


class RejectReviewRequest(BaseModel):
    reason: str | None = None


class FlagReviewRequest(BaseModel):
    reason: str | None = None


class ChangeRoleRequest(BaseModel):
    role: str


class FeedbackRequest(BaseModel):
    message: str | None = None
    name: str | None = None
    email: str | None = None
    website: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class IdResponse(BaseModel):
    id: str


class TokenResponse(BaseModel):
    id: str
    access_token: str
    token_type: str = "bearer"


class AccountResponse(BaseModel):
    id: str
    username: str
    email: str
    role: str
    account_status: str
    is_email_verified: bool
    created_at: datetime | None = None
    last_login_at: datetime | None = None


class SubmittedReviewResponse(BaseModel):
    review_id: str
    status: str
    message: str = "Review submitted successfully and is pending verification"


class PublicReview(BaseModel):
    id: str
    property_name: str
    property_address: str | None = None
    landlord_name: str | None = None
    rating: int
    title: str
    body: str
    published_at: datetime | None = None
    weighting_score: float


class PublishedReviewPage(BaseModel):
    items: list[PublicReview]
    total_pages: int
    current_page: int
    total: int


class PublicStatsReviews(BaseModel):
    published: int


class PublicStatsRatings(BaseModel):
    average: float


class PublicStatsResponse(BaseModel):
    reviews: PublicStatsReviews
    ratings: PublicStatsRatings

"""Unauthenticated statistics for the public site."""

from fastapi import APIRouter, Depends

from reviews.api.auth import api_rate_limit
from reviews.api.schemas import PublicStatsResponse
from reviews.stats.dashboard import homepage_stats
from reviews.stats.public import public_stats

stats_router = APIRouter(tags=["stats"], dependencies=[Depends(api_rate_limit)])


@stats_router.get("/stats", response_model=PublicStatsResponse)
async def get_public_stats() -> dict:
    return public_stats()


@stats_router.get("/admin/stats")
async def get_homepage_stats() -> dict:
    """Dashboard figures shown on the homepage; no login required."""
    return homepage_stats()

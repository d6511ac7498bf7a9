"""ClearWindow FastAPI application.

Processes commands synchronously via HTTP inside the reviews domain context,
and sweeps the rate limiter stores on a schedule.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

import asyncio
import contextlib

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from reviews import config
from reviews.domain import reviews
from reviews.throttle import sweep_all
from reviews.utils.logging import bind_request, get_logger

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Initialized at module level so uvicorn workers share it.
reviews.init()


# ---------------------------------------------------------------------------
# Rate limiter housekeeping
# ---------------------------------------------------------------------------
async def _sweep_rate_limiters(interval: float) -> None:
    while True:
        await asyncio.sleep(interval)
        evicted = sweep_all()
        if evicted:
            logger.debug("Rate limiter entries evicted", count=evicted)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    task = asyncio.create_task(_sweep_rate_limiters(config.rate_limit_sweep_seconds()))
    try:
        yield
    finally:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="ClearWindow API",
    description="Verified, anonymized landlord reviews",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.app_url()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the reviews domain context and bind request details to log events."""
    bind_request(request.method, request.url.path)
    with reviews.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from reviews.api import admin_router, auth_router, feedback_router, review_router, stats_router  # noqa: E402
from reviews.api.errors import register_error_handlers  # noqa: E402

# The public stats router owns /admin/stats, so it goes before the admin router
app.include_router(stats_router)
app.include_router(auth_router)
app.include_router(review_router)
app.include_router(admin_router)
app.include_router(feedback_router)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": {"name": reviews.name}})

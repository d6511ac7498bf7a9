import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from reviews.api import admin_router, auth_router, feedback_router, review_router, stats_router
from reviews.api.auth import create_access_token
from reviews.api.errors import register_error_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(stats_router)
    app.include_router(auth_router)
    app.include_router(review_router)
    app.include_router(admin_router)
    app.include_router(feedback_router)
    register_error_handlers(app)
    return TestClient(app)


@pytest.fixture()
def auth_for():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(str(user.id))}"}

    return _headers

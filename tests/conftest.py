"""Shared fixtures: a TestClient over the app with services swapped for fakes."""

from __future__ import annotations

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["REDIS_ENABLED"] = "false"
os.environ["RATE_LIMIT_BACKEND"] = "memory"

import pytest
from fastapi.testclient import TestClient

from alphatrader.core import create_access_token
from alphatrader.main import app
from alphatrader.services import InMemoryRateLimitStore, RateLimiter, get_rate_limiter

SECRET_KEY = os.environ["SECRET_KEY"]


def make_token(user_id: str | int = 1) -> str:
    return create_access_token({"sub": str(user_id), "email": f"user{user_id}@example.com"}, SECRET_KEY)


def auth_headers(user_id: str | int = 1) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def rate_limiter():
    return RateLimiter(InMemoryRateLimitStore())


@pytest.fixture
def client(rate_limiter):
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def override():
    """Replace a FastAPI dependency for the duration of one test."""

    def _override(dependency, replacement):
        app.dependency_overrides[dependency] = lambda: replacement
        return replacement

    return _override

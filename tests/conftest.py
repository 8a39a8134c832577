# tests/conftest.py
import os

# Settings are read when product_reviews is first imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./product_reviews_test.db"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["REVIEW_CACHE_PRELOAD"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from product_reviews import app
from product_reviews.auth.dependencies import (
    CREATE_REVIEW,
    READ_REVIEW,
    READ_REVIEWS,
    READ_VISIBLE_REVIEWS,
    UPDATE_REVIEW,
)
from product_reviews.auth.utils import create_access_token
from product_reviews.db.cache import ReviewCache, get_review_cache
from product_reviews.db.main import get_session
from product_reviews.db.models import ProductReview  # noqa: F401

ALL_CAPABILITIES = [READ_REVIEWS, READ_VISIBLE_REVIEWS, READ_REVIEW, CREATE_REVIEW, UPDATE_REVIEW]


@pytest.fixture
def anyio_backend():
    return "asyncio"


# ─────────────────────────────────────────────────────────────
# Database
# ─────────────────────────────────────────────────────────────
@pytest.fixture
def database_url(tmp_path):
    """Fresh SQLite file per test with the schema already created."""
    path = tmp_path / "reviews.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    SQLModel.metadata.create_all(sync_engine)
    sync_engine.dispose()
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
def session_maker(database_url):
    engine = create_async_engine(database_url, poolclass=NullPool)
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def cache():
    return ReviewCache()


# ─────────────────────────────────────────────────────────────
# HTTP client & auth
# ─────────────────────────────────────────────────────────────
def make_headers(*capabilities):
    token = create_access_token({"email": "moderator@example.com"}, list(capabilities))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return make_headers(*ALL_CAPABILITIES)


@pytest.fixture
def client(session_maker, cache):
    async def override_get_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_review_cache] = lambda: cache
    yield TestClient(app)
    app.dependency_overrides.clear()

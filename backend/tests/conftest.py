"""
Shared test fixtures: SQLite test DB, FastAPI test client, auth helpers.

Uses a file-backed SQLite database through aiosqlite so tests are fast and
don't require PostgreSQL. Tables are rebuilt for every test.
"""

from __future__ import annotations

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from tests.factories import (
    DB_ADMIN,
    ENV_ADMIN_EMAIL,
    ENV_ADMIN_PASSWORD,
    OTHER_SUPERVISOR,
    SUPERVISOR,
    bearer,
    login_user,
    seed_user,
)

TEST_DB_PATH = "/tmp/test_site_registry.db"
TEST_DB_URL = f"sqlite+aiosqlite:///{TEST_DB_PATH}"

# ── Patch settings BEFORE any app imports ────────────────
import app.config as _cfg

_cfg.settings.DATABASE_URL = TEST_DB_URL
_cfg.settings.DEBUG = False
_cfg.settings.JWT_SECRET_KEY = "test-secret-key"
_cfg.settings.BCRYPT_ROUNDS = 4
_cfg.settings.ADMIN_EMAIL = ENV_ADMIN_EMAIL
_cfg.settings.ADMIN_PASSWORD = ENV_ADMIN_PASSWORD

from app.core.auth import get_auth_config      # noqa: E402
from app.database import Base, get_db          # noqa: E402
from app.main import create_app                # noqa: E402
from app.models import Site, User             # noqa: E402, F401

get_auth_config.cache_clear()

# NullPool: every test runs on its own event loop, so connections are never shared
_test_engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=NullPool)
_TestSession = async_sessionmaker(_test_engine, class_=AsyncSession, expire_on_commit=False)


# ── Database lifecycle ──────────────────────────────────

@pytest_asyncio.fixture()
async def tables() -> AsyncGenerator[None, None]:
    """Create all tables for one test and drop them afterwards."""
    async with _test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with _test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(scope="session", autouse=True)
def _remove_db_file():
    yield
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)


@pytest_asyncio.fixture()
async def db_session(tables) -> AsyncGenerator[AsyncSession, None]:
    """A session on the test database for direct setup and assertions."""
    async with _TestSession() as session:
        yield session


# ── FastAPI override for DB dependency ───────────────────

async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with _TestSession() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── HTTP client fixture ─────────────────────────────────

@pytest_asyncio.fixture()
async def app_client(tables) -> AsyncGenerator[AsyncClient, None]:
    """``httpx.AsyncClient`` wired to the FastAPI app on the test database."""
    app = create_app()
    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        follow_redirects=True,
    ) as client:
        yield client

    app.dependency_overrides.clear()


# ── Auth helper fixtures ────────────────────────────────

@pytest_asyncio.fixture()
async def env_admin_token(app_client: AsyncClient) -> str:
    """Log in as the environment admin and return the token."""
    resp = await app_client.post("/api/v1/auth/admin/login", json={
        "email": ENV_ADMIN_EMAIL,
        "password": ENV_ADMIN_PASSWORD,
    })
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


@pytest_asyncio.fixture()
async def admin_headers(env_admin_token: str) -> dict[str, str]:
    return bearer(env_admin_token)


@pytest_asyncio.fixture()
async def supervisor(app_client: AsyncClient, admin_headers) -> dict:
    """Register a supervisor through the API; return its view + password."""
    resp = await app_client.post("/api/v1/auth/register", json=SUPERVISOR, headers=admin_headers)
    assert resp.status_code == 201, resp.text
    return {**resp.json()["user"], "password": SUPERVISOR["password"]}


@pytest_asyncio.fixture()
async def supervisor_headers(app_client: AsyncClient, supervisor) -> dict[str, str]:
    data = await login_user(app_client, SUPERVISOR)
    return bearer(data["access_token"])


@pytest_asyncio.fixture()
async def other_supervisor_headers(app_client: AsyncClient, admin_headers) -> dict[str, str]:
    resp = await app_client.post(
        "/api/v1/auth/register", json=OTHER_SUPERVISOR, headers=admin_headers
    )
    assert resp.status_code == 201, resp.text
    data = await login_user(app_client, OTHER_SUPERVISOR)
    return bearer(data["access_token"])


@pytest_asyncio.fixture()
async def db_admin(db_session: AsyncSession) -> User:
    return await seed_user(db_session, DB_ADMIN)


@pytest_asyncio.fixture()
async def db_admin_headers(app_client: AsyncClient, db_admin) -> dict[str, str]:
    resp = await app_client.post("/api/v1/auth/admin/login", json={
        "email": DB_ADMIN["email"],
        "password": DB_ADMIN["password"],
    })
    assert resp.status_code == 200, resp.text
    return bearer(resp.json()["access_token"])

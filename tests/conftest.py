"""Pytest configuration and fixtures for the record engine.

Environment is set before cms.* is imported so that Settings validate
(SQLite for the sql backend, a fixed SECRET_KEY for bearer tokens).
Stores run in-process: SQLite via aiosqlite and Redis via fakeredis.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("RECORD_BACKEND", "sql")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("WRITE_RATE_LIMIT", "10000/minute")

import pytest
from fakeredis import FakeAsyncRedis
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from cms.core.config import get_settings
from cms.domain.entities.collection import CollectionConfig, collection
from cms.infrastructure.kv import RedisRecordStore
from cms.infrastructure.persistence.database import create_schema
from cms.infrastructure.persistence.repositories import SqlRecordStore
from cms.infrastructure.security.jwt import create_access_token
from cms.main import create_app

get_settings.cache_clear()


def _add_slug(old, old_version, new_version):
    data = dict(old.data)
    data["slug"] = str(data.get("title", "")).lower().replace(" ", "-")
    return data


@pytest.fixture
def test_collections() -> list[CollectionConfig]:
    """posts (public read, versioned), secrets (admin only), settings (singleton), notes (schemaless)."""
    return [
        collection(
            "posts",
            label="Posts",
            fields={
                "title": {"type": "text", "required": True},
                "slug": {"type": "text"},
                "views": {"type": "number", "default": 0},
                "tags": {"type": "list", "fields": {"name": {"type": "text"}}},
            },
            access={
                "read": ["public"],
                "create": ["editor"],
                "update": ["editor"],
                "delete": ["editor"],
            },
            version=2,
            hooks={"new_version": _add_slug},
        ),
        collection(
            "secrets",
            fields={"value": {"type": "text"}},
            access={"read": ["admin"]},
        ),
        collection(
            "settings",
            fields={"site_name": {"type": "text", "default": "My site"}},
            access={"read": ["public"], "update": ["editor"]},
            unique=True,
        ),
        collection(
            "notes",
            access={"read": ["editor"], "create": ["editor"], "update": ["editor"], "delete": ["editor"]},
        ),
    ]


@pytest.fixture
async def sql_store() -> SqlRecordStore:
    """SqlRecordStore on a fresh in-memory SQLite database."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_schema(engine)
    sessions = async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    yield SqlRecordStore(sessions)
    await engine.dispose()


@pytest.fixture
async def redis_client() -> FakeAsyncRedis:
    client = FakeAsyncRedis(decode_responses=True)
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def kv_store(redis_client: FakeAsyncRedis) -> RedisRecordStore:
    """RedisRecordStore on an in-process fake Redis."""
    return RedisRecordStore(redis_client, key_prefix="test:")


@pytest.fixture
def app(test_collections, sql_store):
    """FastAPI app with the test collections and the SQLite record store."""
    application = create_app(collections=test_collections)
    application.state.record_store = sql_store
    return application


@pytest.fixture
async def client(app) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def _bearer(user_id: str, *roles: str) -> dict[str, str]:
    """Authorization header for a token carrying the given roles."""
    token = create_access_token({"sub": user_id, "roles": list(roles)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def editor_headers() -> dict[str, str]:
    return _bearer("editor-1", "editor")


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return _bearer("admin-1", "admin")


@pytest.fixture
def reader_headers() -> dict[str, str]:
    """Authenticated user with no granted roles."""
    return _bearer("reader-1", "member")

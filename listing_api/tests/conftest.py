import os
import time
from collections import Counter
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker

# CRITICAL: Set test configuration BEFORE importing any listing_api modules
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TESTING"] = "true"
os.environ["REDIS_URL"] = ""
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from listing_api.main import app  # noqa: E402
from listing_api.cache import CacheClient  # noqa: E402
from listing_api.cache_keys import CacheKeyBuilder  # noqa: E402
from listing_api.database import Base, enable_sqlite_foreign_keys  # noqa: E402
from listing_api.dependencies import get_cache, get_db  # noqa: E402
from listing_api.models import Property, PropertyStatus, PropertyType, User  # noqa: E402
from listing_api.repositories import PropertyRepository  # noqa: E402
from listing_api.services.auth_service import create_access_token  # noqa: E402


class FakeRedis:
    """In-memory stand-in for ``redis.asyncio.Redis`` covering get/set/delete."""

    def __init__(self):
        self.store: dict[str, tuple[bytes, float | None]] = {}
        self.ttls: dict[str, int | None] = {}
        self.calls = Counter()
        self.fail = False

    def _check(self, op: str):
        self.calls[op] += 1
        if self.fail:
            raise RedisConnectionError("redis is down")

    async def get(self, key):
        self._check("get")
        entry = self.store.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at < time.monotonic():
            self.store.pop(key, None)
            return None
        return value

    async def set(self, key, value, ex=None):
        self._check("set")
        if isinstance(value, str):
            value = value.encode("utf-8")
        expires_at = time.monotonic() + ex if ex else None
        self.store[key] = (value, expires_at)
        self.ttls[key] = ex
        return True

    async def delete(self, *keys):
        self._check("delete")
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
        return removed

    async def aclose(self):
        return None


class CountingPropertyRepository(PropertyRepository):
    """Property store that records how often each read reaches the database."""

    def __init__(self, db):
        super().__init__(db)
        self.calls = Counter()

    def get(self, property_id):
        self.calls["get"] += 1
        return super().get(property_id)

    def page(self, offset, limit):
        self.calls["page"] += 1
        return super().page(offset, limit)

    def count(self):
        self.calls["count"] += 1
        return super().count()

    def search(self, filters):
        self.calls["search"] += 1
        return super().search(filters)


@pytest.fixture(scope="session")
def test_engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # share same in-memory DB across connections
    )
    enable_sqlite_foreign_keys(engine)
    return engine


@pytest.fixture()
def session_factory(test_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture()
def db_session(test_engine, session_factory):
    # Fresh schema per test to avoid cross-test data (e.g., unique email)
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)

    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def fake_redis():
    return FakeRedis()


@pytest.fixture()
def cache(fake_redis):
    return CacheClient(fake_redis, ttl=3600)


@pytest.fixture()
def keys():
    return CacheKeyBuilder("pls")


@pytest.fixture()
def client(db_session, session_factory, cache):
    def test_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = test_get_db
    app.dependency_overrides[get_cache] = lambda: cache

    # Disable rate limiter globally for tests
    limiter = getattr(app.state, "limiter", None)
    if limiter is not None:
        limiter.enabled = False

    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db, email="owner@example.com", name="Owner"):
    user = User(email=email, password_hash="x", name=name, is_active=True)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    token = create_access_token(user.email, user.id, timedelta(minutes=30))
    return {"Authorization": f"Bearer {token}"}


def property_payload(**overrides):
    payload = {
        "title": "Nice House",
        "description": "A lovely place",
        "price": 250000,
        "location": {
            "address": "123 Main St",
            "city": "Austin",
            "state": "TX",
            "zipCode": "73301",
            "country": "USA",
        },
        "bedrooms": 3,
        "bathrooms": 2,
        "area": 1500,
        "type": PropertyType.HOUSE.value,
        "status": PropertyStatus.FOR_SALE.value,
    }
    payload.update(overrides)
    return payload


def seed_property(db, owner, address="1 Seed Rd", **overrides):
    from datetime import datetime, timezone

    values = {
        "title": "Seeded",
        "price": 100000.0,
        "address": address,
        "city": "Austin",
        "state": "TX",
        "zip_code": "73301",
        "country": "USA",
        "property_type": PropertyType.HOUSE,
        "status": PropertyStatus.FOR_SALE,
        "bedrooms": 2,
        "bathrooms": 1.0,
        "area": 900.0,
        "created_by": owner.id,
        "created_at": datetime.now(timezone.utc),
    }
    values.update(overrides)
    prop = Property(**values)
    db.add(prop)
    db.commit()
    db.refresh(prop)
    return prop

"""
Test infrastructure for the Article Catalog API.

Strategy
--------
- SQLite in-memory via aiosqlite keeps the suite free of a running
  Postgres instance.
- StaticPool makes every session share the one in-memory connection;
  a second connection would see an empty database.  Closing a session
  with an open transaction still rolls back that shared connection.
- The app's get_db dependency and the view counter's session factory are
  both pointed at the test session factory.
- Tables are created before each test and dropped after it.
- Redis is disabled by setting cache._redis = None; the SeriesCache
  treats that as a permanent miss.
  Tests of the cache itself use the fake_redis fixture instead.
- The view counter worker is drained and stopped after each test so no
  task outlives the test's event loop.
"""
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from catalog.cache import cache
from catalog.counters import view_counter
from catalog.database import Base, commit, get_db, rollback
from catalog.main import app

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    # The one connection is shared; a rollback on check-in from one session
    # would discard another session's (e.g. the view counter's) pending write.
    pool_reset_on_return=None,
)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await commit(session)
        except Exception:
            await rollback(session)
            raise


app.dependency_overrides[get_db] = override_get_db
view_counter.session_factory = async_session_test
view_counter.retry_delay = 0


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    cache._redis = None
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await view_counter.stop()
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """A live AsyncSession for seeding data and calling services directly."""
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """An httpx.AsyncClient wired to the FastAPI app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def session_factory():
    """
    The test session factory, for tests that need several independent
    sessions.  Sessions share one connection, so commit seeded data
    before closing any of them.
    """
    return async_session_test


class FakeRedis:
    """The slice of redis.asyncio.Redis the series cache uses, held in a dict."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self.data[key] = value

    async def scan_iter(self, match="*"):
        prefix = match.rstrip("*")
        for key in list(self.data):
            if key.startswith(prefix):
                yield key

    async def delete(self, *keys):
        for key in keys:
            self.data.pop(key, None)


@pytest_asyncio.fixture
async def fake_redis(monkeypatch) -> FakeRedis:
    """Back the series cache with an in-memory FakeRedis for one test."""
    store = FakeRedis()
    monkeypatch.setattr(cache, "_redis", store)
    return store

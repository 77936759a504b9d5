import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from main import app
from core.auth import current_active_user
from core.cache import ReadThroughCache, get_inventory_cache
from db.database import Base, User, enable_sqlite_foreign_keys, get_async_session


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_user(email: str, roles=(), is_superuser: bool = False) -> User:
    return User(
        id=uuid.uuid4(),
        email=email,
        hashed_password="not-used",
        is_active=True,
        is_superuser=is_superuser,
        is_verified=True,
        roles=list(roles),
    )


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'logitrack-test.db'}")
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ReadThroughCache(ttl_seconds=30, clock=clock)


@pytest.fixture
def manager():
    return make_user("manager@example.com", roles=["Manager"])


@pytest.fixture
def clerk():
    return make_user("clerk@example.com")


@pytest.fixture
def superuser():
    return make_user("root@example.com", is_superuser=True)


@pytest.fixture
def login_as():
    """Make every following request run as ``user`` (None: unauthenticated)."""

    def _login(user):
        if user is None:
            app.dependency_overrides.pop(current_active_user, None)
        else:
            app.dependency_overrides[current_active_user] = lambda: user
        return user

    return _login


@pytest.fixture
async def anonymous_client(session_maker, cache):
    async def _get_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = _get_session
    app.dependency_overrides[get_inventory_cache] = lambda: cache
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def client(anonymous_client, login_as, manager):
    login_as(manager)
    return anonymous_client


@pytest.fixture
def create_item(client):
    async def _create(name="Pallet", quantity=10, location="A1"):
        r = await client.post("/api/inventory/", json={"name": name, "quantity": quantity, "location": location})
        assert r.status_code == 201, r.text
        return r.json()

    return _create

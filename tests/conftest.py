import os

# Settings are read at import time, so the test database must be configured first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("ERROR_LOG_FILE", "")

import pytest
from faker import Faker
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from omnitrackr.database import Base, enable_sqlite_foreign_keys, get_db
from omnitrackr.main import app

fake = Faker()

TEST_PASSWORD = "s3cret-pass"


@pytest.fixture
async def engine():
    engine = enable_sqlite_foreign_keys(create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    ))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def new_credentials() -> dict:
    return {
        "username": f"{fake.user_name()}_{fake.unique.random_int(1000, 9999999)}",
        "email": fake.unique.free_email(),
        "password": TEST_PASSWORD,
    }


async def register(client: AsyncClient, **overrides) -> tuple[dict, dict]:
    creds = {**new_credentials(), **overrides}
    resp = await client.post("/api/auth/register", json=creds)
    assert resp.status_code == 201, resp.text
    return creds, resp.json()["data"]


async def login(client: AsyncClient, username: str, password: str = TEST_PASSWORD) -> dict:
    resp = await client.post("/api/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    # Tests pick the token carrier explicitly
    client.cookies.clear()
    return resp.json()["data"]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(client):
    """Factory: registers and logs in a fresh user, returns (user, headers)."""
    async def _make_user():
        creds, user = await register(client)
        session = await login(client, creds["username"])
        return user, bearer(session["session_id"])
    return _make_user


@pytest.fixture
async def auth_headers(make_user):
    _, headers = await make_user()
    return headers


@pytest.fixture
def credentials():
    return new_credentials()

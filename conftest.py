import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from store_rating.main import app
from store_rating.db.session import build_sessionmaker
from store_rating.models import Base, User
from store_rating.core.security import create_access_token, hash_password
from store_rating.core.enums import UserRole


TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite://")

DEFAULT_PASSWORD = "Valid1!pass"


def _build_test_engine():
    if TEST_DATABASE_URL.startswith("sqlite"):
        # one shared connection keeps the in-memory database alive between sessions
        return create_async_engine(
            TEST_DATABASE_URL,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(TEST_DATABASE_URL, future=True)


@pytest.fixture
async def engine():
    test_engine = _build_test_engine()
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    yield test_engine
    
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_sessionmaker(engine)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def test_client(engine, session_factory):
    app.state.engine = engine
    app.state.sessionmaker = session_factory
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.state.engine = None
    app.state.sessionmaker = None


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def token_for(user: User) -> str:
    return create_access_token(str(user.id), user.role)


@pytest.fixture
def create_account_factory(session_factory):
    async def _create_account(
        name="Normal User Number One",
        email="user1@example.com",
        password=DEFAULT_PASSWORD,
        address="12 Harbour Road",
        role=UserRole.USER,
    ) -> User:
        async with session_factory() as session:
            user = User(
                name=name,
                email=email,
                password_hash=hash_password(password),
                address=address,
                role=role,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user
    
    return _create_account


@pytest.fixture
async def admin_user(create_account_factory):
    return await create_account_factory(
        name="System Administrator One",
        email="admin@example.com",
        role=UserRole.ADMIN,
    )


@pytest.fixture
async def normal_user(create_account_factory):
    return await create_account_factory()


@pytest.fixture
async def second_user(create_account_factory):
    return await create_account_factory(name="Normal User Number Two", email="user2@example.com")


@pytest.fixture
async def store_user(create_account_factory):
    return await create_account_factory(
        name="Corner Grocery Store One",
        email="store@example.com",
        address="1 Market Square",
        role=UserRole.STORE,
    )


@pytest.fixture
def admin_token(admin_user):
    return token_for(admin_user)


@pytest.fixture
def user_token(normal_user):
    return token_for(normal_user)


@pytest.fixture
def second_user_token(second_user):
    return token_for(second_user)


@pytest.fixture
def store_token(store_user):
    return token_for(store_user)


@pytest.fixture
def valid_account_data():
    return {
        "name": "Registered Shopper Name",
        "email": "shopper@example.com",
        "password": DEFAULT_PASSWORD,
        "address": "42 Elm Street, Springfield",
    }


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "auth: marks tests related to authentication"
    )
    config.addinivalue_line(
        "markers", "admin: marks tests related to admin endpoints"
    )
    config.addinivalue_line(
        "markers", "ratings: marks tests related to rating submission and aggregates"
    )
    config.addinivalue_line(
        "markers", "audit: marks tests related to audit logging"
    )


@pytest.fixture
def admin_headers(admin_token):
    return auth_headers(admin_token)


@pytest.fixture
def user_headers(user_token):
    return auth_headers(user_token)


@pytest.fixture
def second_user_headers(second_user_token):
    return auth_headers(second_user_token)


@pytest.fixture
def store_headers(store_token):
    return auth_headers(store_token)

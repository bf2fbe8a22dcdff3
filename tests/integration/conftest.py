"""Shared fixtures for integration tests.

Every test gets its own in-memory SQLite database, created from the ORM
metadata and seeded with three cities. The application under test opens a
fresh session per request against that database, as it does in production.
"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from cityinfo.api.main import create_app
from cityinfo.core.config import get_settings
from cityinfo.infrastructure.database.base import Base
from cityinfo.infrastructure.database.dependencies import get_db
from cityinfo.infrastructure.database.models import City, PointOfInterest
from cityinfo.infrastructure.database.session import (
    _db_manager,
    _enable_sqlite_foreign_keys,
    close_database,
)
from cityinfo.services.authentication import (
    AuthenticatedUser,
    DemoCredentialValidator,
    TokenService,
)

SEED_CITIES = [
    (
        "New York City",
        "The one with that big park.",
        [
            ("Central Park", "The most visited urban park in the United States."),
            (
                "Empire State Building",
                "A 102-story skyscraper located in Midtown Manhattan.",
            ),
        ],
    ),
    (
        "Antwerp",
        "The one with the cathedral that was never really finished.",
        [
            ("Cathedral of Our Lady", "A Gothic style cathedral."),
            (
                "Antwerp Central Station",
                "The finest example of railway architecture in Belgium.",
            ),
        ],
    ),
    (
        "Paris",
        "The one with that big tower.",
        [
            ("Eiffel Tower", "A wrought iron lattice tower on the Champ de Mars."),
            ("The Louvre", "The world's largest museum."),
        ],
    ),
]

BERLIN_USER = AuthenticatedUser(
    user_id=1,
    user_name="bogdan",
    first_name="Bogdan",
    last_name="Polojan",
    city="Berlin",
)
ANTWERP_USER = AuthenticatedUser(
    user_id=2,
    user_name="kevin",
    first_name="Kevin",
    last_name="Dockx",
    city="Antwerp",
)


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Provide a seeded in-memory database shared by every connection."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)

    async with AsyncSession(engine) as session:
        for name, description, points in SEED_CITIES:
            city = City(name=name, description=description)
            city.points_of_interest = [
                PointOfInterest(name=point_name, description=point_description)
                for point_name, point_description in points
            ]
            session.add(city)
        await session.commit()

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Provide a session on the seeded database for direct repository tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def app(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[FastAPI]:
    """Create an application whose requests use the seeded database."""
    test_app = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    test_app.dependency_overrides[get_db] = override_get_db

    yield test_app

    test_app.dependency_overrides.clear()
    if _db_manager._engine is not None:
        await close_database()


@pytest.fixture
async def client_with_db(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create a test client for the application."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(get_settings().auth_config, DemoCredentialValidator())


@pytest.fixture
def berlin_headers(token_service: TokenService) -> dict[str, str]:
    """Authorization headers for a caller who satisfies MustLiveInBerlin."""
    return {"Authorization": f"Bearer {token_service.create_token(BERLIN_USER)}"}


@pytest.fixture
def antwerp_headers(token_service: TokenService) -> dict[str, str]:
    """Authorization headers for an authenticated caller outside Berlin."""
    return {"Authorization": f"Bearer {token_service.create_token(ANTWERP_USER)}"}


@pytest.fixture
def expired_headers(token_service: TokenService) -> dict[str, str]:
    token = token_service.create_token(
        BERLIN_USER, issued_at=datetime.now(UTC) - timedelta(hours=2)
    )
    return {"Authorization": f"Bearer {token}"}

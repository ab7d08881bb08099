"""Shared test fixtures for async database, sessions, administrators, ballot, and tokens."""

import uuid
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from ballot_api.core.config import Settings
from ballot_api.core.database import enable_sqlite_foreign_keys
from ballot_api.core.security import create_access_token, hash_password
from ballot_api.models.ballot import Candidate, Position
from ballot_api.models.base import Base
from ballot_api.models.election_config import ELECTION_CONFIG_ID, ElectionConfig
from ballot_api.models.user import User
from ballot_api.models.voter import Voter

TEST_SECRET = "test-secret-key-not-for-production"
ADMIN_PASSWORD = "testpassword123"


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret_key=TEST_SECRET,
        jwt_algorithm="HS256",
        jwt_access_token_expire_minutes=30,
        jwt_refresh_token_expire_days=7,
    )


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory async SQLite engine shared by every session in a test."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool)
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(async_engine, expire_on_commit=False)


@pytest.fixture
async def async_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession]:
    """Create a per-test async session."""
    async with session_factory() as session:
        yield session


async def _add_admin(session: AsyncSession, username: str, role: str) -> User:
    user = User(
        id=uuid.uuid4(),
        username=username,
        email=f"{username}@test.com",
        hashed_password=hash_password(ADMIN_PASSWORD),
        role=role,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest.fixture
async def chairman(async_session: AsyncSession) -> User:
    """An active chairman account."""
    return await _add_admin(async_session, "chair", "chairman")


@pytest.fixture
async def secretary(async_session: AsyncSession) -> User:
    """An active secretary account."""
    return await _add_admin(async_session, "secretary", "secretary")


@pytest.fixture
async def committee(async_session: AsyncSession) -> User:
    """An active committee (read-only) account."""
    return await _add_admin(async_session, "committee", "committee")


def _token_for(user: User, settings: Settings) -> str:
    return create_access_token(
        subject=user.username,
        role=user.role,
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


@pytest.fixture
def chairman_token(chairman: User, settings: Settings) -> str:
    """Access token for the chairman."""
    return _token_for(chairman, settings)


@pytest.fixture
def secretary_token(secretary: User, settings: Settings) -> str:
    """Access token for the secretary."""
    return _token_for(secretary, settings)


@pytest.fixture
def committee_token(committee: User, settings: Settings) -> str:
    """Access token for a committee member."""
    return _token_for(committee, settings)


@pytest.fixture
async def ballot(async_session: AsyncSession) -> dict[str, object]:
    """Two positions (President first) with two candidates each."""
    president = Position(id=uuid.uuid4(), title="President", order=1)
    treasurer = Position(id=uuid.uuid4(), title="Treasurer", order=2)
    async_session.add_all([president, treasurer])
    await async_session.commit()

    alice = Candidate(id=uuid.uuid4(), name="Alice", position_id=president.id)
    bob = Candidate(id=uuid.uuid4(), name="Bob", position_id=president.id)
    carol = Candidate(id=uuid.uuid4(), name="Carol", position_id=treasurer.id)
    dan = Candidate(id=uuid.uuid4(), name="Dan", position_id=treasurer.id)
    async_session.add_all([alice, bob, carol, dan])
    await async_session.commit()
    return {
        "president": president,
        "treasurer": treasurer,
        "alice": alice,
        "bob": bob,
        "carol": carol,
        "dan": dan,
    }


@pytest.fixture
async def voter(async_session: AsyncSession) -> Voter:
    """A registered voter who has not voted."""
    voter = Voter(id="ABCD1234", avatar="ABCD1234", has_voted=False, voted_positions=[])
    async_session.add(voter)
    await async_session.commit()
    await async_session.refresh(voter)
    return voter


@pytest.fixture
async def open_election(async_session: AsyncSession) -> ElectionConfig:
    """An active election that opened an hour ago and closes in an hour."""
    now = datetime.now(UTC)
    config = ElectionConfig(
        id=ELECTION_CONFIG_ID,
        start_time=now - timedelta(hours=1),
        end_time=now + timedelta(hours=1),
        is_active=True,
        allow_late_voting=False,
    )
    async_session.add(config)
    await async_session.commit()
    await async_session.refresh(config)
    return config

"""Voter sessions: created at login, destroyed at logout or on a completed ballot.

A voter may only log in while ``has_voted`` is false.  Logging out closes
the voter out for good, mirroring a voter leaving the booth.
"""

import uuid
from datetime import UTC, datetime, timedelta

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.core.config import Settings
from ballot_api.core.security import create_voter_token
from ballot_api.lib.election_status import as_utc
from ballot_api.models.voter import Voter, VoterSession
from ballot_api.services.voter_service import VoterNotFoundError, get_voter, mark_voter_as_voted


class VoterAlreadyVotedError(ValueError):
    """Raised when a voter who has already voted tries to log in again."""


async def login(
    session: AsyncSession,
    voter_id: str,
    *,
    expire_minutes: int = 60,
    now: datetime | None = None,
) -> VoterSession:
    """Open a voting session for a voter code.

    Args:
        session: The database session.
        voter_id: The voter code as typed (case-insensitive).
        expire_minutes: Session lifetime.
        now: Login instant (defaults to the current time).

    Returns:
        The new VoterSession.

    Raises:
        VoterNotFoundError: If the code is unknown.
        VoterAlreadyVotedError: If the voter has already voted.
    """
    voter = await get_voter(session, voter_id)
    if voter is None:
        logger.warning(f"Login rejected for unknown voter code {voter_id!r}")
        msg = "Invalid voter ID"
        raise VoterNotFoundError(msg)
    if voter.has_voted:
        logger.warning(f"Login rejected for voter {voter.id}: already voted")
        msg = "This voter ID has already been used to vote"
        raise VoterAlreadyVotedError(msg)

    now = now or datetime.now(UTC)
    voter_session = VoterSession(
        id=uuid.uuid4(),
        voter_id=voter.id,
        created_at=now,
        expires_at=now + timedelta(minutes=expire_minutes),
    )
    session.add(voter_session)
    await session.commit()
    await session.refresh(voter_session)
    logger.info(f"Opened voting session {voter_session.id} for voter {voter.id}")
    return voter_session


def create_session_token(voter_session: VoterSession, settings: Settings) -> str:
    """Issue the bearer token that identifies ``voter_session``."""
    return create_voter_token(
        session_id=str(voter_session.id),
        voter_id=voter_session.voter_id,
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expires_at=as_utc(voter_session.expires_at),
    )


async def get_active_session(
    session: AsyncSession,
    session_id: uuid.UUID,
    *,
    now: datetime | None = None,
) -> VoterSession | None:
    """Return the session if it exists and has not expired."""
    voter_session = await session.get(VoterSession, session_id)
    if voter_session is None:
        return None
    now = now or datetime.now(UTC)
    if as_utc(voter_session.expires_at) <= as_utc(now):
        return None
    return voter_session


async def get_session_voter(session: AsyncSession, voter_session: VoterSession) -> Voter:
    """Return the voter that owns ``voter_session``.

    Raises:
        VoterNotFoundError: If the voter was removed while the session was open.
    """
    voter = await session.get(Voter, voter_session.voter_id)
    if voter is None:
        msg = "Voter for this session no longer exists"
        raise VoterNotFoundError(msg)
    return voter


async def end_session(session: AsyncSession, voter_session: VoterSession) -> None:
    """Destroy a voting session without touching the voter."""
    await session.delete(voter_session)
    await session.commit()
    logger.info(f"Closed voting session {voter_session.id} for voter {voter_session.voter_id}")


async def logout(session: AsyncSession, voter_session: VoterSession) -> Voter:
    """Log a voter out: mark them as voted and destroy the session.

    Returns:
        The updated Voter.
    """
    voter = await get_session_voter(session, voter_session)
    await session.delete(voter_session)
    voter = await mark_voter_as_voted(session, voter)
    logger.info(f"Voter {voter.id} logged out; session {voter_session.id} destroyed")
    return voter

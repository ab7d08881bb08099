"""Vote casting, the only write path for the vote log.

Enforces one vote per voter per position, accepts ``PASS`` as an explicit
abstention, and closes the voter's session once every position on the
ballot has been voted.
"""

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.core.change_feed import ChangeAction, Collection, change_feed
from ballot_api.lib.election_status import is_voting_open
from ballot_api.lib.tabulator import PASS_CANDIDATE_ID, PASS_CANDIDATE_NAME
from ballot_api.models.ballot import Vote
from ballot_api.models.voter import Voter, VoterSession
from ballot_api.services.candidate_service import get_candidate
from ballot_api.services.election_config_service import get_config
from ballot_api.services.position_service import PositionNotFoundError, get_position, list_positions
from ballot_api.services.session_service import get_session_voter
from ballot_api.services.voter_service import record_voted_position


class VotingClosedError(ValueError):
    """Raised when a vote is cast outside the active voting window."""


class InvalidCandidateError(ValueError):
    """Raised when the chosen candidate does not stand for the position."""


class DuplicateVoteError(ValueError):
    """Raised when a voter has already voted for the position."""


@dataclass
class CastVoteResult:
    """Outcome of a successful vote."""

    vote: Vote
    voter: Voter
    session_closed: bool


async def _resolve_choice(session: AsyncSession, position_id: uuid.UUID, candidate_id: str) -> tuple[str, str]:
    """Return ``(candidate_id, candidate_name)`` to store for the choice."""
    if candidate_id.strip().upper() == PASS_CANDIDATE_ID:
        return PASS_CANDIDATE_ID, PASS_CANDIDATE_NAME
    try:
        candidate_uuid = uuid.UUID(candidate_id.strip())
    except ValueError as e:
        msg = f"Invalid candidate id {candidate_id!r}"
        raise InvalidCandidateError(msg) from e

    candidate = await get_candidate(session, candidate_uuid)
    if candidate is None or candidate.position_id != position_id:
        msg = "Candidate is not standing for this position"
        raise InvalidCandidateError(msg)
    return str(candidate.id), candidate.name


async def _has_voted_for(session: AsyncSession, voter_id: str, position_id: str) -> bool:
    result = await session.execute(
        select(Vote.id).where(Vote.voter_id == voter_id, Vote.position_id == position_id).limit(1)
    )
    return result.scalar_one_or_none() is not None


async def cast_vote(
    session: AsyncSession,
    voter_session: VoterSession,
    position_id: uuid.UUID,
    candidate_id: str,
    *,
    now: datetime | None = None,
) -> CastVoteResult:
    """Record a vote (or abstention) for the session's voter.

    Args:
        session: The database session.
        voter_session: The voter's open session.
        position_id: The position being voted on.
        candidate_id: The chosen candidate's id, or ``PASS``.
        now: Vote instant (defaults to the current time).

    Returns:
        The recorded vote, the updated voter, and whether the session closed.

    Raises:
        VotingClosedError: If the election is not currently active.
        PositionNotFoundError: If the position does not exist.
        InvalidCandidateError: If the candidate is unknown or stands elsewhere.
        DuplicateVoteError: If the voter already voted for the position.
    """
    now = now or datetime.now(UTC)
    if not is_voting_open(await get_config(session), now):
        msg = "Voting is not open"
        raise VotingClosedError(msg)

    position = await get_position(session, position_id)
    if position is None:
        msg = f"Position {position_id} not found"
        raise PositionNotFoundError(msg)

    chosen_id, chosen_name = await _resolve_choice(session, position.id, candidate_id)
    voter = await get_session_voter(session, voter_session)
    position_key = str(position.id)

    if await _has_voted_for(session, voter.id, position_key):
        logger.warning(f"Duplicate vote rejected: voter {voter.id} position {position_key}")
        msg = "You already voted for this position"
        raise DuplicateVoteError(msg)

    vote = Vote(
        voter_id=voter.id,
        position_id=position_key,
        candidate_id=chosen_id,
        candidate_name=chosen_name,
        timestamp=now,
    )
    session.add(vote)
    record_voted_position(voter, position_key)
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        msg = "You already voted for this position"
        raise DuplicateVoteError(msg) from e
    await session.refresh(vote)

    ballot = {str(p.id) for p in await list_positions(session)}
    session_closed = bool(ballot) and ballot.issubset(voter.voted_positions)
    if session_closed:
        await session.delete(voter_session)
        await session.commit()
        logger.info(f"Voter {voter.id} completed the ballot; session {voter_session.id} closed")

    logger.info(f"Vote recorded: voter {voter.id} position {position_key} choice {chosen_id}")
    change_feed.publish(Collection.VOTES, ChangeAction.CREATED, str(vote.id))
    return CastVoteResult(vote=vote, voter=voter, session_closed=session_closed)


async def list_votes(session: AsyncSession) -> list[Vote]:
    """Return the full vote log in recording order."""
    result = await session.execute(select(Vote).order_by(Vote.timestamp))
    return list(result.scalars().all())


async def list_votes_for_voter(session: AsyncSession, voter_id: str) -> list[Vote]:
    """Return the votes cast by one voter."""
    result = await session.execute(select(Vote).where(Vote.voter_id == voter_id).order_by(Vote.timestamp))
    return list(result.scalars().all())

"""Candidate management."""

import uuid

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.core.change_feed import ChangeAction, Collection, change_feed
from ballot_api.models.ballot import Candidate
from ballot_api.schemas.ballot import CandidateCreateRequest, CandidateUpdateRequest
from ballot_api.services.position_service import PositionNotFoundError, get_position


class CandidateNotFoundError(ValueError):
    """Raised when a referenced candidate does not exist."""


async def list_candidates(session: AsyncSession, position_id: uuid.UUID | None = None) -> list[Candidate]:
    """List candidates, optionally only those standing for one position."""
    query = select(Candidate)
    if position_id is not None:
        query = query.where(Candidate.position_id == position_id)
    result = await session.execute(query.order_by(Candidate.created_at, Candidate.name))
    return list(result.scalars().all())


async def get_candidate(session: AsyncSession, candidate_id: uuid.UUID) -> Candidate | None:
    """Get a candidate by ID."""
    return await session.get(Candidate, candidate_id)


async def _require_position(session: AsyncSession, position_id: uuid.UUID) -> None:
    if await get_position(session, position_id) is None:
        msg = f"Position {position_id} not found"
        raise PositionNotFoundError(msg)


async def create_candidate(session: AsyncSession, request: CandidateCreateRequest) -> Candidate:
    """Create a candidate for an existing position.

    Raises:
        PositionNotFoundError: If the position does not exist.
    """
    await _require_position(session, request.position_id)

    candidate = Candidate(name=request.name, position_id=request.position_id)
    session.add(candidate)
    await session.commit()
    await session.refresh(candidate)
    logger.info(f"Created candidate {candidate.id} '{candidate.name}' for position {candidate.position_id}")
    change_feed.publish(Collection.CANDIDATES, ChangeAction.CREATED, str(candidate.id))
    return candidate


async def update_candidate(
    session: AsyncSession,
    candidate_id: uuid.UUID,
    request: CandidateUpdateRequest,
) -> Candidate:
    """Apply a partial update to a candidate.

    Raises:
        CandidateNotFoundError: If the candidate does not exist.
        PositionNotFoundError: If moved to a position that does not exist.
    """
    candidate = await get_candidate(session, candidate_id)
    if candidate is None:
        msg = f"Candidate {candidate_id} not found"
        raise CandidateNotFoundError(msg)

    update_data = request.model_dump(exclude_unset=True, exclude_none=True)
    if "position_id" in update_data:
        await _require_position(session, update_data["position_id"])
    for field, value in update_data.items():
        setattr(candidate, field, value)

    await session.commit()
    await session.refresh(candidate)
    logger.info(f"Updated candidate {candidate.id}")
    change_feed.publish(Collection.CANDIDATES, ChangeAction.UPDATED, str(candidate.id))
    return candidate


async def delete_candidate(session: AsyncSession, candidate_id: uuid.UUID) -> bool:
    """Delete a candidate.  Votes already cast for them are kept.

    Returns:
        True if the candidate existed and was deleted.
    """
    candidate = await get_candidate(session, candidate_id)
    if candidate is None:
        return False
    await session.delete(candidate)
    await session.commit()
    logger.info(f"Deleted candidate {candidate_id}")
    change_feed.publish(Collection.CANDIDATES, ChangeAction.DELETED, str(candidate_id))
    return True

"""Ballot position management."""

import uuid

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.core.change_feed import ChangeAction, Collection, change_feed
from ballot_api.models.ballot import Candidate, Position
from ballot_api.schemas.ballot import PositionCreateRequest, PositionUpdateRequest


class PositionNotFoundError(ValueError):
    """Raised when a referenced position does not exist."""


async def list_positions(session: AsyncSession) -> list[Position]:
    """Return all positions in ballot order (``order``, then creation time)."""
    result = await session.execute(select(Position).order_by(Position.order, Position.created_at))
    return list(result.scalars().all())


async def get_position(session: AsyncSession, position_id: uuid.UUID) -> Position | None:
    """Get a position by ID."""
    return await session.get(Position, position_id)


async def create_position(session: AsyncSession, request: PositionCreateRequest) -> Position:
    """Create a new position.

    Args:
        session: The database session.
        request: Position creation request.

    Returns:
        The created Position.
    """
    position = Position(title=request.title, order=request.order)
    session.add(position)
    await session.commit()
    await session.refresh(position)
    logger.info(f"Created position {position.id} '{position.title}' (order {position.order})")
    change_feed.publish(Collection.POSITIONS, ChangeAction.CREATED, str(position.id))
    return position


async def update_position(
    session: AsyncSession,
    position_id: uuid.UUID,
    request: PositionUpdateRequest,
) -> Position | None:
    """Apply a partial update to a position.

    Returns:
        The updated Position, or None if not found.
    """
    position = await get_position(session, position_id)
    if position is None:
        return None

    for field, value in request.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(position, field, value)

    await session.commit()
    await session.refresh(position)
    logger.info(f"Updated position {position.id}")
    change_feed.publish(Collection.POSITIONS, ChangeAction.UPDATED, str(position.id))
    return position


async def delete_position(session: AsyncSession, position_id: uuid.UUID) -> bool:
    """Delete a position together with all of its candidates.

    Votes already cast for the position are kept.

    Returns:
        True if the position existed and was deleted.
    """
    position = await get_position(session, position_id)
    if position is None:
        return False

    removed = await session.execute(delete(Candidate).where(Candidate.position_id == position_id))
    await session.delete(position)
    await session.commit()
    logger.info(f"Deleted position {position_id} and {removed.rowcount} candidate(s)")
    change_feed.publish(Collection.CANDIDATES, ChangeAction.DELETED, None)
    change_feed.publish(Collection.POSITIONS, ChangeAction.DELETED, str(position_id))
    return True

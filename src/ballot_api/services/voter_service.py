"""Voter registration and voting-status bookkeeping."""

import secrets
import string

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.core.change_feed import ChangeAction, Collection, change_feed
from ballot_api.models.voter import Voter

VOTER_ID_ALPHABET = string.ascii_uppercase + string.digits
_MAX_ID_ATTEMPTS = 20


class VoterNotFoundError(ValueError):
    """Raised when a voter code does not match any registered voter."""


def generate_voter_id(length: int = 8) -> str:
    """Return a random voter code of ``length`` characters from ``A-Z0-9``."""
    return "".join(secrets.choice(VOTER_ID_ALPHABET) for _ in range(length))


def normalize_voter_id(raw: str) -> str:
    """Normalize user-typed voter codes (trimmed, upper-case)."""
    return raw.strip().upper()


async def register_voter(session: AsyncSession, avatar: str = "", *, id_length: int = 8) -> Voter:
    """Register a voter under a freshly generated, unused voter code.

    Args:
        session: The database session.
        avatar: Avatar seed or URL.  Defaults to the voter code itself.
        id_length: Length of the generated code.

    Returns:
        The created Voter.

    Raises:
        RuntimeError: If no unused code was found after repeated attempts.
    """
    for _ in range(_MAX_ID_ATTEMPTS):
        voter_id = generate_voter_id(id_length)
        if await session.get(Voter, voter_id) is None:
            break
    else:
        msg = f"Could not allocate a unique voter code of length {id_length}"
        raise RuntimeError(msg)

    voter = Voter(id=voter_id, avatar=avatar or voter_id, has_voted=False, voted_positions=[])
    session.add(voter)
    await session.commit()
    await session.refresh(voter)
    logger.info(f"Registered voter {voter.id}")
    change_feed.publish(Collection.VOTERS, ChangeAction.CREATED, voter.id)
    return voter


async def register_voters(
    session: AsyncSession,
    count: int,
    *,
    avatar_seed: str = "",
    id_length: int = 8,
) -> list[Voter]:
    """Register ``count`` voters; avatars are ``{avatar_seed}{n}`` when a seed is given."""
    voters = []
    for n in range(1, count + 1):
        avatar = f"{avatar_seed}{n}" if avatar_seed else ""
        voters.append(await register_voter(session, avatar, id_length=id_length))
    return voters


async def get_voter(session: AsyncSession, voter_id: str) -> Voter | None:
    """Get a voter by code (case-insensitive)."""
    return await session.get(Voter, normalize_voter_id(voter_id))


async def count_voters(session: AsyncSession) -> int:
    """Return the number of registered voters."""
    result = await session.execute(select(func.count()).select_from(Voter))
    return result.scalar_one()


async def list_voters(
    session: AsyncSession,
    page: int = 1,
    page_size: int = 20,
    *,
    has_voted: bool | None = None,
) -> tuple[list[Voter], int]:
    """List voters with pagination, oldest first.

    Args:
        session: The database session.
        page: Page number (1-based).
        page_size: Items per page.
        has_voted: Optional filter on voting status.

    Returns:
        Tuple of (voters list, total count).
    """
    query = select(Voter)
    count_query = select(func.count()).select_from(Voter)
    if has_voted is not None:
        query = query.where(Voter.has_voted == has_voted)
        count_query = count_query.where(Voter.has_voted == has_voted)

    total = (await session.execute(count_query)).scalar_one()
    offset = (page - 1) * page_size
    result = await session.execute(query.order_by(Voter.created_at, Voter.id).offset(offset).limit(page_size))
    return list(result.scalars().all()), total


def record_voted_position(voter: Voter, position_id: str) -> Voter:
    """Add ``position_id`` to the voter's voted positions (not committed).

    Any recorded position also sets ``has_voted``.
    """
    if position_id not in voter.voted_positions:
        # Reassign so the JSON column is flagged dirty.
        voter.voted_positions = [*voter.voted_positions, position_id]
    voter.has_voted = True
    return voter


async def mark_voter_as_voted(session: AsyncSession, voter: Voter) -> Voter:
    """Close the voter out: they can no longer open a voting session."""
    voter.has_voted = True
    await session.commit()
    await session.refresh(voter)
    change_feed.publish(Collection.VOTERS, ChangeAction.UPDATED, voter.id)
    return voter

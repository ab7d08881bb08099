"""Tests for position and candidate management."""

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.core.change_feed import ChangeEvent, Collection, change_feed
from ballot_api.models.ballot import Candidate, Position
from ballot_api.schemas.ballot import (
    CandidateCreateRequest,
    CandidateUpdateRequest,
    PositionCreateRequest,
    PositionUpdateRequest,
)
from ballot_api.services.candidate_service import (
    CandidateNotFoundError,
    create_candidate,
    delete_candidate,
    get_candidate,
    list_candidates,
    update_candidate,
)
from ballot_api.services.position_service import (
    PositionNotFoundError,
    create_position,
    delete_position,
    get_position,
    list_positions,
    update_position,
)


class TestPositionService:
    """Tests for position CRUD."""

    async def test_listed_in_ballot_order(self, async_session: AsyncSession) -> None:
        await create_position(async_session, PositionCreateRequest(title="Treasurer", order=3))
        await create_position(async_session, PositionCreateRequest(title="President", order=1))
        await create_position(async_session, PositionCreateRequest(title="Secretary", order=2))
        titles = [p.title for p in await list_positions(async_session)]
        assert titles == ["President", "Secretary", "Treasurer"]

    async def test_partial_update(self, async_session: AsyncSession, ballot: dict) -> None:
        president: Position = ballot["president"]
        updated = await update_position(async_session, president.id, PositionUpdateRequest(order=9))
        assert updated is not None
        assert updated.order == 9
        assert updated.title == "President"

    async def test_update_missing_returns_none(self, async_session: AsyncSession) -> None:
        assert await update_position(async_session, uuid.uuid4(), PositionUpdateRequest(title="X")) is None

    async def test_delete_removes_candidates(self, async_session: AsyncSession, ballot: dict) -> None:
        president: Position = ballot["president"]
        events: list[ChangeEvent] = []
        subscription = change_feed.subscribe(Collection.POSITIONS, events.append)
        try:
            assert await delete_position(async_session, president.id) is True
        finally:
            subscription.unsubscribe()

        assert await get_position(async_session, president.id) is None
        remaining = await list_candidates(async_session)
        assert {c.name for c in remaining} == {"Carol", "Dan"}
        assert [e.record_id for e in events] == [str(president.id)]

    async def test_delete_missing(self, async_session: AsyncSession) -> None:
        assert await delete_position(async_session, uuid.uuid4()) is False


class TestCandidateService:
    """Tests for candidate CRUD."""

    async def test_create_requires_position(self, async_session: AsyncSession) -> None:
        with pytest.raises(PositionNotFoundError):
            await create_candidate(async_session, CandidateCreateRequest(name="Eve", position_id=uuid.uuid4()))

    async def test_create_and_filter_by_position(self, async_session: AsyncSession, ballot: dict) -> None:
        treasurer: Position = ballot["treasurer"]
        eve = await create_candidate(async_session, CandidateCreateRequest(name="Eve", position_id=treasurer.id))
        names = [c.name for c in await list_candidates(async_session, treasurer.id)]
        assert "Eve" in names
        assert "Alice" not in names
        assert (await get_candidate(async_session, eve.id)) is not None

    async def test_move_to_missing_position_rejected(self, async_session: AsyncSession, ballot: dict) -> None:
        alice: Candidate = ballot["alice"]
        with pytest.raises(PositionNotFoundError):
            await update_candidate(async_session, alice.id, CandidateUpdateRequest(position_id=uuid.uuid4()))

    async def test_rename(self, async_session: AsyncSession, ballot: dict) -> None:
        alice: Candidate = ballot["alice"]
        updated = await update_candidate(async_session, alice.id, CandidateUpdateRequest(name="Alicia"))
        assert updated.name == "Alicia"

    async def test_update_missing_candidate(self, async_session: AsyncSession) -> None:
        with pytest.raises(CandidateNotFoundError):
            await update_candidate(async_session, uuid.uuid4(), CandidateUpdateRequest(name="Ghost"))

    async def test_delete(self, async_session: AsyncSession, ballot: dict) -> None:
        bob: Candidate = ballot["bob"]
        assert await delete_candidate(async_session, bob.id) is True
        assert await delete_candidate(async_session, bob.id) is False

"""Tests for voter session login, lookup, and logout."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.core.config import Settings
from ballot_api.core.security import VOTER_TOKEN_TYPE, decode_token
from ballot_api.models.voter import Voter, VoterSession
from ballot_api.services.session_service import (
    VoterAlreadyVotedError,
    create_session_token,
    end_session,
    get_active_session,
    get_session_voter,
    login,
    logout,
)
from ballot_api.services.voter_service import VoterNotFoundError


class TestLogin:
    """Tests for login."""

    async def test_opens_session(self, async_session: AsyncSession, voter: Voter) -> None:
        now = datetime(2026, 10, 17, 9, 0, tzinfo=UTC)
        voter_session = await login(async_session, " abcd1234 ", expire_minutes=30, now=now)
        assert voter_session.voter_id == voter.id
        assert voter_session.expires_at.replace(tzinfo=UTC) == now + timedelta(minutes=30)

    async def test_unknown_code_rejected(self, async_session: AsyncSession) -> None:
        with pytest.raises(VoterNotFoundError):
            await login(async_session, "NOPE0000")

    async def test_voter_who_voted_rejected(self, async_session: AsyncSession, voter: Voter) -> None:
        voter.has_voted = True
        await async_session.commit()
        with pytest.raises(VoterAlreadyVotedError):
            await login(async_session, voter.id)


class TestSessionLookup:
    """Tests for get_active_session and create_session_token."""

    async def test_active_until_expiry(self, async_session: AsyncSession, voter: Voter) -> None:
        now = datetime.now(UTC)
        voter_session = await login(async_session, voter.id, expire_minutes=5, now=now)
        assert await get_active_session(async_session, voter_session.id, now=now + timedelta(minutes=4)) is not None
        assert await get_active_session(async_session, voter_session.id, now=now + timedelta(minutes=5)) is None

    async def test_token_references_session(
        self, async_session: AsyncSession, voter: Voter, settings: Settings
    ) -> None:
        voter_session = await login(async_session, voter.id)
        payload = decode_token(create_session_token(voter_session, settings), settings.jwt_secret_key)
        assert payload["sid"] == str(voter_session.id)
        assert payload["sub"] == voter.id
        assert payload["type"] == VOTER_TOKEN_TYPE

    async def test_session_voter(self, async_session: AsyncSession, voter: Voter) -> None:
        voter_session = await login(async_session, voter.id)
        assert (await get_session_voter(async_session, voter_session)).id == voter.id


class TestLogout:
    """Tests for logout and end_session."""

    async def test_logout_marks_voted_and_destroys_session(self, async_session: AsyncSession, voter: Voter) -> None:
        voter_session = await login(async_session, voter.id)
        updated = await logout(async_session, voter_session)
        assert updated.has_voted is True
        assert await async_session.get(VoterSession, voter_session.id) is None
        with pytest.raises(VoterAlreadyVotedError):
            await login(async_session, voter.id)

    async def test_end_session_keeps_voter_open(self, async_session: AsyncSession, voter: Voter) -> None:
        voter_session = await login(async_session, voter.id)
        await end_session(async_session, voter_session)
        assert await async_session.get(VoterSession, voter_session.id) is None
        assert (await login(async_session, voter.id)).voter_id == voter.id

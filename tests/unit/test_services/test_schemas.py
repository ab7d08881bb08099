"""Tests for request schema validation."""

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from ballot_api.schemas.auth import UserCreateRequest
from ballot_api.schemas.ballot import CastVoteRequest, PositionCreateRequest
from ballot_api.schemas.election import ElectionConfigRequest, ElectionExtendRequest

NOON = datetime(2026, 10, 17, 12, 0, tzinfo=UTC)


class TestElectionConfigRequest:
    """The admin write path rejects invalid windows before the Store sees them."""

    def test_valid(self) -> None:
        request = ElectionConfigRequest(start_time=NOON, end_time=NOON + timedelta(hours=1))
        assert request.is_active is True
        assert request.allow_late_voting is False

    @pytest.mark.parametrize("end_offset", [timedelta(0), -timedelta(minutes=1)])
    def test_end_not_after_start_rejected(self, end_offset: timedelta) -> None:
        with pytest.raises(ValidationError, match="End time must be after start time"):
            ElectionConfigRequest(start_time=NOON, end_time=NOON + end_offset)

    def test_extend_minutes_positive(self) -> None:
        with pytest.raises(ValidationError):
            ElectionExtendRequest(minutes=0)


class TestAdminSchemas:
    """Tests for admin account schemas."""

    @pytest.mark.parametrize("role", ["chairman", "secretary", "committee"])
    def test_known_roles(self, role: str) -> None:
        request = UserCreateRequest(username="admin", email="a@test.com", password="password123", role=role)
        assert request.role == role

    def test_unknown_role_rejected(self) -> None:
        with pytest.raises(ValidationError):
            UserCreateRequest(username="admin", email="a@test.com", password="password123", role="admin")


class TestBallotSchemas:
    """Tests for ballot request schemas."""

    def test_position_order_non_negative(self) -> None:
        with pytest.raises(ValidationError):
            PositionCreateRequest(title="President", order=-1)

    def test_vote_requires_candidate(self) -> None:
        with pytest.raises(ValidationError):
            CastVoteRequest(position_id="7f1b1c3e-2a1f-4d8e-9a55-0f5c2f0f3b6a", candidate_id="")

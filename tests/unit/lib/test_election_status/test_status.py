"""Tests for election phase derivation."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, timezone

import pytest

from ballot_api.lib.election_status import (
    DISABLED_MESSAGE,
    ENDED_MESSAGE,
    NOT_CONFIGURED_BANNER,
    NOT_CONFIGURED_MESSAGE,
    ElectionStatus,
    InvalidElectionWindowError,
    as_utc,
    countdown_to_end,
    derive_status,
    is_voting_open,
    validate_window,
)

NOON = datetime(2026, 10, 17, 12, 0, tzinfo=UTC)


@dataclass
class _Config:
    start_time: datetime | None
    end_time: datetime | None
    is_active: bool = True


def _window(start_offset: timedelta, end_offset: timedelta, *, is_active: bool = True) -> _Config:
    return _Config(NOON + start_offset, NOON + end_offset, is_active)


class TestDeriveStatus:
    """Tests for derive_status."""

    def test_no_config_is_not_configured(self) -> None:
        info = derive_status(None, NOON)
        assert info.status is ElectionStatus.NOT_CONFIGURED
        assert info.time_remaining == NOT_CONFIGURED_MESSAGE

    def test_missing_end_time_is_not_configured(self) -> None:
        info = derive_status(_Config(NOON, None), NOON)
        assert info.status is ElectionStatus.NOT_CONFIGURED

    def test_inactive_wins_over_window(self) -> None:
        info = derive_status(_window(-timedelta(hours=1), timedelta(hours=1), is_active=False), NOON)
        assert info.status is ElectionStatus.INACTIVE
        assert info.time_remaining == DISABLED_MESSAGE

    def test_scheduled_one_hour_out(self) -> None:
        """Starting exactly one hour from now reads 'Starts in 1h 0m'."""
        info = derive_status(_window(timedelta(hours=1), timedelta(hours=3)), NOON)
        assert info.status is ElectionStatus.SCHEDULED
        assert info.time_remaining == "Starts in 1h 0m"

    def test_active_mid_window(self) -> None:
        info = derive_status(_window(-timedelta(hours=1), timedelta(days=1, hours=2, minutes=5)), NOON)
        assert info.status is ElectionStatus.ACTIVE
        assert info.time_remaining == "1d 2h 5m remaining"

    def test_ended(self) -> None:
        info = derive_status(_window(-timedelta(hours=2), -timedelta(seconds=1)), NOON)
        assert info.status is ElectionStatus.ENDED
        assert info.time_remaining == ENDED_MESSAGE

    def test_start_boundary_is_active(self) -> None:
        info = derive_status(_window(timedelta(0), timedelta(hours=1)), NOON)
        assert info.status is ElectionStatus.ACTIVE

    def test_end_boundary_is_active(self) -> None:
        info = derive_status(_window(-timedelta(hours=1), timedelta(0)), NOON)
        assert info.status is ElectionStatus.ACTIVE
        assert info.time_remaining == "0m remaining"

    def test_fine_formatter_shows_seconds(self) -> None:
        info = derive_status(_window(-timedelta(hours=1), timedelta(minutes=2, seconds=5)), NOON, fine=True)
        assert info.time_remaining == "2m 5s remaining"

    def test_coarse_formatter_drops_seconds(self) -> None:
        info = derive_status(_window(-timedelta(hours=1), timedelta(minutes=2, seconds=5)), NOON)
        assert info.time_remaining == "2m remaining"

    def test_naive_datetimes_are_utc(self) -> None:
        config = _Config(datetime(2026, 10, 17, 11, 0), datetime(2026, 10, 17, 13, 0))
        assert derive_status(config, NOON).status is ElectionStatus.ACTIVE

    def test_other_timezones_compare_by_instant(self) -> None:
        plus_two = timezone(timedelta(hours=2))
        config = _Config(datetime(2026, 10, 17, 15, 0, tzinfo=plus_two), datetime(2026, 10, 17, 16, 0, tzinfo=plus_two))
        # 15:00+02:00 is 13:00 UTC
        info = derive_status(config, NOON)
        assert info.status is ElectionStatus.SCHEDULED
        assert info.time_remaining == "Starts in 1h 0m"

    def test_accepts_schema_objects(self) -> None:
        """Any object exposing the three attributes works."""
        from ballot_api.schemas.election import ElectionConfigRequest

        request = ElectionConfigRequest(start_time=NOON - timedelta(hours=1), end_time=NOON + timedelta(hours=1))
        assert derive_status(request, NOON).status is ElectionStatus.ACTIVE

    def test_accepts_mapping_config(self) -> None:
        config = {"start_time": NOON - timedelta(hours=1), "end_time": NOON + timedelta(hours=1), "is_active": True}
        info = derive_status(config, NOON)
        assert info.status is ElectionStatus.ACTIVE
        assert info.time_remaining == "1h 0m remaining"

    def test_mapping_config_honours_disabled_flag(self) -> None:
        config = {"start_time": NOON - timedelta(hours=1), "end_time": NOON + timedelta(hours=1), "is_active": False}
        assert derive_status(config, NOON).status is ElectionStatus.INACTIVE
        assert countdown_to_end(config, NOON) == "00:01:00:00"

    def test_phase_only_moves_forward_over_time(self) -> None:
        """Scheduled -> Active -> Ended as time advances, never backwards."""
        config = _window(timedelta(minutes=30), timedelta(hours=2))
        rank = {ElectionStatus.SCHEDULED: 0, ElectionStatus.ACTIVE: 1, ElectionStatus.ENDED: 2}
        seen = [rank[derive_status(config, NOON + timedelta(minutes=m)).status] for m in range(0, 181, 5)]
        assert seen == sorted(seen)
        assert seen[0] == 0
        assert seen[-1] == 2

    @pytest.mark.parametrize("offset_minutes", [-120, -30, 0, 30, 120, 600])
    def test_inactive_regardless_of_clock(self, offset_minutes: int) -> None:
        config = _window(-timedelta(hours=1), timedelta(hours=1), is_active=False)
        info = derive_status(config, NOON + timedelta(minutes=offset_minutes))
        assert info.status is ElectionStatus.INACTIVE


class TestIsVotingOpen:
    """Tests for is_voting_open."""

    def test_open_only_when_active(self) -> None:
        assert is_voting_open(_window(-timedelta(hours=1), timedelta(hours=1)), NOON)

    def test_closed_when_scheduled(self) -> None:
        assert not is_voting_open(_window(timedelta(minutes=1), timedelta(hours=1)), NOON)

    def test_closed_when_disabled(self) -> None:
        assert not is_voting_open(_window(-timedelta(hours=1), timedelta(hours=1), is_active=False), NOON)

    def test_closed_without_config(self) -> None:
        assert not is_voting_open(None, NOON)


class TestCountdownToEnd:
    """Tests for countdown_to_end."""

    def test_not_configured_banner(self) -> None:
        assert countdown_to_end(None, NOON) == NOT_CONFIGURED_BANNER

    def test_counts_down_to_end(self) -> None:
        config = _window(-timedelta(hours=1), timedelta(days=1, hours=2, minutes=3, seconds=4))
        assert countdown_to_end(config, NOON) == "01:02:03:04"

    def test_after_end_shows_banner(self) -> None:
        config = _window(-timedelta(hours=2), -timedelta(hours=1))
        assert countdown_to_end(config, NOON) == "ELECTION ENDED"


class TestValidateWindow:
    """Tests for validate_window."""

    def test_valid_window_passes(self) -> None:
        validate_window(NOON, NOON + timedelta(seconds=1))

    def test_equal_bounds_rejected(self) -> None:
        with pytest.raises(InvalidElectionWindowError, match="End time must be after start time"):
            validate_window(NOON, NOON)

    def test_reversed_bounds_rejected(self) -> None:
        with pytest.raises(InvalidElectionWindowError):
            validate_window(NOON, NOON - timedelta(hours=1))

    def test_error_is_value_error(self) -> None:
        assert issubclass(InvalidElectionWindowError, ValueError)


class TestAsUtc:
    """Tests for as_utc."""

    def test_naive_gets_utc(self) -> None:
        assert as_utc(datetime(2026, 1, 1)).tzinfo is UTC

    def test_aware_is_converted(self) -> None:
        value = datetime(2026, 1, 1, 2, 0, tzinfo=timezone(timedelta(hours=2)))
        assert as_utc(value) == datetime(2026, 1, 1, 0, 0, tzinfo=UTC)

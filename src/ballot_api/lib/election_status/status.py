"""Election phase derivation from the configured voting window."""

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from ballot_api.lib.election_status.duration import (
    format_countdown,
    format_duration_coarse,
    format_duration_fine,
    to_milliseconds,
)

NOT_CONFIGURED_MESSAGE = "No election configured"
DISABLED_MESSAGE = "Election Disabled"
ENDED_MESSAGE = "Voting has ended"
NOT_CONFIGURED_BANNER = "NOT CONFIGURED"


class ElectionStatus(enum.StrEnum):
    """Phase of the election as shown to voters and administrators."""

    NOT_CONFIGURED = "NotConfigured"
    INACTIVE = "Inactive"
    SCHEDULED = "Scheduled"
    ACTIVE = "Active"
    ENDED = "Ended"


class InvalidElectionWindowError(ValueError):
    """Raised when an election window does not end after it starts."""


@dataclass(frozen=True)
class StatusInfo:
    """Derived, directly renderable election status."""

    status: ElectionStatus
    time_remaining: str


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _field(config: Any, name: str) -> Any:
    if isinstance(config, Mapping):
        return config.get(name)
    return getattr(config, name, None)


def _window(config: Any) -> tuple[datetime, datetime] | None:
    start = _field(config, "start_time")
    end = _field(config, "end_time")
    if start is None or end is None:
        return None
    return as_utc(start), as_utc(end)


def validate_window(start_time: datetime, end_time: datetime) -> None:
    """Reject a voting window whose end is not strictly after its start.

    Raises:
        InvalidElectionWindowError: If ``start_time >= end_time``.
    """
    if as_utc(start_time) >= as_utc(end_time):
        msg = "End time must be after start time"
        raise InvalidElectionWindowError(msg)


def derive_status(config: Any | None, now: datetime, *, fine: bool = False) -> StatusInfo:
    """Derive the election phase and time-remaining text.

    Args:
        config: A record with ``start_time``, ``end_time`` and ``is_active``
            (ORM row, schema or mapping), or None when no election is configured.
        now: The evaluation instant.
        fine: Use the voter-facing formatter (with seconds) instead of the
            coarse admin formatter.

    Returns:
        The derived ``StatusInfo``.  Both window bounds are inclusive for
        ``Active``.
    """
    window = _window(config) if config is not None else None
    if window is None:
        return StatusInfo(ElectionStatus.NOT_CONFIGURED, NOT_CONFIGURED_MESSAGE)
    if not _field(config, "is_active"):
        return StatusInfo(ElectionStatus.INACTIVE, DISABLED_MESSAGE)

    start_time, end_time = window
    now = as_utc(now)
    format_duration = format_duration_fine if fine else format_duration_coarse

    if now < start_time:
        return StatusInfo(
            ElectionStatus.SCHEDULED,
            f"Starts in {format_duration(to_milliseconds(start_time - now))}",
        )
    if now > end_time:
        return StatusInfo(ElectionStatus.ENDED, ENDED_MESSAGE)
    return StatusInfo(
        ElectionStatus.ACTIVE,
        f"{format_duration(to_milliseconds(end_time - now))} remaining",
    )


def is_voting_open(config: Any | None, now: datetime) -> bool:
    """Return True when ballots may be cast at ``now``."""
    return derive_status(config, now).status is ElectionStatus.ACTIVE


def countdown_to_end(config: Any | None, now: datetime) -> str:
    """Return the ``DD:HH:MM:SS`` banner counting down to the end time."""
    window = _window(config) if config is not None else None
    if window is None:
        return NOT_CONFIGURED_BANNER
    _, end_time = window
    return format_countdown(to_milliseconds(end_time - as_utc(now)))

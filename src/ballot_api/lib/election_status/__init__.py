"""Election status engine: derive the election phase from its voting window.

Public API:
    - derive_status: Election phase + time-remaining text for a config snapshot
    - is_voting_open: Whether ballots may be cast at a given instant
    - countdown_to_end: DD:HH:MM:SS banner counting down to the end time
    - validate_window: Reject windows that do not end after they start
    - format_duration_coarse / format_duration_fine: Duration formatters
    - ElectionStatus, StatusInfo, InvalidElectionWindowError
"""

from ballot_api.lib.election_status.duration import (
    ELECTION_ENDED_BANNER,
    format_countdown,
    format_duration_coarse,
    format_duration_fine,
    to_milliseconds,
)
from ballot_api.lib.election_status.status import (
    DISABLED_MESSAGE,
    ENDED_MESSAGE,
    NOT_CONFIGURED_BANNER,
    NOT_CONFIGURED_MESSAGE,
    ElectionStatus,
    InvalidElectionWindowError,
    StatusInfo,
    as_utc,
    countdown_to_end,
    derive_status,
    is_voting_open,
    validate_window,
)

__all__ = [
    "DISABLED_MESSAGE",
    "ELECTION_ENDED_BANNER",
    "ENDED_MESSAGE",
    "NOT_CONFIGURED_BANNER",
    "NOT_CONFIGURED_MESSAGE",
    "ElectionStatus",
    "InvalidElectionWindowError",
    "StatusInfo",
    "as_utc",
    "countdown_to_end",
    "derive_status",
    "format_countdown",
    "format_duration_coarse",
    "format_duration_fine",
    "is_voting_open",
    "to_milliseconds",
    "validate_window",
]

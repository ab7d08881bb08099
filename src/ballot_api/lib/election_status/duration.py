"""Compact human-readable durations for election countdowns.

The admin panel shows whole minutes; voter screens show seconds below
one hour.
Callers never pass a non-positive duration for display; they switch to a
terminal status string instead.  Negative input is clamped to zero.
"""

from datetime import timedelta

ELECTION_ENDED_BANNER = "ELECTION ENDED"

_SECONDS_PER_MINUTE = 60
_SECONDS_PER_HOUR = 60 * _SECONDS_PER_MINUTE
_SECONDS_PER_DAY = 24 * _SECONDS_PER_HOUR


def to_milliseconds(delta: timedelta) -> int:
    """Convert a timedelta to whole milliseconds (truncated toward zero)."""
    return int(delta / timedelta(milliseconds=1))


def _split(milliseconds: float) -> tuple[int, int, int, int]:
    """Split a duration into (days, hours, minutes, seconds) remainders."""
    total_seconds = max(0, int(milliseconds // 1000))
    days, remainder = divmod(total_seconds, _SECONDS_PER_DAY)
    hours, remainder = divmod(remainder, _SECONDS_PER_HOUR)
    minutes, seconds = divmod(remainder, _SECONDS_PER_MINUTE)
    return days, hours, minutes, seconds


def format_duration_coarse(milliseconds: float) -> str:
    """Format a duration without seconds (admin-facing).

    Examples:
        >>> format_duration_coarse(90_061_000)
        '1d 1h 1m'
        >>> format_duration_coarse(3_600_000)
        '1h 0m'
        >>> format_duration_coarse(59_000)
        '0m'
    """
    days, hours, minutes, _ = _split(milliseconds)
    if days:
        return f"{days}d {hours}h {minutes}m"
    if hours:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def format_duration_fine(milliseconds: float) -> str:
    """Format a duration with seconds below one hour (voter-facing).

    Examples:
        >>> format_duration_fine(3_600_000)
        '1h 0m'
        >>> format_duration_fine(125_000)
        '2m 5s'
    """
    days, hours, minutes, seconds = _split(milliseconds)
    if days:
        return f"{days}d {hours}h {minutes}m"
    if hours:
        return f"{hours}h {minutes}m"
    return f"{minutes}m {seconds}s"


def format_countdown(milliseconds: float) -> str:
    """Format a ``DD:HH:MM:SS`` countdown clock, or the ended banner at zero."""
    if milliseconds <= 0:
        return ELECTION_ENDED_BANNER
    days, hours, minutes, seconds = _split(milliseconds)
    return f"{days:02d}:{hours:02d}:{minutes:02d}:{seconds:02d}"

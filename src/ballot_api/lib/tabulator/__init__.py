"""Results tabulator: turn the vote log into per-candidate results.

Public API:
    - tabulate: Per-candidate counts and per-position percentages
    - summarize_positions: Valid votes and abstentions per position
    - compute_turnout: Registered voters vs. voters who took part
    - CandidateResult, PositionSummary, TurnoutStats: Result records
    - PASS_CANDIDATE_ID: Sentinel candidate id for an abstention
    - PASS_CANDIDATE_NAME: Display name stored with an abstention
"""

from ballot_api.lib.tabulator.tabulator import (
    PASS_CANDIDATE_ID,
    PASS_CANDIDATE_NAME,
    UNKNOWN_POSITION_TITLE,
    CandidateResult,
    PositionSummary,
    TurnoutStats,
    compute_turnout,
    percentage_of,
    summarize_positions,
    tabulate,
)

__all__ = [
    "PASS_CANDIDATE_ID",
    "PASS_CANDIDATE_NAME",
    "UNKNOWN_POSITION_TITLE",
    "CandidateResult",
    "PositionSummary",
    "TurnoutStats",
    "compute_turnout",
    "percentage_of",
    "summarize_positions",
    "tabulate",
]

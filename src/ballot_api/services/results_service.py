"""Results: read a Store snapshot and hand it to the tabulator."""

from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.lib.election_status import derive_status
from ballot_api.lib.tabulator import compute_turnout, summarize_positions, tabulate
from ballot_api.models.ballot import Candidate, Position, Vote
from ballot_api.schemas.results import (
    CandidateResultResponse,
    ElectionStatsResponse,
    PositionSummaryResponse,
    ResultsResponse,
    TurnoutResponse,
)
from ballot_api.services.candidate_service import list_candidates
from ballot_api.services.election_config_service import get_config
from ballot_api.services.position_service import list_positions
from ballot_api.services.vote_service import list_votes
from ballot_api.services.voter_service import count_voters


@dataclass
class ResultsSnapshot:
    """Everything the tabulator needs, read in one pass."""

    positions: list[Position]
    candidates: list[Candidate]
    votes: list[Vote]
    total_voters: int


async def load_snapshot(session: AsyncSession) -> ResultsSnapshot:
    """Read positions (ballot order), candidates, votes and the voter count."""
    return ResultsSnapshot(
        positions=await list_positions(session),
        candidates=await list_candidates(session),
        votes=await list_votes(session),
        total_voters=await count_voters(session),
    )


def build_results(snapshot: ResultsSnapshot, generated_at: datetime | None = None) -> ResultsResponse:
    """Tabulate a snapshot into the results payload."""
    rows = tabulate(snapshot.votes, snapshot.positions, snapshot.candidates)
    summaries = summarize_positions(snapshot.votes, snapshot.positions)
    turnout = compute_turnout(snapshot.total_voters, snapshot.votes)
    return ResultsResponse(
        candidates=[CandidateResultResponse.model_validate(row) for row in rows],
        positions=[PositionSummaryResponse.model_validate(summary) for summary in summaries],
        turnout=TurnoutResponse.model_validate(turnout),
        generated_at=generated_at or datetime.now(UTC),
    )


async def get_results(session: AsyncSession) -> ResultsResponse:
    """Compute the current results from a fresh snapshot."""
    return build_results(await load_snapshot(session))


async def get_stats(session: AsyncSession, *, now: datetime | None = None) -> ElectionStatsResponse:
    """Compute the admin dashboard statistics."""
    snapshot = await load_snapshot(session)
    turnout = compute_turnout(snapshot.total_voters, snapshot.votes)
    status = derive_status(await get_config(session), now or datetime.now(UTC))
    return ElectionStatsResponse(
        total_voters=turnout.total_voters,
        votes_cast=turnout.votes_cast,
        unique_voters=turnout.unique_voters,
        turnout_rate=turnout.turnout_rate,
        positions=len(snapshot.positions),
        candidates=len(snapshot.candidates),
        status=status.status,
    )

"""Election results Pydantic v2 schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from ballot_api.lib.election_status import ElectionStatus


class CandidateResultResponse(BaseModel):
    """One candidate's tally."""

    id: str
    name: str
    position_id: str | None
    position_title: str
    vote_count: int
    percentage: float = Field(description="Share of the position's valid votes, one decimal")

    model_config = {"from_attributes": True}


class PositionSummaryResponse(BaseModel):
    """Totals for one position."""

    position_id: str
    position_title: str
    valid_votes: int
    abstentions: int

    model_config = {"from_attributes": True}


class TurnoutResponse(BaseModel):
    """Election participation statistics."""

    total_voters: int
    votes_cast: int
    unique_voters: int
    turnout_rate: float

    model_config = {"from_attributes": True}


class ResultsResponse(BaseModel):
    """Full results payload for the results page and the live feed."""

    candidates: list[CandidateResultResponse]
    positions: list[PositionSummaryResponse]
    turnout: TurnoutResponse
    generated_at: datetime


class ElectionStatsResponse(TurnoutResponse):
    """Admin dashboard statistics."""

    positions: int
    candidates: int
    status: ElectionStatus

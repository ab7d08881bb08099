"""Ballot Pydantic v2 schemas: positions, candidates, and votes."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class PositionCreateRequest(BaseModel):
    """Create a ballot position."""

    title: str = Field(min_length=1, max_length=200)
    order: int = Field(default=0, ge=0, description="Display rank on the ballot")


class PositionUpdateRequest(BaseModel):
    """Partially update a ballot position."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    order: int | None = Field(default=None, ge=0)


class PositionResponse(BaseModel):
    """A ballot position."""

    id: UUID
    title: str
    order: int

    model_config = {"from_attributes": True}


class CandidateCreateRequest(BaseModel):
    """Create a candidate for a position."""

    name: str = Field(min_length=1, max_length=200)
    position_id: UUID


class CandidateUpdateRequest(BaseModel):
    """Partially update a candidate."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    position_id: UUID | None = None


class CandidateResponse(BaseModel):
    """A candidate."""

    id: UUID
    name: str
    position_id: UUID

    model_config = {"from_attributes": True}


class BallotPosition(PositionResponse):
    """A position on the voter's ballot with its candidates."""

    candidates: list[CandidateResponse] = Field(default_factory=list)
    voted: bool = Field(default=False, description="Whether the session's voter already voted here")


class BallotResponse(BaseModel):
    """The full ballot for the current voter."""

    positions: list[BallotPosition]
    votes_cast: int


class CastVoteRequest(BaseModel):
    """Cast a vote for a candidate, or ``PASS`` to abstain."""

    position_id: UUID
    candidate_id: str = Field(min_length=1, max_length=36, description="Candidate id, or PASS to abstain")


class VoteResponse(BaseModel):
    """A recorded vote."""

    voter_id: str
    position_id: str
    candidate_id: str
    candidate_name: str
    timestamp: datetime
    session_closed: bool = Field(default=False, description="True when this vote completed the ballot")

    model_config = {"from_attributes": True}

"""Voter and voter-session Pydantic v2 schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from ballot_api.schemas.common import PaginationMeta


class VoterRegisterRequest(BaseModel):
    """Register a voter; the voter code is generated server-side."""

    avatar: str = Field(default="", max_length=2000, description="Avatar seed or image URL")


class VoterResponse(BaseModel):
    """A registered voter."""

    id: str
    avatar: str
    created_at: datetime
    has_voted: bool
    voted_positions: list[str]

    model_config = {"from_attributes": True}


class PaginatedVoterResponse(BaseModel):
    """Paginated voter list."""

    items: list[VoterResponse]
    pagination: PaginationMeta


class SessionLoginRequest(BaseModel):
    """Open a voting session with an assigned voter code."""

    voter_id: str = Field(min_length=1, max_length=32, description="Assigned voter code (case-insensitive)")


class SessionResponse(BaseModel):
    """An open voting session and the token that identifies it."""

    session_id: UUID
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    voter: VoterResponse

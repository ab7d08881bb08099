"""Voter roll endpoints for administrators."""

import math
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.core.config import Settings, get_settings
from ballot_api.core.dependencies import get_async_session, require_role
from ballot_api.models.user import ADMIN_ROLES, User
from ballot_api.models.voter import Voter
from ballot_api.schemas.common import PaginationMeta
from ballot_api.schemas.voter import PaginatedVoterResponse, VoterRegisterRequest, VoterResponse
from ballot_api.services import voter_service

voters_router = APIRouter(prefix="/voters", tags=["voters"])


@voters_router.get("", response_model=PaginatedVoterResponse)
async def list_voters(
    _current_user: Annotated[User, Depends(require_role(*ADMIN_ROLES))],
    session: Annotated[AsyncSession, Depends(get_async_session)],
    has_voted: bool | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> PaginatedVoterResponse:
    """List registered voters, oldest first."""
    voters, total = await voter_service.list_voters(session, page, page_size, has_voted=has_voted)
    return PaginatedVoterResponse(
        items=[VoterResponse.model_validate(v) for v in voters],
        pagination=PaginationMeta(
            total=total,
            page=page,
            page_size=page_size,
            total_pages=max(1, math.ceil(total / page_size)),
        ),
    )


@voters_router.post("", response_model=VoterResponse, status_code=status.HTTP_201_CREATED)
async def register_voter(
    request: VoterRegisterRequest,
    _current_user: Annotated[User, Depends(require_role("chairman", "secretary"))],
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> Voter:
    """Register a voter under a freshly generated voter code."""
    return await voter_service.register_voter(session, request.avatar, id_length=settings.voter_id_length)

"""Candidate endpoints."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.core.dependencies import get_async_session, require_role
from ballot_api.models.ballot import Candidate
from ballot_api.models.user import User
from ballot_api.schemas.ballot import CandidateCreateRequest, CandidateResponse, CandidateUpdateRequest
from ballot_api.services import candidate_service
from ballot_api.services.candidate_service import CandidateNotFoundError
from ballot_api.services.position_service import PositionNotFoundError

candidates_router = APIRouter(prefix="/candidates", tags=["candidates"])

_ballot_editor = require_role("chairman", "secretary")


@candidates_router.get("", response_model=list[CandidateResponse])
async def list_candidates(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    position_id: uuid.UUID | None = Query(None),
) -> list[Candidate]:
    """List candidates, optionally for one position (public)."""
    return await candidate_service.list_candidates(session, position_id)


@candidates_router.post("", response_model=CandidateResponse, status_code=status.HTTP_201_CREATED)
async def create_candidate(
    request: CandidateCreateRequest,
    _current_user: Annotated[User, Depends(_ballot_editor)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> Candidate:
    """Add a candidate to a position."""
    try:
        return await candidate_service.create_candidate(session, request)
    except PositionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@candidates_router.patch("/{candidate_id}", response_model=CandidateResponse)
async def update_candidate(
    candidate_id: uuid.UUID,
    request: CandidateUpdateRequest,
    _current_user: Annotated[User, Depends(_ballot_editor)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> Candidate:
    """Rename a candidate or move them to another position."""
    try:
        return await candidate_service.update_candidate(session, candidate_id, request)
    except (CandidateNotFoundError, PositionNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@candidates_router.delete("/{candidate_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_candidate(
    candidate_id: uuid.UUID,
    _current_user: Annotated[User, Depends(_ballot_editor)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> Response:
    """Remove a candidate."""
    if not await candidate_service.delete_candidate(session, candidate_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Candidate not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

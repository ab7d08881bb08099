"""Ballot position endpoints."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.core.dependencies import get_async_session, require_role
from ballot_api.models.ballot import Position
from ballot_api.models.user import User
from ballot_api.schemas.ballot import PositionCreateRequest, PositionResponse, PositionUpdateRequest
from ballot_api.services import position_service

positions_router = APIRouter(prefix="/positions", tags=["positions"])

_ballot_editor = require_role("chairman", "secretary")


@positions_router.get("", response_model=list[PositionResponse])
async def list_positions(
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> list[Position]:
    """List positions in ballot order (public)."""
    return await position_service.list_positions(session)


@positions_router.get("/{position_id}", response_model=PositionResponse)
async def get_position(
    position_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> Position:
    """Get a single position."""
    position = await position_service.get_position(session, position_id)
    if position is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Position not found")
    return position


@positions_router.post("", response_model=PositionResponse, status_code=status.HTTP_201_CREATED)
async def create_position(
    request: PositionCreateRequest,
    _current_user: Annotated[User, Depends(_ballot_editor)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> Position:
    """Add a position to the ballot."""
    return await position_service.create_position(session, request)


@positions_router.patch("/{position_id}", response_model=PositionResponse)
async def update_position(
    position_id: uuid.UUID,
    request: PositionUpdateRequest,
    _current_user: Annotated[User, Depends(_ballot_editor)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> Position:
    """Rename or re-order a position."""
    position = await position_service.update_position(session, position_id, request)
    if position is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Position not found")
    return position


@positions_router.delete("/{position_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_position(
    position_id: uuid.UUID,
    _current_user: Annotated[User, Depends(_ballot_editor)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> Response:
    """Delete a position and its candidates."""
    if not await position_service.delete_position(session, position_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Position not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Voter session endpoints: log in with a voter code, inspect, log out."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.core.config import Settings, get_settings
from ballot_api.core.dependencies import get_async_session, get_voter_session
from ballot_api.lib.election_status import as_utc
from ballot_api.models.voter import VoterSession
from ballot_api.schemas.voter import SessionLoginRequest, SessionResponse, VoterResponse
from ballot_api.services import session_service
from ballot_api.services.session_service import VoterAlreadyVotedError
from ballot_api.services.voter_service import VoterNotFoundError

session_router = APIRouter(prefix="/session", tags=["session"])


@session_router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def open_session(
    request: SessionLoginRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionResponse:
    """Open a voting session for an assigned voter code."""
    try:
        voter_session = await session_service.login(
            session,
            request.voter_id,
            expire_minutes=settings.voter_session_expire_minutes,
        )
    except VoterNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e)) from e
    except VoterAlreadyVotedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e

    voter = await session_service.get_session_voter(session, voter_session)
    return SessionResponse(
        session_id=voter_session.id,
        access_token=session_service.create_session_token(voter_session, settings),
        expires_at=as_utc(voter_session.expires_at),
        voter=VoterResponse.model_validate(voter),
    )


@session_router.get("", response_model=VoterResponse)
async def current_voter(
    voter_session: Annotated[VoterSession, Depends(get_voter_session)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> VoterResponse:
    """Return the voter behind the current session."""
    try:
        voter = await session_service.get_session_voter(session, voter_session)
    except VoterNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e)) from e
    return VoterResponse.model_validate(voter)


@session_router.delete("", response_model=VoterResponse)
async def close_session(
    voter_session: Annotated[VoterSession, Depends(get_voter_session)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> VoterResponse:
    """Log out: the voter is marked as voted and the session is destroyed."""
    try:
        voter = await session_service.logout(session, voter_session)
    except VoterNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e)) from e
    return VoterResponse.model_validate(voter)

"""Election window endpoints: status for the booth, configuration for admins."""

from datetime import UTC, datetime
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.core.config import Settings, get_settings
from ballot_api.core.dependencies import get_async_session, require_role
from ballot_api.lib.election_status import countdown_to_end
from ballot_api.models.election_config import ElectionConfig
from ballot_api.models.user import ADMIN_ROLES, User
from ballot_api.schemas.election import (
    ElectionConfigRequest,
    ElectionConfigResponse,
    ElectionExtendRequest,
    ElectionStartRequest,
    ElectionStatusResponse,
)
from ballot_api.services import election_config_service
from ballot_api.services.election_config_service import ElectionNotConfiguredError

election_router = APIRouter(prefix="/election", tags=["election"])


@election_router.get("/status", response_model=ElectionStatusResponse)
async def get_election_status(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    audience: Literal["voter", "admin"] = Query("voter", description="voter adds seconds below one hour"),
) -> ElectionStatusResponse:
    """Derive the current election status (no authentication required)."""
    now = datetime.now(UTC)
    config, info = await election_config_service.get_status(session, now=now, fine=audience == "voter")
    return ElectionStatusResponse(
        status=info.status,
        time_remaining=info.time_remaining,
        countdown=countdown_to_end(config, now),
        evaluated_at=now,
    )


@election_router.get("/config", response_model=ElectionConfigResponse)
async def get_election_config(
    _current_user: Annotated[User, Depends(require_role(*ADMIN_ROLES))],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> ElectionConfig:
    """Return the stored election configuration."""
    config = await election_config_service.get_config(session)
    if config is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No election configured")
    return config


@election_router.put("/config", response_model=ElectionConfigResponse)
async def put_election_config(
    request: ElectionConfigRequest,
    _current_user: Annotated[User, Depends(require_role("chairman"))],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> ElectionConfig:
    """Replace the election window (chairman only)."""
    return await election_config_service.update_config(
        session,
        request.start_time,
        request.end_time,
        is_active=request.is_active,
        allow_late_voting=request.allow_late_voting,
    )


@election_router.post("/start", response_model=ElectionConfigResponse)
async def start_election(
    _current_user: Annotated[User, Depends(require_role("chairman"))],
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_settings)],
    request: ElectionStartRequest | None = None,
) -> ElectionConfig:
    """Open voting now for the requested (or default) number of hours."""
    hours = (request.duration_hours if request else None) or settings.election_default_duration_hours
    return await election_config_service.start_now(session, hours)


@election_router.post("/extend", response_model=ElectionConfigResponse)
async def extend_election(
    _current_user: Annotated[User, Depends(require_role("chairman"))],
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_settings)],
    request: ElectionExtendRequest | None = None,
) -> ElectionConfig:
    """Push the end time back by the requested (or default) minutes."""
    minutes = (request.minutes if request else None) or settings.election_extend_minutes
    try:
        return await election_config_service.extend(session, minutes)
    except ElectionNotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@election_router.post("/stop", response_model=ElectionConfigResponse)
async def stop_election(
    _current_user: Annotated[User, Depends(require_role("chairman"))],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> ElectionConfig:
    """Stop voting immediately."""
    try:
        return await election_config_service.stop(session)
    except ElectionNotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

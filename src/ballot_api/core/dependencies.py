"""FastAPI dependency injection for database sessions, auth, and access control.

Provides get_async_session, administrator auth with role checks, voter
session auth, and the results loader used by the live results socket.
"""

import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Annotated, Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer, OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.core.config import Settings, get_settings
from ballot_api.core.database import get_session_factory
from ballot_api.core.security import VOTER_TOKEN_TYPE, decode_token
from ballot_api.models.user import User
from ballot_api.models.voter import VoterSession
from ballot_api.schemas.results import ResultsResponse

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/v1/auth/login")
voter_bearer = HTTPBearer(auto_error=False)

ResultsLoader = Callable[[], Awaitable[ResultsResponse]]


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Yield an async database session with per-request lifecycle."""
    factory = get_session_factory()
    async with factory() as session:
        yield session


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> User:
    """Decode an administrator JWT and return the authenticated user.

    Args:
        token: The JWT bearer token.
        session: The database session.
        settings: Application settings.

    Returns:
        The authenticated User model instance.

    Raises:
        HTTPException: If the token is invalid, not an access token, or the
            user is unknown or inactive.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(token, settings.jwt_secret_key, settings.jwt_algorithm)
        username: str | None = payload.get("sub")
        if username is None or payload.get("type") != "access":
            raise credentials_exception
    except Exception as exc:
        raise credentials_exception from exc

    result = await session.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        raise credentials_exception
    return user


def require_role(*roles: str) -> Callable[..., Any]:
    """Factory that creates a dependency requiring specific administrator roles.

    Args:
        *roles: Allowed role names (e.g., "chairman", "secretary").

    Returns:
        A FastAPI dependency function that validates the user's role.
    """

    async def role_checker(
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> User:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{current_user.role}' does not have access to this resource",
            )
        return current_user

    return role_checker


async def get_voter_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(voter_bearer)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> VoterSession:
    """Resolve the bearer token to an open voter session.

    The token must be a voter token and its session row must still exist
    and be unexpired.

    Raises:
        HTTPException: 401 when any of those checks fail.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Voting session is not valid",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception
    try:
        payload = decode_token(credentials.credentials, settings.jwt_secret_key, settings.jwt_algorithm)
        if payload.get("type") != VOTER_TOKEN_TYPE:
            raise credentials_exception
        session_id = uuid.UUID(str(payload.get("sid")))
    except Exception as exc:
        raise credentials_exception from exc

    from ballot_api.services.session_service import get_active_session

    voter_session = await get_active_session(session, session_id)
    if voter_session is None or voter_session.voter_id != payload.get("sub"):
        raise credentials_exception
    return voter_session


def get_results_loader() -> ResultsLoader:
    """Return a callable that tabulates results in a fresh database session.

    Used by long-lived connections, which cannot hold a per-request session.
    """
    from ballot_api.services.results_service import get_results

    async def load() -> ResultsResponse:
        factory = get_session_factory()
        async with factory() as session:
            return await get_results(session)

    return load

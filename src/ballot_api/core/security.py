"""JWT token creation/validation and password hashing.

Uses PyJWT for JWT operations and passlib with bcrypt for administrator
password hashing.  Voters do not have passwords: their tokens only carry a
reference to a server-side voter session row.
"""

from datetime import UTC, datetime, timedelta

import jwt
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

VOTER_TOKEN_TYPE = "voter"


def hash_password(password: str) -> str:
    """Hash a plaintext password using bcrypt.

    Args:
        password: The plaintext password to hash.

    Returns:
        The bcrypt-hashed password string.
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plaintext password against a bcrypt hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    subject: str,
    role: str,
    secret_key: str,
    algorithm: str = "HS256",
    expires_minutes: int = 30,
) -> str:
    """Create an administrator JWT access token.

    Args:
        subject: The token subject (the administrator's username).
        role: The administrator's role.
        secret_key: Secret key for signing.
        algorithm: JWT signing algorithm.
        expires_minutes: Token expiration in minutes.

    Returns:
        The encoded JWT string.
    """
    expire = datetime.now(UTC) + timedelta(minutes=expires_minutes)
    payload = {
        "sub": subject,
        "role": role,
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(payload, secret_key, algorithm=algorithm)


def create_refresh_token(
    subject: str,
    secret_key: str,
    algorithm: str = "HS256",
    expires_days: int = 7,
) -> str:
    """Create an administrator JWT refresh token."""
    expire = datetime.now(UTC) + timedelta(days=expires_days)
    payload = {
        "sub": subject,
        "exp": expire,
        "type": "refresh",
    }
    return jwt.encode(payload, secret_key, algorithm=algorithm)


def create_voter_token(
    session_id: str,
    voter_id: str,
    secret_key: str,
    algorithm: str = "HS256",
    expires_at: datetime | None = None,
) -> str:
    """Create a token bound to a voter session.

    The token is only honoured while the referenced session row exists, so
    destroying the session revokes the token before ``exp``.

    Args:
        session_id: The voter session identifier (``sid`` claim).
        voter_id: The voter code (``sub`` claim).
        secret_key: Secret key for signing.
        algorithm: JWT signing algorithm.
        expires_at: Expiry instant, normally the session's ``expires_at``.

    Returns:
        The encoded JWT string.
    """
    payload = {
        "sub": voter_id,
        "sid": session_id,
        "exp": expires_at or datetime.now(UTC) + timedelta(hours=1),
        "type": VOTER_TOKEN_TYPE,
    }
    return jwt.encode(payload, secret_key, algorithm=algorithm)


def decode_token(
    token: str,
    secret_key: str,
    algorithm: str = "HS256",
) -> dict:
    """Decode and validate a JWT token.

    Raises:
        jwt.ExpiredSignatureError: If the token has expired.
        jwt.InvalidTokenError: If the token is invalid.
    """
    return jwt.decode(token, secret_key, algorithms=[algorithm])

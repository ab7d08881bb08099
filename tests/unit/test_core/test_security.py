"""Tests for JWT helpers and password hashing."""

import uuid
from datetime import UTC, datetime, timedelta

import jwt as pyjwt
import pytest

from ballot_api.core.security import (
    VOTER_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    create_voter_token,
    decode_token,
    hash_password,
    verify_password,
)

SECRET = "test-secret-key-for-testing-32chars"


class TestPasswords:
    """Tests for bcrypt password hashing."""

    def test_hash_and_verify(self) -> None:
        hashed = hash_password("correct horse")
        assert hashed != "correct horse"
        assert verify_password("correct horse", hashed)
        assert not verify_password("wrong horse", hashed)


class TestAdminTokens:
    """Tests for administrator access and refresh tokens."""

    def test_access_token_claims(self) -> None:
        payload = decode_token(create_access_token("chair", "chairman", SECRET), SECRET)
        assert payload["sub"] == "chair"
        assert payload["role"] == "chairman"
        assert payload["type"] == "access"

    def test_refresh_token_type(self) -> None:
        payload = decode_token(create_refresh_token("chair", SECRET), SECRET)
        assert payload["type"] == "refresh"
        assert "role" not in payload

    def test_expired_token_rejected(self) -> None:
        token = create_access_token("chair", "chairman", SECRET, expires_minutes=-1)
        with pytest.raises(pyjwt.ExpiredSignatureError):
            decode_token(token, SECRET)

    def test_wrong_secret_rejected(self) -> None:
        token = create_access_token("chair", "chairman", SECRET)
        with pytest.raises(pyjwt.InvalidSignatureError):
            decode_token(token, "another-secret-key-for-testing-32chars")


class TestVoterTokens:
    """Tests for session-bound voter tokens."""

    def test_claims_reference_session(self) -> None:
        session_id = str(uuid.uuid4())
        token = create_voter_token(session_id, "ABCD1234", SECRET)
        payload = decode_token(token, SECRET)
        assert payload["sid"] == session_id
        assert payload["sub"] == "ABCD1234"
        assert payload["type"] == VOTER_TOKEN_TYPE

    def test_expiry_follows_session(self) -> None:
        expires_at = datetime.now(UTC) + timedelta(minutes=5)
        payload = decode_token(create_voter_token("sid", "ABCD1234", SECRET, expires_at=expires_at), SECRET)
        assert payload["exp"] == int(expires_at.timestamp())

    def test_expired_session_token_rejected(self) -> None:
        token = create_voter_token("sid", "ABCD1234", SECRET, expires_at=datetime.now(UTC) - timedelta(seconds=5))
        with pytest.raises(pyjwt.ExpiredSignatureError):
            decode_token(token, SECRET)

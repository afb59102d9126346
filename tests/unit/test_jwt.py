"""Tests for bearer token creation and verification."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from pokerlog.auth.jwt import create_access_token, verify_token
from pokerlog.config import get_settings


def _encode(**claims) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {"sub": "uid-1", "iat": now, "exp": now + timedelta(minutes=5), "iss": settings.jwt_issuer, "type": "access"}
    payload.update(claims)
    return jwt.encode({k: v for k, v in payload.items() if v is not None}, settings.jwt_secret, algorithm="HS256")


class TestVerifyToken:
    def test_round_trip_claims(self):
        payload = verify_token(create_access_token("uid-1", email="a@example.com", name="Alice"))
        assert payload["sub"] == "uid-1"
        assert payload["email"] == "a@example.com"
        assert payload["name"] == "Alice"

    def test_expired(self):
        token = _encode(exp=datetime.now(timezone.utc) - timedelta(minutes=1))
        with pytest.raises(jwt.InvalidTokenError, match="expired"):
            verify_token(token)

    def test_wrong_type(self):
        with pytest.raises(jwt.InvalidTokenError, match="token type"):
            verify_token(_encode(type="refresh"))

    def test_missing_subject(self):
        with pytest.raises(jwt.InvalidTokenError):
            verify_token(_encode(sub=None))

    def test_wrong_secret(self):
        token = jwt.encode({"sub": "uid-1", "type": "access"}, "other-secret", algorithm="HS256")
        with pytest.raises(jwt.InvalidTokenError):
            verify_token(token)

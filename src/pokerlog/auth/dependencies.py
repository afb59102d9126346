"""FastAPI authentication dependencies."""

from __future__ import annotations

import jwt
from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from pokerlog.auth.jwt import verify_token
from pokerlog.database import get_session
from pokerlog.db.models import User
from pokerlog.errors import NotAuthenticatedError
from pokerlog.users.service import get_or_create_user

_bearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
    db: AsyncSession = Depends(get_session),
) -> User:
    """
    Verify the bearer token and return the matching User.

    Unknown subjects are created on first sight. Raises 401 before any
    service code runs when the token is missing or invalid.
    """
    if credentials is None:
        msg = "Missing bearer token"
        raise NotAuthenticatedError(msg)

    try:
        payload = verify_token(credentials.credentials, expected_type="access")
    except jwt.InvalidTokenError as e:
        raise NotAuthenticatedError(str(e)) from e

    return await get_or_create_user(
        db,
        str(payload["sub"]),
        email=payload.get("email"),
        display_name=payload.get("name"),
    )

"""Bearer token handling for the admin API.

Tokens are issued by the external identity service; OpsBoard only verifies
them. ``create_access_token`` exists so operators and tests can mint tokens
signed with the shared secret.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from jwt import ExpiredSignatureError
from jwt import InvalidTokenError as PyJWTInvalidTokenError

from opsboard.core.config import settings

ALGORITHM = "HS256"
ADMIN_ROLE = "admin"


class TokenValidationError(Exception):
    """Raised when a token cannot be validated."""


class TokenExpiredError(TokenValidationError):
    """Raised when a token is expired."""


def create_access_token(subject: str, role: str = ADMIN_ROLE, expires_minutes: int = 60 * 24) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
        "type": "access",
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
    except ExpiredSignatureError as exc:
        raise TokenExpiredError("Token has expired") from exc
    except PyJWTInvalidTokenError as exc:
        raise TokenValidationError("Token is invalid") from exc
    if payload.get("type", "access") != "access":
        raise TokenValidationError("Token type mismatch")
    if "sub" not in payload:
        raise TokenValidationError("Token has no subject")
    return payload

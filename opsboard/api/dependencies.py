"""Common dependencies for authentication and role-based access control."""
import logging
from typing import Annotated, Any, TypeAlias

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from opsboard.core.exceptions import UnauthorizedError
from opsboard.core.security import ADMIN_ROLE, TokenExpiredError, TokenValidationError, decode_token
from opsboard.db.session import get_db

logger = logging.getLogger(__name__)


def get_token_claims(authorization: str = Header(None)) -> dict[str, Any]:
    if not authorization or not authorization.lower().startswith("bearer "):
        logger.info("auth.token.parse failed: missing_token")
        raise HTTPException(status_code=401, detail="Missing token")
    token = authorization.split(" ", 1)[1]
    try:
        return decode_token(token)
    except TokenExpiredError as exc:
        logger.info("auth.token.expired")
        raise HTTPException(status_code=401, detail="Token expired") from exc
    except TokenValidationError as exc:
        logger.info("auth.token.invalid")
        raise HTTPException(status_code=401, detail="Invalid token") from exc


ClaimsDep: TypeAlias = Annotated[dict[str, Any], Depends(get_token_claims)]
DbDep: TypeAlias = Annotated[Session, Depends(get_db)]


def require_admin(claims: ClaimsDep) -> str:
    """
    Verify the bearer token carries the admin role.

    Returns the token subject, used as ``created_by`` on new records.
    Raises UnauthorizedError (403) for any other role.
    """
    role = str(claims.get("role", "")).lower()
    if role != ADMIN_ROLE:
        logger.info("auth.role.denied sub=%s role=%s", claims.get("sub"), role or None)
        raise UnauthorizedError("admin role required")
    return str(claims["sub"])


AdminUserDep: TypeAlias = Annotated[str, Depends(require_admin)]

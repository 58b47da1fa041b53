"""
Authentication Dependencies

Resolves the caller of an endpoint from the bearer token. Signing in and
session management live in the identity provider; this module only turns a
verified token into a ``CurrentUser`` and enforces the role an endpoint needs.

SECURITY NOTE:
- Development shortcut tokens (``"<role>:<uuid>"``) are ONLY accepted when
  PYTHON_ENV=development
- Every other token must be a valid signed JWT
"""

import logging
import os
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import settings
from app.core.security import decode_token

logger = logging.getLogger(__name__)

security = HTTPBearer(
    auto_error=True,
    description="JWT Bearer token for authentication",
)

ROLE_YOUTH = "youth"
ROLE_ORGANIZATION = "organization"
ROLE_ADMIN = "admin"
KNOWN_ROLES = {ROLE_YOUTH, ROLE_ORGANIZATION, ROLE_ADMIN}


@dataclass
class CurrentUser:
    """
    The authenticated caller, populated from token claims.

    Attributes:
        id: User id (``sub`` claim)
        email: User email
        role: One of youth, organization or admin
    """

    id: UUID
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def _is_dev_mode_safe() -> bool:
    """Development tokens need development settings AND a non-production env var."""
    env_var = os.getenv("PYTHON_ENV", "").lower()
    is_safe = (
        settings.is_development
        and not settings.is_production
        and env_var not in {"production", "staging"}
    )
    if is_safe:
        logger.warning("SECURITY: Development auth tokens are ENABLED. Never use in production!")
    return is_safe


_DEVELOPMENT_MODE = _is_dev_mode_safe()


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def _parse_dev_token(token: str) -> CurrentUser | None:
    role, _, raw_id = token.partition(":")
    if role not in KNOWN_ROLES:
        return None
    try:
        user_id = UUID(raw_id)
    except ValueError:
        return None
    return CurrentUser(id=user_id, email=f"{role}-{str(user_id)[:8]}@internbridge.dev", role=role)


async def _resolve_user(token: str) -> CurrentUser:
    if _DEVELOPMENT_MODE:
        dev_user = _parse_dev_token(token)
        if dev_user:
            logger.debug(f"Development mode: authenticated {dev_user.role} {dev_user.id}")
            return dev_user

    payload = decode_token(token)
    if payload is None:
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")

    if payload.get("type", "access") != "access":
        raise _unauthorized("INVALID_TOKEN_TYPE", "This endpoint requires an access token.")

    try:
        user_id = UUID(payload["sub"])
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Invalid token claims: {e}")
        raise _unauthorized(
            "INVALID_TOKEN_CLAIMS", "Token contains invalid or missing claims."
        ) from e

    return CurrentUser(
        id=user_id,
        email=payload.get("email", ""),
        role=payload.get("role", ""),
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> CurrentUser:
    """FastAPI dependency returning the authenticated caller."""
    return await _resolve_user(credentials.credentials)


def _require_role(*roles: str):
    async def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in roles:
            logger.warning(f"Access denied: user {user.id} has role '{user.role}', needs {roles}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "error": "ROLE_REQUIRED",
                    "message": f"This endpoint requires one of the roles: {', '.join(roles)}.",
                },
            )
        return user

    return dependency


require_candidate = _require_role(ROLE_YOUTH)
require_organization = _require_role(ROLE_ORGANIZATION, ROLE_ADMIN)


__all__ = [
    "CurrentUser",
    "get_current_user",
    "require_candidate",
    "require_organization",
    "ROLE_YOUTH",
    "ROLE_ORGANIZATION",
    "ROLE_ADMIN",
]

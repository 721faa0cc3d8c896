"""
Authentication and role authorization for API endpoints
"""

import logging
from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Depends, Header, HTTPException

from services.jwt_service import ADMIN, USER, validate_access_token

logger = logging.getLogger(__name__)

LOGGED_USER = (USER, ADMIN)


@dataclass(frozen=True)
class Principal:
    """The authenticated user acting on a request"""
    id: str
    role: str = USER


async def authenticate_api(authorization: Optional[str] = Header(None)) -> Principal:
    """
    FastAPI dependency for JWT Bearer token authentication

    Raises:
        HTTPException: 401 if the header is missing or the token is invalid
    """
    if not authorization:
        logger.warning("AUTH: request missing Authorization header")
        raise HTTPException(status_code=401, detail="Missing Authorization header")

    if not authorization.startswith("Bearer "):
        logger.warning("AUTH: invalid Authorization header format")
        raise HTTPException(
            status_code=401,
            detail="Invalid authorization header format. Expected 'Bearer <token>'"
        )

    token = authorization[7:]  # Remove "Bearer " prefix

    try:
        payload = validate_access_token(token)
    except jwt.InvalidTokenError as e:
        logger.warning(f"AUTH: invalid JWT token: {str(e)}")
        raise HTTPException(401, "Invalid JWT token")

    return Principal(id=str(payload["sub"]), role=payload.get("role", USER))


def authorize(roles=LOGGED_USER):
    """Build a dependency that admits authenticated principals holding one of `roles`"""

    async def dependency(principal: Principal = Depends(authenticate_api)) -> Principal:
        if principal.role not in roles:
            logger.warning(f"AUTH: role {principal.role} of {principal.id} not in {roles}")
            raise HTTPException(403, "Forbidden")
        return principal

    return dependency

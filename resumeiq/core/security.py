from __future__ import annotations

import logging
from dataclasses import dataclass

import jwt
from fastapi import status

from resumeiq.core.config import Settings
from resumeiq.core.errors import ApiError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    owner_id: str
    email: str | None = None


def _bearer_token(authorization: str | None) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise ApiError(
            status.HTTP_401_UNAUTHORIZED,
            "Missing or malformed Authorization header",
        )
    token = authorization[len("Bearer "):].strip()
    if not token:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Token is empty")
    return token


def verify_access_token(authorization: str | None, config: Settings) -> Identity:
    token = _bearer_token(authorization)
    if not config.jwt_secret:
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Authentication check failed")

    options = {"require": ["sub", "exp"]}
    try:
        claims = jwt.decode(
            token,
            config.jwt_secret,
            algorithms=[config.jwt_algorithm],
            audience=config.jwt_audience,
            options=options if config.jwt_audience else {**options, "verify_aud": False},
        )
    except jwt.ExpiredSignatureError as exc:
        raise ApiError(
            status.HTTP_401_UNAUTHORIZED,
            "Session expired. Please log in again.",
            code="SESSION_EXPIRED",
        ) from exc
    except jwt.InvalidTokenError as exc:
        logger.info("auth_token_rejected reason=%s", type(exc).__name__)
        raise ApiError(
            status.HTTP_401_UNAUTHORIZED,
            "Invalid session. Please log in again.",
            code="INVALID_TOKEN",
        ) from exc

    owner_id = str(claims.get("sub") or "").strip()
    if not owner_id:
        raise ApiError(
            status.HTTP_401_UNAUTHORIZED,
            "Invalid session. Please log in again.",
            code="INVALID_TOKEN",
        )
    return Identity(owner_id=owner_id, email=claims.get("email"))

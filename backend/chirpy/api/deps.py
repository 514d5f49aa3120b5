"""Shared FastAPI dependencies."""
import logging

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from chirpy.config import Settings, get_settings
from chirpy.database import get_db
from chirpy.exceptions import MalformedHeaderError, TokenValidationError
from chirpy.security import get_bearer_token, validate_jwt
from chirpy.services.sql_store import SQLAuthStore

logger = logging.getLogger(__name__)

__all__ = [
    "get_auth_store",
    "get_bearer",
    "get_current_user_id",
    "get_db",
    "get_settings",
]


def get_auth_store(db: Session = Depends(get_db)) -> SQLAuthStore:
    """Store for the auth flows, bound to the request's session."""
    return SQLAuthStore(db)


def get_bearer(request: Request) -> str:
    """Credential from the Bearer authorization header."""
    try:
        return get_bearer_token(request.headers)
    except MalformedHeaderError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not get bearer token from header",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


def get_current_user_id(
    token: str = Depends(get_bearer),
    settings: Settings = Depends(get_settings),
) -> str:
    """User id from a valid session token."""
    try:
        return validate_jwt(token, settings.secret_key)
    except TokenValidationError as exc:
        logger.warning(f"Could not validate JWT: {exc}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate JWT",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc

"""Authentication API endpoints."""
from datetime import timedelta
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from chirpy.api.deps import get_auth_store, get_bearer, get_settings
from chirpy.config import Settings
from chirpy.exceptions import (
    InvalidCredentialsError,
    NotFoundError,
    SigningError,
    StoreError,
    UnauthorizedError,
)
from chirpy.schemas.auth import LoginResponse, Token, UserLogin
from chirpy.services import auth_service
from chirpy.services.sql_store import SQLAuthStore

router = APIRouter(tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/login", response_model=LoginResponse)
def login(
    user_data: UserLogin,
    store: SQLAuthStore = Depends(get_auth_store),
    settings: Settings = Depends(get_settings),
):
    """Login and get a session token plus refresh token."""
    try:
        result = auth_service.login(
            store,
            user_data.email,
            user_data.password,
            settings.secret_key,
            expires_in_seconds=user_data.expires_in_seconds or settings.access_token_expire_seconds,
            refresh_ttl=timedelta(days=settings.refresh_token_expire_days),
        )
    except InvalidCredentialsError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        )
    except (SigningError, StoreError) as exc:
        logger.error(f"Login failed: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not log in",
        )

    user = result.user
    return LoginResponse(
        id=user.id,
        email=user.email,
        is_chirpy_red=bool(user.is_chirpy_red),
        created_at=user.created_at,
        updated_at=user.updated_at,
        token=result.token,
        refresh_token=result.refresh_token,
    )


@router.post("/refresh", response_model=Token)
def refresh_token(
    token: str = Depends(get_bearer),
    store: SQLAuthStore = Depends(get_auth_store),
    settings: Settings = Depends(get_settings),
):
    """Exchange a refresh token for a new session token."""
    try:
        access_token = auth_service.refresh_session(store, token, settings.secret_key)
    except UnauthorizedError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        )
    except (SigningError, StoreError) as exc:
        logger.error(f"Refresh failed: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not refresh session",
        )

    return Token(token=access_token)


@router.post("/revoke", status_code=status.HTTP_204_NO_CONTENT)
def revoke_token(
    token: str = Depends(get_bearer),
    store: SQLAuthStore = Depends(get_auth_store),
):
    """Revoke a refresh token (logout)."""
    try:
        auth_service.revoke_refresh_token(store, token)
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        )
    except StoreError as exc:
        logger.error(f"Revoke failed: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not revoke token",
        )

    return Response(status_code=status.HTTP_204_NO_CONTENT)

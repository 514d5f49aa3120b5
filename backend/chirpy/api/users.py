"""User account endpoints."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from chirpy.api.deps import get_auth_store, get_current_user_id
from chirpy.exceptions import (
    EmailAlreadyRegisteredError,
    HashingError,
    NotFoundError,
    StoreError,
)
from chirpy.schemas.auth import UserCredentials, UserResponse
from chirpy.services import auth_service
from chirpy.services.sql_store import SQLAuthStore

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserCredentials, store: SQLAuthStore = Depends(get_auth_store)):
    """Register a new user."""
    try:
        return auth_service.register_user(store, user_data.email, user_data.password)
    except EmailAlreadyRegisteredError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        )
    except (HashingError, StoreError) as exc:
        logger.error(f"Could not create user: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create user",
        )


@router.put("", response_model=UserResponse)
def update_credentials(
    user_data: UserCredentials,
    store: SQLAuthStore = Depends(get_auth_store),
    current_user_id: str = Depends(get_current_user_id),
):
    """Change the email and password of the logged-in user."""
    try:
        return auth_service.update_credentials(
            store,
            current_user_id,
            user_data.email,
            user_data.password,
        )
    except EmailAlreadyRegisteredError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        )
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        )
    except (HashingError, StoreError) as exc:
        logger.error(f"Could not update user {current_user_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not update user",
        )

"""Admin endpoints (development platform only)."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from chirpy.api.deps import get_auth_store, get_settings
from chirpy.config import Settings
from chirpy.exceptions import StoreError
from chirpy.schemas.auth import MessageResponse
from chirpy.services import auth_service
from chirpy.services.sql_store import SQLAuthStore

router = APIRouter(prefix="/admin", tags=["admin"])
logger = logging.getLogger(__name__)


def require_dev_platform(settings: Settings = Depends(get_settings)) -> None:
    if settings.platform != "dev":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Non-admins cannot access admin API",
        )


@router.post(
    "/reset",
    response_model=MessageResponse,
    dependencies=[Depends(require_dev_platform)],
)
def reset(store: SQLAuthStore = Depends(get_auth_store)):
    """Delete every user and their refresh tokens."""
    try:
        deleted = auth_service.reset_users(store)
    except StoreError as exc:
        logger.error(f"Could not reset users: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not delete users",
        )

    return MessageResponse(message=f"Deleted {deleted} users")

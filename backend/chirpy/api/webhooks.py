"""Payment provider webhooks."""
import hmac
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from chirpy.api.deps import get_auth_store, get_settings
from chirpy.config import Settings
from chirpy.exceptions import MalformedHeaderError, NotFoundError, StoreError
from chirpy.schemas.auth import PolkaWebhook
from chirpy.security import get_api_key
from chirpy.services import auth_service
from chirpy.services.sql_store import SQLAuthStore

router = APIRouter(prefix="/polka", tags=["webhooks"])
logger = logging.getLogger(__name__)

UPGRADE_EVENT = "user.upgraded"


def require_polka_key(request: Request, settings: Settings = Depends(get_settings)) -> None:
    """Reject calls that do not carry the configured ApiKey."""
    try:
        api_key = get_api_key(request.headers)
    except MalformedHeaderError as exc:
        logger.warning(f"Webhook rejected: {exc}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid api key in authorization header",
        )

    if not hmac.compare_digest(api_key.encode("utf-8"), settings.polka_key.encode("utf-8")):
        logger.warning("Webhook rejected: api key mismatch")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid api key in authorization header",
        )


@router.post(
    "/webhooks",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_polka_key)],
)
def polka_webhook(
    event: PolkaWebhook,
    store: SQLAuthStore = Depends(get_auth_store),
):
    """Upgrade a user to Chirpy Red; other events are acknowledged and ignored."""
    if event.event != UPGRADE_EVENT:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    try:
        auth_service.upgrade_user(store, str(event.data.user_id))
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        )
    except StoreError as exc:
        logger.error(f"Could not upgrade user {event.data.user_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not upgrade user",
        )

    return Response(status_code=status.HTTP_204_NO_CONTENT)

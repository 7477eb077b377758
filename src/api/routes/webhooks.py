"""Webhook routes fed by database change notifications."""

import logging
import secrets
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from src.api.middleware.error_handler import AuthenticationError, ValidationError
from src.core.config import get_settings
from src.models.sync import DeleteAction
from src.schemas.sync import DatabaseWebhookPayload, SyncStatus, WebhookAck
from src.services.projector import PreconditionViolationError
from src.services.user_sync_service import UserSyncService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


def verify_webhook_secret(request: Request) -> None:
    """Reject deliveries that do not carry the shared webhook secret.

    Raises:
        AuthenticationError: If the secret header is missing or wrong.
    """
    settings = get_settings()
    provided = request.headers.get(settings.webhook_secret_header)
    if not provided:
        raise AuthenticationError(f"Missing {settings.webhook_secret_header} header")
    if not secrets.compare_digest(provided.encode(), settings.webhook_secret.encode()):
        raise AuthenticationError("Invalid webhook secret")


def get_user_sync_service() -> UserSyncService:
    """Provide the sync service used by the webhook route."""
    return UserSyncService()


@router.post(
    "/users-private",
    response_model=WebhookAck,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(verify_webhook_secret)],
    summary="Sync a private user change",
    description="Receives private user table changes and mirrors them into the public user table.",
)
async def private_user_webhook(
    payload: DatabaseWebhookPayload,
    service: Annotated[UserSyncService, Depends(get_user_sync_service)],
) -> WebhookAck:
    """Mirror one private user row change into the public user table.

    INSERT and UPDATE merge the public fields; DELETE removes the public
    record. A failed store write surfaces as a 500 so the sender can
    redeliver; redelivery is harmless since both writes are idempotent.

    Args:
        payload: Database webhook body.
        service: Sync service.

    Returns:
        WebhookAck: What was done for which user.

    Raises:
        ValidationError: 422 if the change has no user id, or an INSERT or
            UPDATE has no record.
    """
    logger.info("Received %s webhook for table %s", payload.type.value, payload.table)

    try:
        event = service.event_from_webhook(payload)
        if event is None:
            return WebhookAck(status=SyncStatus.IGNORED)
        action = await service.sync_change(event)
    except PreconditionViolationError as e:
        raise ValidationError(str(e)) from e

    sync_status = SyncStatus.DELETED if isinstance(action, DeleteAction) else SyncStatus.SYNCED
    return WebhookAck(status=sync_status, user_id=action.user_id)

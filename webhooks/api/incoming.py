"""Incoming webhook actions."""

from typing import Any

from webhooks.core.logger import LogIcon, logger
from webhooks.core.registry import ReceiverRegistry
from webhooks.core.router import WebhookRouter
from webhooks.core.settings import settings as st
from webhooks.models.core import BodyType


def create_incoming_router(registry: ReceiverRegistry, prefix: str = st.WEBHOOK_PATH) -> WebhookRouter:
    """Receiver-bound actions are only registered for receivers present in ``registry``."""
    router = WebhookRouter(__file__, prefix=prefix)

    if "github" in registry:

        @router.webhook("github", body_type=BodyType.JSON)
        async def github(webhook_id: str | None, data: Any) -> dict:
            event = data.get("action") if isinstance(data, dict) else None
            logger.info("GitHub delivery accepted", icon=LogIcon.WEBHOOK, webhook_id=webhook_id, event=event)
            return {"receiver": "github", "id": webhook_id, "accepted": True}

    @router.webhook()
    async def any_receiver(receiver_name: str, webhook_id: str | None, data: Any) -> dict:
        logger.info("Webhook delivery accepted", icon=LogIcon.WEBHOOK, receiver=receiver_name, webhook_id=webhook_id)
        return {"receiver": receiver_name, "id": webhook_id, "accepted": True, "fields": _field_count(data)}

    return router


def _field_count(data: Any) -> int:
    return len(data) if isinstance(data, dict) else 0

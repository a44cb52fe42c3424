"""Assembles the per-action middleware chain for registered webhook actions."""

from collections.abc import Iterable

from webhooks.core.errors import WebhookConfigurationError
from webhooks.core.logger import LogIcon, logger
from webhooks.core.registry import ReceiverRegistry
from webhooks.core.verifier import resolve_body_type
from webhooks.middlewares.base import BaseMiddleware
from webhooks.middlewares.body_type import VerifyBodyTypeMiddleware
from webhooks.middlewares.correlation import CorrelationIdMiddleware
from webhooks.middlewares.receiver import KnownReceiverMiddleware, VerifyMethodMiddleware
from webhooks.models.core import WebhookAction


def build_action_middlewares(action: WebhookAction, registry: ReceiverRegistry) -> list[BaseMiddleware]:
    """Middlewares guarding one action's endpoints.

    Receiver-bound actions have their receiver capability folded into the
    requirement here, so wiring mistakes surface at startup. Generic actions
    resolve the receiver, and its capability, per request.
    """
    endpoints = action.endpoints
    middlewares: list[BaseMiddleware] = [
        CorrelationIdMiddleware(endpoints),
        VerifyMethodMiddleware(endpoints),
    ]

    if action.is_generic:
        middlewares.append(
            KnownReceiverMiddleware(registry, endpoints=endpoints, resolve_receiver_name=action.resolve_receiver_name)
        )
        middlewares.append(
            VerifyBodyTypeMiddleware(
                action.body_type,
                receivers=registry,
                resolve_receiver_name=action.resolve_receiver_name,
                endpoints=endpoints,
            )
        )
        return middlewares

    try:
        effective = resolve_body_type(action.body_type, action.receiver, registry)
    except WebhookConfigurationError as ex:
        logger.critical(
            "Invalid webhook action configuration",
            icon=LogIcon.CONFIGURATION,
            handler=action.handler_name,
            receiver=action.receiver,
            requirement=action.body_type.describe(),
            detail=str(ex),
        )
        raise

    middlewares.append(
        VerifyBodyTypeMiddleware(effective, resolve_receiver_name=action.resolve_receiver_name, endpoints=endpoints)
    )
    return middlewares


def build_webhook_pipeline(actions: Iterable[WebhookAction], registry: ReceiverRegistry) -> list[BaseMiddleware]:
    middlewares: list[BaseMiddleware] = []
    for action in actions:
        middlewares.extend(build_action_middlewares(action, registry))
    return middlewares

"""Router registering webhook actions with route data and body injection."""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any

import orjson
from pydantic import BaseModel
from robyn import Request, Response, SubRouter, status_codes

from webhooks.core.logger import LogIcon, logger
from webhooks.core.media_type import MediaType, classify_content_type
from webhooks.models.core import RECEIVER_NAME_PARAM, WEBHOOK_ID_PARAM, BodyType, WebhookAction

INJECTABLE_PARAMS = frozenset({"request", "receiver_name", "webhook_id", "data"})


def webhook_routes(receiver: str | None) -> tuple[str, str]:
    """Relative routes for an action: with and without the trailing id segment."""
    segment = receiver.lower() if receiver else f":{RECEIVER_NAME_PARAM}"
    return f"/{segment}", f"/{segment}/:{WEBHOOK_ID_PARAM}"


def parse_webhook_body(request: Request, kwargs: dict[str, Any]) -> Response | None:
    """Decode the body into ``kwargs["data"]`` according to its Content-Type."""
    raw = request.body
    category = classify_content_type(MediaType.parse(request.headers.get("content-type")))

    match category:
        case BodyType.JSON:
            try:
                kwargs["data"] = orjson.loads(raw) if raw else None
            except orjson.JSONDecodeError as ex:
                return Response(
                    status_code=status_codes.HTTP_422_UNPROCESSABLE_ENTITY,
                    headers={"content-type": "application/json"},
                    description=orjson.dumps({"error": "invalid_json", "detail": str(ex)}).decode(),
                )
        case BodyType.FORM:
            kwargs["data"] = dict(request.form_data or {})
        case _:
            kwargs["data"] = raw.decode() if isinstance(raw, bytes) else raw
    return None


def parse_response(result: Any) -> Response:
    """Convert handler result to Response."""
    match result:
        case Response():
            return result
        case BaseModel():
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={"content-type": "application/json"},
                description=result.model_dump_json(),
            )
        case dict():
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={"content-type": "application/json"},
                description=orjson.dumps(result).decode(),
            )
        case None:
            return Response(status_code=status_codes.HTTP_200_OK, headers={}, description="")
        case _:
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={},
                description=str(result),
            )


def create_webhook_handler(handler: Callable, action: WebhookAction) -> Callable:
    """Wrap a webhook handler so Robyn only sees a ``request`` parameter."""
    sig = inspect.signature(handler)
    wanted = set(sig.parameters)
    if unknown := wanted - INJECTABLE_PARAMS:
        raise TypeError(
            f"Webhook handler '{handler.__name__}' declares unsupported parameters: {', '.join(sorted(unknown))}"
        )

    @wraps(handler)
    async def wrapped_handler(request: Request):
        h_kwargs: dict[str, Any] = {}

        if "data" in wanted and (error := parse_webhook_body(request, h_kwargs)):
            return error
        if "request" in wanted:
            h_kwargs["request"] = request
        if "receiver_name" in wanted:
            h_kwargs["receiver_name"] = action.resolve_receiver_name(request)
        if "webhook_id" in wanted:
            h_kwargs["webhook_id"] = (request.path_params or {}).get(WEBHOOK_ID_PARAM)

        result = handler(**h_kwargs)
        if inspect.isawaitable(result):
            result = await result
        return parse_response(result)

    wrapped_handler.__signature__ = inspect.Signature(  # type: ignore[attr-defined]
        [inspect.Parameter("request", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=Request)]
    )
    return wrapped_handler


class WebhookRouter(SubRouter):
    """SubRouter that registers POST webhook actions and records their metadata."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._prefix = kwargs.get("prefix", "")
        self.actions: list[WebhookAction] = []

    def webhook(self, receiver: str | None = None, *, body_type: BodyType = BodyType.ALL) -> Callable:
        """Register a handler for one receiver, or for every receiver when ``receiver`` is None.

        ``body_type`` is the action's requirement. ``BodyType.ALL`` defers to
        whatever the receiver declares.
        """
        if not body_type:
            raise ValueError("Webhook actions must accept at least one body type")

        def decorator(handler: Callable) -> Callable:
            routes = webhook_routes(receiver)
            action = WebhookAction(
                receiver=receiver.lower() if receiver else None,
                body_type=body_type,
                endpoints=tuple(f"{self._prefix}{route}".replace("//", "/") for route in routes),
                handler_name=handler.__name__,
            )
            wrapped = create_webhook_handler(handler, action)
            for route in routes:
                self.post(route)(wrapped)

            self.actions.append(action)
            logger.info(
                "Registered webhook action",
                icon=LogIcon.WEBHOOK,
                handler=action.handler_name,
                receiver=action.receiver or "*",
                body_type=body_type.describe(),
            )
            return handler

        return decorator

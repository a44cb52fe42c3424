"""Routing checks that run ahead of body verification."""

from collections.abc import Callable, Collection, Iterable

from robyn import Request, Response, status_codes

from webhooks.core.logger import LogIcon, logger
from webhooks.middlewares.base import BaseMiddleware, json_response
from webhooks.models.core import receiver_name_from_route


class KnownReceiverMiddleware(BaseMiddleware):
    """404 for generic routes whose receiver name is not registered."""

    order = 100

    def __init__(
        self,
        receivers: Collection[str],
        *,
        endpoints: Iterable[str] | None = None,
        resolve_receiver_name: Callable[[Request], str | None] = receiver_name_from_route,
    ) -> None:
        super().__init__(endpoints)
        self.receivers = receivers
        self.resolve_receiver_name = resolve_receiver_name

    def before(self, request: Request) -> Request | Response:
        receiver_name = self.resolve_receiver_name(request)
        if receiver_name is None or receiver_name in self.receivers:
            return request

        logger.info("Unknown webhook receiver", icon=LogIcon.FORBIDDEN, receiver=receiver_name)
        return json_response(
            status_codes.HTTP_404_NOT_FOUND,
            {"error": "unknown_receiver", "message": f"No WebHook receiver named '{receiver_name}' is registered."},
        )


class VerifyMethodMiddleware(BaseMiddleware):
    """Only POST deliveries reach body verification and dispatch."""

    order = 200
    allowed_method = "POST"

    def before(self, request: Request) -> Request | Response:
        method = str(request.method).upper()
        if method == self.allowed_method:
            return request

        logger.info("Webhook method not allowed", icon=LogIcon.FORBIDDEN, method=method)
        return json_response(
            status_codes.HTTP_405_METHOD_NOT_ALLOWED,
            {
                "error": "method_not_allowed",
                "message": f"The HTTP '{method}' method is not supported. WebHook requests must use '{self.allowed_method}'.",
            },
            headers={"allow": self.allowed_method},
        )

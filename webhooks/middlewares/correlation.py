"""Binds a per-request correlation id for log correlation."""

from uuid import uuid4

from asgi_correlation_id import correlation_id
from robyn import Request

from webhooks.middlewares.base import BaseMiddleware

REQUEST_ID_HEADER = "x-request-id"
MAX_REQUEST_ID_LENGTH = 128


class CorrelationIdMiddleware(BaseMiddleware):
    """Reuses the caller's X-Request-ID when sane, otherwise generates one."""

    order = 0

    def before(self, request: Request) -> Request:
        incoming = request.headers.get(REQUEST_ID_HEADER)
        if incoming and len(incoming) <= MAX_REQUEST_ID_LENGTH and incoming.isprintable():
            correlation_id.set(incoming)
        else:
            correlation_id.set(uuid4().hex)
        return request

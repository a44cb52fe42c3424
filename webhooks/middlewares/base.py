"""Ordered middleware pipeline for Robyn applications."""

from collections import defaultdict
from collections.abc import Callable, Iterable
from typing import ClassVar

import orjson
from robyn import Request, Response, Robyn

from webhooks.core.logger import LogIcon, logger

BeforeHandler = Callable[[Request], Request | Response]
AfterHandler = Callable[[Response], Response]


def json_response(status_code: int, payload: dict, headers: dict[str, str] | None = None) -> Response:
    return Response(
        status_code=status_code,
        headers={"content-type": "application/json", **(headers or {})},
        description=orjson.dumps(payload).decode(),
    )


class BaseMiddleware:
    """Base class for middlewares with before/after hooks. Override at least one.

    ``order`` positions the middleware in each endpoint's chain; lower runs first.
    """

    order: ClassVar[int] = 0
    endpoints: frozenset[str]

    def __init__(self, endpoints: Iterable[str] | None = None) -> None:
        self.endpoints = frozenset(endpoints) if endpoints else frozenset()

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        if cls.before is BaseMiddleware.before and cls.after is BaseMiddleware.after:
            raise TypeError(f"{cls.__name__} must implement at least one of before/after")

    @property
    def has_before(self) -> bool:
        return type(self).before is not BaseMiddleware.before

    @property
    def has_after(self) -> bool:
        return type(self).after is not BaseMiddleware.after

    def before(self, request: Request) -> Request | Response:
        """Called before request handling. Return Request to continue or Response to short-circuit."""
        return request

    def after(self, response: Response) -> Response:
        """Called after request handling. Return modified Response."""
        return response


def run_before_chain(request: Request, handlers: Iterable[BeforeHandler]) -> Request | Response:
    """Run before hooks in order, stopping at the first Response."""
    for handler in handlers:
        result = handler(request)
        if isinstance(result, Response):
            return result
        request = result
    return request


def run_after_chain(response: Response, handlers: Iterable[AfterHandler]) -> Response:
    for handler in handlers:
        response = handler(response)
    return response


class MiddlewareHandler:
    """Collects middlewares and wires one ordered chain per endpoint into a Robyn app."""

    def __init__(self, app: Robyn) -> None:
        self._app = app
        self._middlewares: list[BaseMiddleware] = []

    @property
    def middlewares(self) -> list[BaseMiddleware]:
        return list(self._middlewares)

    def register(self, *middlewares: BaseMiddleware) -> "MiddlewareHandler":
        """Register middlewares. Returns self for chaining."""
        for middleware in middlewares:
            self._middlewares.append(middleware)
            logger.info(
                "Registered middleware",
                icon=LogIcon.ADAPTER,
                middleware=type(middleware).__name__,
                order=middleware.order,
            )
        return self

    def chains(self) -> dict[str, list[BaseMiddleware]]:
        """Middlewares per endpoint, sorted by order. Registration order breaks ties."""
        by_endpoint: dict[str, list[BaseMiddleware]] = defaultdict(list)
        for middleware in sorted(self._middlewares, key=lambda m: m.order):
            for endpoint in sorted(middleware.endpoints or self._get_all_routes()):
                by_endpoint[endpoint].append(middleware)
        return dict(by_endpoint)

    def apply(self) -> None:
        """Register the chained before/after hooks on the app."""
        for endpoint, chain in self.chains().items():
            befores = [m.before for m in chain if m.has_before]
            afters = [m.after for m in reversed(chain) if m.has_after]
            if befores:
                self._register_before(endpoint, befores)
            if afters:
                self._register_after(endpoint, afters)

    def _get_all_routes(self) -> frozenset[str]:
        """Get all registered routes from the app."""
        routes = self._app.get_all_routes()
        return frozenset(route[1] for route in routes)

    def _register_before(self, endpoint: str, handlers: list[BeforeHandler]) -> None:
        """Register a before_request handler for an endpoint."""
        @self._app.before_request(endpoint)
        async def before_wrapper(request: Request) -> Request | Response:
            return run_before_chain(request, handlers)

    def _register_after(self, endpoint: str, handlers: list[AfterHandler]) -> None:
        """Register an after_request handler for an endpoint."""
        @self._app.after_request(endpoint)
        def after_wrapper(response: Response) -> Response:
            return run_after_chain(response, handlers)

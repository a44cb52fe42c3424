"""Rejects webhook deliveries whose Content-Type does not match the expected body type."""

from collections.abc import Callable, Iterable, Mapping

from robyn import Request, Response, status_codes

from webhooks.core.errors import InvalidBodyTypeError, MissingReceiverMetadataError, WebhookConfigurationError
from webhooks.core.logger import LogIcon, logger
from webhooks.core.verifier import verify_body_type
from webhooks.middlewares.base import BaseMiddleware, json_response
from webhooks.middlewares.receiver import VerifyMethodMiddleware
from webhooks.models.core import BodyType, UnsupportedBodyType, receiver_name_from_route


class VerifyBodyTypeMiddleware(BaseMiddleware):
    """Allow only requests with a Content-Type matching the resolved body type.

    ``body_type`` is the action's requirement. Pass ``receivers`` for actions
    that serve any receiver: the receiver's capability is then looked up per
    request, replacing ``BodyType.ALL`` or bounding a narrower requirement.
    Without ``receivers`` the requirement is used as-is.

    Runs after method verification and before event dispatch.
    """

    order = VerifyMethodMiddleware.order + 10

    def __init__(
        self,
        body_type: BodyType,
        *,
        receivers: Mapping[str, BodyType] | None = None,
        resolve_receiver_name: Callable[[Request], str | None] = receiver_name_from_route,
        endpoints: Iterable[str] | None = None,
    ) -> None:
        if not isinstance(body_type, BodyType):
            raise TypeError(f"body_type must be a BodyType, got {type(body_type).__name__}")
        if resolve_receiver_name is None:
            raise TypeError("resolve_receiver_name is required")

        super().__init__(endpoints)
        self.body_type = body_type
        self.receivers = receivers
        self.resolve_receiver_name = resolve_receiver_name

    def before(self, request: Request) -> Request | Response:
        receiver_name = self.resolve_receiver_name(request)
        content_type = request.headers.get("content-type")

        try:
            rejection = verify_body_type(self.body_type, receiver_name, content_type, self.receivers)
        except WebhookConfigurationError as ex:
            self._log_configuration_error(ex)
            return json_response(
                status_codes.HTTP_500_INTERNAL_SERVER_ERROR,
                {"error": "webhook_configuration_error", "message": "The WebHook receiver is misconfigured."},
            )

        if rejection is None:
            return request
        return self._unsupported_media_type(rejection)

    def _unsupported_media_type(self, rejection: UnsupportedBodyType) -> Response:
        logger.info(
            "Unsupported webhook content type",
            icon=LogIcon.VALIDATION,
            receiver=rejection.receiver_name,
            content_type=rejection.content_type,
            expected=rejection.expected.describe(),
        )
        return json_response(rejection.status_code, rejection.to_dict())

    def _log_configuration_error(self, error: WebhookConfigurationError) -> None:
        match error:
            case InvalidBodyTypeError():
                logger.critical(
                    "Action body type is not a subset of the receiver body type",
                    icon=LogIcon.CONFIGURATION,
                    receiver=error.receiver_name,
                    requirement=error.requirement.describe(),
                    capability=error.capability.describe(),
                    detail=str(error),
                )
            case MissingReceiverMetadataError():
                logger.critical(
                    "No body type metadata registered for receiver",
                    icon=LogIcon.CONFIGURATION,
                    receiver=error.receiver_name,
                    requirement=self.body_type.describe(),
                    detail=str(error),
                )
            case _:
                logger.critical("Webhook configuration error", icon=LogIcon.CONFIGURATION, detail=str(error))

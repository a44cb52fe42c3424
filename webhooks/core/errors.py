"""Configuration integrity errors raised while wiring or verifying webhooks."""

from webhooks.models.core import BodyType


class WebhookConfigurationError(RuntimeError):
    """Deployment or wiring fault. Never the caller's fault, never retried."""


class MissingReceiverMetadataError(WebhookConfigurationError):
    def __init__(self, receiver_name: str) -> None:
        self.receiver_name = receiver_name
        super().__init__(
            f"No body type metadata found for the '{receiver_name}' WebHook receiver. "
            "Each receiver must register a descriptor."
        )


class InvalidBodyTypeError(WebhookConfigurationError):
    def __init__(self, requirement: BodyType, capability: BodyType, receiver_name: str) -> None:
        self.requirement = requirement
        self.capability = capability
        self.receiver_name = receiver_name
        super().__init__(
            f"Invalid action body type '{requirement.describe()}'. This value must be equal to or a subset of "
            f"the body type '{capability.describe()}' declared by the '{receiver_name}' WebHook receiver."
        )


class DuplicateReceiverError(WebhookConfigurationError):
    def __init__(self, receiver_name: str) -> None:
        self.receiver_name = receiver_name
        super().__init__(f"Receiver '{receiver_name}' is registered more than once.")

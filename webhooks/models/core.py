"""Core models for webhook receivers, actions and verification outcomes."""

from dataclasses import dataclass
from enum import Flag, auto
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from robyn import status_codes

RECEIVER_NAME_PARAM = "receiver_name"
WEBHOOK_ID_PARAM = "id"


class BodyType(Flag):
    """Set of request body encodings a receiver or action accepts."""

    FORM = auto()
    JSON = auto()
    XML = auto()
    ALL = FORM | JSON | XML

    def is_subset_of(self, other: "BodyType") -> bool:
        """True when no flag is set here that is absent from other."""
        return not (self & ~other)

    @property
    def is_single(self) -> bool:
        return len(self) == 1

    def describe(self) -> str:
        """Human readable member list, e.g. 'JSON, XML'."""
        return ", ".join(member.name for member in self) or "NONE"


class ReceiverDescriptor(BaseModel):
    """Declared capability of one receiver kind."""

    model_config = ConfigDict(frozen=True)

    name: str
    body_type: BodyType

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("receiver name must not be empty")
        return value


@dataclass(frozen=True, slots=True)
class WebhookAction:
    """A registered webhook endpoint and its body type requirement.

    ``receiver`` is None for generic actions serving every receiver; those read
    the receiver name from the route at request time.
    """

    receiver: str | None
    body_type: BodyType
    endpoints: tuple[str, ...]
    handler_name: str = ""

    @property
    def is_generic(self) -> bool:
        return self.receiver is None

    def resolve_receiver_name(self, request: Any) -> str | None:
        if self.receiver is not None:
            return self.receiver
        return receiver_name_from_route(request)


def receiver_name_from_route(request: Any) -> str | None:
    """Read the receiver name path parameter, lowercased. None when absent."""
    path_params = getattr(request, "path_params", None) or {}
    name = path_params.get(RECEIVER_NAME_PARAM)
    return name.lower() if name else None


_EXPECTATIONS = {
    BodyType.FORM: "HTML form URL-encoded data",
    BodyType.JSON: "JSON",
    BodyType.XML: "XML",
}


@dataclass(frozen=True, slots=True)
class UnsupportedBodyType:
    """Rejection of a delivery whose Content-Type does not fit the resolved body type."""

    receiver_name: str
    expected: BodyType
    content_type: str | None

    status_code = status_codes.HTTP_415_UNSUPPORTED_MEDIA_TYPE

    @property
    def message(self) -> str:
        actual = self.content_type or ""
        if self.expected.is_single:
            return (
                f"The '{self.receiver_name}' WebHook receiver does not support content type '{actual}'. "
                f"The WebHook request must contain an entity body formatted as {_EXPECTATIONS[self.expected]}."
            )
        return (
            f"The '{self.receiver_name}' WebHook receiver does not support content type '{actual}'. "
            f"The WebHook request must contain an entity body of one of these types: {self.expected.describe()}."
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "unsupported_media_type",
            "message": self.message,
            "receiver": self.receiver_name,
            "expected": [member.name for member in self.expected],
            "content_type": self.content_type,
        }

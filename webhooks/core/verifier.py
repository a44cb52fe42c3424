"""Body type verification for incoming webhook deliveries.

Resolution reconciles the action's declared requirement with the receiver's
capability; verification then classifies the request Content-Type against the
resolved set. Both functions are pure: logging and HTTP responses are left to
the middleware adapter.
"""

from collections.abc import Mapping

from beartype import beartype

from webhooks.core.errors import InvalidBodyTypeError, MissingReceiverMetadataError
from webhooks.core.media_type import MediaType, classify_content_type
from webhooks.models.core import BodyType, UnsupportedBodyType


@beartype
def resolve_body_type(
    requirement: BodyType,
    receiver_name: str,
    capabilities: Mapping[str, BodyType] | None = None,
) -> BodyType:
    """Return the effective body type set for a receiver.

    Without ``capabilities`` the requirement is returned as-is: the action is
    bound to one receiver whose capability was folded in at configuration time.

    Raises:
        MissingReceiverMetadataError: receiver has no registered capability.
        InvalidBodyTypeError: requirement is not ALL and not a subset of the capability.
    """
    if capabilities is None:
        return requirement

    capability = capabilities.get(receiver_name)
    if capability is None:
        raise MissingReceiverMetadataError(receiver_name)

    if requirement == BodyType.ALL:
        return capability

    if not requirement.is_subset_of(capability):
        raise InvalidBodyTypeError(requirement, capability, receiver_name)

    return requirement


@beartype
def verify_body_type(
    requirement: BodyType,
    receiver_name: str | None,
    content_type: str | None,
    capabilities: Mapping[str, BodyType] | None = None,
) -> UnsupportedBodyType | None:
    """Check a request Content-Type. None means the request may proceed."""
    if not receiver_name:
        return None

    effective = resolve_body_type(requirement, receiver_name, capabilities)
    category = classify_content_type(MediaType.parse(content_type))

    # An empty set accepts nothing. A single flag needs an exact match, several
    # flags need any one of them.
    if effective and category is not None and category in effective:
        return None

    return UnsupportedBodyType(receiver_name=receiver_name, expected=effective, content_type=content_type)

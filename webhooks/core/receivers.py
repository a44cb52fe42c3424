"""Built-in catalog of webhook providers and the body types they deliver."""

from collections.abc import Collection

from webhooks.models.core import BodyType, ReceiverDescriptor

KNOWN_RECEIVERS: tuple[ReceiverDescriptor, ...] = (
    ReceiverDescriptor(name="azurealert", body_type=BodyType.JSON),
    ReceiverDescriptor(name="bitbucket", body_type=BodyType.JSON),
    ReceiverDescriptor(name="dropbox", body_type=BodyType.JSON),
    ReceiverDescriptor(name="dynamicscrm", body_type=BodyType.JSON),
    ReceiverDescriptor(name="generic", body_type=BodyType.JSON),
    ReceiverDescriptor(name="github", body_type=BodyType.JSON),
    ReceiverDescriptor(name="kudu", body_type=BodyType.JSON),
    ReceiverDescriptor(name="mailchimp", body_type=BodyType.FORM),
    ReceiverDescriptor(name="pusher", body_type=BodyType.JSON),
    ReceiverDescriptor(name="salesforce", body_type=BodyType.XML),
    ReceiverDescriptor(name="slack", body_type=BodyType.FORM),
    ReceiverDescriptor(name="stripe", body_type=BodyType.JSON),
    ReceiverDescriptor(name="trello", body_type=BodyType.JSON),
    ReceiverDescriptor(name="vsts", body_type=BodyType.JSON),
    ReceiverDescriptor(name="wordpress", body_type=BodyType.FORM),
    ReceiverDescriptor(name="zendesk", body_type=BodyType.JSON),
)


def select_receivers(
    enabled: Collection[str],
    catalog: tuple[ReceiverDescriptor, ...] = KNOWN_RECEIVERS,
) -> tuple[ReceiverDescriptor, ...]:
    """Filter the catalog by enabled names. An empty selection keeps everything."""
    if not enabled:
        return catalog

    wanted = {name.strip().lower() for name in enabled}
    unknown = wanted - {descriptor.name for descriptor in catalog}
    if unknown:
        raise ValueError(f"Unknown receivers enabled: {', '.join(sorted(unknown))}")
    return tuple(descriptor for descriptor in catalog if descriptor.name in wanted)

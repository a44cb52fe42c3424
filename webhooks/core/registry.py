"""Receiver name to body type capability lookup, built once at startup."""

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from webhooks.core.errors import DuplicateReceiverError
from webhooks.core.logger import LogIcon, logger
from webhooks.models.core import BodyType, ReceiverDescriptor


class ReceiverRegistry(Mapping[str, BodyType]):
    """Read-only mapping of lowercase receiver name to declared BodyType."""

    __slots__ = ("_capabilities",)

    def __init__(self, capabilities: Mapping[str, BodyType]) -> None:
        self._capabilities = MappingProxyType({name.lower(): body_type for name, body_type in capabilities.items()})

    @classmethod
    def from_descriptors(cls, descriptors: Iterable[ReceiverDescriptor]) -> "ReceiverRegistry":
        """Build the registry. Each receiver name must appear exactly once."""
        capabilities: dict[str, BodyType] = {}
        for descriptor in descriptors:
            if descriptor.name in capabilities:
                raise DuplicateReceiverError(descriptor.name)
            capabilities[descriptor.name] = descriptor.body_type

        registry = cls(capabilities)
        logger.info("Receiver registry built", icon=LogIcon.REGISTRY, receivers=len(registry))
        return registry

    @property
    def names(self) -> list[str]:
        return sorted(self._capabilities)

    def __getitem__(self, name: str) -> BodyType:
        return self._capabilities[name.lower()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._capabilities

    def __iter__(self) -> Iterator[str]:
        return iter(self._capabilities)

    def __len__(self) -> int:
        return len(self._capabilities)

    def __repr__(self) -> str:
        return f"ReceiverRegistry({self.names})"

from __future__ import annotations

from typing import Any

from servicewire.identifiers import ServiceIdentifier, identify
from servicewire.registry import TypeRegistry


class CapabilityIndex:
    """Answer which registered types implement a capability.

    Results are memoized per capability once the registry is frozen. While it
    is still open every query rescans the registrations.
    """

    def __init__(self, registry: TypeRegistry) -> None:
        self._registry = registry
        self._implementors: dict[ServiceIdentifier, tuple[ServiceIdentifier, ...]] = {}

    def implementors_of(self, capability: type[Any] | str) -> tuple[ServiceIdentifier, ...]:
        """Return every registered concrete type declaring ``capability``.

        Args:
            capability: Capability class or its service identifier.

        Returns:
            Implementor identifiers in discovery order. Empty when nothing
            implements the capability.

        """
        key = identify(capability)
        cached = self._implementors.get(key)
        if cached is not None:
            return cached

        result = tuple(
            registration.identifier
            for registration in self._registry.registrations()
            if key in registration.capabilities
        )
        if self._registry.frozen:
            self._implementors[key] = result
        return result

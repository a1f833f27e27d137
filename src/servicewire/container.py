from __future__ import annotations

import logging
from collections.abc import Iterable
from types import ModuleType
from typing import Any, TypeVar, overload

from servicewire.capabilities import CapabilityIndex
from servicewire.descriptors import ConstructorDescriptor, ConstructorParameter
from servicewire.identifiers import ServiceIdentifier, identify
from servicewire.markers import CapabilityRequest
from servicewire.registry import TypeRegistry
from servicewire.resolver import GraphResolver

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Container:
    """Discover services and build them with their dependency graphs.

    A container owns one ``TypeRegistry``. Discovery roots and explicit types
    are registered during construction, after which the registry is frozen:
    the set of services never changes for the lifetime of the container.

    Resolution is driven by constructor signatures. Each parameter receives,
    in order of precedence, one instance of every implementor of a capability
    (when marked with ``Implementors[...]`` or ``collects``), a freshly built
    registered service matching its annotation, or its default value.
    Nothing is cached: every ``get`` builds a new graph.
    """

    def __init__(
        self,
        *roots: str | ModuleType,
        types: Iterable[type[Any]] = (),
        registry: TypeRegistry | None = None,
    ) -> None:
        """Build the registry and wire the resolver.

        Args:
            *roots: Packages to scan for concrete types, by dotted name or as
                imported modules.
            types: Classes to register explicitly, in addition to discovery.
            registry: Pre-populated registry to adopt. It is frozen by the
                container; further roots and types are added first when it is
                still open.

        Examples:
            .. code-block:: python

                container = Container("myapp.services")
                server = container.get("myapp.services.http.Server")

        """
        self._registry = registry if registry is not None else TypeRegistry()
        for root in roots:
            self._registry.scan(root)
        for concrete_type in types:
            self._registry.register(concrete_type)
        self._registry.freeze()

        self._capabilities = CapabilityIndex(self._registry)
        self._descriptor = ConstructorDescriptor(self._registry)
        self._resolver = GraphResolver(self._registry, self._capabilities, self._descriptor)

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    @overload
    def get(self, identifier: type[T]) -> T: ...

    @overload
    def get(self, identifier: str) -> Any: ...

    def get(self, identifier: type[Any] | str) -> Any:
        """Build a new instance of a service with its full dependency graph.

        Args:
            identifier: Service class or its ``module.QualName`` identifier.

        Raises:
            ServiceNotFoundError: When the service is not registered.
            UnresolvableParameterError: When a constructor parameter cannot be
                satisfied.
            CycleError: When the dependency graph loops back on itself.
            TypeMismatchError: When a builder returns the wrong type.

        """
        service = identify(identifier)
        logger.debug("Service %s requested", service)
        return self._resolver.resolve(service)

    def service_names(self) -> tuple[ServiceIdentifier, ...]:
        """Return every registered service identifier in discovery order."""
        return self._registry.all()

    def implementors_of(self, capability: type[Any] | str) -> tuple[ServiceIdentifier, ...]:
        return self._capabilities.implementors_of(capability)

    def describe(self, identifier: type[Any] | str) -> tuple[ConstructorParameter, ...]:
        return self._descriptor.describe(identifier)

    def collection_markers_of(self, identifier: type[Any] | str) -> tuple[CapabilityRequest, ...]:
        return self._descriptor.collection_markers_of(identifier)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._registry

    def __repr__(self) -> str:
        return f"{type(self).__name__}(services={len(self._registry)})"

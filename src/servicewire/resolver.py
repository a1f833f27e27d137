from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from inspect import Parameter
from typing import Any

from servicewire.capabilities import CapabilityIndex
from servicewire.descriptors import ConstructorDescriptor, ConstructorParameter
from servicewire.exceptions import (
    CycleError,
    ServiceNotFoundError,
    TypeMismatchError,
    UnresolvableParameterError,
)
from servicewire.identifiers import ServiceIdentifier, identify
from servicewire.markers import CapabilityRequest
from servicewire.registry import TypeRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolutionContext:
    """State of one resolution step.

    ``markers`` are the collection markers visible while resolving
    ``service``; ``path`` holds the services still under construction above it.
    """

    service: ServiceIdentifier
    markers: tuple[CapabilityRequest, ...] = ()
    path: tuple[ServiceIdentifier, ...] = ()

    def markers_for(self, parameter: str) -> tuple[CapabilityRequest, ...]:
        return tuple(marker for marker in self.markers if marker.parameter_name == parameter)


class GraphResolver:
    """Build services together with their full dependency graph.

    Every call constructs a fresh graph: there is no instance caching and no
    sharing between two occurrences of the same dependency.
    """

    def __init__(
        self,
        registry: TypeRegistry,
        capabilities: CapabilityIndex,
        descriptor: ConstructorDescriptor,
    ) -> None:
        self._registry = registry
        self._capabilities = capabilities
        self._descriptor = descriptor

    def resolve(self, identifier: type[Any] | str) -> Any:
        """Construct a service and everything it depends on.

        Args:
            identifier: Service class or identifier.

        Raises:
            ServiceNotFoundError: When the service is not registered.
            UnresolvableParameterError: When a constructor parameter cannot
                be satisfied.
            CycleError: When the dependency graph loops back on itself.
            TypeMismatchError: When a builder returns the wrong type.

        """
        service = identify(identifier)
        if not self._registry.contains(service):
            raise ServiceNotFoundError(service)
        return self._build(self._context(service, path=()))

    def _context(
        self,
        service: ServiceIdentifier,
        path: tuple[ServiceIdentifier, ...],
        *,
        with_markers: bool = True,
    ) -> ResolutionContext:
        if service in path:
            raise CycleError(service, path)
        markers = self._descriptor.collection_markers_of(service) if with_markers else ()
        return ResolutionContext(service=service, markers=markers, path=path)

    def _build(self, context: ResolutionContext) -> Any:
        registration = self._registry.get(context.service)
        parameters = self._descriptor.describe(context.service)
        logger.debug(
            "Resolving %s (depth=%d, markers=%d)",
            context.service,
            len(context.path),
            len(context.markers),
        )

        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for parameter in parameters:
            value = self._resolve_parameter(context, parameter)
            if parameter.kind is Parameter.POSITIONAL_ONLY:
                args.append(value)
            else:
                kwargs[parameter.name] = value

        instance = registration.builder(*args, **kwargs)
        if type(instance) is not registration.concrete_type:
            raise TypeMismatchError(context.service, type(instance))
        return instance

    def _resolve_parameter(
        self,
        context: ResolutionContext,
        parameter: ConstructorParameter,
    ) -> Any:
        requests = context.markers_for(parameter.name)
        if requests:
            return self._resolve_collection(context, requests)

        declared_type = parameter.declared_type
        if isinstance(declared_type, str) and self._registry.contains(declared_type):
            path = (*context.path, context.service)
            return self._build(self._context(declared_type, path))

        if parameter.has_default:
            return parameter.default

        raise UnresolvableParameterError(context.service, parameter.name)

    def _resolve_collection(
        self,
        context: ResolutionContext,
        requests: Sequence[CapabilityRequest],
    ) -> Any:
        implementors = dict.fromkeys(
            implementor
            for request in requests
            for implementor in self._capabilities.implementors_of(request.capability)
        )
        path = (*context.path, context.service)
        # Markers stop here: implementors are built as if they declared none.
        instances = {
            implementor: self._build(self._context(implementor, path, with_markers=False))
            for implementor in implementors
        }
        if len(instances) == 1:
            return next(iter(instances.values()))
        return instances


__all__ = ["GraphResolver", "ResolutionContext"]

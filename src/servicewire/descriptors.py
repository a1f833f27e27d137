from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from inspect import Parameter
from typing import Any, get_type_hints

from servicewire.exceptions import DescriptorError, ServiceNotFoundError
from servicewire.identifiers import ServiceIdentifier, identify, is_runtime_class
from servicewire.markers import (
    CapabilityRequest,
    declared_collections,
    implementors_request,
    strip_annotated,
)
from servicewire.registry import Registration, TypeRegistry

_VARIADIC_KINDS = frozenset({Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD})


class BuiltinMarker(Enum):
    """Declared type of a parameter that can never be resolved as a service."""

    BUILTIN = "builtin"


BUILTIN = BuiltinMarker.BUILTIN


@dataclass(frozen=True, slots=True)
class ConstructorParameter:
    """Describe one constructor parameter of a registered service."""

    name: str
    declared_type: ServiceIdentifier | BuiltinMarker
    has_default: bool
    default: Any = None
    collection_marker: CapabilityRequest | None = None
    kind: inspect._ParameterKind = Parameter.POSITIONAL_OR_KEYWORD

    @property
    def is_builtin(self) -> bool:
        return self.declared_type is BUILTIN


class ConstructorDescriptor:
    """Expose constructor parameters and collection markers of registered types.

    Descriptors are derived on every call; nothing is cached.
    """

    def __init__(self, registry: TypeRegistry) -> None:
        self._registry = registry

    def describe(self, identifier: type[Any] | str) -> tuple[ConstructorParameter, ...]:
        """Return the constructor parameters of a service in declaration order.

        Types without a declared constructor are trivially instantiable and
        yield an empty tuple. Variadic parameters are not described.

        Args:
            identifier: Service class or identifier.

        Raises:
            DescriptorError: When the service is not registered or its
                annotations cannot be evaluated.

        """
        registration = self._registration(identifier)
        target = _signature_target(registration)
        if target is None:
            return ()

        signature = _signature(registration, target)
        hints = _type_hints(registration, target)
        requests = self._requests_by_parameter(registration, target, signature, hints)

        return tuple(
            ConstructorParameter(
                name=name,
                declared_type=_declared_type(hints.get(name, Parameter.empty)),
                has_default=parameter.default is not Parameter.empty,
                default=None if parameter.default is Parameter.empty else parameter.default,
                collection_marker=requests.get(name),
                kind=parameter.kind,
            )
            for name, parameter in signature.parameters.items()
            if parameter.kind not in _VARIADIC_KINDS
        )

    def collection_markers_of(self, identifier: type[Any] | str) -> tuple[CapabilityRequest, ...]:
        """Return every collection marker declared on a service constructor.

        Markers attached with ``collects`` come first, followed by markers
        declared through ``Implementors[...]`` annotations in parameter order.
        """
        registration = self._registration(identifier)
        target = _signature_target(registration)
        if target is None:
            return ()

        signature = _signature(registration, target)
        hints = _type_hints(registration, target)
        return _collection_markers(target, signature, hints)

    def _registration(self, identifier: type[Any] | str) -> Registration:
        try:
            return self._registry.get(identifier)
        except ServiceNotFoundError:
            raise DescriptorError(identify(identifier), "service is not registered") from None

    @staticmethod
    def _requests_by_parameter(
        registration: Registration,
        target: Callable[..., Any],
        signature: inspect.Signature,
        hints: dict[str, Any],
    ) -> dict[str, CapabilityRequest]:
        requests: dict[str, CapabilityRequest] = {}
        for request in _collection_markers(target, signature, hints):
            if request.parameter_name not in signature.parameters:
                raise DescriptorError(
                    registration.identifier,
                    f"collection marker names unknown parameter '{request.parameter_name}'",
                )
            requests.setdefault(request.parameter_name, request)
        return requests


def _collection_markers(
    target: Callable[..., Any],
    signature: inspect.Signature,
    hints: dict[str, Any],
) -> tuple[CapabilityRequest, ...]:
    annotated = (
        implementors_request(hints.get(name, Parameter.empty), name)
        for name in signature.parameters
    )
    return (
        *declared_collections(target),
        *(request for request in annotated if request is not None),
    )


def _signature_target(registration: Registration) -> Callable[..., Any] | None:
    """Return the callable whose signature drives construction, or None."""
    builder = registration.builder
    if builder is not registration.concrete_type:
        return builder

    init = registration.concrete_type.__init__
    if init is object.__init__:
        return None
    return init


def _signature(registration: Registration, target: Callable[..., Any]) -> inspect.Signature:
    try:
        signature = inspect.signature(target)
    except (TypeError, ValueError) as exc:
        raise DescriptorError(registration.identifier, str(exc)) from exc

    if target is registration.builder:
        return signature
    # Drop ``self`` from the unbound ``__init__``.
    parameters = list(signature.parameters.values())[1:]
    return signature.replace(parameters=parameters)


def _type_hints(registration: Registration, target: Callable[..., Any]) -> dict[str, Any]:
    try:
        hints = get_type_hints(target, include_extras=True)
    except Exception as exc:
        raise DescriptorError(registration.identifier, f"cannot evaluate annotations: {exc}") from exc
    hints.pop("return", None)
    return hints


def _declared_type(hint: Any) -> ServiceIdentifier | BuiltinMarker:
    if hint is Parameter.empty:
        return BUILTIN
    base = strip_annotated(hint)
    if not is_runtime_class(base) or base.__module__ == "builtins":
        return BUILTIN
    return identify(base)


__all__ = [
    "BUILTIN",
    "BuiltinMarker",
    "ConstructorDescriptor",
    "ConstructorParameter",
]

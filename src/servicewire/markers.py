from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated, Any, NamedTuple, TypeVar, Union, get_args, get_origin

from servicewire.exceptions import InvalidRegistrationError
from servicewire.identifiers import ServiceIdentifier, identify

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])

COLLECTS_ATTRIBUTE = "__servicewire_collects__"
_ANNOTATED_MARKER_MIN_ARGS = 2


@dataclass(frozen=True, slots=True)
class CapabilityRequest:
    """Ask for every implementor of ``capability`` in parameter ``parameter_name``."""

    parameter_name: str
    capability: ServiceIdentifier


class ImplementorsMarker(NamedTuple):
    """Marker for collecting all registered implementors of a capability."""

    capability: Any


if TYPE_CHECKING:
    Implementors = Union[dict[str, T], T]  # noqa: UP007
    """Inject one instance of every registered implementor of a capability.

    ``Implementors[T]`` type-checks as ``dict[str, T] | T``: a mapping keyed by
    service identifier, collapsed to the single instance when exactly one
    implementor is registered.
    """

else:

    class Implementors:
        """Inject one instance of every registered implementor of a capability.

        At runtime ``Implementors[T]`` resolves to
        ``Annotated[T, ImplementorsMarker(capability=T)]``.

        Examples:
            .. code-block:: python

                class App:
                    def __init__(self, loggers: Implementors[Logger]) -> None:
                        self.loggers = loggers

        """

        def __class_getitem__(cls, item: Any) -> Any:
            base = item
            if get_origin(item) is Annotated:
                base = get_args(item)[0]
            return Annotated[base, ImplementorsMarker(capability=base)]


def collects(parameter: str, capability: type[Any] | str) -> Callable[[F], F]:
    """Attach a collection marker to a constructor or builder.

    The decorated callable receives, for ``parameter``, one instance of every
    registered implementor of ``capability`` instead of a single dependency.

    Args:
        parameter: Name of the parameter receiving the collection.
        capability: Capability class or its service identifier.

    Examples:
        .. code-block:: python

            class App:
                @collects("loggers", Logger)
                def __init__(self, loggers: dict[str, Logger]) -> None:
                    self.loggers = loggers

    """
    request = CapabilityRequest(parameter_name=parameter, capability=identify(capability))

    def decorator(func: F) -> F:
        if parameter not in inspect.signature(func).parameters:
            msg = (
                f"Cannot collect into '{parameter}': "
                f"'{func.__qualname__}' has no such parameter."
            )
            raise InvalidRegistrationError(msg)
        existing: tuple[CapabilityRequest, ...] = getattr(func, COLLECTS_ATTRIBUTE, ())
        # Decorators apply bottom-up; prepend to keep source order.
        setattr(func, COLLECTS_ATTRIBUTE, (request, *existing))
        return func

    return decorator


def declared_collections(func: Callable[..., Any]) -> tuple[CapabilityRequest, ...]:
    """Return the markers attached to ``func`` by ``collects``."""
    return tuple(getattr(func, COLLECTS_ATTRIBUTE, ()))


def is_implementors_annotation(annotation: Any) -> bool:
    """Return True when annotation is Annotated[..., ImplementorsMarker(...)]."""
    return _extract_implementors_marker(annotation) is not None


def implementors_request(annotation: Any, parameter: str) -> CapabilityRequest | None:
    """Build the request declared by an ``Implementors[...]`` annotation, if any."""
    marker = _extract_implementors_marker(annotation)
    if marker is None:
        return None
    return CapabilityRequest(parameter_name=parameter, capability=identify(marker.capability))


def strip_annotated(annotation: Any) -> Any:
    """Return the bare type behind ``Annotated[...]`` metadata."""
    if get_origin(annotation) is Annotated:
        return get_args(annotation)[0]
    return annotation


def _extract_implementors_marker(annotation: Any) -> ImplementorsMarker | None:
    if get_origin(annotation) is not Annotated:
        return None
    annotation_args = get_args(annotation)
    if len(annotation_args) < _ANNOTATED_MARKER_MIN_ARGS:
        return None  # pragma: no cover - Annotated requires at least 2 args
    return next(
        (item for item in annotation_args[1:] if isinstance(item, ImplementorsMarker)),
        None,
    )


__all__ = [
    "CapabilityRequest",
    "Implementors",
    "ImplementorsMarker",
    "collects",
    "declared_collections",
    "implementors_request",
    "is_implementors_annotation",
    "strip_annotated",
]

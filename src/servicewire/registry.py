from __future__ import annotations

import enum
import importlib
import inspect
import logging
import typing
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Any, TypeGuard

from servicewire.exceptions import (
    DiscoveryError,
    InvalidRegistrationError,
    ServiceNotFoundError,
)
from servicewire.identifiers import ServiceIdentifier, identify, is_runtime_class

if TYPE_CHECKING:
    from typing_extensions import Self

logger = logging.getLogger(__name__)

_SKIPPED_MODULE_FILES = frozenset({"__main__.py"})
_NON_CAPABILITY_BASES: tuple[type[Any], ...] = (object, typing.Generic, typing.Protocol)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class ConcreteTypePolicy:
    """Decide which discovered classes can be registered as services."""

    ignored_base_types: tuple[type[Any], ...] = (enum.Enum,)

    def is_concrete(self, candidate: object) -> TypeGuard[type[Any]]:
        """Return true when a candidate is an instantiable, non-builtin class.

        Args:
            candidate: Value found while scanning a module namespace.

        """
        if not is_runtime_class(candidate):
            return False
        if candidate.__module__ == "builtins":
            return False
        if inspect.isabstract(candidate):
            return False
        if issubclass(candidate, type):
            return False
        if getattr(candidate, "_is_protocol", False):
            return False
        return not issubclass(candidate, self.ignored_base_types)


@dataclass(frozen=True, slots=True)
class Registration:
    """One entry of the registration table."""

    identifier: ServiceIdentifier
    concrete_type: type[Any]
    builder: Callable[..., Any]
    capabilities: tuple[ServiceIdentifier, ...]


def declared_capabilities(concrete_type: type[Any]) -> tuple[ServiceIdentifier, ...]:
    """Return identifiers of every base class a type satisfies, in MRO order."""
    return tuple(
        identify(base)
        for base in concrete_type.__mro__[1:]
        if base not in _NON_CAPABILITY_BASES
    )


class TypeRegistry:
    """Hold the concrete types a container can build.

    The registry is populated by discovery (``scan``) and explicit
    registration (``register``), then frozen. Discovery order is kept and
    drives every ordered result of the container.
    """

    def __init__(self, policy: ConcreteTypePolicy | None = None) -> None:
        self._policy = policy or ConcreteTypePolicy()
        self._registrations: dict[ServiceIdentifier, Registration] = {}
        self._frozen = False

    @classmethod
    def from_roots(cls, *roots: str | ModuleType) -> Self:
        """Scan every root into a new registry and freeze it."""
        registry = cls()
        for root in roots:
            registry.scan(root)
        registry.freeze()
        return registry

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Stop accepting registrations."""
        if not self._frozen:
            self._frozen = True
            logger.info("Type registry frozen with %d services", len(self._registrations))

    def scan(self, root: str | ModuleType) -> tuple[ServiceIdentifier, ...]:
        """Discover concrete types under a package and register them.

        The root package is imported and its directory tree is walked
        recursively in sorted path order. Every module found is imported and
        every concrete class defined in it is registered.

        Args:
            root: Dotted name of a package (or module), or the imported module.

        Returns:
            Identifiers registered by this scan, in discovery order.

        Raises:
            DiscoveryError: When the root or any module below it cannot be
                imported.

        """
        self._ensure_open()
        root_module = self._import_root(root)
        discovered: list[ServiceIdentifier] = []
        for module in self._iter_modules(root_module):
            for candidate in vars(module).values():
                if not self._policy.is_concrete(candidate):
                    continue
                if candidate.__module__ != module.__name__:
                    continue
                if self._existing(candidate) is not None:
                    continue
                registration = self._add(candidate, builder=None, capabilities=())
                discovered.append(registration.identifier)

        logger.debug("Discovered %d services under %s", len(discovered), root_module.__name__)
        return tuple(discovered)

    def register(
        self,
        concrete_type: type[Any],
        *,
        builder: Callable[..., Any] | None = None,
        capabilities: Iterable[type[Any] | str] | None = None,
    ) -> Registration:
        """Add an explicit registration table entry.

        Args:
            concrete_type: Class whose instances the registration produces.
            builder: Callable constructing the instance from resolved
                dependencies. Defaults to ``concrete_type`` itself.
            capabilities: Extra capabilities the type satisfies, on top of the
                ones declared by its base classes.

        Returns:
            The stored registration. Registering a known type again returns the
            existing entry unchanged.

        Raises:
            InvalidRegistrationError: When the registry is frozen, the type is
                not a concrete class, the builder is not callable, or another
                class already holds the same identifier.

        """
        self._ensure_open()
        if not is_runtime_class(concrete_type):
            msg = f"Only classes can be registered, got {concrete_type!r}."
            raise InvalidRegistrationError(msg)
        if inspect.isabstract(concrete_type):
            msg = f"Abstract class '{concrete_type.__qualname__}' cannot be registered."
            raise InvalidRegistrationError(msg)
        if builder is not None and not callable(builder):
            msg = f"Builder for '{concrete_type.__qualname__}' must be callable, got {builder!r}."
            raise InvalidRegistrationError(msg)

        existing = self._existing(concrete_type)
        if existing is not None:
            return existing
        return self._add(concrete_type, builder=builder, capabilities=capabilities or ())

    def contains(self, identifier: type[Any] | str) -> bool:
        return identify(identifier) in self._registrations

    def all(self) -> tuple[ServiceIdentifier, ...]:
        """Return every registered identifier in discovery order."""
        return tuple(self._registrations)

    def get(self, identifier: type[Any] | str) -> Registration:
        key = identify(identifier)
        try:
            return self._registrations[key]
        except KeyError:
            raise ServiceNotFoundError(key) from None

    def registrations(self) -> tuple[Registration, ...]:
        return tuple(self._registrations.values())

    def __contains__(self, identifier: object) -> bool:
        if not isinstance(identifier, str | type):
            return False
        return self.contains(identifier)

    def __iter__(self) -> Iterator[ServiceIdentifier]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self._registrations)

    def _add(
        self,
        concrete_type: type[Any],
        *,
        builder: Callable[..., Any] | None,
        capabilities: Iterable[type[Any] | str],
    ) -> Registration:
        inherited = declared_capabilities(concrete_type)
        explicit = tuple(identify(capability) for capability in capabilities)
        registration = Registration(
            identifier=identify(concrete_type),
            concrete_type=concrete_type,
            builder=builder if builder is not None else concrete_type,
            capabilities=tuple(dict.fromkeys((*inherited, *explicit))),
        )
        self._registrations[registration.identifier] = registration
        logger.debug("Registered service %s", registration.identifier)
        return registration

    def _existing(self, concrete_type: type[Any]) -> Registration | None:
        identifier = identify(concrete_type)
        existing = self._registrations.get(identifier)
        if existing is not None and existing.concrete_type is not concrete_type:
            msg = (
                f"Identifier '{identifier}' is already registered for a different class; "
                "classes built by factories or reloaded modules need distinct qualified names."
            )
            raise InvalidRegistrationError(msg)
        return existing

    def _ensure_open(self) -> None:
        if self._frozen:
            msg = "Type registry is frozen; no further registrations are accepted."
            raise InvalidRegistrationError(msg)

    def _import_root(self, root: str | ModuleType) -> ModuleType:
        if isinstance(root, ModuleType):
            return root
        try:
            return importlib.import_module(root)
        except Exception as exc:
            raise DiscoveryError(root, f"{type(exc).__name__}: {exc}") from exc

    def _iter_modules(self, root_module: ModuleType) -> Iterator[ModuleType]:
        yield root_module
        search_paths = getattr(root_module, "__path__", None)
        if search_paths is None:
            return

        seen: set[str] = {root_module.__name__}
        for search_path in search_paths:
            base = Path(search_path)
            if not base.is_dir():
                raise DiscoveryError(root_module.__name__, f"'{base}' is not a directory")
            for file_path in sorted(base.rglob("*.py")):
                if file_path.name in _SKIPPED_MODULE_FILES:
                    continue
                module_name = self._module_name(root_module.__name__, base, file_path)
                if module_name in seen:
                    continue
                seen.add(module_name)
                try:
                    yield importlib.import_module(module_name)
                except Exception as exc:
                    raise DiscoveryError(
                        root_module.__name__,
                        f"cannot import '{module_name}': {type(exc).__name__}: {exc}",
                    ) from exc

    @staticmethod
    def _module_name(package: str, base: Path, file_path: Path) -> str:
        parts = list(file_path.relative_to(base).with_suffix("").parts)
        if parts[-1] == "__init__":
            parts.pop()
        return ".".join((package, *parts))


__all__ = [
    "ConcreteTypePolicy",
    "Registration",
    "TypeRegistry",
    "declared_capabilities",
]

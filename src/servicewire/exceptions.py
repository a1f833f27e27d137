from __future__ import annotations

from collections.abc import Sequence


class ServiceWireError(Exception):
    """Represent a base class for all servicewire failures.

    Catch this type when you want to handle any container error path without
    matching each concrete exception class individually.
    """


class DiscoveryError(ServiceWireError):
    """Signal that a discovery root cannot be scanned.

    Raised while a ``TypeRegistry`` is being populated, when the root package
    cannot be imported or when any module below it fails to import. The
    underlying exception is chained as ``__cause__``.

    Typical fixes include making the root importable (for example adding its
    parent directory to ``sys.path``) and fixing the failing module.
    """

    def __init__(self, root: str, reason: str) -> None:
        self.root = root
        self.reason = reason
        super().__init__(f"Cannot discover services under '{root}': {reason}")


class InvalidRegistrationError(ServiceWireError):
    """Signal an invalid explicit registration or marker declaration.

    Raised by ``TypeRegistry.register`` for non-class types, non-callable
    builders, registrations on a frozen registry and a second class claiming
    an identifier that is already taken, and by ``collects`` when the named
    parameter does not exist on the decorated constructor.
    """


class ServiceNotFoundError(ServiceWireError):
    """Signal that a requested service identifier is not registered.

    Raised by ``Container.get`` before anything is constructed.

    Typical fixes include scanning the package that defines the service or
    registering the type explicitly.
    """

    def __init__(self, service: str) -> None:
        self.service = service
        super().__init__(f"Service '{service}' is not registered")


class DescriptorError(ServiceWireError):
    """Signal that a constructor cannot be described.

    Raised when a descriptor is requested for an identifier missing from the
    registry, or when constructor annotations cannot be evaluated.
    """

    def __init__(self, service: str, reason: str) -> None:
        self.service = service
        self.reason = reason
        super().__init__(f"Cannot describe constructor of '{service}': {reason}")


class UnresolvableParameterError(ServiceWireError):
    """Signal a constructor parameter with no viable resolution strategy.

    The parameter is neither a collection target, nor typed with a registered
    service, nor does it declare a default value.

    Typical fixes include annotating the parameter with a registered class,
    giving it a default, or marking it with ``Implementors[...]``.
    """

    def __init__(self, service: str, parameter: str) -> None:
        self.service = service
        self.parameter = parameter
        super().__init__(
            f"Cannot resolve parameter '{parameter}' of service '{service}'",
        )


class TypeMismatchError(ServiceWireError):
    """Signal that a builder produced an instance of the wrong type.

    The produced instance must be exactly of the registered concrete type.
    Typical fix is correcting the ``builder`` passed at registration.
    """

    def __init__(self, service: str, actual: type) -> None:
        self.service = service
        self.actual = actual
        super().__init__(
            f"Service '{service}' was built as '{actual.__module__}.{actual.__qualname__}'",
        )


class CycleError(ServiceWireError):
    """Signal a circular dependency chain.

    Raised as soon as resolution re-enters a service that is still under
    construction; no constructor on the cycle has run at that point.
    """

    def __init__(self, service: str, path: Sequence[str]) -> None:
        self.service = service
        self.path = tuple(path)
        chain = " -> ".join((*self.path, service))
        super().__init__(f"Circular dependency detected: {chain}")


class ConfigurationError(ServiceWireError):
    """Signal invalid bootstrap configuration.

    Raised by the command line bootstrap for malformed ``SERVICEWIRE_*``
    settings, an unknown log level, a missing service or an entrypoint the
    built service does not have.
    """

"""End-to-end container scenarios on the ``wired_app`` sample package."""

from abc import ABC, abstractmethod

import pytest

from servicewire import (
    BUILTIN,
    CapabilityRequest,
    Container,
    CycleError,
    Implementors,
    InvalidRegistrationError,
    ServiceNotFoundError,
    TypeRegistry,
    UnresolvableParameterError,
    identify,
)

LOGGER_IFACE = "wired_app.capabilities.LoggerIface"
FILE_LOGGER = "wired_app.loggers.file.FileLogger"
CONSOLE_LOGGER = "wired_app.loggers.console.ConsoleLogger"


class LoggerIface(ABC):
    @abstractmethod
    def log(self, message: str) -> str: ...


class FileLogger(LoggerIface):
    def log(self, message: str) -> str:
        return f"file: {message}"


class App:
    def __init__(self, loggers: Implementors[LoggerIface]) -> None:
        self.loggers = loggers


class Port:
    def __init__(self, number: int) -> None:
        self.number = number


class ServerA:
    def __init__(self, peer: "ServerB") -> None:
        self.peer = peer


class ServerB:
    def __init__(self, peer: ServerA) -> None:
        self.peer = peer


def test_get_builds_app_with_every_logger_keyed_by_identifier(container: Container) -> None:
    app = container.get("wired_app.app.App")

    assert set(app.loggers) == {FILE_LOGGER, CONSOLE_LOGGER}
    assert type(app.loggers[FILE_LOGGER]).__name__ == "FileLogger"
    assert type(app.loggers[CONSOLE_LOGGER]).__name__ == "ConsoleLogger"
    assert app.loggers[CONSOLE_LOGGER].log("hi") == "console: hi"
    assert app.loggers[FILE_LOGGER].log("hi") == "app.log: hi"


def test_get_resolves_direct_dependencies_across_nested_packages(container: Container) -> None:
    from wired_app.deep.nested.leaves.clock import Clock

    app = container.get("wired_app.app.App")

    assert isinstance(app.clock, Clock)
    assert app.name == "app"


def test_constructor_level_marker_matches_annotation_marker(container: Container) -> None:
    app = container.get("wired_app.app.AttributedApp")

    assert list(app.loggers) == [CONSOLE_LOGGER, FILE_LOGGER]


def test_get_accepts_classes(container: Container) -> None:
    from wired_app.formatting import PlainFormatter

    formatter = container.get(PlainFormatter)

    assert type(formatter) is PlainFormatter


@pytest.mark.parametrize(
    "service",
    [
        "wired_app.formatting.PlainFormatter",
        "wired_app.deep.nested.leaves.clock.Clock",
    ],
)
def test_types_without_constructor_are_built_without_arguments(
    container: Container,
    service: str,
) -> None:
    instance = container.get(service)

    assert identify(type(instance)) == service


def test_sole_implementor_is_injected_unwrapped() -> None:
    container = Container(types=[FileLogger, App])

    app = container.get(App)

    assert isinstance(app.loggers, FileLogger)


def test_two_implementors_are_injected_as_mapping() -> None:
    class ConsoleLogger(LoggerIface):
        def log(self, message: str) -> str:
            return f"console: {message}"

    container = Container(types=[ConsoleLogger, App, FileLogger])

    app = container.get(App)

    assert app.loggers.keys() == {identify(ConsoleLogger), identify(FileLogger)}


def test_classes_sharing_an_identifier_are_rejected() -> None:
    def make_port() -> type:
        class LocalPort:
            pass

        return LocalPort

    with pytest.raises(InvalidRegistrationError, match="already registered"):
        Container(types=[make_port(), make_port()])


def test_get_unregistered_service_raises(container: Container) -> None:
    with pytest.raises(ServiceNotFoundError) as exc_info:
        container.get("wired_app.capabilities.LoggerIface")

    assert exc_info.value.service == LOGGER_IFACE


def test_builtin_parameter_without_default_fails_with_parameter_name() -> None:
    container = Container(types=[Port])

    with pytest.raises(UnresolvableParameterError, match="'number'"):
        container.get(Port)


def test_mutual_dependencies_raise_cycle_error() -> None:
    container = Container(types=[ServerA, ServerB])

    with pytest.raises(CycleError) as exc_info:
        container.get(ServerB)

    assert exc_info.value.path == (identify(ServerB), identify(ServerA))
    assert "->" in str(exc_info.value)


def test_each_get_builds_a_new_graph(container: Container) -> None:
    first = container.get("wired_app.app.App")
    second = container.get("wired_app.app.App")

    assert first is not second
    assert first.clock is not second.clock
    assert first.loggers[CONSOLE_LOGGER].formatter is not second.loggers[CONSOLE_LOGGER].formatter


def test_service_names_follow_discovery_order(container: Container) -> None:
    assert container.service_names() == (
        "wired_app.app.App",
        "wired_app.app.AttributedApp",
        "wired_app.deep.nested.leaves.clock.Clock",
        "wired_app.formatting.PlainFormatter",
        CONSOLE_LOGGER,
        FILE_LOGGER,
    )


def test_container_exposes_capability_index_and_descriptors(container: Container) -> None:
    assert container.implementors_of(LOGGER_IFACE) == (CONSOLE_LOGGER, FILE_LOGGER)
    assert container.collection_markers_of("wired_app.app.App") == (
        CapabilityRequest("loggers", LOGGER_IFACE),
    )
    loggers, clock, name = container.describe("wired_app.app.App")
    assert loggers.collection_marker == CapabilityRequest("loggers", LOGGER_IFACE)
    assert clock.declared_type == "wired_app.deep.nested.leaves.clock.Clock"
    assert name.declared_type is BUILTIN
    assert name.default == "app"


def test_registry_is_frozen_after_construction(container: Container) -> None:
    assert container.registry.frozen
    with pytest.raises(InvalidRegistrationError):
        container.registry.register(Port)


def test_container_adopts_open_registry_and_adds_roots() -> None:
    registry = TypeRegistry()
    registry.register(Port)

    container = Container("wired_app.loggers", registry=registry, types=[FileLogger])

    assert container.registry is registry
    assert container.service_names() == (
        identify(Port),
        CONSOLE_LOGGER,
        FILE_LOGGER,
        identify(FileLogger),
    )


def test_membership_and_repr(container: Container) -> None:
    assert "wired_app.app.App" in container
    assert LOGGER_IFACE not in container
    assert repr(container) == "Container(services=6)"

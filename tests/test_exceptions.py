"""Tests for the exception hierarchy."""

import pytest

from servicewire.exceptions import (
    ConfigurationError,
    CycleError,
    DescriptorError,
    DiscoveryError,
    InvalidRegistrationError,
    ServiceNotFoundError,
    ServiceWireError,
    TypeMismatchError,
    UnresolvableParameterError,
)


class Widget:
    pass


@pytest.mark.parametrize(
    "exc",
    [
        DiscoveryError("app", "boom"),
        InvalidRegistrationError("bad"),
        ServiceNotFoundError("app.Service"),
        DescriptorError("app.Service", "broken"),
        UnresolvableParameterError("app.Service", "port"),
        TypeMismatchError("app.Service", Widget),
        CycleError("app.A", ["app.A", "app.B"]),
        ConfigurationError("bad settings"),
    ],
)
def test_every_error_is_a_servicewire_error(exc: Exception) -> None:
    assert isinstance(exc, ServiceWireError)
    assert isinstance(exc, Exception)


class TestMessages:
    def test_discovery_error(self) -> None:
        exc = DiscoveryError("app", "cannot import 'app.x'")

        assert exc.root == "app"
        assert exc.reason == "cannot import 'app.x'"
        assert str(exc) == "Cannot discover services under 'app': cannot import 'app.x'"

    def test_service_not_found_error(self) -> None:
        exc = ServiceNotFoundError("app.Service")

        assert exc.service == "app.Service"
        assert "is not registered" in str(exc)

    def test_descriptor_error(self) -> None:
        exc = DescriptorError("app.Service", "service is not registered")

        assert exc.service == "app.Service"
        assert exc.reason == "service is not registered"
        assert "app.Service" in str(exc)

    def test_unresolvable_parameter_error_names_service_and_parameter(self) -> None:
        exc = UnresolvableParameterError("app.Server", "port")

        assert (exc.service, exc.parameter) == ("app.Server", "port")
        assert str(exc) == "Cannot resolve parameter 'port' of service 'app.Server'"

    def test_type_mismatch_error_names_actual_type(self) -> None:
        exc = TypeMismatchError("app.Service", Widget)

        assert exc.actual is Widget
        assert f"{Widget.__module__}.Widget" in str(exc)

    def test_cycle_error_renders_chain(self) -> None:
        exc = CycleError("app.A", ["app.A", "app.B"])

        assert exc.path == ("app.A", "app.B")
        assert str(exc) == "Circular dependency detected: app.A -> app.B -> app.A"

from servicewire.capabilities import CapabilityIndex
from servicewire.container import Container
from servicewire.descriptors import BUILTIN, ConstructorDescriptor, ConstructorParameter
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
from servicewire.identifiers import ServiceIdentifier, identify
from servicewire.markers import CapabilityRequest, Implementors, collects
from servicewire.registry import Registration, TypeRegistry
from servicewire.resolver import GraphResolver

__all__ = [
    "BUILTIN",
    "CapabilityIndex",
    "CapabilityRequest",
    "ConstructorDescriptor",
    "ConstructorParameter",
    "ConfigurationError",
    "Container",
    "CycleError",
    "DescriptorError",
    "DiscoveryError",
    "GraphResolver",
    "Implementors",
    "InvalidRegistrationError",
    "Registration",
    "ServiceIdentifier",
    "ServiceNotFoundError",
    "ServiceWireError",
    "TypeMismatchError",
    "TypeRegistry",
    "UnresolvableParameterError",
    "collects",
    "identify",
]

"""
service-ioc: Name-keyed service container with lifetimes, cycle detection and deterministic teardown.

Public API exports for the service-ioc package.
"""

# Application exports
from service_ioc.application.container import ServiceContainer

# Domain exports
from service_ioc.domain.enums import ContainerEvent, ContainerState, Lifetime
from service_ioc.domain.exceptions import (
    CircularDependencyError,
    ContainerDisposedError,
    ContainerError,
    DuplicateServiceError,
    RegistrationError,
    ScopeError,
    ServiceConstructionError,
    ServiceNotFoundError,
)
from service_ioc.domain.models import ServiceInfo
from service_ioc.domain.settings import ContainerSettings

__version__ = "0.1.0"

__all__ = [
    # Container
    "ServiceContainer",
    "ContainerSettings",
    "ServiceInfo",
    # Enums
    "Lifetime",
    "ContainerState",
    "ContainerEvent",
    # Exceptions
    "ContainerError",
    "RegistrationError",
    "DuplicateServiceError",
    "ServiceNotFoundError",
    "CircularDependencyError",
    "ServiceConstructionError",
    "ScopeError",
    "ContainerDisposedError",
]

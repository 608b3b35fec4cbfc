"""
Domain layer - Core models and rules of the service container.

This layer contains the lifetimes, errors, records and settings the container is built on.
It has no dependencies on other layers.
"""

from .enums import ContainerEvent, ContainerState, Lifetime
from .exceptions import (
    CircularDependencyError,
    ContainerDisposedError,
    ContainerError,
    DuplicateServiceError,
    RegistrationError,
    ScopeError,
    ServiceConstructionError,
    ServiceNotFoundError,
)
from .interfaces import IContainer, ILifetimeManager, IServiceRegistry
from .models import ResolutionStack, ScopedInstanceCache, ServiceInfo, ServiceRegistration
from .settings import ContainerSettings

# Rebuild Pydantic models to resolve forward references
ServiceRegistration.model_rebuild()

__all__ = [
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
    # Interfaces
    "IContainer",
    "IServiceRegistry",
    "ILifetimeManager",
    # Models
    "ServiceRegistration",
    "ServiceInfo",
    "ScopedInstanceCache",
    "ResolutionStack",
    # Settings
    "ContainerSettings",
]

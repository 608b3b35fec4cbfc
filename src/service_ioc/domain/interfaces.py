from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, List, Optional, Tuple

from service_ioc.domain.enums import Lifetime
from service_ioc.domain.models import ServiceInfo, ServiceRegistration


class IContainer(ABC):
    """Abstract interface for service container operations."""

    @abstractmethod
    def register(
        self,
        name: str,
        factory: Callable[["IContainer"], Any],
        lifetime: Optional[Lifetime] = None,
        dependencies: Optional[Iterable[str]] = None,
    ) -> None:
        """Register a factory under a service name.

        Args:
            name: Unique, non-empty service name.
            factory: Callable receiving the container and returning an instance.
            lifetime: How long instances are reused. Defaults to the configured default.
            dependencies: Optional declared dependency names, for introspection only.
        """

    @abstractmethod
    def resolve(self, name: str) -> Any:
        """Resolve and return the instance registered under ``name``.

        Args:
            name: The service name to resolve.
        """

    @abstractmethod
    def is_registered(self, name: str) -> bool:
        """Return whether ``name`` has a registration."""

    @abstractmethod
    def get_service_info(self, name: str) -> Optional[ServiceInfo]:
        """Return a snapshot of the registration for ``name``, or ``None``."""

    @abstractmethod
    def create_scope(self) -> "IContainer":
        """Create a child container with its own scoped instance cache."""

    @abstractmethod
    def clear_scope(self) -> None:
        """Dispose and forget the scoped instances of this container."""

    @abstractmethod
    def dispose(self) -> None:
        """Dispose owned instances and make the container unusable."""


class IServiceRegistry(ABC):
    """Abstract interface for the name to registration mapping."""

    @abstractmethod
    def add(self, registration: ServiceRegistration) -> None:
        """Insert a registration.

        Raises:
            DuplicateServiceError: If the name is already present.
        """

    @abstractmethod
    def lookup(self, name: str) -> Optional[ServiceRegistration]:
        """Return the registration for ``name`` or ``None``. Never raises."""

    @abstractmethod
    def registrations(self) -> List[ServiceRegistration]:
        """Return all registrations in registration order."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every registration."""


class ILifetimeManager(ABC):
    """Abstract interface for managing instance lifetimes."""

    @abstractmethod
    def get_or_create(
        self,
        registration: ServiceRegistration,
        factory: Callable[[], Any],
    ) -> Any:
        """Get an existing instance or create a new one based on lifetime.

        Args:
            registration: The registration being resolved.
            factory: A callable creating a new instance if needed.
        """

    @abstractmethod
    def drain_scoped(self) -> List[Tuple[str, Any]]:
        """Remove and return the scoped instances managed by this manager."""

    @abstractmethod
    def release_singletons(self, registrations: Iterable[ServiceRegistration]) -> List[Tuple[str, Any]]:
        """Remove and return the cached singleton instances of ``registrations``."""

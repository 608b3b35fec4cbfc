import logging
from contextlib import AbstractContextManager
from typing import Any, Callable, Iterable, List, Tuple

from service_ioc.application.resolution_tracker import ResolutionTracker
from service_ioc.domain import (
    ContainerError,
    ILifetimeManager,
    Lifetime,
    ScopedInstanceCache,
    ServiceConstructionError,
    ServiceRegistration,
)

logger = logging.getLogger(__name__)


class LifetimeManager(ILifetimeManager):
    """Manages instance lifetimes for singleton, scoped, and transient services.

    Singleton instances are cached on their registration record, so every
    scope sharing a registry shares them. Scoped instances are cached in
    this manager's own ``ScopedInstanceCache``.

    Attributes:
        _tracker: Tracker used to detect cycles while a factory runs.
        _lock: Re-entrant lock guarding first-time construction.
        _scoped_cache: Cache for scoped instances of the current scope.
    """

    def __init__(self, tracker: ResolutionTracker, lock: AbstractContextManager) -> None:
        """Initialize the lifetime manager with an empty scoped cache.

        Args:
            tracker: Resolution tracker shared by the container and its scopes.
            lock: Lock shared by the container and its scopes.
        """
        self._tracker = tracker
        self._lock = lock
        self._scoped_cache = ScopedInstanceCache()

    def get_or_create(self, registration: ServiceRegistration, factory: Callable[[], Any]) -> Any:
        """Get existing instance or create new one based on lifetime.

        Args:
            registration: Registration being resolved.
            factory: Function to create new instance if needed.

        Returns:
            Instance according to lifetime rules:
            - Singleton: Returns cached instance or creates and caches new one
            - Scoped: Returns cached instance within scope or creates new one
            - Transient: Always creates new instance

        Raises:
            CircularDependencyError: If construction re-enters a service under construction.
            ServiceConstructionError: If the factory raises.
        """
        name = registration.name
        lifetime = registration.lifetime

        if lifetime == Lifetime.SINGLETON:
            if registration.has_instance:
                return registration.cached_instance
            with self._lock:
                # Another thread may have finished construction while we waited
                if not registration.has_instance:
                    registration.cache_instance(self._construct(name, factory))
                    logger.debug("Constructed singleton service '%s'", name)
                return registration.cached_instance

        if lifetime == Lifetime.SCOPED:
            if self._scoped_cache.contains(name):
                return self._scoped_cache.get(name)
            with self._lock:
                if not self._scoped_cache.contains(name):
                    self._scoped_cache.store(name, self._construct(name, factory))
                    logger.debug("Constructed scoped service '%s'", name)
                return self._scoped_cache.get(name)

        # Lifetime.TRANSIENT
        return self._construct(name, factory)

    def _construct(self, name: str, factory: Callable[[], Any]) -> Any:
        self._tracker.enter(name)
        try:
            return factory()
        except ContainerError:
            raise
        except Exception as e:
            raise ServiceConstructionError(name, e) from e
        finally:
            self._tracker.exit(name)

    def has_scoped_instance(self, name: str) -> bool:
        return self._scoped_cache.contains(name)

    def scoped_instance_count(self) -> int:
        return len(self._scoped_cache)

    def drain_scoped(self) -> List[Tuple[str, Any]]:
        """Remove and return all scoped instances.

        Used when ending a scope (e.g., end of HTTP request).
        """
        with self._lock:
            return self._scoped_cache.drain()

    def release_singletons(self, registrations: Iterable[ServiceRegistration]) -> List[Tuple[str, Any]]:
        """Remove and return the cached singleton instances of ``registrations``."""
        released: List[Tuple[str, Any]] = []
        with self._lock:
            for registration in registrations:
                if registration.has_instance:
                    released.append((registration.name, registration.release_instance()))
        return released

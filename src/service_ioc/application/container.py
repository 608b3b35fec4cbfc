import logging
import threading
import weakref
from contextlib import nullcontext
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError

from service_ioc.application.disposal import DisposalCoordinator
from service_ioc.application.lifetime_manager import LifetimeManager
from service_ioc.application.registry import ServiceRegistry
from service_ioc.application.resolution_tracker import ResolutionTracker
from service_ioc.domain import (
    ContainerDisposedError,
    ContainerEvent,
    ContainerSettings,
    ContainerState,
    IContainer,
    Lifetime,
    RegistrationError,
    ScopeError,
    ServiceInfo,
    ServiceNotFoundError,
    ServiceRegistration,
)

logger = logging.getLogger(__name__)

ServiceFactory = Callable[[IContainer], Any]
Listener = Callable[[Dict[str, Any]], None]


class ServiceContainer(IContainer):
    """Main service container.

    Maps service names to factories and orchestrates registration, resolution
    and teardown. Supports singleton, scoped, and transient lifetimes.
    Factories receive the container and resolve their own dependencies.

    Attributes:
        _settings: Container configuration.
        _registry: Registry mapping service names to registrations.
        _tracker: Component detecting circular dependencies.
        _lock: Re-entrant lock shared with scopes, guarding construction.
        _lifetime_manager: Component managing instance lifetimes.
        _disposal: Component releasing owned instances at teardown.
        _listeners: Event callbacks keyed by event.
        _parent: Container this scope was created from, ``None`` for the root.
        _root: Root container; singleton factories are always given the root.
        _scopes: Live scopes created from this container.
        _state: Lifecycle state.
    """

    def __init__(self, settings: Optional[ContainerSettings] = None) -> None:
        """Initialize the container with an empty registry.

        Args:
            settings: Optional configuration. Defaults to ``ContainerSettings()``.
        """
        self._settings = settings or ContainerSettings()
        self._registry = ServiceRegistry()
        self._tracker = ResolutionTracker()
        self._lock = threading.RLock() if self._settings.thread_safe else nullcontext()
        self._lifetime_manager = LifetimeManager(self._tracker, self._lock)
        self._disposal = DisposalCoordinator(self._settings.dispose_hooks)
        self._listeners: Dict[ContainerEvent, List[Listener]] = {}
        self._parent: Optional["ServiceContainer"] = None
        self._root: "ServiceContainer" = self
        self._scopes: "weakref.WeakSet[ServiceContainer]" = weakref.WeakSet()
        self._state = ContainerState.ACTIVE

    @property
    def settings(self) -> ContainerSettings:
        return self._settings

    @property
    def state(self) -> ContainerState:
        return self._state

    @property
    def is_disposed(self) -> bool:
        return self._state == ContainerState.DISPOSED

    @property
    def is_scope(self) -> bool:
        """Whether this container was created by ``create_scope``."""
        return self._parent is not None

    def _ensure_active(self) -> None:
        if self._state == ContainerState.DISPOSED:
            kind = "Scope" if self.is_scope else "Container"
            raise ContainerDisposedError(f"{kind} has been disposed and can no longer be used")

    def _build_registration(
        self,
        name: str,
        factory: ServiceFactory,
        lifetime: Optional[Lifetime],
        dependencies: Optional[Iterable[str]],
    ) -> ServiceRegistration:
        try:
            return ServiceRegistration(
                name=name,
                factory=factory,
                lifetime=lifetime if lifetime is not None else self._settings.default_lifetime,
                dependencies=list(dependencies) if dependencies is not None else [],
            )
        except ValidationError as e:
            reason = "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors())
            raise RegistrationError(name, reason) from e

    def register(
        self,
        name: str,
        factory: ServiceFactory,
        lifetime: Optional[Lifetime] = None,
        dependencies: Optional[Iterable[str]] = None,
    ) -> None:
        """Register a factory under a service name.

        Args:
            name: Unique, non-empty service name.
            factory: Callable receiving the container and returning an instance.
            lifetime: How long instances are reused. Defaults to ``settings.default_lifetime``.
            dependencies: Optional declared dependency names, reported by ``get_service_info``.

        Raises:
            RegistrationError: If the name, factory or lifetime is invalid.
            DuplicateServiceError: If the name is already registered.
            ScopeError: If called on a scope.
            ContainerDisposedError: If the container has been disposed.

        Example:
            >>> container.register("config", lambda c: Config.from_env(), Lifetime.SINGLETON)
            >>> container.register("db", lambda c: Database(c.resolve("config")), Lifetime.SINGLETON)
        """
        self._ensure_active()
        if self.is_scope:
            raise ScopeError("Services must be registered on the root container, not on a scope")

        registration = self._build_registration(name, factory, lifetime, dependencies)
        with self._lock:
            self._registry.add(registration)

        logger.debug("Registered service '%s' (%s)", registration.name, registration.lifetime)
        self._emit(
            ContainerEvent.SERVICE_REGISTERED,
            {"name": registration.name, "lifetime": registration.lifetime},
        )

    def register_singleton(
        self, name: str, factory: ServiceFactory, dependencies: Optional[Iterable[str]] = None
    ) -> None:
        """Register a service constructed once and shared for the container lifetime."""
        self.register(name, factory, Lifetime.SINGLETON, dependencies)

    def register_scoped(self, name: str, factory: ServiceFactory, dependencies: Optional[Iterable[str]] = None) -> None:
        """Register a service constructed once per scope."""
        self.register(name, factory, Lifetime.SCOPED, dependencies)

    def register_transient(
        self, name: str, factory: ServiceFactory, dependencies: Optional[Iterable[str]] = None
    ) -> None:
        """Register a service constructed on every resolution."""
        self.register(name, factory, Lifetime.TRANSIENT, dependencies)

    def register_many(self, services: Mapping[str, ServiceFactory], lifetime: Optional[Lifetime] = None) -> None:
        """Register multiple services with the same lifetime at once.

        Registration stops at the first failure; earlier entries stay registered.

        Args:
            services: Mapping of service names to factories.
            lifetime: Lifetime applied to every entry.

        Example:
            >>> container.register_many({
            ...     "config": lambda c: Config.from_env(),
            ...     "db": lambda c: Database(c.resolve("config")),
            ... }, Lifetime.SINGLETON)
        """
        for name, factory in services.items():
            self.register(name, factory, lifetime)

    def resolve(self, name: str) -> Any:
        """Resolve and return the instance registered under ``name``.

        Resolving from inside another service's factory records that service
        as depending on ``name``.

        Args:
            name: The service name to resolve.

        Returns:
            The instance, according to the registration's lifetime.

        Raises:
            ServiceNotFoundError: If nothing is registered under ``name``.
            CircularDependencyError: If a circular dependency is detected.
            ServiceConstructionError: If a factory raises.
            ContainerDisposedError: If the container has been disposed.

        Example:
            >>> user_service = container.resolve("user_service")
        """
        self._ensure_active()
        registration = self._registry.lookup(name)
        if registration is None:
            raise ServiceNotFoundError(name)

        parent_name = self._tracker.current()
        if parent_name is not None:
            parent = self._registry.lookup(parent_name)
            if parent is not None:
                parent.record_dependency(name)

        # Singletons outlive any scope, so they are built against the root
        owner = self._root if registration.lifetime == Lifetime.SINGLETON else self
        instance = self._lifetime_manager.get_or_create(
            registration,
            lambda: registration.factory(owner),
        )
        registration.resolution_count += 1
        return instance

    def is_registered(self, name: str) -> bool:
        if self.is_disposed:
            return False
        return self._registry.contains(name)

    def get_registered_services(self) -> List[str]:
        """Return registered service names in registration order."""
        if self.is_disposed:
            return []
        return self._registry.names()

    def get_service_info(self, name: str) -> Optional[ServiceInfo]:
        """Return a snapshot of the registration for ``name``, or ``None`` if unregistered."""
        self._ensure_active()
        registration = self._registry.lookup(name)
        if registration is None:
            return None
        return ServiceInfo.from_registration(registration)

    def copy_registrations(self) -> List[ServiceRegistration]:
        """Return un-instantiated copies of every registration, for inheritance by test containers."""
        self._ensure_active()
        return [registration.fresh_copy() for registration in self._registry.registrations()]

    def add_listener(self, event: Union[ContainerEvent, str], callback: Listener) -> None:
        """Subscribe ``callback`` to a container event.

        Callbacks receive a payload dictionary. Exceptions raised by callbacks
        are logged and do not affect the operation that emitted the event.
        """
        self._ensure_active()
        self._listeners.setdefault(ContainerEvent(event), []).append(callback)

    def remove_listener(self, event: Union[ContainerEvent, str], callback: Listener) -> None:
        self._ensure_active()
        listeners = self._listeners.get(ContainerEvent(event), [])
        if callback in listeners:
            listeners.remove(callback)

    def _emit(self, event: ContainerEvent, payload: Dict[str, Any]) -> None:
        for callback in list(self._listeners.get(event, [])):
            try:
                callback(payload)
            except Exception:
                logger.exception("Listener for event '%s' failed", event)

    def create_scope(self) -> "ServiceContainer":
        """Create a child container for scoped lifetime.

        Scopes share the parent's registrations and singleton instances but
        keep their own cache of scoped instances. Leaving a ``with`` block
        disposes the scope and its scoped instances.

        Returns:
            New container bound to this container's registrations.

        Example:
            >>> with container.create_scope() as scope:
            ...     # Same instance within this scope
            ...     ctx1 = scope.resolve("request_context")
            ...     ctx2 = scope.resolve("request_context")
            ...     assert ctx1 is ctx2
        """
        self._ensure_active()
        scope = ServiceContainer(self._settings)
        scope._registry = self._registry
        scope._tracker = self._tracker
        scope._lock = self._lock
        scope._lifetime_manager = LifetimeManager(self._tracker, self._lock)
        scope._parent = self
        scope._root = self._root
        self._scopes.add(scope)
        return scope

    def clear_scope(self) -> None:
        """Dispose and forget this container's scoped instances.

        Singletons and registrations are untouched. The next resolution of a
        scoped service constructs a new instance.
        """
        self._ensure_active()
        instances = self._lifetime_manager.drain_scoped()
        disposed = self._disposal.dispose_instances(instances)
        logger.debug("Cleared scope, released %d scoped instance(s)", len(instances))
        self._emit(ContainerEvent.SCOPE_CLEARED, {"released": len(instances), "disposed": disposed})

    def dispose(self) -> None:
        """Dispose owned instances and make the container unusable.

        On the root container this disposes live scopes, singleton and scoped
        instances, then clears all registrations. On a scope it disposes only
        the scope's scoped instances. Disposal errors are logged, never raised.
        Calling ``dispose`` again is a no-op.
        """
        if self._state == ContainerState.DISPOSED:
            return

        for scope in list(self._scopes):
            scope.dispose()

        # Scoped instances may depend on singletons, so they go first
        instances = self._lifetime_manager.drain_scoped()
        if not self.is_scope:
            instances.extend(self._lifetime_manager.release_singletons(self._registry.registrations()))
        disposed = self._disposal.dispose_instances(instances)

        if self.is_scope:
            self._parent._scopes.discard(self)
        else:
            with self._lock:
                self._registry.clear()
            self._tracker.clear()

        self._state = ContainerState.DISPOSED
        logger.debug("Disposed %s, released %d instance(s)", "scope" if self.is_scope else "container", len(instances))
        self._emit(ContainerEvent.DISPOSED, {"released": len(instances), "disposed": disposed})
        self._listeners.clear()

    def __enter__(self) -> "ServiceContainer":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        self.dispose()
        return False

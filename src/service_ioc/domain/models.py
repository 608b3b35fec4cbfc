from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from service_ioc.domain.enums import Lifetime
from service_ioc.domain.exceptions import CircularDependencyError

if TYPE_CHECKING:
    from service_ioc.domain.interfaces import IContainer


class ServiceRegistration(BaseModel):
    """Registration record for one named service.

    Holds the factory and lifetime given at registration time, plus the
    singleton instance once it has been constructed.

    Attributes:
        name: Unique service name.
        factory: Callable receiving the container and returning an instance.
        lifetime: How long the instance should be reused.
        dependencies: Dependency names declared at registration time.
        observed_dependencies: Names the factory resolved while constructing.
        cached_instance: Singleton instance, if constructed.
        has_instance: Whether ``cached_instance`` holds a constructed value.
        resolution_count: Number of successful resolutions.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(..., min_length=1, description="Unique name of the service.")
    factory: Callable[["IContainer"], Any] = Field(
        ..., description="Factory receiving the container and returning an instance."
    )
    lifetime: Lifetime = Field(default=Lifetime.TRANSIENT, description="The lifetime of the service.")
    dependencies: List[str] = Field(
        default_factory=list,
        description="Dependency names declared at registration time.",
    )
    observed_dependencies: List[str] = Field(
        default_factory=list,
        description="Dependency names resolved by the factory during construction.",
    )
    cached_instance: Optional[Any] = Field(
        default=None,
        description="Cached instance for Singleton lifetime.",
    )
    has_instance: bool = Field(
        default=False,
        description="Whether a singleton instance has been constructed and cached.",
    )
    resolution_count: int = Field(
        default=0,
        description="Number of times this service has been resolved.",
    )

    def cache_instance(self, instance: Any) -> None:
        """Store the constructed singleton instance."""
        self.cached_instance = instance
        self.has_instance = True

    def release_instance(self) -> Any:
        """Forget the cached instance and return it (``None`` if there was none)."""
        instance = self.cached_instance
        self.cached_instance = None
        self.has_instance = False
        return instance

    def record_dependency(self, name: str) -> None:
        if name not in self.observed_dependencies:
            self.observed_dependencies.append(name)

    def fresh_copy(self) -> "ServiceRegistration":
        """Copy of this registration without its cached instance or counters."""
        return ServiceRegistration(
            name=self.name,
            factory=self.factory,
            lifetime=self.lifetime,
            dependencies=list(self.dependencies),
        )


class ServiceInfo(BaseModel):
    """Read-only snapshot of a registration for diagnostics and tooling.

    Attributes:
        name: The service name.
        lifetime: The registered lifetime.
        dependencies: Declared dependencies followed by observed ones, without duplicates.
        is_instantiated: Whether a singleton instance is currently cached.
        resolution_count: Number of successful resolutions so far.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    lifetime: Lifetime
    dependencies: Tuple[str, ...] = ()
    is_instantiated: bool = False
    resolution_count: int = 0

    @classmethod
    def from_registration(cls, registration: ServiceRegistration) -> "ServiceInfo":
        dependencies = list(registration.dependencies)
        for name in registration.observed_dependencies:
            if name not in dependencies:
                dependencies.append(name)
        return cls(
            name=registration.name,
            lifetime=registration.lifetime,
            dependencies=tuple(dependencies),
            is_instantiated=registration.has_instance,
            resolution_count=registration.resolution_count,
        )


class ScopedInstanceCache(BaseModel):
    """Instances of Scoped services for the current scope.

    Attributes:
        instances: Mapping of service name to its instance in this scope.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    instances: Dict[str, Any] = Field(
        default_factory=dict,
        description="Scoped instances keyed by service name.",
    )

    def contains(self, name: str) -> bool:
        return name in self.instances

    def get(self, name: str) -> Any:
        return self.instances[name]

    def store(self, name: str, instance: Any) -> None:
        self.instances[name] = instance

    def drain(self) -> List[Tuple[str, Any]]:
        """Remove and return every cached instance, in insertion order."""
        entries = list(self.instances.items())
        self.instances.clear()
        return entries

    def __len__(self) -> int:
        return len(self.instances)


class ResolutionStack(BaseModel):
    """Tracks the service names currently under construction on one call path.

    Used for circular dependency detection. A name may appear at most once.

    Attributes:
        stack: Service names being resolved, outermost first.
    """

    stack: List[str] = Field(
        default_factory=list,
        description="Stack of service names currently being resolved.",
    )

    def push(self, name: str) -> None:
        """Add a service name to the resolution stack.

        Args:
            name: The service being resolved.

        Raises:
            CircularDependencyError: If the name is already in the stack.
        """
        if name in self.stack:
            cycle = self.stack[self.stack.index(name) :] + [name]
            raise CircularDependencyError(cycle)
        self.stack.append(name)

    def remove(self, name: str) -> None:
        """Remove the most recent occurrence of ``name``, if present."""
        for index in range(len(self.stack) - 1, -1, -1):
            if self.stack[index] == name:
                del self.stack[index]
                return

    def current(self) -> Optional[str]:
        """Return the innermost name under construction, or ``None``."""
        return self.stack[-1] if self.stack else None

    def clear(self) -> None:
        """Clear the entire resolution stack."""
        self.stack.clear()

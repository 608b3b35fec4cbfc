from enum import Enum


class Lifetime(str, Enum):
    """Defines how long a constructed service instance is reused.

    Attributes:
        SINGLETON: One instance for the whole container lifetime.
        SCOPED: One instance per scope (e.g., per HTTP request).
        TRANSIENT: New instance on each resolution, owned by the caller.
    """

    TRANSIENT = "transient"
    SCOPED = "scoped"
    SINGLETON = "singleton"

    def __str__(self) -> str:
        return self.value


class ContainerState(str, Enum):
    """Lifecycle state of a container."""

    ACTIVE = "active"
    DISPOSED = "disposed"

    def __str__(self) -> str:
        return self.value


class ContainerEvent(str, Enum):
    """Events a container announces to its listeners.

    Attributes:
        SERVICE_REGISTERED: A service was registered. Payload: name, lifetime.
        SCOPE_CLEARED: Scoped instances were released. Payload: disposed count.
        DISPOSED: The container was disposed. Payload: disposed count.
    """

    SERVICE_REGISTERED = "service.registered"
    SCOPE_CLEARED = "scope.cleared"
    DISPOSED = "container.disposed"

    def __str__(self) -> str:
        return self.value

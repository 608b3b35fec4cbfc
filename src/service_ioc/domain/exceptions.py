from typing import List, Optional


class ContainerError(Exception):
    """Base exception for service container errors."""


class RegistrationError(ContainerError):
    """Raised when a registration is invalid.

    This occurs when:
    - The service name is empty or not a string.
    - The factory is not callable.
    - The lifetime is not a known value.

    Attributes:
        name: The offending service name (as given).
        reason: Why the registration was rejected.
    """

    def __init__(self, name: object, reason: Optional[str] = None) -> None:
        self.name = name
        self.reason = reason
        message = f"Invalid registration for service {name!r}"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class DuplicateServiceError(ContainerError):
    """Raised when a service name is registered twice.

    Attributes:
        name: The name that is already registered.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Service '{name}' is already registered")


class ServiceNotFoundError(ContainerError):
    """Raised when resolving a name that has no registration.

    Attributes:
        name: The requested service name.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Service '{name}' is not registered")


class CircularDependencyError(ContainerError):
    """Raised when a resolution chain re-enters a service under construction.

    Attributes:
        path: Service names from the first occurrence of the repeated name
            through its re-entry, e.g. ``["A", "B", "A"]``.
    """

    def __init__(self, path: List[str]) -> None:
        self.path = list(path)
        super().__init__(f"Circular dependency detected: {' -> '.join(self.path)}")


class ServiceConstructionError(ContainerError):
    """Raised when a service factory fails.

    Attributes:
        name: The service whose factory raised.
        cause: The original exception.
    """

    def __init__(self, name: str, cause: BaseException) -> None:
        self.name = name
        self.cause = cause
        super().__init__(f"Failed to create instance of service '{name}': {cause}")


class ScopeError(ContainerError):
    """Raised for invalid scope operations.

    This occurs when:
    - Registering a service through a scope instead of the root container.
    """


class ContainerDisposedError(ScopeError):
    """Raised when a disposed container or scope is used."""

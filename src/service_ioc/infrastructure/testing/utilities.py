from typing import Any, Callable, Dict, Optional, Tuple

from service_ioc.application import ServiceContainer
from service_ioc.domain import IContainer, Lifetime, ServiceRegistration


class TestContainer(ServiceContainer):
    """Service container for testing with override capabilities.

    Starts from copies of a parent container's registrations and allows
    selective replacement of services. Overrides replace a registration
    outright instead of raising ``DuplicateServiceError``.

    This is useful for:
    - Mocking external services (databases, APIs, etc.)
    - Replacing implementations with test doubles
    - Isolating tests from the singletons of the production container

    Attributes:
        _parent_container: The container registrations were copied from.
        _overrides: Service names overridden in this container.

    Example:
        >>> container = ServiceContainer()
        >>> container.register_singleton("email", lambda c: SmtpEmailService())
        >>> container.register_transient("signup", lambda c: SignupService(c.resolve("email")))
        >>>
        >>> def test_signup_sends_welcome_email():
        ...     with TestContainer(container) as test_container:
        ...         mock_email = MockEmailService()
        ...         test_container.mock_singleton("email", mock_email)
        ...         test_container.resolve("signup").register(user)
        ...         assert mock_email.send_called
    """

    __test__ = False  # Tell pytest not to collect this class as a test

    def __init__(self, parent_container: Optional[ServiceContainer] = None) -> None:
        """Initialize the test container.

        Args:
            parent_container: Optional container whose registrations are copied.
                            If None, starts empty.
        """
        super().__init__(parent_container.settings if parent_container else None)
        self._parent_container = parent_container
        self._overrides: Dict[str, Any] = {}
        self._inherit_registrations()

    def _inherit_registrations(self) -> None:
        if self._parent_container is not None:
            for registration in self._parent_container.copy_registrations():
                self._registry.replace(registration)

    def _override(self, name: str, factory: Callable[[IContainer], Any], lifetime: Lifetime) -> None:
        self._ensure_active()
        registration = self._build_registration(name, factory, lifetime, None)
        previous = self._registry.lookup(name)
        if previous is not None:
            previous.release_instance()
        self._lifetime_manager.drain_scoped()
        self._registry.replace(registration)
        self._overrides[name] = registration

    def mock_singleton(self, name: str, mock_instance: Any) -> None:
        """Replace a service with a fixed mock instance.

        Args:
            name: The service to mock.
            mock_instance: The instance returned for every resolution.

        Example:
            >>> test_container.mock_singleton("db", mock_db)
            >>> assert test_container.resolve("user_service").db is mock_db
        """
        self._override(name, lambda c: mock_instance, Lifetime.SINGLETON)

    def mock_transient(self, name: str, factory: Callable[[], Any]) -> None:
        """Replace a service with a mock factory called on each resolution.

        Args:
            name: The service to mock.
            factory: Zero-argument factory returning a mock instance.
        """
        self._override(name, lambda c: factory(), Lifetime.TRANSIENT)

    def override_registration(self, name: str, factory: Callable[[IContainer], Any], lifetime: Lifetime) -> None:
        """Replace a registration with a custom factory and lifetime.

        Example:
            >>> test_container.override_registration(
            ...     "cache",
            ...     lambda c: InMemoryCache(),  # Instead of Redis
            ...     Lifetime.SINGLETON,
            ... )
        """
        self._override(name, factory, lifetime)

    @property
    def overrides(self) -> Dict[str, ServiceRegistration]:
        return dict(self._overrides)

    def reset_overrides(self) -> None:
        """Remove all overrides and restore the parent's registrations.

        Cached instances are dropped without being disposed.
        """
        self._ensure_active()
        self._overrides.clear()
        self._lifetime_manager.drain_scoped()
        self._lifetime_manager.release_singletons(self._registry.registrations())
        self._registry.clear()
        self._inherit_registrations()


def create_mock_container(*singletons: Tuple[str, Any]) -> TestContainer:
    """Create a test container with pre-configured mock singletons.

    Args:
        *singletons: Tuples of (service name, mock instance).

    Returns:
        TestContainer with the mocks registered.

    Example:
        >>> test_container = create_mock_container(("db", mock_db), ("cache", mock_cache))
    """
    container = TestContainer()

    for name, mock_instance in singletons:
        container.mock_singleton(name, mock_instance)

    return container


class MockScope:
    """Context manager for scoped testing with automatic cleanup.

    Example:
        >>> with MockScope(container) as scope:
        ...     ctx = scope.resolve("request_context")
        ...     assert scope.resolve("request_context") is ctx
        ... # Scoped instances are disposed here
    """

    def __init__(self, parent_container: IContainer) -> None:
        """Initialize the mock scope.

        Args:
            parent_container: The container to create the scope from.
        """
        self._parent_container = parent_container
        self._scope: Optional[IContainer] = None

    def __enter__(self) -> IContainer:
        """Create the scope and return it."""
        self._scope = self._parent_container.create_scope()
        return self._scope

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        """Dispose the scope."""
        if self._scope is not None:
            self._scope.dispose()
            self._scope = None
        return False

"""Application layer - Service registration storage."""

from typing import Dict, List, Optional

from service_ioc.domain import DuplicateServiceError, IServiceRegistry, ServiceRegistration


class ServiceRegistry(IServiceRegistry):
    """Maps service names to their registration records.

    Pure data owner: insertion order is preserved and a name can only be
    added once.

    Attributes:
        _registrations: Dictionary mapping service names to registrations.
    """

    def __init__(self) -> None:
        self._registrations: Dict[str, ServiceRegistration] = {}

    def add(self, registration: ServiceRegistration) -> None:
        """Insert a registration.

        Args:
            registration: The record to insert.

        Raises:
            DuplicateServiceError: If a registration with the same name exists.
        """
        if registration.name in self._registrations:
            raise DuplicateServiceError(registration.name)
        self._registrations[registration.name] = registration

    def replace(self, registration: ServiceRegistration) -> None:
        """Insert or overwrite a registration. Used for test overrides."""
        self._registrations[registration.name] = registration

    def lookup(self, name: str) -> Optional[ServiceRegistration]:
        try:
            return self._registrations.get(name)
        except TypeError:
            # Unhashable names can never be registered.
            return None

    def contains(self, name: str) -> bool:
        return self.lookup(name) is not None

    def names(self) -> List[str]:
        return list(self._registrations)

    def registrations(self) -> List[ServiceRegistration]:
        return list(self._registrations.values())

    def remove(self, name: str) -> Optional[ServiceRegistration]:
        """Remove and return the registration for ``name``, if any."""
        return self._registrations.pop(name, None)

    def clear(self) -> None:
        """Remove every registration along with any cached singleton it holds."""
        for registration in self._registrations.values():
            registration.release_instance()
        self._registrations.clear()

    def __contains__(self, name: object) -> bool:
        return self.contains(name)  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._registrations)

"""Unit tests for domain enums."""

import pytest

from service_ioc.domain.enums import ContainerEvent, ContainerState, Lifetime


class TestLifetimeEnum:
    """Test cases for the Lifetime enum."""

    def test_lifetime_values(self):
        """Test that lifetimes have the expected string values."""
        assert Lifetime.SINGLETON.value == "singleton"
        assert Lifetime.SCOPED.value == "scoped"
        assert Lifetime.TRANSIENT.value == "transient"

    def test_lifetime_from_value(self):
        """Test that lifetime can be created from string value."""
        assert Lifetime("singleton") == Lifetime.SINGLETON
        assert Lifetime("transient") == Lifetime.TRANSIENT
        assert Lifetime("scoped") == Lifetime.SCOPED

    def test_invalid_lifetime_value_raises_error(self):
        """Test that invalid lifetime value raises ValueError."""
        with pytest.raises(ValueError, match="'invalid' is not a valid Lifetime"):
            Lifetime("invalid")

    def test_lifetime_enum_members(self):
        """Test that exactly three lifetimes exist."""
        assert {member.name for member in Lifetime} == {"SINGLETON", "SCOPED", "TRANSIENT"}

    def test_lifetime_string_representation(self):
        """Test that str() returns the plain value."""
        assert str(Lifetime.SINGLETON) == "singleton"
        assert f"{Lifetime.SCOPED}" == "scoped"

    def test_lifetime_is_string_enum(self):
        """Test that lifetimes compare equal to their string values."""
        assert Lifetime.TRANSIENT == "transient"
        assert isinstance(Lifetime.TRANSIENT, str)


class TestContainerStateEnum:
    """Test cases for the ContainerState enum."""

    def test_state_values(self):
        """Test ContainerState values."""
        assert ContainerState.ACTIVE.value == "active"
        assert ContainerState.DISPOSED.value == "disposed"

    def test_state_string_representation(self):
        """Test ContainerState string representation."""
        assert str(ContainerState.DISPOSED) == "disposed"


class TestContainerEventEnum:
    """Test cases for the ContainerEvent enum."""

    def test_event_values(self):
        """Test that events use dotted names."""
        assert ContainerEvent.SERVICE_REGISTERED.value == "service.registered"
        assert ContainerEvent.SCOPE_CLEARED.value == "scope.cleared"
        assert ContainerEvent.DISPOSED.value == "container.disposed"

    def test_event_from_value(self):
        """Test building a ContainerEvent from its value."""
        assert ContainerEvent("service.registered") is ContainerEvent.SERVICE_REGISTERED

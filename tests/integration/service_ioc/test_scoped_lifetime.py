"""Integration tests for scoped lifetime management."""

import pytest

from service_ioc import ServiceConstructionError, ServiceContainer


class RequestId:
    instance_count = 0

    def __init__(self):
        RequestId.instance_count += 1
        self.id = RequestId.instance_count
        self.disposed = False

    def dispose(self):
        self.disposed = True


class RequestLogger:
    def __init__(self, request_id):
        self.request_id = request_id


class RequestHandler:
    def __init__(self, request_id, logger):
        self.request_id = request_id
        self.logger = logger


def make_container():
    RequestId.instance_count = 0
    container = ServiceContainer()
    container.register_scoped("request_id", lambda c: RequestId())
    container.register_transient("request_logger", lambda c: RequestLogger(c.resolve("request_id")))
    container.register_transient(
        "request_handler",
        lambda c: RequestHandler(c.resolve("request_id"), c.resolve("request_logger")),
    )
    return container


class TestScopedLifetimeScenarios:
    """Test realistic scoped lifetime scenarios."""

    def test_request_scoped_context(self):
        """Test scoped services in a request-like context."""
        container = make_container()

        with container.create_scope() as scope1:
            handler1 = scope1.resolve("request_handler")
            logger1 = scope1.resolve("request_logger")

            assert handler1.request_id is logger1.request_id
            assert handler1.logger.request_id is handler1.request_id

        with container.create_scope() as scope2:
            handler2 = scope2.resolve("request_handler")
            logger2 = scope2.resolve("request_logger")

            assert handler2.request_id is not handler1.request_id
            assert handler2.request_id is logger2.request_id

        assert handler1.request_id.disposed
        assert handler2.request_id.disposed
        assert RequestId.instance_count == 2

    def test_scoped_with_singleton_sharing(self):
        """Test that scopes share singletons created by any of them."""
        container = make_container()
        container.register_singleton("config", lambda c: object())

        with container.create_scope() as scope1:
            config1 = scope1.resolve("config")

        with container.create_scope() as scope2:
            config2 = scope2.resolve("config")

        assert config1 is config2
        assert container.resolve("config") is config1

    def test_nested_scopes(self):
        """Test nested scope creation and isolation."""
        container = make_container()

        with container.create_scope() as outer_scope:
            outer = outer_scope.resolve("request_id")

            with outer_scope.create_scope() as inner_scope:
                inner = inner_scope.resolve("request_id")
                assert inner is not outer

            assert inner.disposed
            assert not outer.disposed
            assert outer_scope.resolve("request_id") is outer

        assert outer.disposed

    def test_clear_scope_on_root_acts_as_unit_of_work(self):
        """Test clear_scope on the root as a unit-of-work boundary."""
        container = make_container()

        first = container.resolve("request_handler")
        container.clear_scope()
        second = container.resolve("request_handler")

        assert first.request_id.disposed
        assert second.request_id is not first.request_id
        assert not second.request_id.disposed

    def test_clear_scope_on_scope_keeps_scope_usable(self):
        """Test that clearing a scope keeps it usable for new resolutions."""
        container = make_container()
        scope = container.create_scope()

        first = scope.resolve("request_id")
        scope.clear_scope()
        second = scope.resolve("request_id")

        assert first.disposed
        assert second is not first
        assert not scope.is_disposed

    def test_scoped_cache_failure_is_not_poisoned_before_clear(self):
        """Test that a failed scoped construction is not cached."""
        container = ServiceContainer()
        state = {"fail": True}

        def flaky(c):
            if state["fail"]:
                raise RuntimeError("not ready")
            return object()

        container.register_scoped("context", flaky)
        scope = container.create_scope()

        with pytest.raises(ServiceConstructionError):
            scope.resolve("context")

        state["fail"] = False
        instance = scope.resolve("context")
        assert scope.resolve("context") is instance

from typing import Any, Awaitable, Callable

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from service_ioc.domain import IContainer

SCOPE_STATE_ATTRIBUTE = "service_scope"


def create_fastapi_dependency(container: IContainer, name: str) -> Callable[[], Any]:
    """Create a FastAPI Depends() callable that resolves a service from the container.

    The resolved instance lifetime follows the registration in the container
    (singleton, scoped, or transient). Scoped services resolve against the
    container's own scope; use ``create_scoped_dependency`` for per-request scopes.

    Args:
        container: The container to resolve services from.
        name: The service name to resolve when the dependency is called.

    Returns:
        A callable that FastAPI can use with Depends().

    Example:
        >>> container = ServiceContainer()
        >>> container.register_singleton("user_repository", lambda c: UserRepository(c.resolve("db")))
        >>>
        >>> get_user_repo = create_fastapi_dependency(container, "user_repository")
        >>>
        >>> @app.get("/users")
        >>> async def list_users(repo: UserRepository = Depends(get_user_repo)):
        ...     return await repo.get_all()
    """

    def dependency() -> Any:
        """Resolve the service from the container."""
        return container.resolve(name)

    return dependency


def create_scoped_dependency(name: str) -> Callable[[Request], Any]:
    """Create a FastAPI dependency that resolves from the request's scope.

    Each request gets its own instance of scoped services. Requires the
    ServiceScopeMiddleware to be installed.

    Args:
        name: The service name to resolve from the request scope.

    Returns:
        A callable that resolves from the request-scoped container.

    Example:
        >>> app.add_middleware(ServiceScopeMiddleware, container=container)
        >>>
        >>> get_request_context = create_scoped_dependency("request_context")
        >>>
        >>> @app.get("/process")
        >>> async def process_request(ctx: RequestContext = Depends(get_request_context)):
        ...     return {"request_id": ctx.request_id}
    """

    def scoped_dependency(request: Request) -> Any:
        """Resolve from the request's scope."""
        scope = getattr(request.state, SCOPE_STATE_ATTRIBUTE, None)
        if scope is None:
            raise RuntimeError(
                "Request does not have a service scope. Did you forget to add ServiceScopeMiddleware?"
            )
        return scope.resolve(name)

    return scoped_dependency


class ServiceScopeMiddleware(BaseHTTPMiddleware):
    """Middleware that opens a service scope for each request.

    The scope is available as ``request.state.service_scope`` and is disposed
    once the response has been produced, releasing its scoped instances.

    Attributes:
        container: The root container to create scopes from.

    Example:
        >>> container = ServiceContainer()
        >>> container.register_scoped("unit_of_work", lambda c: UnitOfWork(c.resolve("db")))
        >>>
        >>> app = FastAPI()
        >>> app.add_middleware(ServiceScopeMiddleware, container=container)
    """

    def __init__(self, app: FastAPI, container: IContainer):
        """Initialize the middleware with a root container.

        Args:
            app: The FastAPI/Starlette application.
            container: The container to create scopes from.
        """
        super().__init__(app)
        self.container = container

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        """Open a scope for the request and execute the endpoint.

        Args:
            request: The incoming HTTP request.
            call_next: The next middleware or endpoint handler.

        Returns:
            The response from the endpoint.
        """
        scope = self.container.create_scope()
        setattr(request.state, SCOPE_STATE_ATTRIBUTE, scope)

        try:
            response = await call_next(request)
            return response
        finally:
            # Release scoped instances after the request
            scope.dispose()

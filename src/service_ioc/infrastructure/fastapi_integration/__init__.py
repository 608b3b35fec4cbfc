"""
FastAPI integration module.

Provides helpers for resolving services from FastAPI endpoints with a scope per request.
"""

from .integration import (
    ServiceScopeMiddleware,
    create_fastapi_dependency,
    create_scoped_dependency,
)

__all__ = [
    "create_fastapi_dependency",
    "create_scoped_dependency",
    "ServiceScopeMiddleware",
]

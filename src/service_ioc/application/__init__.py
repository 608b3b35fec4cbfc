"""
Application layer - Use cases and orchestration.

This layer contains the components that register, resolve and dispose services.
It depends only on the Domain layer.
"""

from .container import ServiceContainer
from .disposal import DisposalCoordinator
from .lifetime_manager import LifetimeManager
from .registry import ServiceRegistry
from .resolution_tracker import ResolutionTracker

__all__ = [
    "ServiceContainer",
    "ServiceRegistry",
    "LifetimeManager",
    "ResolutionTracker",
    "DisposalCoordinator",
]

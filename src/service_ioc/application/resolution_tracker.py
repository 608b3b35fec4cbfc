"""Application layer - Circular dependency detection."""

import threading
from typing import List, Optional

from service_ioc.domain import ResolutionStack


class ResolutionTracker:
    """Tracks services under construction and detects resolution cycles.

    Uses thread-local storage so each calling thread has its own resolution
    stack. When a name is entered twice on the same stack, a circular
    dependency is reported.

    Attributes:
        _local: Thread-local storage for resolution stacks.
    """

    def __init__(self) -> None:
        """Initialize the tracker with thread-local storage."""
        self._local = threading.local()

    def _get_stack(self) -> ResolutionStack:
        """Get the current thread's resolution stack.

        Returns:
            The resolution stack for the current thread.
        """
        if not hasattr(self._local, "stack"):
            self._local.stack = ResolutionStack()
        return self._local.stack

    def enter(self, name: str) -> None:
        """Mark a service as under construction.

        Args:
            name: The service about to be constructed.

        Raises:
            CircularDependencyError: If the service is already under construction.

        Example:
            >>> tracker = ResolutionTracker()
            >>> tracker.enter("a")
            >>> tracker.enter("b")
            >>> tracker.enter("a")  # Raises CircularDependencyError (a -> b -> a)
        """
        self._get_stack().push(name)

    def exit(self, name: str) -> None:
        """Mark a service as no longer under construction.

        Called on every exit path of a construction, including failures.
        """
        self._get_stack().remove(name)

    def current(self) -> Optional[str]:
        """Return the innermost service under construction on this thread."""
        return self._get_stack().current()

    def path(self) -> List[str]:
        """Return a copy of this thread's resolution stack, outermost first."""
        return list(self._get_stack().stack)

    def clear(self) -> None:
        """Clear this thread's resolution stack.

        Useful for testing or error recovery.
        """
        if hasattr(self._local, "stack"):
            self._local.stack.clear()

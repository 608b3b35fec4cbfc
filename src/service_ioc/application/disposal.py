"""Application layer - Teardown of owned instances."""

import logging
from typing import Any, Callable, Iterable, Optional, Sequence, Set, Tuple

logger = logging.getLogger(__name__)


class DisposalCoordinator:
    """Releases container-owned instances at teardown.

    For each instance, the first callable attribute named in ``hooks`` is
    invoked. Failures are logged and swallowed so one instance cannot stop
    the others from being released. No ordering is guaranteed beyond the
    order of the input.

    Attributes:
        _hooks: Method names looked up on each instance, in priority order.
    """

    def __init__(self, hooks: Sequence[str] = ("dispose", "close")) -> None:
        self._hooks = tuple(hooks)

    def find_hook(self, instance: Any) -> Optional[Callable[[], Any]]:
        """Return the release hook of ``instance``, or ``None`` if it has none."""
        for hook_name in self._hooks:
            hook = getattr(instance, hook_name, None)
            if callable(hook):
                return hook
        return None

    def dispose_instances(self, instances: Iterable[Tuple[str, Any]]) -> int:
        """Invoke the release hook of every instance.

        Instances shared under several names are released once.

        Args:
            instances: Pairs of (service name, instance).

        Returns:
            Number of instances whose hook completed without raising.
        """
        seen: Set[int] = set()
        disposed = 0
        for name, instance in instances:
            if instance is None or id(instance) in seen:
                continue
            seen.add(id(instance))

            hook = self.find_hook(instance)
            if hook is None:
                continue
            try:
                hook()
            except Exception:
                logger.exception("Failed to dispose service '%s'", name)
                continue
            disposed += 1
            logger.debug("Disposed service '%s'", name)
        return disposed

"""Application layer - Resolution stack and circular dependency detection."""

import threading
from typing import List

from injecta.domain import CircularDependencyError


class CircularDependencyDetector:
    """Tracks the names an injector is currently resolving.

    Uses thread-local storage to hold the resolution stack. When a name is
    pushed while already on the stack, a circular dependency is detected.

    Attributes:
        _local: Thread-local storage for resolution stacks.
    """

    def __init__(self) -> None:
        """Initialize the detector with thread-local storage."""
        self._local = threading.local()

    def _get_stack(self) -> List[str]:
        """Get the current thread's resolution stack.

        Returns:
            The resolution stack for the current thread.
        """
        if not hasattr(self._local, "stack"):
            self._local.stack = []
        return self._local.stack

    @property
    def chain(self) -> List[str]:
        """Copy of the names currently being resolved, outermost first."""
        return list(self._get_stack())

    def __contains__(self, name: object) -> bool:
        return name in self._get_stack()

    def push(self, name: str) -> None:
        """Add a name to the resolution stack.

        Args:
            name: The component name being resolved.

        Raises:
            CircularDependencyError: If the name is already being resolved. The
                error carries the whole chain followed by the repeated name, and
                the stack is cleared.

        Example:
            >>> detector = CircularDependencyDetector()
            >>> detector.push("a")
            >>> detector.push("b")
            >>> detector.push("a")  # Raises CircularDependencyError: a -> b -> a
        """
        stack = self._get_stack()

        if name in stack:
            chain = stack + [name]
            stack.clear()
            raise CircularDependencyError(chain)

        stack.append(name)

    def pop(self) -> None:
        """Remove the most recent name after it was resolved."""
        stack = self._get_stack()
        if stack:
            stack.pop()

    def clear(self) -> None:
        """Clear the entire resolution stack.

        Called whenever an error escapes a resolution.
        """
        if hasattr(self._local, "stack"):
            self._local.stack.clear()

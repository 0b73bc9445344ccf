from typing import Any, List, Optional


class InjectorError(Exception):
    """Base exception for injector errors."""


def _format_chain(chain: List[str]) -> str:
    return " -> ".join(chain)


class NoProviderError(InjectorError):
    """Raised when a name has no provider in the injector hierarchy.

    Attributes:
        name: The name that could not be resolved.
        chain: Names being resolved when the lookup failed, ending with ``name``.
    """

    def __init__(self, name: str, chain: Optional[List[str]] = None) -> None:
        self.name = name
        self.chain = list(chain) if chain else [name]
        message = f'No provider for "{name}"!'
        if len(self.chain) > 1:
            message += f" (Resolving: {_format_chain(self.chain)})"
        super().__init__(message)


class CircularDependencyError(InjectorError):
    """Raised when a name is requested again while it is still being resolved.

    Attributes:
        chain: The resolution chain, ending with the repeated name.
    """

    def __init__(self, chain: List[str]) -> None:
        self.chain = list(chain)
        super().__init__(f"Cannot resolve circular dependency! (Resolving: {_format_chain(self.chain)})")


class InvalidCallableError(InjectorError):
    """Raised when a callable was required but something else was given.

    This occurs when:
    - A non-callable is passed to ``invoke`` or ``instantiate``.
    - ``annotate`` cannot attach an injection list to its target.

    Attributes:
        value: The offending value.
        reason: Optional reason for the failure.
    """

    def __init__(self, value: Any, reason: Optional[str] = None) -> None:
        self.value = value
        self.reason = reason
        message = f'Cannot invoke "{value!r}". Expected a function!'
        if reason:
            message += f" Reason: {reason}"
        super().__init__(message)


class UnknownScopeError(InjectorError):
    """Raised when a forced-new name matches no provider visible to the injector.

    Attributes:
        scope: The requested name that matched nothing.
    """

    def __init__(self, scope: str) -> None:
        self.scope = scope
        super().__init__(f'No provider for "{scope}". Cannot use provider from the parent!')


class ModuleDeclarationError(InjectorError):
    """Raised for malformed module declarations.

    This occurs when:
    - A component entry is not a ``(kind, payload)`` pair or a provider record.
    - The declared kind is unknown.
    """

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

ModuleDeclaration = Dict[str, Any]
InjectableRef = Union[Callable[..., Any], Sequence[Any]]


class IInjector(ABC):
    """Abstract interface for name-based injector operations."""

    @abstractmethod
    def get(self, name: str, strict: bool = True) -> Any:
        """Return the component registered under ``name``.

        Args:
            name: The component name, optionally a dotted path into it.
            strict: When False, a missing provider resolves to None instead of raising.
        """

    @abstractmethod
    def invoke(
        self,
        fn: InjectableRef,
        context: Any = None,
        locals: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Call ``fn`` with its dependencies injected and return the result.

        Args:
            fn: A callable or an inline ``[name..., callable]`` list.
            context: Optional object bound as the callable's first argument.
            locals: Names resolved from this mapping before asking the injector.
        """

    @abstractmethod
    def instantiate(self, type_ref: InjectableRef) -> Any:
        """Construct ``type_ref`` with its dependencies injected.

        Args:
            type_ref: A constructor or an inline ``[name..., constructor]`` list.
        """

    @abstractmethod
    def create_child(
        self,
        modules: Sequence[ModuleDeclaration],
        force_new: Optional[List[str]] = None,
    ) -> "IInjector":
        """Create a child injector over ``modules``.

        Args:
            modules: Module declarations loaded into the child.
            force_new: Names re-instantiated in the child instead of shared from this injector.
        """

    @abstractmethod
    def init(self) -> None:
        """Run all module initializers once."""

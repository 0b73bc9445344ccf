from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Annotated, Any, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from injecta.domain.enums import ProviderKind

if TYPE_CHECKING:
    from injecta.domain.interfaces import IInjector


class BaseProvider(BaseModel, ABC):
    """Value object describing how a named component is produced.

    Provider records are created once, when a module is loaded, and never
    mutated afterwards.

    Attributes:
        kind: The provider kind, used as the union discriminator.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: ProviderKind

    @property
    @abstractmethod
    def payload(self) -> Any:
        """The factory, constructor, value or exported name carried by this record."""

    @property
    def scopes(self) -> List[str]:
        """Scope tags declared on the payload. Only factories and types carry them."""
        return []

    @abstractmethod
    def provide(self, injector: "IInjector") -> Any:
        """Produce the instance for this record using ``injector``."""


def _scope_tags(target: Any) -> List[str]:
    return list(getattr(target, "__scope__", None) or [])


class FactoryProvider(BaseProvider):
    """Provider whose instance is the result of invoking ``factory``."""

    kind: Literal[ProviderKind.FACTORY] = ProviderKind.FACTORY
    factory: Any = Field(..., description="Callable invoked with injected dependencies.")

    @property
    def payload(self) -> Any:
        return self.factory

    @property
    def scopes(self) -> List[str]:
        return _scope_tags(self.factory)

    def provide(self, injector: "IInjector") -> Any:
        return injector.invoke(self.factory)


class TypeProvider(BaseProvider):
    """Provider whose instance is constructed from ``constructor``."""

    kind: Literal[ProviderKind.TYPE] = ProviderKind.TYPE
    constructor: Any = Field(..., description="Constructor instantiated with injected dependencies.")

    @property
    def payload(self) -> Any:
        return self.constructor

    @property
    def scopes(self) -> List[str]:
        return _scope_tags(self.constructor)

    def provide(self, injector: "IInjector") -> Any:
        return injector.instantiate(self.constructor)


class ValueProvider(BaseProvider):
    """Provider returning ``value`` unchanged."""

    kind: Literal[ProviderKind.VALUE] = ProviderKind.VALUE
    value: Any = Field(default=None, description="The literal value provided.")

    @property
    def payload(self) -> Any:
        return self.value

    def provide(self, injector: "IInjector") -> Any:
        return self.value


class PrivateProvider(BaseProvider):
    """Provider forwarding to the encapsulated injector of a private module.

    Attributes:
        name: The exported name looked up in the owning injector.
        injector: The private injector that owns the component.
    """

    kind: Literal[ProviderKind.PRIVATE] = ProviderKind.PRIVATE
    name: str = Field(..., description="Exported component name.")
    injector: Any = Field(..., description="Private injector owning the component.")

    @property
    def payload(self) -> Any:
        return self.name

    def provide(self, injector: "IInjector") -> Any:
        return self.injector.get(self.name)


Provider = Annotated[
    Union[FactoryProvider, TypeProvider, ValueProvider, PrivateProvider],
    Field(discriminator="kind"),
]


class InjectorConfig(BaseModel):
    """Settings shared by an injector and, by default, its children.

    Attributes:
        self_name: Reserved name under which every injector resolves to itself.
        path_separator: Separator for navigating into resolved components.
    """

    model_config = ConfigDict(frozen=True)

    self_name: str = Field(default="injector", min_length=1, description="Name the injector is cached under.")
    path_separator: str = Field(default=".", min_length=1, description="Separator for nested lookups.")

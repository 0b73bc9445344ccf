from enum import Enum


class ProviderKind(str, Enum):
    """Defines how a provider produces its instance.

    Attributes:
        FACTORY: Callable invoked with injected dependencies; its result is the instance.
        TYPE: Constructor instantiated with injected dependencies.
        VALUE: Literal value returned as-is.
        PRIVATE: Forwarder onto the encapsulated injector of a private module.
    """

    FACTORY = "factory"
    TYPE = "type"
    VALUE = "value"
    PRIVATE = "private"

    def __str__(self) -> str:
        return self.value

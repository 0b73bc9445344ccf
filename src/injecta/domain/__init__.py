"""
Domain layer - Core models and contracts.

This layer contains the provider records, configuration, errors and the
injector interface. It has no dependencies on other layers.
"""

from .enums import ProviderKind
from .exceptions import (
    CircularDependencyError,
    InjectorError,
    InvalidCallableError,
    ModuleDeclarationError,
    NoProviderError,
    UnknownScopeError,
)
from .interfaces import IInjector, InjectableRef, ModuleDeclaration
from .models import (
    BaseProvider,
    FactoryProvider,
    InjectorConfig,
    PrivateProvider,
    Provider,
    TypeProvider,
    ValueProvider,
)

__all__ = [
    # Enums
    "ProviderKind",
    # Exceptions
    "InjectorError",
    "NoProviderError",
    "CircularDependencyError",
    "InvalidCallableError",
    "UnknownScopeError",
    "ModuleDeclarationError",
    # Interfaces
    "IInjector",
    "InjectableRef",
    "ModuleDeclaration",
    # Models
    "BaseProvider",
    "FactoryProvider",
    "TypeProvider",
    "ValueProvider",
    "PrivateProvider",
    "Provider",
    "InjectorConfig",
]

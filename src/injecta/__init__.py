"""
injecta: Name-based dependency injection with modules, private scopes and child injectors.

Public API exports for the injecta package.
"""

import logging

# Application exports
from injecta.application.annotations import Named, annotate, parse_annotations, scope
from injecta.application.injector import Injector

# Domain exports
from injecta.domain.enums import ProviderKind
from injecta.domain.exceptions import (
    CircularDependencyError,
    InjectorError,
    InvalidCallableError,
    ModuleDeclarationError,
    NoProviderError,
    UnknownScopeError,
)
from injecta.domain.interfaces import IInjector, ModuleDeclaration
from injecta.domain.models import (
    FactoryProvider,
    InjectorConfig,
    PrivateProvider,
    TypeProvider,
    ValueProvider,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Injector
    "Injector",
    "IInjector",
    "InjectorConfig",
    "ModuleDeclaration",
    # Annotations
    "annotate",
    "scope",
    "Named",
    "parse_annotations",
    # Providers
    "ProviderKind",
    "FactoryProvider",
    "TypeProvider",
    "ValueProvider",
    "PrivateProvider",
    # Exceptions
    "InjectorError",
    "NoProviderError",
    "CircularDependencyError",
    "InvalidCallableError",
    "UnknownScopeError",
    "ModuleDeclarationError",
]

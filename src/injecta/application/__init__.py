"""
Application layer - Resolution and composition.

This layer contains the injector, its registry and the module composition
logic. It depends only on the Domain layer.
"""

from .annotations import Named, annotate, parse_annotations, scope
from .circular_detector import CircularDependencyDetector
from .injector import Injector
from .module_loader import ModuleLoader, resolve_dependencies
from .registry import ProviderRegistry
from .scope_manager import build_scoped_module

__all__ = [
    "Injector",
    "ProviderRegistry",
    "ModuleLoader",
    "CircularDependencyDetector",
    "resolve_dependencies",
    "build_scoped_module",
    "annotate",
    "scope",
    "Named",
    "parse_annotations",
]

"""
FastAPI integration module.

Provides helpers for resolving injecta components in FastAPI applications.
"""

from .integration import (
    InjectorScopeMiddleware,
    create_fastapi_dependency,
    create_scoped_dependency,
    inject_dependencies,
)

__all__ = [
    "create_fastapi_dependency",
    "create_scoped_dependency",
    "inject_dependencies",
    "InjectorScopeMiddleware",
]

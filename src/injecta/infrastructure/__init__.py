"""
Infrastructure layer - Framework integrations.

FastAPI request scoping built on child injectors, and injector variants
for overriding providers in tests.
"""

from . import fastapi_integration, testing

__all__ = [
    "fastapi_integration",
    "testing",
]

"""
Testing utilities module.

Provides helpers for testing applications wired with injecta.
"""

from .utilities import MockScope, TestInjector, create_mock_injector

__all__ = [
    "TestInjector",
    "create_mock_injector",
    "MockScope",
]

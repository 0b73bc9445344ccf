"""Application layer - Forced re-instantiation for child injectors."""

import logging
from typing import Dict, List, Optional, Sequence, Set, Tuple

from injecta.application.registry import ProviderRegistry
from injecta.domain import (
    IInjector,
    ModuleDeclaration,
    PrivateProvider,
    ProviderKind,
    UnknownScopeError,
)

logger = logging.getLogger(__name__)

# id(owner) -> (owner, scoped child); the child is None while it is being built
ScopedInjectors = Dict[int, Tuple[IInjector, Optional[IInjector]]]

_TAGGABLE_KINDS = (ProviderKind.FACTORY, ProviderKind.TYPE)


def build_scoped_module(
    registry: ProviderRegistry,
    force_new: Sequence[str],
    scoped: Optional[ScopedInjectors] = None,
) -> ModuleDeclaration:
    """Build the synthetic module that re-homes ``force_new`` providers in a child.

    Every provider visible through ``registry`` is considered:

    - A requested private export is re-exported from a scoped child of its
      owning private injector. Exports backed by the same private injector
      share a single scoped child. Private injectors that export to each
      other are scoped once per call: an owner whose scoped child is still
      being built keeps serving its exports unscoped to that child.
    - Any other requested provider is copied as-is, so the child resolves and
      caches it itself instead of inheriting the parent's instance.
    - Factories and types whose scope tags include a requested name are copied
      as well, even when their own name wasn't requested.

    Args:
        registry: The registry of the injector creating the child.
        force_new: Names (or scope tags) to re-instantiate.
        scoped: Scoped children of private injectors, shared by the nested
            ``create_child`` calls of one request.

    Returns:
        A module declaration of prebuilt provider records.

    Raises:
        UnknownScopeError: If a requested name matched no provider and no scope tag.

    Example:
        >>> module = build_scoped_module(injector_registry, ["session"])
        >>> child = Injector([module], parent=injector)
    """
    requested: List[str] = list(force_new)
    synthetic: ModuleDeclaration = {}
    matched: Set[str] = set()

    scoped_injectors: ScopedInjectors = {} if scoped is None else scoped

    for name, provider in registry.items():
        if name in requested:
            if isinstance(provider, PrivateProvider):
                owner = provider.injector
                cached = scoped_injectors.get(id(owner))
                if cached is None:
                    scoped_injectors[id(owner)] = (owner, None)
                    cached = (owner, owner.create_child([], requested, _scoped=scoped_injectors))
                    scoped_injectors[id(owner)] = cached
                if cached[1] is not None:
                    synthetic[name] = PrivateProvider(name=name, injector=cached[1])
            else:
                synthetic[name] = provider
            matched.add(name)

        if provider.kind in _TAGGABLE_KINDS:
            tags = provider.scopes
            for scope in requested:
                if scope in tags:
                    synthetic[name] = provider
                    matched.add(scope)

    for scope in requested:
        if scope not in matched:
            raise UnknownScopeError(scope)

    logger.debug("Re-instantiating %s in child injector", list(synthetic))
    return synthetic

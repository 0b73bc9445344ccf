"""Application layer - Hierarchical provider registry."""

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from injecta.domain import BaseProvider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Maps component names to provider records, falling back to a parent registry.

    Entries are inherited by lookup, never copied: a child registry only
    stores what was registered on it directly.

    Attributes:
        _providers: Providers registered on this registry.
        _parent: Registry consulted for names not registered here.
    """

    def __init__(self, parent: Optional["ProviderRegistry"] = None) -> None:
        self._providers: Dict[str, BaseProvider] = {}
        self._parent = parent

    @property
    def parent(self) -> Optional["ProviderRegistry"]:
        return self._parent

    def register(self, name: str, provider: BaseProvider) -> None:
        """Register ``provider`` under ``name``, replacing any own entry."""
        if name in self._providers:
            logger.debug("Overriding provider %r (%s -> %s)", name, self._providers[name].kind, provider.kind)
        self._providers[name] = provider

    def unregister(self, name: str) -> Optional[BaseProvider]:
        """Remove and return the own entry for ``name``, if present."""
        return self._providers.pop(name, None)

    def has_own(self, name: str) -> bool:
        return name in self._providers

    def get_own(self, name: str) -> Optional[BaseProvider]:
        return self._providers.get(name)

    def get(self, name: str) -> Optional[BaseProvider]:
        """Look ``name`` up here, then along the parent chain."""
        registry: Optional[ProviderRegistry] = self
        while registry is not None:
            provider = registry._providers.get(name)
            if provider is not None:
                return provider
            registry = registry._parent
        return None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def own_items(self) -> List[Tuple[str, BaseProvider]]:
        return list(self._providers.items())

    def items(self) -> List[Tuple[str, BaseProvider]]:
        """All visible entries, nearest definition first in precedence.

        Names keep the position of their first registration in the chain,
        starting from this registry.
        """
        visible: Dict[str, BaseProvider] = {}
        registry: Optional[ProviderRegistry] = self
        while registry is not None:
            for name, provider in registry._providers.items():
                visible.setdefault(name, provider)
            registry = registry._parent
        return list(visible.items())

    def __iter__(self) -> Iterator[str]:
        return iter(name for name, _ in self.items())

    def __len__(self) -> int:
        return len(self.items())

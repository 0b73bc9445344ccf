"""Application layer - Module composition and provider registration."""

import logging
from typing import Any, Callable, Iterable, List, Mapping, Sequence, Set

from injecta.application.annotations import annotate
from injecta.application.registry import ProviderRegistry
from injecta.domain import (
    BaseProvider,
    FactoryProvider,
    IInjector,
    ModuleDeclaration,
    ModuleDeclarationError,
    PrivateProvider,
    ProviderKind,
    TypeProvider,
    ValueProvider,
)

logger = logging.getLogger(__name__)

Initializer = Callable[[], None]

DEPENDS_KEY = "__depends__"
INIT_KEY = "__init__"
EXPORTS_KEY = "__exports__"
MODULES_KEY = "__modules__"
RESERVED_KEYS = frozenset({DEPENDS_KEY, INIT_KEY, EXPORTS_KEY, MODULES_KEY})


def _check_declaration(declaration: Any) -> ModuleDeclaration:
    if not isinstance(declaration, Mapping):
        raise ModuleDeclarationError(f"Module declarations must be mappings, got {type(declaration).__name__}")
    return declaration


def _contains(modules: Sequence[ModuleDeclaration], declaration: ModuleDeclaration) -> bool:
    return any(module is declaration for module in modules)


def resolve_dependencies(declarations: Iterable[ModuleDeclaration]) -> List[ModuleDeclaration]:
    """Flatten module declarations into their load order.

    Each declaration's ``__depends__`` list is expanded depth-first before the
    declaration itself is appended. Declarations are compared by identity, so
    a module required along several paths is loaded once, at the position it
    was first required.

    Args:
        declarations: Top-level module declarations.

    Returns:
        Every reachable declaration, dependencies first.

    Raises:
        ModuleDeclarationError: If a declaration is not a mapping or modules depend on each other in a loop.
    """
    ordered: List[ModuleDeclaration] = []
    visiting: Set[int] = set()

    def visit(declaration: ModuleDeclaration) -> None:
        declaration = _check_declaration(declaration)
        if _contains(ordered, declaration):
            return
        if id(declaration) in visiting:
            raise ModuleDeclarationError("Modules depend on each other in a loop")

        visiting.add(id(declaration))
        for dependency in declaration.get(DEPENDS_KEY) or []:
            visit(dependency)
        visiting.discard(id(declaration))

        ordered.append(declaration)

    for declaration in declarations:
        visit(declaration)

    return ordered


def _unwrap(payload: Any) -> Any:
    # inline ["dep", ..., fn] form
    if isinstance(payload, (list, tuple)):
        return annotate(list(payload))
    return payload


def build_provider(name: str, declaration: Any) -> BaseProvider:
    """Turn one component entry of a module declaration into a provider record.

    Args:
        name: The component name, used in error messages.
        declaration: A ``(kind, payload)`` pair or a prebuilt provider record.

    Returns:
        The provider record to register.

    Raises:
        ModuleDeclarationError: If the entry is malformed or its kind is unknown.
    """
    if isinstance(declaration, BaseProvider):
        return declaration

    if not isinstance(declaration, (list, tuple)) or len(declaration) != 2:
        raise ModuleDeclarationError(
            f'Invalid declaration for "{name}": expected a (kind, payload) pair, got {declaration!r}'
        )

    kind, payload = declaration
    try:
        kind = ProviderKind(kind)
    except ValueError as e:
        raise ModuleDeclarationError(f'Unknown provider kind "{kind}" for "{name}"') from e

    if kind == ProviderKind.FACTORY:
        return FactoryProvider(factory=_unwrap(payload))
    if kind == ProviderKind.TYPE:
        return TypeProvider(constructor=_unwrap(payload))
    if kind == ProviderKind.VALUE:
        return ValueProvider(value=payload)

    raise ModuleDeclarationError(f'"{name}": private providers are only created by private modules')


def create_initializer(initializers: Sequence[Any], injector: IInjector) -> Initializer:
    """Bind a list of initializers to ``injector``.

    Strings are eagerly resolved with ``get``; anything else is invoked with
    its dependencies injected.
    """

    def initialize() -> None:
        for initializer in initializers:
            if isinstance(initializer, str):
                injector.get(initializer)
            else:
                injector.invoke(initializer)

    return initialize


class ModuleLoader:
    """Loads module declarations into an injector's registry.

    Attributes:
        _injector: The injector the modules are loaded into.
        _registry: That injector's provider registry.
    """

    def __init__(self, injector: IInjector, registry: ProviderRegistry) -> None:
        self._injector = injector
        self._registry = registry

    def load(self, declaration: ModuleDeclaration) -> Initializer:
        """Register the providers of one module and return its initializer.

        A module with ``__exports__`` is private: its components live in a
        child injector and only the exported names are registered here, as
        forwarders onto that child.
        """
        declaration = _check_declaration(declaration)
        exports = declaration.get(EXPORTS_KEY)
        if exports is not None:
            return self._load_private(declaration, list(exports))
        return self._load_public(declaration)

    def _load_public(self, declaration: ModuleDeclaration) -> Initializer:
        count = 0
        for name, entry in declaration.items():
            if name in RESERVED_KEYS:
                continue
            self._registry.register(name, build_provider(name, entry))
            count += 1

        logger.debug("Loaded module with %d provider(s)", count)
        return create_initializer(list(declaration.get(INIT_KEY) or []), self._injector)

    def _load_private(self, declaration: ModuleDeclaration, exports: List[str]) -> Initializer:
        clone = {name: entry for name, entry in declaration.items() if name not in RESERVED_KEYS}
        child_modules = list(declaration.get(MODULES_KEY) or []) + [clone]

        private_injector = self._injector.create_child(child_modules)

        for name in exports:
            self._registry.register(name, PrivateProvider(name=name, injector=private_injector))

        # the private injector initializes before the module's own initializers
        initializers = [private_injector.init] + list(declaration.get(INIT_KEY) or [])

        logger.debug("Loaded private module exporting %s", exports)
        return create_initializer(initializers, private_injector)

    def bootstrap(self, declarations: Iterable[ModuleDeclaration]) -> Initializer:
        """Load all modules in dependency order and return a run-once initializer.

        The returned callable runs every module initializer in load order the
        first time it is called; later calls do nothing. The latch is a plain
        flag and is not safe against concurrent first calls.
        """
        initializers = [self.load(declaration) for declaration in resolve_dependencies(declarations)]
        initialized = False

        def init() -> None:
            nonlocal initialized
            if initialized:
                return
            initialized = True

            for initializer in initializers:
                initializer()

        return init

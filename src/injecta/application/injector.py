import inspect
import logging
import types
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from injecta.application.annotations import annotate, parse_annotations
from injecta.application.circular_detector import CircularDependencyDetector
from injecta.application.module_loader import ModuleLoader
from injecta.application.registry import ProviderRegistry
from injecta.application.scope_manager import ScopedInjectors, build_scoped_module
from injecta.domain import (
    IInjector,
    InjectableRef,
    InjectorConfig,
    InvalidCallableError,
    ModuleDeclaration,
    NoProviderError,
)

logger = logging.getLogger(__name__)


def _navigate(pivot: Any, part: str) -> Any:
    if isinstance(pivot, Mapping):
        return pivot[part]
    return getattr(pivot, part)


def _takes_receiver(fn: Any) -> bool:
    if not inspect.isfunction(fn):
        return False
    parameters = list(inspect.signature(fn).parameters.values())
    return bool(parameters) and parameters[0].name == "self"


class Injector(IInjector):
    """Name-based dependency injection container.

    Loads module declarations into a provider registry, resolves components
    by name and caches each one the first time it is requested. Names this
    injector has no provider for are delegated to its parent.

    Attributes:
        _parent: Injector consulted for names without an own provider.
        _config: Reserved self name and path separator.
        _registry: Providers registered by this injector's modules.
        _instances: Components resolved by this injector.
        _circular_detector: The resolution stack.

    Example:
        >>> def engine(power):
        ...     return Engine(power)
        >>> injector = Injector([{
        ...     "car": ("type", Car),
        ...     "engine": ("factory", engine),
        ...     "power": ("value", 1184),
        ... }])
        >>> injector.get("car").engine.power
        1184
    """

    def __init__(
        self,
        modules: Sequence[ModuleDeclaration] = (),
        parent: Optional["Injector"] = None,
        config: Optional[InjectorConfig] = None,
    ) -> None:
        """Load ``modules`` and prepare the run-once initializer.

        Args:
            modules: Module declarations; their ``__depends__`` are loaded first.
            parent: Optional parent injector.
            config: Injector settings. Defaults to the parent's, or the defaults for a root.
        """
        self._parent = parent
        if config is None:
            config = parent.config if parent is not None else InjectorConfig()
        self._config = config
        self._registry = ProviderRegistry(parent.registry if parent is not None else None)
        self._instances: Dict[str, Any] = {config.self_name: self}
        self._circular_detector = CircularDependencyDetector()
        self._init = ModuleLoader(self, self._registry).bootstrap(modules)

    @property
    def parent(self) -> Optional["Injector"]:
        return self._parent

    @property
    def config(self) -> InjectorConfig:
        return self._config

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    def get(self, name: str, strict: bool = True) -> Any:
        """Return the component registered under ``name``.

        A name containing the path separator that has no provider of its own
        resolves its first segment and then navigates into the result, so
        ``get("config.db.url")`` equals ``get("config")`` followed by lookups
        of ``db`` and ``url``. The first segment is always resolved strictly.

        Args:
            name: The component name or dotted path.
            strict: When False, a plain name without a provider resolves to None.

        Returns:
            The cached or newly created instance.

        Raises:
            NoProviderError: If no injector in the hierarchy provides ``name`` and ``strict`` is set.
            CircularDependencyError: If ``name`` is requested while it is still being resolved.

        Example:
            >>> car = injector.get("car")
            >>> assert injector.get("car") is car
        """
        separator = self._config.path_separator
        if separator in name and name not in self._registry:
            head, *parts = name.split(separator)
            pivot = self.get(head)
            for part in parts:
                pivot = _navigate(pivot, part)
            return pivot

        if name in self._instances:
            return self._instances[name]

        provider = self._registry.get_own(name)
        if provider is not None:
            self._circular_detector.push(name)
            try:
                instance = provider.provide(self)
            except Exception:
                self._circular_detector.clear()
                raise
            self._instances[name] = instance
            self._circular_detector.pop()
            logger.debug("Created %r (%s)", name, provider.kind)
            return instance

        if self._parent is not None:
            return self._parent.get(name, strict)

        if not strict:
            return None

        chain = self._circular_detector.chain + [name]
        self._circular_detector.clear()
        raise NoProviderError(name, chain)

    def _prepare(
        self,
        fn: InjectableRef,
        context: Any = None,
        locals: Optional[Mapping[str, Any]] = None,
    ) -> Tuple[Callable[..., Any], List[Any]]:
        """Normalise ``fn`` and resolve its dependencies.

        Returns:
            The callable to call and its positional arguments.
        """
        try:
            if not callable(fn):
                if not isinstance(fn, (list, tuple)):
                    raise InvalidCallableError(fn)
                fn = annotate(list(fn))
        except InvalidCallableError:
            self._circular_detector.clear()
            raise

        if context is not None and _takes_receiver(fn):
            fn = types.MethodType(fn, context)

        locals = locals or {}
        dependencies = [locals[dep] if dep in locals else self.get(dep) for dep in parse_annotations(fn)]
        return fn, dependencies

    def instantiate(self, type_ref: InjectableRef) -> Any:
        """Construct ``type_ref`` with its dependencies injected.

        Args:
            type_ref: A class (or other constructor), or ``[name..., constructor]``.

        Returns:
            The new instance. It is not cached.

        Raises:
            InvalidCallableError: If ``type_ref`` is neither callable nor an inline list.
        """
        constructor, dependencies = self._prepare(type_ref)
        return constructor(*dependencies)

    def invoke(
        self,
        fn: InjectableRef,
        context: Any = None,
        locals: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Call ``fn`` with its dependencies injected and return the result.

        Names found in ``locals`` are taken from there instead of the injector.
        With a ``context``, a plain function whose first parameter is ``self``
        is bound to it first, so the context fills ``self`` and the remaining
        parameters are injected. Other callables ignore the context.

        Args:
            fn: A callable or ``[name..., callable]``.
            context: Optional object bound to a leading ``self`` parameter.
            locals: Per-call overrides keyed by dependency name.

        Raises:
            InvalidCallableError: If ``fn`` is neither callable nor an inline list.

        Example:
            >>> injector.invoke(lambda car: car.start())
            >>> injector.invoke(["car", lambda vehicle: vehicle.start()])
            >>> injector.invoke(lambda power: power * 2, locals={"power": 10})
            20
        """
        fn, dependencies = self._prepare(fn, context, locals)
        return fn(*dependencies)

    def create_child(
        self,
        modules: Sequence[ModuleDeclaration] = (),
        force_new: Optional[List[str]] = None,
        _scoped: Optional[ScopedInjectors] = None,
    ) -> "Injector":
        """Create a child injector.

        The child resolves its own modules first and falls back to this
        injector for everything else, sharing this injector's instances.
        Names listed in ``force_new`` (and providers tagged with one of those
        scope names) are re-instantiated in the child instead.

        Args:
            modules: Module declarations for the child. The list is not modified.
            force_new: Names or scope tags to re-instantiate in the child.

        Returns:
            The new child injector.

        Raises:
            UnknownScopeError: If a ``force_new`` name matches no provider.

        Example:
            >>> request_injector = injector.create_child([], ["request_context"])
            >>> assert request_injector.get("request_context") is not injector.get("request_context")
        """
        child_modules = list(modules)
        if force_new:
            child_modules.insert(0, build_scoped_module(self._registry, force_new, _scoped))

        logger.debug("Creating child injector with %d module(s), force_new=%s", len(child_modules), force_new)
        return Injector(child_modules, parent=self)

    def init(self) -> None:
        """Run all module initializers, once."""
        self._init()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} providers={len(self._registry.own_items())} instances={len(self._instances)}>"

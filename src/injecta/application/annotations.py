"""Application layer - Injection name extraction and annotation helpers."""

import inspect
import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar, get_type_hints

from injecta.domain import InvalidCallableError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

INJECT_ATTR = "__inject__"
SCOPE_ATTR = "__scope__"

_INJECTABLE_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


class Named:
    """Marker overriding the name a parameter is injected under.

    Example:
        >>> def connect(url: Annotated[str, Named("config.database_url")]):
        ...     return Connection(url)
        >>> parse_annotations(connect)
        ['config.database_url']
    """

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"Named({self.name!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Named) and other.name == self.name

    def __hash__(self) -> int:
        return hash((Named, self.name))


def annotate(*args: Any) -> Any:
    """Attach an explicit injection name list to a callable.

    Accepts either the names followed by the callable, or a single list in the
    same shape. The callable is returned so the helper can wrap definitions
    inline.

    Args:
        *args: ``name..., callable`` or ``[name..., callable]``.

    Returns:
        The callable, carrying the names as ``__inject__``.

    Raises:
        InvalidCallableError: If the last item is not callable or cannot carry the list.

    Example:
        >>> car = annotate("engine", "driver", Car)
        >>> car.__inject__
        ['engine', 'driver']
    """
    if len(args) == 1 and isinstance(args[0], (list, tuple)):
        args = tuple(args[0])

    if not args:
        raise InvalidCallableError(args, "Nothing to annotate.")

    *names, fn = args

    if not callable(fn):
        raise InvalidCallableError(fn)

    for name in names:
        if not isinstance(name, str):
            raise InvalidCallableError(fn, f"Injection names must be strings, got {name!r}.")

    try:
        setattr(fn, INJECT_ATTR, list(names))
    except (AttributeError, TypeError) as e:
        raise InvalidCallableError(fn, f"Cannot attach injection names: {e}") from e

    return fn


def scope(*names: str) -> Callable[[F], F]:
    """Decorator tagging a factory or type with the scopes it belongs to.

    A child injector created with any of these names in its ``force_new`` list
    re-instantiates the tagged provider, even if its own name wasn't requested.

    Example:
        >>> @scope("request")
        ... class RequestContext:
        ...     pass
    """

    def decorator(target: F) -> F:
        try:
            setattr(target, SCOPE_ATTR, list(names))
        except (AttributeError, TypeError) as e:
            raise InvalidCallableError(target, f"Cannot attach scope tags: {e}") from e
        return target

    return decorator


def explicit_injections(fn: Any) -> Optional[List[str]]:
    """Return the explicit injection list carried by ``fn``, if any.

    Classes only honour their own list, so a subclass does not silently reuse
    the constructor signature of its parent.
    """
    if inspect.isclass(fn):
        names = vars(fn).get(INJECT_ATTR)
    else:
        names = getattr(fn, INJECT_ATTR, None)

    if names is None:
        return None
    return list(names)


def _type_hints(fn: Any) -> Dict[str, Any]:
    target = fn.__init__ if inspect.isclass(fn) else fn
    try:
        return get_type_hints(target, include_extras=True)
    except (NameError, TypeError) as exc:
        logger.debug("Cannot evaluate type hints of %r (%s); using raw annotations", fn, exc)
        return {}


def _named_override(annotation: Any) -> Optional[str]:
    for meta in getattr(annotation, "__metadata__", ()):
        if isinstance(meta, Named):
            return meta.name
    return None


def parse_annotations(fn: Any) -> List[str]:
    """Derive the ordered list of dependency names for a callable.

    An explicit ``__inject__`` list wins. Otherwise the callable's signature is
    introspected: positional parameters without defaults become dependency
    names, in declaration order. ``*args``, ``**kwargs`` and keyword-only
    parameters are never injected. A parameter annotated with
    ``Annotated[T, Named("other")]`` is injected under ``other``.

    Args:
        fn: The callable (or class) to inspect.

    Returns:
        The dependency names, possibly empty.

    Raises:
        InvalidCallableError: If ``fn`` is not callable.
    """
    if not callable(fn):
        raise InvalidCallableError(fn, "Cannot annotate a non-callable.")

    explicit = explicit_injections(fn)
    if explicit is not None:
        return explicit

    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError) as exc:
        logger.debug("No introspectable signature for %r (%s); injecting nothing", fn, exc)
        return []

    hints: Optional[Dict[str, Any]] = None
    names = []
    for param in signature.parameters.values():
        if param.kind not in _INJECTABLE_KINDS:
            continue
        if param.default is not inspect.Parameter.empty:
            continue

        annotation = param.annotation
        if isinstance(annotation, str):
            # postponed evaluation (PEP 563)
            if hints is None:
                hints = _type_hints(fn)
            annotation = hints.get(param.name, annotation)

        names.append(_named_override(annotation) or param.name)

    return names

import functools
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Sequence

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from injecta.domain import IInjector, ModuleDeclaration

logger = logging.getLogger(__name__)

REQUEST_STATE_ATTR = "injector"


def create_fastapi_dependency(injector: IInjector, name: str) -> Callable[[], Any]:
    """Create a FastAPI Depends() callable that resolves ``name`` from ``injector``.

    The resolved component is the injector's singleton for that name.

    Args:
        injector: The injector to resolve from.
        name: The component name (dotted paths allowed).

    Returns:
        A callable that FastAPI can use with Depends().

    Example:
        >>> injector = Injector([{"user_repository": ("type", UserRepository)}])
        >>> get_user_repo = create_fastapi_dependency(injector, "user_repository")
        >>>
        >>> @app.get("/users")
        >>> async def list_users(repo: UserRepository = Depends(get_user_repo)):
        ...     return await repo.get_all()
    """

    def dependency() -> Any:
        """Resolve the component from the injector."""
        return injector.get(name)

    return dependency


def create_scoped_dependency(name: str) -> Callable[[Request], Any]:
    """Create a FastAPI dependency that resolves from the request's injector.

    Requires InjectorScopeMiddleware to be installed.

    Args:
        name: The component name to resolve from the per-request injector.

    Returns:
        A callable that resolves from the request-scoped injector.

    Example:
        >>> app.add_middleware(InjectorScopeMiddleware, injector=injector, force_new=["request"])
        >>>
        >>> get_request_context = create_scoped_dependency("request_context")
        >>>
        >>> @app.get("/process")
        >>> async def process(ctx: RequestContext = Depends(get_request_context)):
        ...     return {"request_id": ctx.request_id}
    """

    def scoped_dependency(request: Request) -> Any:
        """Resolve from the request's injector."""
        scoped_injector: Optional[IInjector] = getattr(request.state, REQUEST_STATE_ATTR, None)
        if scoped_injector is None:
            raise RuntimeError(
                "Request does not have a scoped injector. Did you forget to add InjectorScopeMiddleware?"
            )
        return scoped_injector.get(name)

    return scoped_dependency


class InjectorScopeMiddleware(BaseHTTPMiddleware):
    """Middleware that creates a child injector for each request.

    Components listed in ``force_new``, and components tagged with one of
    those scope names, are re-instantiated per request. Everything else is
    shared with the parent injector.

    The child injector is accessible via ``request.state.injector``.

    Attributes:
        injector: The parent injector to create children from.
        force_new: Names or scope tags re-instantiated per request.
        modules: Extra module declarations loaded into every request injector.

    Example:
        >>> @scope("request")
        ... class RequestContext:
        ...     pass
        >>> injector = Injector([{"request_context": ("type", RequestContext)}])
        >>>
        >>> app = FastAPI()
        >>> app.add_middleware(InjectorScopeMiddleware, injector=injector, force_new=["request"])
    """

    def __init__(
        self,
        app: FastAPI,
        injector: IInjector,
        force_new: Sequence[str] = (),
        modules: Sequence[ModuleDeclaration] = (),
    ):
        """Initialize the middleware with a parent injector.

        Args:
            app: The FastAPI/Starlette application.
            injector: The parent injector.
            force_new: Names or scope tags re-instantiated per request.
            modules: Module declarations loaded into each request injector.
        """
        super().__init__(app)
        self.injector = injector
        self.force_new = list(force_new)
        self.modules = list(modules)

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        """Create the request injector and execute the endpoint.

        Args:
            request: The incoming HTTP request.
            call_next: The next middleware or endpoint handler.

        Returns:
            The response from the endpoint.
        """
        scoped_injector = self.injector.create_child(self.modules, self.force_new or None)
        scoped_injector.init()
        setattr(request.state, REQUEST_STATE_ATTR, scoped_injector)

        logger.debug("Created request injector for %s %s", request.method, request.url.path)
        return await call_next(request)


def inject_dependencies(injector: IInjector, *names: str) -> Callable:
    """Decorator that injects components into a function's keyword arguments.

    The names are matched to the function's parameters in order. Arguments the
    caller passes explicitly, positionally or by keyword, are left alone. Works with sync and async
    functions.

    Args:
        injector: The injector to resolve from.
        *names: Component names, one per leading parameter.

    Returns:
        A decorator function.

    Example:
        >>> @app.get("/users")
        >>> @inject_dependencies(injector, "user_service", "logger")
        >>> async def list_users(user_service, logger):
        ...     logger.info("Listing users")
        ...     return await user_service.get_all()
    """

    def decorator(func: Callable) -> Callable:
        """Wrap the function with injection logic."""
        signature = inspect.signature(func)
        bindings = list(zip(signature.parameters, names))

        # FastAPI must not treat injected parameters as request parameters
        injected = {param_name for param_name, _ in bindings}
        public_signature = signature.replace(
            parameters=[param for param in signature.parameters.values() if param.name not in injected]
        )

        def resolve(args: tuple, kwargs: dict) -> inspect.BoundArguments:
            bound = signature.bind_partial(*args, **kwargs)
            for param_name, name in bindings:
                if param_name not in bound.arguments:
                    bound.arguments[param_name] = injector.get(name)
            return bound

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                bound = resolve(args, kwargs)
                return await func(*bound.args, **bound.kwargs)

            async_wrapper.__signature__ = public_signature
            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            bound = resolve(args, kwargs)
            return func(*bound.args, **bound.kwargs)

        wrapper.__signature__ = public_signature
        return wrapper

    return decorator

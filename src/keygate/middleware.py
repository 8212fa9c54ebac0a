"""Key authentication middleware for Starlette and FastAPI.

Wraps ``KeyAuthPipeline`` in a ``BaseHTTPMiddleware`` so it can be installed
app-wide (``app.add_middleware``), on a mount, or on a single route:

    Route("/items/{api_key}", endpoint, middleware=[
        Middleware(KeyAuthMiddleware, key_lookup="param:api_key", validator=check),
    ])

Route-level installation is the only one that sees path parameters, since
app-wide middleware runs before routing.

Design decisions:
- Use BaseHTTPMiddleware (not pure ASGI) so the pipeline and its handlers
  work with ``Request``/``Response`` objects and ``call_next``.
- Starlette instantiates middleware lazily, on the first request. Use
  ``install_key_auth`` (or pass a pre-resolved ``config``) to surface
  configuration errors when the app is assembled instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from starlette.middleware.base import BaseHTTPMiddleware

from keygate.config import KeyAuthConfig, resolve_config
from keygate.exceptions import ConfigurationError
from keygate.pipeline import KeyAuthPipeline

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from starlette.applications import Starlette
    from starlette.requests import Request
    from starlette.responses import Response


class KeyAuthMiddleware(BaseHTTPMiddleware):
    """Authenticates requests by key before they reach the wrapped app.

    Args:
        app: ASGI application (passed by Starlette).
        config: Pre-resolved configuration. Mutually exclusive with
            ``options``.
        **options: Keyword arguments for ``resolve_config`` (validator,
            key_lookup, auth_scheme, filter, success_handler, error_handler,
            context_key, settings).

    Raises:
        ConfigurationError: If both ``config`` and ``options`` are given, or
            the options do not resolve.
    """

    def __init__(
        self,
        app: Any,
        config: KeyAuthConfig | None = None,
        **options: Any,
    ) -> None:
        super().__init__(app)
        if config is not None and options:
            raise ConfigurationError(
                "Pass either a resolved config or resolve_config options, not both",
                options=", ".join(sorted(options)),
            )
        if config is None:
            config = resolve_config(**options)
        self._pipeline = KeyAuthPipeline(config)

    @property
    def config(self) -> KeyAuthConfig:
        return self._pipeline.config

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        return await self._pipeline(request, call_next)


def install_key_auth(app: Starlette, **options: Any) -> KeyAuthConfig:
    """Resolve key auth options now and register the middleware on ``app``.

    Configuration errors raise immediately, before the app serves anything.
    Each call installs an independent pipeline; combine with ``filter`` to
    guard different paths with different validators.

    Args:
        app: Starlette or FastAPI application.
        **options: Keyword arguments for ``resolve_config``.

    Returns:
        The resolved configuration the middleware will use.
    """
    config = resolve_config(**options)
    app.add_middleware(KeyAuthMiddleware, config=config)
    return config

"""Ready-made request filters.

A filter returning True skips key authentication for that request. Two
pipelines with complementary filters can guard different parts of one app
with different validators.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from starlette.requests import Request

    from keygate.protocols import RequestFilter

# Paths commonly left unauthenticated.
DEFAULT_EXCLUDED_PREFIXES = (
    "/health",
    "/ready",
    "/docs",
    "/openapi.json",
    "/redoc",
)


def exclude_paths(*prefixes: str) -> RequestFilter:
    """Skip authentication for paths starting with any of ``prefixes``.

    Args:
        *prefixes: Path prefixes. Defaults to ``DEFAULT_EXCLUDED_PREFIXES``
            when none are given.
    """
    excluded = prefixes or DEFAULT_EXCLUDED_PREFIXES

    def _filter(request: Request) -> bool:
        path = request.url.path
        return any(path.startswith(prefix) for prefix in excluded)

    return _filter


def only_paths(*paths: str) -> RequestFilter:
    """Authenticate only requests whose path is exactly one of ``paths``."""
    guarded = frozenset(paths)

    def _filter(request: Request) -> bool:
        return request.url.path not in guarded

    return _filter

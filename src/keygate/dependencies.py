"""FastAPI dependency functions for reading the validated key.

When a pipeline is configured with ``context_key``, the key it accepted is
stored on ``request.state`` under that name. These dependencies hand it to
endpoint handlers without re-parsing the request.

Usage:
    from keygate.dependencies import validated_key

    install_key_auth(app, validator=check, context_key="api_key")

    @app.get("/me")
    def me(api_key: Annotated[str, Depends(validated_key("api_key"))]):
        ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import HTTPException, Request

from keygate.exceptions import INVALID_KEY_MESSAGE

if TYPE_CHECKING:
    from collections.abc import Callable


def get_state_key(request: Request, context_key: str) -> str | None:
    """Return the key stored under ``context_key``, or None if absent."""
    return getattr(request.state, context_key, None)


def validated_key(context_key: str) -> Callable[[Request], str]:
    """Factory returning a dependency that yields the validated key.

    Args:
        context_key: The pipeline's configured ``context_key``.

    Returns:
        FastAPI dependency function that raises ``HTTPException(401)`` when
        no validated key is attached to the request (for example when the
        pipeline's filter skipped authentication).
    """

    def _dependency(request: Request) -> str:
        key = get_state_key(request, context_key)
        if not key:
            raise HTTPException(
                status_code=401,
                detail=INVALID_KEY_MESSAGE,
                headers={"WWW-Authenticate": 'APIKey realm="API"'},
            )
        return key

    return _dependency

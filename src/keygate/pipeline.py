"""Per-request key authentication pipeline.

Request flow:
1. Filter configured and true (awaited if async) -> proceed, nothing else runs
2. Extract key -> on failure, error handler (validator is NOT called)
3. Validate key -> exactly once
4. (True, None) -> attach key to request.state (if context_key) -> success handler
5. Anything else -> error handler with the validator's error, or
   KeyRejectedError when the validator supplied none

Exactly one of the success and error handlers runs per request. The
pipeline sets no status code of its own: whatever the handler returns is the
response. Exceptions other than ``KeyAuthError`` propagate unchanged.
"""

from __future__ import annotations

import inspect
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from keygate.exceptions import KeyAuthError, KeyRejectedError
from keygate.logging import get_logger

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

    from keygate.config import KeyAuthConfig
    from keygate.protocols import CallNext



class AuthOutcome(StrEnum):
    """Terminal state of one pass through the pipeline."""

    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _as_key_auth_error(error: BaseException | None) -> KeyAuthError:
    """Normalize a validator-supplied error for the error handler.

    None becomes a bare ``KeyRejectedError``; foreign exception types are
    wrapped in one, keeping the original as ``__cause__``.
    """
    if error is None:
        return KeyRejectedError()
    if isinstance(error, KeyAuthError):
        return error
    wrapped = KeyRejectedError(str(error) or None, error_type=type(error).__name__)
    wrapped.__cause__ = error
    return wrapped


class KeyAuthPipeline:
    """Filter -> extract -> validate -> success/error dispatch.

    Holds only the immutable ``KeyAuthConfig``; safe to call concurrently.

    Args:
        config: Resolved configuration (see ``keygate.config.resolve_config``).
    """

    def __init__(self, config: KeyAuthConfig) -> None:
        self._config = config

    @property
    def config(self) -> KeyAuthConfig:
        return self._config

    async def __call__(self, request: Request, call_next: CallNext) -> Response:
        """Authenticate ``request`` and dispatch to the matching handler.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware/handler in the chain.

        Returns:
            Response from the next handler, the success handler, or the
            error handler.
        """
        config = self._config

        if config.filter is not None and await _resolve(config.filter(request)):
            get_logger(__name__).debug(
                "keyauth_skipped",
                outcome=AuthOutcome.SKIPPED.value,
                path=request.url.path,
            )
            return await call_next(request)

        try:
            key = await config.extractor(request)
        except KeyAuthError as exc:
            return await self._fail(request, exc)

        try:
            accepted, error = await _resolve(config.validator(request, key))
        except KeyAuthError as exc:
            return await self._fail(request, exc)

        if accepted is not True or error is not None:
            return await self._fail(request, _as_key_auth_error(error))

        if config.context_key is not None:
            setattr(request.state, config.context_key, key)

        get_logger(__name__).debug(
            "keyauth_succeeded",
            outcome=AuthOutcome.SUCCEEDED.value,
            path=request.url.path,
            source=config.lookup.source.value,
        )
        return await _resolve(config.success_handler(request, call_next))

    async def _fail(self, request: Request, error: KeyAuthError) -> Response:
        get_logger(__name__).info(
            "keyauth_failed",
            outcome=AuthOutcome.FAILED.value,
            error_code=error.error_code,
            path=request.url.path,
            method=request.method,
            source=self._config.lookup.source.value,
        )
        return await _resolve(self._config.error_handler(request, error))

"""Callback contracts for the key authentication pipeline.

Each contract is a narrow protocol with a single ``__call__``, so plain
functions, lambdas and callable objects all satisfy it. Validators and
handlers may be sync or async; the pipeline awaits whatever is awaitable.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Protocol, TypeAlias, runtime_checkable

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

    from keygate.exceptions import KeyAuthError

# (accepted, error). Only (True, None) authenticates the request.
ValidationResult: TypeAlias = "tuple[bool, KeyAuthError | None]"

CallNext: TypeAlias = "Callable[[Request], Awaitable[Response]]"


@runtime_checkable
class KeyValidator(Protocol):
    """Decides whether an extracted key is acceptable.

    The key handed to a validator is always non-empty and, for header
    lookups, already stripped of the auth scheme. A validator may also raise
    a ``KeyAuthError`` subclass instead of returning it.
    """

    def __call__(
        self, request: Request, key: str
    ) -> ValidationResult | Awaitable[ValidationResult]: ...


@runtime_checkable
class SuccessHandler(Protocol):
    """Runs after a key is accepted. The default proceeds to ``call_next``."""

    def __call__(
        self, request: Request, call_next: CallNext
    ) -> Response | Awaitable[Response]: ...


@runtime_checkable
class ErrorHandler(Protocol):
    """Builds the terminal response for a failed extraction or validation."""

    def __call__(self, request: Request, error: KeyAuthError) -> Response | Awaitable[Response]: ...


@runtime_checkable
class RequestFilter(Protocol):
    """Returns True to skip authentication for a request entirely.

    May be a coroutine function; its result is awaited before use.
    """

    def __call__(self, request: Request) -> bool | Awaitable[bool]: ...


@runtime_checkable
class KeyExtractor(Protocol):
    """Reads a candidate key from a request.

    Raises:
        MissingOrMalformedKeyError: If no usable key is present.
    """

    async def __call__(self, request: Request) -> str: ...

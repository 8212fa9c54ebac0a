"""Built-in success and error handlers.

Default status mapping:
    MissingOrMalformedKeyError -> 400 "missing or malformed API Key"
    any other KeyAuthError     -> 401 "invalid or expired API Key"

401 responses carry a WWW-Authenticate challenge. Callers wanting another
mapping (a single 403 for everything, say) supply their own error handler.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from starlette.responses import JSONResponse, PlainTextResponse

from keygate.exceptions import (
    INVALID_KEY_MESSAGE,
    MISSING_OR_MALFORMED_KEY_MESSAGE,
    MissingOrMalformedKeyError,
)

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

    from keygate.exceptions import KeyAuthError
    from keygate.protocols import CallNext

PROBLEM_MEDIA_TYPE = "application/problem+json"

_TITLES = {
    400: "Bad Request",
    401: "Unauthorized",
}


async def proceed(request: Request, call_next: CallNext) -> Response:
    """Default success handler: continue to the next handler unmodified."""
    return await call_next(request)


def _classify(error: KeyAuthError) -> tuple[int, str]:
    if isinstance(error, MissingOrMalformedKeyError):
        return 400, MISSING_OR_MALFORMED_KEY_MESSAGE
    return 401, INVALID_KEY_MESSAGE


@dataclass(frozen=True, slots=True)
class DefaultErrorHandler:
    """Plain-text error responses with the fixed default messages.

    Attributes:
        challenge_scheme: Scheme named in the WWW-Authenticate header of 401
            responses.
    """

    challenge_scheme: str = "APIKey"

    def __call__(self, request: Request, error: KeyAuthError) -> Response:
        status_code, body = _classify(error)
        headers: dict[str, str] = {}
        if status_code == 401:
            headers["WWW-Authenticate"] = f'{self.challenge_scheme} realm="API"'
        return PlainTextResponse(body, status_code=status_code, headers=headers)


@dataclass(frozen=True, slots=True)
class ProblemErrorHandler:
    """RFC 7807 problem+json error responses.

    Uses the same 400/401 split as ``DefaultErrorHandler``. The ``detail``
    field carries the error's own message, so a validator's rejection reason
    reaches the client. The WWW-Authenticate header only ever carries the
    fixed default message.

    Attributes:
        challenge_scheme: Scheme named in the WWW-Authenticate header of 401
            responses.
    """

    challenge_scheme: str = "APIKey"

    def __call__(self, request: Request, error: KeyAuthError) -> Response:
        status_code, summary = _classify(error)
        error_code = error.error_code
        headers: dict[str, str] = {}
        if status_code == 401:
            headers["WWW-Authenticate"] = (
                f'{self.challenge_scheme} realm="API", '
                f'error="{error_code.lower()}", error_description="{summary}"'
            )

        return JSONResponse(
            status_code=status_code,
            content={
                "type": f"/errors/{error_code.lower().replace('_', '-')}",
                "title": _TITLES.get(status_code, "Error"),
                "status": status_code,
                "detail": error.message,
                "error_code": error_code,
                "instance": str(request.url.path),
            },
            media_type=PROBLEM_MEDIA_TYPE,
            headers=headers,
        )

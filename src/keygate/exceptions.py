"""Error taxonomy for key authentication.

Extraction and validation failures are never raised past the pipeline: they
are caught and handed to the configured error handler as values. Only
``ConfigurationError`` escapes, and only at setup time.

Example:
    >>> from keygate.exceptions import KeyRejectedError
    >>> raise KeyRejectedError("key revoked", key_id="abc")
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "INVALID_KEY_MESSAGE",
    "MISSING_OR_MALFORMED_KEY_MESSAGE",
    "ConfigurationError",
    "KeyAuthError",
    "KeyRejectedError",
    "MissingOrMalformedKeyError",
]

# Fixed response bodies used by the default error handler.
MISSING_OR_MALFORMED_KEY_MESSAGE = "missing or malformed API Key"
INVALID_KEY_MESSAGE = "invalid or expired API Key"


class KeyAuthError(Exception):
    """Base class for all key authentication errors.

    Attributes:
        error_code: Machine-readable error code for client handling.
        status_code: HTTP status the default error handler responds with.
        message: Human-readable error description.
        context: Structured debugging information. Never holds the key itself.
    """

    error_code: str = "KEY_AUTH_ERROR"
    status_code: int = 401

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """String representation including context for logging."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class MissingOrMalformedKeyError(KeyAuthError):
    """Raised when the expected field is absent, empty, or has the wrong shape.

    For header lookups "wrong shape" means the value does not start with the
    configured auth scheme followed by a single space and a credential.

    Maps to HTTP 400 Bad Request.
    """

    error_code: str = "MISSING_OR_MALFORMED_KEY"
    status_code: int = 400

    def __init__(
        self,
        message: str = MISSING_OR_MALFORMED_KEY_MESSAGE,
        **context: Any,
    ) -> None:
        super().__init__(message, context)


class KeyRejectedError(KeyAuthError):
    """Raised (or returned) by a validator when a present key is not accepted.

    Maps to HTTP 401 Unauthorized.

    Attributes:
        reason: Optional caller-defined rejection reason.

    Example:
        >>> raise KeyRejectedError("key expired")
        KeyRejectedError: key expired
    """

    error_code: str = "INVALID_KEY"
    status_code: int = 401

    def __init__(
        self,
        reason: str | None = None,
        **context: Any,
    ) -> None:
        self.reason = reason
        super().__init__(reason or INVALID_KEY_MESSAGE, context)


class ConfigurationError(KeyAuthError):
    """Raised once, at setup time, when the key auth configuration is unusable.

    A pipeline whose configuration raised this error never serves a request.
    """

    error_code: str = "CONFIGURATION_ERROR"
    status_code: int = 500

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, context)

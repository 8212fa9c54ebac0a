"""keygate -- key authentication middleware for Starlette and FastAPI.

Extracts an API key from a header, query parameter, form field, path
parameter or cookie, hands it to a caller-supplied validator, and routes the
request to a success or error handler.
"""

from keygate.config import KeyAuthConfig, resolve_config
from keygate.exceptions import (
    INVALID_KEY_MESSAGE,
    MISSING_OR_MALFORMED_KEY_MESSAGE,
    ConfigurationError,
    KeyAuthError,
    KeyRejectedError,
    MissingOrMalformedKeyError,
)
from keygate.extractors import build_extractor
from keygate.filters import exclude_paths, only_paths
from keygate.handlers import DefaultErrorHandler, ProblemErrorHandler, proceed
from keygate.lookup import KeyLookup, KeySource, parse_key_lookup
from keygate.middleware import KeyAuthMiddleware, install_key_auth
from keygate.pipeline import AuthOutcome, KeyAuthPipeline
from keygate.protocols import (
    ErrorHandler,
    KeyExtractor,
    KeyValidator,
    RequestFilter,
    SuccessHandler,
)
from keygate.settings import KeyAuthSettings, get_keyauth_settings

__all__ = [
    "INVALID_KEY_MESSAGE",
    "MISSING_OR_MALFORMED_KEY_MESSAGE",
    "AuthOutcome",
    "ConfigurationError",
    "DefaultErrorHandler",
    "ErrorHandler",
    "KeyAuthConfig",
    "KeyAuthError",
    "KeyAuthMiddleware",
    "KeyAuthPipeline",
    "KeyAuthSettings",
    "KeyExtractor",
    "KeyLookup",
    "KeyRejectedError",
    "KeySource",
    "KeyValidator",
    "MissingOrMalformedKeyError",
    "ProblemErrorHandler",
    "RequestFilter",
    "SuccessHandler",
    "build_extractor",
    "exclude_paths",
    "get_keyauth_settings",
    "install_key_auth",
    "only_paths",
    "parse_key_lookup",
    "proceed",
    "resolve_config",
]

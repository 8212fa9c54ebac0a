"""Configuration resolution for the key authentication pipeline.

``resolve_config`` turns a partially-specified set of options into a fully
defaulted, immutable ``KeyAuthConfig``. Everything that can go wrong with a
configuration goes wrong here, at setup time: a pipeline never discovers a
bad lookup directive or a missing validator while serving a request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from keygate.exceptions import ConfigurationError
from keygate.extractors import build_extractor
from keygate.handlers import DefaultErrorHandler, proceed
from keygate.logging import get_logger
from keygate.lookup import KeyLookup, KeySource, parse_key_lookup
from keygate.settings import get_keyauth_settings

if TYPE_CHECKING:
    from keygate.protocols import (
        ErrorHandler,
        KeyExtractor,
        KeyValidator,
        RequestFilter,
        SuccessHandler,
    )
    from keygate.settings import KeyAuthSettings



@dataclass(frozen=True, slots=True)
class KeyAuthConfig:
    """Fully resolved key authentication configuration.

    Shared read-only by every request served by a pipeline.

    Attributes:
        lookup: Parsed lookup directive.
        auth_scheme: Scheme prefix for header lookups; None for other sources
            or when header values are used raw.
        validator: Caller-supplied key validator.
        extractor: Extractor bound to ``lookup`` and ``auth_scheme``.
        success_handler: Runs when the key is accepted.
        error_handler: Runs when extraction or validation fails.
        filter: Optional predicate that skips authentication when True.
        context_key: Optional request.state attribute for the validated key.
    """

    lookup: KeyLookup
    auth_scheme: str | None
    validator: KeyValidator
    extractor: KeyExtractor
    success_handler: SuccessHandler
    error_handler: ErrorHandler
    filter: RequestFilter | None = None
    context_key: str | None = None


def _require_callable(name: str, value: object) -> None:
    if value is not None and not callable(value):
        raise ConfigurationError(f"Key auth {name} must be callable", option=name)


def resolve_config(
    *,
    validator: KeyValidator | None = None,
    key_lookup: str | None = None,
    auth_scheme: str | None = None,
    filter: RequestFilter | None = None,  # noqa: A002
    success_handler: SuccessHandler | None = None,
    error_handler: ErrorHandler | None = None,
    context_key: str | None = None,
    settings: KeyAuthSettings | None = None,
) -> KeyAuthConfig:
    """Resolve key authentication options into a ``KeyAuthConfig``.

    Options left as None fall back to ``KeyAuthSettings`` (environment), then
    to the built-in defaults: ``header:Authorization``, ``Bearer``, proceed
    on success, 400/401 plain-text responses on error.

    Args:
        validator: Key validator. Required.
        key_lookup: Lookup directive, ``"<source>:<name>"``.
        auth_scheme: Scheme prefix for header lookups. Pass ``""`` to use the
            raw header value as the key.
        filter: Predicate that skips authentication when it returns True.
        success_handler: Replaces the default "proceed" behaviour.
        error_handler: Replaces the default 400/401 responses.
        context_key: request.state attribute that receives the validated key.
        settings: Settings to default from. Defaults to the cached
            environment settings.

    Returns:
        The resolved configuration.

    Raises:
        ConfigurationError: If the validator is missing, a callback is not
            callable, the lookup directive is malformed, or ``context_key``
            is not a valid identifier.
    """
    if validator is None:
        raise ConfigurationError("Key auth requires a validator function")
    _require_callable("validator", validator)
    _require_callable("filter", filter)
    _require_callable("success_handler", success_handler)
    _require_callable("error_handler", error_handler)

    if settings is None:
        settings = get_keyauth_settings()

    lookup = parse_key_lookup(
        key_lookup if key_lookup is not None else settings.key_lookup,
        strict=settings.strict_lookup,
    )

    scheme: str | None = None
    if lookup.source is KeySource.HEADER:
        scheme = auth_scheme if auth_scheme is not None else settings.auth_scheme
        scheme = scheme or None

    if context_key is None:
        context_key = settings.context_key
    if context_key is not None and not context_key.isidentifier():
        raise ConfigurationError(
            "Key auth context_key must be a valid identifier",
            context_key=context_key,
        )

    config = KeyAuthConfig(
        lookup=lookup,
        auth_scheme=scheme,
        validator=validator,
        extractor=build_extractor(lookup, scheme),
        success_handler=success_handler or proceed,
        error_handler=error_handler or DefaultErrorHandler(challenge_scheme=scheme or "APIKey"),
        filter=filter,
        context_key=context_key,
    )

    get_logger(__name__).debug(
        "keyauth_configured",
        lookup=str(lookup),
        auth_scheme=scheme,
        context_key=context_key,
        has_filter=filter is not None,
        custom_success_handler=success_handler is not None,
        custom_error_handler=error_handler is not None,
    )
    return config

"""Lookup directive parsing.

A lookup directive is a compact ``"<source>:<name>"`` string naming where a
key lives in a request, for example ``"header:Authorization"`` or
``"cookie:access_token"``. It is parsed exactly once, at setup time.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from keygate.exceptions import ConfigurationError
from keygate.logging import get_logger


DEFAULT_KEY_LOOKUP = "header:Authorization"


class KeySource(StrEnum):
    """Request location a key is read from."""

    HEADER = "header"
    QUERY = "query"
    FORM = "form"
    PARAM = "param"
    COOKIE = "cookie"


@dataclass(frozen=True, slots=True)
class KeyLookup:
    """Parsed lookup directive.

    Attributes:
        source: Where to read the key from.
        name: Header, query parameter, form field, path parameter or cookie name.
    """

    source: KeySource
    name: str

    def __str__(self) -> str:
        return f"{self.source}:{self.name}"


def parse_key_lookup(directive: str, *, strict: bool = True) -> KeyLookup:
    """Parse a ``"<source>:<name>"`` directive into a ``KeyLookup``.

    The directive is split on its first colon, so names may themselves
    contain colons. The source token is case-sensitive.

    Args:
        directive: Lookup directive string.
        strict: Reject unknown source tokens. When False, an unknown source
            falls back to header extraction and a warning is logged.

    Returns:
        The parsed lookup.

    Raises:
        ConfigurationError: If the directive is empty, has no colon, has an
            empty name, or (in strict mode) names an unknown source.

    Example:
        >>> parse_key_lookup("cookie:access_token")
        KeyLookup(source=<KeySource.COOKIE: 'cookie'>, name='access_token')
    """
    if not directive:
        raise ConfigurationError("Key lookup directive must not be empty")

    source_token, sep, name = directive.partition(":")
    if not sep:
        raise ConfigurationError(
            "Key lookup directive must have the form '<source>:<name>'",
            directive=directive,
        )
    if not name:
        raise ConfigurationError(
            "Key lookup directive is missing a field name",
            directive=directive,
        )

    try:
        source = KeySource(source_token)
    except ValueError:
        if strict:
            raise ConfigurationError(
                f"Unknown key lookup source '{source_token}'",
                directive=directive,
                allowed=", ".join(s.value for s in KeySource),
            ) from None
        get_logger(__name__).warning(
            "keyauth_lookup_source_fallback",
            directive=directive,
            source=source_token,
            fallback=KeySource.HEADER.value,
        )
        source = KeySource.HEADER

    return KeyLookup(source=source, name=name)

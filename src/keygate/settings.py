"""Key authentication configuration settings.

Loaded from environment variables with KEYAUTH_ prefix. These supply the
defaults for every option that can be expressed as plain data; callbacks
(validator, filter, handlers) are always passed in code.

Environment Variables:
    KEYAUTH_KEY_LOOKUP: Lookup directive, "<source>:<name>"
    KEYAUTH_AUTH_SCHEME: Scheme prefix expected in header values
    KEYAUTH_CONTEXT_KEY: request.state attribute receiving the validated key
    KEYAUTH_STRICT_LOOKUP: Reject unknown lookup sources
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from keygate.lookup import DEFAULT_KEY_LOOKUP


class KeyAuthSettings(BaseSettings):
    """Key authentication defaults loaded from environment variables.

    Example:
        >>> settings = KeyAuthSettings()
        >>> settings.key_lookup
        'header:Authorization'
        >>> settings.auth_scheme
        'Bearer'
    """

    model_config = SettingsConfigDict(
        env_prefix="KEYAUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    key_lookup: str = Field(
        default=DEFAULT_KEY_LOOKUP,
        description="Lookup directive of the form '<source>:<name>'",
    )
    auth_scheme: str = Field(
        default="Bearer",
        description="Scheme prefix expected before the key in header lookups",
    )
    context_key: str | None = Field(
        default=None,
        description="request.state attribute that receives the validated key",
    )
    strict_lookup: bool = Field(
        default=True,
        description="Reject unknown lookup sources instead of falling back to header",
    )

    @field_validator("key_lookup")
    @classmethod
    def validate_key_lookup(cls, v: str) -> str:
        source, sep, name = v.partition(":")
        if not source or not sep or not name:
            msg = "KEYAUTH_KEY_LOOKUP must have the form '<source>:<name>'"
            raise ValueError(msg)
        return v

    @field_validator("context_key", mode="before")
    @classmethod
    def empty_context_key_is_none(cls, v: object) -> object:
        if v == "":
            return None
        return v


@lru_cache(maxsize=1)
def get_keyauth_settings() -> KeyAuthSettings:
    """Get singleton KeyAuthSettings instance.

    Clear cache with ``get_keyauth_settings.cache_clear()`` for testing.
    """
    return KeyAuthSettings()

"""Structured logging configuration using structlog.

Key authentication events are emitted through structlog. The processor chain
redacts credential-bearing fields so that a key never reaches log output,
even when a caller binds it by mistake.

Usage:
    # During application startup
    from keygate.logging import configure_logging
    configure_logging()

    # In library code
    from keygate.logging import get_logger
    get_logger(__name__).info("keyauth_failed", error_code="INVALID_KEY", path="/")
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from collections.abc import MutableMapping

Processor = structlog.types.Processor

# Field names whose values are always redacted
SENSITIVE_FIELDS: frozenset[str] = frozenset(
    {
        "key",
        "api_key",
        "apikey",
        "authorization",
        "cookie",
        "token",
        "secret",
        "password",
        "bearer",
        "credential",
    }
)

REDACTED_VALUE: str = "***REDACTED***"


class LoggingSettings(BaseSettings):
    """Logging configuration settings from environment variables.

    Environment Variables:
        LOG_LEVEL: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        ENVIRONMENT: Environment name (development, staging, production, test)

    Example:
        >>> LoggingSettings(environment="production").use_json_logs
        True
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        populate_by_name=True,
    )

    log_level: str = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Minimum log level to output",
    )
    environment: str = Field(
        default="development",
        alias="ENVIRONMENT",
        description="Environment name for format selection",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        """Upper-case the level so ``LOG_LEVEL=debug`` is accepted.

        Args:
            v: Raw level from the environment or constructor.

        Returns:
            Upper-case level name.
        """
        if isinstance(v, str):
            return v.upper()
        return str(v)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Reject names the stdlib logging module does not define.

        Args:
            v: Normalized level name.

        Returns:
            The level name unchanged.

        Raises:
            ValueError: If the level is not a standard logging level.
        """
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v not in valid_levels:
            msg = f"log_level must be one of {valid_levels}"
            raise ValueError(msg)
        return v

    @property
    def use_json_logs(self) -> bool:
        """Whether to render JSON lines instead of console output.

        Returns:
            True in production, False in every other environment.
        """
        return self.environment == "production"

    @property
    def log_level_int(self) -> int:
        """Numeric level for ``structlog.make_filtering_bound_logger``.

        Returns:
            The ``logging`` module constant matching ``log_level``.
        """
        return getattr(logging, self.log_level, logging.INFO)


class SensitiveDataProcessor:
    """Structlog processor to redact credential fields from log context.

    Redacts values for fields matching:
    1. Exact field names in SENSITIVE_FIELDS (case-insensitive)
    2. Field names containing "token", "secret" or "password" as substrings

    Example:
        >>> processor = SensitiveDataProcessor()
        >>> processor(None, "info", {"event": "x", "api_key": "s3cr3t"})["api_key"]
        '***REDACTED***'
    """

    def __call__(
        self,
        logger: Any,
        method_name: str,
        event_dict: MutableMapping[str, Any],
    ) -> MutableMapping[str, Any]:
        """Replace credential values in ``event_dict`` with REDACTED_VALUE.

        Args:
            logger: Wrapped logger (unused).
            method_name: Name of the log method called (unused).
            event_dict: Event context to scrub.

        Returns:
            The same mapping, scrubbed in place.
        """
        for key in list(event_dict.keys()):
            if self._is_sensitive(key):
                event_dict[key] = REDACTED_VALUE
        return event_dict

    def _is_sensitive(self, key: str) -> bool:
        """Check whether a field name marks a credential.

        Args:
            key: Event field name.

        Returns:
            True if the field's value must not be logged.
        """
        key_lower = key.lower()
        if key_lower in SENSITIVE_FIELDS:
            return True
        # Compound names such as access_token or client_secret
        return any(part in key_lower for part in ("token", "secret", "password"))


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached LoggingSettings instance.

    Clear cache with ``get_logging_settings.cache_clear()`` for testing.
    """
    return LoggingSettings()


def configure_logging(settings: LoggingSettings | None = None) -> None:
    """Configure structlog for structured logging.

    Should be called once during application startup.

    Args:
        settings: Optional LoggingSettings instance. If not provided,
            settings are loaded from environment variables.
    """
    if settings is None:
        settings = get_logging_settings()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        SensitiveDataProcessor(),
        structlog.processors.format_exc_info,
    ]

    if settings.use_json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.log_level_int),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.typing.WrappedLogger:
    """Get a structlog logger bound to the given name.

    Every event the logger emits carries a ``logger`` field with ``name``,
    plus any context bound through ``structlog.contextvars``. Binding takes
    the processor chain configured at call time, so keygate modules bind per
    event and always follow the latest ``configure_logging()``.

    Args:
        name: Logger name (typically __name__ from calling module).
            If None, returns unbound logger.

    Returns:
        Structlog logger, bound to ``name`` when one is given.

    Example:
        >>> logger = get_logger("keygate.pipeline")
        >>> logger.info("keyauth_failed", error_code="INVALID_KEY", path="/")
    """
    logger = structlog.get_logger()
    if name is not None:
        logger = logger.bind(logger=name)
    return logger

"""dithost core -- errors, logging, settings, and the registry base.

Architecture::

    errors.py      Structured error hierarchy (DitHostError and subclasses)
    logging.py     structlog configuration + get_logger / LogContext
    settings.py    DitHostSettings (pydantic-settings, DITHOST_* env vars)
    registry.py    Registry[T] keyed plug-in table, frozen after startup
"""

from dithost.core.errors import (
    AlreadyExistsError,
    AppNotRunningError,
    AppRunningError,
    AppStateError,
    ConfigError,
    DitHostError,
    ErrorCategory,
    ErrorContext,
    InvalidInstanceConfigTypeError,
    InvalidProviderIdError,
    NotFoundError,
    ProviderError,
    StoreError,
    TransformError,
    ValidationError,
)
from dithost.core.logging import LogContext, configure_logging, get_logger
from dithost.core.registry import Registry
from dithost.core.settings import DitHostSettings, clear_settings_cache, get_settings

__all__ = [
    "AlreadyExistsError",
    "AppNotRunningError",
    "AppRunningError",
    "AppStateError",
    "ConfigError",
    "DitHostError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidInstanceConfigTypeError",
    "InvalidProviderIdError",
    "NotFoundError",
    "ProviderError",
    "StoreError",
    "TransformError",
    "ValidationError",
    "LogContext",
    "configure_logging",
    "get_logger",
    "Registry",
    "DitHostSettings",
    "clear_settings_cache",
    "get_settings",
]

"""
Structured error types for dithost.

Every failure the lifecycle controller can surface is a typed subclass of
``DitHostError``. Errors carry a category for routing and alerting, an
explicit ``retryable`` flag, an ``ErrorContext`` with the application,
provider and instance-config identifiers involved, and an optional chained
cause.

Manifesto:
    - **Typed Error Hierarchy:** One class per failure the caller must tell apart
    - **Explicit Retry Semantics:** Each error knows if it's retryable; the
      controller itself never retries
    - **Rich Context:** Errors carry app/provider ids for logging
    - **Error Chaining:** Backend exceptions are preserved as ``cause``

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                         DitHostError                            │
        │  (category, retryable, context, cause)                          │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                 │
        │  NotFoundError       AlreadyExistsError    AppStateError        │
        │  (NOT_FOUND)         (CONFLICT)            (STATE)              │
        │                                                 │               │
        │                                     AppRunningError             │
        │                                     AppNotRunningError          │
        │                                                                 │
        │  ConfigError         ValidationError       TransformError       │
        │  (CONFIG)            (VALIDATION, path)    (TRANSFORM)          │
        │       │                                                         │
        │  InvalidProviderIdError                                         │
        │  InvalidInstanceConfigTypeError                                 │
        │                                                                 │
        │  ProviderError       StoreError                                 │
        │  (PROVIDER)          (STORAGE)                                  │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> error = AppRunningError("web")
    >>> error.app_id
    'web'
    >>> error.to_dict()["category"]
    'STATE'

    >>> try:
    ...     raise ConnectionError("connection reset")
    ... except ConnectionError as e:
    ...     error = ProviderError("terminate failed", provider="aws", cause=e)
    >>> error.cause
    ConnectionError('connection reset')

Guardrails:
    ❌ DON'T: Raise bare ``Exception`` from providers or stores
    ✅ DO: Raise the matching subclass, pass the original as ``cause=``

    ❌ DON'T: Catch and retry inside the controller
    ✅ DO: Let provider plug-ins own retry/backoff

Tags:
    error-handling, exception-hierarchy, error-context, dithost

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    # Lookup / state errors
    NOT_FOUND = "NOT_FOUND"        # Missing application record
    CONFLICT = "CONFLICT"          # Duplicate application id
    STATE = "STATE"                # Lifecycle transition not allowed

    # Configuration errors (never retryable)
    CONFIG = "CONFIG"              # Wiring, unknown provider/mapper ids
    VALIDATION = "VALIDATION"      # Schema mismatch
    TRANSFORM = "TRANSFORM"        # Mapper business-rule violation

    # Infrastructure errors
    PROVIDER = "PROVIDER"          # Backend deploy/inspect/destroy failure
    STORAGE = "STORAGE"            # Application store failure

    # Internal errors
    INTERNAL = "INTERNAL"          # Bugs, unexpected state


@dataclass
class ErrorContext:
    """Structured metadata attached to errors for logging.

    Attributes:
        app_id: Application record id
        provider: Provider id or provider name
        instance_config_type: Instance-config mapper id
        path: Location of a schema violation (``services.web.ports.0``)
        metadata: Additional key-value pairs
    """

    app_id: str | None = None
    provider: str | None = None
    instance_config_type: str | None = None
    path: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["app_id", "provider", "instance_config_type", "path"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class DitHostError(Exception):
    """
    Base exception for all dithost errors.

    Subclasses set ``default_category`` and ``default_retryable`` to give
    sensible defaults for their domain.

    Examples:
        >>> error = DitHostError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.retryable
        False

        >>> error = DitHostError("Fetch failed").with_context(app_id="web")
        >>> error.context.app_id
        'web'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> DitHostError:
        """
        Add context to this error (fluent API).

        Usage:
            raise StoreError("write failed").with_context(app_id="web")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# APPLICATION LOOKUP / STATE ERRORS
# =============================================================================


class NotFoundError(DitHostError):
    """Application record does not exist."""

    default_category = ErrorCategory.NOT_FOUND

    def __init__(self, app_id: str, **kwargs: Any):
        super().__init__(f"Application '{app_id}' not found", **kwargs)
        self.app_id = app_id
        self.context.app_id = app_id


class AlreadyExistsError(DitHostError):
    """An application record with this id already exists."""

    default_category = ErrorCategory.CONFLICT

    def __init__(self, app_id: str, **kwargs: Any):
        super().__init__(f"Application '{app_id}' already exists", **kwargs)
        self.app_id = app_id
        self.context.app_id = app_id


class AppStateError(DitHostError):
    """Lifecycle transition not allowed from the application's current state."""

    default_category = ErrorCategory.STATE

    def __init__(self, message: str, app_id: str, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.app_id = app_id
        self.context.app_id = app_id


class AppRunningError(AppStateError):
    """Application already has an attached instance."""

    def __init__(self, app_id: str, **kwargs: Any):
        super().__init__(f"Application '{app_id}' is running", app_id, **kwargs)


class AppNotRunningError(AppStateError):
    """Application has no attached instance."""

    def __init__(self, app_id: str, **kwargs: Any):
        super().__init__(f"Application '{app_id}' is not running", app_id, **kwargs)


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(DitHostError):
    """
    Wiring or configuration error.

    Never retryable - the registry or configuration must be fixed.
    """

    default_category = ErrorCategory.CONFIG
    default_retryable = False


class InvalidProviderIdError(ConfigError):
    """No provider adapter is registered under this id."""

    def __init__(self, provider_id: str, **kwargs: Any):
        super().__init__(f"No provider registered as '{provider_id}'", **kwargs)
        self.provider_id = provider_id
        self.context.provider = provider_id


class InvalidInstanceConfigTypeError(ConfigError):
    """No instance-config mapper is registered under this id."""

    def __init__(self, config_type: str, **kwargs: Any):
        super().__init__(f"No instance config mapper registered as '{config_type}'", **kwargs)
        self.config_type = config_type
        self.context.instance_config_type = config_type


# =============================================================================
# MAPPING ERRORS
# =============================================================================


class ValidationError(DitHostError):
    """
    Raw JSON does not conform to the declared schema.

    ``path`` is the dotted location of the first violation; ``errors`` holds
    every violation as ``{"path", "message", "type"}`` dicts.
    """

    default_category = ErrorCategory.VALIDATION
    default_retryable = False

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.path = path
        self.errors = errors or []
        if path is not None:
            self.context.path = path

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.errors:
            result["errors"] = self.errors
        return result


class TransformError(DitHostError):
    """Validated config violates a mapper business rule."""

    default_category = ErrorCategory.TRANSFORM
    default_retryable = False


# =============================================================================
# INFRASTRUCTURE ERRORS
# =============================================================================


class ProviderError(DitHostError):
    """
    Backend-specific deploy/get_info/destroy failure.

    ``retryable`` is whatever the provider plug-in reports; the controller
    passes it through untouched.
    """

    default_category = ErrorCategory.PROVIDER
    default_retryable = False

    def __init__(self, message: str, *, provider: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.provider = provider
        if provider is not None:
            self.context.provider = provider


class StoreError(DitHostError):
    """Application store read/write failure."""

    default_category = ErrorCategory.STORAGE
    default_retryable = False


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "DitHostError",
    "NotFoundError",
    "AlreadyExistsError",
    "AppStateError",
    "AppRunningError",
    "AppNotRunningError",
    "ConfigError",
    "InvalidProviderIdError",
    "InvalidInstanceConfigTypeError",
    "ValidationError",
    "TransformError",
    "ProviderError",
    "StoreError",
]

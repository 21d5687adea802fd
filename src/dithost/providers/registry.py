"""Provider registry: provider id -> ProviderAdapter.

Example:
    >>> registry = ProviderRegistry()
    >>> registry.register("stub", ConfigurableProvider.direct(StubProvider()))
    >>> registry.freeze()
    >>> registry.require("aws")
    Traceback (most recent call last):
    ...
    dithost.core.errors.InvalidProviderIdError: No provider registered as 'aws'
"""

from __future__ import annotations

from dithost.core.errors import ConfigError, InvalidProviderIdError
from dithost.core.registry import Registry
from dithost.providers.adapter import ProviderAdapter


class ProviderRegistry(Registry[ProviderAdapter]):
    """Provider adapters keyed by ``provider_config.id``."""

    kind = "provider"

    def register(self, key: str, entry: ProviderAdapter) -> None:
        if not isinstance(entry, ProviderAdapter):
            raise ConfigError(
                f"Provider '{key}' must be a ProviderAdapter, got {type(entry).__name__}"
            ).with_context(provider=key)
        super().register(key, entry)

    def _missing(self, key: str) -> InvalidProviderIdError:
        return InvalidProviderIdError(key)


__all__ = ["ProviderRegistry"]

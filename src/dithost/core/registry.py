"""Keyed registry base shared by the provider and instance-config registries.

Manifesto:
    Registries are process-wide configuration: populated once at startup,
    frozen, then handed to the controller explicitly. Lookups dispatch on a
    plain string id, so adding a backend never edits a central enum.

Tags:
    dithost, registry, lookup, dependency-injection

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Generic, TypeVar

from dithost.core.errors import ConfigError, DitHostError
from dithost.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class Registry(Generic[T]):
    """String-keyed table of plug-ins, read-only once frozen.

    Subclasses set ``kind`` (used in log events and messages) and override
    :meth:`_missing` to raise their own lookup error.

    Example:
        >>> registry = Registry({"a": 1})
        >>> registry.register("b", 2)
        >>> registry.freeze().require("b")
        2
    """

    kind: str = "entry"

    def __init__(self, entries: Mapping[str, T] | None = None) -> None:
        self._entries: dict[str, T] = {}
        self._frozen = False
        for key, entry in (entries or {}).items():
            self.register(key, entry)

    def register(self, key: str, entry: T) -> None:
        """Register ``entry`` under ``key``.

        Raises:
            ConfigError: If the registry is frozen or ``key`` is taken.
        """
        if self._frozen:
            raise ConfigError(f"Cannot register {self.kind} '{key}': registry is frozen")
        if key in self._entries:
            raise ConfigError(f"{self.kind.capitalize()} '{key}' is already registered")
        self._entries[key] = entry
        logger.debug("registry_entry_registered", kind=self.kind, key=key)

    def freeze(self) -> Registry[T]:
        """Make the registry read-only. Returns ``self`` for chaining."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, key: str) -> T | None:
        return self._entries.get(key)

    def require(self, key: str) -> T:
        """Look up ``key``, raising the registry's lookup error if absent."""
        try:
            return self._entries[key]
        except KeyError:
            raise self._missing(key) from None

    def ids(self) -> list[str]:
        """Registered keys, sorted."""
        return sorted(self._entries)

    def _missing(self, key: str) -> DitHostError:
        return ConfigError(f"No {self.kind} registered as '{key}'")

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.ids())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({', '.join(self.ids())})"

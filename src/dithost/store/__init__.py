"""Application stores.

Modules:
    protocol - AppStore protocol (compare-and-set on instance info)
    memory   - InMemoryAppStore
    sqlite   - SQLiteAppStore
"""

from dithost.store.memory import InMemoryAppStore
from dithost.store.protocol import AppStore
from dithost.store.sqlite import SQLiteAppStore

__all__ = ["AppStore", "InMemoryAppStore", "SQLiteAppStore"]

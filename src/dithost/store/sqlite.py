"""SQLite application store.

Two tables, configs stored as JSON text:

    .. code-block:: text

        app            id TEXT PK | instance_config JSON | provider_config JSON
        instance_info  app_id TEXT PK → app.id ON DELETE CASCADE
                       | provider_name TEXT | instance_info JSON

An application is running iff it has an ``instance_info`` row, so the
primary key on ``instance_info.app_id`` is what makes
``add_instance_info`` a compare-and-set.

sqlite3 is blocking: every operation runs in a worker thread via
``asyncio.to_thread`` on one shared connection, serialized by a
``threading.Lock``.

Usage::

    store = SQLiteAppStore("data/dithost.db")
    await store.add_app(record)
    full = await store.get_app(record.id)
    store.close()
"""

from __future__ import annotations

import asyncio
import sqlite3
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from dithost.core.errors import (
    AlreadyExistsError,
    AppNotRunningError,
    AppRunningError,
    DitHostError,
    NotFoundError,
    StoreError,
)
from dithost.core.logging import get_logger
from dithost.models.app import (
    ApplicationRecord,
    ApplicationRecordFull,
    InstanceInfo,
    VariableConfig,
)

logger = get_logger(__name__)

T = TypeVar("T")

MEMORY = ":memory:"

SCHEMA = """
CREATE TABLE IF NOT EXISTS app (
    id              TEXT PRIMARY KEY,
    instance_config TEXT NOT NULL,
    provider_config TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS instance_info (
    app_id          TEXT PRIMARY KEY REFERENCES app(id) ON DELETE CASCADE,
    provider_name   TEXT,
    instance_info   TEXT NOT NULL
);
"""

SELECT_FULL = """
SELECT a.id, a.instance_config, a.provider_config, i.provider_name, i.instance_info
FROM app a
LEFT JOIN instance_info i ON i.app_id = a.id
"""


class SQLiteAppStore:
    """Application store on a single SQLite database file (or ``:memory:``)."""

    def __init__(self, path: str | Path = MEMORY) -> None:
        self.path = str(path)
        if self.path != MEMORY:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        try:
            self._conn = sqlite3.connect(self.path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
            self._conn.executescript(SCHEMA)
        except sqlite3.Error as e:
            raise StoreError(f"Cannot open application store at {self.path}: {e}", cause=e) from e
        logger.info("sqlite_store_opened", path=self.path)

    # -- AppStore protocol -------------------------------------------------

    async def add_app(self, record: ApplicationRecord) -> None:
        def op(conn: sqlite3.Connection) -> None:
            if self._exists(conn, record.id):
                raise AlreadyExistsError(record.id)
            conn.execute(
                "INSERT INTO app (id, instance_config, provider_config) VALUES (?, ?, ?)",
                (
                    record.id,
                    record.instance_config.model_dump_json(),
                    record.provider_config.model_dump_json(),
                ),
            )

        await self._run(op)
        logger.debug("store_app_added", app_id=record.id)

    async def get_app(self, app_id: str) -> ApplicationRecordFull | None:
        def op(conn: sqlite3.Connection) -> ApplicationRecordFull | None:
            row = conn.execute(f"{SELECT_FULL} WHERE a.id = ?", (app_id,)).fetchone()
            return self._row_to_full(row) if row is not None else None

        return await self._run(op)

    async def get_all_apps(self) -> list[ApplicationRecordFull]:
        def op(conn: sqlite3.Connection) -> list[ApplicationRecordFull]:
            rows = conn.execute(f"{SELECT_FULL} ORDER BY a.id").fetchall()
            return [self._row_to_full(row) for row in rows]

        return await self._run(op)

    async def update_app(self, app_id: str, record: ApplicationRecord) -> None:
        def op(conn: sqlite3.Connection) -> None:
            cursor = conn.execute(
                "UPDATE app SET instance_config = ?, provider_config = ? WHERE id = ?",
                (
                    record.instance_config.model_dump_json(),
                    record.provider_config.model_dump_json(),
                    app_id,
                ),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(app_id)

        await self._run(op)
        logger.debug("store_app_updated", app_id=app_id)

    async def remove_app(self, app_id: str) -> None:
        def op(conn: sqlite3.Connection) -> None:
            cursor = conn.execute("DELETE FROM app WHERE id = ?", (app_id,))
            if cursor.rowcount == 0:
                raise NotFoundError(app_id)

        await self._run(op)
        logger.debug("store_app_removed", app_id=app_id)

    async def add_instance_info(
        self, app_id: str, info: InstanceInfo, *, provider_name: str | None = None
    ) -> None:
        def op(conn: sqlite3.Connection) -> None:
            if not self._exists(conn, app_id):
                raise NotFoundError(app_id)
            try:
                conn.execute(
                    "INSERT INTO instance_info (app_id, provider_name, instance_info) "
                    "VALUES (?, ?, ?)",
                    (app_id, provider_name, info.model_dump_json()),
                )
            except sqlite3.IntegrityError:
                raise AppRunningError(app_id) from None

        await self._run(op)

    async def remove_instance_info(self, app_id: str) -> None:
        def op(conn: sqlite3.Connection) -> None:
            if not self._exists(conn, app_id):
                raise NotFoundError(app_id)
            cursor = conn.execute("DELETE FROM instance_info WHERE app_id = ?", (app_id,))
            if cursor.rowcount == 0:
                raise AppNotRunningError(app_id)

        await self._run(op)

    # -- lifecycle ---------------------------------------------------------

    def close(self) -> None:
        with self._lock:
            self._conn.close()
        logger.debug("sqlite_store_closed", path=self.path)

    # -- internals ---------------------------------------------------------

    async def _run(self, op: Callable[[sqlite3.Connection], T]) -> T:
        return await asyncio.to_thread(self._run_sync, op)

    def _run_sync(self, op: Callable[[sqlite3.Connection], T]) -> T:
        with self._lock:
            try:
                with self._conn:
                    return op(self._conn)
            except DitHostError:
                raise
            except sqlite3.Error as e:
                logger.error("sqlite_store_failed", path=self.path, error=str(e))
                raise StoreError(f"Application store failure: {e}", cause=e) from e
            except ValueError as e:
                # pydantic rejects a stored JSON column
                logger.error("sqlite_store_corrupt_row", path=self.path, error=str(e))
                raise StoreError(f"Corrupt application record: {e}", cause=e) from e

    @staticmethod
    def _exists(conn: sqlite3.Connection, app_id: str) -> bool:
        return conn.execute("SELECT 1 FROM app WHERE id = ?", (app_id,)).fetchone() is not None

    @staticmethod
    def _row_to_full(row: Any) -> ApplicationRecordFull:
        info = row["instance_info"]
        return ApplicationRecordFull(
            id=row["id"],
            instance_config=VariableConfig.model_validate_json(row["instance_config"]),
            provider_config=VariableConfig.model_validate_json(row["provider_config"]),
            provider_name=row["provider_name"],
            instance_info=InstanceInfo.model_validate_json(info) if info is not None else None,
        )

    def __repr__(self) -> str:
        return f"SQLiteAppStore({self.path!r})"


__all__ = ["SQLiteAppStore"]

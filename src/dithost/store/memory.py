"""In-memory application store."""

from __future__ import annotations

import asyncio

from dithost.core.errors import (
    AlreadyExistsError,
    AppNotRunningError,
    AppRunningError,
    NotFoundError,
)
from dithost.core.logging import get_logger
from dithost.models.app import ApplicationRecord, ApplicationRecordFull, InstanceInfo

logger = get_logger(__name__)


class InMemoryAppStore:
    """Dict-backed store, for tests and single-process use.

    Records are deep-copied on the way in and out, so callers never share
    mutable state with the store.
    """

    def __init__(self) -> None:
        self._apps: dict[str, ApplicationRecordFull] = {}
        self._lock = asyncio.Lock()

    async def add_app(self, record: ApplicationRecord) -> None:
        async with self._lock:
            if record.id in self._apps:
                raise AlreadyExistsError(record.id)
            self._apps[record.id] = ApplicationRecordFull(
                id=record.id,
                instance_config=record.instance_config.model_copy(deep=True),
                provider_config=record.provider_config.model_copy(deep=True),
            )
        logger.debug("store_app_added", app_id=record.id)

    async def get_app(self, app_id: str) -> ApplicationRecordFull | None:
        async with self._lock:
            app = self._apps.get(app_id)
            return app.model_copy(deep=True) if app is not None else None

    async def get_all_apps(self) -> list[ApplicationRecordFull]:
        async with self._lock:
            return [self._apps[key].model_copy(deep=True) for key in sorted(self._apps)]

    async def update_app(self, app_id: str, record: ApplicationRecord) -> None:
        async with self._lock:
            current = self._require(app_id)
            self._apps[app_id] = current.model_copy(
                update={
                    "instance_config": record.instance_config.model_copy(deep=True),
                    "provider_config": record.provider_config.model_copy(deep=True),
                }
            )
        logger.debug("store_app_updated", app_id=app_id)

    async def remove_app(self, app_id: str) -> None:
        async with self._lock:
            self._require(app_id)
            del self._apps[app_id]
        logger.debug("store_app_removed", app_id=app_id)

    async def add_instance_info(
        self, app_id: str, info: InstanceInfo, *, provider_name: str | None = None
    ) -> None:
        async with self._lock:
            current = self._require(app_id)
            if current.instance_info is not None:
                raise AppRunningError(app_id)
            self._apps[app_id] = current.model_copy(
                update={"instance_info": info.model_copy(deep=True), "provider_name": provider_name}
            )

    async def remove_instance_info(self, app_id: str) -> None:
        async with self._lock:
            current = self._require(app_id)
            if current.instance_info is None:
                raise AppNotRunningError(app_id)
            self._apps[app_id] = current.model_copy(
                update={"instance_info": None, "provider_name": None}
            )

    def _require(self, app_id: str) -> ApplicationRecordFull:
        app = self._apps.get(app_id)
        if app is None:
            raise NotFoundError(app_id)
        return app

    def __len__(self) -> int:
        return len(self._apps)


__all__ = ["InMemoryAppStore"]

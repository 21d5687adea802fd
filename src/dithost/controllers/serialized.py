"""Per-application serialization in front of :class:`AppController`.

``AppController`` does no synchronization of its own; the store's
compare-and-set stops two racing ``start_app`` calls from both recording an
instance, but not from both *deploying* one. ``SerializedAppController``
takes one ``asyncio.Lock`` per application id and re-reads the record under
that lock, so each transition sees the state left by the previous one. Locks
live in a ``WeakValueDictionary``: an entry lasts only while some call holds
or waits on it.

Example:
    >>> controller = SerializedAppController(AppController(store, providers, mappers))
    >>> await asyncio.gather(controller.start_app("web"), controller.start_app("web"))
    # one deploy; the second call raises AppRunningError
"""

from __future__ import annotations

import asyncio
import weakref

from dithost.controllers.app_controller import AppController
from dithost.models.app import ApplicationRecord, ApplicationRecordFull, InstanceInfo


class SerializedAppController:
    """Id-keyed facade over an ``AppController`` with one lock per application."""

    def __init__(self, controller: AppController) -> None:
        self.controller = controller
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def _lock(self, app_id: str) -> asyncio.Lock:
        lock = self._locks.get(app_id)
        if lock is None:
            lock = self._locks[app_id] = asyncio.Lock()
        return lock

    async def add_app(self, record: ApplicationRecord) -> None:
        async with self._lock(record.id):
            await self.controller.add_app(record)

    async def get_app(self, app_id: str) -> ApplicationRecordFull:
        return await self.controller.get_app(app_id)

    async def list_apps(self) -> list[ApplicationRecordFull]:
        return await self.controller.list_apps()

    async def update_app(self, app_id: str, record: ApplicationRecord) -> None:
        async with self._lock(app_id):
            await self.controller.update_app(app_id, record)

    async def start_app(self, app_id: str) -> InstanceInfo:
        async with self._lock(app_id):
            record = await self.controller.get_app(app_id)
            return await self.controller.start_app(record)

    async def stop_app(self, app_id: str) -> None:
        async with self._lock(app_id):
            record = await self.controller.get_app(app_id)
            await self.controller.stop_app(record)

    async def remove_app(self, app_id: str, force: bool = False) -> None:
        async with self._lock(app_id):
            await self.controller.remove_app(app_id, force=force)

    async def inspect_app(self, app_id: str) -> InstanceInfo:
        return await self.controller.inspect_app(app_id)


__all__ = ["SerializedAppController"]

"""Application store protocol.

The controller persists application records and their attached instance
info only through this protocol. Implementations must give
compare-and-set semantics on instance info so that two concurrent
``start_app`` calls cannot both attach an instance.

Contract:

    .. code-block:: text

        add_app(record)                 AlreadyExistsError if id taken
        get_app(id)                     -> ApplicationRecordFull | None
        get_all_apps()                  -> list[ApplicationRecordFull]
        update_app(id, record)          NotFoundError if absent; keeps instance info
        remove_app(id)                  NotFoundError if absent; drops instance info
        add_instance_info(id, info)     NotFoundError / AppRunningError if attached
        remove_instance_info(id)        NotFoundError / AppNotRunningError if none

        Any other backend failure       StoreError

Tags:
    dithost, store, persistence, protocol
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from dithost.models.app import ApplicationRecord, ApplicationRecordFull, InstanceInfo


@runtime_checkable
class AppStore(Protocol):
    """Async persistence for application records and their instance info."""

    async def add_app(self, record: ApplicationRecord) -> None: ...

    async def get_app(self, app_id: str) -> ApplicationRecordFull | None: ...

    async def get_all_apps(self) -> list[ApplicationRecordFull]: ...

    async def update_app(self, app_id: str, record: ApplicationRecord) -> None: ...

    async def remove_app(self, app_id: str) -> None: ...

    async def add_instance_info(
        self, app_id: str, info: InstanceInfo, *, provider_name: str | None = None
    ) -> None: ...

    async def remove_instance_info(self, app_id: str) -> None: ...


__all__ = ["AppStore"]

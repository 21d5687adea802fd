"""Application lifecycle controller.

Drives applications through a two-state lifecycle against whichever
provider their configuration names, without knowing any provider's
concrete config or ref type.

Manifesto:
    - **Registries, not switches:** providers and instance-config mappers
      are looked up by id at the moment a transition needs them
    - **State lives in the store:** an application is Running iff the
      store has InstanceInfo attached to it
    - **No hidden retries:** every failure reaches the caller as raised
    - **Provider status is observability:** ``InstanceInfo.status`` never
      gates a transition

Architecture:

    .. code-block:: text

                    start_app
           ┌──────────────────────────┐
           │                          ▼
        Stopped                    Running
           ▲                          │
           └──────────────────────────┘
                    stop_app

        start_app(record)
          ├── instance_info present?        → AppRunningError (no provider call)
          ├── instance_configs.require(id)  → InvalidInstanceConfigTypeError
          ├── providers.require(id)         → InvalidProviderIdError
          ├── mapper.validate_and_map(...)  → InstanceConfig
          ├── adapter.deploy(...)           → InstanceInfo
          └── store.add_instance_info(...)  (failure logged as app_start_unrecorded)

        stop_app(record)
          ├── instance_info absent?         → AppNotRunningError
          ├── providers.require(id)
          ├── adapter.destroy(ref)
          └── store.remove_instance_info(id)

Guardrails:
    ❌ DON'T: Destroy an instance to compensate for a failed persist
    ✅ DO: Log the orphaned ref and re-raise

    ❌ DON'T: Call ``start_app`` concurrently for one id without the store's
       compare-and-set or ``SerializedAppController``
    ✅ DO: Use ``SerializedAppController`` when callers may race

Tags:
    dithost, controller, lifecycle, state-machine

Doc-Types:
    api-reference
"""

from __future__ import annotations

import asyncio

from dithost.core.errors import (
    AppNotRunningError,
    AppRunningError,
    NotFoundError,
    ValidationError,
)
from dithost.core.logging import LogContext, get_logger
from dithost.mapping.instance import InstanceConfigMapperRegistry
from dithost.models.app import ApplicationRecord, ApplicationRecordFull, InstanceInfo
from dithost.models.instance_config import InstanceConfig
from dithost.providers.adapter import ProviderAdapter
from dithost.providers.registry import ProviderRegistry
from dithost.store.protocol import AppStore

logger = get_logger(__name__)


class AppController:
    """Add, update, start, stop and remove applications.

    Args:
        store: Application persistence.
        providers: Provider adapters keyed by ``provider_config.id``.
        instance_configs: Instance-config mappers keyed by ``instance_config.id``.
    """

    def __init__(
        self,
        store: AppStore,
        providers: ProviderRegistry,
        instance_configs: InstanceConfigMapperRegistry,
    ) -> None:
        self.store = store
        self.providers = providers
        self.instance_configs = instance_configs

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    async def add_app(self, record: ApplicationRecord) -> None:
        await self.store.add_app(record)
        logger.info(
            "app_added",
            app_id=record.id,
            instance_config_type=record.instance_config.id,
            provider=record.provider_config.id,
        )

    async def get_app(self, app_id: str) -> ApplicationRecordFull:
        app = await self.store.get_app(app_id)
        if app is None:
            raise NotFoundError(app_id)
        return app

    async def list_apps(self) -> list[ApplicationRecordFull]:
        return await self.store.get_all_apps()

    async def update_app(self, app_id: str, record: ApplicationRecord) -> None:
        """Overwrite an application's configuration. Instance info is untouched.

        Raises:
            ValidationError: ``record.id`` differs from ``app_id``; records
                cannot be renamed.
        """
        if record.id != app_id:
            raise ValidationError(
                f"Record id '{record.id}' does not match application '{app_id}'",
                path="id",
            )
        await self.store.update_app(app_id, record)
        logger.info("app_updated", app_id=app_id)

    async def remove_app(self, app_id: str, force: bool = False) -> None:
        """Delete an application.

        A running application is stopped first when ``force`` is set;
        otherwise ``AppRunningError`` is raised and the record is kept.
        If the forced stop fails, its error propagates and nothing is deleted.
        """
        app = await self.get_app(app_id)
        if app.is_running:
            if not force:
                raise AppRunningError(app_id)
            await self.stop_app(app)
        await self.store.remove_app(app_id)
        logger.info("app_removed", app_id=app_id, forced=force)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start_app(self, record: ApplicationRecordFull) -> InstanceInfo:
        """Deploy a stopped application and record its instance info.

        Raises:
            AppRunningError: ``record`` already has instance info.
            InvalidInstanceConfigTypeError: Unknown ``instance_config.id``.
            InvalidProviderIdError: Unknown ``provider_config.id``.
            ValidationError / TransformError: A config failed mapping.
            ProviderError: The provider failed to deploy.
            StoreError: Deploy succeeded but the instance info was not recorded.
        """
        if record.instance_info is not None:
            raise AppRunningError(record.id)

        async with LogContext(app_id=record.id):
            mapper = self.instance_configs.require(record.instance_config.id)
            provider_id = record.provider_config.id
            adapter = self.providers.require(provider_id)

            instance_config: InstanceConfig = mapper.validate_and_map(record.instance_config.config)

            logger.info("app_starting", provider=provider_id)
            try:
                info = await adapter.deploy(record.provider_config.config, instance_config)
            except asyncio.CancelledError:
                logger.warning("app_start_cancelled", provider=provider_id, orphan_risk=True)
                raise

            try:
                await self.store.add_instance_info(record.id, info, provider_name=provider_id)
            except Exception as e:
                logger.error(
                    "app_start_unrecorded",
                    provider=provider_id,
                    ref=info.ref,
                    error=str(e),
                )
                raise

            logger.info("app_started", provider=provider_id, status=info.status.value, ref=info.ref)
            return info

    async def stop_app(self, record: ApplicationRecordFull) -> None:
        """Destroy a running application's instance and detach its instance info.

        The provider is the one the instance was deployed with when the
        store recorded it, else ``provider_config.id``.
        """
        if record.instance_info is None:
            raise AppNotRunningError(record.id)

        async with LogContext(app_id=record.id):
            provider_id, adapter = self._provider_for(record)
            logger.info("app_stopping", provider=provider_id)
            await adapter.destroy(record.instance_info.ref)
            await self.store.remove_instance_info(record.id)
            logger.info("app_stopped", provider=provider_id)

    async def inspect_app(self, app_id: str) -> InstanceInfo:
        """Live instance status from the provider. Never persisted."""
        app = await self.get_app(app_id)
        if app.instance_info is None:
            raise AppNotRunningError(app_id)
        _, adapter = self._provider_for(app)
        return await adapter.get_info(app.instance_info.ref)

    def _provider_for(self, record: ApplicationRecordFull) -> tuple[str, ProviderAdapter]:
        provider_id = record.provider_name or record.provider_config.id
        return provider_id, self.providers.require(provider_id)


__all__ = ["AppController"]

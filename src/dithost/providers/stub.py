"""In-memory provider for tests and local dry runs."""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from dithost.core.errors import ProviderError
from dithost.models.app import InstanceInfo, InstanceStatus
from dithost.models.instance_config import InstanceConfig
from dithost.providers.base import BaseProvider


class StubProviderConfig(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    instance_prefix: str = Field(default="i-stub", min_length=1)


class StubProviderRef(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    instance_id: str


@dataclass
class _StubInstance:
    """Internal state for a stubbed instance."""

    config: StubProviderConfig
    instance_config: InstanceConfig
    status: InstanceStatus = InstanceStatus.RUNNING
    destroyed: bool = False


class StubProvider(BaseProvider[StubProviderConfig, StubProviderRef]):
    """Provider that keeps instances in a dict.

    .. code-block:: text

        deploy()   → InstanceInfo(starting, {"instanceId": "i-stub-<hex>"})
        get_info() → running until destroyed, then destroyed

        Inject failures:
          provider.fail_deploy = True    → deploy() raises ProviderError
          provider.fail_get_info = True  → get_info() raises ProviderError
          provider.fail_destroy = True   → destroy() raises ProviderError
          provider.deploy_delay = 5.0    → deploy() sleeps first (cancellation tests)

        Track usage:
          provider.deploy_count / get_info_count / destroy_count
    """

    provider_name = "stub"
    config_model = StubProviderConfig
    ref_model = StubProviderRef

    def __init__(self, *, deploy_delay: float = 0.0) -> None:
        self.deploy_delay = deploy_delay
        self.instances: dict[str, _StubInstance] = {}

        self.deploy_count: int = 0
        self.get_info_count: int = 0
        self.destroy_count: int = 0

        # Inject failures
        self.fail_deploy: bool = False
        self.fail_get_info: bool = False
        self.fail_destroy: bool = False

    @property
    def last_instance_config(self) -> InstanceConfig | None:
        if not self.instances:
            return None
        return list(self.instances.values())[-1].instance_config

    async def _do_deploy(
        self, config: StubProviderConfig, instance_config: InstanceConfig
    ) -> InstanceInfo:
        self.deploy_count += 1
        if self.deploy_delay:
            await asyncio.sleep(self.deploy_delay)
        if self.fail_deploy:
            raise ProviderError(
                "Stub: deploy failure injected", provider=self.provider_name, retryable=True
            )
        instance_id = f"{config.instance_prefix}-{uuid.uuid4().hex[:12]}"
        self.instances[instance_id] = _StubInstance(config=config, instance_config=instance_config)
        return InstanceInfo(
            status=InstanceStatus.STARTING,
            ref=self.dump_ref(StubProviderRef(instance_id=instance_id)),
        )

    async def _do_get_info(self, ref: StubProviderRef) -> InstanceInfo:
        self.get_info_count += 1
        if self.fail_get_info:
            raise ProviderError("Stub: get_info failure injected", provider=self.provider_name)
        instance = self.instances.get(ref.instance_id)
        if instance is None:
            raise ProviderError(
                f"Stub: no instance {ref.instance_id}", provider=self.provider_name
            )
        return InstanceInfo(status=instance.status, ref=self.dump_ref(ref))

    async def _do_destroy(self, ref: StubProviderRef) -> None:
        self.destroy_count += 1
        if self.fail_destroy:
            raise ProviderError(
                "Stub: destroy failure injected", provider=self.provider_name, retryable=True
            )
        instance = self.instances.get(ref.instance_id)
        if instance is not None:
            instance.status = InstanceStatus.DESTROYED
            instance.destroyed = True


__all__ = ["StubProvider", "StubProviderConfig", "StubProviderRef"]

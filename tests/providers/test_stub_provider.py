"""Tests for StubProvider lifecycle and failure injection."""

import asyncio

import pytest
from pydantic import ValidationError as PydanticValidationError

from dithost.core.errors import DitHostError, ProviderError
from dithost.models.app import InstanceStatus
from dithost.models.instance_config import InstanceConfig
from dithost.providers.stub import StubProvider, StubProviderConfig, StubProviderRef

USER_DATA = InstanceConfig(user_data="#cloud-config\npackages: [htop]\n")


class TestStubProviderLifecycle:
    """deploy → get_info → destroy."""

    @pytest.mark.asyncio
    async def test_deploy_returns_starting_with_ref(self, stub_provider):
        info = await stub_provider.deploy(StubProviderConfig(), USER_DATA)
        assert info.status == InstanceStatus.STARTING
        assert info.ref["instanceId"].startswith("i-stub-")
        assert stub_provider.deploy_count == 1
        assert stub_provider.last_instance_config == USER_DATA

    @pytest.mark.asyncio
    async def test_prefix_from_config(self, stub_provider):
        info = await stub_provider.deploy(StubProviderConfig(instance_prefix="i-web"), USER_DATA)
        assert info.ref["instanceId"].startswith("i-web-")

    @pytest.mark.asyncio
    async def test_get_info_running_then_destroyed(self, stub_provider):
        info = await stub_provider.deploy(StubProviderConfig(), USER_DATA)
        ref = stub_provider.parse_ref(info.ref)

        assert (await stub_provider.get_info(ref)).status == InstanceStatus.RUNNING
        await stub_provider.destroy(ref)
        assert (await stub_provider.get_info(ref)).status == InstanceStatus.DESTROYED
        assert stub_provider.destroy_count == 1

    @pytest.mark.asyncio
    async def test_get_info_unknown_instance(self, stub_provider):
        with pytest.raises(ProviderError, match="no instance"):
            await stub_provider.get_info(StubProviderRef(instance_id="i-missing"))

    @pytest.mark.asyncio
    async def test_destroy_unknown_instance_is_noop(self, stub_provider):
        await stub_provider.destroy(StubProviderRef(instance_id="i-missing"))
        assert stub_provider.destroy_count == 1


class TestStubProviderFailures:
    """Injected failures surface as ProviderError."""

    @pytest.mark.asyncio
    async def test_fail_deploy(self, stub_provider):
        stub_provider.fail_deploy = True
        with pytest.raises(ProviderError) as exc_info:
            await stub_provider.deploy(StubProviderConfig(), USER_DATA)
        assert exc_info.value.retryable is True
        assert stub_provider.deploy_count == 1
        assert stub_provider.instances == {}

    @pytest.mark.asyncio
    async def test_fail_destroy(self, stub_provider):
        info = await stub_provider.deploy(StubProviderConfig(), USER_DATA)
        stub_provider.fail_destroy = True
        with pytest.raises(ProviderError):
            await stub_provider.destroy(stub_provider.parse_ref(info.ref))

    @pytest.mark.asyncio
    async def test_fail_get_info(self, stub_provider):
        info = await stub_provider.deploy(StubProviderConfig(), USER_DATA)
        stub_provider.fail_get_info = True
        with pytest.raises(DitHostError):
            await stub_provider.get_info(stub_provider.parse_ref(info.ref))

    @pytest.mark.asyncio
    async def test_deploy_delay_is_cancellable(self):
        provider = StubProvider(deploy_delay=10)
        task = asyncio.create_task(provider.deploy(StubProviderConfig(), USER_DATA))
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert provider.instances == {}


class TestStubProviderModels:
    def test_config_uses_camel_case(self):
        assert StubProviderConfig.model_validate({"instancePrefix": "i-x"}).instance_prefix == "i-x"

    def test_config_rejects_unknown_keys(self):
        with pytest.raises(PydanticValidationError):
            StubProviderConfig.model_validate({"region": "us-east-1"})

    def test_ref_round_trip(self, stub_provider):
        ref = StubProviderRef(instance_id="i-1")
        assert stub_provider.dump_ref(ref) == {"instanceId": "i-1"}
        assert stub_provider.parse_ref({"instanceId": "i-1"}) == ref

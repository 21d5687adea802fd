"""Tests for ConfigurableProvider: raw JSON in, typed provider calls out."""

import pytest

from dithost.core.errors import ConfigError, TransformError, ValidationError
from dithost.mapping.mapper import FunctionMapper
from dithost.models.app import InstanceStatus
from dithost.models.instance_config import InstanceConfig
from dithost.providers.adapter import ConfigurableProvider, ProviderAdapter
from dithost.providers.aws import AWSConfigMapper, AWSProvider
from dithost.providers.stub import StubProviderConfig

USER_DATA = InstanceConfig(user_data="#cloud-config\n")


class TestConstruction:
    def test_direct_adapter_satisfies_protocol(self, stub_provider):
        adapter = ConfigurableProvider.direct(stub_provider)
        assert isinstance(adapter, ProviderAdapter)
        assert adapter.provider_name == "stub"

    def test_mismatched_mapper_rejected(self, stub_provider):
        with pytest.raises(ConfigError, match="expects StubProviderConfig"):
            ConfigurableProvider(AWSConfigMapper(), stub_provider)

    def test_mapper_producing_subclass_accepted(self, stub_provider):
        class PrefixedConfig(StubProviderConfig):
            pass

        mapper = FunctionMapper(
            StubProviderConfig,
            lambda c: PrefixedConfig(instance_prefix=c.instance_prefix),
            output_model=PrefixedConfig,
        )
        assert ConfigurableProvider(mapper, stub_provider).mapper is mapper


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_deploy_get_info_destroy_with_raw_values(self, stub_provider):
        adapter = ConfigurableProvider.direct(stub_provider)

        info = await adapter.deploy({"instancePrefix": "i-raw"}, USER_DATA)
        assert info.ref["instanceId"].startswith("i-raw-")

        assert (await adapter.get_info(info.ref)).status == InstanceStatus.RUNNING
        await adapter.destroy(info.ref)
        assert (await adapter.get_info(info.ref)).status == InstanceStatus.DESTROYED

    @pytest.mark.asyncio
    async def test_invalid_raw_config_never_reaches_provider(self, stub_provider):
        adapter = ConfigurableProvider.direct(stub_provider)
        with pytest.raises(ValidationError):
            await adapter.deploy({"instancePrefix": ""}, USER_DATA)
        assert stub_provider.deploy_count == 0

    @pytest.mark.asyncio
    async def test_mapper_transform_error(self):
        adapter = ConfigurableProvider(AWSConfigMapper(), AWSProvider(ec2_client=None))
        with pytest.raises(TransformError, match="imageId or amiNamePattern"):
            await adapter.deploy({"instanceType": "t3.small"}, USER_DATA)

    @pytest.mark.asyncio
    async def test_malformed_ref(self, stub_provider):
        adapter = ConfigurableProvider.direct(stub_provider)
        with pytest.raises(ValidationError):
            await adapter.destroy({"id": "i-1"})
        assert stub_provider.destroy_count == 0


class TestConfigSchema:
    def test_schema_uses_aliases(self, stub_provider):
        schema = ConfigurableProvider.direct(stub_provider).config_schema()
        assert "instancePrefix" in schema["properties"]

    def test_aws_schema(self):
        schema = ConfigurableProvider(AWSConfigMapper(), AWSProvider(None)).config_schema()
        assert {"imageId", "instanceType", "amiNamePattern"} <= set(schema["properties"])

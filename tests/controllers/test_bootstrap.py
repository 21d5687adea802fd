"""Tests for settings-driven wiring of registries, store and controller."""

from unittest.mock import MagicMock, patch

import pytest

from dithost.bootstrap import (
    build_controller,
    build_instance_config_registry,
    build_provider_registry,
    build_store,
)
from dithost.core.errors import ConfigError
from dithost.core.settings import DitHostSettings
from dithost.instance_configs.compose import ComposeConfigMapper
from dithost.store.sqlite import SQLiteAppStore


class TestRegistries:
    def test_instance_configs(self, settings):
        registry = build_instance_config_registry(settings)
        assert registry.ids() == ["cloud-init", "compose"]
        assert registry.frozen

    def test_compose_settings_applied(self, tmp_path):
        settings = DitHostSettings(
            database_path=tmp_path / "db.sqlite",
            compose_destination_path="/srv/stack",
            compose_filename="compose.yaml",
            _env_file=None,
        )
        mapper = build_instance_config_registry(settings).require("compose")
        assert isinstance(mapper, ComposeConfigMapper)
        assert mapper.compose_path == "/srv/stack/compose.yaml"

    def test_default_packages_provide_compose_plugin(self, tmp_path):
        settings = DitHostSettings(database_path=tmp_path / "db.sqlite", _env_file=None)
        mapper = build_instance_config_registry(settings).require("compose")
        assert mapper.packages == list(ComposeConfigMapper().packages)
        assert "docker-compose-v2" in mapper.packages
        assert "docker-compose" not in mapper.packages

    def test_providers_with_stub(self, settings):
        registry = build_provider_registry(settings, ec2_client=MagicMock())
        assert registry.ids() == ["aws", "stub"]
        with pytest.raises(ConfigError):
            registry.register("other", registry.require("stub"))

    def test_stub_disabled_by_default(self, tmp_path):
        settings = DitHostSettings(database_path=tmp_path / "db.sqlite", _env_file=None)
        registry = build_provider_registry(settings, ec2_client=MagicMock())
        assert registry.ids() == ["aws"]

    def test_aws_client_from_settings(self, tmp_path):
        settings = DitHostSettings(
            database_path=tmp_path / "db.sqlite",
            aws_region="eu-west-1",
            aws_endpoint_url="http://localhost:4566",
            _env_file=None,
        )
        with patch("dithost.providers.aws.boto3.client") as client:
            build_provider_registry(settings)
        client.assert_called_once_with(
            service_name="ec2", region_name="eu-west-1", endpoint_url="http://localhost:4566"
        )


class TestController:
    def test_build_store(self, settings):
        store = build_store(settings)
        try:
            assert isinstance(store, SQLiteAppStore)
            assert settings.database_path.exists()
        finally:
            store.close()

    @pytest.mark.asyncio
    async def test_build_controller(self, settings, compose_record, memory_store):
        controller = build_controller(
            settings,
            store=memory_store,
            providers=build_provider_registry(settings, ec2_client=MagicMock()),
        )
        await controller.add_app(compose_record)
        info = await controller.start_app(await controller.get_app("web"))
        assert info.ref["instanceId"].startswith("i-stub-")

    def test_env_vars(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DITHOST_DATABASE_PATH", str(tmp_path / "env.db"))
        monkeypatch.setenv("DITHOST_ENABLE_STUB_PROVIDER", "true")
        settings = DitHostSettings(_env_file=None)
        assert settings.database_path == tmp_path / "env.db"
        assert settings.enable_stub_provider is True

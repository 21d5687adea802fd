"""
Shared pytest fixtures and configuration for dithost tests.

This module provides:
- Settings/env isolation
- Application stores (in-memory and SQLite)
- Registries wired with the stub provider and the built-in instance configs
- Sample application records

Usage:
    Fixtures are auto-discovered by pytest. Use them as function arguments.

    @pytest.mark.asyncio
    async def test_start(controller, stub_provider, compose_record):
        await controller.add_app(compose_record)
        ...
"""

import sys
from pathlib import Path
from typing import Any

import pytest

# Ensure dithost package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dithost.controllers.app_controller import AppController
from dithost.core.settings import DitHostSettings, clear_settings_cache
from dithost.instance_configs.cloud_init import CloudConfigMapper
from dithost.instance_configs.compose import ComposeConfigMapper
from dithost.mapping.instance import InstanceConfigMapperRegistry
from dithost.models.app import ApplicationRecord, VariableConfig
from dithost.providers.adapter import ConfigurableProvider
from dithost.providers.registry import ProviderRegistry
from dithost.providers.stub import StubProvider
from dithost.store.memory import InMemoryAppStore
from dithost.store.sqlite import SQLiteAppStore


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Settings Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Drop DITHOST_* env vars and the settings cache around every test."""
    import os

    for key in list(os.environ):
        if key.startswith("DITHOST_"):
            monkeypatch.delenv(key, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings(tmp_path) -> DitHostSettings:
    return DitHostSettings(
        database_path=tmp_path / "dithost.db",
        enable_stub_provider=True,
        _env_file=None,
    )


# =============================================================================
# Stores
# =============================================================================


@pytest.fixture
def memory_store() -> InMemoryAppStore:
    return InMemoryAppStore()


@pytest.fixture
def sqlite_store():
    store = SQLiteAppStore(":memory:")
    yield store
    store.close()


@pytest.fixture(params=["memory", "sqlite"])
def store(request):
    """Each AppStore implementation in turn."""
    if request.param == "memory":
        yield InMemoryAppStore()
    else:
        store = SQLiteAppStore(":memory:")
        yield store
        store.close()


# =============================================================================
# Registries & Controller
# =============================================================================


@pytest.fixture
def stub_provider() -> StubProvider:
    return StubProvider()


@pytest.fixture
def providers(stub_provider) -> ProviderRegistry:
    registry = ProviderRegistry()
    registry.register("stub", ConfigurableProvider.direct(stub_provider))
    return registry.freeze()


@pytest.fixture
def instance_configs() -> InstanceConfigMapperRegistry:
    registry = InstanceConfigMapperRegistry()
    registry.register("compose", ComposeConfigMapper())
    registry.register("cloud-init", CloudConfigMapper())
    return registry.freeze()


@pytest.fixture
def controller(memory_store, providers, instance_configs) -> AppController:
    return AppController(memory_store, providers, instance_configs)


# =============================================================================
# Sample Records
# =============================================================================


COMPOSE_JSON: dict[str, Any] = {
    "services": {
        "web": {
            "image": "nginx:1.27",
            "ports": ["80:80"],
            "restart": "unless-stopped",
        }
    }
}


@pytest.fixture
def compose_json() -> dict[str, Any]:
    return {"services": {name: dict(svc) for name, svc in COMPOSE_JSON["services"].items()}}


@pytest.fixture
def compose_record(compose_json) -> ApplicationRecord:
    return ApplicationRecord(
        id="web",
        instance_config=VariableConfig(id="compose", config=compose_json),
        provider_config=VariableConfig(id="stub", config={}),
    )


@pytest.fixture
def cloud_init_record() -> ApplicationRecord:
    return ApplicationRecord(
        id="worker",
        instance_config=VariableConfig(
            id="cloud-init",
            config={"packages": ["htop"], "runcmd": ["echo hello"]},
        ),
        provider_config=VariableConfig(id="stub", config={"instancePrefix": "i-worker"}),
    )

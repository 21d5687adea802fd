"""Process wiring: settings -> registries, store, controller.

Registries are populated here, frozen, and handed to the controller. Nothing
else in dithost registers plug-ins at runtime.

Registered ids:

    .. code-block:: text

        instance configs    compose      ComposeConfigMapper (settings.compose_*)
                            cloud-init   CloudConfigMapper
        providers           aws          AWSConfigMapper + AWSProvider
                            stub         StubProvider (settings.enable_stub_provider)

Example:
    >>> settings = get_settings()
    >>> controller = build_controller(settings)
    >>> await controller.add_app(record)
"""

from __future__ import annotations

from typing import Any

from dithost.controllers.app_controller import AppController
from dithost.core.logging import get_logger
from dithost.core.settings import DitHostSettings
from dithost.instance_configs.cloud_init import CloudConfigMapper
from dithost.instance_configs.compose import ComposeConfigMapper
from dithost.mapping.instance import InstanceConfigMapperRegistry
from dithost.providers.adapter import ConfigurableProvider
from dithost.providers.aws import AWSConfigMapper, AWSProvider
from dithost.providers.registry import ProviderRegistry
from dithost.providers.stub import StubProvider
from dithost.store.protocol import AppStore
from dithost.store.sqlite import SQLiteAppStore

logger = get_logger(__name__)

COMPOSE = "compose"
CLOUD_INIT = "cloud-init"
AWS = "aws"
STUB = "stub"


def build_instance_config_registry(settings: DitHostSettings) -> InstanceConfigMapperRegistry:
    registry = InstanceConfigMapperRegistry()
    registry.register(
        COMPOSE,
        ComposeConfigMapper(
            destination_path=settings.compose_destination_path,
            filename=settings.compose_filename,
            packages=settings.compose_packages,
            start=settings.compose_start,
        ),
    )
    registry.register(CLOUD_INIT, CloudConfigMapper())
    registry.freeze()
    return registry


def build_provider_registry(
    settings: DitHostSettings, *, ec2_client: Any | None = None
) -> ProviderRegistry:
    """Provider registry for ``settings``.

    ``ec2_client`` replaces the boto3 client the AWS provider would
    otherwise create (tests pass a mock).
    """
    if ec2_client is not None:
        aws = AWSProvider(ec2_client)
    else:
        aws = AWSProvider.from_region(settings.aws_region, settings.aws_endpoint_url)

    registry = ProviderRegistry()
    registry.register(AWS, ConfigurableProvider(AWSConfigMapper(), aws))
    if settings.enable_stub_provider:
        registry.register(STUB, ConfigurableProvider.direct(StubProvider()))
    registry.freeze()
    return registry


def build_store(settings: DitHostSettings) -> SQLiteAppStore:
    return SQLiteAppStore(settings.database_path)


def build_controller(
    settings: DitHostSettings,
    *,
    store: AppStore | None = None,
    providers: ProviderRegistry | None = None,
    instance_configs: InstanceConfigMapperRegistry | None = None,
) -> AppController:
    """Controller wired from ``settings``; any piece can be supplied instead."""
    controller = AppController(
        store=store if store is not None else build_store(settings),
        providers=providers if providers is not None else build_provider_registry(settings),
        instance_configs=(
            instance_configs
            if instance_configs is not None
            else build_instance_config_registry(settings)
        ),
    )
    logger.info(
        "controller_built",
        providers=controller.providers.ids(),
        instance_configs=controller.instance_configs.ids(),
    )
    return controller


__all__ = [
    "build_controller",
    "build_instance_config_registry",
    "build_provider_registry",
    "build_store",
]

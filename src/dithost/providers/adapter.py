"""Provider adapters: the JSON-in surface the controller talks to.

``ConfigurableProvider`` binds a concrete provider to the mapper that turns
raw provider JSON into that provider's typed config. Once built, callers see
only the ``ProviderAdapter`` protocol, so a registry can hold adapters for
providers with unrelated config and ref types side by side.

Architecture:

    .. code-block:: text

        deploy(raw_config, instance_config)
          ├── mapper.validate_and_map(raw_config)  → Config
          └── provider.deploy(Config, instance_config)

        get_info(raw_ref) / destroy(raw_ref)
          ├── provider.parse_ref(raw_ref)          → Ref
          └── provider.get_info(Ref) / provider.destroy(Ref)

Example:
    >>> adapter = ConfigurableProvider(AWSConfigMapper(), AWSProvider(ec2))
    >>> info = await adapter.deploy({"imageId": "ami-1"}, instance_config)
    >>> await adapter.destroy(info.ref)

Tags:
    dithost, providers, adapter, type-erasure, protocol
"""

from __future__ import annotations

from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from dithost.core.errors import ConfigError
from dithost.mapping.mapper import ConfigMapper, FunctionMapper
from dithost.models.app import InstanceInfo, JSONValue
from dithost.models.instance_config import InstanceConfig
from dithost.providers.base import BaseProvider, model_name

C = TypeVar("C")
R = TypeVar("R")


@runtime_checkable
class ProviderAdapter(Protocol):
    """What the controller and registry need from a provider."""

    @property
    def provider_name(self) -> str: ...

    async def deploy(self, raw_config: JSONValue, instance_config: InstanceConfig) -> InstanceInfo: ...

    async def get_info(self, raw_ref: JSONValue) -> InstanceInfo: ...

    async def destroy(self, raw_ref: JSONValue) -> None: ...

    def config_schema(self) -> dict[str, Any]: ...


class ConfigurableProvider(Generic[C, R]):
    """A provider paired with the mapper for its raw configuration.

    Raises:
        ConfigError: At construction, if the mapper's output model is not
            the provider's config model.
    """

    def __init__(self, mapper: ConfigMapper[Any, C], provider: BaseProvider[C, R]):
        output_model = getattr(mapper, "output_model", None)
        config_model = provider.config_model
        if not (
            isinstance(output_model, type)
            and isinstance(config_model, type)
            and issubclass(output_model, config_model)
        ):
            raise ConfigError(
                f"Mapper {mapper.name} produces {model_name(output_model)}, "
                f"but provider '{provider.provider_name}' expects {model_name(config_model)}"
            ).with_context(provider=provider.provider_name)
        self.mapper = mapper
        self.provider = provider

    @classmethod
    def direct(cls, provider: BaseProvider[C, R]) -> ConfigurableProvider[C, R]:
        """Adapter whose raw config is the provider's config model as-is."""
        identity = FunctionMapper(
            provider.config_model,
            lambda config: config,
            output_model=provider.config_model,
            name=f"{provider.provider_name}-config",
        )
        return cls(identity, provider)

    @property
    def provider_name(self) -> str:
        return self.provider.provider_name

    async def deploy(self, raw_config: JSONValue, instance_config: InstanceConfig) -> InstanceInfo:
        config = self.mapper.validate_and_map(raw_config)
        return await self.provider.deploy(config, instance_config)

    async def get_info(self, raw_ref: JSONValue) -> InstanceInfo:
        return await self.provider.get_info(self.provider.parse_ref(raw_ref))

    async def destroy(self, raw_ref: JSONValue) -> None:
        await self.provider.destroy(self.provider.parse_ref(raw_ref))

    def config_schema(self) -> dict[str, Any]:
        """JSON Schema of the raw provider configuration."""
        return self.mapper.validator.json_schema()

    def __repr__(self) -> str:
        return f"ConfigurableProvider({self.mapper!r}, {self.provider!r})"


__all__ = ["ProviderAdapter", "ConfigurableProvider"]

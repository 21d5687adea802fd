"""Instance-config mappers and their registry.

Every instance-config plug-in maps its own raw JSON (a compose file, a
cloud-init document, ...) to the uniform :class:`InstanceConfig` that
providers consume. The registry dispatches on ``VariableConfig.id``.
"""

from __future__ import annotations

from typing import Any, TypeVar

from dithost.core.errors import ConfigError, InvalidInstanceConfigTypeError
from dithost.core.registry import Registry
from dithost.mapping.mapper import ConfigMapper
from dithost.models.instance_config import InstanceConfig

I = TypeVar("I")  # noqa: E741


class InstanceConfigMapper(ConfigMapper[I, InstanceConfig]):
    """Mapper whose output is always the uniform :class:`InstanceConfig`."""

    output_model = InstanceConfig


class InstanceConfigMapperRegistry(Registry[ConfigMapper[Any, InstanceConfig]]):
    """Instance-config mappers keyed by instance-config id (``"compose"``, ...)."""

    kind = "instance config mapper"

    def register(self, key: str, entry: ConfigMapper[Any, InstanceConfig]) -> None:
        output_model = getattr(entry, "output_model", None)
        if not (isinstance(output_model, type) and issubclass(output_model, InstanceConfig)):
            raise ConfigError(
                f"Instance config mapper '{key}' must produce InstanceConfig, "
                f"not {getattr(output_model, '__name__', output_model)!r}"
            ).with_context(instance_config_type=key)
        super().register(key, entry)

    def _missing(self, key: str) -> InvalidInstanceConfigTypeError:
        return InvalidInstanceConfigTypeError(key)


__all__ = ["InstanceConfigMapper", "InstanceConfigMapperRegistry"]

"""Base provider with shared lifecycle logic.

Provides ``BaseProvider``: the typed provider capability (deploy / get_info /
destroy over a concrete config model and ref model) with logging and error
wrapping in the public methods and backend work in ``_do_*`` hooks.

Architecture:

    .. code-block:: text

        BaseProvider[Config, Ref] (Abstract Base)
        ├── deploy(config, instance_config) → logging + error wrapping → _do_deploy()
        ├── get_info(ref)                   → error wrapping           → _do_get_info()
        ├── destroy(ref)                    → logging + error wrapping → _do_destroy()
        ├── parse_ref(raw)  → SchemaValidator(ref_model)
        └── dump_ref(ref)   → to_json_value
              │
        ┌─────┴───────────────────────┐
        │                             │
        ▼                             ▼
    AWSProvider                  StubProvider
    (boto3 EC2)                  (in-memory for tests)

Usage:
    class MyProvider(BaseProvider[MyConfig, MyRef]):
        provider_name = "mine"
        config_model = MyConfig
        ref_model = MyRef

        async def _do_deploy(self, config, instance_config): ...
        async def _do_get_info(self, ref): ...
        async def _do_destroy(self, ref): ...

Manifesto:
    Providers speak their own typed config and ref. Everything outside a
    provider sees only JSON, via ``ConfigurableProvider``. Backend
    exceptions never leak: anything that is not already a ``DitHostError``
    becomes a ``ProviderError`` carrying the original as ``cause``.

Tags:
    dithost, providers, base, abstract, adapter-ABC

Doc-Types:
    api-reference
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from dithost.core.errors import DitHostError, ProviderError
from dithost.core.logging import get_logger
from dithost.mapping.schema import SchemaValidator, to_json_value
from dithost.models.app import InstanceInfo, JSONValue
from dithost.models.instance_config import InstanceConfig

logger = get_logger(__name__)

C = TypeVar("C")
R = TypeVar("R")


class BaseProvider(Generic[C, R]):
    """Base class for providers.

    Subclasses MUST set:
        provider_name, config_model, ref_model

    Subclasses MUST implement:
        _do_deploy, _do_get_info, _do_destroy
    """

    provider_name: str = "provider"
    config_model: type[C]
    ref_model: type[R]

    # --- Ref (de)serialization ---

    def parse_ref(self, raw: JSONValue) -> R:
        """Validate a persisted JSON ref against ``ref_model``."""
        return SchemaValidator(self.ref_model).validate(raw)

    def dump_ref(self, ref: R) -> JSONValue:
        """Serialize a typed ref for ``InstanceInfo.ref``."""
        return to_json_value(ref)

    # --- Public lifecycle ---

    async def deploy(self, config: C, instance_config: InstanceConfig) -> InstanceInfo:
        """Deploy one instance with logging and error wrapping."""
        logger.info("provider_deploy_started", provider=self.provider_name)
        try:
            info = await self._do_deploy(config, instance_config)
        except DitHostError as e:
            logger.error("provider_deploy_failed", provider=self.provider_name, error=str(e))
            raise
        except Exception as e:
            logger.error("provider_deploy_failed", provider=self.provider_name, error=str(e))
            raise self._wrap("Deploy", e) from e
        logger.info(
            "provider_deployed",
            provider=self.provider_name,
            status=info.status.value,
            ref=info.ref,
        )
        return info

    async def get_info(self, ref: R) -> InstanceInfo:
        """Fetch live instance status."""
        try:
            return await self._do_get_info(ref)
        except DitHostError:
            raise
        except Exception as e:
            logger.warning("provider_get_info_failed", provider=self.provider_name, error=str(e))
            raise self._wrap("Get info", e) from e

    async def destroy(self, ref: R) -> None:
        """Destroy the instance behind ``ref`` with logging and error wrapping."""
        logger.info("provider_destroy_started", provider=self.provider_name, ref=self.dump_ref(ref))
        try:
            await self._do_destroy(ref)
        except DitHostError as e:
            logger.error("provider_destroy_failed", provider=self.provider_name, error=str(e))
            raise
        except Exception as e:
            logger.error("provider_destroy_failed", provider=self.provider_name, error=str(e))
            raise self._wrap("Destroy", e) from e
        logger.info("provider_destroyed", provider=self.provider_name)

    def _wrap(self, operation: str, exc: Exception) -> ProviderError:
        return ProviderError(
            f"{operation} failed on {self.provider_name}: {exc}",
            provider=self.provider_name,
            cause=exc,
        )

    # --- Abstract methods for subclasses ---

    async def _do_deploy(self, config: C, instance_config: InstanceConfig) -> InstanceInfo:
        """Implement in subclass. Return the new instance's info."""
        raise NotImplementedError

    async def _do_get_info(self, ref: R) -> InstanceInfo:
        """Implement in subclass."""
        raise NotImplementedError

    async def _do_destroy(self, ref: R) -> None:
        """Implement in subclass."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(provider_name={self.provider_name!r})"


def model_name(model: Any) -> str:
    return getattr(model, "__name__", repr(model))


__all__ = ["BaseProvider"]

"""Application records and deployment state.

Key Concepts:
    VariableConfig: ``{id, config}`` -- ``id`` selects the mapper or provider
        that interprets the untyped ``config`` JSON tree.
    ApplicationRecord: The durable description of one deployable unit.
    ApplicationRecordFull: Read-side join of a record with its attached
        InstanceInfo, computed by the store.
    InstanceInfo: Provider-reported status plus the opaque ``ref`` handle
        only that provider understands.

Architecture Decisions:
    - Pydantic v2 models: records round-trip through JSON for persistence
      (``model_dump_json`` / ``model_validate_json``).
    - ``ref`` and ``config`` stay ``Any``: their shape belongs to plug-ins.

Tags:
    models, pydantic, application, instance, dithost
"""

from __future__ import annotations

from enum import Enum
from typing import Any, TypeAlias

from pydantic import BaseModel, Field

JSONValue: TypeAlias = Any
"""An untyped JSON tree: dict, list, str, int, float, bool or None."""


class InstanceStatus(str, Enum):
    """Provider-reported instance status. Observability only."""

    STARTING = "starting"
    RUNNING = "running"
    DESTROYING = "destroying"
    DESTROYED = "destroyed"
    ERRORED = "errored"


class InstanceInfo(BaseModel):
    """Deployment handle attached to a running application."""

    status: InstanceStatus
    ref: JSONValue = Field(description="Opaque provider-defined reference")


class VariableConfig(BaseModel):
    """Discriminated, lazily-typed configuration slot."""

    id: str = Field(min_length=1)
    config: JSONValue = Field(default_factory=dict)


class ApplicationRecord(BaseModel):
    """Durable application configuration."""

    id: str = Field(min_length=1)
    instance_config: VariableConfig
    provider_config: VariableConfig


class ApplicationRecordFull(ApplicationRecord):
    """Application record joined with its current deployment state."""

    provider_name: str | None = None
    instance_info: InstanceInfo | None = None

    @property
    def is_running(self) -> bool:
        return self.instance_info is not None

    def to_record(self) -> ApplicationRecord:
        """Drop the deployment state, keeping only the durable fields."""
        return ApplicationRecord(
            id=self.id,
            instance_config=self.instance_config,
            provider_config=self.provider_config,
        )

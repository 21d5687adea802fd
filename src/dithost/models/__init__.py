"""dithost data models.

Modules:
    app             - ApplicationRecord, ApplicationRecordFull, InstanceInfo, ...
    instance_config - InstanceConfig (uniform bootstrap payload)
    cloud_config    - CloudConfig (``#cloud-config`` document)
    compose         - ComposeConfig (compose-spec subset)
"""

from dithost.models.app import (
    ApplicationRecord,
    ApplicationRecordFull,
    InstanceInfo,
    InstanceStatus,
    JSONValue,
    VariableConfig,
)
from dithost.models.cloud_config import CLOUD_CONFIG_HEADER, CloudConfig, WriteFile
from dithost.models.compose import ComposeConfig, Service
from dithost.models.instance_config import InstanceConfig

__all__ = [
    "ApplicationRecord",
    "ApplicationRecordFull",
    "InstanceInfo",
    "InstanceStatus",
    "JSONValue",
    "VariableConfig",
    "CLOUD_CONFIG_HEADER",
    "CloudConfig",
    "WriteFile",
    "ComposeConfig",
    "Service",
    "InstanceConfig",
]

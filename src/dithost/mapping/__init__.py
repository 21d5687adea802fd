"""Configuration mapping: raw JSON -> validated, typed, transformed config.

Modules:
    schema   - SchemaValidator, to_json_value, transcode
    mapper   - ConfigMapper, ChainedConfigMapper, FunctionMapper, chain
    instance - InstanceConfigMapper, InstanceConfigMapperRegistry
"""

from dithost.mapping.instance import InstanceConfigMapper, InstanceConfigMapperRegistry
from dithost.mapping.mapper import ChainedConfigMapper, ConfigMapper, FunctionMapper, chain
from dithost.mapping.schema import SchemaValidator, to_json_value, transcode

__all__ = [
    "ChainedConfigMapper",
    "ConfigMapper",
    "FunctionMapper",
    "InstanceConfigMapper",
    "InstanceConfigMapperRegistry",
    "SchemaValidator",
    "chain",
    "to_json_value",
    "transcode",
]

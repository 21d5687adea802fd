"""Providers: deployment backends behind a uniform JSON-in adapter.

Architecture:

    .. code-block:: text

        dithost.providers
        ├── base.py      ← BaseProvider (typed capability, logging, error wrapping)
        ├── adapter.py   ← ProviderAdapter protocol + ConfigurableProvider
        ├── registry.py  ← ProviderRegistry (provider id → adapter)
        ├── stub.py      ← StubProvider (in-memory, for tests)
        └── aws.py       ← AWSProvider (boto3 EC2)
"""

from dithost.providers.adapter import ConfigurableProvider, ProviderAdapter
from dithost.providers.aws import AWSConfigMapper, AWSProvider, AWSProviderConfig, AWSProviderRef
from dithost.providers.base import BaseProvider
from dithost.providers.registry import ProviderRegistry
from dithost.providers.stub import StubProvider, StubProviderConfig, StubProviderRef

__all__ = [
    "AWSConfigMapper",
    "AWSProvider",
    "AWSProviderConfig",
    "AWSProviderRef",
    "BaseProvider",
    "ConfigurableProvider",
    "ProviderAdapter",
    "ProviderRegistry",
    "StubProvider",
    "StubProviderConfig",
    "StubProviderRef",
]

"""Built-in instance-config mappers.

Registered by :mod:`dithost.bootstrap` under these ids:

    ``compose``     ComposeConfigMapper  (compose file -> cloud-init)
    ``cloud-init``  CloudConfigMapper    (cloud-config passthrough)
"""

from dithost.instance_configs.cloud_init import CloudConfigMapper
from dithost.instance_configs.compose import ComposeConfigMapper

__all__ = ["CloudConfigMapper", "ComposeConfigMapper"]

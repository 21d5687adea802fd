"""cloud-init instance config: a ``#cloud-config`` document passed through as user data."""

from __future__ import annotations

from dithost.mapping.instance import InstanceConfigMapper
from dithost.models.cloud_config import CloudConfig
from dithost.models.instance_config import InstanceConfig


class CloudConfigMapper(InstanceConfigMapper[CloudConfig]):
    """Render a validated cloud-config document as instance user data.

    ``extra_packages`` are appended to the document's ``packages`` (without
    duplicates), so an operator can require e.g. ``qemu-guest-agent`` on
    every instance regardless of the application's own document.
    """

    input_model = CloudConfig

    def __init__(self, extra_packages: list[str] | None = None):
        self.extra_packages = list(extra_packages or [])

    def map(self, config: CloudConfig) -> InstanceConfig:
        if self.extra_packages:
            packages = list(config.packages or [])
            packages.extend(p for p in self.extra_packages if p not in packages)
            config = config.model_copy(update={"packages": packages})
        return InstanceConfig(user_data=config.generate_cloud_config())


__all__ = ["CloudConfigMapper"]

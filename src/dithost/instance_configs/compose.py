"""Compose instance config: ships a compose file to the instance via cloud-init.

The compose document is rendered to YAML, written to
``<destination_path>/<filename>`` by cloud-init ``write_files``, the
destination directory is created at boot, and ``docker compose up -d`` is
run once packages are installed. The default packages are the Debian/Ubuntu
ones that ship the compose v2 plugin; other images need ``packages`` set to
their own equivalents.

Example:
    >>> mapper = ComposeConfigMapper()
    >>> info = mapper.validate_and_map({"services": {"web": {"image": "nginx"}}})
    >>> info.user_data.splitlines()[0]
    '#cloud-config'

Tags:
    compose, cloud-init, instance-config, yaml
"""

from __future__ import annotations

import shlex

import yaml

from dithost.core.errors import TransformError
from dithost.core.logging import get_logger
from dithost.mapping.instance import InstanceConfigMapper
from dithost.models.cloud_config import CloudConfig, WriteFile
from dithost.models.compose import ComposeConfig
from dithost.models.instance_config import InstanceConfig

logger = get_logger(__name__)

DEFAULT_DESTINATION_PATH = "/opt/docker"
DEFAULT_FILENAME = "docker-compose.yml"
DEFAULT_PACKAGES = ("docker.io", "docker-compose-v2")


class ComposeConfigMapper(InstanceConfigMapper[ComposeConfig]):
    """Map a compose document to cloud-init user data that runs it."""

    input_model = ComposeConfig

    def __init__(
        self,
        destination_path: str = DEFAULT_DESTINATION_PATH,
        filename: str = DEFAULT_FILENAME,
        packages: list[str] | tuple[str, ...] = DEFAULT_PACKAGES,
        additional_commands: list[str] | None = None,
        start: bool = True,
    ):
        self.destination_path = destination_path.rstrip("/") or "/"
        self.filename = filename
        self.packages = list(packages)
        self.additional_commands = list(additional_commands or [])
        self.start = start

    @property
    def compose_path(self) -> str:
        if self.destination_path == "/":
            return f"/{self.filename}"
        return f"{self.destination_path}/{self.filename}"

    def render_compose(self, config: ComposeConfig) -> str:
        return yaml.safe_dump(
            config.to_dict(),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )

    def map(self, config: ComposeConfig) -> InstanceConfig:
        if not config.services:
            raise TransformError("Compose config must define at least one service")

        destination = shlex.quote(self.destination_path)
        runcmd: list[str | list[str]] = []
        if self.start:
            runcmd.append(
                f"cd {destination} && docker compose -f {shlex.quote(self.filename)} up -d"
            )
        runcmd.extend(self.additional_commands)

        cloud_config = CloudConfig(
            packages=self.packages or None,
            package_upgrade=True,
            write_files=[WriteFile(path=self.compose_path, content=self.render_compose(config))],
            bootcmd=[f"mkdir -p {destination}"],
            runcmd=runcmd or None,
        )
        logger.debug(
            "compose_instance_config_mapped",
            services=sorted(config.services),
            path=self.compose_path,
        )
        return InstanceConfig(user_data=cloud_config.generate_cloud_config())


__all__ = ["ComposeConfigMapper"]

"""Docker Compose model based on the compose-spec JSON schema.

Only the parts of compose-spec that matter for single-host application
deployment are typed; every model keeps unknown keys (``extra="allow"``) so
newer compose attributes and ``x-*`` extensions pass through untouched.
Fields that compose accepts in several shapes (``command`` as string or
list, ``environment`` as mapping or list, short or long port syntax) are
typed as unions and re-emitted in the shape they arrived in.

Tags:
    compose, docker, compose-spec, pydantic, instance-config
"""

from __future__ import annotations

from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict

StringOrList = Union[str, list[str]]
EnvValue = Union[str, int, float, bool, None]


class _ComposeModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class RestartPolicy(str, Enum):
    NO = "no"
    ALWAYS = "always"
    ON_FAILURE = "on-failure"
    UNLESS_STOPPED = "unless-stopped"


# ---------------------------------------------------------------------------
# Service sub-structures
# ---------------------------------------------------------------------------


class BuildConfig(_ComposeModel):
    context: str | None = None
    dockerfile: str | None = None
    args: dict[str, EnvValue] | list[str] | None = None
    target: str | None = None
    network: str | None = None
    cache_from: list[str] | None = None
    labels: dict[str, str] | list[str] | None = None
    no_cache: bool | None = None
    pull: bool | None = None
    platforms: list[str] | None = None


class PortMapping(_ComposeModel):
    target: int
    published: str | int | None = None
    host_ip: str | None = None
    protocol: str | None = None
    mode: str | None = None


class VolumeMount(_ComposeModel):
    type: str
    source: str | None = None
    target: str | None = None
    read_only: bool | None = None
    bind: dict[str, str | bool] | None = None
    volume: dict[str, str | bool] | None = None
    tmpfs: dict[str, str | int] | None = None


class NetworkServiceConfig(_ComposeModel):
    aliases: list[str] | None = None
    ipv4_address: str | None = None
    ipv6_address: str | None = None
    priority: int | None = None


class DependencyCondition(_ComposeModel):
    condition: str | None = None
    restart: bool | None = None
    required: bool | None = None


class ResourceSpec(_ComposeModel):
    cpus: str | float | None = None
    memory: str | None = None
    pids: int | None = None


class Resources(_ComposeModel):
    limits: ResourceSpec | None = None
    reservations: ResourceSpec | None = None


class DeployRestartPolicy(_ComposeModel):
    condition: str | None = None
    delay: str | None = None
    max_attempts: int | None = None
    window: str | None = None


class DeployConfig(_ComposeModel):
    mode: str | None = None
    replicas: int | None = None
    labels: dict[str, str] | list[str] | None = None
    resources: Resources | None = None
    restart_policy: DeployRestartPolicy | None = None


class HealthcheckConfig(_ComposeModel):
    test: StringOrList | None = None
    interval: str | None = None
    timeout: str | None = None
    retries: int | None = None
    start_period: str | None = None
    start_interval: str | None = None
    disable: bool | None = None


class LoggingConfig(_ComposeModel):
    driver: str | None = None
    options: dict[str, str] | None = None


class UlimitConfig(_ComposeModel):
    soft: int
    hard: int


class FileMount(_ComposeModel):
    source: str
    target: str | None = None
    uid: str | None = None
    gid: str | None = None
    mode: int | str | None = None


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class Service(_ComposeModel):
    # Image / build
    image: str | None = None
    build: str | BuildConfig | None = None
    pull_policy: str | None = None
    platform: str | None = None

    # Container
    container_name: str | None = None
    hostname: str | None = None
    user: str | None = None
    working_dir: str | None = None
    entrypoint: StringOrList | None = None
    command: StringOrList | None = None
    environment: dict[str, EnvValue] | list[str] | None = None
    env_file: StringOrList | None = None
    labels: dict[str, str] | list[str] | None = None

    # Resources
    cpus: float | str | None = None
    mem_limit: str | int | None = None
    mem_reservation: str | int | None = None
    ulimits: dict[str, int | UlimitConfig] | None = None

    # Networking
    ports: list[str | int | PortMapping] | None = None
    expose: list[str | int] | None = None
    networks: list[str] | dict[str, NetworkServiceConfig | None] | None = None
    network_mode: str | None = None
    dns: StringOrList | None = None
    extra_hosts: list[str] | dict[str, str] | None = None

    # Storage
    volumes: list[str | VolumeMount] | None = None
    tmpfs: StringOrList | None = None
    devices: list[str] | None = None

    # Lifecycle
    depends_on: list[str] | dict[str, DependencyCondition] | None = None
    restart: RestartPolicy | None = None
    deploy: DeployConfig | None = None
    healthcheck: HealthcheckConfig | None = None
    stop_grace_period: str | None = None

    # Security
    privileged: bool | None = None
    read_only: bool | None = None
    cap_add: list[str] | None = None
    cap_drop: list[str] | None = None
    security_opt: list[str] | None = None

    logging: LoggingConfig | None = None

    configs: list[str | FileMount] | None = None
    secrets: list[str | FileMount] | None = None


# ---------------------------------------------------------------------------
# Top-level definitions
# ---------------------------------------------------------------------------


class ExternalObjectConfig(_ComposeModel):
    name: str | None = None


class IPAMSubnetConfig(_ComposeModel):
    subnet: str | None = None
    ip_range: str | None = None
    gateway: str | None = None


class IPAMConfig(_ComposeModel):
    driver: str | None = None
    config: list[IPAMSubnetConfig] | None = None


class Network(_ComposeModel):
    name: str | None = None
    driver: str | None = None
    driver_opts: dict[str, str | int] | None = None
    attachable: bool | None = None
    internal: bool | None = None
    enable_ipv6: bool | None = None
    ipam: IPAMConfig | None = None
    external: bool | ExternalObjectConfig | None = None
    labels: dict[str, str] | list[str] | None = None


class Volume(_ComposeModel):
    name: str | None = None
    driver: str | None = None
    driver_opts: dict[str, str | int] | None = None
    external: bool | ExternalObjectConfig | None = None
    labels: dict[str, str] | list[str] | None = None


class TopLevelFile(_ComposeModel):
    file: str | None = None
    environment: str | None = None
    content: str | None = None
    external: bool | None = None
    name: str | None = None


class ComposeConfig(_ComposeModel):
    """A compose application: services plus shared networks and volumes."""

    version: str | None = None
    name: str | None = None
    services: dict[str, Service] | None = None
    networks: dict[str, Network | None] | None = None
    volumes: dict[str, Volume | None] | None = None
    configs: dict[str, TopLevelFile] | None = None
    secrets: dict[str, TopLevelFile] | None = None

    def to_dict(self) -> dict:
        """JSON-compatible dict with unset fields dropped."""
        return self.model_dump(mode="json", exclude_none=True)

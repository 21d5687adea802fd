"""cloud-init ``#cloud-config`` document model.

Covers the subset of the cloud-config v1 schema that instance-config mappers
produce or accept. Keys follow cloud-init's own snake_case names, so models
dump straight to the YAML cloud-init reads. Unknown top-level keys are kept
so hand-written documents survive a validate/render round trip.

Example::

    config = CloudConfig(
        packages=["docker"],
        write_files=[WriteFile(path="/opt/app/compose.yml", content="...")],
        runcmd=["docker compose -f /opt/app/compose.yml up -d"],
    )
    user_data = config.generate_cloud_config()  # "#cloud-config\\n..."

Tags:
    cloud-init, cloud-config, yaml, pydantic, instance-config
"""

from __future__ import annotations

from enum import Enum

import yaml
from pydantic import BaseModel, ConfigDict, Field

CLOUD_CONFIG_HEADER = "#cloud-config"


class MergeStrategy(str, Enum):
    LIST = "list"
    DICT = "dict"
    STR = "str"
    REPLACE = "replace"


class PowerMode(str, Enum):
    POWEROFF = "poweroff"
    HALT = "halt"
    REBOOT = "reboot"


class User(BaseModel):
    name: str
    gecos: str | None = None
    homedir: str | None = None
    primary_group: str | None = None
    groups: str | list[str] | None = None
    lock_passwd: bool | None = None
    passwd: str | None = None
    no_create_home: bool | None = None
    system: bool | None = None
    ssh_authorized_keys: list[str] | None = None
    ssh_import_id: list[str] | None = None
    shell: str | None = None
    sudo: str | list[str] | bool | None = None
    uid: int | None = None


class Group(BaseModel):
    name: str
    members: list[str] | None = None


class WriteFile(BaseModel):
    path: str
    content: str = ""
    owner: str | None = None
    permissions: str | None = None
    encoding: str | None = None
    append: bool | None = None
    defer: bool | None = None


class NTPConfig(BaseModel):
    enabled: bool | None = None
    servers: list[str] | None = None
    pools: list[str] | None = None


class SwapConfig(BaseModel):
    filename: str | None = None
    size: str | int | None = None
    maxsize: str | int | None = None


class PowerState(BaseModel):
    mode: PowerMode
    delay: str | int | None = None
    message: str | None = None
    timeout: int | None = None
    condition: str | bool | None = None


class PhoneHome(BaseModel):
    url: str
    post: str | list[str] | None = None
    tries: int | None = None


class CloudConfig(BaseModel):
    """cloud-init user data document."""

    model_config = ConfigDict(extra="allow")

    merge_how: list[MergeStrategy] | str | None = None

    # Accounts
    users: list[User | str] | None = None
    groups: list[Group | str] | None = None
    ssh_authorized_keys: list[str] | None = None

    # Packages
    packages: list[str] | None = None
    package_update: bool | None = None
    package_upgrade: bool | None = None

    # Files and commands
    write_files: list[WriteFile] | None = None
    bootcmd: list[str | list[str]] | None = None
    runcmd: list[str | list[str]] | None = None

    # System
    hostname: str | None = None
    manage_etc_hosts: bool | str | None = None
    timezone: str | None = None
    locale: str | None = None
    ntp: NTPConfig | None = None
    swap: SwapConfig | None = None
    power_state: PowerState | None = None
    phone_home: PhoneHome | None = None

    final_message: str | None = Field(default=None, description="Logged when cloud-init finishes")

    def to_dict(self) -> dict:
        """JSON-compatible dict with unset fields dropped."""
        return self.model_dump(mode="json", exclude_none=True)

    def generate_cloud_config(self) -> str:
        """Render the ``#cloud-config`` user data document."""
        body = yaml.safe_dump(
            self.to_dict(),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
        return f"{CLOUD_CONFIG_HEADER}\n{body}"

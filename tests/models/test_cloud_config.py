"""Tests for the CloudConfig model and #cloud-config rendering."""

import yaml

from dithost.models.cloud_config import CLOUD_CONFIG_HEADER, CloudConfig, User, WriteFile


def _body(user_data: str) -> dict:
    header, _, body = user_data.partition("\n")
    assert header == CLOUD_CONFIG_HEADER
    return yaml.safe_load(body)


class TestGenerateCloudConfig:
    def test_header_first_line(self):
        assert CloudConfig().generate_cloud_config().startswith("#cloud-config\n")

    def test_unset_fields_omitted(self):
        body = _body(CloudConfig(packages=["docker"]).generate_cloud_config())
        assert body == {"packages": ["docker"]}

    def test_write_files_and_commands(self):
        config = CloudConfig(
            package_upgrade=True,
            write_files=[WriteFile(path="/opt/app/a.yml", content="x: 1\n", permissions="0644")],
            bootcmd=["mkdir -p /opt/app"],
            runcmd=[["systemctl", "restart", "docker"], "echo done"],
        )
        body = _body(config.generate_cloud_config())
        assert body["package_upgrade"] is True
        assert body["write_files"] == [
            {"path": "/opt/app/a.yml", "content": "x: 1\n", "permissions": "0644"}
        ]
        assert body["bootcmd"] == ["mkdir -p /opt/app"]
        assert body["runcmd"] == [["systemctl", "restart", "docker"], "echo done"]

    def test_users_accept_default_string(self):
        config = CloudConfig(users=["default", User(name="deploy", shell="/bin/bash")])
        body = _body(config.generate_cloud_config())
        assert body["users"] == ["default", {"name": "deploy", "shell": "/bin/bash"}]

    def test_unknown_keys_preserved(self):
        config = CloudConfig.model_validate({"packages": ["git"], "apt": {"preserve_sources_list": True}})
        body = _body(config.generate_cloud_config())
        assert body["apt"] == {"preserve_sources_list": True}

    def test_key_order_follows_model(self):
        config = CloudConfig(runcmd=["b"], packages=["a"])
        lines = config.generate_cloud_config().splitlines()
        assert lines.index("packages:") < lines.index("runcmd:")

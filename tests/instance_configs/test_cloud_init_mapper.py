"""Tests for CloudConfigMapper."""

import pytest
import yaml

from dithost.core.errors import ValidationError
from dithost.instance_configs.cloud_init import CloudConfigMapper


class TestCloudConfigMapper:
    def test_renders_document(self):
        info = CloudConfigMapper().validate_and_map(
            {"packages": ["htop"], "runcmd": ["echo hello"], "timezone": "UTC"}
        )
        assert info.user_data.startswith("#cloud-config\n")
        body = yaml.safe_load(info.user_data.partition("\n")[2])
        assert body == {"packages": ["htop"], "runcmd": ["echo hello"], "timezone": "UTC"}

    def test_extra_packages_appended_once(self):
        mapper = CloudConfigMapper(extra_packages=["htop", "qemu-guest-agent"])
        info = mapper.validate_and_map({"packages": ["htop"]})
        body = yaml.safe_load(info.user_data.partition("\n")[2])
        assert body["packages"] == ["htop", "qemu-guest-agent"]

    def test_invalid_document_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            CloudConfigMapper().validate_and_map({"write_files": [{"content": "no path"}]})
        assert exc_info.value.path == "write_files.0.path"

"""Tests for the ComposeConfig model."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from dithost.models.compose import ComposeConfig, PortMapping, RestartPolicy, VolumeMount


class TestComposeConfig:
    def test_short_syntax_kept(self):
        config = ComposeConfig.model_validate(
            {
                "services": {
                    "web": {
                        "image": "nginx",
                        "command": "nginx -g 'daemon off;'",
                        "environment": ["A=1"],
                        "ports": ["80:80", 443],
                        "volumes": ["./html:/usr/share/nginx/html:ro"],
                        "depends_on": ["db"],
                    },
                    "db": {"image": "postgres:16"},
                }
            }
        )
        data = config.to_dict()
        web = data["services"]["web"]
        assert web["command"] == "nginx -g 'daemon off;'"
        assert web["environment"] == ["A=1"]
        assert web["ports"] == ["80:80", 443]
        assert web["depends_on"] == ["db"]

    def test_long_syntax_parsed(self):
        config = ComposeConfig.model_validate(
            {
                "services": {
                    "api": {
                        "build": {"context": ".", "dockerfile": "Dockerfile"},
                        "environment": {"DEBUG": "1", "WORKERS": 4},
                        "ports": [{"target": 8000, "published": "8080"}],
                        "volumes": [{"type": "volume", "source": "data", "target": "/data"}],
                        "depends_on": {"db": {"condition": "service_healthy"}},
                        "restart": "on-failure",
                    }
                },
                "volumes": {"data": None},
            }
        )
        api = config.services["api"]
        assert isinstance(api.ports[0], PortMapping)
        assert isinstance(api.volumes[0], VolumeMount)
        assert api.restart is RestartPolicy.ON_FAILURE
        assert api.depends_on["db"].condition == "service_healthy"
        assert "data" in config.volumes and config.volumes["data"] is None

    def test_extensions_pass_through(self):
        config = ComposeConfig.model_validate(
            {"x-common": {"restart": "always"}, "services": {"web": {"image": "a", "x-tag": 1}}}
        )
        data = config.to_dict()
        assert data["x-common"] == {"restart": "always"}
        assert data["services"]["web"]["x-tag"] == 1

    def test_invalid_restart_policy_rejected(self):
        with pytest.raises(PydanticValidationError):
            ComposeConfig.model_validate({"services": {"web": {"restart": "sometimes"}}})

"""Tests for server configuration loading and validation."""

from pathlib import Path

import pytest

from heybeauty_mcp.client import DEFAULT_API_BASE_URL
from heybeauty_mcp.errors import ConfigError
from heybeauty_mcp.server.config import ServerConfig, load_config


@pytest.fixture
def missing_file(tmp_path: Path) -> Path:
    return tmp_path / "absent.yml"


@pytest.fixture
def yaml_file(tmp_path: Path) -> Path:
    path = tmp_path / "heybeauty_config.yml"
    path.write_text(
        """
server:
  mode: rest
  host: 0.0.0.0
  port: 8080
  endpoint: /mcp
  log_level: DEBUG
  structured_logging: true
  unknown_setting: 1
""",
        encoding="utf-8",
    )
    return path


class TestServerConfig:
    def test_defaults(self) -> None:
        config = ServerConfig()

        assert config.api_key == ""
        assert config.api_base_url == DEFAULT_API_BASE_URL == "https://heybeauty.ai/api"
        assert config.mode == "stdio"
        assert config.port == 9593
        assert config.endpoint == "/rest"
        assert config.server_name == "heybeauty-mcp"

    def test_api_key_hidden_from_repr(self) -> None:
        assert "secret-key" not in repr(ServerConfig(api_key="secret-key"))

    @pytest.mark.parametrize(
        ("kwargs", "setting"),
        [
            ({"mode": "sse"}, "mode"),
            ({"port": 0}, "port"),
            ({"port": 70000}, "port"),
            ({"endpoint": "rest"}, "endpoint"),
            ({"request_timeout_seconds": 0}, "request_timeout_seconds"),
            ({"log_level": "LOUD"}, "log_level"),
            ({"api_base_url": "ftp://heybeauty.ai"}, "api_base_url"),
        ],
    )
    def test_invalid_settings(self, kwargs: dict, setting: str) -> None:
        with pytest.raises(ConfigError) as exc_info:
            ServerConfig(**kwargs)

        assert exc_info.value.details["setting"] == setting

    def test_frozen(self) -> None:
        config = ServerConfig()

        with pytest.raises(AttributeError):
            config.mode = "rest"  # type: ignore[misc]


class TestLoadConfig:
    def test_defaults_without_sources(self, missing_file: Path) -> None:
        assert load_config(missing_file, environ={}) == ServerConfig()

    def test_yaml_file(self, yaml_file: Path) -> None:
        config = load_config(yaml_file, environ={})

        assert config.mode == "rest"
        assert config.host == "0.0.0.0"
        assert config.port == 8080
        assert config.endpoint == "/mcp"
        assert config.log_level == "DEBUG"
        assert config.structured_logging is True

    def test_config_file_from_environment(self, yaml_file: Path) -> None:
        config = load_config(environ={"HEYBEAUTY_CONFIG_FILE": str(yaml_file)})

        assert config.port == 8080

    def test_environment_overrides_yaml(self, yaml_file: Path) -> None:
        env = {
            "HEYBEAUTY_API_KEY": "env-key",
            "HEYBEAUTY_PORT": "9000",
            "HEYBEAUTY_TIMEOUT": "12.5",
            "HEYBEAUTY_STRUCTURED_LOGGING": "false",
        }

        config = load_config(yaml_file, environ=env)

        assert config.api_key == "env-key"
        assert config.port == 9000
        assert config.request_timeout_seconds == 12.5
        assert config.structured_logging is False
        assert config.mode == "rest"

    def test_overrides_win(self, yaml_file: Path) -> None:
        config = load_config(
            yaml_file,
            overrides={"port": 7000, "mode": "stdio", "host": None},
            environ={"HEYBEAUTY_PORT": "9000"},
        )

        assert config.port == 7000
        assert config.mode == "stdio"
        # None overrides are ignored
        assert config.host == "0.0.0.0"

    def test_empty_environment_values_ignored(self, missing_file: Path) -> None:
        config = load_config(missing_file, environ={"HEYBEAUTY_MODE": ""})

        assert config.mode == "stdio"

    def test_invalid_environment_value(self, missing_file: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(missing_file, environ={"HEYBEAUTY_PORT": "not-a-port"})

        assert exc_info.value.details["setting"] == "port"

    def test_invalid_merged_value(self, missing_file: Path) -> None:
        with pytest.raises(ConfigError):
            load_config(missing_file, environ={"HEYBEAUTY_MODE": "carrier-pigeon"})

    def test_malformed_yaml_falls_back(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.yml"
        path.write_text("server: [unclosed", encoding="utf-8")

        assert load_config(path, environ={}) == ServerConfig()

    def test_non_mapping_server_section(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yml"
        path.write_text("server:\n  - stdio\n", encoding="utf-8")

        assert load_config(path, environ={}) == ServerConfig()

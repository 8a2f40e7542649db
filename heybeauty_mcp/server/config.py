"""Server configuration with validation.

Configuration precedence (highest to lowest):
1. Explicit overrides (CLI flags)
2. Environment variables (HEYBEAUTY_*)
3. YAML config file
4. Default values

Example heybeauty_config.yml:
    server:
      mode: "rest"
      host: "127.0.0.1"
      port: 9593
      endpoint: "/rest"
      log_level: "INFO"

Usage:
    config = load_config()
    server = TryOnMCPServer(config)
"""

import dataclasses
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from heybeauty_mcp.client import DEFAULT_API_BASE_URL, DEFAULT_TIMEOUT_SECONDS
from heybeauty_mcp.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "heybeauty_config.yml"

MODES = ("stdio", "rest")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Environment variable -> ServerConfig field
ENV_VARS = {
    "HEYBEAUTY_API_KEY": "api_key",
    "HEYBEAUTY_API_BASE_URL": "api_base_url",
    "HEYBEAUTY_MODE": "mode",
    "HEYBEAUTY_HOST": "host",
    "HEYBEAUTY_PORT": "port",
    "HEYBEAUTY_ENDPOINT": "endpoint",
    "HEYBEAUTY_TIMEOUT": "request_timeout_seconds",
    "HEYBEAUTY_LOG_LEVEL": "log_level",
    "HEYBEAUTY_STRUCTURED_LOGGING": "structured_logging",
}


@dataclass(frozen=True)
class ServerConfig:
    """Process-wide settings, built once at startup.

    Attributes:
        api_key: Default HeyBeauty API key (requests may carry their own)
        api_base_url: Remote API base URL
        mode: Transport, "stdio" or "rest"
        host: Bind address in rest mode
        port: Listen port in rest mode
        endpoint: URL path of the MCP endpoint in rest mode
        request_timeout_seconds: Timeout for each remote API request
        log_level: Root log level
        structured_logging: Emit JSON log lines instead of plain text
        server_name: Name announced to MCP clients
        server_version: Version announced to MCP clients
    """

    api_key: str = field(default="", repr=False)
    api_base_url: str = DEFAULT_API_BASE_URL
    mode: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 9593
    endpoint: str = "/rest"
    request_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = "INFO"
    structured_logging: bool = False
    server_name: str = "heybeauty-mcp"
    server_version: str = "0.1.0"

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.mode not in MODES:
            msg = f"mode must be one of {MODES}, got '{self.mode}'"
            raise ConfigError(msg, setting="mode")

        if not (1 <= self.port <= 65535):
            msg = f"port must be 1-65535, got {self.port}"
            raise ConfigError(msg, setting="port")

        if not self.endpoint.startswith("/"):
            msg = f"endpoint must start with '/', got '{self.endpoint}'"
            raise ConfigError(msg, setting="endpoint")

        if self.request_timeout_seconds <= 0:
            msg = f"request_timeout_seconds must be > 0, got {self.request_timeout_seconds}"
            raise ConfigError(msg, setting="request_timeout_seconds")

        if self.log_level.upper() not in LOG_LEVELS:
            msg = f"log_level must be one of {LOG_LEVELS}, got '{self.log_level}'"
            raise ConfigError(msg, setting="log_level")

        if not self.api_base_url.startswith(("http://", "https://")):
            msg = f"api_base_url must be an http(s) URL, got '{self.api_base_url}'"
            raise ConfigError(msg, setting="api_base_url")


def _coerce(name: str, value: Any) -> Any:
    """Convert a raw (string) setting to the type of the ServerConfig field."""
    if value is None:
        return None
    try:
        if name == "port":
            return int(value)
        if name == "request_timeout_seconds":
            return float(value)
        if name == "structured_logging":
            if isinstance(value, bool):
                return value
            return str(value).strip().lower() in ("1", "true", "yes", "on")
    except (TypeError, ValueError) as e:
        msg = f"invalid value for {name}: {value!r}"
        raise ConfigError(msg, setting=name) from e
    return str(value)


def _load_yaml(config_path: Path) -> dict[str, Any]:
    """Read the ``server`` section of a YAML file.

    Missing or malformed files yield an empty mapping.
    """
    if not config_path.exists():
        return {}

    try:
        with open(config_path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config from %s: %s", config_path, e)
        logger.info("Using default configuration with environment overrides")
        return {}

    section = raw.get("server", {}) if isinstance(raw, dict) else {}
    if not isinstance(section, dict):
        logger.warning("Ignoring non-mapping 'server' section in %s", config_path)
        return {}

    known = {f.name for f in dataclasses.fields(ServerConfig)}
    unknown = set(section) - known
    if unknown:
        logger.warning("Ignoring unknown settings in %s: %s", config_path, sorted(unknown))

    logger.info("Configuration loaded from %s", config_path)
    return {k: v for k, v in section.items() if k in known}


def load_config(
    config_path: str | Path | None = None,
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> ServerConfig:
    """Load configuration from YAML, environment and explicit overrides.

    Args:
        config_path: YAML file (default: $HEYBEAUTY_CONFIG_FILE or
            ./heybeauty_config.yml)
        overrides: Highest-precedence values, ``None`` entries ignored
        environ: Environment mapping (default: os.environ)

    Returns:
        Validated ServerConfig

    Raises:
        ConfigError: If the merged settings are invalid
    """
    env = os.environ if environ is None else environ

    if config_path is None:
        config_path = env.get("HEYBEAUTY_CONFIG_FILE", DEFAULT_CONFIG_FILE)

    settings: dict[str, Any] = {}
    for name, value in _load_yaml(Path(config_path)).items():
        settings[name] = _coerce(name, value)

    for var, name in ENV_VARS.items():
        value = env.get(var)
        if value:
            settings[name] = _coerce(name, value)

    for name, value in (overrides or {}).items():
        if value is not None:
            settings[name] = _coerce(name, value)

    config = ServerConfig(**settings)
    logger.debug("Effective configuration: %s", config)
    return config

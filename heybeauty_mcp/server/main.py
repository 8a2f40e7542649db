"""CLI entry point for the HeyBeauty MCP server.

Example:
    # stdio (default), key from the environment
    export HEYBEAUTY_API_KEY=hb-...
    heybeauty-mcp

    # network transport
    heybeauty-mcp --mode rest --host 0.0.0.0 --port 9593 --endpoint /rest
"""

import argparse
import asyncio
import logging
import sys

from heybeauty_mcp.errors import ConfigError
from heybeauty_mcp.observability import configure_logging
from heybeauty_mcp.server.config import LOG_LEVELS, MODES, ServerConfig, load_config
from heybeauty_mcp.server.mcp_server import TryOnMCPServer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="heybeauty-mcp",
        description="HeyBeauty virtual try-on MCP server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Settings are resolved in this order: CLI flags, HEYBEAUTY_* environment
variables, the YAML config file, defaults.

Examples:
  # Start over stdio
  HEYBEAUTY_API_KEY=hb-... heybeauty-mcp

  # Start the network transport
  heybeauty-mcp --mode rest --port 9593 --endpoint /rest

  # Use a config file
  heybeauty-mcp --config heybeauty_config.yml
        """,
    )

    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML config file (overrides HEYBEAUTY_CONFIG_FILE env var)",
    )
    parser.add_argument(
        "--api-key",
        type=str,
        default=None,
        help="Default HeyBeauty API key (overrides HEYBEAUTY_API_KEY env var)",
    )
    parser.add_argument("--mode", type=str, choices=MODES, default=None, help="Transport mode")
    parser.add_argument("--host", type=str, default=None, help="Bind address in rest mode")
    parser.add_argument("--port", "-p", type=int, default=None, help="Listen port in rest mode")
    parser.add_argument(
        "--endpoint", type=str, default=None, help="MCP endpoint path in rest mode"
    )
    parser.add_argument("--api-base-url", type=str, default=None, help="HeyBeauty API base URL")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--structured-logs",
        action="store_const",
        const=True,
        default=None,
        dest="structured_logging",
        help="Emit JSON log lines",
    )
    return parser


def serve(config: ServerConfig) -> None:
    """Start the server on the configured transport and block."""
    mcp_server = TryOnMCPServer(config)

    if config.mode == "rest":
        from heybeauty_mcp.server.http_transport import run_http

        run_http(mcp_server)
        return

    asyncio.run(mcp_server.run_stdio())


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Exits with status 1 if the configuration is invalid or the transport
    cannot start.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides = {
        "api_key": args.api_key,
        "mode": args.mode,
        "host": args.host,
        "port": args.port,
        "endpoint": args.endpoint,
        "api_base_url": args.api_base_url,
        "log_level": args.log_level,
        "structured_logging": args.structured_logging,
    }

    try:
        config = load_config(args.config, overrides=overrides)
    except ConfigError as e:
        configure_logging()
        logger.error("Invalid configuration: %s", e)
        sys.exit(1)

    configure_logging(config.log_level, structured=config.structured_logging)
    if not config.api_key:
        logger.warning("No default API key configured; requests must carry their own")

    try:
        serve(config)
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        sys.exit(0)
    except Exception as e:
        logger.exception("Server error: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()

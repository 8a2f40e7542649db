"""MCP server layer.

This package contains:
- mcp_server.py: MCP handler layer (resources, tools, prompts)
- catalog.py: Static tool and prompt descriptors
- config.py: Server configuration
- http_transport.py: Streamable-HTTP transport ("rest" mode)
- main.py: CLI entry point and transport selection
"""

from heybeauty_mcp.server.config import ServerConfig, load_config
from heybeauty_mcp.server.mcp_server import TryOnMCPServer

__all__ = ["ServerConfig", "TryOnMCPServer", "load_config"]

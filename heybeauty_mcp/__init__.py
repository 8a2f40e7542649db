"""
HeyBeauty MCP: virtual try-on over the Model Context Protocol.

Exposes the HeyBeauty try-on API (https://heybeauty.ai) to MCP clients:
- Clothing catalog entries as ``cloth:///{cloth_id}`` resources
- ``submit_tryon_task`` / ``query_tryon_task`` tools
- ``tryon_cloth`` prompt describing the submit -> poll -> render workflow

Public API modules:
- heybeauty_mcp.client: Remote API client
- heybeauty_mcp.models: Domain and tool argument models
- heybeauty_mcp.errors: Error taxonomy
- heybeauty_mcp.server: MCP handler layer, configuration and transports
"""

try:
    from importlib.metadata import PackageNotFoundError, version

    try:
        __version__ = version("heybeauty-mcp")
    except PackageNotFoundError:
        # Development checkout, not installed via pip
        __version__ = "0.1.0"
except ImportError:
    __version__ = "0.1.0"

from heybeauty_mcp.client import HeyBeautyClient

__all__ = ["HeyBeautyClient", "__version__"]

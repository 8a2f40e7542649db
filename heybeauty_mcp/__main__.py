"""Allow ``python -m heybeauty_mcp``."""

from heybeauty_mcp.server.main import main

if __name__ == "__main__":
    main()

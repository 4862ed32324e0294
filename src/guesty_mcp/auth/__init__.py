"""OAuth client-credentials authentication for the Guesty Open API.

Quick Start:
    ```python
    from guesty_mcp.auth import TokenManager

    manager = TokenManager(config, transport)
    token = await manager.get_access_token()
    ```
"""

from guesty_mcp.auth.models import AccessToken, expiry_buffer
from guesty_mcp.auth.token_manager import TokenManager

__all__ = [
    "AccessToken",
    "TokenManager",
    "expiry_buffer",
]

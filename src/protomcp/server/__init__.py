"""Tool call runtime: decode arguments, invoke the RPC, encode the response.

MCP integration lives in `protomcp.server.mcp_server` and needs the optional
`mcp` dependency.
"""

from protomcp.server.handler import ToolCallContext, ToolHandler
from protomcp.server.registry import (
    ToolRegistry,
    forward_to_client,
    register_service_handler,
)


__all__ = [
    'ToolCallContext',
    'ToolHandler',
    'ToolRegistry',
    'forward_to_client',
    'register_service_handler',
]

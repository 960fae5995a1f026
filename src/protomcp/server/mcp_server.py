"""Expose a `ToolRegistry` through an MCP server."""

import logging

from typing import Any


try:
    from mcp import types as mcp_types
    from mcp.server.lowlevel import Server
except ImportError as e:
    raise ImportError(
        'MCP server support requires the mcp package. Install with: '
        "'pip install protomcp[mcp]'"
    ) from e

from protomcp.server.registry import ToolRegistry
from protomcp.types import ToolDefinition
from protomcp.utils.errors import ToolCallError


logger = logging.getLogger(__name__)


def to_mcp_tool(tool: ToolDefinition) -> mcp_types.Tool:
    """Converts a tool definition to the MCP wire type."""
    return mcp_types.Tool(
        name=tool.name,
        description=tool.description,
        inputSchema=tool.input_schema,
    )


def attach_to_server(server: Server, registry: ToolRegistry) -> None:
    """Serves the registry's tools from `server`.

    Registers `tools/list` and `tools/call` handlers. Error results are
    raised as `ToolCallError`, which the MCP server reports to the client as
    a tool result with `isError` set.
    """

    @server.list_tools()
    async def list_tools() -> list[mcp_types.Tool]:
        return [to_mcp_tool(tool) for tool in registry.tools()]

    @server.call_tool()
    async def call_tool(
        name: str, arguments: dict[str, Any] | None
    ) -> list[mcp_types.TextContent]:
        result = await registry.call(name, arguments)
        if result.is_error:
            raise ToolCallError(result.text)
        return [mcp_types.TextContent(type='text', text=result.text)]

    logger.debug(
        'Attached %d tools to MCP server %s', len(registry), server.name
    )


def create_server(
    name: str, registry: ToolRegistry, version: str | None = None
) -> Server:
    """Creates an MCP server serving the registry's tools."""
    server = Server(name, version=version)
    attach_to_server(server, registry)
    return server

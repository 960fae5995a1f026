"""Turn protobuf services into MCP tools.

protomcp compiles protobuf message descriptors into JSON Schema tool
contracts and runs tool calls against gRPC services:

- Schema compilation with shared `$defs`, well-known types, maps, arrays
  and oneof discriminated unions (see protomcp.schema)
- Call-time flattening of oneof wrappers (see protomcp.runtime)
- Tool definitions and handlers for unary RPC methods (see protomcp.tools
  and protomcp.server)

Example usage:

    from protomcp.config import GeneratorConfig
    from protomcp.server import ToolRegistry, forward_to_client
    from protomcp.server.mcp_server import create_server

    registry = ToolRegistry()
    forward_to_client(
        registry,
        items_pb2.DESCRIPTOR.services_by_name['ItemService'],
        items_pb2_grpc.ItemServiceStub(channel),
        GeneratorConfig(optional_keyword_support=True),
    )
    server = create_server('items', registry)
"""

from protomcp import config, runtime, schema, server, tools, types


__all__ = ['config', 'runtime', 'schema', 'server', 'tools', 'types']

"""Build tool definitions from protobuf service descriptors.

Each unary RPC method becomes one tool. The tool's input schema is the
compiled request message, compiled with its own definitions table so tools
are independent of each other.
"""

import logging

from collections.abc import Iterator

from google.protobuf.descriptor import MethodDescriptor, ServiceDescriptor

from protomcp.config import GeneratorConfig
from protomcp.schema.comments import CommentIndex
from protomcp.schema.compiler import SchemaCompiler
from protomcp.types import ToolDefinition
from protomcp.utils.constants import DEFAULT_MAX_TOOL_NAME_LENGTH
from protomcp.utils.naming import mangle_head_if_too_long


logger = logging.getLogger(__name__)


def is_streaming(method: MethodDescriptor) -> bool:
    """Returns True for client, server or bidirectional streaming methods."""
    return method.client_streaming or method.server_streaming


def unary_methods(service: ServiceDescriptor) -> Iterator[MethodDescriptor]:
    """Yields the service's unary methods in declaration order."""
    for method in service.methods:
        if is_streaming(method):
            logger.debug('Skipping streaming method %s', method.full_name)
            continue
        yield method


def tool_name_for_method(
    method: MethodDescriptor,
    max_length: int = DEFAULT_MAX_TOOL_NAME_LENGTH,
) -> str:
    """Returns the tool name for a method.

    The name is the method's full name with dots replaced by underscores,
    e.g. `acme.v1.ItemService.CreateItem` becomes
    `acme_v1_ItemService_CreateItem`, mangled if longer than `max_length`.
    """
    return mangle_head_if_too_long(
        method.full_name.replace('.', '_'), max_length
    )


def tool_description(
    method: MethodDescriptor, comments: CommentIndex | None = None
) -> str:
    """Returns the method's source comment, or a generic description."""
    if comments is not None:
        comment = comments.get(method.full_name)
        if comment:
            return comment
    return f'{method.containing_service.name}.{method.name} RPC'


def build_method_tool(
    method: MethodDescriptor,
    config: GeneratorConfig | None = None,
    comments: CommentIndex | None = None,
) -> ToolDefinition:
    """Builds the tool definition of a single method.

    Raises:
        SchemaCompilationError: If the request message cannot be compiled.
    """
    config = config or GeneratorConfig()
    compiler = SchemaCompiler(
        optional_keyword_support=config.optional_keyword_support,
        comments=comments,
    )
    input_schema = compiler.message_schema_from_descriptor(
        method.input_type, config.extra_properties
    )
    return ToolDefinition(
        name=tool_name_for_method(method, config.max_tool_name_length),
        description=tool_description(method, comments),
        input_schema=input_schema,
        method_full_name=method.full_name,
    )


def build_service_tools(
    service: ServiceDescriptor,
    config: GeneratorConfig | None = None,
    comments: CommentIndex | None = None,
) -> list[ToolDefinition]:
    """Builds tool definitions for every unary method of a service."""
    tools = [
        build_method_tool(method, config, comments)
        for method in unary_methods(service)
    ]
    logger.debug(
        'Built %d tools for service %s', len(tools), service.full_name
    )
    return tools

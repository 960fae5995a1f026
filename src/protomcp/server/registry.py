"""Registry of generated tools and helpers to populate it from services."""

import logging

from collections.abc import Callable, Mapping
from typing import Any

from google.protobuf.descriptor import MethodDescriptor, ServiceDescriptor
from google.protobuf.message import Message

from protomcp.config import GeneratorConfig
from protomcp.schema.comments import CommentIndex
from protomcp.server.handler import Invoker, ToolCallContext, ToolHandler
from protomcp.tools import build_method_tool, unary_methods
from protomcp.types import ToolDefinition, ToolResult
from protomcp.utils.errors import ProtoMCPError, ToolNotFoundError


logger = logging.getLogger(__name__)


class ToolRegistry:
    """Holds tool handlers by tool name.

    The registry is filled once at startup and only read afterwards, so
    concurrent calls need no locking.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, ToolHandler] = {}

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def register(self, handler: ToolHandler) -> None:
        """Adds a handler under its tool's name.

        Raises:
            ProtoMCPError: If a tool with the same name is already registered.
        """
        name = handler.tool.name
        if name in self._handlers:
            raise ProtoMCPError(f'Tool {name} is already registered')
        self._handlers[name] = handler
        logger.debug('Registered tool %s', name)

    def tools(self) -> list[ToolDefinition]:
        """Returns the registered tool definitions in registration order."""
        return [handler.tool for handler in self._handlers.values()]

    def get(self, name: str) -> ToolHandler:
        """Returns the handler for `name`.

        Raises:
            ToolNotFoundError: If no such tool is registered.
        """
        try:
            return self._handlers[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    async def call(
        self, name: str, arguments: Mapping[str, Any] | None
    ) -> ToolResult:
        """Runs the tool called `name` with `arguments`."""
        return await self.get(name)(arguments)


def _register_service(
    registry: ToolRegistry,
    service: ServiceDescriptor,
    invoker_for: Callable[[MethodDescriptor], Invoker],
    config: GeneratorConfig | None,
    comments: CommentIndex | None,
) -> list[ToolDefinition]:
    config = config or GeneratorConfig()
    tools = []
    for method in unary_methods(service):
        tool = build_method_tool(method, config, comments)
        registry.register(
            ToolHandler(
                tool,
                method,
                invoker_for(method),
                config.extra_properties,
                validate=config.validate_arguments,
                toon=config.toon_responses,
            )
        )
        tools.append(tool)
    logger.info(
        'Registered %d tools for service %s', len(tools), service.full_name
    )
    return tools


def register_service_handler(
    registry: ToolRegistry,
    service: ServiceDescriptor,
    servicer: Any,
    config: GeneratorConfig | None = None,
    comments: CommentIndex | None = None,
) -> list[ToolDefinition]:
    """Registers tools that call a local service implementation.

    For every unary method `Foo`, `servicer.Foo(request, context)` is called
    with the decoded request and a `ToolCallContext`. The method may be a
    regular function or a coroutine function.

    Returns:
        The tool definitions that were registered.

    Raises:
        AttributeError: If the servicer lacks a method of the service.
    """

    def invoker_for(method: MethodDescriptor) -> Invoker:
        return getattr(servicer, method.name)

    return _register_service(registry, service, invoker_for, config, comments)


def forward_to_client(
    registry: ToolRegistry,
    service: ServiceDescriptor,
    stub: Any,
    config: GeneratorConfig | None = None,
    comments: CommentIndex | None = None,
) -> list[ToolDefinition]:
    """Registers tools that forward calls to a gRPC client stub.

    For every unary method `Foo`, `stub.Foo(request, metadata=...)` is
    called. Extra property values are sent as gRPC metadata under their
    context keys. Both `grpc` and `grpc.aio` stubs are supported.

    Returns:
        The tool definitions that were registered.

    Raises:
        AttributeError: If the stub lacks a method of the service.
    """

    def invoker_for(method: MethodDescriptor) -> Invoker:
        target = getattr(stub, method.name)

        def invoke(request: Message, context: ToolCallContext) -> Any:
            metadata = list(context.metadata.items()) or None
            return target(request, metadata=metadata)

        return invoke

    return _register_service(registry, service, invoker_for, config, comments)

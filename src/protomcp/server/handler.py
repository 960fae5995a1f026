"""Execute a tool call against a unary RPC implementation.

A call goes through three steps: the JSON arguments are decoded into the
typed request message, the request is handed to an invoker (a local
servicer method or a gRPC client stub), and the response message is encoded
back to JSON text.
"""

import inspect
import json
import logging

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from google.protobuf import message_factory
from google.protobuf.descriptor import MethodDescriptor
from google.protobuf.json_format import MessageToDict, ParseDict, ParseError
from google.protobuf.message import Message

from protomcp.runtime.oneof import flatten_oneof_fields
from protomcp.runtime.toon import compress_to_toon
from protomcp.schema.validation import build_validator, validate_arguments
from protomcp.types import ExtraProperty, ToolDefinition, ToolResult
from protomcp.utils.errors import ArgumentValidationError


try:
    import grpc
except ImportError:
    grpc = None  # type: ignore[assignment]


logger = logging.getLogger(__name__)

_RPC_ERRORS: tuple[type[BaseException], ...] = (
    (grpc.RpcError,) if grpc is not None else ()
)


@dataclass
class ToolCallContext:
    """Per-call information handed to servicer implementations.

    Attributes:
        tool_name: Name of the tool being called.
        metadata: Extra property values keyed by their context key.
    """

    tool_name: str
    metadata: dict[str, str] = field(default_factory=dict)


Invoker = Callable[[Message, ToolCallContext], Any]
"""Calls the RPC; may return the response message or an awaitable of it."""


def _describe_rpc_error(error: BaseException) -> str:
    code = error.code() if callable(getattr(error, 'code', None)) else None
    details = (
        error.details() if callable(getattr(error, 'details', None)) else None
    )
    if code is None:
        return str(error)
    name = getattr(code, 'name', str(code))
    return f'{name}: {details}' if details else name


class ToolHandler:
    """Runs tool calls for one RPC method."""

    def __init__(
        self,
        tool: ToolDefinition,
        method: MethodDescriptor,
        invoker: Invoker,
        extra_properties: Sequence[ExtraProperty] = (),
        validate: bool = False,
        toon: bool = False,
    ):
        """Initializes the ToolHandler.

        Args:
            tool: The tool definition generated for `method`.
            method: The RPC method the tool calls.
            invoker: Callable performing the RPC.
            extra_properties: Tool arguments that are moved into the call
                context instead of being decoded.
            validate: Whether arguments are checked against the tool's input
                schema before decoding.
            toon: Whether responses are rendered in TOON instead of JSON.
        """
        self.tool = tool
        self.method = method
        self._invoker = invoker
        self._extra_properties = tuple(extra_properties)
        self._request_class = message_factory.GetMessageClass(
            method.input_type
        )
        self._validator = (
            build_validator(tool.input_schema) if validate else None
        )
        self._toon = toon

    def decode(
        self, arguments: Mapping[str, Any] | None
    ) -> tuple[Message, ToolCallContext]:
        """Turns tool arguments into a request message and call context.

        Raises:
            ArgumentValidationError: If validation is enabled and the
                arguments do not match the input schema.
            ParseError: If the arguments do not decode into the request.
        """
        arguments = dict(arguments or {})
        if self._validator is not None:
            validate_arguments(arguments, self._validator)

        context = ToolCallContext(tool_name=self.tool.name)
        for extra in self._extra_properties:
            value = arguments.pop(extra.name, None)
            if value is not None:
                context.metadata[extra.context_key] = str(value)

        request = self._request_class()
        ParseDict(flatten_oneof_fields(arguments), request)
        return request, context

    @staticmethod
    def encode(response: Message, *, toon: bool = False) -> str:
        """Encodes a response message as JSON, or as TOON if `toon` is set."""
        text = json.dumps(
            MessageToDict(response, preserving_proto_field_name=True)
        )
        return compress_to_toon(text) if toon else text

    async def __call__(self, arguments: Mapping[str, Any] | None) -> ToolResult:
        """Runs one tool call.

        Invalid arguments and gRPC errors are reported as error results.
        Any other exception raised by the invoker propagates.
        """
        try:
            request, context = self.decode(arguments)
        except (ArgumentValidationError, ParseError) as e:
            logger.warning('Rejected arguments for %s: %s', self.tool.name, e)
            return ToolResult(text=f'Invalid arguments: {e}', is_error=True)

        try:
            response = self._invoker(request, context)
            if inspect.isawaitable(response):
                response = await response
        except _RPC_ERRORS as e:
            message = _describe_rpc_error(e)
            logger.warning('RPC %s failed: %s', self.method.full_name, message)
            return ToolResult(text=f'RPC failed: {message}', is_error=True)
        except Exception:
            logger.exception('Tool %s failed', self.tool.name)
            raise

        return ToolResult(text=self.encode(response, toon=self._toon))

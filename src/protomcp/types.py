"""Types describing generated tools and their results.

These types are not derived from protobuf descriptors: they carry the
caller supplied extension points and the artifacts produced for the MCP
layer.
"""

from typing import Any

from pydantic import BaseModel, Field


class ProtoMCPBaseModel(BaseModel):
    """Base model for all protomcp types."""

    model_config = {
        'populate_by_name': True,
        'arbitrary_types_allowed': True,
    }


class ExtraProperty(ProtoMCPBaseModel):
    """A tool argument that does not correspond to any protobuf field.

    Extra properties are merged into every tool's input schema as string
    properties. At call time their values are removed from the arguments
    before decoding and propagated under `context_key`.
    """

    name: str
    """Property name as it appears in the tool's input schema."""
    description: str = ''
    """Human readable description shown to the model."""
    required: bool = False
    """Whether the property is listed in the input schema's `required`."""
    context_key: str
    """Key the value is propagated under (call context or gRPC metadata)."""

    def to_schema(self) -> dict[str, Any]:
        """Returns the JSON Schema property for this extra property."""
        schema: dict[str, Any] = {'type': 'string'}
        if self.description:
            schema['description'] = self.description
        return schema


class ToolDefinition(ProtoMCPBaseModel):
    """A tool generated from a unary RPC method."""

    name: str
    """Tool name, unique within a registry and bounded in length."""
    description: str
    input_schema: dict[str, Any] = Field(default_factory=dict)
    """JSON Schema document for the tool's arguments."""
    method_full_name: str
    """Fully qualified name of the RPC method backing the tool."""


class ToolResult(ProtoMCPBaseModel):
    """Outcome of a single tool call."""

    text: str
    """JSON encoded response message, or an error description."""
    is_error: bool = False


__all__ = [
    'ExtraProperty',
    'ProtoMCPBaseModel',
    'ToolDefinition',
    'ToolResult',
]

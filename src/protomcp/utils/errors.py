"""Exceptions raised by protomcp.

Schema compilation errors propagate to the caller of the compiler entry
points. Tool call errors are raised by the registry and the handlers and are
turned into error results at the MCP boundary.
"""

from typing import Any


class ProtoMCPError(Exception):
    """Base exception for protomcp errors."""


class SchemaCompilationError(ProtoMCPError):
    """Raised when a descriptor cannot be compiled into a JSON Schema."""


class UnsupportedFieldError(SchemaCompilationError):
    """Raised for a field whose descriptor kind has no JSON Schema mapping."""

    def __init__(self, field_name: str, field_type: Any):
        """Initializes the UnsupportedFieldError.

        Args:
            field_name: Fully qualified name of the offending field.
            field_type: The descriptor type code of the field.
        """
        self.field_name = field_name
        self.field_type = field_type
        super().__init__(
            f'Unsupported field kind {field_type!r} for field {field_name}'
        )


class ConfigError(ProtoMCPError):
    """Raised when a generator configuration value is invalid."""


class ToolNotFoundError(ProtoMCPError):
    """Raised when a tool call names a tool that is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Unknown tool: {name}')


class ToolCallError(ProtoMCPError):
    """Raised at the MCP boundary for a call that produced an error result."""


class ArgumentValidationError(ProtoMCPError):
    """Raised when tool call arguments do not satisfy the input schema."""

    def __init__(
        self,
        message: str,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(message)
        self.errors = errors or []


__all__ = [
    'ArgumentValidationError',
    'ConfigError',
    'ProtoMCPError',
    'SchemaCompilationError',
    'ToolCallError',
    'ToolNotFoundError',
    'UnsupportedFieldError',
]

"""Utility functions for protomcp."""

from protomcp.utils.errors import (
    ArgumentValidationError,
    ConfigError,
    ProtoMCPError,
    SchemaCompilationError,
    ToolCallError,
    ToolNotFoundError,
    UnsupportedFieldError,
)
from protomcp.utils.naming import mangle_head_if_too_long


__all__ = [
    'ArgumentValidationError',
    'ConfigError',
    'ProtoMCPError',
    'SchemaCompilationError',
    'ToolCallError',
    'ToolNotFoundError',
    'UnsupportedFieldError',
    'mangle_head_if_too_long',
]

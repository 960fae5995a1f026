"""Protobuf descriptor to JSON Schema compilation."""

from protomcp.schema.comments import CommentIndex
from protomcp.schema.compiler import (
    SchemaCompiler,
    compile_message_schema,
    kind_to_type,
)
from protomcp.schema.definitions import DefinitionsTable
from protomcp.schema.required import is_field_required, is_oneof_required


__all__ = [
    'CommentIndex',
    'DefinitionsTable',
    'SchemaCompiler',
    'compile_message_schema',
    'is_field_required',
    'is_oneof_required',
    'kind_to_type',
]

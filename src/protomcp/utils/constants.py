"""Constants shared by the schema compiler, the tool builder and the runtime."""

ONEOF_PROPERTY_SUFFIX = 'OneOfType'
"""Suffix of the property that carries a compiled oneof group."""

ONEOF_DISCRIMINATOR = 'object_type'
"""Key naming the chosen variant inside a oneof wrapper object."""

DEFINITIONS_KEY = '$defs'
DEFINITIONS_REF_PREFIX = '#/$defs/'

DEFAULT_MAX_TOOL_NAME_LENGTH = 64
"""Tool name limit enforced by most MCP clients and model providers."""

TOOL_NAME_HASH_LENGTH = 10

STRUCT_FULL_NAME = 'google.protobuf.Struct'
VALUE_FULL_NAME = 'google.protobuf.Value'
LIST_VALUE_FULL_NAME = 'google.protobuf.ListValue'
TIMESTAMP_FULL_NAME = 'google.protobuf.Timestamp'

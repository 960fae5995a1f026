"""Schemas for well-known protobuf types with their own JSON encoding.

Only the types listed here are special cased. Any other message, including
other `google.protobuf.*` types, is compiled like a regular message.
"""

from collections.abc import Callable
from typing import Any

from protomcp.utils.constants import (
    LIST_VALUE_FULL_NAME,
    STRUCT_FULL_NAME,
    TIMESTAMP_FULL_NAME,
    VALUE_FULL_NAME,
)


def _struct_schema() -> dict[str, Any]:
    return {'type': 'object', 'additionalProperties': True}


def _value_schema() -> dict[str, Any]:
    # No type keyword: any JSON value is accepted.
    return {
        'description': (
            'A dynamic JSON value: object, array, string, number, '
            'boolean or null.'
        ),
    }


def _list_value_schema() -> dict[str, Any]:
    return {
        'type': 'array',
        'items': {},
        'description': 'A JSON array whose elements may be any JSON value.',
    }


def _timestamp_schema() -> dict[str, Any]:
    return {'type': ['string', 'null'], 'format': 'date-time'}


_WELL_KNOWN_SCHEMAS: dict[str, Callable[[], dict[str, Any]]] = {
    STRUCT_FULL_NAME: _struct_schema,
    VALUE_FULL_NAME: _value_schema,
    LIST_VALUE_FULL_NAME: _list_value_schema,
    TIMESTAMP_FULL_NAME: _timestamp_schema,
}


def is_well_known(full_name: str) -> bool:
    """Returns True if `full_name` has a dedicated schema."""
    return full_name in _WELL_KNOWN_SCHEMAS


def well_known_schema(full_name: str) -> dict[str, Any] | None:
    """Returns a fresh schema for a well-known type, or None for other types."""
    factory = _WELL_KNOWN_SCHEMAS.get(full_name)
    if factory is None:
        return None
    return factory()

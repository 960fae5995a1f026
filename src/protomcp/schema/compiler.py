"""Compile protobuf message descriptors into JSON Schema.

The compiler walks a message descriptor and produces a JSON Schema object
tree. Every distinct message type reached through a field is compiled once
into a shared `DefinitionsTable` and referenced with `$ref` afterwards,
which also breaks reference cycles.

Encoding rules follow the protobuf JSON mapping where it matters to a model
producing arguments:

- 64-bit integers are decimal strings, since JSON number consumers lose
  precision above 2**53.
- `oneof` groups become a single `<oneof>OneOfType` property holding a
  discriminated union keyed by `object_type`; see
  `protomcp.runtime.oneof.flatten_oneof_fields` for the call-time rewrite.
- `Struct`, `Value`, `ListValue` and `Timestamp` use their JSON forms.
"""

import logging

from collections.abc import Sequence
from typing import Any

from google.protobuf.descriptor import (
    Descriptor,
    EnumDescriptor,
    FieldDescriptor,
    OneofDescriptor,
)

from protomcp.schema.comments import CommentIndex
from protomcp.schema.definitions import DefinitionsTable
from protomcp.schema.required import (
    is_field_required,
    is_map_field,
    is_oneof_required,
    is_repeated,
    is_synthetic_oneof,
)
from protomcp.schema.wellknown import is_well_known, well_known_schema
from protomcp.types import ExtraProperty
from protomcp.utils.constants import (
    DEFINITIONS_KEY,
    DEFINITIONS_REF_PREFIX,
    ONEOF_DISCRIMINATOR,
    ONEOF_PROPERTY_SUFFIX,
)
from protomcp.utils.errors import SchemaCompilationError, UnsupportedFieldError


logger = logging.getLogger(__name__)

_INTEGER_TYPES = frozenset(
    {
        FieldDescriptor.TYPE_INT32,
        FieldDescriptor.TYPE_SINT32,
        FieldDescriptor.TYPE_SFIXED32,
        FieldDescriptor.TYPE_UINT32,
        FieldDescriptor.TYPE_FIXED32,
    }
)

_INT64_TYPES = frozenset(
    {
        FieldDescriptor.TYPE_INT64,
        FieldDescriptor.TYPE_SINT64,
        FieldDescriptor.TYPE_SFIXED64,
        FieldDescriptor.TYPE_UINT64,
        FieldDescriptor.TYPE_FIXED64,
    }
)

_KIND_TO_TYPE: dict[int, str] = {
    FieldDescriptor.TYPE_BOOL: 'boolean',
    FieldDescriptor.TYPE_STRING: 'string',
    FieldDescriptor.TYPE_BYTES: 'string',
    FieldDescriptor.TYPE_FLOAT: 'number',
    FieldDescriptor.TYPE_DOUBLE: 'number',
    FieldDescriptor.TYPE_ENUM: 'integer',
    **{kind: 'integer' for kind in _INTEGER_TYPES},
    **{kind: 'string' for kind in _INT64_TYPES},
}

_BYTES_DESCRIPTION = 'Base64-encoded bytes.'


def kind_to_type(kind: int) -> str | None:
    """Returns the JSON Schema `type` for a scalar or enum field type code.

    Message and group kinds have no single JSON type and return None.
    """
    return _KIND_TO_TYPE.get(kind)


def _attach_description(schema: dict[str, Any], text: str | None) -> None:
    if not text:
        return
    existing = schema.get('description')
    schema['description'] = f'{text}\n\n{existing}' if existing else text


def _map_key_schema(key_field: FieldDescriptor) -> dict[str, Any]:
    if key_field.type == FieldDescriptor.TYPE_STRING:
        return {'type': 'string'}
    if key_field.type == FieldDescriptor.TYPE_BOOL:
        return {'type': 'string', 'description': 'Either "true" or "false".'}
    return {'type': 'string', 'description': 'A decimal integer.'}


def _enum_schema(enum: EnumDescriptor) -> dict[str, Any]:
    values = ', '.join(f'{value.name}={value.number}' for value in enum.values)
    return {
        'type': 'integer',
        'description': f'{enum.name} enum. Allowed values: {values}.',
    }


class SchemaCompiler:
    """Compiles message descriptors into JSON Schema.

    One compiler owns one `DefinitionsTable`. Compiling several messages
    with the same compiler shares definitions between them; use separate
    compilers for independent or concurrent compilations.
    """

    def __init__(
        self,
        definitions: DefinitionsTable | None = None,
        *,
        optional_keyword_support: bool = False,
        comments: CommentIndex | None = None,
    ):
        """Initializes the SchemaCompiler.

        Args:
            definitions: Table to collect message definitions into. A new
                table is created when omitted.
            optional_keyword_support: Whether singular fields without the
                proto3 `optional` keyword are required.
            comments: Source comments used for `description` keywords.
        """
        self.definitions = (
            definitions if definitions is not None else DefinitionsTable()
        )
        self.optional_keyword_support = optional_keyword_support
        self.comments = comments
        # Messages whose schema is being built on the current call stack.
        self._in_progress: set[str] = set()

    def _comment(self, full_name: str) -> str | None:
        if self.comments is None:
            return None
        return self.comments.get(full_name)

    def get_type(self, field: FieldDescriptor) -> dict[str, Any]:
        """Returns the schema of a single field.

        Raises:
            UnsupportedFieldError: If the field kind has no JSON mapping.
        """
        if is_map_field(field):
            schema = self._map_schema(field)
        elif is_repeated(field):
            schema = {'type': 'array', 'items': self._value_schema(field)}
        else:
            schema = self._value_schema(field)
        _attach_description(schema, self._comment(field.full_name))
        return schema

    def _value_schema(self, field: FieldDescriptor) -> dict[str, Any]:
        """Schema of one value of the field, ignoring cardinality."""
        if field.type == FieldDescriptor.TYPE_MESSAGE:
            return self.message_reference(field.message_type)
        if field.type == FieldDescriptor.TYPE_ENUM:
            return _enum_schema(field.enum_type)
        json_type = kind_to_type(field.type)
        if json_type is None:
            raise UnsupportedFieldError(field.full_name, field.type)
        schema: dict[str, Any] = {'type': json_type}
        if field.type == FieldDescriptor.TYPE_BYTES:
            schema['description'] = _BYTES_DESCRIPTION
        return schema

    def _map_schema(self, field: FieldDescriptor) -> dict[str, Any]:
        entry = field.message_type
        return {
            'type': 'object',
            'additionalProperties': self._value_schema(
                entry.fields_by_name['value']
            ),
            'propertyNames': _map_key_schema(entry.fields_by_name['key']),
        }

    def message_reference(self, descriptor: Descriptor) -> dict[str, Any]:
        """Returns the schema used wherever `descriptor` is referenced.

        Well-known types are inlined; other messages are compiled into the
        definitions table if needed and referenced by `$ref`.
        """
        schema = well_known_schema(descriptor.full_name)
        if schema is not None:
            return schema
        self.compile_definition(descriptor)
        return {'$ref': f'{DEFINITIONS_REF_PREFIX}{descriptor.full_name}'}

    def compile_definition(self, descriptor: Descriptor) -> None:
        """Ensures `descriptor` has an entry in the definitions table.

        The name is reserved before the fields are compiled, so recursive
        references terminate. If compilation fails, every entry added since
        the reservation is dropped and the error propagates.
        """
        name = descriptor.full_name
        if name in self.definitions:
            if self.definitions.is_pending(name):
                logger.debug('Reference cycle through %s', name)
            return
        checkpoint = self.definitions.checkpoint()
        self.definitions.reserve(name)
        logger.debug('Compiling definition %s', name)
        try:
            schema = self.message_schema(descriptor)
        except SchemaCompilationError:
            self.definitions.rollback(checkpoint)
            raise
        self.definitions.define(name, schema)

    def message_schema(self, descriptor: Descriptor) -> dict[str, Any]:
        """Returns the object schema of a message.

        The result has one property per regular field and one
        `<oneof>OneOfType` property per oneof group, a `required` list
        computed from the required-field policy, and rejects unknown
        properties.
        """
        properties: dict[str, Any] = {}
        required: list[str] = []
        seen_oneofs: set[str] = set()

        # A message compiled into $defs may already be on the stack inline.
        entered = descriptor.full_name not in self._in_progress
        self._in_progress.add(descriptor.full_name)
        try:
            for field in descriptor.fields:
                oneof = field.containing_oneof
                if oneof is not None and not is_synthetic_oneof(oneof):
                    if oneof.name in seen_oneofs:
                        continue
                    seen_oneofs.add(oneof.name)
                    property_name = f'{oneof.name}{ONEOF_PROPERTY_SUFFIX}'
                    properties[property_name] = self.oneof_schema(oneof)
                    if is_oneof_required(
                        oneof,
                        optional_keyword_support=self.optional_keyword_support,
                    ):
                        required.append(property_name)
                    continue

                properties[field.name] = self.get_type(field)
                if is_field_required(
                    field,
                    optional_keyword_support=self.optional_keyword_support,
                ):
                    required.append(field.name)
        finally:
            if entered:
                self._in_progress.discard(descriptor.full_name)

        schema: dict[str, Any] = {
            'type': 'object',
            'properties': properties,
            'required': required,
            'additionalProperties': False,
        }
        _attach_description(schema, self._comment(descriptor.full_name))
        return schema

    def oneof_schema(self, oneof: OneofDescriptor) -> dict[str, Any]:
        """Returns the discriminated union schema of a oneof group.

        Each variant carries a `title` naming its member, so clients can
        label the choices.
        """
        schema: dict[str, Any] = {
            'oneOf': [self._oneof_variant(field) for field in oneof.fields]
        }
        _attach_description(schema, self._comment(oneof.full_name))
        return schema

    def _can_inline(self, field: FieldDescriptor) -> bool:
        """Whether a message member's fields can sit next to `object_type`.

        Not for well-known types, messages already being inlined further up
        the stack, or messages with a field named `object_type` or named
        like the member, which the flattener would misread.
        """
        if field.type != FieldDescriptor.TYPE_MESSAGE:
            return False
        message = field.message_type
        return (
            not is_well_known(message.full_name)
            and message.full_name not in self._in_progress
            and ONEOF_DISCRIMINATOR not in message.fields_by_name
            and field.name not in message.fields_by_name
        )

    def _oneof_variant(self, field: FieldDescriptor) -> dict[str, Any]:
        discriminator = {'type': 'string', 'const': field.name}

        if self._can_inline(field):
            message = field.message_type
            # The variant's own fields sit next to the discriminator.
            body = self.message_schema(message)
            properties = {ONEOF_DISCRIMINATOR: discriminator}
            properties.update(body['properties'])
            required = [ONEOF_DISCRIMINATOR, *body['required']]
            description = self._comment(field.full_name)
        else:
            properties = {
                ONEOF_DISCRIMINATOR: discriminator,
                field.name: self.get_type(field),
            }
            required = [ONEOF_DISCRIMINATOR, field.name]
            description = None

        variant: dict[str, Any] = {
            'type': 'object',
            'title': field.name,
            'properties': properties,
            'required': required,
            'additionalProperties': False,
        }
        _attach_description(variant, description)
        return variant

    def message_schema_from_descriptor(
        self,
        descriptor: Descriptor,
        extra_properties: Sequence[ExtraProperty] | None = None,
    ) -> dict[str, Any]:
        """Returns a complete schema document for a top-level message.

        Extra properties are merged into `properties` and, when marked
        required, into `required`. Definitions collected so far are attached
        under `$defs`.

        Raises:
            SchemaCompilationError: If a field cannot be compiled or an extra
                property collides with a field.
        """
        checkpoint = self.definitions.checkpoint()
        try:
            schema = self.message_schema(descriptor)
        except SchemaCompilationError:
            self.definitions.rollback(checkpoint)
            raise

        for extra in extra_properties or ():
            if extra.name in schema['properties']:
                raise SchemaCompilationError(
                    f'Extra property {extra.name} collides with a field of '
                    f'{descriptor.full_name}'
                )
            schema['properties'][extra.name] = extra.to_schema()
            if extra.required:
                schema['required'].append(extra.name)

        definitions = self.definitions.to_dict()
        if definitions:
            schema[DEFINITIONS_KEY] = definitions
        return schema


def compile_message_schema(
    descriptor: Descriptor,
    *,
    optional_keyword_support: bool = False,
    comments: CommentIndex | None = None,
    extra_properties: Sequence[ExtraProperty] | None = None,
) -> dict[str, Any]:
    """Compiles one message into a standalone schema document.

    A fresh definitions table is used, so the result is independent of any
    other compilation.
    """
    compiler = SchemaCompiler(
        optional_keyword_support=optional_keyword_support,
        comments=comments,
    )
    return compiler.message_schema_from_descriptor(descriptor, extra_properties)

"""Policy deciding which fields a compiled schema lists as required.

Three inputs decide: whether optional keyword support is enabled for the
schema, whether the field carries `google.api.field_behavior = REQUIRED`,
and whether the field is repeated or a map. Repeated and map fields are never
required.
"""

from google.api import field_behavior_pb2
from google.protobuf.descriptor import (
    FieldDescriptor,
    OneofDescriptor,
)


def is_repeated(field: FieldDescriptor) -> bool:
    """Returns True for repeated fields, maps included."""
    return field.is_repeated


def is_map_field(field: FieldDescriptor) -> bool:
    """Returns True if the field is a protobuf map."""
    return (
        field.type == FieldDescriptor.TYPE_MESSAGE
        and field.message_type is not None
        and field.message_type.GetOptions().map_entry
    )


def is_synthetic_oneof(oneof: OneofDescriptor) -> bool:
    """Returns True for the oneof protoc creates for a proto3 `optional` field.

    protoc names these `_<field>` (prefixed with `X` on collisions) and gives
    them exactly one member.
    """
    return len(oneof.fields) == 1 and oneof.name.lstrip('X') == (
        f'_{oneof.fields[0].name}'
    )


def is_explicit_optional(field: FieldDescriptor) -> bool:
    """Returns True if the field was declared with proto3 `optional`."""
    oneof = field.containing_oneof
    return oneof is not None and is_synthetic_oneof(oneof)


def has_required_annotation(field: FieldDescriptor) -> bool:
    """Returns True if the field is annotated as REQUIRED.

    The annotation is `google.api.field_behavior`, the one the Google API
    linter and gRPC gateways use.
    """
    options = field.GetOptions()
    behaviors = options.Extensions[field_behavior_pb2.field_behavior]
    return field_behavior_pb2.REQUIRED in behaviors


def is_field_required(
    field: FieldDescriptor, *, optional_keyword_support: bool = False
) -> bool:
    """Decides whether a field belongs in its message schema's `required` list.

    Args:
        field: The field to check.
        optional_keyword_support: Whether fields without the `optional`
            keyword are treated as required.

    Returns:
        True if the field is required.
    """
    if is_repeated(field) or is_map_field(field):
        return False
    if has_required_annotation(field):
        return True
    if optional_keyword_support:
        return not is_explicit_optional(field)
    return False


def is_oneof_required(
    oneof: OneofDescriptor, *, optional_keyword_support: bool = False
) -> bool:
    """Decides whether a oneof group's property is required.

    A group is required when optional keyword support is enabled or when any
    of its members is annotated as required.
    """
    if optional_keyword_support:
        return True
    return any(has_required_annotation(field) for field in oneof.fields)

"""Shared fixtures: a test proto file loaded into an isolated descriptor pool.

The file is written as a text-format `FileDescriptorProto`, the form protoc
hands to plugins, so no generated `_pb2` modules are needed.
"""

from collections.abc import Callable

import pytest

from google.api import field_behavior_pb2
from google.protobuf import (
    descriptor_pb2,
    descriptor_pool,
    message_factory,
    struct_pb2,
    text_format,
    timestamp_pb2,
)
from google.protobuf.descriptor import Descriptor, ServiceDescriptor

from protomcp.schema.comments import CommentIndex


TEST_PROTO = """
name: "testdata/test.proto"
package: "testdata"
dependency: "google/protobuf/struct.proto"
dependency: "google/protobuf/timestamp.proto"
syntax: "proto3"
message_type {
  name: "Item"
  field { name: "id" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING }
  field { name: "name" number: 2 label: LABEL_OPTIONAL type: TYPE_STRING }
}
message_type {
  name: "CreateItemRequest"
  field { name: "name" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING }
  field {
    name: "description" number: 2 label: LABEL_OPTIONAL type: TYPE_STRING
    oneof_index: 1 proto3_optional: true
  }
  field { name: "tags" number: 3 label: LABEL_REPEATED type: TYPE_STRING }
  field {
    name: "labels" number: 4 label: LABEL_REPEATED type: TYPE_MESSAGE
    type_name: ".testdata.CreateItemRequest.LabelsEntry"
  }
  field { name: "thumbnail" number: 5 label: LABEL_OPTIONAL type: TYPE_BYTES }
  field {
    name: "product" number: 6 label: LABEL_OPTIONAL type: TYPE_MESSAGE
    type_name: ".testdata.ProductDetails" oneof_index: 0
  }
  field {
    name: "service" number: 7 label: LABEL_OPTIONAL type: TYPE_MESSAGE
    type_name: ".testdata.ServiceDetails" oneof_index: 0
  }
  nested_type {
    name: "LabelsEntry"
    field { name: "key" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING }
    field { name: "value" number: 2 label: LABEL_OPTIONAL type: TYPE_STRING }
    options { map_entry: true }
  }
  oneof_decl { name: "item_type" }
  oneof_decl { name: "_description" }
}
message_type {
  name: "ProductDetails"
  field { name: "price" number: 1 label: LABEL_OPTIONAL type: TYPE_DOUBLE }
  field { name: "quantity" number: 2 label: LABEL_OPTIONAL type: TYPE_INT32 }
}
message_type {
  name: "ServiceDetails"
  field { name: "duration" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING }
}
message_type {
  name: "CreateItemResponse"
  field { name: "id" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING }
}
message_type {
  name: "GetItemRequest"
  field { name: "id" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING }
}
message_type {
  name: "GetItemResponse"
  field {
    name: "item" number: 1 label: LABEL_OPTIONAL type: TYPE_MESSAGE
    type_name: ".testdata.Item"
  }
}
message_type {
  name: "WktTestMessage"
  field {
    name: "timestamp" number: 1 label: LABEL_OPTIONAL type: TYPE_MESSAGE
    type_name: ".google.protobuf.Timestamp"
  }
  field {
    name: "struct_field" number: 2 label: LABEL_OPTIONAL type: TYPE_MESSAGE
    type_name: ".google.protobuf.Struct"
  }
  field {
    name: "value_field" number: 3 label: LABEL_OPTIONAL type: TYPE_MESSAGE
    type_name: ".google.protobuf.Value"
  }
  field {
    name: "list_value" number: 4 label: LABEL_OPTIONAL type: TYPE_MESSAGE
    type_name: ".google.protobuf.ListValue"
  }
  field {
    name: "timestamps" number: 5 label: LABEL_REPEATED type: TYPE_MESSAGE
    type_name: ".google.protobuf.Timestamp"
  }
}
message_type {
  name: "MapTestMessage"
  field {
    name: "string_map" number: 1 label: LABEL_REPEATED type: TYPE_MESSAGE
    type_name: ".testdata.MapTestMessage.StringMapEntry"
  }
  field {
    name: "item_map" number: 2 label: LABEL_REPEATED type: TYPE_MESSAGE
    type_name: ".testdata.MapTestMessage.ItemMapEntry"
  }
  field {
    name: "flag_map" number: 3 label: LABEL_REPEATED type: TYPE_MESSAGE
    type_name: ".testdata.MapTestMessage.FlagMapEntry"
  }
  nested_type {
    name: "StringMapEntry"
    field { name: "key" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING }
    field { name: "value" number: 2 label: LABEL_OPTIONAL type: TYPE_STRING }
    options { map_entry: true }
  }
  nested_type {
    name: "ItemMapEntry"
    field { name: "key" number: 1 label: LABEL_OPTIONAL type: TYPE_INT32 }
    field {
      name: "value" number: 2 label: LABEL_OPTIONAL type: TYPE_MESSAGE
      type_name: ".testdata.Item"
    }
    options { map_entry: true }
  }
  nested_type {
    name: "FlagMapEntry"
    field { name: "key" number: 1 label: LABEL_OPTIONAL type: TYPE_BOOL }
    field { name: "value" number: 2 label: LABEL_OPTIONAL type: TYPE_INT64 }
    options { map_entry: true }
  }
}
message_type {
  name: "ScalarTestMessage"
  field { name: "bool_field" number: 1 label: LABEL_OPTIONAL type: TYPE_BOOL }
  field { name: "string_field" number: 2 label: LABEL_OPTIONAL type: TYPE_STRING }
  field { name: "bytes_field" number: 3 label: LABEL_OPTIONAL type: TYPE_BYTES }
  field { name: "int32_field" number: 4 label: LABEL_OPTIONAL type: TYPE_INT32 }
  field { name: "uint32_field" number: 5 label: LABEL_OPTIONAL type: TYPE_UINT32 }
  field { name: "int64_field" number: 6 label: LABEL_OPTIONAL type: TYPE_INT64 }
  field { name: "uint64_field" number: 7 label: LABEL_OPTIONAL type: TYPE_UINT64 }
  field { name: "sint64_field" number: 8 label: LABEL_OPTIONAL type: TYPE_SINT64 }
  field { name: "fixed64_field" number: 9 label: LABEL_OPTIONAL type: TYPE_FIXED64 }
  field { name: "float_field" number: 10 label: LABEL_OPTIONAL type: TYPE_FLOAT }
  field { name: "double_field" number: 11 label: LABEL_OPTIONAL type: TYPE_DOUBLE }
  field {
    name: "status" number: 12 label: LABEL_OPTIONAL type: TYPE_ENUM
    type_name: ".testdata.Status"
  }
  field { name: "counts" number: 13 label: LABEL_REPEATED type: TYPE_INT64 }
}
message_type {
  name: "TreeNode"
  field { name: "value" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING }
  field {
    name: "children" number: 2 label: LABEL_REPEATED type: TYPE_MESSAGE
    type_name: ".testdata.TreeNode"
  }
}
message_type {
  name: "Ping"
  field {
    name: "pong" number: 1 label: LABEL_OPTIONAL type: TYPE_MESSAGE
    type_name: ".testdata.Pong"
  }
}
message_type {
  name: "Pong"
  field {
    name: "ping" number: 1 label: LABEL_OPTIONAL type: TYPE_MESSAGE
    type_name: ".testdata.Ping"
  }
}
message_type {
  name: "Diamond"
  field {
    name: "first" number: 1 label: LABEL_OPTIONAL type: TYPE_MESSAGE
    type_name: ".testdata.Item"
  }
  field {
    name: "second" number: 2 label: LABEL_OPTIONAL type: TYPE_MESSAGE
    type_name: ".testdata.Item"
  }
  field {
    name: "more" number: 3 label: LABEL_REPEATED type: TYPE_MESSAGE
    type_name: ".testdata.Item"
  }
}
message_type {
  name: "Event"
  field {
    name: "text" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING
    oneof_index: 0
  }
  field {
    name: "count" number: 2 label: LABEL_OPTIONAL type: TYPE_INT64
    oneof_index: 0
  }
  field {
    name: "item" number: 3 label: LABEL_OPTIONAL type: TYPE_MESSAGE
    type_name: ".testdata.Item" oneof_index: 0
  }
  field {
    name: "at" number: 4 label: LABEL_OPTIONAL type: TYPE_MESSAGE
    type_name: ".google.protobuf.Timestamp" oneof_index: 0
  }
  field { name: "source" number: 5 label: LABEL_OPTIONAL type: TYPE_STRING }
  oneof_decl { name: "payload" }
}
message_type {
  name: "Choice"
  field {
    name: "left" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING
    oneof_index: 0
  }
  field {
    name: "right" number: 2 label: LABEL_OPTIONAL type: TYPE_STRING
    oneof_index: 0
  }
  oneof_decl { name: "pick" }
}
message_type {
  name: "Outer"
  field {
    name: "inner" number: 1 label: LABEL_OPTIONAL type: TYPE_MESSAGE
    type_name: ".testdata.Outer.Inner"
  }
  nested_type {
    name: "Inner"
    field { name: "note" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING }
  }
}
message_type {
  name: "Expression"
  field {
    name: "literal" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING
    oneof_index: 0
  }
  field {
    name: "negate" number: 2 label: LABEL_OPTIONAL type: TYPE_MESSAGE
    type_name: ".testdata.Expression" oneof_index: 0
  }
  oneof_decl { name: "kind" }
}
message_type {
  name: "Note"
  field { name: "note" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING }
  field { name: "extra" number: 2 label: LABEL_OPTIONAL type: TYPE_STRING }
}
message_type {
  name: "Tagged"
  field {
    name: "object_type" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING
  }
  field { name: "label" number: 2 label: LABEL_OPTIONAL type: TYPE_STRING }
}
message_type {
  name: "Annotation"
  field {
    name: "note" number: 1 label: LABEL_OPTIONAL type: TYPE_MESSAGE
    type_name: ".testdata.Note" oneof_index: 0
  }
  field {
    name: "tagged" number: 2 label: LABEL_OPTIONAL type: TYPE_MESSAGE
    type_name: ".testdata.Tagged" oneof_index: 0
  }
  oneof_decl { name: "body" }
}
enum_type {
  name: "Status"
  value { name: "STATUS_UNSPECIFIED" number: 0 }
  value { name: "STATUS_ACTIVE" number: 1 }
  value { name: "STATUS_ARCHIVED" number: 2 }
}
service {
  name: "TestService"
  method {
    name: "CreateItem"
    input_type: ".testdata.CreateItemRequest"
    output_type: ".testdata.CreateItemResponse"
  }
  method {
    name: "GetItem"
    input_type: ".testdata.GetItemRequest"
    output_type: ".testdata.GetItemResponse"
  }
  method {
    name: "WatchItems"
    input_type: ".testdata.GetItemRequest"
    output_type: ".testdata.GetItemResponse"
    server_streaming: true
  }
}
"""

# (path, leading comment) pairs, as protoc records them in source_code_info.
TEST_COMMENTS: list[tuple[list[int], str]] = [
    ([4, 0], ' An item in the catalog.\n'),
    ([4, 0, 2, 1], ' Display name of the item.\n'),
    ([4, 14, 8, 0], ' What happened.\n'),
    ([4, 14, 2, 2], ' The affected item.\n'),
    ([4, 16], ' Wraps an inner detail.\n'),
    ([4, 16, 3, 0], ' Inner detail.\n'),
    ([4, 16, 3, 0, 2, 0], ' Free-form note.\n   Second line.\n'),
    ([6, 0, 2, 0], ' Creates an item.\n'),
]

REQUIRED_FIELDS: list[tuple[str, str]] = [
    ('CreateItemRequest', 'name'),
    ('CreateItemRequest', 'tags'),
    ('CreateItemRequest', 'labels'),
    ('Choice', 'left'),
]


def build_test_file_proto() -> descriptor_pb2.FileDescriptorProto:
    """Returns the test file with annotations and source comments."""
    file_proto = text_format.Parse(
        TEST_PROTO, descriptor_pb2.FileDescriptorProto()
    )
    messages = {message.name: message for message in file_proto.message_type}
    for message_name, field_name in REQUIRED_FIELDS:
        field = next(
            f for f in messages[message_name].field if f.name == field_name
        )
        field.options.Extensions[field_behavior_pb2.field_behavior].append(
            field_behavior_pb2.REQUIRED
        )
    for path, text in TEST_COMMENTS:
        location = file_proto.source_code_info.location.add()
        location.path.extend(path)
        location.leading_comments = text
    return file_proto


@pytest.fixture(scope='session')
def test_file_proto() -> descriptor_pb2.FileDescriptorProto:
    return build_test_file_proto()


@pytest.fixture(scope='session')
def pool(
    test_file_proto: descriptor_pb2.FileDescriptorProto,
) -> descriptor_pool.DescriptorPool:
    """An isolated pool holding the test file and its dependencies."""
    test_pool = descriptor_pool.DescriptorPool()
    test_pool.AddSerializedFile(struct_pb2.DESCRIPTOR.serialized_pb)
    test_pool.AddSerializedFile(timestamp_pb2.DESCRIPTOR.serialized_pb)
    test_pool.AddSerializedFile(test_file_proto.SerializeToString())
    return test_pool


@pytest.fixture(scope='session')
def message_descriptor(
    pool: descriptor_pool.DescriptorPool,
) -> Callable[[str], Descriptor]:
    """Looks up a test message by its short name."""

    def find(name: str) -> Descriptor:
        return pool.FindMessageTypeByName(f'testdata.{name}')

    return find


@pytest.fixture(scope='session')
def message_class(
    message_descriptor: Callable[[str], Descriptor],
) -> Callable[[str], type]:
    """Returns the generated message class of a test message."""

    def get(name: str) -> type:
        return message_factory.GetMessageClass(message_descriptor(name))

    return get


@pytest.fixture(scope='session')
def test_service(pool: descriptor_pool.DescriptorPool) -> ServiceDescriptor:
    return pool.FindServiceByName('testdata.TestService')


@pytest.fixture(scope='session')
def comment_index(
    test_file_proto: descriptor_pb2.FileDescriptorProto,
) -> CommentIndex:
    return CommentIndex.from_file_protos([test_file_proto])

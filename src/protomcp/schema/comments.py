"""Source comment lookup for descriptors.

Descriptors loaded at runtime do not keep their source comments, but the
`FileDescriptorProto`s handed to a protoc plugin do, in `source_code_info`.
A location is identified by a path of field numbers and indexes through the
file proto, for example `[4, 1, 3, 0, 2, 2]` is the third field of the first
nested message of the second top-level message. `CommentIndex` resolves
those paths to fully qualified names by walking nested message scopes.
"""

import logging

from collections.abc import Iterable

from google.protobuf import descriptor_pb2


logger = logging.getLogger(__name__)

_FILE = descriptor_pb2.FileDescriptorProto
_MESSAGE = descriptor_pb2.DescriptorProto
_SERVICE = descriptor_pb2.ServiceDescriptorProto

Path = tuple[int, ...]


def clean_comment(text: str) -> str:
    """Strips comment indentation and surrounding blank lines."""
    lines = [line.strip() for line in text.strip('\n').splitlines()]
    return '\n'.join(lines).strip()


class CommentIndex:
    """Leading (or, failing that, trailing) comments keyed by full name."""

    def __init__(self, comments: dict[str, str] | None = None) -> None:
        self._comments: dict[str, str] = dict(comments or {})

    @classmethod
    def from_file_protos(
        cls, files: Iterable[descriptor_pb2.FileDescriptorProto]
    ) -> 'CommentIndex':
        """Builds an index from file protos carrying `source_code_info`."""
        index = cls()
        for file_proto in files:
            index.add_file(file_proto)
        return index

    def __len__(self) -> int:
        return len(self._comments)

    def __contains__(self, full_name: object) -> bool:
        return full_name in self._comments

    def get(self, full_name: str) -> str | None:
        """Returns the comment attached to `full_name`, if any."""
        return self._comments.get(full_name)

    def add_file(self, file_proto: descriptor_pb2.FileDescriptorProto) -> None:
        """Indexes the comments of one file."""
        names = _index_file_paths(file_proto)
        added = 0
        for location in file_proto.source_code_info.location:
            name = names.get(tuple(location.path))
            if name is None:
                continue
            text = clean_comment(
                location.leading_comments or location.trailing_comments
            )
            if text:
                self._comments[name] = text
                added += 1
        logger.debug('Indexed %d comments from %s', added, file_proto.name)


def _index_file_paths(
    file_proto: descriptor_pb2.FileDescriptorProto,
) -> dict[Path, str]:
    names: dict[Path, str] = {}
    scope = file_proto.package

    for i, message in enumerate(file_proto.message_type):
        _index_message(
            message, (_FILE.MESSAGE_TYPE_FIELD_NUMBER, i), scope, names
        )
    for i, enum in enumerate(file_proto.enum_type):
        names[(_FILE.ENUM_TYPE_FIELD_NUMBER, i)] = _qualify(scope, enum.name)
    for i, service in enumerate(file_proto.service):
        path = (_FILE.SERVICE_FIELD_NUMBER, i)
        service_name = _qualify(scope, service.name)
        names[path] = service_name
        for j, method in enumerate(service.method):
            names[(*path, _SERVICE.METHOD_FIELD_NUMBER, j)] = (
                f'{service_name}.{method.name}'
            )
    return names


def _index_message(
    message: descriptor_pb2.DescriptorProto,
    path: Path,
    scope: str,
    names: dict[Path, str],
) -> None:
    full_name = _qualify(scope, message.name)
    names[path] = full_name
    for i, field in enumerate(message.field):
        names[(*path, _MESSAGE.FIELD_FIELD_NUMBER, i)] = (
            f'{full_name}.{field.name}'
        )
    for i, oneof in enumerate(message.oneof_decl):
        names[(*path, _MESSAGE.ONEOF_DECL_FIELD_NUMBER, i)] = (
            f'{full_name}.{oneof.name}'
        )
    for i, enum in enumerate(message.enum_type):
        names[(*path, _MESSAGE.ENUM_TYPE_FIELD_NUMBER, i)] = (
            f'{full_name}.{enum.name}'
        )
    # Nested messages are scoped by their enclosing message.
    for i, nested in enumerate(message.nested_type):
        _index_message(
            nested,
            (*path, _MESSAGE.NESTED_TYPE_FIELD_NUMBER, i),
            full_name,
            names,
        )


def _qualify(scope: str, name: str) -> str:
    return f'{scope}.{name}' if scope else name

"""The shared `$defs` table used while compiling one message closure."""

from collections.abc import Iterator
from typing import Any

from protomcp.utils.errors import SchemaCompilationError


class DefinitionsTable:
    """Maps fully qualified message names to their compiled schemas.

    A name is reserved before the message's fields are compiled and defined
    once compilation finishes, so a message that refers back to itself
    (directly or through other messages) finds its own name already present
    and is emitted as a `$ref`.

    A table belongs to a single compilation run. Sharing one table between
    concurrently running compilers needs external locking, because reserve
    and define are separate steps.
    """

    def __init__(self) -> None:
        self._entries: dict[str, dict[str, Any] | None] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def reserve(self, name: str) -> None:
        """Marks `name` as being compiled.

        Raises:
            SchemaCompilationError: If the name is already reserved or defined.
        """
        if name in self._entries:
            raise SchemaCompilationError(f'Definition {name} already exists')
        self._entries[name] = None

    def define(self, name: str, schema: dict[str, Any]) -> None:
        """Stores the compiled schema for a previously reserved name.

        Raises:
            SchemaCompilationError: If the name was not reserved or is
                already defined.
        """
        if name not in self._entries:
            raise SchemaCompilationError(f'Definition {name} was not reserved')
        if self._entries[name] is not None:
            raise SchemaCompilationError(f'Definition {name} already defined')
        self._entries[name] = schema

    def is_pending(self, name: str) -> bool:
        """Returns True while `name` is reserved but not yet defined."""
        return name in self._entries and self._entries[name] is None

    def get(self, name: str) -> dict[str, Any] | None:
        """Returns the compiled schema for `name`, or None."""
        return self._entries.get(name)

    def checkpoint(self) -> int:
        """Returns a marker that `rollback` can restore the table to."""
        return len(self._entries)

    def rollback(self, checkpoint: int) -> None:
        """Drops every entry added after `checkpoint` was taken."""
        for name in list(self._entries)[checkpoint:]:
            del self._entries[name]

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """Returns the defined entries, suitable for a `$defs` keyword."""
        return {
            name: schema
            for name, schema in self._entries.items()
            if schema is not None
        }

"""Flatten discriminated-union oneof wrappers in tool call arguments.

Compiled schemas expose every oneof group as a `<oneof>OneOfType` property
whose value names the chosen member in `object_type`:

    {"kindOneOfType": {"object_type": "opt_a", "opt_a": {"value": "x"}}}

Protobuf JSON decoding expects the member itself at the parent level:

    {"opt_a": {"value": "x"}}

When the wrapper has no key named after the member, the member was
inlined next to the discriminator, so every other key is promoted as the
member's value:

    {"kOneOfType": {"object_type": "s", "value": "hi"}}

becomes

    {"s": {"value": "hi"}}

Wrappers that do not have this shape are left alone; strict decoding
further down rejects what is actually invalid.
"""

from collections.abc import Mapping
from typing import Any

from protomcp.utils.constants import ONEOF_DISCRIMINATOR, ONEOF_PROPERTY_SUFFIX


def _unwrap_variant(key: str, value: Any) -> tuple[str, Any] | None:
    """Returns the member name and value a wrapper stands for, if it is one."""
    if not key.endswith(ONEOF_PROPERTY_SUFFIX) or not isinstance(
        value, Mapping
    ):
        return None
    member = value.get(ONEOF_DISCRIMINATOR)
    if not isinstance(member, str):
        return None
    if member in value:
        return member, value[member]
    return member, {k: v for k, v in value.items() if k != ONEOF_DISCRIMINATOR}


def flatten_oneof_fields(value: Any) -> Any:
    """Rewrites every oneof wrapper in a JSON value, at any depth.

    The input is not modified; mappings and sequences are rebuilt, scalars
    are shared. Values without wrappers come back equal to the input.

    Args:
        value: A decoded JSON value.

    Returns:
        The value with every `...OneOfType` wrapper replaced by its member.
    """
    if isinstance(value, Mapping):
        plain: dict[str, Any] = {}
        members: dict[str, Any] = {}
        for key, item in value.items():
            unwrapped = _unwrap_variant(key, item)
            if unwrapped is None:
                plain[key] = item
            else:
                members[unwrapped[0]] = unwrapped[1]
        # A promoted member replaces a sibling of the same name.
        plain.update(members)
        return {key: flatten_oneof_fields(item) for key, item in plain.items()}
    if isinstance(value, list | tuple):
        return [flatten_oneof_fields(item) for item in value]
    return value

"""Deterministic naming helpers for generated tools."""

import hashlib

from protomcp.utils.constants import TOOL_NAME_HASH_LENGTH


def mangle_head_if_too_long(name: str, max_length: int) -> str:
    """Shortens `name` to at most `max_length` characters.

    Names that already fit are returned unchanged. Longer names keep their
    tail, which holds the most specific part (service and method), and
    replace the head with a short digest of the full name so that distinct
    long names stay distinct and the same name always maps to the same
    result.

    Args:
        name: The identifier to shorten.
        max_length: Maximum length of the returned identifier.

    Returns:
        The identifier, mangled if it was too long.

    Raises:
        ValueError: If `max_length` is not positive.
    """
    if max_length <= 0:
        raise ValueError('max_length must be positive')
    if len(name) <= max_length:
        return name

    digest = hashlib.sha1(name.encode('utf-8')).hexdigest()[
        :TOOL_NAME_HASH_LENGTH
    ]
    available = max_length - len(digest) - 1
    if available <= 0:
        return digest[:max_length]
    return f'{digest}_{name[-available:]}'

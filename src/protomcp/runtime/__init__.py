"""Call-time transformations of tool arguments and results."""

from protomcp.runtime.oneof import flatten_oneof_fields
from protomcp.runtime.toon import compress_to_toon


__all__ = ['compress_to_toon', 'flatten_oneof_fields']

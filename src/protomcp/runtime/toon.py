"""Compact rendering of JSON tool results in TOON.

TOON (Token-Oriented Object Notation) writes uniform arrays of objects as
a header plus rows, which takes far fewer tokens than the equivalent JSON.
"""

import json
import logging

from toon_format import encode


logger = logging.getLogger(__name__)


def compress_to_toon(json_text: str) -> str:
    """Re-encodes JSON text as TOON.

    Args:
        json_text: A JSON document.

    Returns:
        The same data in TOON form.

    Raises:
        ValueError: If `json_text` is not valid JSON.
    """
    data = json.loads(json_text)
    text = encode(data)
    logger.debug('TOON shrank %d chars to %d', len(json_text), len(text))
    return text

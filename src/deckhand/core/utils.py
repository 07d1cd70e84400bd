"""Utility functions for deckhand."""

import json
import math
from collections.abc import Mapping
from typing import Any


def get_str_or_none(document: Any, key: str) -> str | None:
    """
    Read ``document[key]`` as a string without ever raising.

    Returns ``None`` if:
    - ``document`` is not a mapping
    - the key does not exist
    - the value is JSON ``null``
    - the value is not a scalar (nested object, array, ...)

    Scalars are rendered the way they appear in JSON, so ``True`` becomes
    ``"true"`` and ``2`` becomes ``"2"``. Callers should treat "present but
    unusable" exactly like "missing".

    Examples:
        >>> get_str_or_none({"a": "hello", "b": None}, "a")
        'hello'
        >>> get_str_or_none({"a": "hello", "b": None}, "b") is None
        True
    """
    if not isinstance(document, Mapping):
        return None
    if key not in document:
        return None

    value = document[key]
    if value is None:
        return None
    if isinstance(value, str):
        return value
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return json.dumps(value) if math.isfinite(value) else None
    return None

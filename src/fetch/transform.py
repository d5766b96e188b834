"""Dot-path extraction from decoded JSON payloads.

Examples::

    >>> apply_transform({"data": {"results": [1, 2]}}, "data.results")
    [1, 2]
    >>> apply_transform({"items": [{"id": 7}]}, "items.0.id")
    7
    >>> apply_transform({"data": {}}, "data.missing")  # unresolved: unchanged
    {'data': {}}
"""

from __future__ import annotations

from typing import Any


def apply_transform(data: Any, path: str) -> Any:
    """Return the value at dot-separated *path* inside *data*.

    Dict segments match keys; list segments must be non-negative integer
    indices. If any segment cannot be resolved the original *data* is
    returned unchanged, so a misconfigured path never hides a payload.

    Args:
        data: Decoded payload (usually a dict or list).
        path: Dot-separated path such as ``"data.results"``. Empty means
            no transform.

    Returns:
        The nested value, or *data* itself when the path does not resolve.
    """
    if not path:
        return data

    current = data
    for key in path.split("."):
        if isinstance(current, dict) and key in current:
            current = current[key]
        elif isinstance(current, list) and key.isdecimal() and int(key) < len(current):
            current = current[int(key)]
        else:
            return data
    return current

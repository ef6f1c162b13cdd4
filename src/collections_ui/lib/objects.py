"""
Object hashing and JSON helpers.

Cache keys and saved-filter payloads both need a stable, order-independent
JSON rendering of plain values and dataclasses.
"""

import hashlib
import json
from dataclasses import asdict, is_dataclass
from typing import Any


def to_json(obj: Any, indent: int | None = None) -> str:
    """
    Serialize an object to a canonical JSON string.

    Keys are sorted, sets become sorted lists and dataclasses become dicts,
    so equal values always render to identical text.

    Args:
        obj: Object to serialize.
        indent: Optional indentation for pretty printing.
    """
    return json.dumps(
        obj, default=_default_serializer, indent=indent, sort_keys=True
    )


def digest(obj: Any) -> str:
    """Return the SHA-256 hex digest of ``to_json(obj)``."""
    return hashlib.sha256(to_json(obj).encode("utf-8")).hexdigest()


def _default_serializer(obj: Any) -> Any:
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    return str(obj)

"""Key normalization: the escape hatch for reserved key names.

Index keys are plain Python strings, but keys ending with ``__proto__`` are
stored with a ``$`` prefix so serialized indexes stay byte-compatible with
implementations that back the index with a bare JS object.

The mapping is a bijection: every raw key ending with ``__proto__`` gets
exactly one ``$`` prepended, and every index key ending with ``__proto__``
had one prepended.
"""

from __future__ import annotations

RESERVED = "__proto__"
SENTINEL = "$"


class InvalidKeyType(TypeError):
    """Raised when a non-string key reaches a Dict operation."""

    def __init__(self, key: object) -> None:
        super().__init__(f"key must be a string but got {key!r}")
        self.key = key

    def __reduce__(self):
        return type(self), (self.key,)


def normalize_key(key: object) -> str:
    """Validate a raw key and return the form stored in the key index."""
    if not isinstance(key, str):
        raise InvalidKeyType(key)
    if key.endswith(RESERVED):
        return SENTINEL + key
    return key


def restore_key(safe_key: str) -> str:
    """Inverse of normalize_key, applied when keys are enumerated."""
    if safe_key.endswith(RESERVED):
        return safe_key[len(SENTINEL):]
    return safe_key

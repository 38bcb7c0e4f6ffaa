"""Luck — deterministic pseudo-random values keyed by strings.

Every piece of generated content (whether a cell holds a cache, how many
coins it starts with) is derived from ``luck(key)``.  There is no shared
random generator: the key alone fixes the value, so a cell scanned during
a visibility pass and the same cell regenerated later always agree.
"""

from __future__ import annotations

import hashlib

_MANTISSA_SCALE = 2.0**-53


def luck(key: str) -> float:
    """Return a reproducible value in ``[0, 1)`` for ``key``.

    The top 53 bits of the key's SHA-256 digest become the mantissa of the
    result.  Only the hash is involved, so the value never changes between
    processes, platforms, or library upgrades.

    Args:
        key: Any string identifying the thing being generated.

    Returns:
        A float in the half-open interval ``[0, 1)``.
    """
    digest = hashlib.sha256(key.encode("utf-8")).digest()
    return (int.from_bytes(digest[:8], "big") >> 11) * _MANTISSA_SCALE

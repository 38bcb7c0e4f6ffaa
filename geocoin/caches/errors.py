"""Errors raised by cache and player operations.

All of them are recoverable: callers report the problem and carry on
with the state unchanged.
"""

from __future__ import annotations


class GeocoinError(Exception):
    """Base class for game-state errors."""


class EmptyCacheError(GeocoinError):
    """A coin was collected from a cache that holds none."""


class NoCoinsHeldError(GeocoinError):
    """A deposit was attempted while the player holds no coins."""


class MalformedSnapshot(GeocoinError):
    """Stored cache state failed validation and cannot be restored."""


class UnknownCacheError(GeocoinError, KeyError):
    """No live cache has the requested id."""

"""Pydantic schemas for serialized cache state.

These describe the wire shape of snapshots and saved games.  Live game
objects are plain dataclasses; the schemas only exist at the boundary so
that anything read back from storage is validated before use.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CoinRecord(BaseModel):
    """A coin with its provenance."""

    id: str = Field(..., min_length=1, description="Coin id, '{i}:{j}#{serial}'")
    origin: str = Field(..., min_length=1, description="Id of the cache that minted it")


class CacheSnapshot(BaseModel):
    """Mutable state of one cache, keyed by its cell."""

    i: int
    j: int
    coins: list[CoinRecord] = Field(default_factory=list)


class CacheRecord(CacheSnapshot):
    """A live cache as written into a saved game."""

    id: str = Field(..., min_length=1)


class SnapshotEntry(BaseModel):
    """One row of the snapshot table in a saved game."""

    i: int
    j: int
    snapshot: str


class PositionRecord(BaseModel):
    lat: float
    lng: float


class PlayerRecord(BaseModel):
    """The player's purse and trail."""

    coins: list[CoinRecord] = Field(default_factory=list)
    position: PositionRecord
    history: list[PositionRecord] = Field(default_factory=list)

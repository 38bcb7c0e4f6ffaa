"""Saving and loading a whole game session.

The persisted record is a JSON-compatible dict::

    {
        "version": 1,
        "player": {"coins": [...], "coin_count": n,
                   "position": {"lat", "lng"}, "history": [...]},
        "caches": [{"id", "i", "j", "coins": [...]}, ...],
        "snapshots": [{"i", "j", "snapshot"}, ...],
    }

``caches`` holds the caches that were live at save time and
``snapshots`` the ones that were out of view, so nothing the player
touched is lost across a save/reload cycle.  Cache rows are validated one
by one; a corrupt row is skipped and that cell regenerates.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from geocoin.caches.coin import Coin, cache_id_for
from geocoin.caches.errors import MalformedSnapshot
from geocoin.caches.schemas import CacheRecord, PlayerRecord
from geocoin.caches.store import SnapshotStore
from geocoin.game.config import GameConfig
from geocoin.game.player import Player
from geocoin.game.session import GameSession
from geocoin.world.cell import Cell, LatLng

logger = logging.getLogger(__name__)

STATE_VERSION = 1


def dump_state(session: GameSession) -> dict[str, Any]:
    """Return the persisted record for ``session``."""
    player = session.player
    return {
        "version": STATE_VERSION,
        "player": {
            "coins": [coin.to_record().model_dump() for coin in player.coins],
            "coin_count": player.coin_count,
            "position": {"lat": player.position.lat, "lng": player.position.lng},
            "history": [{"lat": p.lat, "lng": p.lng} for p in player.history],
        },
        "caches": [
            CacheRecord(id=cache.id, **cache.to_snapshot().model_dump()).model_dump()
            for cache in session.materialized_caches()
        ],
        "snapshots": session.store.to_records(),
    }


def _load_player(raw: Any) -> Player:
    try:
        record = PlayerRecord.model_validate(raw)
    except ValidationError as exc:
        msg = f"player state is malformed: {exc}"
        raise MalformedSnapshot(msg) from exc
    return Player(
        position=LatLng(record.position.lat, record.position.lng),
        coins=[Coin.from_record(coin) for coin in record.coins],
        history=[LatLng(p.lat, p.lng) for p in record.history],
    )


def _section(state: Mapping[str, Any], name: str) -> list[Any]:
    """Return the rows of ``state[name]``, or an empty list if unusable."""
    rows = state.get(name)
    if rows is None:
        return []
    if not isinstance(rows, list):
        logger.warning(
            "Ignoring %r section: expected a list, got %s",
            name,
            type(rows).__name__,
        )
        return []
    return rows


def _load_caches(store: SnapshotStore, rows: list[Any]) -> int:
    """Write valid cache rows into ``store``; return how many were skipped."""
    skipped = 0
    for raw in rows:
        try:
            record = CacheRecord.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Skipping malformed cache record: %s", exc)
            skipped += 1
            continue
        cell = Cell(i=record.i, j=record.j)
        if record.id != cache_id_for(cell):
            logger.warning(
                "Skipping cache record %r stored at (%d, %d)",
                record.id,
                record.i,
                record.j,
            )
            skipped += 1
            continue
        store.save(
            record.id,
            cell,
            [Coin.from_record(coin) for coin in record.coins],
        )
    return skipped


def load_state(config: GameConfig, state: Mapping[str, Any]) -> GameSession:
    """Rebuild a session from a record produced by ``dump_state``.

    Live caches are loaded as snapshots so the first lifecycle pass
    restores them exactly; rows that fail validation fall back to fresh
    generation.

    Args:
        config: Gameplay tunables for the new session.
        state: The persisted record.

    Returns:
        A ready-to-play GameSession.

    Raises:
        MalformedSnapshot: If the player section cannot be recovered.
    """
    if not isinstance(state, Mapping):
        msg = f"game state must be a mapping, got {type(state).__name__}"
        raise MalformedSnapshot(msg)

    player = _load_player(state.get("player"))
    store = SnapshotStore()
    skipped = store.load_records(_section(state, "snapshots"))
    skipped += _load_caches(store, _section(state, "caches"))
    if skipped:
        logger.warning("Ignored %d corrupt cache entries while loading", skipped)

    return GameSession(config=config, initial_player=player, store=store)


def save_game(session: GameSession, path: str | Path) -> None:
    """Write ``session`` to ``path`` as JSON."""
    path = Path(path)
    with path.open("w") as f:
        json.dump(dump_state(session), f, indent=2)
    logger.info("Saved game to %s", path)


def load_game(config: GameConfig, path: str | Path) -> GameSession:
    """Read a session previously written by ``save_game``.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        MalformedSnapshot: If the file is not valid JSON or the player
            section is unusable.
    """
    path = Path(path)
    with path.open("r") as f:
        try:
            state = json.load(f)
        except json.JSONDecodeError as exc:
            msg = f"{path} is not valid JSON: {exc}"
            raise MalformedSnapshot(msg) from exc
    session = load_state(config, state)
    logger.info("Loaded game from %s", path)
    return session

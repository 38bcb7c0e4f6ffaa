"""Entry point for ``python -m geocoin``.

Builds a session from the YAML config (or a saved game), walks the player
through a sequence of moves, and logs what is in view.  Rendering belongs
to the map front end; this driver is for exercising the engine headless.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from geocoin.game.config import GameConfig
from geocoin.game.persistence import load_game, save_game
from geocoin.game.player import Direction
from geocoin.game.session import GameSession

logger = logging.getLogger("geocoin")

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="geocoin",
        description="Geocoin - headless driver for the cache world",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--moves",
        default="",
        help="Steps to take, one letter each from N/S/E/W (e.g. NNEW)",
    )
    parser.add_argument(
        "--load",
        type=pathlib.Path,
        help="Resume from a saved game file",
    )
    parser.add_argument(
        "--save",
        type=pathlib.Path,
        help="Write the final state to this file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI args, run the moves, report the result."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = GameConfig.from_yaml(args.config)
    session = load_game(config, args.load) if args.load else GameSession(config)

    for letter in args.moves:
        session.move(Direction.from_letter(letter))

    player = session.player
    logger.info(
        "Player at (%.6f, %.6f) holding %d coins after %d moves",
        player.position.lat,
        player.position.lng,
        player.coin_count,
        len(player.history) - 1,
    )
    for cache in session.caches_near():
        logger.info("  %s: %d coins", cache.id, cache.coin_count)
    logger.info(
        "%d caches live, %d snapshots stored",
        len(session.materialized_caches()),
        len(session.store),
    )

    if args.save:
        save_game(session, args.save)


if __name__ == "__main__":
    main()

"""Player — position, movement trail, and coin purse."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from geocoin.caches.coin import Coin
from geocoin.caches.errors import NoCoinsHeldError
from geocoin.world.cell import LatLng


class Direction(Enum):
    """Unit steps on the grid as ``(d_lat, d_lng)`` multipliers."""

    NORTH = (1, 0)
    SOUTH = (-1, 0)
    EAST = (0, 1)
    WEST = (0, -1)

    @classmethod
    def from_letter(cls, letter: str) -> Direction:
        """Parse ``N``/``S``/``E``/``W`` (case-insensitive)."""
        for direction in cls:
            if direction.name[0] == letter.upper():
                return direction
        msg = f"unknown direction {letter!r}, expected one of N, S, E, W"
        raise ValueError(msg)


@dataclass
class Player:
    """The player's state.

    Attributes:
        position: Current location.
        coins: Coins held, most recently collected last.
        history: Every position occupied, starting with the spawn point.
    """

    position: LatLng
    coins: list[Coin] = field(default_factory=list)
    history: list[LatLng] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.history:
            self.history.append(self.position)

    @property
    def coin_count(self) -> int:
        return len(self.coins)

    def move_to(self, position: LatLng) -> None:
        """Relocate and record the new position in the history."""
        self.position = position
        self.history.append(position)

    def step(self, direction: Direction, distance: float) -> LatLng:
        """Move ``distance`` degrees in ``direction`` and return the new position."""
        d_lat, d_lng = direction.value
        self.move_to(
            LatLng(
                self.position.lat + d_lat * distance,
                self.position.lng + d_lng * distance,
            ),
        )
        return self.position

    def receive(self, coin: Coin) -> None:
        self.coins.append(coin)

    def give(self, coin: Coin | None = None) -> Coin:
        """Remove a coin from the purse and return it.

        Args:
            coin: The coin to hand over; the most recently collected one
                if omitted.

        Raises:
            NoCoinsHeldError: If the purse is empty.
            ValueError: If ``coin`` is not held.
        """
        if not self.coins:
            msg = "player holds no coins to deposit"
            raise NoCoinsHeldError(msg)
        if coin is None:
            return self.coins.pop()
        try:
            self.coins.remove(coin)
        except ValueError:
            msg = f"player does not hold coin {coin.id}"
            raise ValueError(msg) from None
        return coin

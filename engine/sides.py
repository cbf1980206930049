"""Side definitions for the chicken-foot board."""

from __future__ import annotations

from enum import Enum
from typing import Dict


class Side(str, Enum):
    """Cell occupant and side-to-move marker.

    EMPTY doubles as "unoccupied cell" and "no side" (no winner yet, or a draw).
    """

    PLAYER_ONE = "player_one"
    PLAYER_TWO = "player_two"
    EMPTY = "empty"

    def opponent(self) -> "Side":
        if self is Side.PLAYER_ONE:
            return Side.PLAYER_TWO
        if self is Side.PLAYER_TWO:
            return Side.PLAYER_ONE
        return Side.EMPTY

    @property
    def number(self) -> int:
        return SIDE_NUMBER[self]


SIDE_NUMBER: Dict[Side, int] = {
    Side.EMPTY: 0,
    Side.PLAYER_ONE: 1,
    Side.PLAYER_TWO: 2,
}

# Row each side starts on. A side cannot win by filling its own home row.
HOME_ROW: Dict[Side, int] = {
    Side.PLAYER_ONE: 2,
    Side.PLAYER_TWO: 0,
}

"""Rules helpers for the chicken-foot game."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Sequence, Tuple

from engine.sides import HOME_ROW, Side

BOARD_ROWS = 3
BOARD_COLS = 3
PIECES_PER_SIDE = 3
MAX_MOVES = 9

Position = Tuple[int, int]

# Destination candidates are tried in this order for every origin cell:
# down, up, right, left, down-right, up-left, down-left, up-right.
DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (1, 0),
    (-1, 0),
    (0, 1),
    (0, -1),
    (1, 1),
    (-1, -1),
    (1, -1),
    (-1, 1),
)


class MoveRejection(str, Enum):
    """Reason a human move was refused."""

    ORIGIN_OUT_OF_RANGE = "origin_out_of_range"
    DESTINATION_OUT_OF_RANGE = "destination_out_of_range"
    NOT_OWN_PIECE = "not_own_piece"
    SAME_POSITION = "same_position"
    NOT_ADJACENT = "not_adjacent"
    DESTINATION_OCCUPIED = "destination_occupied"

    @property
    def message(self) -> str:
        return REJECTION_MESSAGES[self]


REJECTION_MESSAGES = {
    MoveRejection.ORIGIN_OUT_OF_RANGE: "Invalid move: the chosen piece position does not exist.",
    MoveRejection.DESTINATION_OUT_OF_RANGE: "Invalid move: the destination position does not exist.",
    MoveRejection.NOT_OWN_PIECE: "Invalid move: there is no piece of yours at the chosen position.",
    MoveRejection.SAME_POSITION: "Invalid move: the origin is the same as the destination.",
    MoveRejection.NOT_ADJACENT: "Invalid move: a piece can only move to a connected adjacent position.",
    MoveRejection.DESTINATION_OCCUPIED: "Invalid move: the destination is occupied.",
}


def in_bounds(pos: Position) -> bool:
    """Return whether a position is inside the 3x3 board."""
    row, col = pos
    return 0 <= row < BOARD_ROWS and 0 <= col < BOARD_COLS


def winning_lines(side: Side) -> List[List[Position]]:
    """Return every line that wins for ``side``.

    All rows except the side's home row, all columns, and both diagonals.
    """
    lines: List[List[Position]] = []
    home_row = HOME_ROW.get(side)
    for row in range(BOARD_ROWS):
        if row == home_row:
            continue
        lines.append([(row, col) for col in range(BOARD_COLS)])
    for col in range(BOARD_COLS):
        lines.append([(row, col) for row in range(BOARD_ROWS)])
    lines.append([(i, i) for i in range(BOARD_ROWS)])
    lines.append([(i, BOARD_COLS - 1 - i) for i in range(BOARD_ROWS)])
    return lines


WINNING_LINES: Dict[Side, List[List[Position]]] = {
    Side.PLAYER_ONE: winning_lines(Side.PLAYER_ONE),
    Side.PLAYER_TWO: winning_lines(Side.PLAYER_TWO),
}


def is_winning(grid: Sequence[Sequence[Side]], side: Side) -> bool:
    """Return whether ``side`` fully occupies one of its winning lines."""
    for line in WINNING_LINES.get(side, ()):
        if all(grid[row][col] is side for row, col in line):
            return True
    return False

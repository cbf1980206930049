"""Chicken-foot board state, legal move generation, and state encoding."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from engine.graph import STANDARD_GRAPH, BoardGraph
from engine.rules import (
    BOARD_COLS,
    BOARD_ROWS,
    DIRECTIONS,
    PIECES_PER_SIDE,
    MoveRejection,
    Position,
    in_bounds,
    is_winning,
)
from engine.sides import HOME_ROW, SIDE_NUMBER, Side

STATE_CHANNELS = 5

_SIDE_BY_SYMBOL = {str(number): side for side, number in SIDE_NUMBER.items()}
_SIDE_BY_SYMBOL["."] = Side.EMPTY


@dataclass(frozen=True)
class Move:
    """A piece step from one cell to a connected cell."""

    from_pos: Position
    to_pos: Position

    def __str__(self) -> str:
        return f"({self.from_pos[0]},{self.from_pos[1]})->({self.to_pos[0]},{self.to_pos[1]})"


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating a move against the current board."""

    is_valid: bool
    rejection: Optional[MoveRejection] = None

    @property
    def error_message(self) -> Optional[str]:
        return None if self.rejection is None else self.rejection.message


@dataclass(frozen=True)
class MoveResult:
    """Result metadata for an attempted move."""

    applied: bool
    rejection: Optional[MoveRejection] = None
    winner: Side = Side.EMPTY
    is_draw: bool = False


Cell = Side


class Board:
    """3x3 chicken-foot board with turn and winner bookkeeping."""

    rows: int = BOARD_ROWS
    cols: int = BOARD_COLS

    def __init__(self, graph: Optional[BoardGraph] = None, max_plies: int = 10) -> None:
        self.graph = graph if graph is not None else STANDARD_GRAPH
        self.max_plies = max_plies
        self.side_to_move = Side.PLAYER_ONE
        self.winner = Side.EMPTY
        self.ply_count = 0

        self.grid: List[List[Cell]] = [[Side.EMPTY for _ in range(self.cols)] for _ in range(self.rows)]
        for side, row in HOME_ROW.items():
            for col in range(PIECES_PER_SIDE):
                self.grid[row][col] = side

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[str],
        side_to_move: Side = Side.PLAYER_ONE,
        graph: Optional[BoardGraph] = None,
        max_plies: int = 10,
    ) -> "Board":
        """Build a board from three strings of ``1``, ``2`` and ``0``/``.``."""
        if len(rows) != BOARD_ROWS or any(len(row) != BOARD_COLS for row in rows):
            raise ValueError(f"Expected {BOARD_ROWS} rows of {BOARD_COLS} cells, got {list(rows)!r}")
        board = cls(graph=graph, max_plies=max_plies)
        for row, text in enumerate(rows):
            for col, symbol in enumerate(text):
                if symbol not in _SIDE_BY_SYMBOL:
                    raise ValueError(f"Unknown cell symbol {symbol!r} at ({row}, {col})")
                board.grid[row][col] = _SIDE_BY_SYMBOL[symbol]
        board.side_to_move = side_to_move
        return board

    def clone(self) -> "Board":
        """Deep copy board state. The graph is shared, it is never mutated."""
        cloned = Board.__new__(Board)
        cloned.graph = self.graph
        cloned.max_plies = self.max_plies
        cloned.side_to_move = self.side_to_move
        cloned.winner = self.winner
        cloned.ply_count = self.ply_count
        cloned.grid = [list(row) for row in self.grid]
        return cloned

    def iter_positions(self) -> Iterable[Position]:
        """Yield all board positions in row-major order."""
        for row in range(self.rows):
            for col in range(self.cols):
                yield (row, col)

    @staticmethod
    def is_in_bounds(pos: Position) -> bool:
        return in_bounds(pos)

    def occupant(self, pos: Position) -> Side:
        """Return the side on a cell, or EMPTY for empty and off-board cells."""
        if not in_bounds(pos):
            return Side.EMPTY
        row, col = pos
        return self.grid[row][col]

    def place(self, pos: Position, side: Side) -> None:
        """Overwrite a cell. Off-board positions are a caller error."""
        if not in_bounds(pos):
            raise IndexError(f"Position out of range: {pos}")
        row, col = pos
        self.grid[row][col] = side

    def piece_count(self, side: Side) -> int:
        return sum(1 for pos in self.iter_positions() if self.occupant(pos) is side)

    def get_legal_moves(self, side: Optional[Side] = None) -> List[Move]:
        """Generate legal moves for ``side`` (default: the side to move).

        Origins are scanned row-major; destinations follow ``DIRECTIONS``.
        """
        mover = self.side_to_move if side is None else side
        legal_moves: List[Move] = []
        if mover is Side.EMPTY:
            return legal_moves
        for from_pos in self.iter_positions():
            if self.occupant(from_pos) is not mover:
                continue
            legal_moves.extend(self._piece_moves(from_pos))
        return legal_moves

    def _piece_moves(self, from_pos: Position) -> List[Move]:
        piece_moves: List[Move] = []
        row, col = from_pos
        for dr, dc in DIRECTIONS:
            to_pos = (row + dr, col + dc)
            if not in_bounds(to_pos):
                continue
            if self.occupant(to_pos) is not Side.EMPTY:
                continue
            if to_pos == from_pos or not self.graph.are_connected(from_pos, to_pos):
                continue
            piece_moves.append(Move(from_pos=from_pos, to_pos=to_pos))
        return piece_moves

    def is_winning(self, side: Side) -> bool:
        return is_winning(self.grid, side)

    @contextmanager
    def applied(self, move: Move) -> Iterator["Board"]:
        """Temporarily apply a move to the grid, restoring it on exit.

        Turn, winner and ply bookkeeping are left alone.
        """
        src_row, src_col = move.from_pos
        dst_row, dst_col = move.to_pos
        origin = self.grid[src_row][src_col]
        destination = self.grid[dst_row][dst_col]
        self.grid[src_row][src_col] = Side.EMPTY
        self.grid[dst_row][dst_col] = origin
        try:
            yield self
        finally:
            self.grid[src_row][src_col] = origin
            self.grid[dst_row][dst_col] = destination

    def wins_after(self, move: Move, side: Side) -> bool:
        """Return whether ``side`` is winning once ``move`` is played."""
        with self.applied(move):
            return self.is_winning(side)

    def validate_move(self, move: Move, side: Optional[Side] = None) -> ValidationResult:
        """Check a move for ``side`` and report the first broken rule."""
        mover = self.side_to_move if side is None else side
        if not in_bounds(move.from_pos):
            return ValidationResult(False, MoveRejection.ORIGIN_OUT_OF_RANGE)
        if not in_bounds(move.to_pos):
            return ValidationResult(False, MoveRejection.DESTINATION_OUT_OF_RANGE)
        if mover is Side.EMPTY or self.occupant(move.from_pos) is not mover:
            return ValidationResult(False, MoveRejection.NOT_OWN_PIECE)
        if move.from_pos == move.to_pos:
            return ValidationResult(False, MoveRejection.SAME_POSITION)
        if not self.graph.are_connected(move.from_pos, move.to_pos):
            return ValidationResult(False, MoveRejection.NOT_ADJACENT)
        if self.occupant(move.to_pos) is not Side.EMPTY:
            return ValidationResult(False, MoveRejection.DESTINATION_OCCUPIED)
        return ValidationResult(True)

    def apply_if_legal(self, move: Move) -> MoveResult:
        """Apply a move for the side to move, or leave the board untouched."""
        validation = self.validate_move(move)
        if not validation.is_valid:
            return MoveResult(applied=False, rejection=validation.rejection)
        return self._commit(move)

    def apply_move(self, move: Move) -> MoveResult:
        """Apply a legal move and switch turn."""
        validation = self.validate_move(move)
        if not validation.is_valid:
            raise ValueError(f"Illegal move {move}: {validation.error_message}")
        return self._commit(move)

    def _commit(self, move: Move) -> MoveResult:
        mover = self.side_to_move
        src_row, src_col = move.from_pos
        dst_row, dst_col = move.to_pos
        self.grid[src_row][src_col] = Side.EMPTY
        self.grid[dst_row][dst_col] = mover
        self.ply_count += 1

        if self.is_winning(mover):
            self.winner = mover
            self.side_to_move = Side.EMPTY
        else:
            self.side_to_move = mover.opponent()

        is_terminal, winner, is_draw = self.game_over()
        if is_draw:
            self.side_to_move = Side.EMPTY
        return MoveResult(
            applied=True,
            winner=winner if is_terminal else Side.EMPTY,
            is_draw=is_draw,
        )

    def game_over(self) -> Tuple[bool, Side, bool]:
        """Return (is_terminal, winner, is_draw)."""
        if self.winner is not Side.EMPTY:
            return True, self.winner, False
        if self.max_plies > 0 and self.ply_count >= self.max_plies:
            return True, Side.EMPTY, True
        return False, Side.EMPTY, False

    def encode_state(self) -> np.ndarray:
        """Encode turn, occupancy and winner as a (5, 3, 3) float32 array."""
        encoded = np.zeros((STATE_CHANNELS, self.rows, self.cols), dtype=np.float32)

        # Side to move planes.
        encoded[0, :, :] = 1.0 if self.side_to_move is Side.PLAYER_ONE else 0.0
        encoded[1, :, :] = 1.0 if self.side_to_move is Side.PLAYER_TWO else 0.0

        for row, col in self.iter_positions():
            cell = self.grid[row][col]
            if cell is Side.PLAYER_ONE:
                encoded[2, row, col] = 1.0
            elif cell is Side.PLAYER_TWO:
                encoded[3, row, col] = 1.0

        if self.winner is Side.PLAYER_ONE:
            encoded[4, :, :] = 1.0
        elif self.winner is Side.PLAYER_TWO:
            encoded[4, :, :] = -1.0
        return encoded

    def fingerprint(self) -> bytes:
        """Byte snapshot of the encoded state, for restore checks."""
        return self.encode_state().tobytes()

    def render_ascii(self) -> str:
        """Return the board diagram with its connection pattern."""
        lines: List[str] = []
        lines.append("    " + "   ".join(str(col) for col in range(self.cols)))
        for row in range(self.rows):
            if row > 0:
                links: List[str] = []
                for col in range(self.cols - 1):
                    links.append("/" if (row + col) % 2 == 0 else "\\")
                lines.append("    | " + " | ".join(links) + " |")
            cells = "---".join(str(self.grid[row][col].number) for col in range(self.cols))
            lines.append(f"{row}   {cells}")
        return "\n".join(lines)

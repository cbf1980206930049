"""Base AI interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from engine.board import Board, Move


class BaseAI(ABC):
    """A computer player for either side."""

    @abstractmethod
    def choose_move(self, board: Board) -> Move:
        """Return a move for ``board.side_to_move`` without mutating ``board``.

        Raises NoLegalMoveError when that side cannot move.
        """
        raise NotImplementedError

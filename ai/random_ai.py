"""Uniformly random AI, used as a sparring opponent."""

from __future__ import annotations

import random
from typing import Optional

from ai.base_ai import BaseAI
from ai.minimax_ai import NoLegalMoveError
from engine.board import Board, Move


class RandomAI(BaseAI):
    """AI that plays a random legal move."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def choose_move(self, board: Board) -> Move:
        legal_moves = board.get_legal_moves()
        if not legal_moves:
            raise NoLegalMoveError(f"No legal moves available for {board.side_to_move.value}.")
        return self._rng.choice(legal_moves)

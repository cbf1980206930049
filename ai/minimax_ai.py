"""Bounded-depth minimax AI for chicken-foot."""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Tuple

from ai.base_ai import BaseAI
from engine.board import Board, Move
from engine.sides import Side

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_HEIGHT = 6
WIN_SCORE_STEP = 10


class NoLegalMoveError(RuntimeError):
    """Raised when a move is required but the side to move has none."""


class MinimaxAI(BaseAI):
    """Exhaustive minimax search to a fixed horizon.

    Wins found at ``depth`` score ``10 * (max_height - depth + 1)`` for the
    computer and the negated value for its opponent, so faster wins rank
    higher. Positions past the horizon score 0. Equal root scores are broken
    with a running coin flip: each later tie replaces the current pick with
    probability one half.
    """

    def __init__(
        self,
        max_height: int = DEFAULT_MAX_HEIGHT,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        debug_top_k: int = 3,
    ) -> None:
        if max_height < 0:
            raise ValueError(f"max_height must be non-negative, got {max_height}")
        self.max_height = max_height
        self._rng = rng if rng is not None else random.Random(seed)
        self.debug_top_k = max(1, debug_top_k)
        self.nodes_evaluated = 0
        self.last_scores: List[Tuple[Move, int]] = []
        self._computer = Side.EMPTY
        self._opponent = Side.EMPTY

    def choose_move(self, board: Board) -> Move:
        """Choose a move for the side to move."""
        mover = board.side_to_move
        return self.best_move(board, mover, mover.opponent())

    def best_move(self, board: Board, mover: Side, opponent: Side) -> Move:
        """Return the best move for ``mover`` against ``opponent``.

        The caller's board is never touched; the search mutates a clone and
        undoes every move it plays.
        """
        working = board.clone()
        snapshot = working.fingerprint()
        legal_moves = working.get_legal_moves(mover)
        if not legal_moves:
            raise NoLegalMoveError(f"No legal moves available for {mover.value}.")

        self.nodes_evaluated = 0
        self.last_scores = []
        self._computer = mover
        self._opponent = opponent

        for move in legal_moves:
            if working.wins_after(move, mover):
                LOGGER.debug("Minimax found immediate win %s for %s", move, mover.value)
                self._check_restored(working, snapshot)
                return move

        scored: List[Tuple[Move, int]] = []
        for move in legal_moves:
            with working.applied(move):
                score = self._score(working, 1, opponent)
            scored.append((move, score))
        self._check_restored(working, snapshot)

        chosen, best_score = self._select(scored)
        self.last_scores = scored
        self._log_diagnostics(scored, chosen)
        LOGGER.debug(
            "Minimax selected %s with score %d after %d nodes",
            chosen,
            best_score,
            self.nodes_evaluated,
        )
        return chosen

    def _score(self, board: Board, depth: int, side: Side) -> int:
        self.nodes_evaluated += 1
        if depth > self.max_height:
            return 0

        legal_moves = board.get_legal_moves(side)
        for move in legal_moves:
            if board.wins_after(move, side):
                value = WIN_SCORE_STEP * (self.max_height - depth + 1)
                return value if side is self._computer else -value
        if not legal_moves:
            return 0

        maximizing = side is self._computer
        next_side = self._opponent if maximizing else self._computer
        best: Optional[int] = None
        for move in legal_moves:
            with board.applied(move):
                score = self._score(board, depth + 1, next_side)
            # A forced result in the chooser's favor ends this node.
            if (maximizing and score > 0) or (not maximizing and score < 0):
                return score
            if best is None or (maximizing and score > best) or (not maximizing and score < best):
                best = score
        return 0 if best is None else best

    def _select(self, scored: List[Tuple[Move, int]]) -> Tuple[Move, int]:
        best_move, best_score = scored[0]
        for move, score in scored[1:]:
            if score > best_score:
                best_move, best_score = move, score
            elif score == best_score and self._rng.random() < 0.5:
                best_move = move
        return best_move, best_score

    @staticmethod
    def _check_restored(board: Board, snapshot: bytes) -> None:
        if board.fingerprint() != snapshot:
            raise RuntimeError("Search did not restore the working board.")

    def _log_diagnostics(self, scored: List[Tuple[Move, int]], chosen: Move) -> None:
        """Emit top-k candidate breakdown when DEBUG is enabled."""
        if not LOGGER.isEnabledFor(logging.DEBUG):
            return
        ranked = sorted(scored, key=lambda item: item[1], reverse=True)
        for idx, (move, score) in enumerate(ranked[: self.debug_top_k], start=1):
            LOGGER.debug(
                "Candidate #%d move=%s score=%d chosen=%s",
                idx,
                move,
                score,
                move == chosen,
            )

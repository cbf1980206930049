"""Static adjacency relation between the nine board cells."""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, List, Tuple

from engine.rules import BOARD_COLS, BOARD_ROWS, Position

# Undirected edges over cell indices (index = row * 3 + col).
# Edge-midpoint cells 1, 3, 5, 7 have no diagonal edges.
EDGES: Tuple[Tuple[int, int], ...] = (
    (0, 1),
    (0, 3),
    (0, 4),
    (1, 2),
    (1, 4),
    (2, 4),
    (2, 5),
    (3, 4),
    (3, 6),
    (4, 5),
    (4, 6),
    (4, 7),
    (4, 8),
    (5, 8),
    (6, 7),
    (7, 8),
)


def pos_to_index(pos: Position) -> int:
    """Convert a board position to its flattened index."""
    return pos[0] * BOARD_COLS + pos[1]


def index_to_pos(index: int) -> Position:
    """Convert a flattened index back to a board position."""
    return (index // BOARD_COLS, index % BOARD_COLS)


class BoardGraph:
    """Read-only adjacency over board cells, built once from an edge list."""

    def __init__(self, edges: Iterable[Tuple[int, int]] = EDGES) -> None:
        adjacency: Dict[int, set] = {index: set() for index in range(BOARD_ROWS * BOARD_COLS)}
        for a, b in edges:
            if a == b:
                raise ValueError(f"Self-loop edge is not allowed: {a}")
            adjacency[a].add(b)
            adjacency[b].add(a)
        self._adjacency: Dict[int, FrozenSet[int]] = {
            index: frozenset(linked) for index, linked in adjacency.items()
        }

    def are_connected(self, a: Position, b: Position) -> bool:
        """Return whether two in-bounds cells share an edge."""
        return pos_to_index(b) in self._adjacency[pos_to_index(a)]

    def neighbors(self, pos: Position) -> List[Position]:
        """Return the cells connected to ``pos`` in index order."""
        return [index_to_pos(index) for index in sorted(self._adjacency[pos_to_index(pos)])]

    def edges(self) -> List[Tuple[int, int]]:
        """Return every undirected edge once, as sorted index pairs."""
        return sorted(
            (a, b) for a, linked in self._adjacency.items() for b in linked if a < b
        )

    @property
    def edge_count(self) -> int:
        return len(self.edges())


STANDARD_GRAPH = BoardGraph()

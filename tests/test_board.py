"""Tests for board state, move generation and move application."""

import numpy as np
import pytest

from engine.board import Board, Move
from engine.rules import MAX_MOVES, MoveRejection
from engine.sides import Side

ALL_CELLS = [(row, col) for row in range(3) for col in range(3)]

SAMPLE_BOARDS = [
    Board(),
    Board.from_rows(["2.2", "11.", "2.1"]),
    Board.from_rows(["1.2", ".12", "21."]),
    Board.from_rows([".2.", "121", "2.1"], side_to_move=Side.PLAYER_TWO),
    Board.from_rows(["22.", "1.2", ".11"], side_to_move=Side.PLAYER_TWO),
]


def test_initial_layout():
    board = Board()
    assert [board.occupant((0, col)) for col in range(3)] == [Side.PLAYER_TWO] * 3
    assert [board.occupant((1, col)) for col in range(3)] == [Side.EMPTY] * 3
    assert [board.occupant((2, col)) for col in range(3)] == [Side.PLAYER_ONE] * 3
    assert board.side_to_move is Side.PLAYER_ONE
    assert board.winner is Side.EMPTY
    assert board.game_over() == (False, Side.EMPTY, False)


def test_place_only_changes_target_cell():
    for target in ALL_CELLS:
        for side in Side:
            board = Board()
            before = {cell: board.occupant(cell) for cell in ALL_CELLS}
            board.place(target, side)
            for cell in ALL_CELLS:
                expected = side if cell == target else before[cell]
                assert board.occupant(cell) is expected


def test_occupant_off_board_is_empty():
    board = Board()
    assert board.occupant((3, 0)) is Side.EMPTY
    assert board.occupant((-1, 2)) is Side.EMPTY
    assert not Board.is_in_bounds((0, 3))


def test_place_off_board_raises():
    with pytest.raises(IndexError):
        Board().place((3, 3), Side.PLAYER_ONE)


def test_initial_legal_moves_player_one():
    assert Board().get_legal_moves(Side.PLAYER_ONE) == [
        Move((2, 0), (1, 0)),
        Move((2, 0), (1, 1)),
        Move((2, 1), (1, 1)),
        Move((2, 2), (1, 2)),
        Move((2, 2), (1, 1)),
    ]


def test_initial_legal_moves_player_two():
    assert Board().get_legal_moves(Side.PLAYER_TWO) == [
        Move((0, 0), (1, 0)),
        Move((0, 0), (1, 1)),
        Move((0, 1), (1, 1)),
        Move((0, 2), (1, 2)),
        Move((0, 2), (1, 1)),
    ]


def test_no_moves_for_empty_side():
    assert Board().get_legal_moves(Side.EMPTY) == []


@pytest.mark.parametrize("board", SAMPLE_BOARDS)
def test_generated_moves_are_legal(board):
    for side in (Side.PLAYER_ONE, Side.PLAYER_TWO):
        moves = board.get_legal_moves(side)
        assert len(moves) <= MAX_MOVES
        for move in moves:
            assert board.validate_move(move, side).is_valid
            assert board.occupant(move.to_pos) is Side.EMPTY
            assert board.graph.are_connected(move.from_pos, move.to_pos)


@pytest.mark.parametrize("board", SAMPLE_BOARDS)
def test_applied_restores_board(board):
    snapshot = board.fingerprint()
    grid = [list(row) for row in board.grid]
    for side in (Side.PLAYER_ONE, Side.PLAYER_TWO):
        for move in board.get_legal_moves(side):
            with board.applied(move):
                assert board.occupant(move.from_pos) is Side.EMPTY
                assert board.occupant(move.to_pos) is side
            board.wins_after(move, side)
            assert board.fingerprint() == snapshot
            assert board.grid == grid


def test_applied_restores_on_error():
    board = Board()
    snapshot = board.fingerprint()
    with pytest.raises(KeyError):
        with board.applied(Move((2, 0), (1, 0))):
            raise KeyError("boom")
    assert board.fingerprint() == snapshot


def test_wins_after_probe():
    board = Board.from_rows(["2.2", "11.", "2.1"])
    assert board.wins_after(Move((2, 2), (1, 2)), Side.PLAYER_ONE)
    assert not board.wins_after(Move((1, 1), (2, 1)), Side.PLAYER_ONE)


def test_opening_scenario():
    board = Board()
    assert board.apply_if_legal(Move((2, 0), (1, 0))).applied
    assert board.side_to_move is Side.PLAYER_TWO
    assert board.apply_if_legal(Move((0, 0), (1, 1))).applied
    assert board.occupant((1, 0)) is Side.PLAYER_ONE
    assert board.occupant((0, 0)) is Side.EMPTY
    assert board.occupant((1, 1)) is Side.PLAYER_TWO
    assert not board.is_winning(Side.PLAYER_ONE)
    assert not board.is_winning(Side.PLAYER_TWO)
    assert board.ply_count == 2
    assert board.side_to_move is Side.PLAYER_ONE


@pytest.mark.parametrize(
    "move, rejection",
    [
        (Move((3, 0), (1, 0)), MoveRejection.ORIGIN_OUT_OF_RANGE),
        (Move((2, 0), (3, 0)), MoveRejection.DESTINATION_OUT_OF_RANGE),
        (Move((0, 0), (1, 0)), MoveRejection.NOT_OWN_PIECE),
        (Move((1, 1), (1, 0)), MoveRejection.NOT_OWN_PIECE),
        (Move((2, 0), (2, 0)), MoveRejection.SAME_POSITION),
        (Move((2, 1), (1, 0)), MoveRejection.NOT_ADJACENT),
        (Move((2, 0), (0, 0)), MoveRejection.NOT_ADJACENT),
        (Move((2, 0), (2, 1)), MoveRejection.DESTINATION_OCCUPIED),
    ],
)
def test_rejected_moves_leave_board_unchanged(move, rejection):
    board = Board()
    snapshot = board.fingerprint()
    result = board.apply_if_legal(move)
    assert not result.applied
    assert result.rejection is rejection
    assert rejection.message.startswith("Invalid move")
    assert board.fingerprint() == snapshot
    assert board.ply_count == 0


def test_apply_move_rejects_illegal_move():
    with pytest.raises(ValueError):
        Board().apply_move(Move((2, 1), (1, 0)))


def test_winning_move_ends_game():
    board = Board.from_rows(["2.2", "11.", "2.1"])
    result = board.apply_move(Move((2, 2), (1, 2)))
    assert result.applied
    assert result.winner is Side.PLAYER_ONE
    assert board.winner is Side.PLAYER_ONE
    assert board.side_to_move is Side.EMPTY
    assert board.game_over() == (True, Side.PLAYER_ONE, False)
    assert board.get_legal_moves() == []


def test_ply_limit_draw():
    board = Board(max_plies=2)
    board.apply_move(Move((2, 0), (1, 0)))
    assert board.game_over() == (False, Side.EMPTY, False)
    result = board.apply_move(Move((0, 0), (1, 1)))
    assert result.is_draw
    assert board.game_over() == (True, Side.EMPTY, True)
    assert board.side_to_move is Side.EMPTY


def test_ply_limit_disabled():
    board = Board(max_plies=0)
    board.apply_move(Move((2, 0), (1, 0)))
    board.apply_move(Move((0, 0), (1, 1)))
    assert board.game_over() == (False, Side.EMPTY, False)


def test_clone_is_independent():
    board = Board()
    cloned = board.clone()
    cloned.apply_move(Move((2, 0), (1, 0)))
    assert board.occupant((2, 0)) is Side.PLAYER_ONE
    assert board.side_to_move is Side.PLAYER_ONE
    assert cloned.graph is board.graph


def test_piece_counts():
    board = Board()
    assert board.piece_count(Side.PLAYER_ONE) == 3
    assert board.piece_count(Side.PLAYER_TWO) == 3
    assert board.piece_count(Side.EMPTY) == 3


def test_encode_state():
    encoded = Board().encode_state()
    assert encoded.shape == (5, 3, 3)
    assert encoded.dtype == np.float32
    assert encoded[0].sum() == 9.0
    assert encoded[1].sum() == 0.0
    assert np.array_equal(encoded[2][2], np.ones(3, dtype=np.float32))
    assert np.array_equal(encoded[3][0], np.ones(3, dtype=np.float32))


def test_from_rows_validates_input():
    with pytest.raises(ValueError):
        Board.from_rows(["222", "..."])
    with pytest.raises(ValueError):
        Board.from_rows(["222", ".x.", "111"])


def test_render_ascii():
    assert Board().render_ascii() == "\n".join(
        [
            "    0   1   2",
            "0   2---2---2",
            "    | \\ | / |",
            "1   0---0---0",
            "    | / | \\ |",
            "2   1---1---1",
        ]
    )

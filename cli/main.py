"""CLI entrypoint for playing chicken-foot in the terminal."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Dict, List, Optional, Sequence

from ai.base_ai import BaseAI
from ai.minimax_ai import DEFAULT_MAX_HEIGHT, MinimaxAI, NoLegalMoveError
from ai.random_ai import RandomAI
from engine.board import Board, Move
from engine.rules import Position
from engine.sides import Side

LOGGER = logging.getLogger("chicken_foot.cli")

ReadLine = Callable[[str], str]

MODE_HUMAN_VS_HUMAN = 1
MODE_HUMAN_VS_COMPUTER = 2
MODE_COMPUTER_VS_HUMAN = 3
MODE_EXIT = 4

DEFAULT_DRAW_PLIES = 10

MENU_LINES = (
    "1. Human vs Human",
    "2. Human (P1) vs Computer (P2)",
    "3. Computer (P1) vs Human (P2)",
    "4. Exit",
)

WELCOME_LINES = (
    "Welcome to chicken-foot!",
    "Two players move alternately, one piece per turn, along the board lines.",
    "The goal is to form a line of 3 pieces (not on your own starting row).",
    "Player 1 is shown as 1 and player 2 as 2; empty points are 0.",
    "Player 1 starts.",
)


class QuitGame(Exception):
    """Raised when the human asks to leave the game."""


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play chicken-foot in the terminal.")
    parser.add_argument("--depth", type=int, default=DEFAULT_MAX_HEIGHT, help="Minimax search horizon")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the AI tie-break coin")
    parser.add_argument(
        "--max-plies",
        type=int,
        default=None,
        help=(
            "Plies before the game is drawn (0 disables the limit). Defaults to "
            f"{DEFAULT_DRAW_PLIES} without a human-vs-computer pairing, otherwise off; "
            "the search does not see the limit"
        ),
    )
    parser.add_argument(
        "--mode",
        type=int,
        default=None,
        choices=[MODE_HUMAN_VS_HUMAN, MODE_HUMAN_VS_COMPUTER, MODE_COMPUTER_VS_HUMAN, MODE_EXIT],
        help="Skip the menu and start this option",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Watch the minimax AI (P1) play a random AI (P2)",
    )
    parser.add_argument("--log-level", type=str, default="WARNING", help="Python logging level")
    return parser.parse_args(argv)


def parse_position(text: str) -> Optional[Position]:
    """Parse ``"row col"``. Returns None on a wrong token count.

    Raises ValueError for non-numeric tokens.
    """
    parts = text.replace(",", " ").split()
    if len(parts) != 2:
        return None
    row, col = int(parts[0]), int(parts[1])
    return (row, col)


def read_position(prompt: str, read_line: ReadLine) -> Position:
    while True:
        user_input = read_line(prompt).strip()
        if user_input.lower() in {"quit", "exit"}:
            raise QuitGame()
        try:
            pos = parse_position(user_input)
        except ValueError:
            print("Invalid numeric input.")
            continue
        if pos is None:
            print("Enter a row and a column, e.g. 2 0.")
            continue
        return pos


def play_human_turn(board: Board, read_line: ReadLine) -> Move:
    """Prompt until the side to move enters a legal move, then apply it."""
    player = board.side_to_move.number
    while True:
        from_pos = read_position(f"Player {player}, choose a piece (row col) to move: ", read_line)
        to_pos = read_position(f"Player {player}, choose where (row col) to move it: ", read_line)
        move = Move(from_pos=from_pos, to_pos=to_pos)
        result = board.apply_if_legal(move)
        if result.applied:
            return move
        print(f"{result.rejection.message} Try again.\n")


def play_computer_turn(board: Board, ai: BaseAI) -> Move:
    mover = board.side_to_move
    move = ai.choose_move(board)
    board.apply_move(move)
    print(f"Computer (player {mover.number}) moves {move}")
    return move


def build_controllers(mode: int, ai: BaseAI) -> Dict[Side, Optional[BaseAI]]:
    """Map each side to its AI, or None for a human."""
    if mode == MODE_HUMAN_VS_HUMAN:
        return {Side.PLAYER_ONE: None, Side.PLAYER_TWO: None}
    if mode == MODE_HUMAN_VS_COMPUTER:
        return {Side.PLAYER_ONE: None, Side.PLAYER_TWO: ai}
    if mode == MODE_COMPUTER_VS_HUMAN:
        return {Side.PLAYER_ONE: ai, Side.PLAYER_TWO: None}
    raise ValueError(f"Unsupported game mode: {mode}")


def resolve_max_plies(requested: Optional[int], controllers: Dict[Side, Optional[BaseAI]]) -> int:
    """Pick the draw limit for a game.

    An explicit request wins. Otherwise human-vs-computer games have no
    limit and every other pairing gets the default.
    """
    if requested is not None:
        return requested
    humans = sum(1 for controller in controllers.values() if controller is None)
    if humans == 1:
        return 0
    return DEFAULT_DRAW_PLIES


def play_game(
    controllers: Dict[Side, Optional[BaseAI]],
    read_line: ReadLine = input,
    max_plies: int = DEFAULT_DRAW_PLIES,
) -> Board:
    """Run one game to completion and return the final board."""
    board = Board(max_plies=max_plies)
    print(board.render_ascii())

    while True:
        terminal, winner, is_draw = board.game_over()
        if terminal:
            if is_draw:
                print("Draw!")
            else:
                print(f"Player {winner.number} wins!")
            return board

        if not board.get_legal_moves():
            raise NoLegalMoveError(f"No legal moves available for {board.side_to_move.value}.")

        ai = controllers[board.side_to_move]
        if ai is None:
            play_human_turn(board, read_line)
        else:
            play_computer_turn(board, ai)
        print()
        print(board.render_ascii())


def prompt_menu(read_line: ReadLine) -> int:
    """Show the menu until a valid option is chosen."""
    options = {MODE_HUMAN_VS_HUMAN, MODE_HUMAN_VS_COMPUTER, MODE_COMPUTER_VS_HUMAN, MODE_EXIT}
    while True:
        for line in MENU_LINES:
            print(line)
        user_input = read_line("Choose an option: ").strip()
        try:
            option = int(user_input)
        except ValueError:
            option = -1
        if option in options:
            return option
        print("Invalid option. Try again.")


def main(argv: Optional[Sequence[str]] = None, read_line: ReadLine = input) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))

    ai = MinimaxAI(max_height=args.depth, seed=args.seed)
    try:
        if args.watch:
            controllers: Dict[Side, Optional[BaseAI]] = {
                Side.PLAYER_ONE: ai,
                Side.PLAYER_TWO: RandomAI(seed=args.seed),
            }
        else:
            for line in WELCOME_LINES:
                print(line)
            mode = args.mode if args.mode is not None else prompt_menu(read_line)
            if mode == MODE_EXIT:
                print("Program finished.")
                return 0
            controllers = build_controllers(mode, ai)

        LOGGER.info(
            "Starting game. P1=%s P2=%s depth=%d",
            describe(controllers[Side.PLAYER_ONE]),
            describe(controllers[Side.PLAYER_TWO]),
            args.depth,
        )
        max_plies = resolve_max_plies(args.max_plies, controllers)
        play_game(controllers, read_line=read_line, max_plies=max_plies)
    except (QuitGame, EOFError):
        print("Exiting game.")
        return 0
    except NoLegalMoveError as exc:
        LOGGER.critical("Cannot continue: %s", exc)
        return 1

    print("Program finished.")
    return 0


def describe(controller: Optional[BaseAI]) -> str:
    return "human" if controller is None else type(controller).__name__


def run_cli(argv: Optional[List[str]] = None) -> None:
    sys.exit(main(argv))


if __name__ == "__main__":
    run_cli()

"""
Line-based terminal shell around the board engine.
"""
import logging
from typing import Callable

from .game import Direction, Game2048, Status

logger = logging.getLogger(__name__)

KEY_MAP = {
    'w': Direction.UP,
    'a': Direction.LEFT,
    's': Direction.DOWN,
    'd': Direction.RIGHT,
}

STATUS_TEXT = {
    Status.IN_PROGRESS: "",
    Status.WON: "You win! Press n for a new game.",
    Status.LOST: "Game over! Press n for a new game.",
}


def _render(game: Game2048) -> str:
    lines = [game.render_ascii(), f"Score: {game.score()}"]
    if STATUS_TEXT[game.status()]:
        lines.append(STATUS_TEXT[game.status()])
    return "\n".join(lines)


def run_console(game: Game2048,
                input_fn: Callable[[str], str] = input,
                output_fn: Callable[[str], None] = print) -> int:
    """
    Read commands until 'q' or end of input. Returns the number of moves that
    changed the board.
    """
    moves = 0
    output_fn(_render(game))
    while True:
        try:
            command = input_fn("move [w/a/s/d, n=new, q=quit]> ").strip().lower()
        except EOFError:
            break

        if command in ('q', 'quit'):
            break
        if command in ('n', 'new'):
            game.new_game()
            output_fn(_render(game))
            continue

        if command in KEY_MAP:
            direction = KEY_MAP[command]
        else:
            try:
                direction = Direction.parse(command)
            except ValueError:
                output_fn(f"Unknown command: {command!r}")
                continue

        if game.status() is not Status.IN_PROGRESS:
            output_fn("Game is over, press n for a new game or q to quit")
            continue

        if game.apply_move(direction):
            moves += 1
        else:
            output_fn(f"Can't move {direction.name.lower()}")
        output_fn(_render(game))

    logger.info(f"Console session ended after {moves} moves, score {game.score()}")
    return moves

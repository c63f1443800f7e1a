from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import pytest

from tilemerge import Game2048, ScriptedRandomSource


def place(game: Game2048, rows: Sequence[Sequence[int]]) -> Game2048:
    """Overwrite the board with a literal layout and forget the previous move."""
    game._board = np.array(rows, dtype=np.int64)
    game._reset_state()
    game._last_spawn = None
    return game


def board_rows(game: Game2048) -> list[list[int]]:
    return game.get_board().tolist()


def despawn(game: Game2048) -> None:
    """Remove the most recently spawned tile."""
    pos = game.last_spawn_position()
    game._board[pos.row, pos.col] = 0


@pytest.fixture()
def rng() -> ScriptedRandomSource:
    # first tile at index 0, second at index 0 of the remaining cells, rolled as a 2
    return ScriptedRandomSource([0, 0, 2])


@pytest.fixture()
def game(rng: ScriptedRandomSource) -> Game2048:
    return Game2048(rng=rng)

"""Invariants checked over seeded random play."""
from __future__ import annotations

import random
from collections import Counter

import numpy as np
import pytest

from tilemerge import WIN_TILE, Direction, Game2048, Status, UniformRandomSource


def _values(board: np.ndarray) -> Counter:
    return Counter(int(v) for v in board.flatten() if v != 0)


def _expected_status(board: np.ndarray) -> Status:
    if (board == WIN_TILE).any():
        return Status.WON
    if (board != 0).all():
        pairs = (board[:, :-1] == board[:, 1:]).any() or (board[:-1, :] == board[1:, :]).any()
        if not pairs:
            return Status.LOST
    return Status.IN_PROGRESS


@pytest.mark.parametrize("seed", [1, 7, 42])
def test_random_play_keeps_invariants(seed: int) -> None:
    chooser = random.Random(seed)
    game = Game2048(rng=UniformRandomSource(seed))
    directions = list(Direction)
    total = 0

    for _ in range(400):
        before = game.get_board()
        score_before = game.score()
        moved = game.apply_move(chooser.choice(directions))
        after = game.get_board()
        transitions = game.last_transitions()

        if not moved:
            assert np.array_equal(before, after)
            assert game.score() == score_before
            assert transitions == []
        else:
            merges = [t for t in transitions if t.displaced_value]
            # one merge per destination cell
            assert len({t.end for t in merges}) == len(merges)

            expected = _values(before)
            for t in merges:
                assert t.displaced_value == t.value
                expected[t.value] -= 2
                expected[t.value * 2] += 1
            spawn = game.last_spawn_position()
            expected[game.tile_value(spawn)] += 1
            assert +expected == _values(after)

            gained = game.score() - score_before
            assert gained == sum(2 * t.value for t in merges)
            total += gained

        assert all(v & (v - 1) == 0 for v in _values(after))
        assert game.status() is _expected_status(after)
        if game.status() is Status.LOST:
            break

    assert game.score() == total

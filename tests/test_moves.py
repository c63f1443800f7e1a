from __future__ import annotations

import pytest

from tilemerge import Direction, Game2048, Position, ScriptedRandomSource, TileTransition

from .conftest import board_rows, despawn, place

EMPTY = [0, 0, 0, 0]


def test_pairs_merge_toward_the_wall(game: Game2048, rng: ScriptedRandomSource) -> None:
    place(game, [EMPTY, EMPTY, EMPTY, [2, 2, 4, 4]])
    rng.extend([0, 2])

    assert game.apply_move(Direction.RIGHT) is True

    assert board_rows(game) == [
        [2, 0, 0, 0],
        EMPTY,
        EMPTY,
        [0, 0, 4, 8],
    ]
    assert game.score() == 12
    assert game.last_spawn_position() == Position(0, 0)


def test_transition_log_follows_scan_order(game: Game2048, rng: ScriptedRandomSource) -> None:
    place(game, [EMPTY, EMPTY, EMPTY, [2, 2, 4, 4]])
    rng.extend([0, 2])

    game.apply_move("right")

    assert game.last_transitions() == [
        TileTransition(Position(2, 3), Position(3, 3), 4, 4),
        TileTransition(Position(1, 3), Position(2, 3), 2, 0),
        TileTransition(Position(0, 3), Position(2, 3), 2, 2),
    ]
    assert game.last_direction() is Direction.RIGHT


def test_vertical_pairs_merge_upward(game: Game2048, rng: ScriptedRandomSource) -> None:
    place(game, [[0, 0, 0, 2], [0, 0, 0, 2], [0, 0, 0, 4], [0, 0, 0, 4]])
    rng.extend([0, 2])

    game.apply_move(Direction.UP)
    despawn(game)

    assert board_rows(game) == [[0, 0, 0, 4], [0, 0, 0, 8], EMPTY, EMPTY]
    assert game.score() == 12


def test_slides_and_merges_happen_in_one_pass(game: Game2048, rng: ScriptedRandomSource) -> None:
    place(game, [
        [0, 4, 0, 8],
        [2, 0, 16, 0],
        [0, 4, 0, 0],
        [0, 0, 4, 8],
    ])
    rng.extend([0, 2])

    game.apply_move(Direction.DOWN)
    despawn(game)

    assert board_rows(game) == [
        EMPTY,
        EMPTY,
        [0, 0, 16, 0],
        [2, 8, 4, 16],
    ]
    assert game.score() == 24


def test_three_equal_tiles_merge_once(game: Game2048, rng: ScriptedRandomSource) -> None:
    place(game, [[2, 2, 2, 0], EMPTY, EMPTY, EMPTY])
    rng.extend([0, 2])

    game.apply_move(Direction.RIGHT)
    despawn(game)

    assert board_rows(game)[0] == [0, 0, 2, 4]
    assert game.score() == 4
    assert game.last_transitions()[-1] == TileTransition(Position(0, 0), Position(2, 0), 2, 0)


def test_merge_result_is_not_merged_into_neighbour(game: Game2048, rng: ScriptedRandomSource) -> None:
    place(game, [[2, 2, 4, 0], EMPTY, EMPTY, EMPTY])
    rng.extend([0, 2])

    game.apply_move(Direction.RIGHT)
    despawn(game)

    assert board_rows(game)[0] == [0, 0, 4, 4]
    assert game.score() == 4


def test_merge_marker_blocks_equal_tile_behind(game: Game2048, rng: ScriptedRandomSource) -> None:
    place(game, [EMPTY, [4, 0, 2, 2], EMPTY, EMPTY])
    rng.extend([0, 2])

    game.apply_move(Direction.RIGHT)

    assert board_rows(game)[1] == [0, 0, 4, 4]
    assert game.score() == 4


def test_markers_reset_between_moves(game: Game2048, rng: ScriptedRandomSource) -> None:
    place(game, [EMPTY, [4, 0, 2, 2], EMPTY, EMPTY])
    rng.extend([0, 2, 0, 2])

    game.apply_move(Direction.RIGHT)
    game.apply_move(Direction.RIGHT)

    assert board_rows(game)[1] == [0, 0, 0, 8]
    assert game.score() == 12


def test_noop_move_changes_nothing(game: Game2048, rng: ScriptedRandomSource) -> None:
    place(game, [[2, 4, 0, 0], [8, 0, 0, 0], EMPTY, [4, 2, 0, 0]])
    before = board_rows(game)
    remaining = rng.remaining

    assert game.apply_move(Direction.LEFT) is False

    assert board_rows(game) == before
    assert game.score() == 0
    assert game.last_transitions() == []
    assert game.last_spawn_position() is None
    assert game.last_direction() is None
    assert rng.remaining == remaining


def test_noop_move_clears_previous_log(game: Game2048, rng: ScriptedRandomSource) -> None:
    place(game, [[0, 2, 0, 0], EMPTY, EMPTY, EMPTY])
    rng.extend([2, 2])

    assert game.apply_move(Direction.LEFT)
    assert len(game.last_transitions()) == 1
    assert not game.apply_move(Direction.UP)
    assert game.last_transitions() == []
    assert game.last_direction() is Direction.LEFT


def test_direction_names_are_accepted(game: Game2048) -> None:
    assert Direction.parse(" Up ") is Direction.UP
    assert Direction.parse(Direction.DOWN) is Direction.DOWN


def test_unknown_direction_is_rejected(game: Game2048) -> None:
    with pytest.raises(ValueError):
        game.apply_move("sideways")


def test_valid_moves_leaves_state_alone(game: Game2048, rng: ScriptedRandomSource) -> None:
    place(game, [[2, 0, 0, 0], EMPTY, EMPTY, EMPTY])
    remaining = rng.remaining

    assert set(game.valid_moves()) == {Direction.RIGHT, Direction.DOWN}
    assert board_rows(game)[0] == [2, 0, 0, 0]
    assert game.score() == 0
    assert game.last_transitions() == []
    assert rng.remaining == remaining


def test_tile_value_bounds(game: Game2048) -> None:
    place(game, [EMPTY, EMPTY, [0, 0, 0, 32], EMPTY])
    assert game.tile_value(3, 2) == 32
    assert game.tile_value(Position(3, 2)) == 32
    assert game.board_size() == 4
    with pytest.raises(IndexError):
        game.tile_value(4, 0)
    with pytest.raises(IndexError):
        game.tile_value(0, -1)

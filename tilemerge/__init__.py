# tilemerge: rules engine for a sliding tile-merging puzzle
from .game import (
    BOARD_SIZE,
    WIN_TILE,
    BoardFullError,
    Direction,
    Game2048,
    Position,
    Scenario,
    Status,
    TileTransition,
)
from .rng import RandomSource, ScriptedRandomSource, UniformRandomSource

__all__ = [
    "Game2048",
    "Direction",
    "Status",
    "Scenario",
    "Position",
    "TileTransition",
    "BoardFullError",
    "BOARD_SIZE",
    "WIN_TILE",

    "RandomSource",
    "UniformRandomSource",
    "ScriptedRandomSource",
]

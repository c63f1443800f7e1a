"""
Board engine for the tile-merging puzzle.

Owns the grid, the score and the win/loss status. Renderers read the board and
the per-move transition log; input layers call ``apply_move``. Nothing here
draws or waits on time.
"""
from __future__ import annotations

import logging
from enum import Enum, IntEnum
from typing import Any, Dict, List, NamedTuple, Optional, Set, Tuple, Union

import numpy as np

from .rng import RandomSource, UniformRandomSource

logger = logging.getLogger(__name__)

# --- Constants for Logic ---
BOARD_SIZE = 4
WIN_TILE = 2048
FIRST_TILE = 2
FOUR_ODDS = 4  # one roll in FOUR_ODDS spawns a 4, the rest spawn a 2

BoardType = np.ndarray


class Position(NamedTuple):
    col: int
    row: int


class Direction(Enum):
    LEFT = (-1, 0)
    RIGHT = (1, 0)
    UP = (0, -1)
    DOWN = (0, 1)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @classmethod
    def parse(cls, direction: Union["Direction", str]) -> "Direction":
        if isinstance(direction, cls):
            return direction
        try:
            return cls[str(direction).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown direction: {direction!r}") from None


class Status(IntEnum):
    IN_PROGRESS = 0
    LOST = 1
    WON = 2


class Scenario(Enum):
    WIN_TEST = "win"
    LOSE_TEST = "lose"


class TileTransition(NamedTuple):
    start: Position
    end: Position
    value: int
    displaced_value: int  # 0 if the tile slid into an empty cell


class BoardFullError(AssertionError):
    """Raised when a spawn is requested with no empty cell left."""


# Row-major literals, row 0 at the top.
SCENARIO_BOARDS: Dict[Scenario, Tuple[Tuple[int, ...], ...]] = {
    Scenario.WIN_TEST: (
        (0, 0, 0, 0),
        (0, 1024, 1024, 0),
        (0, 512, 128, 0),
        (0, 64, 16, 0),
    ),
    Scenario.LOSE_TEST: (
        (0, 8, 64, 32),
        (16, 32, 256, 8),
        (64, 8, 0, 16),
        (4, 32, 512, 64),
    ),
}


class Game2048:
    def __init__(self, rng: Optional[RandomSource] = None, scenario: Optional[Scenario] = None):
        self.size = BOARD_SIZE
        self.rng: RandomSource = rng if rng is not None else UniformRandomSource()
        self.listeners: List[Any] = []

        self._board: BoardType = np.zeros((self.size, self.size), dtype=np.int64)
        self._score = 0
        self._status = Status.IN_PROGRESS
        self._transitions: List[TileTransition] = []
        self._merged: Set[Position] = set()
        self._last_spawn: Optional[Position] = None
        self._last_direction: Optional[Direction] = None

        if scenario is None:
            self.new_game()
        else:
            self.fixed_scenario(scenario)

    # --- Listeners ---
    def add_listener(self, listener):
        if listener not in self.listeners:
            self.listeners.append(listener)

    def remove_listener(self, listener):
        if listener in self.listeners:
            self.listeners.remove(listener)

    def _notify(self, event_name, *args, **kwargs):
        for listener in self.listeners:
            if hasattr(listener, event_name):
                getattr(listener, event_name)(*args, **kwargs)

    # --- Game setup ---
    def _reset_state(self) -> None:
        self._score = 0
        self._status = Status.IN_PROGRESS
        self._transitions = []
        self._merged = set()
        self._last_direction = None

    def new_game(self) -> None:
        """Clear the board and place two starting tiles."""
        self._board = np.zeros((self.size, self.size), dtype=np.int64)
        self._reset_state()
        self._spawn_first()
        self.spawn()
        logger.info(f"New game started, tiles at {self._occupied()}")
        self._notify('on_reset', self.get_board(), self._score)

    def fixed_scenario(self, kind: Scenario) -> None:
        """
        Load one of the hand-authored boards used to exercise win/loss detection,
        then spawn one tile on it.
        """
        kind = Scenario(kind)
        self._board = np.array(SCENARIO_BOARDS[kind], dtype=np.int64)
        self._reset_state()
        self.spawn()
        logger.info(f"Loaded scenario {kind.name}")
        self._notify('on_reset', self.get_board(), self._score)

    # --- Spawning ---
    def _empty_cells(self) -> List[Position]:
        return [Position(c, r) for r in range(self.size) for c in range(self.size)
                if self._board[r, c] == 0]

    def _occupied(self) -> List[Position]:
        return [Position(c, r) for r in range(self.size) for c in range(self.size)
                if self._board[r, c] != 0]

    def _random_empty_cell(self) -> Position:
        empty_cells = self._empty_cells()
        if not empty_cells:
            raise BoardFullError("spawn requested on a full board")
        return empty_cells[self.rng.randint(0, len(empty_cells) - 1)]

    def _spawn_first(self) -> Position:
        pos = self._random_empty_cell()
        self._board[pos.row, pos.col] = FIRST_TILE
        self._last_spawn = pos
        logger.debug(f"Spawned {FIRST_TILE} at {pos}")
        self._notify('on_tile_spawned', pos, FIRST_TILE)
        return pos

    def spawn(self) -> Position:
        """
        Place a 2 (3 in 4) or a 4 (1 in 4) on a uniformly chosen empty cell.

        Callers must make sure an empty cell exists; a full board raises
        BoardFullError.
        """
        pos = self._random_empty_cell()
        value = 4 if self.rng.randint(1, FOUR_ODDS) == 1 else 2
        self._board[pos.row, pos.col] = value
        self._last_spawn = pos
        logger.debug(f"Spawned {value} at {pos}")
        self._notify('on_tile_spawned', pos, value)
        return pos

    # --- Move resolution ---
    def _scan_order(self, direction: Direction) -> List[Position]:
        n = self.size
        if direction is Direction.RIGHT:
            return [Position(c, r) for c in range(n - 2, -1, -1) for r in range(n)]
        if direction is Direction.LEFT:
            return [Position(c, r) for c in range(1, n) for r in range(n)]
        if direction is Direction.UP:
            return [Position(c, r) for r in range(1, n) for c in range(n)]
        return [Position(c, r) for r in range(n - 2, -1, -1) for c in range(n)]

    def _in_bounds(self, col: int, row: int) -> bool:
        return 0 <= col < self.size and 0 <= row < self.size

    def _slide_tile(self, start: Position, direction: Direction) -> bool:
        value = int(self._board[start.row, start.col])
        curr = start
        displaced = 0
        moved = False

        while self._in_bounds(curr.col + direction.dx, curr.row + direction.dy):
            nxt = Position(curr.col + direction.dx, curr.row + direction.dy)
            target = int(self._board[nxt.row, nxt.col])
            if target == 0:
                self._board[nxt.row, nxt.col] = value
                self._board[curr.row, curr.col] = 0
                displaced = 0
                curr = nxt
                moved = True
            elif target == value and nxt not in self._merged:
                self._board[curr.row, curr.col] = 0
                self._board[nxt.row, nxt.col] = value * 2
                self._score += value * 2
                self._merged.add(nxt)
                displaced = target
                curr = nxt
                moved = True
                break
            else:
                break

        if moved:
            self._transitions.append(TileTransition(start, curr, value, displaced))
        return moved

    def _resolve(self, direction: Direction) -> bool:
        self._transitions = []
        self._merged = set()
        moved = False
        for pos in self._scan_order(direction):
            if self._board[pos.row, pos.col] != 0:
                if self._slide_tile(pos, direction):
                    moved = True
        return moved

    def apply_move(self, direction: Union[Direction, str]) -> bool:
        """
        Slide every tile toward one wall, merging equal neighbours once per move.

        Returns True if any tile moved or merged. A successful move spawns one
        new tile and updates the status; a move that changes nothing leaves
        board and score untouched.
        """
        direction = Direction.parse(direction)
        score_before = self._score
        moved = self._resolve(direction)

        if moved:
            self.spawn()
            self._last_direction = direction
            logger.debug(f"Move {direction.name}: {len(self._transitions)} tiles moved, "
                         f"score +{self._score - score_before} = {self._score}")
            self._notify('on_move_complete', list(self._transitions))
        else:
            logger.debug(f"Move {direction.name}: nothing moved")

        self._update_status()
        return moved

    # --- Terminal detection ---
    def is_full(self) -> bool:
        return not np.any(self._board == 0)

    def has_available_merge(self) -> bool:
        board = self._board
        horizontal = (board[:, :-1] == board[:, 1:]) & (board[:, :-1] != 0)
        vertical = (board[:-1, :] == board[1:, :]) & (board[:-1, :] != 0)
        return bool(horizontal.any() or vertical.any())

    def _compute_status(self) -> Status:
        if np.any(self._board == WIN_TILE):
            return Status.WON
        if self.is_full() and not self.has_available_merge():
            return Status.LOST
        return Status.IN_PROGRESS

    def _update_status(self) -> None:
        previous = self._status
        self._status = self._compute_status()
        if self._status == previous:
            return
        if self._status is Status.WON:
            logger.info(f"Game won with score {self._score}")
            self._notify('on_win')
        elif self._status is Status.LOST:
            logger.info(f"Game lost with score {self._score}")
            self._notify('on_game_over')

    def valid_moves(self) -> List[Direction]:
        """Directions that would change the board, checked on a scratch copy."""
        board, score = self._board, self._score
        transitions, merged = self._transitions, self._merged
        valid = []
        try:
            for direction in Direction:
                self._board = board.copy()
                self._score = score
                if self._resolve(direction):
                    valid.append(direction)
        finally:
            self._board, self._score = board, score
            self._transitions, self._merged = transitions, merged
        return valid

    # --- Queries ---
    def tile_value(self, col: Union[int, Position], row: Optional[int] = None) -> int:
        if isinstance(col, tuple):
            col, row = col
        if row is None or not self._in_bounds(col, row):
            raise IndexError(f"Position ({col}, {row}) outside {self.size}x{self.size} board")
        return int(self._board[row, col])

    def board_size(self) -> int:
        return self.size

    def score(self) -> int:
        return self._score

    def status(self) -> Status:
        return self._status

    def last_transitions(self) -> List[TileTransition]:
        return list(self._transitions)

    def last_spawn_position(self) -> Optional[Position]:
        return self._last_spawn

    def last_direction(self) -> Optional[Direction]:
        return self._last_direction

    def get_board(self) -> BoardType:
        return self._board.copy()  # Return a copy to prevent external modification

    def max_tile(self) -> int:
        return int(self._board.max())

    def render_ascii(self, cell_width: int = 6) -> str:
        separator = "+" + ("-" * cell_width + "+") * self.size
        output = [separator]
        for r in range(self.size):
            row_str = ["|"]
            for c in range(self.size):
                val = int(self._board[r, c])
                cell_str = str(val) if val != 0 else "."
                row_str.append(cell_str.center(cell_width))
                row_str.append("|")
            output.append("".join(row_str))
            output.append(separator)
        return "\n".join(output)

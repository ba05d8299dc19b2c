"""Data models shared by the engine, the spawner and the front-end."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from whackamole.constants import (
    GRID_ROWS, GRID_COLS, DIFFICULTY_SETTINGS,
    NORMAL_POINTS, SPECIAL_POINTS, BOMB_POINTS,
)


class TargetKind(Enum):
    """What can pop out of a hole, valued by its score delta."""
    NORMAL = NORMAL_POINTS
    SPECIAL = SPECIAL_POINTS
    BOMB = BOMB_POINTS

    @property
    def points(self) -> int:
        return self.value


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def params(self) -> DifficultyParams:
        interval, lifetime, max_targets = DIFFICULTY_SETTINGS[self.value]
        return DifficultyParams(interval, lifetime, max_targets)


class GameStatus(Enum):
    READY = auto()
    PLAYING = auto()
    PAUSED = auto()
    ENDED = auto()

    @property
    def is_idle(self) -> bool:
        """Ready and Ended are the only states where difficulty may change."""
        return self in (GameStatus.READY, GameStatus.ENDED)


@dataclass(frozen=True)
class DifficultyParams:
    """
    Timing knobs for one difficulty level.

    Attributes
    ----------
    spawn_interval_ms : int
        Period of the spawn cycle.
    target_lifetime_ms : int
        How long an unselected target stays in its cell.
    max_targets : int
        Targets placed per spawn cycle (at least one whenever a cell is free).
    """
    spawn_interval_ms: int
    target_lifetime_ms: int
    max_targets: int


@dataclass(eq=False)
class Target:
    """
    A single spawned target.

    Compared by identity: an expiry timer only clears its cell if the cell
    still holds this exact instance, not merely a target of the same kind.
    """
    kind: TargetKind
    serial: int
    spawned_at_ms: int
    lifetime_ms: int

    @property
    def expires_at_ms(self) -> int:
        return self.spawned_at_ms + self.lifetime_ms


# ----------------------------------- Grid -------------------------------------------

Cell = Target | None
Grid = tuple[tuple[Cell, ...], ...]


def empty_grid() -> Grid:
    return tuple(tuple(None for _ in range(GRID_COLS)) for _ in range(GRID_ROWS))


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < GRID_ROWS and 0 <= col < GRID_COLS


def with_cell(grid: Grid, row: int, col: int, value: Cell) -> Grid:
    """Return a copy of ``grid`` with one cell replaced."""
    return tuple(
        tuple(value if (r, c) == (row, col) else cell for c, cell in enumerate(cells))
        for r, cells in enumerate(grid)
    )


def empty_cells(grid: Grid) -> list[tuple[int, int]]:
    return [(r, c) for r, cells in enumerate(grid) for c, cell in enumerate(cells) if cell is None]


def occupied_cells(grid: Grid) -> list[tuple[int, int]]:
    return [(r, c) for r, cells in enumerate(grid) for c, cell in enumerate(cells) if cell is not None]


# ---------------------------------- Events ------------------------------------------

class EventType(Enum):
    TARGET_SPAWNED = auto()
    TARGET_EXPIRED = auto()
    TARGET_HIT = auto()
    MISSED_EMPTY = auto()
    STATUS_CHANGED = auto()
    NEW_HIGH_SCORE = auto()


@dataclass(frozen=True)
class GameEvent:
    """
    Notification pushed to engine subscribers (sound, animation, logging).

    ``kind``, ``row`` and ``col`` are set for target events; ``status`` for
    status changes; ``score`` always carries the score after the event.
    """
    type: EventType
    score: int
    kind: TargetKind | None = None
    row: int | None = None
    col: int | None = None
    delta: int = 0
    status: GameStatus | None = None


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable read-out of the current session."""
    status: GameStatus
    score: int
    time_remaining: int
    grid: tuple[tuple[TargetKind | None, ...], ...]
    high_score: int
    difficulty: Difficulty
    new_high_score: bool = False

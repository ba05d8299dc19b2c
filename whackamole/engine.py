"""Game engine: lifecycle, countdown, spawn cycle, target expiry and scoring.

Three timed processes share the grid: the 1 s countdown, the periodic spawn
cycle and one expiry timer per spawned target. They all run as callbacks on
a ``TimerQueue`` and every callback re-reads the current status and grid when
it fires instead of trusting what was true when it was scheduled. Each grid
change is computed from the latest grid and stored in the same step.

Lifecycle:
- READY   -> start()             -> PLAYING (countdown + immediate spawn)
- PLAYING -> pause()             -> PAUSED  (countdown and spawn stopped)
- PAUSED  -> start()             -> PLAYING (grid cleared, spawn restarted)
- PLAYING -> countdown reaches 0 -> ENDED   (timers stopped, high score saved)
- any     -> restart()           -> READY   (score, time and grid reset)
"""

from __future__ import annotations

from functools import partial
import random
from typing import Callable

from whackamole.constants import ROUND_SECONDS, TICK_MS, DEFAULT_DIFFICULTY
from whackamole.logger import GameLogger
from whackamole.models import (
    Difficulty, DifficultyParams, EventType, GameEvent, GameSnapshot, GameStatus,
    Grid, Target, TargetKind, empty_grid, in_bounds, with_cell,
)
from whackamole.spawner import Spawner
from whackamole.timers import Timer, TimerQueue

Listener = Callable[[GameEvent], None]
ReadBest = Callable[[Difficulty], int]
WriteBest = Callable[[Difficulty, int], None]


class GameEngine:
    """
    Owns one game session and the timers that drive it.

    Parameters
    ----------
    difficulty : Difficulty
        Starting difficulty.
    read_best, write_best : callable, optional
        High-score capability, e.g. ``store.read`` / ``store.write``. Without
        them the high score starts at 0 and is never persisted.
    timers : TimerQueue, optional
        Scheduler; defaults to one driven by pygame's millisecond clock.
    rng : random.Random, optional
        Source of randomness for cell and kind draws.
    logger : GameLogger, optional
        Markdown event log.
    """

    def __init__(self,
                 difficulty: Difficulty = Difficulty(DEFAULT_DIFFICULTY),
                 read_best: ReadBest | None = None,
                 write_best: WriteBest | None = None,
                 timers: TimerQueue | None = None,
                 rng: random.Random | None = None,
                 logger: GameLogger | None = None) -> None:
        self.timers = timers or TimerQueue()
        self.spawner = Spawner(rng)
        self.logger = logger
        self._read_best = read_best
        self._write_best = write_best
        self._listeners: list[Listener] = []

        self._difficulty = difficulty
        self._status = GameStatus.READY
        self._score = 0
        self._time_remaining = ROUND_SECONDS
        self._grid: Grid = empty_grid()

        self._countdown_timer: Timer | None = None
        self._spawn_timer: Timer | None = None
        self._kickoff_timer: Timer | None = None

        self._high_score = self._load_high_score()
        self._new_high_score = False

    # ------------------------------- Read-outs --------------------------------------

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def score(self) -> int:
        return self._score

    @property
    def time_remaining(self) -> int:
        return self._time_remaining

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    @property
    def params(self) -> DifficultyParams:
        return self._difficulty.params

    @property
    def high_score(self) -> int:
        return self._high_score

    @property
    def new_high_score(self) -> bool:
        """True once the finished round has beaten the stored best, until restart()."""
        return self._new_high_score

    def snapshot(self) -> GameSnapshot:
        kinds = tuple(tuple(cell.kind if cell is not None else None for cell in row) for row in self._grid)
        return GameSnapshot(self._status, self._score, self._time_remaining, kinds,
                            self._high_score, self._difficulty, self._new_high_score)

    # ------------------------------- Subscribers ------------------------------------

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event_type: EventType, **fields) -> None:
        event = GameEvent(event_type, self._score, **fields)
        for listener in list(self._listeners):
            listener(event)

    # ------------------------------- Controls ---------------------------------------

    def update(self) -> int:
        """Run every timer that is due; call once per frame."""
        return self.timers.run_pending()

    def start(self) -> None:
        """
        Start from READY or resume from PAUSED.

        Resuming discards the targets that were on the board when the game
        was paused and restarts the spawn cycle with an immediate spawn. Score
        and remaining time carry over. No-op while PLAYING or ENDED.
        """
        if self._status in (GameStatus.PLAYING, GameStatus.ENDED):
            return
        resuming = self._status is GameStatus.PAUSED
        params = self.params
        self._set_status(GameStatus.PLAYING,
                         f"{self._difficulty.value}: spawnInterval={params.spawn_interval_ms}, "
                         f"lifetime={params.target_lifetime_ms}, maxTargets={params.max_targets}")
        if resuming:
            self._grid = empty_grid()
        if self._countdown_timer is None:
            self._countdown_timer = self.timers.call_every(TICK_MS, self._tick)
        self._restart_spawning()

    def pause(self) -> None:
        if self._status is not GameStatus.PLAYING:
            return
        self._stop_processes()
        self._set_status(GameStatus.PAUSED)

    def restart(self) -> None:
        """Stop everything and return to READY with a fresh session."""
        self._stop_processes()
        self._score = 0
        self._time_remaining = ROUND_SECONDS
        self._grid = empty_grid()
        self._new_high_score = False
        self._set_status(GameStatus.READY)

    def set_difficulty(self, difficulty: Difficulty) -> bool:
        """
        Switch difficulty while READY or ENDED.

        Returns
        -------
        bool
            False if the change was refused because a game is in progress.
        """
        if not self._status.is_idle:
            return False
        if difficulty is not self._difficulty:
            self._difficulty = difficulty
            self._high_score = self._load_high_score()
        return True

    def select_cell(self, row: int, col: int) -> TargetKind | None:
        """
        Whack the cell at (row, col).

        The target is removed before the score changes, so a second click on
        the same cell finds it empty. Selecting outside the grid or while not
        PLAYING does nothing.

        Returns
        -------
        TargetKind | None
            Kind of the target hit, or None if nothing was hit.
        """
        if self._status is not GameStatus.PLAYING or not in_bounds(row, col):
            return None

        target = self._grid[row][col]
        if target is None:
            if self.logger:
                self.logger.log_selection((row, col), False, "Empty cell")
            self._emit(EventType.MISSED_EMPTY, row=row, col=col)
            return None

        self._grid = with_cell(self._grid, row, col, None)
        old_score = self._score
        self._score = max(0, self._score + target.kind.points)
        delta = self._score - old_score
        if self.logger:
            self.logger.log_selection((row, col), True,
                                      f"{target.kind.name.lower()} {delta:+d} -> score {self._score}")
        self._emit(EventType.TARGET_HIT, kind=target.kind, row=row, col=col, delta=delta)
        return target.kind

    # ------------------------------- Processes --------------------------------------

    def _set_status(self, status: GameStatus, details: str = "") -> None:
        old = self._status
        self._status = status
        if old is status:
            return
        if self.logger:
            self.logger.log_status(old.name, status.name, details)
        self._emit(EventType.STATUS_CHANGED, status=status)

    def _stop_processes(self) -> None:
        for timer in (self._countdown_timer, self._spawn_timer, self._kickoff_timer):
            self.timers.cancel(timer)
        self._countdown_timer = None
        self._spawn_timer = None
        self._kickoff_timer = None

    def _restart_spawning(self) -> None:
        self.timers.cancel(self._spawn_timer)
        self.timers.cancel(self._kickoff_timer)
        self._spawn_timer = None
        # Deferred so the first spawn is ordered after the switch to PLAYING
        self._kickoff_timer = self.timers.call_later(0, self._kickoff)

    def _kickoff(self) -> None:
        self._kickoff_timer = None
        if self._status is not GameStatus.PLAYING:
            return
        self._spawn_cycle()
        self._spawn_timer = self.timers.call_every(self.params.spawn_interval_ms, self._spawn_cycle)

    def _tick(self) -> None:
        if self._status is not GameStatus.PLAYING:
            return
        if self._time_remaining <= 1:
            self._time_remaining = 0
            self._stop_processes()
            # Settle the high score first so ENDED listeners see the final value
            new_best = self._record_high_score()
            self._set_status(GameStatus.ENDED)
            if new_best:
                self._emit(EventType.NEW_HIGH_SCORE)
            return
        self._time_remaining -= 1

    def _spawn_cycle(self) -> None:
        if self._status is not GameStatus.PLAYING:
            return
        params = self.params
        placements = self.spawner.plan(self._grid, params.max_targets,
                                       self.timers.now(), params.target_lifetime_ms)
        for row, col, target in placements:
            self._grid = with_cell(self._grid, row, col, target)
            self.timers.call_later(params.target_lifetime_ms, partial(self._expire, row, col, target))
            self._emit(EventType.TARGET_SPAWNED, kind=target.kind, row=row, col=col)

    def _expire(self, row: int, col: int, target: Target) -> None:
        # The cell may have been whacked, or refilled by a later spawn, meanwhile
        if self._status is not GameStatus.PLAYING or self._grid[row][col] is not target:
            return
        self._grid = with_cell(self._grid, row, col, None)
        self._emit(EventType.TARGET_EXPIRED, kind=target.kind, row=row, col=col)

    # ------------------------------- High score -------------------------------------

    def _load_high_score(self) -> int:
        if self._read_best is None:
            return 0
        try:
            return max(0, int(self._read_best(self._difficulty)))
        except Exception as e:
            print(f"Failed to read high score: {e}")
            if self.logger:
                self.logger.log_error(f"High score read failed: {e}")
            return 0

    def _record_high_score(self) -> bool:
        """Persist the final score if it beats the stored best; True if it did."""
        # A failed re-read yields 0; the best loaded earlier still guards the store
        best = max(self._high_score, self._load_high_score())
        if self.logger:
            self.logger.log_game_over(self._difficulty.value, self._score, best)
        if self._score <= best:
            self._high_score = best
            return False

        self._high_score = self._score
        self._new_high_score = True
        if self._write_best is not None:
            try:
                self._write_best(self._difficulty, self._score)
            except Exception as e:
                print(f"Failed to save high score: {e}")
                if self.logger:
                    self.logger.log_error(f"High score write failed: {e}")
        return True

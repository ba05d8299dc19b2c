from __future__ import annotations

import itertools
import random

from whackamole.constants import NORMAL_THRESHOLD, SPECIAL_THRESHOLD
from whackamole.models import Grid, Target, TargetKind, empty_cells


class Spawner:
    """
    Decides which empty cells receive new targets on each spawn cycle.

    Notes
    - The spawner only plans; the engine writes the placements into the
      latest grid and schedules their expiry.
    - At least one target is placed whenever a cell is free, even if the
      board already holds ``max_targets`` targets.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()
        self._serials = itertools.count(1)

    def choose_kind(self) -> TargetKind:
        """
        Draw a target kind: 70% normal, 20% special, 10% bomb.
        """
        draw = self.rng.random()
        if draw < NORMAL_THRESHOLD:
            return TargetKind.NORMAL
        if draw < SPECIAL_THRESHOLD:
            return TargetKind.SPECIAL
        return TargetKind.BOMB

    @staticmethod
    def spawn_count(grid: Grid, max_targets: int) -> int:
        """
        Number of targets a cycle should place on ``grid``.

        Parameters
        ----------
        grid : Grid
            Current board.
        max_targets : int
            Per-difficulty cap on targets placed per cycle.

        Returns
        -------
        int
            ``max(1, min(max_targets, empty))``, bounded by the number of empty cells.
        """
        empty = len(empty_cells(grid))
        return min(empty, max(1, min(max_targets, empty)))

    def plan(self, grid: Grid, max_targets: int, now_ms: int, lifetime_ms: int) -> list[tuple[int, int, Target]]:
        """
        Pick cells and kinds for one spawn cycle.

        Cells are drawn uniformly from the empty cells without replacement,
        so occupied cells are never overwritten.

        Returns
        -------
        list[tuple[int, int, Target]]
            ``(row, col, target)`` placements, possibly empty if the board is full.
        """
        available = empty_cells(grid)
        placements = []
        for _ in range(self.spawn_count(grid, max_targets)):
            row, col = available.pop(self.rng.randrange(len(available)))
            target = Target(self.choose_kind(), next(self._serials), now_ms, lifetime_ms)
            placements.append((row, col, target))
        return placements

"""Cooperative timer queue.

All timers run on the caller's thread when ``run_pending()`` is invoked,
typically once per frame. Callbacks fire in due-time order (ties broken by
scheduling order) and never overlap. Timings are driven by
pygame.time.get_ticks() (ms-precise, frame-rate independent) unless another
clock is supplied.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Callable

import pygame


class Timer:
    """
    Handle for a scheduled callback.

    A one-shot timer cancels itself once it has fired; a periodic timer keeps
    firing every ``interval_ms`` until ``cancel()`` is called.
    """

    def __init__(self, due_ms: int, callback: Callable[[], None], interval_ms: int | None = None) -> None:
        self.due_ms = due_ms
        self.callback = callback
        self.interval_ms = interval_ms
        self.cancelled = False

    @property
    def periodic(self) -> bool:
        return self.interval_ms is not None

    @property
    def active(self) -> bool:
        return not self.cancelled

    def cancel(self) -> None:
        self.cancelled = True


class TimerQueue:
    """
    Single-threaded scheduler for one-shot and periodic timers.

    While a callback runs, ``now()`` reports that timer's due time rather
    than the wall clock, so a large clock jump replays the backlog with the
    same spacing it would have had at full frame rate.
    """

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        self.clock = clock or pygame.time.get_ticks
        self._heap: list[tuple[int, int, Timer]] = []
        self._seq = itertools.count()
        self._firing_at: int | None = None

    def now(self) -> int:
        if self._firing_at is not None:
            return self._firing_at
        return self.clock()

    def _push(self, timer: Timer) -> None:
        heapq.heappush(self._heap, (timer.due_ms, next(self._seq), timer))

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> Timer:
        """Run ``callback`` once, ``delay_ms`` from now. A zero delay defers it to the next pass."""
        if delay_ms < 0:
            raise ValueError(f"delay must be >= 0, got {delay_ms}")
        timer = Timer(self.now() + delay_ms, callback)
        self._push(timer)
        return timer

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> Timer:
        """Run ``callback`` every ``interval_ms``, first one interval from now."""
        if interval_ms <= 0:
            raise ValueError(f"interval must be > 0, got {interval_ms}")
        timer = Timer(self.now() + interval_ms, callback, interval_ms)
        self._push(timer)
        return timer

    @staticmethod
    def cancel(timer: Timer | None) -> None:
        if timer is not None:
            timer.cancel()

    def pending(self) -> int:
        """Number of timers still scheduled to fire."""
        return sum(1 for _, _, timer in self._heap if timer.active)

    def run_pending(self) -> int:
        """
        Fire every timer that is due at the current clock reading.

        Returns
        -------
        int
            Number of callbacks invoked.
        """
        now = self.clock()
        fired = 0
        while self._heap and self._heap[0][0] <= now:
            due, _, timer = heapq.heappop(self._heap)
            if timer.cancelled:
                continue
            if timer.periodic:
                # Reschedule before running so the callback may cancel its own timer
                timer.due_ms = due + timer.interval_ms
                self._push(timer)
            else:
                timer.cancelled = True
            self._firing_at = due
            try:
                timer.callback()
            finally:
                self._firing_at = None
            fired += 1
        return fired

import os
import sys
import pytest

# Ensure the project root (containing the `whackamole` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from whackamole.engine import GameEngine
from whackamole.models import Difficulty
from whackamole.timers import TimerQueue


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start_ms=0):
        self.ms = start_ms

    def __call__(self):
        return self.ms

    def advance(self, ms):
        self.ms += ms


class ScriptedRandom:
    """Always picks the first empty cell; kind draws cycle through ``draws``."""

    def __init__(self, draws=(0.0,)):
        self.draws = list(draws)
        self.calls = 0

    def random(self):
        value = self.draws[self.calls % len(self.draws)]
        self.calls += 1
        return value

    def randrange(self, n):
        return 0


class MemoryScores:
    """In-memory stand-in for the high-score store."""

    def __init__(self, scores=None):
        self.scores = dict(scores or {})
        self.writes = []

    def read(self, difficulty):
        return self.scores.get(difficulty.value, 0)

    def write(self, difficulty, score):
        self.writes.append((difficulty, score))
        self.scores[difficulty.value] = score


# kind draws for ScriptedRandom
NORMAL = 0.0
SPECIAL = 0.75
BOMB = 0.95


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def timers(clock):
    return TimerQueue(clock)


@pytest.fixture()
def scores():
    return MemoryScores()


@pytest.fixture()
def make_engine(timers, scores):
    def factory(difficulty=Difficulty.MEDIUM, draws=(NORMAL,), rng=None, **kwargs):
        kwargs.setdefault('read_best', scores.read)
        kwargs.setdefault('write_best', scores.write)
        return GameEngine(difficulty, timers=timers, rng=rng or ScriptedRandom(draws), **kwargs)
    return factory


@pytest.fixture()
def advance(clock):
    """Move the clock forward and let the engine fire whatever became due."""
    def step(engine, ms=0):
        clock.advance(ms)
        engine.update()
    return step

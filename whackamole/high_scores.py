"""Best score per difficulty, persisted as a small JSON object.

The engine only sees the ``read`` / ``write`` pair, so any object with the
same two methods (or two plain functions) can stand in for this store.
"""

from __future__ import annotations

import json
import os

from whackamole.models import Difficulty


class JsonHighScoreStore:
    """
    High scores keyed by difficulty name, e.g. ``{"easy": 120, "medium": 85}``.

    Reads fail soft: a missing, unreadable or malformed file counts as no
    score recorded (0). Write errors propagate so the caller can log them.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    def load(self) -> dict[str, int]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            print(f"Failed to load high scores: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, int) and not isinstance(v, bool)}

    def read(self, difficulty: Difficulty) -> int:
        return max(0, self.load().get(difficulty.value, 0))

    def write(self, difficulty: Difficulty, score: int) -> None:
        scores = self.load()
        scores[difficulty.value] = int(score)
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(scores, f, indent=2, sort_keys=True)

"""Small helpers for presenting engine state."""

from whackamole.constants import ROUND_SECONDS, LOW_TIME_SECONDS
from whackamole.models import GameStatus, TargetKind


def format_time(seconds: int) -> str:
    """Format seconds as MM:SS."""
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


def time_fraction(seconds: int) -> float:
    """Share of the round still left, for progress bars."""
    return max(0.0, min(1.0, seconds / ROUND_SECONDS))


def is_low_time(seconds: int, status: GameStatus) -> bool:
    return status is GameStatus.PLAYING and seconds <= LOW_TIME_SECONDS


def points_label(kind: TargetKind) -> str:
    return f"{kind.points:+d}"

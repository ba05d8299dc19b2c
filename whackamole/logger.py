"""Markdown logger for gameplay events (starts, hits, misses, game over)."""

import datetime


class GameLogger:
    """Handles logging of game events to markdown file."""

    def __init__(self, log_file: str):
        """
        Initialize the game logger.

        Parameters
        ----------
        log_file : str
            Path to the log file
        """
        self.log_file = log_file
        self.setup_log()

    def setup_log(self) -> None:
        """Initialize the log file with headers."""
        try:
            with open(self.log_file, 'w', encoding='utf-8') as f:
                f.write("# Whack-a-Mole Game Log\n\n")
                f.write(f"Log started at: {datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n\n")
                f.write("## Game Events\n\n")
                f.write("| Timestamp | Event | Result | Details |\n")
                f.write("|-----------|-------|--------|---------|\n")
        except Exception as e:
            print(f"Failed to initialize log file: {e}")

    def _write_row(self, event: str, result: str, details: str) -> None:
        try:
            timestamp = datetime.datetime.now().strftime('%H:%M:%S.%f')[:-3]  # Include milliseconds
            with open(self.log_file, 'a', encoding='utf-8') as f:
                f.write(f"| {timestamp} | {event} | {result} | {details} |\n")
        except Exception as e:
            print(f"Failed to log {event.lower()}: {e}")

    def log_selection(self, cell: tuple[int, int], hit: bool, details: str = "") -> None:
        """
        Log a cell selection.

        Parameters
        ----------
        cell : tuple[int, int]
            Selected (row, col)
        hit : bool
            Whether the cell held a target
        details : str, optional
            Additional details about the selection
        """
        self._write_row(f"SELECT ({cell[0]}, {cell[1]})", "HIT" if hit else "MISS", details)

    def log_status(self, old: str, new: str, details: str = "") -> None:
        self._write_row("STATUS", f"{old} -> {new}", details)

    def log_game_over(self, difficulty: str, score: int, high_score: int) -> None:
        """Log the end of a round with its final score."""
        result = "NEW HIGH SCORE" if score > high_score else "GAME OVER"
        self._write_row("GAME OVER", result, f"{difficulty}: score {score}, best {max(score, high_score)}")

    def log_error(self, details: str) -> None:
        self._write_row("ERROR", "SYSTEM", details)

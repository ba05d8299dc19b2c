"""Board, HUD and overlay screens"""

from __future__ import annotations

from dataclasses import dataclass

import pygame

from whackamole.constants import (
    HUD_PADDING, TEXT_COLOR, WARNING_COLOR, HIGHLIGHT_COLOR, FONT_NAME, FONT_SIZE_SMALL,
    HOLE_COLOR, HOLE_RING, NORMAL_COLOR, SPECIAL_COLOR, BOMB_COLOR, BOMB_FUSE_COLOR,
    GRID_ROWS, GRID_COLS,
)
from whackamole.models import Difficulty, GameSnapshot, GameStatus, TargetKind
from whackamole.utils import format_time, time_fraction, is_low_time, points_label


@dataclass(frozen=True)
class Hole:
    """
    Screen position of one grid cell.

    Attributes
    ----------
    row, col : int
        Grid coordinates passed to the engine when the hole is clicked.
    pos : tuple[int, int]
        The (x, y) center of the hole on the playfield.
    radius : int
        Radius used to draw the hole and approximate the clickable region.
    """
    row: int
    col: int
    pos: tuple[int, int]
    radius: int

    def contains_point(self, point: tuple[int, int]) -> bool:
        dx = point[0] - self.pos[0]
        dy = point[1] - self.pos[1]
        return dx * dx + dy * dy <= self.radius * self.radius


def make_holes(width: int, height: int) -> list[Hole]:
    """Lay out the 3x3 board below the HUD, centred in the window."""
    top = int(height * 0.22)
    cell = min(width // GRID_COLS, (height - top) // GRID_ROWS)
    left = (width - cell * GRID_COLS) // 2
    radius = int(cell * 0.34)
    return [
        Hole(row, col, (left + col * cell + cell // 2, top + row * cell + cell // 2), radius)
        for row in range(GRID_ROWS)
        for col in range(GRID_COLS)
    ]


class Board:
    """Draws holes and whatever currently occupies them."""

    KIND_COLORS = {
        TargetKind.NORMAL: NORMAL_COLOR,
        TargetKind.SPECIAL: SPECIAL_COLOR,
        TargetKind.BOMB: BOMB_COLOR,
    }

    def __init__(self, font: pygame.font.Font) -> None:
        self.font = font

    def update_fonts(self, new_font: pygame.font.Font) -> None:
        self.font = new_font

    def draw(self, surf: pygame.Surface, holes: list[Hole], snapshot: GameSnapshot) -> None:
        dimmed = snapshot.status is not GameStatus.PLAYING
        for hole in holes:
            x, y = hole.pos
            r = hole.radius
            pygame.draw.circle(surf, HOLE_RING, (x, y), r + 6)
            pygame.draw.circle(surf, HOLE_COLOR, (x, y), r)

            kind = snapshot.grid[hole.row][hole.col]
            if kind is not None:
                self.draw_target(surf, hole, kind, dimmed)

    def draw_target(self, surf: pygame.Surface, hole: Hole, kind: TargetKind, dimmed: bool) -> None:
        x, y = hole.pos
        r = int(hole.radius * 0.8)
        color = self.KIND_COLORS[kind]
        if dimmed:
            color = tuple(c // 2 for c in color)
        pygame.draw.circle(surf, color, (x, y), r)

        if kind is TargetKind.BOMB:
            # fuse
            pygame.draw.line(surf, BOMB_FUSE_COLOR, (x + r // 2, y - r // 2), (x + r, y - r), 4)
        else:
            # eyes
            for dx in (-r // 3, r // 3):
                pygame.draw.circle(surf, (20, 20, 20), (x + dx, y - r // 4), max(2, r // 8))

        label = self.font.render(points_label(kind), True, TEXT_COLOR)
        surf.blit(label, label.get_rect(center=(x, y + r + label.get_height() // 2 + 4)))


class HUD:
    """Heads-Up Display: score and best on the left, timer on the right."""

    def __init__(self, font: pygame.font.Font) -> None:
        self.font = font
        self.small_font = pygame.font.Font(FONT_NAME, FONT_SIZE_SMALL)

    def update_fonts(self, new_font: pygame.font.Font) -> None:
        """Update fonts for responsive scaling."""
        self.font = new_font

    def draw(self, surf: pygame.Surface, snapshot: GameSnapshot, muted: bool = False) -> None:
        current_width = surf.get_width()
        padding = HUD_PADDING

        # LEFT SIDE: score, best, difficulty
        left_y = padding
        for line in (
            f"Score: {snapshot.score}",
            f"Best: {snapshot.high_score}",
            f"Difficulty: {snapshot.difficulty.value.capitalize()}",
        ):
            text_surf = self.font.render(line, True, TEXT_COLOR)
            surf.blit(text_surf, (padding, left_y))
            left_y += text_surf.get_height() + 4

        # RIGHT SIDE: time remaining with progress bar
        low = is_low_time(snapshot.time_remaining, snapshot.status)
        time_color = WARNING_COLOR if low else TEXT_COLOR
        time_text = self.font.render(f"Time: {format_time(snapshot.time_remaining)}", True, time_color)
        right_x = current_width - time_text.get_width() - padding
        surf.blit(time_text, (right_x, padding))

        bar_rect = pygame.Rect(right_x, padding + time_text.get_height() + 6, time_text.get_width(), 8)
        pygame.draw.rect(surf, (70, 70, 70), bar_rect, border_radius=4)
        fill = bar_rect.copy()
        fill.width = int(bar_rect.width * time_fraction(snapshot.time_remaining))
        pygame.draw.rect(surf, time_color, fill, border_radius=4)

        if muted:
            muted_text = self.small_font.render("MUTED", True, (255, 150, 150))
            surf.blit(muted_text, (right_x, bar_rect.bottom + 6))

        if snapshot.status is GameStatus.PAUSED:
            pause_text = self.font.render("PAUSED - press SPACE to resume", True, HIGHLIGHT_COLOR)
            text_rect = pause_text.get_rect(center=(current_width // 2, int(surf.get_height() * 0.15)))
            bg_rect = text_rect.inflate(20, 10)
            bg_surf = pygame.Surface(bg_rect.size, pygame.SRCALPHA)
            bg_surf.fill((0, 0, 0, 128))
            surf.blit(bg_surf, bg_rect)
            surf.blit(pause_text, text_rect)


class ReadyScreen:
    """Start prompt with the difficulty picker."""

    def __init__(self, font_big: pygame.font.Font, font_small: pygame.font.Font):
        self.font_big = font_big
        self.font_small = font_small

    def update_fonts(self, new_font_big: pygame.font.Font, new_font_small: pygame.font.Font) -> None:
        self.font_big = new_font_big
        self.font_small = new_font_small

    def draw(self, surf: pygame.Surface, difficulty: Difficulty) -> None:
        current_width = surf.get_width()
        current_height = surf.get_height()

        overlay = pygame.Surface((current_width, current_height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 140))
        surf.blit(overlay, (0, 0))

        title = self.font_big.render("WHACK-A-MOLE", True, HIGHLIGHT_COLOR)
        title_y = int(current_height * 0.3)
        surf.blit(title, title.get_rect(center=(current_width // 2, title_y)))

        y = title_y + 60
        for i, level in enumerate(Difficulty, start=1):
            params = level.params
            selected = level is difficulty
            marker = ">" if selected else " "
            line = (f"{marker} [{i}] {level.value.capitalize()}: every {params.spawn_interval_ms} ms, "
                    f"up to {params.max_targets}")
            color = HIGHLIGHT_COLOR if selected else (180, 180, 180)
            text = self.font_small.render(line, True, color)
            surf.blit(text, text.get_rect(center=(current_width // 2, y)))
            y += 28

        instructions = [
            "Normal +10   Special +25   Bomb -15",
            "SPACE - start   P - pause   R - restart   M - mute   ESC - quit",
        ]
        y += 20
        for line in instructions:
            text = self.font_small.render(line, True, TEXT_COLOR)
            surf.blit(text, text.get_rect(center=(current_width // 2, y)))
            y += 28


class GameOverScreen:
    """Game over screen with final score and restart option."""
    def __init__(self, font_big: pygame.font.Font, font_small: pygame.font.Font):
        self.font_big = font_big
        self.font_small = font_small

    def update_fonts(self, new_font_big: pygame.font.Font, new_font_small: pygame.font.Font) -> None:
        """Update fonts for responsive scaling."""
        self.font_big = new_font_big
        self.font_small = new_font_small

    def draw(self, surf: pygame.Surface, snapshot: GameSnapshot) -> None:
        """
        Draw game over screen.
        """
        current_width = surf.get_width()
        current_height = surf.get_height()

        # Semi-transparent overlay
        overlay = pygame.Surface((current_width, current_height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 180))
        surf.blit(overlay, (0, 0))

        game_over_text = self.font_big.render("TIME'S UP", True, (255, 100, 100))
        title_y = max(80, int(current_height * 0.3))
        surf.blit(game_over_text, game_over_text.get_rect(center=(current_width // 2, title_y)))

        stats_lines = [
            f"Final Score: {snapshot.score}",
            f"Best ({snapshot.difficulty.value}): {snapshot.high_score}",
        ]
        y_offset = title_y + 70
        for line in stats_lines:
            text_surf = self.font_small.render(line, True, TEXT_COLOR)
            surf.blit(text_surf, text_surf.get_rect(center=(current_width // 2, y_offset)))
            y_offset += 30

        if snapshot.new_high_score:
            record = self.font_small.render("NEW HIGH SCORE!", True, HIGHLIGHT_COLOR)
            surf.blit(record, record.get_rect(center=(current_width // 2, y_offset)))
            y_offset += 30

        inst_text = self.font_small.render("Press R to play again, 1/2/3 to change difficulty, ESC to quit",
                                           True, (150, 150, 150))
        surf.blit(inst_text, inst_text.get_rect(center=(current_width // 2, y_offset + 30)))

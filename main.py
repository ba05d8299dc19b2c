"""Game entry point"""

from __future__ import annotations

import math
import os
import random

import pygame

from whackamole.constants import *
from whackamole.engine import GameEngine
from whackamole.high_scores import JsonHighScoreStore
from whackamole.logger import GameLogger
from whackamole.models import Difficulty, EventType, GameEvent, GameStatus, TargetKind
from ui import Board, GameOverScreen, HUD, Hole, ReadyScreen, make_holes


class Game:
    """
    Front-end controller: owns the window, maps input onto engine controls,
    plays sounds for engine events, and draws the engine's snapshot.
    """

    DIFFICULTY_KEYS = {
        pygame.K_1: Difficulty.EASY,
        pygame.K_2: Difficulty.MEDIUM,
        pygame.K_3: Difficulty.HARD,
    }

    def __init__(self) -> None:
        """Initialize subsystems, load assets, and create the engine."""
        pygame.init()
        pygame.display.set_caption("Whack-a-Mole")

        # Make window resizable
        self.screen = pygame.display.set_mode((WIDTH, HEIGHT), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.font_small = pygame.font.Font(FONT_NAME, FONT_SIZE_MEDIUM)
        self.font_big = pygame.font.Font(FONT_NAME, FONT_SIZE_LARGE)
        self.current_width = WIDTH
        self.current_height = HEIGHT
        self.holes: list[Hole] = make_holes(WIDTH, HEIGHT)

        self.store = JsonHighScoreStore(HIGH_SCORE_FILE)
        self.logger = GameLogger(LOG_FILE)
        self.engine = GameEngine(read_best=self.store.read, write_best=self.store.write, logger=self.logger)
        self.engine.subscribe(self.on_game_event)

        # Audio
        self.bgm_volume = 0.5
        self.sfx_volume = 0.7
        self.muted = False
        self.sounds: dict[TargetKind | None, pygame.mixer.Sound] = {}
        self.init_audio()

        self.hud = HUD(self.font_small)
        self.board = Board(self.font_small)
        self.ready_screen = ReadyScreen(self.font_big, self.font_small)
        self.game_over_screen = GameOverScreen(self.font_big, self.font_small)

        self.hammer_cursor = None
        self.load_hammer_cursor()
        self.hammer_hit_effects = []

    # --------------------------------- Setup ----------------------------------------

    def load_hammer_cursor(self) -> None:
        """
        Load hammer cursor image if present; otherwise keep the system cursor.
        """
        if os.path.exists(HAMMER_PATH):
            try:
                self.hammer_cursor = pygame.transform.scale(
                    pygame.image.load(HAMMER_PATH).convert_alpha(), (40, 40))
                pygame.mouse.set_visible(False)
            except Exception as e:
                print(f"Failed to load hammer cursor: {e}")
                self.hammer_cursor = None

    def init_audio(self) -> None:
        """
        Initialize audio & load assets. Missing files are skipped.
        """
        try:
            pygame.mixer.init(frequency=22050, size=-16, channels=2, buffer=512)
        except Exception as e:
            print(f"Failed to initialize audio: {e}")
            return

        if os.path.exists(MUSIC_PATH):
            try:
                pygame.mixer.music.load(MUSIC_PATH)
                pygame.mixer.music.set_volume(self.bgm_volume)
                pygame.mixer.music.play(-1)
            except Exception as e:
                print(f"Failed to load background music: {e}")
        else:
            print(f"Background music file not found: {MUSIC_PATH}")

        sound_paths = {
            TargetKind.NORMAL: HIT_SFX_PATH,
            TargetKind.SPECIAL: SPECIAL_SFX_PATH,
            TargetKind.BOMB: BOMB_SFX_PATH,
            None: MISS_SFX_PATH,
        }
        for kind, path in sound_paths.items():
            if not os.path.exists(path):
                print(f"Sound effect file not found: {path}")
                continue
            try:
                sound = pygame.mixer.Sound(path)
                sound.set_volume(self.sfx_volume)
                self.sounds[kind] = sound
            except Exception as e:
                print(f"Failed to load sound effect {path}: {e}")

    def handle_resize(self, new_width: int, new_height: int) -> None:
        """Handle window resize events and re-layout the board."""
        if new_width == self.current_width and new_height == self.current_height:
            return
        self.current_width = new_width
        self.current_height = new_height
        self.holes = make_holes(new_width, new_height)

        scale_factor = min(new_width / WIDTH, new_height / HEIGHT)
        self.font_small = pygame.font.Font(FONT_NAME, max(12, int(FONT_SIZE_MEDIUM * scale_factor)))
        self.font_big = pygame.font.Font(FONT_NAME, max(18, int(FONT_SIZE_LARGE * scale_factor)))
        self.hud.update_fonts(self.font_small)
        self.board.update_fonts(self.font_small)
        self.ready_screen.update_fonts(self.font_big, self.font_small)
        self.game_over_screen.update_fonts(self.font_big, self.font_small)

    # --------------------------------- Loop -----------------------------------------

    def run(self) -> None:
        """Main game loop: process events, advance engine timers, render; exits on quit request."""
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.VIDEORESIZE:
                    self.handle_resize(event.w, event.h)
                elif event.type == pygame.KEYDOWN:
                    running = self.handle_key(event.key)
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    self.handle_click(event.pos)

            self.engine.update()
            self.update_hammer_hit_effects()
            self.draw()

            # Cap frame rate
            self.clock.tick(FPS)

        pygame.quit()

    # --------------------------------- Input ----------------------------------------

    def handle_key(self, key: int) -> bool:
        """Map a key press onto engine controls. Returns False to quit."""
        status = self.engine.status
        if key == pygame.K_ESCAPE:
            return False
        if key in (pygame.K_SPACE, pygame.K_RETURN):
            self.engine.start()
        elif key == pygame.K_p:
            if status is GameStatus.PLAYING:
                self.engine.pause()
            elif status is GameStatus.PAUSED:
                self.engine.start()
        elif key == pygame.K_r:
            self.engine.restart()
        elif key == pygame.K_m:
            self.toggle_mute()
        elif key in self.DIFFICULTY_KEYS:
            self.engine.set_difficulty(self.DIFFICULTY_KEYS[key])
        return True

    def handle_click(self, pos: tuple[int, int]) -> None:
        """
        Forward a left-click to the engine if it landed on a hole.

        Parameters
        ----------
        pos : Tuple[int, int]
            Mouse click position
        """
        if self.engine.status is not GameStatus.PLAYING:
            return
        self.create_hammer_hit_effect(pos)
        for hole in self.holes:
            if hole.contains_point(pos):
                self.engine.select_cell(hole.row, hole.col)
                return

    def on_game_event(self, event: GameEvent) -> None:
        """Play a sound for hits and empty-hole misses."""
        if self.muted:
            return
        if event.type is EventType.TARGET_HIT:
            sound = self.sounds.get(event.kind)
        elif event.type is EventType.MISSED_EMPTY:
            sound = self.sounds.get(None)
        else:
            return
        if sound:
            try:
                sound.play()
            except Exception as e:
                print(f"Failed to play sound: {e}")

    def toggle_mute(self) -> None:
        self.muted = not self.muted
        if pygame.mixer.get_init():
            pygame.mixer.music.set_volume(0.0 if self.muted else self.bgm_volume)

    # --------------------------------- Rendering ------------------------------------

    def draw_hammer_cursor(self) -> None:
        """Draw the hammer cursor at mouse position."""
        if self.hammer_cursor:
            mouse_x, mouse_y = pygame.mouse.get_pos()
            if 0 <= mouse_x < self.current_width and 0 <= mouse_y < self.current_height:
                # Offset so the hammer "hits" where the cursor points
                cursor_rect = self.hammer_cursor.get_rect(center=(mouse_x + 5, mouse_y + 5))
                self.screen.blit(self.hammer_cursor, cursor_rect)

    def create_hammer_hit_effect(self, hit_pos: tuple[int, int]) -> None:
        """Create hammer hit effect at click position."""
        for _ in range(8):
            angle = random.uniform(0, 2 * math.pi)
            speed = random.uniform(1, 3)
            effect = {
                'x': hit_pos[0],
                'y': hit_pos[1],
                'dx': math.cos(angle) * speed,
                'dy': math.sin(angle) * speed,
                'life': HIT_EFFECT_MS,
                'alpha': 255,
                'size': random.randint(3, 6),
            }
            self.hammer_hit_effects.append(effect)

    def update_hammer_hit_effects(self) -> None:
        """Update hammer hit effect particles."""
        elapsed = self.clock.get_time()
        for effect in self.hammer_hit_effects[:]:
            effect['life'] -= elapsed
            if effect['life'] <= 0:
                self.hammer_hit_effects.remove(effect)
            else:
                effect['x'] += effect['dx']
                effect['y'] += effect['dy']
                effect['alpha'] = int(255 * (effect['life'] / HIT_EFFECT_MS))
                # gravity
                effect['dy'] += 0.3

    def draw_hammer_hit_effects(self) -> None:
        """Draw hammer hit effect particles."""
        for effect in self.hammer_hit_effects:
            if effect['alpha'] > 0:
                particle_surf = pygame.Surface((effect['size'], effect['size']), pygame.SRCALPHA)
                color = (255, 255, 100, effect['alpha'])
                pygame.draw.circle(particle_surf, color, (effect['size']//2, effect['size']//2), effect['size']//2)
                self.screen.blit(particle_surf, (effect['x'] - effect['size']//2, effect['y'] - effect['size']//2))

    def draw(self) -> None:
        """
        Compose the frame: bg → board → HUD → overlays → effects → cursor.
        """
        snapshot = self.engine.snapshot()
        self.screen.fill(BG_COLOR)
        rect = pygame.Rect(0, 0, self.current_width, self.current_height)
        pygame.draw.rect(self.screen, (20, 22, 27), rect, width=24, border_radius=18)

        self.board.draw(self.screen, self.holes, snapshot)
        self.hud.draw(self.screen, snapshot, self.muted)

        if snapshot.status is GameStatus.READY:
            self.ready_screen.draw(self.screen, snapshot.difficulty)
        elif snapshot.status is GameStatus.ENDED:
            self.game_over_screen.draw(self.screen, snapshot)

        self.draw_hammer_hit_effects()
        self.draw_hammer_cursor()

        pygame.display.flip()


if __name__ == "__main__":
    Game().run()

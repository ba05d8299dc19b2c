"""
Grid size, round length, difficulty table, score deltas, spawn weights,
screen layout and colours, asset paths, and logging configuration.
"""

import os

GRID_ROWS, GRID_COLS = 3, 3
ROUND_SECONDS = 60
TICK_MS = 1000                     # countdown period
LOW_TIME_SECONDS = 10              # timer turns red at or below this

# Difficulty table: (spawn interval ms, target lifetime ms, max concurrent targets)
DIFFICULTY_SETTINGS = {
    "easy":   (1500, 1200, 1),
    "medium": (1200, 1000, 2),
    "hard":   (900, 800, 3),
}
DEFAULT_DIFFICULTY = "medium"

# Score delta per target kind
NORMAL_POINTS = 10
SPECIAL_POINTS = 25
BOMB_POINTS = -15

# Cumulative spawn thresholds on a uniform [0, 1) draw
NORMAL_THRESHOLD = 0.7             # [0, .7)  -> normal  (70%)
SPECIAL_THRESHOLD = 0.9            # [.7, .9) -> special (20%), rest bomb (10%)

# Screen
WIDTH, HEIGHT = 720, 720
FPS = 60
BG_COLOR = (25, 28, 33)
TEXT_COLOR = (235, 235, 235)
HOLE_COLOR = (60, 65, 75)
HOLE_RING = (30, 33, 40)           # subtle ring for holes
WARNING_COLOR = (239, 68, 68)
HIGHLIGHT_COLOR = (255, 235, 90)
HUD_PADDING = 12
FONT_NAME = "freesansbold.ttf"

# Target colours
NORMAL_COLOR = (150, 105, 60)      # brown mole
SPECIAL_COLOR = (245, 200, 40)     # golden mole
BOMB_COLOR = (40, 40, 40)
BOMB_FUSE_COLOR = (230, 60, 50)

# Font Size Constants
FONT_SIZE_SMALL = 14
FONT_SIZE_MEDIUM = 18
FONT_SIZE_LARGE = 30

HIT_EFFECT_MS = 300                # hammer particle lifetime

# Persistence and log file settings
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
HIGH_SCORE_FILE = os.environ.get("WHACKAMOLE_HIGH_SCORES") or os.path.join(ROOT_DIR, "high_scores.json")
LOG_FILE = os.environ.get("WHACKAMOLE_LOG") or os.path.join(ROOT_DIR, "log.md")
ASSETS_DIR = os.path.join(ROOT_DIR, "assets")
MUSIC_PATH = os.path.join(ASSETS_DIR, "bg_music.mp3")       # optional
HIT_SFX_PATH = os.path.join(ASSETS_DIR, "hit.mp3")          # optional
SPECIAL_SFX_PATH = os.path.join(ASSETS_DIR, "special.mp3")  # optional
BOMB_SFX_PATH = os.path.join(ASSETS_DIR, "bomb.mp3")        # optional
MISS_SFX_PATH = os.path.join(ASSETS_DIR, "miss.mp3")        # optional
HAMMER_PATH = os.path.join(ASSETS_DIR, "hammer.png")        # optional hammer cursor

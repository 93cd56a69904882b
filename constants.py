# constants.py
"""
Application-level constants.

These values are static and do not change between engine runs.
They are fundamental to the artwork's identity, such as the genesis
seeds, the dot capacity, and rendering properties that are not part of
the experimental configuration in config.json.
"""

ENGINE_VERSION = "DriftingDots-1.0.0"

# --- Genesis Seeds ---
# Address-like seed strings. They are the provenance of every field
# lineage and must never be reused by another artwork.
GENESIS_SEED_A = "0x8b2f4c9e1a7d3f0b6e5c8a2d9f4e1b7c0a3d6e9"
GENESIS_SEED_B = "0x1e7a3d9c2f5b8e0a4c7d1f6b9e2a5c8d0f3b6e1"
GENESIS_SEED_C = "0xc4e7a0d3f6b9e2a5c8d1f4b7e0a3d6c9f2b5e8a"
PALETTE_ANCHOR = "0xf2b5e8a1c4d7e0f3b6a9c2d5e8f1b4a7d0e3c6e9"
DRIFT_ORACLE = "0xa7d0e3c6f9b2e5a8d1c4f7b0e3a6d9c2f5b8e1a4"

# --- Field Shape ---
DOT_CAPACITY = 4096
MAX_DOT_CAPACITY = 4096
TRAIL_LENGTH = 32

# --- Motion ---
DEFAULT_DRIFT_SCALE = 0.0004127
PHASE_SPEED = 0.0003829
# Milliseconds added to the time seed per tick. Fixed so a lineage never
# depends on wall-clock time after construction.
TICK_TIME_STRIDE_MS = 17

# --- Canvas ---
CANVAS_WIDTH_DEFAULT = 1920
CANVAS_HEIGHT_DEFAULT = 1080
CANVAS_MIN_SIZE = 64
CANVAS_MAX_SIZE = 16384

# --- Hash Chain ---
INT32_MAX = 0x7FFFFFFF
DOT_ALPHA = 220
FALLBACK_COLOR = (128, 128, 200, 200)
COLOR_CHANNEL_MIN = 32
COLOR_CHANNEL_MAX = 255

# --- Rendering ---
BACKGROUND_COLOR = (10, 10, 18)  # Near-black indigo
DEFAULT_DOT_RADIUS = 2
DEFAULT_TRAIL_RADIUS = 1
# Alpha multiplier applied to the most recent trail slot. Older slots fade
# linearly towards zero.
TRAIL_ALPHA_SCALE = 0.6
PREVIEW_FPS = 60
PREVIEW_MAX_WIDTH = 1280

# --- Auxiliary Structures ---
MAX_KEYFRAMES = 256

# visualization.py
"""
Rasterizes dot fields into RGBA frames and previews them with Pygame.

FrameRenderer turns a DotField snapshot into a NumPy pixel buffer, with
the per-pixel compositing done in a Numba-jitted kernel. Visualizer is an
optional Pygame window that shows rendered frames as the engine runs.
"""
import logging
import numpy as np
import pygame
from numba import jit
from typing import Any, Callable, Dict, List, Optional, Tuple

from constants import (
    BACKGROUND_COLOR, DEFAULT_DOT_RADIUS, DEFAULT_TRAIL_RADIUS, PALETTE_ANCHOR,
    PREVIEW_FPS, PREVIEW_MAX_WIDTH, TRAIL_ALPHA_SCALE
)
from dot_field import DotField
from engine import Subscription
from hashchain import palette_color

# --- Data Contracts ---
#
# class FrameRenderer:
#   - __init__(self, width: int, height: int, palette_anchor: str = PALETTE_ANCHOR,
#              dot_radius: int = 2, trail_radius: int = 1):
#     - Side Effects: None. Palettes are derived lazily per field capacity.
#
#   - render(self, field: DotField, clear_background: bool = True,
#            background_color: Tuple[int, int, int] = BACKGROUND_COLOR) -> np.ndarray:
#     - Outputs: uint8 array of shape (width, height, 4), Pygame surfarray
#       order (x first). Fully opaque when the background is cleared,
#       transparent where nothing was drawn otherwise.
#     - Side Effects: Notifies frame listeners once with the new frame.
#     - Invariants: Trails are drawn oldest first, heads last.
#
# class Visualizer:
#   - show(self, frame: np.ndarray, stats: Optional[Dict[str, Any]] = None) -> bool:
#     - Outputs: False if the user has quit, True otherwise.
#     - Side Effects: Handles Pygame events and flips the display.


@jit(nopython=True)
def _splat_numba(canvas, xs, ys, colors, alphas, radius):
    """
    Numba-jitted function that composites discs onto a float canvas.

    canvas has shape (width, height, 4): RGB in [0, 255] and alpha in [0, 1].
    Each disc is blended with the "over" operator.
    """
    width = canvas.shape[0]
    height = canvas.shape[1]
    radius_sq = radius * radius

    for k in range(xs.shape[0]):
        src_a = alphas[k]
        if src_a <= 0.0:
            continue
        cx = int(xs[k] + 0.5)
        cy = int(ys[k] + 0.5)

        for px in range(cx - radius, cx + radius + 1):
            if px < 0 or px >= width:
                continue
            for py in range(cy - radius, cy + radius + 1):
                if py < 0 or py >= height:
                    continue
                ddx = px - cx
                ddy = py - cy
                if ddx * ddx + ddy * ddy > radius_sq:
                    continue

                dst_a = canvas[px, py, 3]
                keep = dst_a * (1.0 - src_a)
                out_a = src_a + keep
                for c in range(3):
                    canvas[px, py, c] = (colors[k, c] * src_a + canvas[px, py, c] * keep) / out_a
                canvas[px, py, 3] = out_a


class FrameRenderer:
    """
    Renders DotField snapshots into RGBA pixel buffers.
    """
    def __init__(
        self,
        width: int,
        height: int,
        palette_anchor: str = PALETTE_ANCHOR,
        dot_radius: int = DEFAULT_DOT_RADIUS,
        trail_radius: int = DEFAULT_TRAIL_RADIUS,
    ):
        self.width = width
        self.height = height
        self.palette_anchor = palette_anchor
        # The kernel's range() bounds need integers; config may hold floats.
        self.dot_radius = int(dot_radius)
        self.trail_radius = int(trail_radius)
        self._palette: Optional[np.ndarray] = None
        self._frame_listeners: List[Callable[[np.ndarray], None]] = []

        logging.info(f"FrameRenderer initialized ({width}x{height}).")

    def add_frame_listener(self, listener: Callable[[np.ndarray], None]) -> Subscription:
        """Registers a listener called with every rendered frame."""
        self._frame_listeners.append(listener)
        return Subscription(self._frame_listeners, listener)

    def palette(self, capacity: int) -> np.ndarray:
        """
        Returns the (capacity, 4) RGBA palette, derived once per capacity.
        """
        if self._palette is None or self._palette.shape[0] != capacity:
            logging.debug(f"Deriving palette for {capacity} dots...")
            self._palette = np.array(
                [palette_color(self.palette_anchor, i) for i in range(capacity)],
                dtype=np.float64,
            ).reshape(-1, 4)
        return self._palette

    def render(
        self,
        field: DotField,
        clear_background: bool = True,
        background_color: Tuple[int, int, int] = BACKGROUND_COLOR,
    ) -> np.ndarray:
        """
        Rasterizes a field.

        Args:
            field (DotField): The snapshot to draw.
            clear_background (bool): Fill the canvas with an opaque background
                before drawing.
            background_color (Tuple[int, int, int]): RGB fill color.

        Returns:
            np.ndarray: uint8 array of shape (width, height, 4).
        """
        canvas = np.zeros((self.width, self.height, 4), dtype=np.float64)
        if clear_background:
            canvas[:, :, 0:3] = background_color[:3]
            canvas[:, :, 3] = 1.0

        count = len(field)
        if count:
            palette = self.palette(count)
            rgb = palette[:, 0:3]
            base_alpha = palette[:, 3] / 255.0
            scale = np.array([self.width - 1, self.height - 1], dtype=np.float64)

            # 1. Trails, oldest slot first so newer records land on top.
            length = field.trail_length
            trails = field.trails()[:, ::-1, :] * scale
            points = np.ascontiguousarray(trails.transpose(1, 0, 2)).reshape(-1, 2)
            # Fade linearly from TRAIL_ALPHA_SCALE at the newest slot.
            slot_alpha = TRAIL_ALPHA_SCALE * np.arange(1, length + 1, dtype=np.float64) / length
            alphas = (slot_alpha[:, np.newaxis] * base_alpha[np.newaxis, :]).reshape(-1)
            _splat_numba(
                canvas, points[:, 0].copy(), points[:, 1].copy(),
                np.ascontiguousarray(np.tile(rgb, (length, 1))), alphas, self.trail_radius
            )

            # 2. Heads on top of every trail
            heads = field.positions() * scale
            _splat_numba(
                canvas, heads[:, 0].copy(), heads[:, 1].copy(),
                np.ascontiguousarray(rgb), base_alpha.copy(), self.dot_radius
            )

        frame = np.empty((self.width, self.height, 4), dtype=np.uint8)
        frame[:, :, 0:3] = np.clip(np.rint(canvas[:, :, 0:3]), 0, 255)
        frame[:, :, 3] = np.clip(np.rint(canvas[:, :, 3] * 255.0), 0, 255)

        for listener in list(self._frame_listeners):
            listener(frame)
        return frame


class Visualizer:
    """
    Displays rendered frames in a Pygame window with a small stats overlay.
    """
    def __init__(self, canvas_width: int, canvas_height: int, title: str = "Drifting Dots"):
        """
        Initializes Pygame and the display window.

        Canvases wider than PREVIEW_MAX_WIDTH are scaled down to fit.
        """
        pygame.init()
        pygame.font.init()

        scale = min(1.0, PREVIEW_MAX_WIDTH / canvas_width)
        self.window_size = (max(1, int(canvas_width * scale)), max(1, int(canvas_height * scale)))
        self.screen = pygame.display.set_mode(self.window_size)
        pygame.display.set_caption(title)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont(None, 18)
        self.text_color = (220, 220, 220)

        logging.info(f"Visualizer initialized with Pygame display ({self.window_size[0]}x{self.window_size[1]}).")

    def show(self, frame: np.ndarray, stats: Optional[Dict[str, Any]] = None) -> bool:
        """
        Draws a frame and handles events.

        Returns:
            bool: False if the run should exit, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down visualizer.")
                return False

        surface = pygame.surfarray.make_surface(np.ascontiguousarray(frame[:, :, 0:3]))
        if surface.get_size() != self.window_size:
            surface = pygame.transform.smoothscale(surface, self.window_size)
        self.screen.blit(surface, (0, 0))

        if stats:
            y = 8
            for key in ("tick", "dots", "fingerprint"):
                if key in stats:
                    text_surf = self.font.render(f"{key}: {stats[key]}", True, self.text_color)
                    self.screen.blit(text_surf, (8, y))
                    y += self.font.get_linesize()

        pygame.display.flip()
        self.clock.tick(PREVIEW_FPS)
        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()

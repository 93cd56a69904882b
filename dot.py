# dot.py
"""
Defines a single dot and its trail history.

A Dot is a value: advancing it returns a new Dot and leaves the old one
untouched. The trail is a fixed-capacity ring buffer held in a read-only
NumPy array, so a snapshot can be handed to any number of readers.
"""
import math
import numpy as np
from typing import Tuple

from errors import ConfigurationError

# --- Data Contracts ---
#
# class Dot:
#   - spawn(index: int, capacity: int, trail_length: int) -> Dot:
#     - Outputs: A dot on the closed-form spawn curve with its trail
#       pre-filled with the spawn position.
#     - Invariants: trail_length >= 1, else ConfigurationError.
#
#   - advance(new_x: float, new_y: float, new_phase: float) -> Dot:
#     - Outputs: A new Dot. The trail records the position held *before*
#       this update, so it lags the visible head by one tick.
#     - Invariants: x, y are clamped to [0, 1]. The index and trail length
#       never change.
#
#   - trail_position(i: int) -> Tuple[float, float]:
#     - Outputs: The position i steps back (0 = most recent record). An
#       index outside [0, trail_length) returns the current position.


def clamp01(value: float) -> float:
    """Clamps a value to the unit interval."""
    return max(0.0, min(1.0, value))


class Dot:
    """
    A particle with a position, a phase accumulator and a trail.
    """
    __slots__ = ("_x", "_y", "_phase", "_index", "_trail", "_head")

    def __init__(self, x: float, y: float, phase: float, index: int, trail: np.ndarray, head: int = 0):
        """
        Initializes a dot from explicit state. Prefer Dot.spawn or Dot.advance.

        Args:
            x (float): Normalized horizontal position.
            y (float): Normalized vertical position.
            phase (float): Unbounded angle accumulator.
            index (int): Stable identity within the owning field.
            trail (np.ndarray): Ring buffer of shape (trail_length, 2).
            head (int): Slot the next recorded position will be written to.
        """
        if trail.ndim != 2 or trail.shape[0] < 1 or trail.shape[1] != 2:
            raise ConfigurationError(f"Dot trail must have shape (n >= 1, 2), got {trail.shape}.")
        self._x = clamp01(float(x))
        self._y = clamp01(float(y))
        self._phase = float(phase)
        self._index = int(index)
        self._trail = trail
        self._trail.flags.writeable = False
        self._head = head % trail.shape[0]

    @classmethod
    def spawn(cls, index: int, capacity: int, trail_length: int) -> "Dot":
        """
        Creates a genesis dot from the closed-form spawn curve.

        Positions follow a Lissajous-like curve over u = index / capacity,
        kept inside the central 60% of the canvas.
        """
        if trail_length < 1:
            raise ConfigurationError(f"Trail length must be at least 1, got {trail_length}.")
        u = index / max(1, capacity)
        x = 0.2 + 0.6 * (0.5 + 0.5 * math.sin(u * 4.0 * math.pi))
        y = 0.2 + 0.6 * (0.5 + 0.5 * math.cos(u * 3.0 * math.pi))
        phase = u * 2.0 * math.pi
        trail = np.empty((trail_length, 2), dtype=np.float64)
        trail[:, 0] = x
        trail[:, 1] = y
        return cls(x, y, phase, index, trail)

    @property
    def x(self) -> float:
        return self._x

    @property
    def y(self) -> float:
        return self._y

    @property
    def phase(self) -> float:
        return self._phase

    @property
    def index(self) -> int:
        return self._index

    @property
    def trail_length(self) -> int:
        return self._trail.shape[0]

    @property
    def position(self) -> Tuple[float, float]:
        return (self._x, self._y)

    def advance(self, new_x: float, new_y: float, new_phase: float) -> "Dot":
        """
        Returns the next value of this dot.

        The slot at the ring head receives the current position, overwriting
        the oldest record, and the head moves forward by one.
        """
        trail = self._trail.copy()
        trail[self._head] = (self._x, self._y)
        return Dot(new_x, new_y, new_phase, self._index, trail, self._head + 1)

    def trail_position(self, i: int) -> Tuple[float, float]:
        """
        Returns the recorded position i steps back from the most recent one.

        Out-of-range indices degrade to the current position instead of
        raising, so renderers can walk a trail without bounds checks.
        """
        length = self._trail.shape[0]
        if i < 0 or i >= length:
            return self.position
        slot = (self._head - 1 - i) % length
        return (float(self._trail[slot, 0]), float(self._trail[slot, 1]))

    def trail(self) -> np.ndarray:
        """Returns the trail as a (trail_length, 2) array, most recent first."""
        length = self._trail.shape[0]
        order = (self._head - 1 - np.arange(length)) % length
        return self._trail[order]

    def __repr__(self) -> str:
        return (
            f"Dot(index={self._index}, x={self._x:.6f}, y={self._y:.6f}, "
            f"phase={self._phase:.6f}, trail_length={self.trail_length})"
        )

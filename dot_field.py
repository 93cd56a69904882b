# dot_field.py
"""
Manages the state of all dots and the evolution algorithm.

This module defines the DotField class, an immutable snapshot of every
dot in the artwork. Each tick derives a brand-new field in which every
dot has been displaced by a hash-chain-driven drift.
"""
import logging
import numpy as np
from typing import Optional, Sequence, Tuple

from constants import MAX_DOT_CAPACITY, TICK_TIME_STRIDE_MS
from dot import Dot, clamp01
from errors import ConfigurationError
from hashchain import hash_inputs, int_at, unit_at

# --- Data Contracts ---
#
# class DotField:
#   - genesis(capacity: int, trail_length: int, seed_a: str, seed_b: str, seed_c: str) -> DotField:
#     - Inputs:
#       - capacity: Number of dots, in [1, MAX_DOT_CAPACITY].
#       - trail_length: Trail slots per dot, >= 1.
#       - seed_a, seed_b, seed_c: Provenance strings for the lineage.
#     - Outputs: The genesis field, dots spawned in index order.
#     - Side Effects: None. Raises ConfigurationError on invalid shape.
#
#   - evolve(drift_scale, phase_speed, base_time_ms, tick_count, drift_oracle_seed) -> DotField:
#     - Outputs: A new field. The receiver is never modified.
#     - Invariants:
#       - Dot count, order, indices, seeds and trail length are unchanged.
#       - Every x, y is in [0, 1] (edges clamp, they do not wrap).
#       - The result depends only on the seeds, the arguments and the
#         current dots.
#
#   - positions() -> np.ndarray of shape (N, 2), dtype float64.
#   - phases() -> np.ndarray of shape (N,), dtype float64.
#   - trails() -> np.ndarray of shape (N, trail_length, 2), most recent first.


class DotField:
    """
    An ordered, fixed-size collection of dots sharing three seed strings.
    """
    def __init__(self, dots: Sequence[Dot], trail_length: int, seed_a: str, seed_b: str, seed_c: str):
        """
        Wraps an already-built dot sequence. Prefer DotField.genesis.

        Args:
            dots (Sequence[Dot]): Dots in index order.
            trail_length (int): Trail slots per dot.
            seed_a (str): First seed string.
            seed_b (str): Second seed string.
            seed_c (str): Third seed string.
        """
        self._dots: Tuple[Dot, ...] = tuple(dots)
        self._trail_length = trail_length
        self._seeds = (seed_a, seed_b, seed_c)

    @classmethod
    def genesis(cls, capacity: int, trail_length: int, seed_a: str, seed_b: str, seed_c: str) -> "DotField":
        """Builds the initial field from the closed-form spawn curve."""
        if not 1 <= capacity <= MAX_DOT_CAPACITY:
            msg = f"Configuration error: dot capacity {capacity} is outside [1, {MAX_DOT_CAPACITY}]."
            logging.critical(msg)
            raise ConfigurationError(msg)
        if trail_length < 1:
            msg = f"Configuration error: trail length must be at least 1, got {trail_length}."
            logging.critical(msg)
            raise ConfigurationError(msg)

        dots = [Dot.spawn(i, capacity, trail_length) for i in range(capacity)]
        logging.info(
            f"Genesis field created with {capacity} dots "
            f"and {trail_length} trail slots each."
        )
        return cls(dots, trail_length, seed_a, seed_b, seed_c)

    @property
    def dots(self) -> Tuple[Dot, ...]:
        return self._dots

    @property
    def capacity(self) -> int:
        return len(self._dots)

    @property
    def trail_length(self) -> int:
        return self._trail_length

    @property
    def seeds(self) -> Tuple[str, str, str]:
        return self._seeds

    def __len__(self) -> int:
        return len(self._dots)

    def evolve(
        self,
        drift_scale: float,
        phase_speed: float,
        base_time_ms: int,
        tick_count: int,
        drift_oracle_seed: Optional[str],
    ) -> "DotField":
        """
        Derives the next field.

        Args:
            drift_scale (float): Maximum per-tick displacement magnitude.
            phase_speed (float): Maximum per-tick phase increment.
            base_time_ms (int): The engine's construction time seed.
            tick_count (int): Ticks applied before this one.
            drift_oracle_seed (Optional[str]): Extra seed mixed into every
                digest. None is skipped by the hash chain.

        Returns:
            DotField: A new field with every dot advanced once.
        """
        # The time seed advances by a fixed stride, never by wall-clock time.
        t = str(base_time_ms + tick_count * TICK_TIME_STRIDE_MS)
        seed_a, seed_b, seed_c = self._seeds

        new_dots = []
        for dot in self._dots:
            digest = hash_inputs(seed_a, seed_b, seed_c, str(dot.index), t, drift_oracle_seed)

            # Symmetric drift in [-drift_scale / 2, drift_scale / 2]
            dx = (unit_at(digest, 0) - 0.5) * drift_scale
            dy = (unit_at(digest, 8) - 0.5) * drift_scale

            # The phase only accumulates. It is consumed through trig
            # functions downstream, so it is never wrapped.
            new_phase = dot.phase + phase_speed * (int_at(digest, 4) % 1000) / 1000.0

            # Edges clamp rather than wrap, letting dots gather along the border.
            new_x = clamp01(dot.x + dx)
            new_y = clamp01(dot.y + dy)

            new_dots.append(dot.advance(new_x, new_y, new_phase))

        logging.debug(f"Field evolved at tick {tick_count} (time seed {t}).")
        return DotField(new_dots, self._trail_length, seed_a, seed_b, seed_c)

    def positions(self) -> np.ndarray:
        """Returns the current positions as an (N, 2) array."""
        return np.array([dot.position for dot in self._dots], dtype=np.float64).reshape(-1, 2)

    def phases(self) -> np.ndarray:
        """Returns the current phases as an (N,) array."""
        return np.array([dot.phase for dot in self._dots], dtype=np.float64)

    def trails(self) -> np.ndarray:
        """Returns every trail as an (N, trail_length, 2) array, most recent first."""
        if not self._dots:
            return np.empty((0, self._trail_length, 2), dtype=np.float64)
        return np.stack([dot.trail() for dot in self._dots])

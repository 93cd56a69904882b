# engine.py
"""
Owns the evolving dot field and drives it one tick at a time.

This module defines the Engine class, which holds the configuration,
the current DotField snapshot and the monotonic tick counter. Listeners
registered on the engine are notified synchronously after every tick.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from constants import (
    CANVAS_HEIGHT_DEFAULT, CANVAS_MAX_SIZE, CANVAS_MIN_SIZE, CANVAS_WIDTH_DEFAULT,
    DEFAULT_DRIFT_SCALE, DOT_CAPACITY, DRIFT_ORACLE, ENGINE_VERSION,
    GENESIS_SEED_A, GENESIS_SEED_B, GENESIS_SEED_C, MAX_KEYFRAMES, PHASE_SPEED,
    TRAIL_LENGTH
)
from dot_field import DotField
from errors import CapacityExceededError, ConfigurationError

# --- Data Contracts ---
#
# class Engine:
#   - __init__(self, drift_scale, canvas_width, canvas_height, capacity,
#              trail_length, seeds, phase_speed, drift_oracle_seed,
#              construction_time_ms):
#     - Inputs:
#       - drift_scale: float in (0, 1].
#       - canvas_width, canvas_height: int in [64, 16384].
#       - construction_time_ms: Optional int. Captured from the clock when
#         None; pass it explicitly to replay a lineage.
#     - Side Effects: Builds the genesis field. Raises ConfigurationError
#       before any state is created if a value is out of range.
#
#   - tick(self, n: int = 1) -> DotField:
#     - Outputs: The field after n elementary ticks.
#     - Side Effects: Replaces the field and increments the counter once
#       per elementary tick, notifying every tick listener each time.
#     - Invariants: The counter never decreases. The dot count never changes.
#
#   - stats(self) -> Dict[str, Any]:
#     - Outputs: A read-only projection of the engine state.
#     - Side Effects: None.


@dataclass(frozen=True)
class TickEvent:
    """Delivered to tick listeners after every elementary tick."""
    engine: "Engine"
    tick: int
    field: DotField


@dataclass(frozen=True)
class Keyframe:
    """A field snapshot pinned at a given tick."""
    tick: int
    field: DotField
    label: Optional[str] = None


class Subscription:
    """
    Handle returned by listener registration. Cancelling it detaches the
    listener; cancelling twice is a no-op.
    """
    def __init__(self, listeners: List[Callable], listener: Callable):
        self._listeners = listeners
        self._listener = listener
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        # Remove by identity so an equal-but-distinct listener stays registered.
        for i, registered in enumerate(self._listeners):
            if registered is self._listener:
                del self._listeners[i]
                break


class Engine:
    """
    Drives a single DotField lineage from genesis.
    """
    def __init__(
        self,
        drift_scale: float = DEFAULT_DRIFT_SCALE,
        canvas_width: int = CANVAS_WIDTH_DEFAULT,
        canvas_height: int = CANVAS_HEIGHT_DEFAULT,
        capacity: int = DOT_CAPACITY,
        trail_length: int = TRAIL_LENGTH,
        seeds: Sequence[str] = (GENESIS_SEED_A, GENESIS_SEED_B, GENESIS_SEED_C),
        phase_speed: float = PHASE_SPEED,
        drift_oracle_seed: Optional[str] = DRIFT_ORACLE,
        construction_time_ms: Optional[int] = None,
    ):
        """
        Validates the configuration and builds the genesis field.

        Args:
            drift_scale (float): Maximum per-tick displacement.
            canvas_width (int): Width of rendered frames in pixels.
            canvas_height (int): Height of rendered frames in pixels.
            capacity (int): Number of dots in the field.
            trail_length (int): Trail slots per dot.
            seeds (Sequence[str]): The three genesis seed strings.
            phase_speed (float): Maximum per-tick phase increment.
            drift_oracle_seed (Optional[str]): Seed mixed into every digest.
            construction_time_ms (Optional[int]): Time seed in milliseconds.
        """
        # Rule 7: Enforce data contracts. Validate before building any state.
        if not 0.0 < drift_scale <= 1.0:
            self._fail(f"Configuration error: drift scale {drift_scale} is outside (0, 1].")
        for name, size in (("width", canvas_width), ("height", canvas_height)):
            if not CANVAS_MIN_SIZE <= size <= CANVAS_MAX_SIZE:
                self._fail(
                    f"Configuration error: canvas {name} {size} is outside "
                    f"[{CANVAS_MIN_SIZE}, {CANVAS_MAX_SIZE}]."
                )
        if len(seeds) != 3:
            self._fail(f"Configuration error: expected 3 seed strings, got {len(seeds)}.")

        self.drift_scale = float(drift_scale)
        self.canvas_width = int(canvas_width)
        self.canvas_height = int(canvas_height)
        self.phase_speed = float(phase_speed)
        self.drift_oracle_seed = drift_oracle_seed
        if construction_time_ms is None:
            construction_time_ms = int(time.time() * 1000)
        self.construction_time_ms = int(construction_time_ms)

        self._field = DotField.genesis(capacity, trail_length, *seeds)
        self._capacity = capacity
        self._tick_count = 0
        self._tick_listeners: List[Callable[[TickEvent], None]] = []
        self._keyframes: List[Keyframe] = []

        logging.info(
            f"Engine initialized ({self.canvas_width}x{self.canvas_height}, "
            f"drift scale {self.drift_scale}, fingerprint {self.fingerprint})."
        )

    @classmethod
    def from_config(cls, params: Dict[str, Any]) -> "Engine":
        """Builds an engine from the 'engine' section of config.json."""
        return cls(
            drift_scale=params.get('drift_scale', DEFAULT_DRIFT_SCALE),
            canvas_width=params.get('canvas_width', CANVAS_WIDTH_DEFAULT),
            canvas_height=params.get('canvas_height', CANVAS_HEIGHT_DEFAULT),
            capacity=params.get('capacity', DOT_CAPACITY),
            trail_length=params.get('trail_length', TRAIL_LENGTH),
            phase_speed=params.get('phase_speed', PHASE_SPEED),
            construction_time_ms=params.get('construction_time_ms'),
        )

    @staticmethod
    def _fail(msg: str) -> None:
        logging.critical(msg)
        raise ConfigurationError(msg)

    @property
    def field(self) -> DotField:
        return self._field

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def fingerprint(self) -> str:
        """Short identifier of this lineage: seed prefixes plus construction time."""
        prefixes = ":".join(seed[:10] for seed in self._field.seeds)
        return f"{prefixes}@{self.construction_time_ms}"

    def add_tick_listener(self, listener: Callable[[TickEvent], None]) -> Subscription:
        """Registers a listener called after every elementary tick."""
        self._tick_listeners.append(listener)
        return Subscription(self._tick_listeners, listener)

    def tick(self, n: int = 1) -> DotField:
        """
        Advances the field by n elementary ticks.

        tick(n) is exactly n calls to tick(); listeners fire once per tick.
        A negative n is rejected with ConfigurationError instead of being
        treated as zero ticks.
        """
        if n < 0:
            self._fail(f"Configuration error: tick count must be non-negative, got {n}.")
        for _ in range(n):
            self._field = self._field.evolve(
                self.drift_scale,
                self.phase_speed,
                self.construction_time_ms,
                self._tick_count,
                self.drift_oracle_seed,
            )
            self._tick_count += 1
            event = TickEvent(self, self._tick_count, self._field)
            # Copy so a listener may cancel its own subscription mid-dispatch.
            for listener in list(self._tick_listeners):
                listener(event)
        return self._field

    def mark_keyframe(self, label: Optional[str] = None) -> Keyframe:
        """
        Pins the current field as a keyframe.

        Raises:
            CapacityExceededError: If MAX_KEYFRAMES are already held. The
                existing keyframes are left untouched.
        """
        if len(self._keyframes) >= MAX_KEYFRAMES:
            msg = f"Keyframe capacity of {MAX_KEYFRAMES} reached at tick {self._tick_count}."
            logging.error(msg)
            raise CapacityExceededError(msg)
        keyframe = Keyframe(self._tick_count, self._field, label)
        self._keyframes.append(keyframe)
        logging.debug(f"Keyframe {len(self._keyframes)} marked at tick {self._tick_count}.")
        return keyframe

    def keyframes(self) -> Tuple[Keyframe, ...]:
        return tuple(self._keyframes)

    def clear_keyframes(self) -> None:
        self._keyframes.clear()

    def stats(self) -> Dict[str, Any]:
        """Returns a read-only snapshot of the engine state."""
        return {
            "engine_version": ENGINE_VERSION,
            "tick": self._tick_count,
            "dots": len(self._field),
            "capacity": self._capacity,
            "trail_length": self._field.trail_length,
            "canvas_width": self.canvas_width,
            "canvas_height": self.canvas_height,
            "drift_scale": self.drift_scale,
            "fingerprint": self.fingerprint,
        }

from __future__ import annotations

import os

# Pygame must not open a real window during tests.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from dot_field import DotField
from engine import Engine


SCENARIO_SEEDS = ("a", "b", "c")
SCENARIO_DRIFT = 0.0004127
SCENARIO_PHASE_SPEED = 0.0003829


@pytest.fixture
def small_field() -> DotField:
    return DotField.genesis(16, 4, *SCENARIO_SEEDS)


@pytest.fixture
def make_engine():
    def _make(**overrides) -> Engine:
        params = {
            "drift_scale": SCENARIO_DRIFT,
            "canvas_width": 64,
            "canvas_height": 64,
            "capacity": 4,
            "trail_length": 2,
            "seeds": SCENARIO_SEEDS,
            "phase_speed": SCENARIO_PHASE_SPEED,
            "construction_time_ms": 0,
        }
        params.update(overrides)
        return Engine(**params)

    return _make

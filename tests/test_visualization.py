from __future__ import annotations

import numpy as np

from constants import BACKGROUND_COLOR, DOT_ALPHA, PALETTE_ANCHOR
from hashchain import palette_color
from visualization import FrameRenderer


def test_render_shape_and_background(make_engine):
    engine = make_engine(capacity=16, trail_length=4)
    engine.tick(3)
    renderer = FrameRenderer(64, 48)

    frame = renderer.render(engine.field)

    assert frame.shape == (64, 48, 4)
    assert frame.dtype == np.uint8
    # Dots spawn in the central part of the canvas, so the corner is empty.
    assert tuple(frame[0, 0]) == (*BACKGROUND_COLOR, 255)
    assert (frame[:, :, 3] == 255).all()


def test_render_without_background_is_transparent(make_engine):
    engine = make_engine(capacity=16)
    frame = FrameRenderer(64, 64).render(engine.field, clear_background=False)

    assert frame[0, 0, 3] == 0
    assert frame[:, :, 3].max() > 0


def test_render_draws_heads_in_palette_color(make_engine):
    engine = make_engine(capacity=4)
    renderer = FrameRenderer(64, 64, dot_radius=0, trail_radius=0)
    frame = renderer.render(engine.field, clear_background=False)

    dot = engine.field.dots[0]
    px, py = int(dot.x * 63 + 0.5), int(dot.y * 63 + 0.5)
    r, g, b, _ = palette_color(PALETTE_ANCHOR, 0)
    assert tuple(frame[px, py, 0:3]) == (r, g, b)
    assert frame[px, py, 3] > 0


def test_render_is_deterministic(make_engine):
    engine = make_engine(capacity=16, trail_length=3)
    engine.tick(4)
    first = FrameRenderer(64, 64).render(engine.field)
    second = FrameRenderer(64, 64).render(engine.field)
    assert np.array_equal(first, second)


def test_palette_is_derived_per_index():
    renderer = FrameRenderer(64, 64)
    palette = renderer.palette(5)

    assert palette.shape == (5, 4)
    assert (palette[:, 3] == DOT_ALPHA).all()
    assert tuple(palette[2]) == palette_color(PALETTE_ANCHOR, 2)
    assert renderer.palette(5) is palette


def test_frame_listener_fires_once_per_render(make_engine):
    engine = make_engine()
    renderer = FrameRenderer(64, 64)
    frames = []
    subscription = renderer.add_frame_listener(frames.append)

    frame = renderer.render(engine.field)
    subscription.cancel()
    renderer.render(engine.field)

    assert len(frames) == 1
    assert frames[0] is frame


def test_float_radii_from_config_are_coerced(make_engine):
    engine = make_engine(capacity=4)
    renderer = FrameRenderer(64, 64, dot_radius=2.0, trail_radius=1.0)
    assert renderer.dot_radius == 2 and isinstance(renderer.dot_radius, int)
    assert renderer.trail_radius == 1 and isinstance(renderer.trail_radius, int)

    expected = FrameRenderer(64, 64, dot_radius=2, trail_radius=1).render(engine.field)
    assert np.array_equal(renderer.render(engine.field), expected)

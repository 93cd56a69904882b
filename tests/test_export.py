from __future__ import annotations

import io
import re

import numpy as np
import pygame
import pytest

from constants import ENGINE_VERSION
from export import dump_field, encode_png, parse_dump, write_dump, write_png


ROW_PATTERN = re.compile(r"^\d+ \d\.\d{6} \d\.\d{6} -?\d+\.\d{6}$")


def test_dump_layout(make_engine):
    engine = make_engine()
    engine.tick(3)
    lines = dump_field(engine.field, engine.tick_count).splitlines()

    assert lines[0] == ENGINE_VERSION
    assert lines[1] == "tick=3"
    assert lines[2] == "dots=4"
    assert len(lines) == 7
    for index, line in enumerate(lines[3:]):
        assert ROW_PATTERN.match(line)
        assert line.split()[0] == str(index)


def test_dump_values_parse_back(make_engine):
    engine = make_engine(capacity=12)
    engine.tick(5)
    dump = parse_dump(dump_field(engine.field, engine.tick_count))

    assert dump.header == ENGINE_VERSION
    assert dump.tick == 5
    assert len(dump.rows) == 12
    for dot, (index, x, y, phase) in zip(engine.field.dots, dump.rows):
        assert index == dot.index
        assert x == pytest.approx(dot.x, abs=5e-7)
        assert y == pytest.approx(dot.y, abs=5e-7)
        assert phase == pytest.approx(dot.phase, abs=5e-7)


@pytest.mark.parametrize("text", [
    "",
    f"{ENGINE_VERSION}\ntick=1\n",
    f"{ENGINE_VERSION}\nticks=1\ndots=0\n",
    f"{ENGINE_VERSION}\ntick=1\ndots=2\n0 0.1 0.2 0.3\n",
    f"{ENGINE_VERSION}\ntick=1\ndots=1\n0 0.1 0.2\n",
    f"{ENGINE_VERSION}\ntick=1\ndots=1\n0 x 0.2 0.3\n",
])
def test_malformed_dump_is_rejected(text):
    with pytest.raises(ValueError):
        parse_dump(text)


def test_write_dump_creates_directory(make_engine, tmp_path):
    engine = make_engine()
    path = tmp_path / "out" / "dots.txt"
    write_dump(engine.field, 0, str(path))

    assert path.read_text(encoding="utf-8") == dump_field(engine.field, 0)


def _gradient_frame(width: int = 8, height: int = 6) -> np.ndarray:
    frame = np.zeros((width, height, 4), dtype=np.uint8)
    frame[:, :, 0] = np.arange(width, dtype=np.uint8)[:, np.newaxis] * 30
    frame[:, :, 1] = np.arange(height, dtype=np.uint8)[np.newaxis, :] * 40
    frame[:, :, 2] = 200
    frame[:, :, 3] = 255
    frame[0, 0, 3] = 0
    return frame


def test_encode_png_preserves_pixels():
    frame = _gradient_frame()
    data = encode_png(frame)

    assert data.startswith(b"\x89PNG\r\n\x1a\n")
    surface = pygame.image.load(io.BytesIO(data), "frame.png")
    assert surface.get_size() == (8, 6)
    assert tuple(surface.get_at((3, 2))) == (90, 80, 200, 255)
    assert surface.get_at((0, 0)).a == 0


def test_write_png(tmp_path):
    path = tmp_path / "frames" / "frame_000001.png"
    write_png(_gradient_frame(), str(path))
    assert path.read_bytes().startswith(b"\x89PNG")

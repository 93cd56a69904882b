# export.py
"""
Exports engine output: text dumps of dot values and PNG frames.

The text dump is the only persisted view of a field. It records each
dot's index, position and phase; trail history is not written.
"""
import io
import logging
import os
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
import pygame

from constants import ENGINE_VERSION
from dot_field import DotField

# --- Data Contracts ---
#
# dump_field(field: DotField, tick: int) -> str:
#   - Outputs: Line-oriented text:
#       <ENGINE_VERSION>
#       tick=<n>
#       dots=<n>
#       <index> <x:.6f> <y:.6f> <phase:.6f>     (one line per dot)
#
# parse_dump(text: str) -> FieldDump:
#   - Outputs: The tick and the per-dot rows, values rounded to 6 places.
#   - Side Effects: Raises ValueError on a malformed dump.
#
# encode_png(frame: np.ndarray) -> bytes:
#   - Inputs: uint8 array of shape (width, height, 4) from FrameRenderer.
#   - Outputs: PNG-encoded bytes.

DotRow = Tuple[int, float, float, float]


@dataclass(frozen=True)
class FieldDump:
    """Values recovered from a text dump."""
    header: str
    tick: int
    rows: Tuple[DotRow, ...]


def dump_field(field: DotField, tick: int) -> str:
    """Serializes the current dot values of a field."""
    lines = [ENGINE_VERSION, f"tick={tick}", f"dots={len(field)}"]
    for dot in field.dots:
        lines.append(f"{dot.index} {dot.x:.6f} {dot.y:.6f} {dot.phase:.6f}")
    return "\n".join(lines) + "\n"


def write_dump(field: DotField, tick: int, path: str) -> None:
    """Writes a text dump to disk, creating the parent directory if needed."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(dump_field(field, tick))
    logging.debug(f"Wrote text dump for tick {tick} to {path}.")


def _read_counter(line: str, key: str) -> int:
    prefix = f"{key}="
    if not line.startswith(prefix):
        raise ValueError(f"Malformed dump: expected '{prefix}<n>', got '{line}'.")
    return int(line[len(prefix):])


def parse_dump(text: str) -> FieldDump:
    """
    Reads a text dump back into values.

    Raises:
        ValueError: If the header lines are missing, a row is malformed,
            or the row count disagrees with the dots= line.
    """
    lines = [line.strip() for line in text.strip().splitlines()]
    if len(lines) < 3:
        raise ValueError("Malformed dump: missing header lines.")

    header = lines[0]
    tick = _read_counter(lines[1], "tick")
    count = _read_counter(lines[2], "dots")

    rows: List[DotRow] = []
    for line in lines[3:]:
        parts = line.split()
        if len(parts) != 4:
            raise ValueError(f"Malformed dump row: '{line}'.")
        rows.append((int(parts[0]), float(parts[1]), float(parts[2]), float(parts[3])))

    if len(rows) != count:
        raise ValueError(f"Malformed dump: header declares {count} dots, found {len(rows)}.")
    return FieldDump(header, tick, tuple(rows))


def frame_to_surface(frame: np.ndarray) -> pygame.Surface:
    """Copies a (width, height, 4) uint8 frame into a per-pixel-alpha surface."""
    width, height = frame.shape[0], frame.shape[1]
    surface = pygame.Surface((width, height), pygame.SRCALPHA, 32)
    # The pixel views lock the surface; release them before it is saved.
    rgb = pygame.surfarray.pixels3d(surface)
    rgb[...] = frame[:, :, 0:3]
    del rgb
    alpha = pygame.surfarray.pixels_alpha(surface)
    alpha[...] = frame[:, :, 3]
    del alpha
    return surface


def encode_png(frame: np.ndarray) -> bytes:
    """Encodes a rendered frame as PNG bytes."""
    buffer = io.BytesIO()
    pygame.image.save(frame_to_surface(frame), buffer, "frame.png")
    return buffer.getvalue()


def write_png(frame: np.ndarray, path: str) -> None:
    """Writes a rendered frame to disk as a PNG file."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, 'wb') as f:
        f.write(encode_png(frame))
    logging.debug(f"Wrote PNG frame to {path}.")

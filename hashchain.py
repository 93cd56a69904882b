# hashchain.py
"""
Deterministic hash chain helpers.

This module is the engine's only source of pseudo-randomness. Strings are
digested with SHA-256 and the resulting bytes are read back as bounded
integers, unit floats, and RGBA colors.
"""
import hashlib
from typing import Optional, Tuple

from constants import (
    COLOR_CHANNEL_MAX, COLOR_CHANNEL_MIN, DOT_ALPHA, FALLBACK_COLOR, INT32_MAX
)

# --- Data Contracts ---
#
# hash_inputs(*inputs: Optional[str]) -> bytes:
#   - Inputs: Any number of strings. None entries are skipped entirely.
#   - Outputs: 32-byte SHA-256 digest of the concatenated UTF-8 encodings.
#   - Invariants: Identical input sequences give identical digests across
#     calls and processes. No state is shared between calls.
#
# int_at(digest: Optional[bytes], offset: int) -> int:
#   - Outputs: Big-endian signed 32-bit integer, or 0 if the 4 bytes at
#     offset are not available.
#
# unit_at(digest: Optional[bytes], offset: int) -> float:
#   - Outputs: A float in [0, 1].
#
# color_at(digest: Optional[bytes]) -> Tuple[int, int, int, int]:
#   - Outputs: (r, g, b, a) with r, g, b in [32, 255] and a = 220, or the
#     fallback color for digests shorter than 12 bytes.

Color = Tuple[int, int, int, int]


def hash_inputs(*inputs: Optional[str]) -> bytes:
    """
    Digests an ordered sequence of strings with SHA-256.

    Args:
        *inputs: Strings to concatenate. None values are skipped and do not
            contribute a placeholder.

    Returns:
        bytes: The 32-byte digest.
    """
    # A fresh hasher per call keeps calls independent of each other.
    hasher = hashlib.sha256()
    for value in inputs:
        if value is not None:
            hasher.update(value.encode("utf-8"))
    return hasher.digest()


def int_at(digest: Optional[bytes], offset: int) -> int:
    """Reads a big-endian signed 32-bit integer, returning 0 when out of range."""
    if digest is None or offset < 0 or offset + 4 > len(digest):
        return 0
    return int.from_bytes(digest[offset:offset + 4], "big", signed=True)


def unit_at(digest: Optional[bytes], offset: int) -> float:
    """Maps the integer at offset onto [0, 1]."""
    return (int_at(digest, offset) & INT32_MAX) / float(INT32_MAX)


def color_at(digest: Optional[bytes]) -> Color:
    """
    Derives a stable RGBA color from a digest.

    Each channel is the byte at position 0, 4 or 8 XORed with bits 16-23 of
    the integer starting at the same position, then clamped to [32, 255].
    """
    if digest is None or len(digest) < 12:
        return FALLBACK_COLOR
    channels = []
    for offset in (0, 4, 8):
        value = digest[offset] ^ ((int_at(digest, offset) >> 16) & 0xFF)
        channels.append(max(COLOR_CHANNEL_MIN, min(COLOR_CHANNEL_MAX, value)))
    return (channels[0], channels[1], channels[2], DOT_ALPHA)


def palette_color(anchor: str, index: int) -> Color:
    """Returns the palette color for a dot, keyed by an anchor string and its index."""
    return color_at(hash_inputs(anchor, str(index)))

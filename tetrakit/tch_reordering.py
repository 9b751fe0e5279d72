"""Bit reordering between type-2 channel bits and ACELP speech codec frames."""

from __future__ import annotations

from typing import Sequence

# Codec bit positions (1-based) for each protection class. The class-0 table
# has one more slot than it has positions; that slot (position 0) carries no
# codec bit.
CLASS0_POSITIONS = (
    35, 36, 37, 38, 39, 40, 41, 42, 33, 47, 48, 56, 61, 62, 63,
    65, 66, 67, 68, 69, 70, 74, 75, 83, 88, 89, 90, 91, 92, 93, 94,
    95, 96, 97, 101, 102, 110, 115, 116, 117, 118, 119, 120, 121,
    122, 123, 124, 128, 129, 137, 0,
)

CLASS1_POSITIONS = (
    58, 85, 112, 54, 81, 108, 135, 50, 77, 104, 131, 45, 72, 99, 126,
    55, 82, 109, 136, 5, 13, 34, 8, 16, 17, 22, 23, 24, 25, 26,
    6, 14, 7, 15, 60, 87, 114, 46, 73, 100, 127, 44, 71, 98, 125,
    33, 49, 76, 103, 130, 59, 86, 113, 57, 84, 111,
)

CLASS2_POSITIONS = (
    18, 19, 20, 21, 31, 32, 53, 80, 107, 134, 1, 2, 3, 4,
    9, 10, 11, 12, 27, 28, 29, 30, 52, 79, 106, 133, 51, 78, 105, 132,
)

FRAME_BITS = len(CLASS0_POSITIONS) + len(CLASS1_POSITIONS) + len(CLASS2_POSITIONS)
BLOCK_BITS = 2 * FRAME_BITS

_POSITIONS = CLASS0_POSITIONS + CLASS1_POSITIONS + CLASS2_POSITIONS


def _mapping():
    """Yield (type-2 index, codec index) pairs for both frames."""
    for slot, position in enumerate(_POSITIONS):
        if position == 0:
            continue
        for frame in range(2):
            yield 2 * slot + frame, frame * FRAME_BITS + position - 1


def _check(bits: Sequence[int]) -> None:
    if len(bits) != BLOCK_BITS:
        raise ValueError(f"expected {BLOCK_BITS} bits, got {len(bits)}")


def acelp_type2_to_codec(bits: Sequence[int]) -> list[int]:
    """Reorder 274 type-2 bits into two consecutive 137-bit codec frames."""
    _check(bits)
    out = [0] * BLOCK_BITS
    for src, dst in _mapping():
        out[dst] = bits[src]
    return out


def acelp_codec_to_type2(bits: Sequence[int]) -> list[int]:
    """Reorder two consecutive 137-bit codec frames into 274 type-2 bits."""
    _check(bits)
    out = [0] * BLOCK_BITS
    for dst, src in _mapping():
        out[dst] = bits[src]
    return out
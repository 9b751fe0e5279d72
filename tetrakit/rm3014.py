"""Shortened (30,14) Reed-Muller code used for the access assignment channel."""

from __future__ import annotations

from functools import reduce
from operator import xor

_GENERATOR = (
    (1, 0, 0, 1, 1, 0, 1, 1, 0, 1, 1, 0, 0, 0, 0, 0),
    (0, 0, 1, 0, 1, 1, 0, 1, 1, 1, 1, 0, 0, 0, 0, 0),
    (1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0),
    (1, 1, 1, 0, 0, 0, 0, 0, 0, 0, 1, 1, 1, 1, 0, 0),
    (1, 0, 0, 1, 1, 0, 0, 0, 0, 0, 1, 1, 1, 0, 1, 0),
    (0, 1, 0, 1, 0, 1, 0, 0, 0, 0, 1, 1, 0, 1, 1, 0),
    (0, 0, 1, 0, 1, 1, 0, 0, 0, 0, 1, 0, 1, 1, 1, 0),
    (1, 1, 1, 1, 1, 1, 1, 1, 1, 1, 0, 1, 1, 1, 1, 1),
    (1, 0, 0, 0, 0, 0, 1, 1, 0, 0, 1, 1, 1, 0, 0, 1),
    (0, 1, 0, 0, 0, 0, 1, 0, 1, 0, 1, 1, 0, 1, 0, 1),
    (0, 0, 1, 0, 0, 0, 0, 1, 1, 0, 1, 0, 1, 1, 0, 1),
    (0, 0, 0, 1, 0, 0, 1, 0, 0, 1, 1, 1, 0, 0, 1, 1),
    (0, 0, 0, 0, 1, 0, 0, 1, 0, 1, 1, 0, 1, 0, 1, 1),
    (0, 0, 0, 0, 0, 1, 0, 0, 1, 1, 1, 0, 0, 1, 1, 1),
)

DATA_BITS = 14
CODE_BITS = 30


def _pack(bits) -> int:
    return reduce(lambda acc, bit: (acc << 1) | bit, bits, 0)


# Each row: identity bit in the upper 14 bits, parity bits in the lower 16.
_ROWS = tuple(
    (1 << (16 + DATA_BITS - 1 - i)) | _pack(row) for i, row in enumerate(_GENERATOR)
)


def rm3014_compute(value: int) -> int:
    """Encode a 14-bit value into a 30-bit codeword."""
    if not 0 <= value < 1 << DATA_BITS:
        raise ValueError(f"value must fit in {DATA_BITS} bits, got {value}")
    return reduce(
        xor,
        (row for i, row in enumerate(_ROWS) if (value >> (DATA_BITS - 1 - i)) & 1),
        0,
    )


def rm3014_decode(value: int) -> int:
    """Extract the 14 data bits from a codeword; the systematic part is not checked."""
    if not 0 <= value <= 0xFFFFFFFF:
        raise ValueError(f"codeword must fit in 32 bits, got {value}")
    return value >> 16
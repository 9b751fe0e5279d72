"""TETRA scrambling: converts type-4 bits to type-5 bits and back."""

from __future__ import annotations

from itertools import islice
from typing import Iterator, Sequence

# For scrambling of the BSCH all colour/network bits are zero and the
# two lowest register bits are one.
SCRAMB_INIT = 3

_TAPS = (32, 26, 23, 22, 16, 12, 11, 10, 8, 7, 5, 4, 2, 1)
_SHIFTS = tuple(32 - tap for tap in _TAPS)


def _lfsr(state: int) -> Iterator[int]:
    state &= 0xFFFFFFFF
    while True:
        bit = 0
        for shift in _SHIFTS:
            bit ^= state >> shift
        bit &= 1
        state = (state >> 1) | (bit << 31)
        yield bit


def scrambling_bits(lfsr_init: int, length: int) -> list[int]:
    """Return ``length`` bits of the scrambling sequence for the given initial state."""
    if length < 0:
        raise ValueError("length must not be negative")
    return list(islice(_lfsr(lfsr_init), length))


def scramble(lfsr_init: int, bits: Sequence[int]) -> list[int]:
    """Xor ``bits`` with the scrambling sequence; applying it twice restores the input."""
    return [bit ^ s for bit, s in zip(bits, _lfsr(lfsr_init))]


def scrambling_init(mcc: int, mnc: int, colour: int) -> int:
    """Compute the scrambling register's initial value for a cell."""
    mcc &= 0x3FF
    mnc &= 0x3FFF
    colour &= 0x3F
    value = colour | (mnc << 6) | (mcc << 20)
    return ((value << 2) | SCRAMB_INIT) & 0xFFFFFFFF
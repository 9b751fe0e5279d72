"""Convolutional mother code and rate-compatible puncturing: type-2 to type-3 bits."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Optional, Sequence


class ConvEncoder:
    """Rate 1/4 mother code encoder, four-stage shift register.

    G1 = 1 + D + D4, G2 = 1 + D2 + D3 + D4, G3 = 1 + D + D2 + D4, G4 = 1 + D + D3 + D4.
    """

    def __init__(self):
        self.delayed = [0, 0, 0, 0]

    def reset(self) -> None:
        """Clear the shift register."""
        self.delayed = [0, 0, 0, 0]

    def _encode_bit(self, bit: int) -> tuple[int, int, int, int]:
        d1, d2, d3, d4 = self.delayed
        g1 = (bit + d1 + d4) % 2
        g2 = (bit + d2 + d3 + d4) % 2
        g3 = (bit + d1 + d2 + d4) % 2
        g4 = (bit + d1 + d3 + d4) % 2
        self.delayed = [bit, d1, d2, d3]
        return g1, g2, g3, g4

    def encode(self, bits: Iterable[int]) -> list[int]:
        """Encode one bit per item; returns four output bits per input bit."""
        out: list[int] = []
        for bit in bits:
            out.extend(self._encode_bit(bit & 1))
        return out


class Puncturer(IntEnum):
    RATE_2_3 = 0
    RATE_1_3 = 1
    RATE_292_432 = 2
    RATE_148_432 = 3
    RATE_112_168 = 4
    RATE_72_162 = 5
    RATE_38_80 = 6


@dataclass(frozen=True)
class _PunctSpec:
    positions: tuple[int, ...]
    t: int
    period: int
    # Every ``stretch`` symbols one extra mother index is skipped; None means none.
    stretch: Optional[int] = None

    def index(self, j: int) -> int:
        if self.stretch is None:
            return j
        return j + (j - 1) // self.stretch


_P_RATE2_3 = (0, 1, 2, 5)
_P_RATE1_3 = (0, 1, 2, 3, 5, 6, 7)
_P_RATE8_12 = (0, 1, 2, 4)
_P_RATE8_18 = (0, 1, 2, 3, 4, 5, 7, 8, 10, 11)
_P_RATE8_17 = (0, 1, 2, 3, 4, 5, 7, 8, 10, 11, 13, 14, 16, 17, 19, 20, 22, 23)

_SPECS = {
    Puncturer.RATE_2_3: _PunctSpec(_P_RATE2_3, 3, 8),
    Puncturer.RATE_1_3: _PunctSpec(_P_RATE1_3, 6, 8),
    Puncturer.RATE_292_432: _PunctSpec(_P_RATE2_3, 3, 8, 65),
    Puncturer.RATE_148_432: _PunctSpec(_P_RATE1_3, 6, 8, 35),
    Puncturer.RATE_112_168: _PunctSpec(_P_RATE8_12, 3, 6),
    Puncturer.RATE_72_162: _PunctSpec(_P_RATE8_18, 9, 12),
    Puncturer.RATE_38_80: _PunctSpec(_P_RATE8_17, 17, 24),
}


def _mother_positions(puncturer, length: int) -> list[int]:
    """0-based mother-code positions of the first ``length`` punctured symbols."""
    spec = _SPECS[Puncturer(puncturer)]
    if length < 0:
        raise ValueError("length must not be negative")
    positions = []
    for j in range(1, length + 1):
        i = spec.index(j)
        block = (i - 1) // spec.t
        k = spec.period * block + spec.positions[i - spec.t * block]
        positions.append(k - 1)
    return positions


def puncture(puncturer, mother: Sequence[int], length: int) -> list[int]:
    """Puncture the mother code, keeping ``length`` symbols."""
    positions = _mother_positions(puncturer, length)
    if positions and positions[-1] >= len(mother):
        raise ValueError(
            f"mother code needs at least {positions[-1] + 1} symbols, got {len(mother)}"
        )
    return [mother[k] for k in positions]


def depuncture(puncturer, bits: Sequence[int], mother_length: int, fill: int = 0xFF) -> list[int]:
    """Place type-3 bits back at their mother-code positions; the rest hold ``fill``."""
    positions = _mother_positions(puncturer, len(bits))
    if positions and positions[-1] >= mother_length:
        raise ValueError(
            f"mother code needs at least {positions[-1] + 1} symbols, got {mother_length}"
        )
    out = [fill] * mother_length
    for bit, k in zip(bits, positions):
        out[k] = bit
    return out


# (type-2 length, type-3 length, mother rate, puncturer)
_SELF_TEST_PARAMS = (
    (80, 120, 4, Puncturer.RATE_2_3),        # BSCH
    (292, 432, 4, Puncturer.RATE_292_432),   # TCH/4.8
    (148, 432, 4, Puncturer.RATE_148_432),   # TCH/2.4
    (144, 216, 4, Puncturer.RATE_2_3),       # SCH/HD, BNCH, STCH
    (112, 168, 4, Puncturer.RATE_2_3),       # SCH/HU
    (288, 432, 4, Puncturer.RATE_2_3),       # SCH/F
    (112, 168, 3, Puncturer.RATE_112_168),   # speech class 1
    (72, 162, 3, Puncturer.RATE_72_162),     # speech class 2
    (38, 80, 3, Puncturer.RATE_38_80),       # speech class 2 in STCH
)


def punct_self_test() -> int:
    """Check that puncturing then depuncturing is consistent for every channel.

    Returns the number of configurations checked; raises ValueError on a mismatch.
    """
    for type2_len, type3_len, rate, punct in _SELF_TEST_PARAMS:
        mother_len = type2_len * rate
        mother = [i % 0xFF for i in range(mother_len)]
        punctured = puncture(punct, mother, type3_len)
        restored = depuncture(punct, punctured, mother_len, 0xFF)
        equal = 0
        for original, value in zip(mother, restored):
            if value == 0xFF:
                continue
            if value != original:
                raise ValueError(f"{punct.name}: depunctured code differs from mother code")
            equal += 1
        if equal != type3_len:
            raise ValueError(
                f"{punct.name}: depunctured code has {equal} equal symbols, need {type3_len}"
            )
    return len(_SELF_TEST_PARAMS)
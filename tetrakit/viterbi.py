"""Viterbi decoding of the TETRA control and traffic channel convolutional codes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

# Soft values: +127 is a confident 0, -127 a confident 1, 0 an erasure.
SOFT_ZERO = 127
SOFT_ONE = -127
SOFT_ERASURE = 0

MAX_SB1_SYMBOLS = 864


@dataclass(frozen=True)
class ConvCode:
    """A feed-forward convolutional code given by its trellis tables.

    ``next_output[state][bit]`` packs the N output bits, first bit in the MSB.
    """

    n: int
    k: int
    next_output: tuple[tuple[int, int], ...]
    next_state: tuple[tuple[int, int], ...]


_NEXT_STATE = (
    (0, 1), (2, 3), (4, 5), (6, 7),
    (8, 9), (10, 11), (12, 13), (14, 15),
    (0, 1), (2, 3), (4, 5), (6, 7),
    (8, 9), (10, 11), (12, 13), (14, 15),
)

# G1 = 1 + D + D4, G2 = 1 + D2 + D3 + D4, G3 = 1 + D + D2 + D4, G4 = 1 + D + D3 + D4
CONV_CCH = ConvCode(
    n=4,
    k=5,
    next_output=(
        (0, 15), (11, 4), (6, 9), (13, 2),
        (5, 10), (14, 1), (3, 12), (8, 7),
        (15, 0), (4, 11), (9, 6), (2, 13),
        (10, 5), (1, 14), (12, 3), (7, 8),
    ),
    next_state=_NEXT_STATE,
)

# G1 = 1 + D + D2 + D3 + D4, G2 = 1 + D + D3 + D4, G3 = 1 + D2 + D4
CONV_TCH = ConvCode(
    n=4,
    k=5,
    next_output=(
        (0, 7), (6, 1), (5, 2), (3, 4),
        (6, 1), (0, 7), (3, 4), (5, 2),
        (7, 0), (1, 6), (2, 5), (4, 3),
        (1, 6), (7, 0), (4, 3), (2, 5),
    ),
    next_state=_NEXT_STATE,
)


def conv_decode(code: ConvCode, soft: Sequence[int], length: int) -> list[int]:
    """Decode ``length`` bits from soft symbols of a code flushed back to state 0.

    The decoder reads ``(length + k - 1) * n`` soft values; missing ones count
    as erasures.
    """
    if length < 0:
        raise ValueError("length must not be negative")
    n = code.n
    steps = length + code.k - 1
    needed = steps * n
    symbols = list(soft[:needed])
    symbols.extend([SOFT_ERASURE] * (needed - len(symbols)))

    num_states = len(code.next_state)
    unreachable = float("-inf")
    metrics = [0.0] + [unreachable] * (num_states - 1)
    history = []
    for step in range(steps):
        chunk = symbols[step * n:(step + 1) * n]
        branch = [
            sum(-s if (out >> (n - 1 - j)) & 1 else s for j, s in enumerate(chunk))
            for out in range(1 << n)
        ]
        new_metrics = [unreachable] * num_states
        back: list = [None] * num_states
        for state, metric in enumerate(metrics):
            if metric == unreachable:
                continue
            for bit in (0, 1):
                nxt = code.next_state[state][bit]
                candidate = metric + branch[code.next_output[state][bit]]
                if candidate > new_metrics[nxt]:
                    new_metrics[nxt] = candidate
                    back[nxt] = (state, bit)
        metrics = new_metrics
        history.append(back)

    if metrics[0] == unreachable:
        raise ValueError("trellis cannot be terminated in state 0")
    state = 0
    bits = []
    for back in reversed(history):
        state, bit = back[state]
        bits.append(bit)
    bits.reverse()
    return bits[:length]


def conv_cch_decode(soft: Sequence[int], length: int) -> list[int]:
    """Decode the control channel mother code."""
    return conv_decode(CONV_CCH, soft, length)


def conv_tch_decode(soft: Sequence[int], length: int) -> list[int]:
    """Decode the traffic channel mother code."""
    return conv_decode(CONV_TCH, soft, length)


def viterbi_dec_sb1(symbols: Sequence[int], sym_count: int) -> list[int]:
    """Decode depunctured hard bits (0, 1, or 0xFF for punctured) into type-2 bits."""
    if not 0 <= sym_count <= MAX_SB1_SYMBOLS:
        raise ValueError(f"sym_count must be between 0 and {MAX_SB1_SYMBOLS}, got {sym_count}")
    if len(symbols) < 4 * sym_count:
        raise ValueError(f"need {4 * sym_count} symbols, got {len(symbols)}")
    soft = [
        SOFT_ZERO if s == 0 else SOFT_ERASURE if s == 0xFF else SOFT_ONE
        for s in symbols[:4 * sym_count]
    ]
    return conv_cch_decode(soft, sym_count)
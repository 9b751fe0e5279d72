"""TETRA block interleaver: converts type-3 bits to type-4 bits and back."""

from __future__ import annotations

from math import gcd
from typing import Sequence


def _positions(k: int, a: int):
    """Yield (i, k) pairs, both 1-based, of the block interleaving function."""
    for i in range(1, k + 1):
        yield i, 1 + (a * i) % k


def _check(k: int, data: Sequence[int]) -> None:
    if k <= 0:
        raise ValueError(f"block size must be positive, got {k}")
    if len(data) != k:
        raise ValueError(f"data must hold {k} bits, got {len(data)}")


def block_interleave(k: int, a: int, data: Sequence[int]) -> list[int]:
    """Interleave a block of ``k`` bits with step ``a``."""
    _check(k, data)
    if gcd(a, k) != 1:
        raise ValueError(f"step {a} is not coprime with block size {k}")
    out = [0] * k
    for i, pos in _positions(k, a):
        out[pos - 1] = data[i - 1]
    return out


def block_deinterleave(k: int, a: int, data: Sequence[int]) -> list[int]:
    """Undo :func:`block_interleave`."""
    _check(k, data)
    return [data[pos - 1] for _, pos in _positions(k, a)]
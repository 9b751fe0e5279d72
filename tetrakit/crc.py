"""CRC16-ITU-T (X.25 polynomial) over packed bytes or one-bit-per-item sequences."""

from __future__ import annotations

from typing import Iterable

GEN_POLY = 0x1021
_MASK16 = 0xFFFF


def _feed(crc: int, bits: Iterable[int], poly: int) -> int:
    crc &= _MASK16
    for bit in bits:
        crc ^= (bit & 1) << 15
        if crc & 0x8000:
            crc = ((crc << 1) ^ poly) & _MASK16
        else:
            crc = (crc << 1) & _MASK16
    return crc


def _packed_bits(data: bytes, number_bits: int):
    for index in range(number_bits):
        yield (data[index // 8] >> (7 - index % 8)) & 1


def crc16_itut_bytes(crc: int, data, number_bits: int) -> int:
    """Run the CRC over the first ``number_bits`` bits of ``data``, high bit first."""
    data = bytes(data)
    if not 0 <= number_bits <= 8 * len(data):
        raise ValueError(
            f"number_bits must be between 0 and {8 * len(data)}, got {number_bits}"
        )
    return _feed(crc, _packed_bits(data, number_bits), GEN_POLY)


def crc16_itut_bits(crc: int, bits: Iterable[int]) -> int:
    """Run the CRC over a sequence holding one bit per item."""
    return _feed(crc, bits, GEN_POLY)


def crc16_itut_poly(crc: int, poly: int, bits: Iterable[int]) -> int:
    """Run a 16-bit CRC with an arbitrary generator polynomial over unpacked bits."""
    return _feed(crc, bits, poly)


def crc16_ccitt_bits(bits: Iterable[int]) -> int:
    """CRC16-CCITT with initial value 0xFFFF over unpacked bits."""
    return crc16_itut_bits(0xFFFF, bits)
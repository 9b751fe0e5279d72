"""TEA2 keystream generator."""

from __future__ import annotations

from collections import deque

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF

KEY_SIZE = 10
IV_XOR = 0x5A6E3278

LUT_A = (0x2579, 0x86E5, 0xB6C8, 0x31D6, 0x7394, 0x934D, 0x638E, 0xC68B)
LUT_B = (0xD68A, 0x97A1, 0xB2C9, 0x239E, 0x9C71, 0x36E8, 0xC9B2, 0x6CD1)

SBOX = bytes((
    0x62, 0xDA, 0xFD, 0xB6, 0xBB, 0x9C, 0xD8, 0x2A, 0xAB, 0x28, 0x6E, 0x42, 0xE7, 0x1C, 0x78, 0x9E,
    0xFC, 0xCA, 0x81, 0x8E, 0x32, 0x3B, 0xB4, 0xEF, 0x9F, 0x8B, 0xDB, 0x94, 0x0F, 0x9A, 0xA2, 0x96,
    0x1B, 0x7A, 0xFF, 0xAA, 0xC5, 0xD6, 0xBC, 0x24, 0xDF, 0x44, 0x03, 0x09, 0x0B, 0x57, 0x90, 0xBA,
    0x7F, 0x1F, 0xCF, 0x71, 0x98, 0x07, 0xF8, 0xA1, 0x60, 0xF7, 0x52, 0x8D, 0xE5, 0xD7, 0x69, 0x87,
    0x14, 0xED, 0x92, 0xEB, 0xB3, 0x2F, 0xE9, 0x3D, 0xC6, 0x50, 0x5A, 0xA7, 0x45, 0x18, 0x11, 0xC4,
    0xCE, 0xAC, 0xF4, 0x1D, 0x82, 0x54, 0x3E, 0x49, 0xD5, 0xEE, 0x84, 0x35, 0x41, 0x3A, 0xEC, 0x34,
    0x17, 0xE0, 0xC9, 0xFE, 0xE8, 0xCB, 0xE6, 0xAE, 0x68, 0xE2, 0x6B, 0x46, 0xC8, 0x47, 0xB2, 0xE3,
    0x97, 0x10, 0x0E, 0xB8, 0x76, 0x5B, 0xBE, 0xF5, 0xA6, 0x3C, 0x8F, 0xF6, 0xD1, 0xAF, 0xC0, 0x5E,
    0x7E, 0xCD, 0x7C, 0x51, 0x6D, 0x74, 0x2C, 0x16, 0xF2, 0xA5, 0x65, 0x64, 0x58, 0x72, 0x1E, 0xF1,
    0x04, 0xA8, 0x13, 0x53, 0x31, 0xB1, 0x20, 0xD3, 0x75, 0x5F, 0xA4, 0x56, 0x06, 0x8A, 0x8C, 0xD9,
    0x70, 0x12, 0x29, 0x61, 0x4F, 0x4C, 0x15, 0x05, 0xD2, 0xBD, 0x7D, 0x9B, 0x99, 0x83, 0x2B, 0x25,
    0xD0, 0x23, 0x48, 0x3F, 0xB0, 0x2E, 0x0D, 0x0C, 0xC7, 0xCC, 0xB7, 0x5C, 0xF0, 0xBF, 0x2D, 0x4E,
    0x40, 0x39, 0x9D, 0x21, 0x37, 0x77, 0x73, 0x4B, 0x4D, 0x5D, 0xFA, 0xDE, 0x00, 0x80, 0x85, 0x6F,
    0x22, 0x91, 0xDC, 0x26, 0x38, 0xE4, 0x4A, 0x79, 0x6A, 0x67, 0x93, 0xF3, 0xFB, 0x19, 0xA0, 0x7B,
    0xF9, 0x95, 0x89, 0x66, 0xB9, 0xD4, 0xC1, 0xDD, 0x63, 0x33, 0xE1, 0xC3, 0xB5, 0xA3, 0xC2, 0x27,
    0x0A, 0x88, 0xA9, 0x1A, 0x6C, 0x43, 0xEA, 0xAD, 0x30, 0x86, 0x36, 0x59, 0x08, 0x55, 0x01, 0x02,
))

_FIRST_SKIP_ROUNDS = 51
_SKIP_ROUNDS = 19


def expand_iv(frame_numbers: int) -> int:
    """Expand a 32-bit frame-number IV into the 64-bit initial register."""
    frame_numbers &= _MASK32
    xorred = frame_numbers ^ IV_XOR
    xorred = ((xorred << 8) | (xorred >> 24)) & _MASK32
    iv = (frame_numbers << 32) | xorred
    return ((iv >> 8) | (iv << 56)) & _MASK64


def _rotr8(value: int) -> int:
    return ((value >> 1) | (value << 7)) & 0xFF


def _state_word_to_newbyte(word: int, lut) -> int:
    st0 = word & 0xFF
    st1 = (word >> 8) & 0xFF
    out = 0
    for i, entry in enumerate(lut):
        # taps on bits 1,2 of the low byte and bits 7,0 of the high byte
        dist = ((st0 >> 1) & 0x1) | ((st0 >> 1) & 0x2) | ((st1 >> 5) & 0x4) | ((st1 << 3) & 0x8)
        if entry & (1 << dist):
            out |= 1 << i
        st0 = _rotr8(st0)
        st1 = _rotr8(st1)
    return out


def _reorder_state_byte(value: int) -> int:
    return (
        ((value << 6) & 0x40)
        | ((value << 3) & 0x10)
        | ((value >> 2) & 0x01)
        | ((value << 2) & 0x20)
        | ((value << 3) & 0x80)
        | ((value >> 4) & 0x02)
        | ((value >> 3) & 0x08)
        | ((value >> 5) & 0x04)
    )


def tea2(frame_numbers: int, key, num_bytes: int) -> bytes:
    """Generate ``num_bytes`` of TEA2 keystream for the given IV and 80-bit key."""
    key = bytes(key)
    if len(key) != KEY_SIZE:
        raise ValueError(f"key must be {KEY_SIZE} bytes, got {len(key)}")
    if num_bytes < 0:
        raise ValueError("num_bytes must not be negative")

    iv_reg = expand_iv(frame_numbers)
    key_reg = deque(key, maxlen=KEY_SIZE)
    out = bytearray()
    skip = _FIRST_SKIP_ROUNDS
    for _ in range(num_bytes):
        for _ in range(skip):
            sbox_out = SBOX[key_reg[0] ^ key_reg[7]]
            key_reg.append(sbox_out)

            deriv01 = _state_word_to_newbyte(iv_reg & 0xFFFF, LUT_A)
            deriv34 = _state_word_to_newbyte((iv_reg >> 24) & 0xFFFF, LUT_B)
            reord5 = _reorder_state_byte((iv_reg >> 40) & 0xFF)

            new_byte = ((iv_reg >> 56) ^ (iv_reg >> 16) ^ reord5 ^ deriv01 ^ sbox_out) & 0xFF
            iv_reg = (((iv_reg << 8) ^ (deriv34 << 24)) | new_byte) & _MASK64
        out.append(iv_reg >> 56)
        skip = _SKIP_ROUNDS
    return bytes(out)
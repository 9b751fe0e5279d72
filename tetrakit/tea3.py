"""TEA3 keystream generator."""

from __future__ import annotations

from collections import deque

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF

KEY_SIZE = 10
IV_XOR = 0xC43A7D51

LUT_A = (0x92A7, 0xA761, 0x974C, 0x6B8C, 0x29CE, 0x176C, 0x39D4, 0x7463)
LUT_B = (0x9D58, 0xA46D, 0x176C, 0x79C4, 0xC62B, 0xB2C9, 0x4D93, 0x2E93)

SBOX = bytes((
    0x7D, 0xBF, 0x7B, 0x92, 0xAE, 0x7C, 0xF2, 0x10, 0x5A, 0x0F, 0x61, 0x7A, 0x98, 0x76, 0x07, 0x64,
    0xEE, 0x89, 0xF7, 0xBA, 0xC2, 0x02, 0x0D, 0xE8, 0x56, 0x2E, 0xCA, 0x58, 0xC0, 0xFA, 0x2A, 0x01,
    0x57, 0x6E, 0x3F, 0x4B, 0x9C, 0xDA, 0xA6, 0x5B, 0x41, 0x26, 0x50, 0x24, 0x3E, 0xF8, 0x0A, 0x86,
    0xB6, 0x5C, 0x34, 0xE9, 0x06, 0x88, 0x1F, 0x39, 0x33, 0xDF, 0xD9, 0x78, 0xD8, 0xA8, 0x51, 0xB2,
    0x09, 0xCD, 0xA1, 0xDD, 0x8E, 0x62, 0x69, 0x4D, 0x23, 0x2B, 0xA9, 0xE1, 0x53, 0x94, 0x90, 0x1E,
    0xB4, 0x3B, 0xF9, 0x4E, 0x36, 0xFE, 0xB5, 0xD1, 0xA2, 0x8D, 0x66, 0xCE, 0xB7, 0xC4, 0x60, 0xED,
    0x96, 0x4F, 0x31, 0x79, 0x35, 0xEB, 0x8F, 0xBB, 0x54, 0x14, 0xCB, 0xDE, 0x6B, 0x2D, 0x19, 0x82,
    0x80, 0xAC, 0x17, 0x05, 0xFF, 0xA4, 0xCF, 0xC6, 0x6F, 0x65, 0xE6, 0x74, 0xC8, 0x93, 0xF4, 0x7E,
    0xF3, 0x43, 0x9F, 0x71, 0xAB, 0x9A, 0x0B, 0x87, 0x55, 0x70, 0x0C, 0xAD, 0xCC, 0xA5, 0x44, 0xE7,
    0x46, 0x45, 0x03, 0x30, 0x1A, 0xEA, 0x67, 0x99, 0xDB, 0x4A, 0x42, 0xD7, 0xAA, 0xE4, 0xC2, 0xD5,
    0xF0, 0x77, 0x20, 0xC3, 0x3C, 0x16, 0xB9, 0xE2, 0xEF, 0x6C, 0x3D, 0x1B, 0x22, 0x84, 0x2F, 0x81,
    0x1D, 0xB1, 0x3A, 0xE5, 0x73, 0x40, 0xD0, 0x18, 0xC7, 0x6A, 0x9E, 0x91, 0x48, 0x27, 0x95, 0x72,
    0x68, 0x0E, 0x00, 0xFC, 0xC5, 0x5F, 0xF1, 0xF5, 0x38, 0x11, 0x7F, 0xE3, 0x5E, 0x13, 0xAF, 0x37,
    0xE0, 0x8A, 0x49, 0x1C, 0x21, 0x47, 0xD4, 0xDC, 0xB0, 0xEC, 0x83, 0x28, 0xB8, 0xF6, 0xA7, 0xC9,
    0x63, 0x59, 0xBD, 0x32, 0x85, 0x08, 0xBE, 0xD3, 0xFD, 0x4C, 0x2C, 0xFB, 0xA0, 0xC1, 0x9D, 0xB3,
    0x52, 0x8C, 0x5D, 0x29, 0x6D, 0x04, 0xBC, 0x25, 0x15, 0x8B, 0x12, 0x9B, 0xD6, 0x75, 0xA3, 0x97,
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
        # taps on bits 5,6 of both bytes
        dist = ((st0 >> 5) & 3) | ((st1 >> 3) & 12)
        if entry & (1 << dist):
            out |= 1 << i
        st0 = _rotr8(st0)
        st1 = _rotr8(st1)
    return out


def _reorder_state_byte(value: int) -> int:
    return (
        ((value << 6) & 0x40)
        | ((value << 1) & 0x20)
        | ((value << 2) & 0x98)
        | ((value >> 4) & 0x04)
        | ((value >> 3) & 0x01)
        | ((value >> 6) & 0x02)
    )


def tea3(frame_numbers: int, key, num_bytes: int) -> bytes:
    """Generate ``num_bytes`` of TEA3 keystream for the given IV and 80-bit key."""
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
            sbox_out = SBOX[key_reg[7] ^ key_reg[2]] ^ key_reg[0]
            key_reg.append(sbox_out)

            deriv12 = _state_word_to_newbyte((iv_reg >> 8) & 0xFFFF, LUT_A)
            deriv56 = _state_word_to_newbyte((iv_reg >> 40) & 0xFFFF, LUT_B)
            reord4 = _reorder_state_byte((iv_reg >> 32) & 0xFF)

            new_byte = ((iv_reg >> 56) ^ reord4 ^ deriv12 ^ sbox_out) & 0xFF
            iv_reg = (((iv_reg << 8) ^ (deriv56 << 40)) | new_byte) & _MASK64
        out.append(iv_reg >> 56)
        skip = _SKIP_ROUNDS
    return bytes(out)
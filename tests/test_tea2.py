import pytest
from hypothesis import given, settings, strategies as st

from tetrakit.tea2 import expand_iv, tea2

MASK64 = 0xFFFFFFFFFFFFFFFF
KEY = bytes(range(1, 11))


def _rotl8_64(value):
    return ((value << 8) | (value >> 56)) & MASK64


def test_expand_iv_zero():
    assert expand_iv(0) == 0x5A000000006E3278


@given(st.integers(min_value=0, max_value=0xFFFFFFFF))
def test_expand_iv_keeps_frame_numbers_in_top_word(frame):
    assert _rotl8_64(expand_iv(frame)) >> 32 == frame


@given(st.integers(min_value=0, max_value=0xFFFFFFFF))
def test_expand_iv_fits_64_bits(frame):
    assert 0 <= expand_iv(frame) <= MASK64


def test_length_matches_request():
    assert len(tea2(0x1234, KEY, 7)) == 7


def test_zero_bytes_is_empty():
    assert tea2(0, KEY, 0) == b""


def test_deterministic():
    assert tea2(42, KEY, 5) == tea2(42, bytearray(KEY), 5)


@settings(max_examples=20, deadline=None)
@given(
    st.integers(min_value=0, max_value=0xFFFFFFFF),
    st.binary(min_size=10, max_size=10),
    st.integers(min_value=0, max_value=4),
)
def test_shorter_keystream_is_prefix(frame, key, n):
    longer = tea2(frame, key, n + 3)
    assert tea2(frame, key, n) == longer[:n]


def test_key_changes_keystream():
    other = bytes(KEY[:9]) + bytes((KEY[9] ^ 1,))
    assert tea2(7, KEY, 8) != tea2(7, other, 8)


def test_frame_changes_keystream():
    assert tea2(7, KEY, 8) != tea2(8, KEY, 8)


@pytest.mark.parametrize("key", [b"", bytes(9), bytes(11)])
def test_bad_key_length(key):
    with pytest.raises(ValueError):
        tea2(0, key, 1)


def test_negative_length():
    with pytest.raises(ValueError):
        tea2(0, KEY, -1)
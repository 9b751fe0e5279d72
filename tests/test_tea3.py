import pytest
from hypothesis import given, settings, strategies as st

from tetrakit.tea3 import expand_iv, tea3

MASK64 = 0xFFFFFFFFFFFFFFFF
KEY = bytes(range(10, 20))


def _rotl8_64(value):
    return ((value << 8) | (value >> 56)) & MASK64


def test_expand_iv_low_word_for_zero():
    assert _rotl8_64(expand_iv(0)) == 0x3A7D51C4


@given(st.integers(min_value=0, max_value=0xFFFFFFFF))
def test_expand_iv_keeps_frame_numbers_in_top_word(frame):
    assert _rotl8_64(expand_iv(frame)) >> 32 == frame


@given(st.integers(min_value=0, max_value=0xFFFFFFFF))
def test_expand_iv_fits_64_bits(frame):
    assert 0 <= expand_iv(frame) <= MASK64


def test_length_matches_request():
    assert len(tea3(0xBEEF, KEY, 6)) == 6


def test_zero_bytes_is_empty():
    assert tea3(0, KEY, 0) == b""


def test_deterministic():
    assert tea3(99, KEY, 5) == tea3(99, list(KEY), 5)


@settings(max_examples=20, deadline=None)
@given(
    st.integers(min_value=0, max_value=0xFFFFFFFF),
    st.binary(min_size=10, max_size=10),
    st.integers(min_value=0, max_value=4),
)
def test_shorter_keystream_is_prefix(frame, key, n):
    longer = tea3(frame, key, n + 3)
    assert tea3(frame, key, n) == longer[:n]


def test_key_changes_keystream():
    other = bytes((KEY[0] ^ 0x80,)) + KEY[1:]
    assert tea3(3, KEY, 8) != tea3(3, other, 8)


def test_frame_changes_keystream():
    assert tea3(3, KEY, 8) != tea3(4, KEY, 8)


@pytest.mark.parametrize("key", [b"", bytes(9), bytes(16)])
def test_bad_key_length(key):
    with pytest.raises(ValueError):
        tea3(0, key, 1)


def test_negative_length():
    with pytest.raises(ValueError):
        tea3(0, KEY, -2)
import pytest
from hypothesis import given, strategies as st

from tetrakit.tch_reordering import (
    BLOCK_BITS,
    FRAME_BITS,
    acelp_codec_to_type2,
    acelp_type2_to_codec,
)

# Codec positions 43 and 64 are not covered by the position tables.
_UNCOVERED = {42, 63, FRAME_BITS + 42, FRAME_BITS + 63}


def test_first_type2_bits_land_at_first_class0_position():
    bits = [0] * BLOCK_BITS
    bits[0] = 1
    out = acelp_type2_to_codec(bits)
    assert out[34] == 1
    assert sum(out) == 1

    bits = [0] * BLOCK_BITS
    bits[1] = 1
    out = acelp_type2_to_codec(bits)
    assert out[FRAME_BITS + 34] == 1
    assert sum(out) == 1


def test_codec_to_type2_reads_first_class0_position():
    codec = [0] * BLOCK_BITS
    codec[34] = 1
    out = acelp_codec_to_type2(codec)
    assert out[0] == 1
    assert sum(out) == 1


@given(st.lists(st.integers(min_value=0, max_value=1), min_size=BLOCK_BITS, max_size=BLOCK_BITS))
def test_codec_round_trip_preserves_covered_positions(codec):
    back = acelp_type2_to_codec(acelp_codec_to_type2(codec))
    expected = [0 if i in _UNCOVERED else bit for i, bit in enumerate(codec)]
    assert back == expected


def test_output_length():
    assert len(acelp_type2_to_codec([1] * BLOCK_BITS)) == BLOCK_BITS
    assert len(acelp_codec_to_type2([1] * BLOCK_BITS)) == BLOCK_BITS


def test_wrong_length_rejected():
    with pytest.raises(ValueError):
        acelp_type2_to_codec([0] * (BLOCK_BITS - 1))
    with pytest.raises(ValueError):
        acelp_codec_to_type2([0] * (BLOCK_BITS + 1))
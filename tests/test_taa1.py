from functools import reduce
from operator import xor

import pytest
from hypothesis import given, strategies as st

from tetrakit import taa1

KEY = bytes(range(16))
OTHER_KEY = bytes(range(100, 116))
TEN = bytes(range(1, 11))
DCK = bytes(range(20, 30))
VN = bytes((0x12, 0x34))

ten_bytes = st.binary(min_size=10, max_size=10)
eleven_bytes = st.binary(min_size=11, max_size=11)


@given(ten_bytes)
def test_transform_80_to_120_structure(data):
    out = taa1.transform_80_to_120(data)
    assert len(out) == 15
    assert out[1::3] == data[:5]
    assert out[2::3] == data[5:][::-1]
    assert all(out[3 * i] == (out[3 * i + 1] + out[3 * i + 2]) & 0xFF for i in range(5))


@given(ten_bytes)
def test_transform_80_to_128_check_byte(data):
    out = taa1.transform_80_to_128(data)
    assert len(out) == 16
    assert out[1:] == taa1.transform_80_to_120(data)
    assert out[0] == reduce(xor, (out[1], out[4], out[7], out[10], out[13]))


@given(ten_bytes)
def test_transform_alt_round_trip(data):
    expanded = taa1.transform_80_to_120_alt(data)
    assert len(expanded) == 15
    assert taa1.transform_120_to_80_alt(expanded) == data
    assert all(expanded[3 * i] ^ expanded[3 * i + 1] == expanded[3 * i + 2] for i in range(5))


@given(ten_bytes)
def test_transform_80_to_128_alt_sum_byte(data):
    out = taa1.transform_80_to_128_alt(data)
    assert out[:15] == taa1.transform_80_to_120_alt(data)
    assert out[15] == sum(out[2:15:3]) % 256


@given(eleven_bytes)
def test_transform_88_round_trip(data):
    expanded = taa1.transform_88_to_120(data)
    assert len(expanded) == 15
    assert taa1.transform_120_to_88(expanded) == data
    assert expanded[2] == expanded[0] ^ expanded[1]
    assert expanded[6] == expanded[3] ^ expanded[4] ^ expanded[5]


def test_transform_rejects_wrong_length():
    with pytest.raises(ValueError):
        taa1.transform_80_to_120(bytes(9))
    with pytest.raises(ValueError):
        taa1.transform_120_to_88(bytes(14))


def test_ta11_output_length_and_key_dependence():
    ks = taa1.ta11_ta41(KEY, TEN)
    assert len(ks) == 16
    assert ks == taa1.ta11_ta41(KEY, TEN)
    assert ks != taa1.ta11_ta41(OTHER_KEY, TEN)


def test_ta21_is_ta11_on_reversed_challenge():
    assert taa1.ta21(KEY, TEN) == taa1.ta11_ta41(KEY, TEN[::-1])


def test_ta12_splits_ta11_ciphertext():
    ct = taa1.ta11_ta41(KEY, TEN)
    res, dck = taa1.ta12_ta22(KEY, TEN)
    assert res == bytes((ct[0] ^ ct[3], ct[6], ct[9], ct[12] ^ ct[15]))
    assert dck == ct[1:3] + ct[4:6] + ct[7:9] + ct[10:12] + ct[13:15]


def test_ta31_ta32_round_trip():
    sealed = taa1.ta31(TEN, VN, DCK)
    assert len(sealed) == 15
    cck, mf = taa1.ta32(sealed, VN, DCK)
    assert cck == TEN
    assert mf is False


def test_ta32_flags_wrong_dck():
    sealed = taa1.ta31(TEN, VN, DCK)
    _, mf = taa1.ta32(sealed, VN, bytes(10))
    assert mf is True


def test_ta51_ta52_round_trip():
    sealed = taa1.ta51(TEN, VN, KEY, 0x1F)
    assert len(sealed) == 15
    unsealed, mf, key_n = taa1.ta52(sealed, KEY, VN)
    assert (unsealed, mf, key_n) == (TEN, False, 0x1F)


def test_ta52_flags_wrong_version():
    sealed = taa1.ta51(TEN, VN, KEY, 3)
    _, mf, _ = taa1.ta52(sealed, KEY, bytes((0x99, 0x77)))
    assert mf is True


def test_ta51_rejects_key_number_over_five_bits():
    with pytest.raises(ValueError):
        taa1.ta51(TEN, VN, KEY, 0x20)


def test_ta71_length_and_dependence():
    mgck = taa1.ta71(TEN, DCK)
    assert len(mgck) == 10
    assert mgck != taa1.ta71(TEN, bytes(10))


def test_ta81_ta82_round_trip():
    gck_n = bytes((0xAB, 0xCD))
    sealed = taa1.ta81(TEN, VN, gck_n, KEY)
    assert len(sealed) == 15
    gck, mf, number = taa1.ta82(sealed, VN, KEY)
    assert (gck, mf, number) == (TEN, False, gck_n)


def test_ta82_flags_wrong_key():
    sealed = taa1.ta81(TEN, VN, bytes(2), KEY)
    _, mf, _ = taa1.ta82(sealed, VN, OTHER_KEY)
    assert mf is True


def test_ta91_ta92_round_trip():
    gsko = bytes(range(40, 52))
    sealed = taa1.ta91(gsko, VN, KEY)
    assert sealed == taa1.ta81(gsko[:10], VN, gsko[10:], KEY)
    assert taa1.ta92(sealed, VN, KEY) == (gsko, False)


@given(ten_bytes, ten_bytes)
def test_tb4_xor_properties(a, b):
    combined = taa1.tb4(a, b)
    assert combined == taa1.tb4(b, a)
    assert taa1.tb4(combined, b) == a
    assert taa1.tb4(a, a) == bytes(10)


def test_tb5_location_area_mask():
    assert taa1.tb5(0, 0x3FFF, 0, bytes(10)) == bytes.fromhex("fffc" + "00" * 8)


def test_tb5_colour_code_mask():
    assert taa1.tb5(0, 0, 0x3F, bytes(10)) == bytes.fromhex("0000003f000fc003f000")


@given(
    st.integers(0, 0xFFF), st.integers(0, 0x3FFF), st.integers(0, 0x3F), ten_bytes
)
def test_tb5_is_involution(cn, la, cc, ck):
    assert taa1.tb5(cn, la, cc, taa1.tb5(cn, la, cc, ck)) == ck


def test_tb5_rejects_out_of_range_fields():
    with pytest.raises(ValueError):
        taa1.tb5(0x1000, 0, 0, bytes(10))
    with pytest.raises(ValueError):
        taa1.tb5(0, 0x4000, 0, bytes(10))
    with pytest.raises(ValueError):
        taa1.tb5(0, 0, 0x40, bytes(10))


@given(st.integers(0, 0xFFF), st.integers(0, 0xFFFFFF), ten_bytes)
def test_tb6_is_involution(cn, ssi, sck):
    assert taa1.tb6(taa1.tb6(sck, cn, ssi), cn, ssi) == sck


def test_tb6_zero_inputs_are_identity():
    assert taa1.tb6(TEN, 0, 0) == TEN


def test_tb6_rejects_large_ssi():
    with pytest.raises(ValueError):
        taa1.tb6(bytes(10), 0, 0x1000000)


@given(st.binary(min_size=12, max_size=12))
def test_tb7_parity_layout(gsko):
    out = taa1.tb7(gsko)
    assert len(out) == 16
    for i in range(4):
        group = out[4 * i:4 * i + 4]
        assert group[:3] == gsko[3 * i:3 * i + 3]
        assert group[3] == group[0] ^ group[1] ^ group[2]


def test_tb7_rejects_wrong_length():
    with pytest.raises(ValueError):
        taa1.tb7(bytes(11))
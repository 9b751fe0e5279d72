"""TAA1 authentication, key derivation and sealing primitives (TA/TB functions)."""

from __future__ import annotations

from functools import reduce
from operator import xor

from tetrakit.hurdle import enc_cbc, dec_cts

_MASK16 = 0xFFFF
_MASK32 = 0xFFFFFFFF


def _take(data, length: int, what: str) -> bytes:
    data = bytes(data)
    if len(data) != length:
        raise ValueError(f"{what} must be {length} bytes, got {len(data)}")
    return data


def _xor_all(chunk) -> int:
    return reduce(xor, chunk, 0)


def _with_parity(chunk: bytes) -> bytes:
    return chunk + bytes((_xor_all(chunk),))


def _parity_fault(padded: bytes, groups) -> bool:
    """True if any group ``padded[start:end]`` does not xor to ``padded[end]``."""
    return any(_xor_all(padded[start:end]) != padded[end] for start, end in groups)


def _adjust(key: bytes, vn: bytes) -> bytes:
    return bytes(k ^ vn[i & 1] for i, k in enumerate(key))


def _steal(sealed: bytes) -> bytes:
    """Drop byte 7 of a two-block CBC ciphertext (ciphertext stealing)."""
    return sealed[:7] + sealed[8:16]


# Transformations

def transform_80_to_120(data) -> bytes:
    """Expand 10 bytes to 15: each group is (sum, byte, mirrored byte)."""
    data = _take(data, 10, "data")
    out = bytearray()
    for a, b in zip(data[:5], reversed(data[5:])):
        out += bytes(((a + b) & 0xFF, a, b))
    return bytes(out)


def transform_80_to_128(data) -> bytes:
    """Expand 10 bytes to 16: an xor check byte followed by the 120-bit expansion."""
    base = transform_80_to_120(data)
    return bytes((_xor_all(base[0::3]),)) + base


def transform_80_to_120_alt(data) -> bytes:
    """Expand 10 bytes to 15: each byte pair is followed by its xor."""
    data = _take(data, 10, "data")
    out = bytearray()
    for a, b in zip(data[0::2], data[1::2]):
        out += bytes((a, b, a ^ b))
    return bytes(out)


def transform_80_to_128_alt(data) -> bytes:
    """Expand 10 bytes to 16: the alternate 120-bit expansion plus a sum byte."""
    base = transform_80_to_120_alt(data)
    return base + bytes((sum(base[2::3]) & 0xFF,))


def transform_88_to_120(data) -> bytes:
    """Expand 11 bytes to 15 by inserting xor parity after groups of 2, 3, 3, 3."""
    data = _take(data, 11, "data")
    return b"".join(
        _with_parity(data[start:end]) for start, end in ((0, 2), (2, 5), (5, 8), (8, 11))
    )


def transform_120_to_88(data) -> bytes:
    """Strip the parity bytes inserted by :func:`transform_88_to_120`."""
    data = _take(data, 15, "data")
    return data[0:2] + data[3:6] + data[7:10] + data[11:14]


def transform_120_to_80_alt(data) -> bytes:
    """Strip the parity bytes inserted by :func:`transform_80_to_120_alt`."""
    data = _take(data, 15, "data")
    return data[0:2] + data[3:5] + data[6:8] + data[9:11] + data[12:14]


# TA primitives

def ta11_ta41(key, challenge) -> bytes:
    """Derive the 16-byte session key KS from K and the 10-byte challenge RS."""
    challenge = _take(challenge, 10, "challenge")
    return enc_cbc(transform_80_to_128_alt(challenge), key)


def ta12_ta22(key, rand) -> tuple[bytes, bytes]:
    """Compute (RES, DCK): a 4-byte response and a 10-byte derived cipher key."""
    rand = _take(rand, 10, "rand")
    ct = enc_cbc(transform_80_to_128_alt(rand), key)
    res = bytes((ct[0] ^ ct[3], ct[6], ct[9], ct[12] ^ ct[15]))
    dck = bytes(ct[i] for i in (1, 2, 4, 5, 7, 8, 10, 11, 13, 14))
    return res, dck


def ta21(key, challenge) -> bytes:
    """Derive KS' from K and the byte-reversed challenge RS."""
    challenge = _take(challenge, 10, "challenge")
    return enc_cbc(transform_80_to_128_alt(challenge[::-1]), key)


def _cck_key(cck_id, dck) -> bytes:
    cck_id = _take(cck_id, 2, "cck_id")
    dck = _take(dck, 10, "dck")
    return transform_80_to_128(_adjust(dck, cck_id))


def ta31(unsealed_cck, cck_id, dck) -> bytes:
    """Seal a 10-byte CCK under DCK, giving 15 bytes."""
    padded = transform_80_to_120_alt(unsealed_cck) + b"\x00"
    return _steal(enc_cbc(padded, _cck_key(cck_id, dck)))


def ta32(sealed_cck, cck_id, dck) -> tuple[bytes, bool]:
    """Unseal a 15-byte sealed CCK; returns (CCK, manipulation flag)."""
    padded = dec_cts(_take(sealed_cck, 15, "sealed_cck"), _cck_key(cck_id, dck))
    mf = _parity_fault(padded, ((0, 2), (3, 5), (6, 8), (9, 11), (12, 14)))
    return transform_120_to_80_alt(padded), mf


def ta51(unsealed, vn, key, key_n) -> bytes:
    """Seal a 10-byte key with its 5-bit key number under a 16-byte key and version."""
    unsealed = _take(unsealed, 10, "unsealed")
    vn = _take(vn, 2, "vn")
    key = _take(key, 16, "key")
    if not 0 <= key_n <= 0xFF or key_n & 0xE0:
        raise ValueError(f"key_n must fit in 5 bits, got {key_n}")
    padded = transform_88_to_120(unsealed + bytes((key_n,))) + b"\x00"
    return _steal(enc_cbc(padded, _adjust(key, vn)))


def ta52(sealed, key, vn) -> tuple[bytes, bool, int]:
    """Unseal 15 bytes; returns (key, manipulation flag, key number)."""
    sealed = _take(sealed, 15, "sealed")
    key = _take(key, 16, "key")
    vn = _take(vn, 2, "vn")
    padded = dec_cts(sealed, _adjust(key, vn))
    unsealed = transform_120_to_88(padded)
    key_n = unsealed[10]
    mf = _parity_fault(padded, ((0, 2), (3, 6), (7, 10), (11, 14))) or bool(key_n & 0xE0)
    return unsealed[:10], mf, key_n


def ta71(gck, cck) -> bytes:
    """Derive the 10-byte MGCK from GCK and CCK."""
    gck = _take(gck, 10, "gck")
    cck = _take(cck, 10, "cck")
    plaintext = transform_80_to_128_alt(bytes(g ^ c for g, c in zip(gck, cck)))
    hurdle_key = gck[:6] + bytes(g ^ c for g, c in zip(gck[6:10], cck[:4])) + cck[4:10]
    return enc_cbc(plaintext, hurdle_key)[3:13]


def ta81(unsealed_gck, gck_vn, gck_n, key) -> bytes:
    """Seal a 10-byte GCK with its 2-byte number under a 16-byte key."""
    unsealed_gck = _take(unsealed_gck, 10, "unsealed_gck")
    gck_vn = _take(gck_vn, 2, "gck_vn")
    gck_n = _take(gck_n, 2, "gck_n")
    key = _take(key, 16, "key")
    padded = (
        _with_parity(unsealed_gck[0:4])
        + _with_parity(unsealed_gck[4:8])
        + _with_parity(unsealed_gck[8:10] + gck_n)
        + b"\x00"
    )
    return _steal(enc_cbc(padded, _adjust(key, gck_vn)))


def ta82(sealed_gck, gck_vn, key) -> tuple[bytes, bool, bytes]:
    """Unseal a sealed GCK; returns (GCK, manipulation flag, GCK number)."""
    sealed_gck = _take(sealed_gck, 15, "sealed_gck")
    gck_vn = _take(gck_vn, 2, "gck_vn")
    key = _take(key, 16, "key")
    padded = dec_cts(sealed_gck, _adjust(key, gck_vn))
    unsealed = padded[0:4] + padded[5:9] + padded[10:12]
    mf = _parity_fault(padded, ((10, 14), (5, 9), (0, 4)))
    return unsealed, mf, padded[12:14]


def ta91(unsealed_gsko, gsko_vn, key) -> bytes:
    """Seal a 12-byte GSKO (10-byte key followed by 2-byte number)."""
    unsealed_gsko = _take(unsealed_gsko, 12, "unsealed_gsko")
    return ta81(unsealed_gsko[:10], gsko_vn, unsealed_gsko[10:12], key)


def ta92(sealed_gsko, gsko_vn, key) -> tuple[bytes, bool]:
    """Unseal a sealed GSKO; returns (12-byte GSKO, manipulation flag)."""
    unsealed, mf, number = ta82(sealed_gsko, gsko_vn, key)
    return unsealed + number, mf


# TB primitives

def tb4(dck1, dck2) -> bytes:
    """Combine two 10-byte DCK halves by xor."""
    dck1 = _take(dck1, 10, "dck1")
    dck2 = _take(dck2, 10, "dck2")
    return bytes(a ^ b for a, b in zip(dck1, dck2))


def _mask_key(key: bytes, mask0: int, mask1: int, mask2: int) -> bytes:
    return (
        ((int.from_bytes(key[0:2], "big") ^ mask0) & _MASK16).to_bytes(2, "big")
        + ((int.from_bytes(key[2:6], "big") ^ mask1) & _MASK32).to_bytes(4, "big")
        + ((int.from_bytes(key[6:10], "big") ^ mask2) & _MASK32).to_bytes(4, "big")
    )


def tb5(cn, la, cc, ck) -> bytes:
    """Derive the ECK by xoring CK with [la:14 cn:12 cc:6 cn:12 cc:6 cn:12 cc:6 cn:12]."""
    ck = _take(ck, 10, "ck")
    if not 0 <= cn <= 0xFFF:
        raise ValueError(f"carrier number must fit in 12 bits, got {cn}")
    if not 0 <= la <= 0x3FFF:
        raise ValueError(f"location area must fit in 14 bits, got {la}")
    if not 0 <= cc <= 0x3F:
        raise ValueError(f"colour code must fit in 6 bits, got {cc}")
    mask0 = (la << 2) | (cn >> 10)
    mask1 = (cn << 22) | (cc << 16) | (cn << 4) | (cc >> 2)
    mask2 = (cc << 30) | (cn << 18) | (cc << 12) | cn
    return _mask_key(ck, mask0, mask1, mask2)


def tb6(sck, cn, ssi) -> bytes:
    """Derive the ECK by xoring SCK with [cn:12 ssi:24 cn:12 ssi:24 lsb(ssi):8]."""
    sck = _take(sck, 10, "sck")
    if not 0 <= cn <= 0xFFFF:
        raise ValueError(f"carrier number must fit in 16 bits, got {cn}")
    if not 0 <= ssi <= 0xFFFFFF:
        raise ValueError(f"SSI must fit in 24 bits, got {ssi}")
    mask0 = (cn << 4) | (ssi >> 20)
    mask1 = (ssi << 12) | cn
    mask2 = (ssi << 8) | (ssi & 0xFF)
    return _mask_key(sck, mask0, mask1, mask2)


def tb7(gsko) -> bytes:
    """Expand a 12-byte GSKO to 16 bytes by adding xor parity after every 3 bytes."""
    gsko = _take(gsko, 12, "gsko")
    return b"".join(_with_parity(gsko[i:i + 3]) for i in range(0, 12, 3))
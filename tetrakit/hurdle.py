"""HURDLE: a 64-bit Feistel block cipher with a 128-bit key."""

from __future__ import annotations

BLOCK_SIZE = 8
KEY_SIZE = 16
ROUNDS = 16


def _table(*rows: str) -> bytes:
    data = bytes.fromhex("".join(rows))
    if len(data) != 256:
        raise ValueError("lookup table must hold 256 entries")
    return data


SBOX = _table(
    "F4650100BA7AA74798DD9DAD965DAA3D",
    "58C072D8664C3EE08055DE902A4B83A0",
    "5139ED6C8A2C56604A1FD0706E338B26",
    "2E6F89485E40C3A4A9CF2250E1150CAB",
    "D5F85F3604A64E921E2B883093456716",
    "8C68233861251A8163CBC11341370E97",
    "5BCA57244D17C4B9B3EF8D52322FEC20",
    "D911D12879DAFBE9BB0677DBFCFECD84",
    "1DA1541BB0E4CC7C2D273149F5026953",
    "4F44DF185C0FBC9B94BDDC0BA2C709AC",
    "C69F821C0546C2343C0D3BCEB7BE089C",
    "6BEEE587AFBFF2EB7B0764C5B6AE9A95",
    "35A559129EA3B88E5AF762D23AA87D85",
    "F6C87129D6D743F97876731091190A99",
    "F0E63F14F1E2B186B4F374FA6AB2216D",
    "EAB5E7E3C9D38F0375E8D442FD7EFF7F",
)

# Each round key is the master key rotated left by this many bytes ...
_KEY_ROTATIONS = (0, 5, 10, 15, 4, 7, 14, 3, 8, 13, 2, 9, 12, 1, 6, 11)

# ... xored with these round- and position-specific constants.
_KEY_XOR = _table(
    "00000000000000000000000000000000",
    "3CA7EC257957DFC0380A331EF38CF4F7",
    "6B782C1D7364C133B4FEC4225460D18E",
    "5866DF918793FD9458DBBD758BA0E984",
    "AF5A787DA2EAAA4B98E3B74695536570",
    "4105068F32CF3C777E9F607B8323AE8F",
    "4BD9734502D4FC6EB74B36187CBE3BCB",
    "E85B82923261C7BC8631F8552AFFB1F5",
    "5D6050A348AF8AEAC7BBC6F6A80E66C5",
    "932D06E2C2912968366CF64393DC57BF",
    "AD8E841315A19C53E45D8C8DDE8A1635",
    "6F43B1A9F48955D60DA7BD9AE099556B",
    "95536570AF5A787DA2EAAA4B98E3B746",
    "66DF918793FD9458DBBD758BA0E98458",
    "C133B4FEC4225460D18E6B782C1D7364",
    "1EF38CF4F73CA7EC257957DFC0380A33",
)

# (half-block byte, round-key byte) for each chained s-box lookup in the
# round function; the last eight lookups each contribute one output nibble.
_F_STEPS = (
    (3, 15), (2, 14), (1, 13), (0, 12),
    (3, 11), (1, 10), (2, 9), (0, 8),
    (1, 7), (3, 6), (0, 5), (2, 4),
)
_F_WARMUP = 4


def _xor(a: bytes, b: bytes) -> bytes:
    return bytes(x ^ y for x, y in zip(a, b))


def _check_length(data, length: int, what: str) -> bytes:
    data = bytes(data)
    if len(data) != length:
        raise ValueError(f"{what} must be {length} bytes, got {len(data)}")
    return data


def _round_function(rhs: bytes, round_key: bytes) -> bytes:
    state = 0
    out = [0, 0, 0, 0]
    for step, (r, k) in enumerate(_F_STEPS):
        state = SBOX[((rhs[r] + round_key[k]) ^ state) & 0xFF]
        if step >= _F_WARMUP:
            position = step - _F_WARMUP
            for j in range(4):
                out[j] |= ((state >> (3 - j)) & 1) << position
    return bytes(out)


class Hurdle:
    """A HURDLE cipher instance bound to one 16-byte key."""

    def __init__(self, key):
        key = _check_length(key, KEY_SIZE, "key")
        self.round_keys = bytes(
            key[(rotation + i) % KEY_SIZE] ^ _KEY_XOR[KEY_SIZE * rnd + i]
            for rnd, rotation in enumerate(_KEY_ROTATIONS)
            for i in range(KEY_SIZE)
        )
        self._schedule = tuple(
            self.round_keys[KEY_SIZE * rnd:KEY_SIZE * (rnd + 1)] for rnd in range(ROUNDS)
        )

    def _crypt(self, block, schedule) -> bytes:
        block = _check_length(block, BLOCK_SIZE, "block")
        lhs, rhs = block[:4], block[4:]
        for round_key in schedule:
            lhs, rhs = rhs, _xor(_round_function(rhs, round_key), lhs)
        return rhs + lhs

    def encrypt_block(self, block) -> bytes:
        """Encrypt one 8-byte block."""
        return self._crypt(block, self._schedule)

    def decrypt_block(self, block) -> bytes:
        """Decrypt one 8-byte block."""
        return self._crypt(block, reversed(self._schedule))


def enc_cbc(plaintext, key) -> bytes:
    """Encrypt 16 bytes as two CBC-chained blocks with a zero IV."""
    plaintext = _check_length(plaintext, 2 * BLOCK_SIZE, "plaintext")
    cipher = Hurdle(key)
    first = cipher.encrypt_block(plaintext[:BLOCK_SIZE])
    second = cipher.encrypt_block(_xor(first, plaintext[BLOCK_SIZE:]))
    return first + second


def dec_cts(ciphertext, key) -> bytes:
    """Decrypt 15 bytes produced by CBC encryption with ciphertext stealing."""
    ciphertext = _check_length(ciphertext, 15, "ciphertext")
    cipher = Hurdle(key)
    tail = cipher.decrypt_block(ciphertext[7:15])
    head = ciphertext[:7] + bytes((tail[7],))
    first = cipher.decrypt_block(head)
    second = _xor(tail[:7], ciphertext[:7])
    return first + second
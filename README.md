# tetrakit

Building blocks for processing TETRA downlink bursts and air-interface
encryption, in plain Python with no third-party dependencies.

## Installation

```
pip install .
```

Tests need the `test` extra:

```
pip install .[test]
pytest
```

## Modules

### Ciphers

- `tetrakit.tea1`, `tetrakit.tea2`, `tetrakit.tea3`: the TEA1, TEA2 and TEA3
  keystream generators. `tea1(frame_numbers, key, num_bytes)` (and likewise
  `tea2`, `tea3`) takes a 32-bit IV and a 10-byte key and returns `num_bytes`
  bytes of keystream. `expand_iv` exposes the 64-bit register expansion;
  `tea1.init_key_register` exposes TEA1's 32-bit key compression.
- `tetrakit.hurdle`: the HURDLE 64-bit block cipher. `Hurdle(key)` takes a
  16-byte key and offers `encrypt_block` / `decrypt_block` on 8-byte blocks.
  `enc_cbc(plaintext, key)` encrypts 16 bytes as two CBC-chained blocks with a
  zero IV; `dec_cts(ciphertext, key)` decrypts 15 bytes sealed with
  ciphertext stealing.
- `tetrakit.taa1`: the TAA1 authentication, key derivation and sealing
  primitives and their byte transforms:
  - `ta11_ta41(key, challenge)` and `ta21(key, challenge)` return a 16-byte key.
  - `ta12_ta22(key, rand)` returns `(res, dck)` (4 and 10 bytes).
  - `ta31` / `ta51` / `ta81` / `ta91` seal keys into 15 bytes; `ta32` returns
    `(cck, manipulated)`, `ta52` returns `(key, manipulated, key_n)`, `ta82`
    returns `(gck, manipulated, gck_n)`, `ta92` returns `(gsko, manipulated)`.
  - `ta71(gck, cck)` derives a 10-byte MGCK.
  - `tb4`, `tb5(cn, la, cc, ck)`, `tb6(sck, cn, ssi)` and `tb7(gsko)`.
  - `transform_80_to_120`, `transform_80_to_128`, `transform_80_to_120_alt`,
    `transform_80_to_128_alt`, `transform_88_to_120`, `transform_120_to_88`,
    `transform_120_to_80_alt`.

  Inputs of the wrong length or out-of-range numbers raise `ValueError`.

### Key management and decryption

`tetrakit.crypto` holds:

- `KeyType`, `KsgType`, `SecurityClass` and their display names
  (`key_type_name`, `ksg_type_name`, `security_class_name`).
- `TdmaTime(hn, mn, fn, tn)` and `tea_build_iv(tm, hn, direction)`, which
  builds the TEA IV (direction 0 downlink, 1 uplink) and raises `ValueError`
  for out-of-range times.
- `KeyStore`, with `KeyStore.load(path)` and `KeyStore.parse(lines)`,
  `get_network_info(mcc, mnc)` and `get_key_by_addr(mcc, mnc, addr, key_type)`.
  Malformed lines, or a key whose network is not defined, raise
  `KeystoreError` (a `ValueError`).
- `NetworkInfo` and `Key`, each with a `dump()` text summary.
- `CryptoState`, holding the current network, CCK and cell parameters
  (`mcc`, `mnc`, `cck_id`, `hn`, `la`, `cn`, `cc`). `update_current_network`
  and `update_current_cck` select the network and its CCK/SCK;
  `get_ksg_key(addr)` returns the key to use. `generate_keystream(key,
  tdma_time, num_bits)` returns a list of bits; `decrypt_mac_element(key,
  bits, tdma_time, second_half_slot)` and `decrypt_voice_timeslot(tdma_time,
  type1_block)` return decrypted bit lists. Each returns `None` when the key,
  cell parameters or keystream generator needed are not available. Keystream
  is produced for TEA1, TEA2 and TEA3 networks only.

The key store is a text file with one definition per line; empty lines and
lines starting with `#` are skipped:

```
network mcc 901 mnc 9999 ksg_type 1 security_class 2
key mcc 901 mnc 9999 addr 0 key_type 1 key_num 1 key 00000000000000000000
```

`ksg_type` takes the `KsgType` values (1 = TEA1), `key_type` the `KeyType`
values (1 = CCK/SCK), and `key` is ten hex bytes.

### Channel coding

- `tetrakit.crc`: CRC16-ITU-T. `crc16_itut_bytes(crc, data, number_bits)`
  works on packed bytes, high bit first; `crc16_itut_bits(crc, bits)` and
  `crc16_itut_poly(crc, poly, bits)` on one bit per item;
  `crc16_ccitt_bits(bits)` starts from 0xFFFF.
- `tetrakit.scramble`: the scrambling LFSR. `scrambling_init(mcc, mnc,
  colour)` gives a cell's initial value (`SCRAMB_INIT` is the one for the
  synchronisation burst), `scrambling_bits(lfsr_init, length)` the sequence,
  and `scramble(lfsr_init, bits)` xors it in; applying it twice restores the
  input.
- `tetrakit.interleave`: `block_interleave(k, a, data)` and
  `block_deinterleave(k, a, data)`.
- `tetrakit.rm3014`: the shortened (30,14) Reed-Muller code.
  `rm3014_compute(value)` encodes 14 bits; `rm3014_decode(codeword)` returns
  the upper data bits without checking or correcting them.
- `tetrakit.tch_reordering`: `acelp_type2_to_codec(bits)` and
  `acelp_codec_to_type2(bits)` reorder 274 bits between channel order and two
  137-bit speech codec frames.
- `tetrakit.conv_enc`: `ConvEncoder` (rate 1/4 mother code, `encode` and
  `reset`), the `Puncturer` rates, `puncture(puncturer, mother, length)`,
  `depuncture(puncturer, bits, mother_length, fill=0xFF)` and
  `punct_self_test()`, which checks every channel configuration and returns
  how many it checked.
- `tetrakit.viterbi`: `ConvCode` with the `CONV_CCH` and `CONV_TCH` codes,
  `conv_decode(code, soft, length)`, `conv_cch_decode`, `conv_tch_decode`
  (soft values: +127 for 0, -127 for 1, 0 for an erasure) and
  `viterbi_dec_sb1(symbols, sym_count)` for depunctured hard bits, where 0xFF
  marks a punctured position.

## Examples

Generate TEA1 keystream for a frame:

```python
from tetrakit.tea1 import tea1

keystream = tea1(0x12345678, bytes(10), 16)
```

Take a synchronisation block's 120 received bits back to type-2 bits:

```python
from tetrakit.scramble import SCRAMB_INIT, scramble
from tetrakit.interleave import block_deinterleave
from tetrakit.conv_enc import Puncturer, depuncture
from tetrakit.viterbi import viterbi_dec_sb1

received_bits = [0] * 120
type4 = scramble(SCRAMB_INIT, received_bits)
type3 = block_deinterleave(120, 11, type4)
mother = depuncture(Puncturer.RATE_2_3, type3, 80 * 4)
type2 = viterbi_dec_sb1(mother, 80)
```

Load a key store and set up crypto state for a cell:

```python
from tetrakit.crypto import KeyStore, CryptoState

store = KeyStore.load("keys.txt")
state = CryptoState(store)
state.update_current_network(901, 9999)
```

## What it does not do

tetrakit offers the processing steps, not a receiver. It has no
demodulator, burst synchroniser or upper MAC layer, no speech decoder for
the ACELP frames it reorders, and no command-line tool.
`CryptoState.decrypt_identity` always returns `False`: encrypted identities
are not decrypted. Keystream generation covers TEA1, TEA2 and TEA3 only.
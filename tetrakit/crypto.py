"""Key management, keystream generation and decryption helpers for TETRA air encryption."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from pathlib import Path
from typing import Iterable, Optional, Sequence

from tetrakit.taa1 import tb5
from tetrakit.tea1 import tea1
from tetrakit.tea2 import tea2
from tetrakit.tea3 import tea3


class KeystoreError(ValueError):
    """Raised when a keystore description cannot be parsed or is inconsistent."""


class KeyType(IntFlag):
    UNDEFINED = 0
    CCK_SCK = 1  # SCK in class 2, CCK in class 3 networks
    DCK = 2
    MGCK = 4
    GCK = 8


class KsgType(IntEnum):
    UNKNOWN = 0
    TEA1 = 1
    TEA2 = 2
    TEA3 = 3
    TEA4 = 4
    TEA5 = 5
    TEA6 = 6
    TEA7 = 7
    PROPRIETARY = 8


class SecurityClass(IntEnum):
    UNDEFINED = 0
    CLASS_1 = 1
    CLASS_2 = 2
    CLASS_3 = 3


_KEY_TYPE_NAMES = {
    KeyType.UNDEFINED: "UNDEFINED",
    KeyType.CCK_SCK: "CCK/SCK",
    KeyType.DCK: "DCK",
    KeyType.MGCK: "MGCK",
    KeyType.GCK: "GCK",
}

_SECURITY_CLASS_NAMES = {
    SecurityClass.UNDEFINED: "CLASS_UNDEFINED",
    SecurityClass.CLASS_1: "CLASS_1",
    SecurityClass.CLASS_2: "CLASS_2",
    SecurityClass.CLASS_3: "CLASS_3",
}


def _unknown(value: int) -> str:
    return f"unknown 0x{value & 0xFFFFFFFF:x}"


def key_type_name(key_type: int) -> str:
    """Return the display name of a key type."""
    return _KEY_TYPE_NAMES.get(int(key_type), _unknown(int(key_type)))


def ksg_type_name(ksg_type: int) -> str:
    """Return the display name of a keystream generator type."""
    value = int(ksg_type)
    if value >= KsgType.PROPRIETARY:
        return "PROPRIETARY"
    if value >= 0:
        return KsgType(value).name
    return _unknown(value)


def security_class_name(security_class: int) -> str:
    """Return the display name of a network security class."""
    return _SECURITY_CLASS_NAMES.get(int(security_class), _unknown(int(security_class)))


@dataclass
class TdmaTime:
    """Position in the TDMA structure: hyperframe, multiframe, frame and timeslot."""

    hn: int = 0
    mn: int = 1
    fn: int = 1
    tn: int = 1


def tea_build_iv(tm: TdmaTime, hn: int, direction: int) -> int:
    """Build the 29-bit TEA initialisation value; direction 0 is downlink, 1 uplink."""
    if not 1 <= tm.tn <= 4:
        raise ValueError(f"timeslot number out of range: {tm.tn}")
    if not 1 <= tm.fn <= 18:
        raise ValueError(f"frame number out of range: {tm.fn}")
    if not 1 <= tm.mn <= 60:
        raise ValueError(f"multiframe number out of range: {tm.mn}")
    if not 0 <= tm.hn <= 0xFFFF:
        raise ValueError(f"hyperframe number out of range: {tm.hn}")
    if direction not in (0, 1):
        raise ValueError(f"direction must be 0 or 1, got {direction}")
    return (tm.tn - 1) | (tm.fn << 2) | (tm.mn << 7) | ((hn & 0x7FFF) << 13) | (direction << 28)


@dataclass
class NetworkInfo:
    """Per-network crypto configuration from the keystore."""

    mcc: int
    mnc: int
    ksg_type: int
    security_class: int

    def dump(self) -> str:
        return (
            f"MCC {self.mcc:4d} MNC {self.mnc:4d} "
            f"ksg_type {int(self.ksg_type)} security_class {int(self.security_class)}"
        )


@dataclass
class Key:
    """A key loaded from the keystore."""

    index: int
    mcc: int
    mnc: int
    key_type: int
    key_num: int
    addr: int
    key: bytes
    network_info: Optional[NetworkInfo] = None

    def dump(self) -> str:
        text = f"MCC {self.mcc:4d} MNC {self.mnc:4d} key_type {key_type_name(self.key_type)}"
        if self.key_type & (KeyType.DCK | KeyType.MGCK):
            text += f" addr: {self.addr:8d}"
        if self.key_type & KeyType.CCK_SCK:
            text += f" key_num: {self.key_num:4d}"
        return text + ": " + self.key[:10].hex().upper()


_INT = r"\s*([+-]?\d+)"
_HEX = r"\s*([0-9A-Fa-f]{1,2})"
_NETWORK_RE = re.compile(
    r"network\s*mcc" + _INT + r"\s*mnc" + _INT + r"\s*ksg_type" + _INT
    + r"\s*security_class" + _INT
)
_KEY_RE = re.compile(
    r"key\s*mcc" + _INT + r"\s*mnc" + _INT + r"\s*addr" + _INT + r"\s*key_type" + _INT
    + r"\s*key_num" + _INT + r"\s*key" + _HEX * 10
)


class KeyStore:
    """Networks and keys known to the decoder.

    Keystore lines look like::

        network mcc 123 mnc 456 ksg_type 1 security_class 2
        key mcc 123 mnc 456 addr 0 key_type 1 key_num 2 key 00112233445566778899

    Lines starting with ``#`` and empty lines are ignored.
    """

    def __init__(self):
        self.networks: list[NetworkInfo] = []
        self.keys: list[Key] = []

    @classmethod
    def load(cls, path) -> "KeyStore":
        """Read a keystore file."""
        with Path(path).open("r") as handle:
            return cls.parse(handle)

    @classmethod
    def parse(cls, lines: Iterable[str]) -> "KeyStore":
        """Build a keystore from keystore lines."""
        store = cls()
        for line in lines:
            content = line.rstrip("\r\n")
            if not content or content.startswith("#"):
                continue
            if content.startswith("network "):
                match = _NETWORK_RE.match(content)
                if not match:
                    raise KeystoreError(
                        f"failed to parse network info element {len(store.networks)} [{content}]"
                    )
                mcc, mnc, ksg, sec = (int(g) for g in match.groups())
                store.networks.append(NetworkInfo(mcc, mnc, ksg, sec))
            elif content.startswith("key "):
                match = _KEY_RE.match(content)
                if not match:
                    raise KeystoreError(f"failed to parse key {len(store.keys)} [{content}]")
                groups = match.groups()
                mcc, mnc, addr, key_type, key_num = (int(g) for g in groups[:5])
                key_bytes = bytes(int(g, 16) for g in groups[5:])
                store.keys.append(
                    Key(len(store.keys), mcc, mnc, key_type, key_num, addr, key_bytes)
                )
            else:
                raise KeystoreError(f"could not parse line: {content}")

        for key in store.keys:
            network = store.get_network_info(key.mcc, key.mnc)
            if network is None:
                raise KeystoreError(
                    f"required network info is missing for MCC {key.mcc} MNC {key.mnc}"
                )
            key.network_info = network
        return store

    def get_network_info(self, mcc: int, mnc: int) -> Optional[NetworkInfo]:
        return next((n for n in self.networks if n.mcc == mcc and n.mnc == mnc), None)

    def get_key_by_addr(self, mcc: int, mnc: int, addr: int, key_type: int) -> Optional[Key]:
        return next(
            (
                k for k in self.keys
                if k.mnc == mnc and k.mcc == mcc and k.addr == addr and k.key_type & key_type
            ),
            None,
        )


_KSG_FUNCTIONS = {
    KsgType.TEA1: tea1,
    KsgType.TEA2: tea2,
    KsgType.TEA3: tea3,
}

_SECOND_HALF_SLOT_SKIP = 216
_VOICE_HALF_BITS = 137


@dataclass
class CryptoState:
    """Per-receiver crypto state: current network, CCK and cell parameters for TB5."""

    keystore: KeyStore = field(default_factory=KeyStore)
    mnc: int = -1
    mcc: int = -1
    cck_id: int = -1
    hn: int = -1
    la: int = -1
    cn: int = 0
    cc: int = -1
    network: Optional[NetworkInfo] = None
    cck: Optional[Key] = None

    def _cell_known(self) -> bool:
        return self.cn >= 0 and self.la >= 0 and self.cc >= 0

    def update_current_network(self, mcc: int, mnc: int) -> None:
        """Switch to a new network and reselect its CCK/SCK."""
        self.mcc = mcc
        self.mnc = mnc
        self.network = self.keystore.get_network_info(mcc, mnc)
        self.update_current_cck()

    def update_current_cck(self) -> None:
        """Select the CCK/SCK matching the current network and cck_id."""
        self.cck = next(
            (
                k for k in self.keystore.keys
                if k.mcc == self.mcc and k.mnc == self.mnc and k.key_num == self.cck_id
                and k.key_type == KeyType.CCK_SCK
            ),
            None,
        )

    def get_ksg_key(self, addr: int) -> Optional[Key]:
        """Return the key to use for traffic to ``addr``, if any."""
        if self.network is None:
            return None
        return self.cck

    def generate_keystream(self, key: Optional[Key], tdma_time: TdmaTime,
                           num_bits: int) -> Optional[list[int]]:
        """Generate ``num_bits`` keystream bits, or None when that is not possible."""
        if key is None:
            return None
        iv = tea_build_iv(tdma_time, self.hn, 0)
        if not self._cell_known():
            return None
        eck = tb5(self.cn & 0xFFFF, self.la & 0xFFFF, self.cc & 0xFF, key.key[:10])
        if key.network_info is None:
            return None
        ksg = _KSG_FUNCTIONS.get(key.network_info.ksg_type)
        if ksg is None:
            return None
        ks_bytes = ksg(iv, eck, (num_bits + 7) // 8)
        return [(ks_bytes[i // 8] >> (7 - i % 8)) & 1 for i in range(num_bits)]

    def decrypt_identity(self, addr) -> bool:
        """Identity decryption (TA61) is not supported; always returns False."""
        return False

    def decrypt_mac_element(self, key: Optional[Key], bits: Sequence[int], tdma_time: TdmaTime,
                            second_half_slot: bool) -> Optional[list[int]]:
        """Decrypt the ciphertext bits of a MAC element; None if it cannot be done."""
        if key is None or len(bits) <= 0 or not self._cell_known():
            return None
        skip = _SECOND_HALF_SLOT_SKIP if second_half_slot else 0
        ks = self.generate_keystream(key, tdma_time, skip + len(bits))
        if ks is None:
            return None
        return [b ^ k for b, k in zip(bits, ks[skip:])]

    def decrypt_voice_timeslot(self, tdma_time: TdmaTime,
                               type1_block: Sequence[int]) -> Optional[list[int]]:
        """Decrypt both speech halves of a 276-entry type-1 block; None if not possible."""
        if len(type1_block) < 2 * (_VOICE_HALF_BITS + 1):
            raise ValueError("type-1 voice block must hold at least 276 entries")
        key = self.cck
        if key is None or not self._cell_known():
            return None
        ks = self.generate_keystream(key, tdma_time, 2 * _VOICE_HALF_BITS)
        if ks is None:
            return None
        out = list(type1_block)
        for i in range(_VOICE_HALF_BITS):
            out[i + 1] ^= ks[i]
            out[i + 139] ^= ks[i + _VOICE_HALF_BITS]
        return out
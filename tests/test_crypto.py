import pytest

from tetrakit.crypto import (
    CryptoState,
    KeyStore,
    KeystoreError,
    KeyType,
    KsgType,
    SecurityClass,
    TdmaTime,
    key_type_name,
    ksg_type_name,
    security_class_name,
    tea_build_iv,
)

KEYSTORE_LINES = [
    "# sample keystore\n",
    "\n",
    "network mcc 901 mnc 9999 ksg_type 1 security_class 2\n",
    "network mcc 901 mnc 9998 ksg_type 4 security_class 3\n",
    "key mcc 901 mnc 9999 addr 0 key_type 1 key_num 2 key 00112233445566778899\n",
    "key mcc 901 mnc 9998 addr 7 key_type 2 key_num 2 key 99887766554433221100\n",
]


@pytest.fixture
def store():
    return KeyStore.parse(KEYSTORE_LINES)


@pytest.fixture
def state(store):
    st = CryptoState(keystore=store, cck_id=2, hn=5, la=2, cn=1, cc=3)
    st.update_current_network(901, 9999)
    return st


def test_names():
    assert key_type_name(KeyType.CCK_SCK) == "CCK/SCK"
    assert key_type_name(KeyType.DCK) == "DCK"
    assert ksg_type_name(KsgType.TEA2) == "TEA2"
    assert ksg_type_name(12) == "PROPRIETARY"
    assert security_class_name(SecurityClass.CLASS_3) == "CLASS_3"


def test_parse_keystore(store):
    assert len(store.networks) == 2
    assert len(store.keys) == 2
    assert store.keys[0].key == bytes.fromhex("00112233445566778899")
    assert [k.index for k in store.keys] == [0, 1]
    assert store.keys[1].network_info is store.networks[1]
    assert store.get_network_info(901, 9999) is store.networks[0]
    assert store.get_network_info(1, 1) is None


def test_load_from_file(tmp_path):
    path = tmp_path / "keys.txt"
    path.write_text("".join(KEYSTORE_LINES))
    loaded = KeyStore.load(path)
    assert [k.key for k in loaded.keys] == [k.key for k in KeyStore.parse(KEYSTORE_LINES).keys]


def test_get_key_by_addr(store):
    assert store.get_key_by_addr(901, 9998, 7, KeyType.DCK) is store.keys[1]
    assert store.get_key_by_addr(901, 9998, 7, KeyType.CCK_SCK) is None
    assert store.get_key_by_addr(901, 9999, 0, KeyType.CCK_SCK | KeyType.DCK) is store.keys[0]


@pytest.mark.parametrize("line", [
    "bogus line\n",
    "network mcc 1 mnc x ksg_type 1 security_class 2\n",
    "key mcc 1 mnc 2 addr 0 key_type 1 key_num 2 key zz\n",
])
def test_parse_errors(line):
    with pytest.raises(KeystoreError):
        KeyStore.parse([line])


def test_missing_network_for_key():
    with pytest.raises(KeystoreError):
        KeyStore.parse(["key mcc 1 mnc 2 addr 0 key_type 1 key_num 2 key 00112233445566778899\n"])


def test_dumps(store):
    assert store.networks[0].dump() == "MCC  901 MNC 9999 ksg_type 1 security_class 2"
    assert store.keys[0].dump().endswith(": 00112233445566778899")
    assert "key_num:    2" in store.keys[0].dump()
    assert "addr:        7" in store.keys[1].dump()


def test_tea_build_iv_fields():
    base = TdmaTime(hn=0, mn=1, fn=1, tn=1)
    iv = tea_build_iv(base, 0, 0)
    assert tea_build_iv(base, 0, 1) == iv | (1 << 28)
    assert tea_build_iv(TdmaTime(hn=0, mn=1, fn=1, tn=4), 0, 0) == iv | 3
    assert tea_build_iv(base, 0x8001, 0) == iv | (1 << 13)


@pytest.mark.parametrize("tm,direction", [
    (TdmaTime(tn=0), 0),
    (TdmaTime(fn=19), 0),
    (TdmaTime(mn=61), 0),
    (TdmaTime(hn=0x10000), 0),
    (TdmaTime(), 2),
])
def test_tea_build_iv_range_errors(tm, direction):
    with pytest.raises(ValueError):
        tea_build_iv(tm, 0, direction)


def test_network_and_cck_selection(state, store):
    assert state.network is store.networks[0]
    assert state.cck is store.keys[0]
    assert state.get_ksg_key(1234) is store.keys[0]
    state.update_current_network(1, 1)
    assert state.network is None
    assert state.cck is None
    assert state.get_ksg_key(1234) is None


def test_keystream_bits(state):
    ks = state.generate_keystream(state.cck, TdmaTime(hn=5, mn=3, fn=4, tn=2), 20)
    assert len(ks) == 20
    assert set(ks) <= {0, 1}
    longer = state.generate_keystream(state.cck, TdmaTime(hn=5, mn=3, fn=4, tn=2), 40)
    assert longer[:20] == ks


def test_keystream_unavailable(state, store):
    t = TdmaTime()
    assert state.generate_keystream(None, t, 8) is None
    assert state.generate_keystream(store.keys[1], t, 8) is None  # TEA4 unsupported
    state.la = -1
    assert state.generate_keystream(state.cck, t, 8) is None


def test_decrypt_mac_element_roundtrip(state):
    t = TdmaTime(hn=5, mn=2, fn=7, tn=3)
    bits = [1, 0, 1, 1, 0, 0, 1, 0, 1, 1]
    enc = state.decrypt_mac_element(state.cck, bits, t, False)
    assert state.decrypt_mac_element(state.cck, enc, t, False) == bits


def test_decrypt_mac_element_second_half(state):
    t = TdmaTime(hn=5, mn=2, fn=7, tn=3)
    bits = [0] * 12
    ks = state.generate_keystream(state.cck, t, 216 + 12)
    assert state.decrypt_mac_element(state.cck, bits, t, True) == ks[216:]
    assert state.decrypt_mac_element(state.cck, bits, t, False) == ks[:12]


def test_decrypt_mac_element_refused(state):
    t = TdmaTime()
    assert state.decrypt_mac_element(None, [1], t, False) is None
    assert state.decrypt_mac_element(state.cck, [], t, False) is None


def test_decrypt_voice_timeslot(state):
    t = TdmaTime(hn=5, mn=9, fn=2, tn=1)
    block = [0] * 276
    out = state.decrypt_voice_timeslot(t, block)
    ks = state.generate_keystream(state.cck, t, 274)
    assert out[0] == 0 and out[138] == 0
    assert out[1:138] == ks[:137]
    assert out[139:276] == ks[137:]
    assert state.decrypt_voice_timeslot(t, out) == block


def test_decrypt_voice_timeslot_errors(state):
    with pytest.raises(ValueError):
        state.decrypt_voice_timeslot(TdmaTime(), [0] * 10)
    state.cck = None
    assert state.decrypt_voice_timeslot(TdmaTime(), [0] * 276) is None


def test_decrypt_identity_unsupported(state):
    assert state.decrypt_identity(1234) is False
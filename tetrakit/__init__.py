"""TETRA air-interface primitives: TEA ciphers, HURDLE/TAA1, key store and channel coding."""

__version__ = "0.1.0"

__all__ = [
    "conv_enc",
    "crc",
    "crypto",
    "hurdle",
    "interleave",
    "rm3014",
    "scramble",
    "taa1",
    "tch_reordering",
    "tea1",
    "tea2",
    "tea3",
    "viterbi",
]
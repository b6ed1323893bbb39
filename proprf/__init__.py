"""Mersenne-61 and 384-bit field arithmetic, GF(2^128), Keccak-p[1600] and authenticated-share helpers."""

__version__ = "0.1.0"

__all__ = [
    "auth_helper",
    "channel",
    "edabits",
    "field61",
    "gf128",
    "keccak4x",
    "keccak_f",
    "oprf_fp",
    "ram_trace",
]
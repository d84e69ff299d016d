"""CityHash64 (v1.1) and the seeded hash used for stable, consistent keys."""

from __future__ import annotations

from typing import Union

BytesLike = Union[bytes, bytearray, memoryview, str]

_MASK = (1 << 64) - 1
_MASK32 = (1 << 32) - 1
_K0 = 0xC3A5C85C97CB3127
_K1 = 0xB492B66FBE98F273
_K2 = 0x9AE16A3B2F90404F
_KMUL = 0x9DDFEA08EB382D69

CITY_SEED_1 = 7_000_993_739_526_508_814


def _as_bytes(data: BytesLike) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"cannot hash object of type {type(data).__name__!r}")


def _fetch64(s: bytes, i: int) -> int:
    return int.from_bytes(s[i : i + 8], "little")


def _fetch32(s: bytes, i: int) -> int:
    return int.from_bytes(s[i : i + 4], "little")


def _rotate(value: int, shift: int) -> int:
    if shift == 0:
        return value
    return ((value >> shift) | (value << (64 - shift))) & _MASK


def _shift_mix(value: int) -> int:
    return value ^ (value >> 47)


def _bswap64(value: int) -> int:
    return int.from_bytes(value.to_bytes(8, "little"), "big")


def _hash_len16(u: int, v: int, mul: int = _KMUL) -> int:
    a = ((u ^ v) * mul) & _MASK
    a ^= a >> 47
    b = ((v ^ a) * mul) & _MASK
    b ^= b >> 47
    return (b * mul) & _MASK


def _hash_len0to16(s: bytes) -> int:
    n = len(s)
    if n >= 8:
        mul = (_K2 + n * 2) & _MASK
        a = (_fetch64(s, 0) + _K2) & _MASK
        b = _fetch64(s, n - 8)
        c = (_rotate(b, 37) * mul + a) & _MASK
        d = ((_rotate(a, 25) + b) * mul) & _MASK
        return _hash_len16(c, d, mul)
    if n >= 4:
        mul = (_K2 + n * 2) & _MASK
        a = _fetch32(s, 0)
        return _hash_len16((n + (a << 3)) & _MASK, _fetch32(s, n - 4), mul)
    if n > 0:
        a, b, c = s[0], s[n >> 1], s[n - 1]
        y = (a + (b << 8)) & _MASK32
        z = (n + (c << 2)) & _MASK32
        return (_shift_mix(((y * _K2) ^ (z * _K0)) & _MASK) * _K2) & _MASK
    return _K2


def _hash_len17to32(s: bytes) -> int:
    n = len(s)
    mul = (_K2 + n * 2) & _MASK
    a = (_fetch64(s, 0) * _K1) & _MASK
    b = _fetch64(s, 8)
    c = (_fetch64(s, n - 8) * mul) & _MASK
    d = (_fetch64(s, n - 16) * _K2) & _MASK
    return _hash_len16(
        (_rotate((a + b) & _MASK, 43) + _rotate(c, 30) + d) & _MASK,
        (a + _rotate((b + _K2) & _MASK, 18) + c) & _MASK,
        mul,
    )


def _hash_len33to64(s: bytes) -> int:
    n = len(s)
    mul = (_K2 + n * 2) & _MASK
    a = (_fetch64(s, 0) * _K2) & _MASK
    b = _fetch64(s, 8)
    c = _fetch64(s, n - 24)
    d = _fetch64(s, n - 32)
    e = (_fetch64(s, 16) * _K2) & _MASK
    f = (_fetch64(s, 24) * 9) & _MASK
    g = _fetch64(s, n - 8)
    h = (_fetch64(s, n - 16) * mul) & _MASK
    u = (_rotate((a + g) & _MASK, 43) + (_rotate(b, 30) + c) * 9) & _MASK
    v = ((((a + g) & _MASK) ^ d) + f + 1) & _MASK
    w = (_bswap64(((u + v) * mul) & _MASK) + h) & _MASK
    x = (_rotate((e + f) & _MASK, 42) + c) & _MASK
    y = ((_bswap64(((v + w) * mul) & _MASK) + g) * mul) & _MASK
    z = (e + f + c) & _MASK
    a = (_bswap64(((x + z) * mul + y) & _MASK) + b) & _MASK
    b = (_shift_mix(((z + a) * mul + d + h) & _MASK) * mul) & _MASK
    return (b + x) & _MASK


def _weak_hash_len32_with_seeds(s: bytes, i: int, a: int, b: int) -> tuple[int, int]:
    w = _fetch64(s, i)
    x = _fetch64(s, i + 8)
    y = _fetch64(s, i + 16)
    z = _fetch64(s, i + 24)
    a = (a + w) & _MASK
    b = _rotate((b + a + z) & _MASK, 21)
    c = a
    a = (a + x + y) & _MASK
    b = (b + _rotate(a, 44)) & _MASK
    return (a + z) & _MASK, (b + c) & _MASK


def city_hash64(data: BytesLike) -> int:
    """Return the 64-bit CityHash of ``data`` (strings are hashed as UTF-8)."""
    s = _as_bytes(data)
    n = len(s)
    if n <= 16:
        return _hash_len0to16(s)
    if n <= 32:
        return _hash_len17to32(s)
    if n <= 64:
        return _hash_len33to64(s)

    x = _fetch64(s, n - 40)
    y = (_fetch64(s, n - 16) + _fetch64(s, n - 56)) & _MASK
    z = _hash_len16((_fetch64(s, n - 48) + n) & _MASK, _fetch64(s, n - 24))
    v = _weak_hash_len32_with_seeds(s, n - 64, n, z)
    w = _weak_hash_len32_with_seeds(s, n - 32, (y + _K1) & _MASK, x)
    x = (x * _K1 + _fetch64(s, 0)) & _MASK

    for pos in range(0, (n - 1) & ~63, 64):
        x = (_rotate((x + y + v[0] + _fetch64(s, pos + 8)) & _MASK, 37) * _K1) & _MASK
        y = (_rotate((y + v[1] + _fetch64(s, pos + 48)) & _MASK, 42) * _K1) & _MASK
        x ^= w[1]
        y = (y + v[0] + _fetch64(s, pos + 40)) & _MASK
        z = (_rotate((z + w[0]) & _MASK, 33) * _K1) & _MASK
        v = _weak_hash_len32_with_seeds(s, pos, (v[1] * _K1) & _MASK, (x + w[0]) & _MASK)
        w = _weak_hash_len32_with_seeds(
            s, pos + 32, (z + w[1]) & _MASK, (y + _fetch64(s, pos + 16)) & _MASK
        )
        x, z = z, x

    return _hash_len16(
        (_hash_len16(v[0], w[0]) + _shift_mix(y) * _K1 + z) & _MASK,
        (_hash_len16(v[1], w[1]) + x) & _MASK,
    )


def city_hash64_with_seed(data: BytesLike, seed: int) -> int:
    """Return the 64-bit CityHash of ``data`` mixed with a 64-bit ``seed``."""
    if not 0 <= seed <= _MASK:
        raise ValueError("seed must be an unsigned 64-bit integer")
    return _hash_len16((city_hash64(data) - _K2) & _MASK, seed)


def consistent_hash(data: BytesLike) -> int:
    """Hash ``data`` with the fixed seed so results are stable across runs."""
    return city_hash64_with_seed(data, CITY_SEED_1)
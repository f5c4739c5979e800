"""Lowercase name hashes written ahead of the name table.

The reference toolchain hashes each name with CityHash64 (v1.1) over the
ASCII-lowercased UTF-8 bytes. The hashes are derived data: they are skipped
on read and recomputed on every write.
"""

from __future__ import annotations

from cityhash import CityHash64

__all__ = ["city_hash64", "name_hash"]

_ASCII_LOWER = bytes.maketrans(
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZ", b"abcdefghijklmnopqrstuvwxyz"
)


def city_hash64(data: bytes) -> int:
    return CityHash64(bytes(data)) & 0xFFFFFFFFFFFFFFFF


def name_hash(name: str) -> int:
    return city_hash64(name.encode("utf-8").translate(_ASCII_LOWER))

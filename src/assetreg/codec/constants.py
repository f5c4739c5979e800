"""Binary layout constants for the asset registry format."""

from __future__ import annotations

# Store framing sentinels (little-endian u32 on the wire)
STORE_MAGIC_START = 0x12345679
STORE_MAGIC_END = 0x87654321

GUID_SIZE = 16

# NameIndexFlagged: high bit of the first word marks a trailing instance number
NAME_NUMBERED_BIT = 0x80000000
NAME_INDEX_MASK = 0x7FFFFFFF

# ValueId packing: 3-bit type in the low bits, 29-bit index above it
VALUE_TYPE_BITS = 3
VALUE_TYPE_MASK = (1 << VALUE_TYPE_BITS) - 1
VALUE_INDEX_BITS = 32 - VALUE_TYPE_BITS
VALUE_INDEX_LIMIT = 1 << VALUE_INDEX_BITS

# MapHandle packing (u64)
MAP_NUMBERLESS_BIT = 1 << 63
MAP_NUM_SHIFT = 32
MAP_NUM_LIMIT = 1 << 16
MAP_BEGIN_MASK = 0xFFFFFFFF

U16_MAX = 0xFFFF
U32_MAX = 0xFFFFFFFF
U64_MAX = 0xFFFFFFFFFFFFFFFF

# Name table entries carry a u16 big-endian byte length
NAME_MAX_BYTES = U16_MAX

# Suffixes that mark a compiled blueprint class export
BLUEPRINT_ASSET_SUFFIX = "_C"
BLUEPRINT_CLASS_SUFFIX = "GeneratedClass"

PACKAGE_EXTENSIONS = (".uasset", ".umap")

__all__ = [
    "STORE_MAGIC_START",
    "STORE_MAGIC_END",
    "GUID_SIZE",
    "NAME_NUMBERED_BIT",
    "NAME_INDEX_MASK",
    "VALUE_TYPE_BITS",
    "VALUE_TYPE_MASK",
    "VALUE_INDEX_BITS",
    "VALUE_INDEX_LIMIT",
    "MAP_NUMBERLESS_BIT",
    "MAP_NUM_SHIFT",
    "MAP_NUM_LIMIT",
    "MAP_BEGIN_MASK",
    "U16_MAX",
    "U32_MAX",
    "U64_MAX",
    "NAME_MAX_BYTES",
    "BLUEPRINT_ASSET_SUFFIX",
    "BLUEPRINT_CLASS_SUFFIX",
    "PACKAGE_EXTENSIONS",
]

"""Fixed-width and bit-packed value types of the registry format.

Every type exposes ``read(reader)`` as a classmethod and ``write(writer)``.
Bit layouts live here and nowhere else: code consuming pairs works with
:class:`ValueType` / :class:`ValueId` and never sees packed words.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from .constants import (
    GUID_SIZE,
    NAME_NUMBERED_BIT,
    NAME_INDEX_MASK,
    VALUE_TYPE_BITS,
    VALUE_TYPE_MASK,
    VALUE_INDEX_LIMIT,
    MAP_NUMBERLESS_BIT,
    MAP_NUM_SHIFT,
    MAP_NUM_LIMIT,
    MAP_BEGIN_MASK,
    U32_MAX,
)
from .errors import InvalidTypeTag, E_INVALID_TYPE_TAG
from .stream import RegistryReader, RegistryWriter

__all__ = [
    "NULL_GUID",
    "read_guid",
    "write_guid",
    "NameIndex",
    "NameIndexFlagged",
    "ExportPath",
    "ValueType",
    "ValueId",
    "Pair",
    "MapHandle",
]

NULL_GUID = b"\x00" * GUID_SIZE


def read_guid(reader: RegistryReader) -> bytes:
    return reader.read_exact(GUID_SIZE, "guid")


def write_guid(writer: RegistryWriter, guid: bytes) -> None:
    if len(guid) != GUID_SIZE:
        raise ValueError(f"Guid must be {GUID_SIZE} bytes, got {len(guid)}")
    writer.write_bytes(bytes(guid), "guid")


@dataclass(frozen=True, slots=True)
class NameIndex:
    index: int

    @classmethod
    def read(cls, reader: RegistryReader) -> "NameIndex":
        return cls(reader.u32("name index"))

    def write(self, writer: RegistryWriter) -> None:
        writer.u32(self.index, "name index")


@dataclass(frozen=True, slots=True)
class NameIndexFlagged:
    """Name index with an optional instance number.

    On the wire the high bit of the index word says whether a second u32
    (the instance number) follows. ``number is None`` means no number was
    stored, which is distinct from an explicit number of zero.
    """

    index: int
    number: Optional[int] = None

    def __post_init__(self) -> None:
        if not 0 <= self.index <= NAME_INDEX_MASK:
            raise ValueError(f"Name index out of range: {self.index}")
        if self.number is not None and not 0 <= self.number <= U32_MAX:
            raise ValueError(f"Name number out of range: {self.number}")

    @classmethod
    def read(cls, reader: RegistryReader) -> "NameIndexFlagged":
        word = reader.u32("flagged name index")
        if word & NAME_NUMBERED_BIT:
            number = reader.u32("name number")
            return cls(word & NAME_INDEX_MASK, number)
        return cls(word)

    def write(self, writer: RegistryWriter) -> None:
        if self.number is not None:
            writer.u32(self.index | NAME_NUMBERED_BIT, "flagged name index")
            writer.u32(self.number, "name number")
        else:
            writer.u32(self.index, "flagged name index")


@dataclass(frozen=True, slots=True)
class ExportPath:
    object_path: NameIndexFlagged
    package_path: NameIndexFlagged
    asset_class: NameIndexFlagged

    @classmethod
    def read(cls, reader: RegistryReader) -> "ExportPath":
        return cls(
            object_path=NameIndexFlagged.read(reader),
            package_path=NameIndexFlagged.read(reader),
            asset_class=NameIndexFlagged.read(reader),
        )

    def write(self, writer: RegistryWriter) -> None:
        self.object_path.write(writer)
        self.package_path.write(writer)
        self.asset_class.write(writer)


class ValueType(IntEnum):
    ANSI_STRING = 0
    WIDE_STRING = 1
    NUMBERLESS_NAME = 2
    NAME = 3
    NUMBERLESS_EXPORT_PATH = 4
    EXPORT_PATH = 5
    LOCALIZED_TEXT = 6

    @classmethod
    def from_tag(cls, tag: int) -> "ValueType":
        try:
            return cls(tag)
        except ValueError:
            raise InvalidTypeTag(
                code=E_INVALID_TYPE_TAG,
                message=f"Invalid value type tag: {tag}",
                context={"tag": tag},
            ) from None


@dataclass(frozen=True, slots=True)
class ValueId:
    """Reference to one entry of the store table selected by ``value_type``."""

    value_type: ValueType
    index: int

    def __post_init__(self) -> None:
        if not 0 <= self.index < VALUE_INDEX_LIMIT:
            raise ValueError(
                f"Value index {self.index} does not fit in "
                f"{32 - VALUE_TYPE_BITS} bits"
            )

    def pack(self) -> int:
        return int(self.value_type) | (self.index << VALUE_TYPE_BITS)

    @classmethod
    def unpack(cls, word: int) -> "ValueId":
        value_type = ValueType.from_tag(word & VALUE_TYPE_MASK)
        return cls(value_type, word >> VALUE_TYPE_BITS)


@dataclass(frozen=True, slots=True)
class Pair:
    name: NameIndex
    value: ValueId

    @classmethod
    def read(cls, reader: RegistryReader) -> "Pair":
        name = NameIndex.read(reader)
        value = ValueId.unpack(reader.u32("value id"))
        return cls(name, value)

    def write(self, writer: RegistryWriter) -> None:
        self.name.write(writer)
        writer.u32(self.value.pack(), "value id")


@dataclass(frozen=True, slots=True)
class MapHandle:
    """Run ``pairs[pair_begin : pair_begin + num]`` of the store's pair array."""

    has_numberless_keys: bool
    num: int
    pair_begin: int

    def __post_init__(self) -> None:
        if not 0 <= self.num < MAP_NUM_LIMIT:
            raise ValueError(f"Map pair count out of range: {self.num}")
        if not 0 <= self.pair_begin <= MAP_BEGIN_MASK:
            raise ValueError(f"Map pair offset out of range: {self.pair_begin}")

    @property
    def pair_end(self) -> int:
        return self.pair_begin + self.num

    def pack(self) -> int:
        word = (self.num << MAP_NUM_SHIFT) | self.pair_begin
        if self.has_numberless_keys:
            word |= MAP_NUMBERLESS_BIT
        return word

    @classmethod
    def unpack(cls, word: int) -> "MapHandle":
        return cls(
            has_numberless_keys=bool(word & MAP_NUMBERLESS_BIT),
            num=(word >> MAP_NUM_SHIFT) & (MAP_NUM_LIMIT - 1),
            pair_begin=word & MAP_BEGIN_MASK,
        )

    @classmethod
    def read(cls, reader: RegistryReader) -> "MapHandle":
        return cls.unpack(reader.u64("map handle"))

    def write(self, writer: RegistryWriter) -> None:
        writer.u64(self.pack(), "map handle")

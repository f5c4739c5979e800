"""Per-asset catalog entries and the trailing dependency block."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .primitives import MapHandle, NameIndexFlagged
from .stream import RegistryReader, RegistryWriter

__all__ = ["AssetData", "Dependencies", "EMPTY_TAGS"]

EMPTY_TAGS = MapHandle(has_numberless_keys=True, num=0, pair_begin=0)


def _read_u32_list(reader: RegistryReader, label: str) -> List[int]:
    count = reader.u32(f"{label} count")
    return reader.read_array(count, lambda r: r.u32(label))


def _write_u32_list(writer: RegistryWriter, values: List[int], label: str):
    writer.u32(len(values), f"{label} count")
    writer.write_array(values, lambda w, v: w.u32(v, label))


@dataclass
class AssetData:
    object_path: NameIndexFlagged
    package_path: NameIndexFlagged
    asset_class: NameIndexFlagged
    package_name: NameIndexFlagged
    asset_name: NameIndexFlagged
    tags: MapHandle = EMPTY_TAGS
    bundle_count: int = 0
    chunk_ids: List[int] = field(default_factory=list)
    flags: int = 0

    @classmethod
    def empty(
        cls,
        object_path: NameIndexFlagged,
        package_path: NameIndexFlagged,
        asset_class: NameIndexFlagged,
        package_name: NameIndexFlagged,
        asset_name: NameIndexFlagged,
    ) -> "AssetData":
        """Record with no tags, bundles, chunks or flags, as populate writes it."""
        return cls(
            object_path=object_path,
            package_path=package_path,
            asset_class=asset_class,
            package_name=package_name,
            asset_name=asset_name,
            tags=EMPTY_TAGS,
        )

    @classmethod
    def read(cls, reader: RegistryReader) -> "AssetData":
        return cls(
            object_path=NameIndexFlagged.read(reader),
            package_path=NameIndexFlagged.read(reader),
            asset_class=NameIndexFlagged.read(reader),
            package_name=NameIndexFlagged.read(reader),
            asset_name=NameIndexFlagged.read(reader),
            tags=MapHandle.read(reader),
            bundle_count=reader.u32("bundle count"),
            chunk_ids=_read_u32_list(reader, "chunk id"),
            flags=reader.u32("asset flags"),
        )

    def write(self, writer: RegistryWriter) -> None:
        self.object_path.write(writer)
        self.package_path.write(writer)
        self.asset_class.write(writer)
        self.package_name.write(writer)
        self.asset_name.write(writer)
        self.tags.write(writer)
        writer.u32(self.bundle_count, "bundle count")
        _write_u32_list(writer, self.chunk_ids, "chunk id")
        writer.u32(self.flags, "asset flags")

    def name_fields(self) -> dict[str, NameIndexFlagged]:
        return {
            "object_path": self.object_path,
            "package_path": self.package_path,
            "asset_class": self.asset_class,
            "package_name": self.package_name,
            "asset_name": self.asset_name,
        }


@dataclass
class Dependencies:
    dependencies_size: int = 0
    dependencies: List[int] = field(default_factory=list)
    package_data_buffer_size: int = 0

    @classmethod
    def read(cls, reader: RegistryReader) -> "Dependencies":
        return cls(
            dependencies_size=reader.u64("dependencies size"),
            dependencies=_read_u32_list(reader, "dependency"),
            package_data_buffer_size=reader.u32("package data buffer size"),
        )

    def write(self, writer: RegistryWriter) -> None:
        writer.u64(self.dependencies_size, "dependencies size")
        _write_u32_list(writer, self.dependencies, "dependency")
        writer.u32(self.package_data_buffer_size, "package data buffer size")

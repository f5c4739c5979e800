"""Top-level asset registry: header, name table, store, assets, dependencies.

Layout::

    guid version
    u32 version_int
    u32 name count
    u32 name bytes                    (derived)
    u64 hash version
    u64 lowercase hash per name       (derived)
    u16 big-endian byte length per name
    name bytes, back to back
    store
    u32 asset count, asset data records
    dependencies

Derived fields are never stored on the model; :meth:`AssetRegistry.write`
recomputes them from the live tables so edits such as :meth:`populate`
cannot leave them stale.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..assets import ExportBase, ParsedAsset
from ..logging import get_logger
from ..paths import (
    archive_path_to_logical_path,
    logical_parent,
    strip_package_extension,
)
from .constants import (
    BLUEPRINT_ASSET_SUFFIX,
    BLUEPRINT_CLASS_SUFFIX,
    NAME_MAX_BYTES,
)
from .errors import (
    BadImportReference,
    InvalidLogicalPath,
    NoRootExport,
    UnmappedPath,
    index_out_of_range,
    E_BAD_IMPORT_REFERENCE,
    E_INVALID_LOGICAL_PATH,
    E_NO_ROOT_EXPORT,
    E_UNMAPPED_PATH,
)
from .hashing import name_hash
from .names import Names
from .primitives import NULL_GUID, NameIndexFlagged, read_guid, write_guid
from .records import AssetData, Dependencies
from .store import Store
from .stream import RegistryReader, RegistryWriter
from .validation import find_index_issues

__all__ = ["AssetRegistry", "find_root_export"]


def find_root_export(asset: ParsedAsset) -> Optional[ExportBase]:
    """First export without an outer object, i.e. the package's main asset."""
    for export in asset.exports:
        if export.outer_index == 0:
            return export
    return None


@dataclass
class AssetRegistry:
    version: bytes = NULL_GUID
    version_int: int = 0
    hash_version: int = 0
    names: Names = field(default_factory=Names)
    store: Store = field(default_factory=Store)
    asset_data: List[AssetData] = field(default_factory=list)
    dependencies: Dependencies = field(default_factory=Dependencies)

    # Decode ----------------------------------------------------------------
    @classmethod
    def read(
        cls, reader: RegistryReader, *, strict: bool = False
    ) -> "AssetRegistry":
        logger = get_logger()
        version = read_guid(reader)
        version_int = reader.u32("version")
        name_count = reader.u32("name count")
        reader.u32("name bytes")
        hash_version = reader.u64("hash version")

        reader.read_exact(8 * name_count, "name hashes")
        lengths = reader.read_array(
            name_count, lambda r: r.u16_be("name length")
        )
        names = Names(
            reader.read_exact(n, "name").decode("utf-8", errors="replace")
            for n in lengths
        )
        logger.debug("Read %d names", name_count)

        store = Store.read(reader)
        asset_count = reader.u32("asset count")
        asset_data = reader.read_array(asset_count, AssetData.read)
        dependencies = Dependencies.read(reader)
        logger.debug(
            "Read registry: names=%d assets=%d dependencies=%d bytes=%d",
            name_count,
            asset_count,
            len(dependencies.dependencies),
            reader.tell(),
        )
        reg = cls(
            version=version,
            version_int=version_int,
            hash_version=hash_version,
            names=names,
            store=store,
            asset_data=asset_data,
            dependencies=dependencies,
        )
        if strict:
            issues = find_index_issues(reg)
            if issues:
                raise index_out_of_range(issues[0], {"issues": len(issues)})
        return reg

    @classmethod
    def from_bytes(cls, data: bytes, *, strict: bool = False) -> "AssetRegistry":
        return cls.read(RegistryReader(data), strict=strict)

    # Encode ----------------------------------------------------------------
    def write(self, writer: RegistryWriter) -> None:
        encoded = [n.encode("utf-8") for n in self.names]
        for raw in encoded:
            if len(raw) > NAME_MAX_BYTES:
                raise ValueError(
                    f"Name longer than {NAME_MAX_BYTES} bytes: {raw[:32]!r}..."
                )
        write_guid(writer, self.version)
        writer.u32(self.version_int, "version")
        writer.u32(len(encoded), "name count")
        writer.u32(sum(len(raw) for raw in encoded), "name bytes")
        writer.u64(self.hash_version, "hash version")
        for name in self.names:
            writer.u64(name_hash(name), "name hash")
        for raw in encoded:
            writer.u16_be(len(raw), "name length")
        for raw in encoded:
            writer.write_bytes(raw, "name")

        self.store.write(writer)

        writer.u32(len(self.asset_data), "asset count")
        writer.write_array(self.asset_data, lambda w, a: a.write(w))
        self.dependencies.write(writer)

    def to_bytes(self) -> bytes:
        writer = RegistryWriter()
        self.write(writer)
        return writer.getvalue()

    # Mutation --------------------------------------------------------------
    def intern_name(self, value: str) -> NameIndexFlagged:
        return self.names.intern(value)

    def find_asset(self, object_path: str) -> Optional[AssetData]:
        for asset in self.asset_data:
            if self.names[asset.object_path] == object_path:
                return asset
        return None

    def populate(self, logical_path: str, asset: ParsedAsset) -> List[AssetData]:
        """Append catalog entries for a parsed package.

        Returns the appended records; an empty list means an entry with the
        same object path already existed and nothing changed.
        """
        logger = get_logger()
        root = find_root_export(asset)
        if root is None:
            raise NoRootExport(
                code=E_NO_ROOT_EXPORT,
                message=f"No root export in {logical_path}",
                context={"path": logical_path},
            )
        package_path_str = logical_parent(logical_path)
        if package_path_str is None:
            raise InvalidLogicalPath(
                code=E_INVALID_LOGICAL_PATH,
                message=f"Logical path has no parent: {logical_path!r}",
                context={"path": logical_path},
            )
        asset_name_str = root.object_name
        object_path_str = f"{logical_path}.{asset_name_str}"
        class_import = asset.resolve_import(root.class_index)
        if class_import is None:
            raise BadImportReference(
                code=E_BAD_IMPORT_REFERENCE,
                message=(
                    f"Class reference {root.class_index} of {object_path_str} "
                    "does not resolve to an import"
                ),
                context={"path": logical_path, "class_index": root.class_index},
            )
        asset_class_str = class_import.object_name

        if self.find_asset(object_path_str) is not None:
            logger.debug("Skip existing asset: %s", object_path_str)
            return []

        # Interning order decides name table positions; keep it stable.
        first = AssetData.empty(
            object_path=self.intern_name(object_path_str),
            package_path=self.intern_name(package_path_str),
            asset_class=self.intern_name(asset_class_str),
            package_name=self.intern_name(logical_path),
            asset_name=self.intern_name(asset_name_str),
        )
        appended = [first]
        if (
            asset_name_str.endswith(BLUEPRINT_ASSET_SUFFIX)
            and object_path_str.endswith(BLUEPRINT_ASSET_SUFFIX)
            and asset_class_str.endswith(BLUEPRINT_CLASS_SUFFIX)
        ):
            appended.append(
                AssetData.empty(
                    object_path=self.intern_name(
                        object_path_str.removesuffix(BLUEPRINT_ASSET_SUFFIX)
                    ),
                    package_path=first.package_path,
                    asset_class=self.intern_name(
                        asset_class_str.removesuffix(BLUEPRINT_CLASS_SUFFIX)
                    ),
                    package_name=first.package_name,
                    asset_name=self.intern_name(
                        asset_name_str.removesuffix(BLUEPRINT_ASSET_SUFFIX)
                    ),
                )
            )
        self.asset_data.extend(appended)
        logger.debug(
            "Populated %s (%s): %d record(s)",
            object_path_str,
            asset_class_str,
            len(appended),
        )
        return appended

    def populate_from_archive_path(
        self, archive_path: str, asset: ParsedAsset
    ) -> List[AssetData]:
        logical_path = archive_path_to_logical_path(
            strip_package_extension(archive_path)
        )
        if logical_path is None:
            raise UnmappedPath(
                code=E_UNMAPPED_PATH,
                message=f"Path outside every mount root: {archive_path}",
                context={"path": archive_path},
            )
        return self.populate(logical_path, asset)

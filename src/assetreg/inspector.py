"""Read-only views over a decoded registry.

Public functions:
- describe_asset / describe_export_path / describe_map / describe_pair:
  records with every name and store index resolved to text
- format_registry(reg) -> str: all assets, sorted by object path
- summarize_registry(reg) -> dict
- validate_registry(reg) -> list[str]

Describing a record dereferences its indices; an index outside its table
raises :class:`~assetreg.codec.errors.IndexOutOfRange`.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

from .codec.primitives import ExportPath, MapHandle, Pair, ValueType
from .codec.records import AssetData
from .codec.registry import AssetRegistry
from .codec.validation import find_index_issues

__all__ = [
    "describe_asset",
    "describe_export_path",
    "describe_map",
    "describe_pair",
    "format_asset",
    "format_registry",
    "summarize_registry",
    "validate_registry",
]


def describe_export_path(reg: AssetRegistry, path: ExportPath) -> Dict[str, Any]:
    return {
        "object_path": reg.names[path.object_path],
        "package_path": reg.names[path.package_path],
        "asset_class": reg.names[path.asset_class],
    }


def describe_pair(reg: AssetRegistry, pair: Pair) -> Dict[str, Any]:
    raw = reg.store.resolve(pair.value)
    kind = pair.value.value_type
    if kind in (ValueType.NUMBERLESS_NAME, ValueType.NAME):
        value: Any = reg.names[raw]
    elif kind in (ValueType.NUMBERLESS_EXPORT_PATH, ValueType.EXPORT_PATH):
        value = describe_export_path(reg, raw)
    else:
        value = raw
    return {"name": reg.names[pair.name], "value": value}


def describe_map(reg: AssetRegistry, handle: MapHandle) -> List[Dict[str, Any]]:
    return [describe_pair(reg, p) for p in reg.store.pairs_for(handle)]


def describe_asset(reg: AssetRegistry, asset: AssetData) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        field_name: reg.names[ref]
        for field_name, ref in asset.name_fields().items()
    }
    out["tags"] = describe_map(reg, asset.tags)
    out["bundle_count"] = asset.bundle_count
    out["chunk_ids"] = list(asset.chunk_ids)
    out["flags"] = asset.flags
    return out


def format_asset(reg: AssetRegistry, asset: AssetData) -> str:
    return json.dumps(describe_asset(reg, asset), indent=2, ensure_ascii=False)


def format_registry(reg: AssetRegistry) -> str:
    ordered = sorted(reg.asset_data, key=lambda a: reg.names[a.object_path])
    return "\n".join(format_asset(reg, a) for a in ordered)


def summarize_registry(reg: AssetRegistry) -> Dict[str, Any]:
    store = reg.store
    return {
        "version": reg.version.hex(),
        "version_int": reg.version_int,
        "hash_version": reg.hash_version,
        "names": len(reg.names),
        "assets": len(reg.asset_data),
        "store": {
            "texts": len(store.texts),
            "nbl_names": len(store.nbl_names),
            "names": len(store.names),
            "nbl_export_paths": len(store.nbl_export_paths),
            "export_paths": len(store.export_paths),
            "ansi_strings": len(store.ansi_strings),
            "wide_strings": len(store.wide_strings),
            "pairs": len(store.pairs),
            "numbered_pair_count": store.numbered_pair_count,
        },
        "dependencies": {
            "declared_size": reg.dependencies.dependencies_size,
            "count": len(reg.dependencies.dependencies),
            "package_data_buffer_size": reg.dependencies.package_data_buffer_size,
        },
    }


def validate_registry(reg: AssetRegistry) -> List[str]:
    issues = find_index_issues(reg)
    for dup in reg.names.duplicates():
        issues.append(f"Duplicate name table entry: {dup!r}")
    return issues

"""Structural diff between two decoded registries.

Assets are matched by resolved object path, so two registries that list the
same catalog with different name table orders compare equal. The result is a
JSON-serialisable dict with a stable shape::

    {
      "header": [{"field", "left", "right"}],
      "names": {"added": [...], "removed": [...]},
      "assets": {"added": [...], "removed": [...],
                 "changed": [{"object_path", "field", "left", "right"}]},
      "dependencies": [{"field", "left", "right"}],
      "summary": {"count": N},
    }
"""

from __future__ import annotations
from typing import Any, Dict, List

from .codec.registry import AssetRegistry
from .inspector import describe_asset

__all__ = ["diff_registries"]

_HEADER_FIELDS = ("version", "version_int", "hash_version")
_DEPENDENCY_FIELDS = (
    "dependencies_size",
    "dependencies",
    "package_data_buffer_size",
)


def _header_value(reg: AssetRegistry, field_name: str) -> Any:
    value = getattr(reg, field_name)
    return value.hex() if isinstance(value, bytes) else value


def _assets_by_path(reg: AssetRegistry) -> Dict[str, Dict[str, Any]]:
    out: Dict[str, Dict[str, Any]] = {}
    for asset in reg.asset_data:
        desc = describe_asset(reg, asset)
        out.setdefault(desc["object_path"], desc)
    return out


def diff_registries(left: AssetRegistry, right: AssetRegistry) -> Dict[str, Any]:
    header: List[Dict[str, Any]] = []
    for field_name in _HEADER_FIELDS:
        a = _header_value(left, field_name)
        b = _header_value(right, field_name)
        if a != b:
            header.append({"field": field_name, "left": a, "right": b})

    left_names = set(left.names)
    right_names = set(right.names)
    names = {
        "added": sorted(right_names - left_names),
        "removed": sorted(left_names - right_names),
    }

    a_assets = _assets_by_path(left)
    b_assets = _assets_by_path(right)
    changed: List[Dict[str, Any]] = []
    for path in sorted(a_assets.keys() & b_assets.keys()):
        a_desc, b_desc = a_assets[path], b_assets[path]
        for field_name in a_desc:
            if a_desc[field_name] != b_desc.get(field_name):
                changed.append(
                    {
                        "object_path": path,
                        "field": field_name,
                        "left": a_desc[field_name],
                        "right": b_desc.get(field_name),
                    }
                )
    assets = {
        "added": sorted(b_assets.keys() - a_assets.keys()),
        "removed": sorted(a_assets.keys() - b_assets.keys()),
        "changed": changed,
    }

    dependencies: List[Dict[str, Any]] = []
    for field_name in _DEPENDENCY_FIELDS:
        a = getattr(left.dependencies, field_name)
        b = getattr(right.dependencies, field_name)
        if a != b:
            dependencies.append({"field": field_name, "left": a, "right": b})

    count = (
        len(header)
        + len(names["added"])
        + len(names["removed"])
        + len(assets["added"])
        + len(assets["removed"])
        + len(changed)
        + len(dependencies)
    )
    return {
        "header": header,
        "names": names,
        "assets": assets,
        "dependencies": dependencies,
        "summary": {"count": count},
    }

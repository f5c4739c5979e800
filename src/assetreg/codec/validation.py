"""Eager bounds checks over a decoded registry.

Decoding itself does not check table indices; a bad index surfaces when it
is dereferenced. :func:`find_index_issues` walks every reference up front.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Tuple

from .primitives import NameIndexFlagged

if TYPE_CHECKING:  # pragma: no cover
    from .registry import AssetRegistry

__all__ = ["find_index_issues"]


def _name_refs(reg: "AssetRegistry") -> Iterable[Tuple[str, int]]:
    for i, asset in enumerate(reg.asset_data):
        for field_name, ref in asset.name_fields().items():
            yield f"asset_data[{i}].{field_name}", ref.index
    store = reg.store
    for label, table in (("nbl_names", store.nbl_names), ("names", store.names)):
        for i, ref in enumerate(table):
            yield f"store.{label}[{i}]", ref.index
    for label, paths in (
        ("nbl_export_paths", store.nbl_export_paths),
        ("export_paths", store.export_paths),
    ):
        for i, path in enumerate(paths):
            for part in ("object_path", "package_path", "asset_class"):
                ref: NameIndexFlagged = getattr(path, part)
                yield f"store.{label}[{i}].{part}", ref.index
    for i, pair in enumerate(store.pairs):
        yield f"store.pairs[{i}].name", pair.name.index


def find_index_issues(reg: "AssetRegistry") -> List[str]:
    issues: List[str] = []
    name_count = len(reg.names)
    for where, index in _name_refs(reg):
        if index >= name_count:
            issues.append(
                f"{where}: name index {index} outside table of {name_count}"
            )
    store = reg.store
    for i, pair in enumerate(store.pairs):
        size = len(store.table_for(pair.value.value_type))
        if pair.value.index >= size:
            issues.append(
                f"store.pairs[{i}]: {pair.value.value_type.name} index "
                f"{pair.value.index} outside table of {size}"
            )
    for i, asset in enumerate(reg.asset_data):
        if asset.tags.pair_end > len(store.pairs):
            issues.append(
                f"asset_data[{i}].tags: range {asset.tags.pair_begin}+"
                f"{asset.tags.num} outside {len(store.pairs)} pairs"
            )
    return issues


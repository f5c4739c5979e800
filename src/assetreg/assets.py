"""Parsed package view consumed by :meth:`AssetRegistry.populate`.

Package parsing itself lives outside this project. Anything exposing
``exports`` (a sequence of :class:`ExportBase`) and ``resolve_import`` can be
handed to ``populate``. :class:`AssetDescriptor` is a plain implementation
loaded from JSON or YAML, used by the CLI and the tests.

Package indices follow the engine convention: 0 is null, ``-n`` is import
``n - 1`` and ``+n`` is export ``n - 1``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import json
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

import yaml

__all__ = [
    "ExportBase",
    "ImportEntry",
    "ParsedAsset",
    "AssetDescriptor",
    "import_index",
    "load_asset_descriptors",
]


def import_index(position: int) -> int:
    """Package index referring to import ``position``."""
    return -position - 1


@dataclass(frozen=True, slots=True)
class ExportBase:
    outer_index: int
    object_name: str
    object_flags: int = 0
    class_index: int = 0


@dataclass(frozen=True, slots=True)
class ImportEntry:
    object_name: str
    class_package: str = ""
    class_name: str = ""
    outer_index: int = 0


class ParsedAsset(Protocol):
    @property
    def exports(self) -> Sequence[ExportBase]: ...

    def resolve_import(self, index: int) -> Optional[ImportEntry]: ...


@dataclass(slots=True)
class AssetDescriptor:
    exports: List[ExportBase] = field(default_factory=list)
    imports: List[ImportEntry] = field(default_factory=list)

    def resolve_import(self, index: int) -> Optional[ImportEntry]:
        if index >= 0:
            return None
        position = -index - 1
        if position >= len(self.imports):
            return None
        return self.imports[position]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssetDescriptor":
        exports = [
            ExportBase(
                outer_index=int(e.get("outer_index", 0)),
                object_name=str(e["object_name"]),
                object_flags=int(e.get("object_flags", 0)),
                class_index=int(e.get("class_index", 0)),
            )
            for e in data.get("exports", []) or []
        ]
        imports = [
            ImportEntry(
                object_name=str(i["object_name"]),
                class_package=str(i.get("class_package", "")),
                class_name=str(i.get("class_name", "")),
                outer_index=int(i.get("outer_index", 0)),
            )
            for i in data.get("imports", []) or []
        ]
        return cls(exports=exports, imports=imports)


def load_asset_descriptors(
    path: str | Path,
) -> List[Tuple[str, AssetDescriptor]]:
    """Load ``[(archive_path, descriptor), ...]`` from a JSON/YAML document.

    Expected shape::

        assets:
          - path: MyGame/Content/Maps/Entry.umap
            exports: [{outer_index: 0, object_name: Entry, class_index: -1}]
            imports: [{object_name: World}]
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in {".yaml", ".yml"}:
        data: Any = yaml.safe_load(text)
    else:
        data = json.loads(text)
    if not isinstance(data, dict) or not isinstance(data.get("assets"), list):
        raise ValueError("Root of asset document must have an 'assets' list")
    out: List[Tuple[str, AssetDescriptor]] = []
    for entry in data["assets"]:
        if not isinstance(entry, dict) or not isinstance(entry.get("path"), str):
            raise ValueError(f"Asset entry without a path: {entry!r}")
        out.append((entry["path"], AssetDescriptor.from_dict(entry)))
    return out

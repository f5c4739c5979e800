"""Reader, writer and populator for packaged asset registry files."""

from __future__ import annotations

from .codec.errors import RegistryError
from .codec.names import Names
from .codec.primitives import (
    ExportPath,
    MapHandle,
    NameIndex,
    NameIndexFlagged,
    Pair,
    ValueId,
    ValueType,
)
from .codec.records import AssetData, Dependencies
from .codec.registry import AssetRegistry
from .codec.store import Store

__version__ = "0.3.0"

__all__ = [
    "AssetData",
    "AssetRegistry",
    "Dependencies",
    "ExportPath",
    "MapHandle",
    "NameIndex",
    "NameIndexFlagged",
    "Names",
    "Pair",
    "RegistryError",
    "Store",
    "ValueId",
    "ValueType",
]

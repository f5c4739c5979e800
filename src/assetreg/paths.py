"""Archive path to logical package path mapping."""

from __future__ import annotations
from pathlib import PurePosixPath
from typing import Optional

from .codec.constants import PACKAGE_EXTENSIONS

__all__ = [
    "archive_path_to_logical_path",
    "strip_package_extension",
    "logical_parent",
]


def _normal(part: str) -> bool:
    return part not in ("/", "..")


def archive_path_to_logical_path(path: str) -> Optional[str]:
    """Map ``Project/Content/X`` style archive paths to ``/Game/X`` style.

    Mount roots:
    - ``Engine/Content/<rest>`` -> ``/Engine/<rest>``
    - ``Engine/Plugins/.../<Plugin>/Content/<rest>`` -> ``/<Plugin>/<rest>``
    - ``<Project>/Content/<rest>`` -> ``/Game/<rest>``

    Returns None for anything outside those roots.
    """
    parts = PurePosixPath(path).parts
    if len(parts) < 2 or not _normal(parts[0]):
        return None
    head, second, rest = parts[0], parts[1], parts[2:]
    if head == "Engine":
        if second == "Content":
            return str(PurePosixPath("/Engine").joinpath(*rest))
        if second != "Plugins":
            return None
        plugin: Optional[str] = None
        for i, part in enumerate(rest):
            if part == "Content":
                if plugin is None:
                    return None
                return str(PurePosixPath("/", plugin).joinpath(*rest[i + 1 :]))
            if not _normal(part):
                return None
            plugin = part
        return None
    if second == "Content":
        return str(PurePosixPath("/Game").joinpath(*rest))
    return None


def strip_package_extension(path: str) -> str:
    for ext in PACKAGE_EXTENSIONS:
        if path.endswith(ext):
            return path[: -len(ext)]
    return path


def logical_parent(path: str) -> Optional[str]:
    if "/" not in path:
        return None
    return str(PurePosixPath(path).parent)

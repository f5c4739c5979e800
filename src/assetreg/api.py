"""High-level file API for assetreg."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from .assets import load_asset_descriptors
from .codec.registry import AssetRegistry
from .codec.stream import RegistryReader, RegistryWriter
from .diff import diff_registries
from .inspector import summarize_registry, validate_registry
from .logging import get_logger
from .reporting import TaskStatus, get_reporter, task

__all__ = [
    "PopulateOptions",
    "PopulateResult",
    "load_registry",
    "save_registry",
    "inspect_registry",
    "validate_registry_file",
    "roundtrip_check",
    "diff_registry_files",
    "populate_registry",
]


@dataclass(slots=True)
class PopulateOptions:
    registry_path: Path
    assets_path: Path
    output_path: Path
    # Drop existing catalog entries before populating; the name table and
    # store are kept because store entries reference names.
    rebuild: bool = False


@dataclass(slots=True)
class PopulateResult:
    output_file: Path
    bytes_written: int
    appended: int
    skipped: int


def load_registry(path: str | Path, *, strict: bool = False) -> AssetRegistry:
    p = Path(path)
    with task("registry.read", f"Read {p.name}") as rec:
        with p.open("rb") as f:
            reg = AssetRegistry.read(RegistryReader(f), strict=strict)
        rec.meta.update(names=len(reg.names), assets=len(reg.asset_data))
    get_reporter().summary(
        "read",
        file=p.name,
        names=len(reg.names),
        assets=len(reg.asset_data),
        pairs=len(reg.store.pairs),
    )
    return reg


def save_registry(reg: AssetRegistry, path: str | Path) -> int:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with task("registry.write", f"Write {p.name}") as rec:
        with p.open("wb") as f:
            writer = RegistryWriter(f)
            reg.write(writer)
        rec.meta["bytes"] = writer.bytes_written
    get_reporter().summary(
        "write", file=p.name, bytes=writer.bytes_written, assets=len(reg.asset_data)
    )
    return writer.bytes_written


def inspect_registry(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    reg = load_registry(p)
    return {"file_size": p.stat().st_size, **summarize_registry(reg)}


def validate_registry_file(path: str | Path) -> List[str]:
    issues = validate_registry(load_registry(path))
    get_reporter().summary("validate", issues=len(issues))
    return issues


def roundtrip_check(path: str | Path) -> bool:
    """Decode and re-encode ``path``; True when the bytes are identical."""
    logger = get_logger()
    original = Path(path).read_bytes()
    reg = AssetRegistry.from_bytes(original)
    rebuilt = reg.to_bytes()
    identical = rebuilt == original
    if not identical:
        first = next(
            (i for i, (a, b) in enumerate(zip(original, rebuilt)) if a != b),
            min(len(original), len(rebuilt)),
        )
        logger.warning(
            "Re-encoded registry differs at offset %d (sizes %d vs %d)",
            first,
            len(original),
            len(rebuilt),
        )
    get_reporter().summary("roundtrip", bytes=len(original), identical=identical)
    return identical


def diff_registry_files(left: str | Path, right: str | Path) -> Dict[str, Any]:
    return diff_registries(load_registry(left), load_registry(right))


def populate_registry(options: PopulateOptions) -> PopulateResult:
    logger = get_logger()
    rep = get_reporter()
    reg = load_registry(options.registry_path)
    if options.rebuild:
        logger.info("Dropping %d existing asset entries", len(reg.asset_data))
        reg.asset_data.clear()
    descriptors = load_asset_descriptors(options.assets_path)
    appended = 0
    skipped = 0
    with task("registry.populate", "Populate assets", total=len(descriptors)) as rec:
        for archive_path, asset in descriptors:
            added = reg.populate_from_archive_path(archive_path, asset)
            if added:
                appended += len(added)
            else:
                skipped += 1
            rep.advance("registry.populate", current_item=archive_path)
        rec.meta["records"] = appended
        if not appended:
            rec.status = TaskStatus.SKIPPED
    rep.summary(
        "populate", packages=len(descriptors), appended=appended, skipped=skipped
    )
    bytes_written = save_registry(reg, options.output_path)
    return PopulateResult(
        output_file=options.output_path,
        bytes_written=bytes_written,
        appended=appended,
        skipped=skipped,
    )

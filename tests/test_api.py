import io
import json
import struct
from pathlib import Path

import pytest

from assetreg.api import (
    PopulateOptions,
    inspect_registry,
    load_registry,
    populate_registry,
    roundtrip_check,
    save_registry,
    validate_registry_file,
)
from assetreg.codec.errors import IndexOutOfRange, TruncatedInput
from assetreg.codec.primitives import NameIndexFlagged
from assetreg.codec.registry import AssetRegistry
from assetreg.reporting import JsonLinesReporter, SilentReporter, set_reporter

from registry_helpers import sample_registry

ASSETS_YAML = """\
assets:
  - path: MyGame/Content/Props/Door.uasset
    exports:
      - {outer_index: 0, object_name: Door, class_index: -1}
    imports:
      - {object_name: StaticMesh}
  - path: MyGame/Content/Maps/Entry.umap
    exports:
      - {outer_index: 0, object_name: Entry, class_index: -1}
    imports:
      - {object_name: World}
"""


@pytest.fixture(autouse=True)
def _quiet_reporter():
    set_reporter(SilentReporter())


@pytest.fixture
def registry_file(tmp_path: Path) -> Path:
    path = tmp_path / "AssetRegistry.bin"
    save_registry(sample_registry(), path)
    return path


def test_save_and_load(registry_file: Path):
    data = registry_file.read_bytes()
    assert data == sample_registry().to_bytes()
    assert load_registry(registry_file) == sample_registry()


def test_inspect_registry(registry_file: Path):
    info = inspect_registry(registry_file)
    assert info["file_size"] == registry_file.stat().st_size
    assert info["assets"] == 1


def test_roundtrip_check(registry_file: Path):
    assert roundtrip_check(registry_file)


def test_roundtrip_check_detects_stale_header(registry_file: Path):
    raw = bytearray(registry_file.read_bytes())
    raw[24:28] = b"\x00\x00\x00\x00"  # name bytes
    registry_file.write_bytes(bytes(raw))
    assert not roundtrip_check(registry_file)


def test_strict_load_rejects_bad_index(tmp_path: Path):
    reg = sample_registry()
    reg.asset_data[0].asset_name = NameIndexFlagged(40)
    path = tmp_path / "bad.bin"
    save_registry(reg, path)
    assert load_registry(path).asset_data[0].asset_name.index == 40
    with pytest.raises(IndexOutOfRange):
        load_registry(path, strict=True)
    assert validate_registry_file(path) == [
        "asset_data[0].asset_name: name index 40 outside table of 13"
    ]


def test_populate_registry(registry_file: Path, tmp_path: Path):
    assets = tmp_path / "assets.yaml"
    assets.write_text(ASSETS_YAML, encoding="utf-8")
    out = tmp_path / "out" / "AssetRegistry.bin"
    result = populate_registry(
        PopulateOptions(registry_path=registry_file, assets_path=assets, output_path=out)
    )
    assert (result.appended, result.skipped) == (1, 1)
    assert result.bytes_written == out.stat().st_size
    reg = AssetRegistry.from_bytes(out.read_bytes())
    assert [reg.names[a.object_path] for a in reg.asset_data] == [
        "/Game/Maps/Entry.Entry",
        "/Game/Props/Door.Door",
    ]


def test_populate_registry_rebuild(registry_file: Path, tmp_path: Path):
    assets = tmp_path / "assets.yaml"
    assets.write_text(ASSETS_YAML, encoding="utf-8")
    out = tmp_path / "rebuilt.bin"
    result = populate_registry(
        PopulateOptions(
            registry_path=registry_file,
            assets_path=assets,
            output_path=out,
            rebuild=True,
        )
    )
    assert (result.appended, result.skipped) == (2, 0)
    reg = load_registry(out)
    assert [reg.names[a.object_path] for a in reg.asset_data] == [
        "/Game/Props/Door.Door",
        "/Game/Maps/Entry.Entry",
    ]
    # names survive a rebuild since store pairs reference them
    assert len(reg.names) == 13 + 5


def test_huge_name_count_in_file_is_truncated_input(tmp_path: Path):
    path = tmp_path / "corrupt.bin"
    # guid, version, name count, name bytes, hash version; nothing after
    path.write_bytes(bytes(16) + struct.pack("<IIIQ", 1, 0xFFFFFFFF, 0, 1))
    with pytest.raises(TruncatedInput) as exc:
        load_registry(path)
    assert exc.value.context["label"] == "name hashes"


def test_populate_with_nothing_new_ends_skipped(registry_file: Path, tmp_path: Path):
    assets = tmp_path / "assets.yaml"
    assets.write_text(
        "assets:\n"
        "  - path: MyGame/Content/Maps/Entry.umap\n"
        "    exports: [{outer_index: 0, object_name: Entry, class_index: -1}]\n"
        "    imports: [{object_name: World}]\n",
        encoding="utf-8",
    )
    stream = io.StringIO()
    set_reporter(JsonLinesReporter(stream=stream))
    result = populate_registry(
        PopulateOptions(
            registry_path=registry_file,
            assets_path=assets,
            output_path=tmp_path / "out.bin",
        )
    )
    assert (result.appended, result.skipped) == (0, 1)
    events = [json.loads(line) for line in stream.getvalue().splitlines()]
    ends = {e["id"]: e["status"] for e in events if e["event"] == "task_end"}
    assert ends["registry.populate"] == "skipped"
    assert ends["registry.read"] == "success"

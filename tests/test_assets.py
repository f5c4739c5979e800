from pathlib import Path

import pytest

from assetreg.assets import (
    AssetDescriptor,
    ImportEntry,
    import_index,
    load_asset_descriptors,
)


def test_import_index_convention():
    asset = AssetDescriptor(
        imports=[ImportEntry(object_name="A"), ImportEntry(object_name="B")]
    )
    assert import_index(0) == -1
    assert asset.resolve_import(import_index(1)).object_name == "B"
    assert asset.resolve_import(0) is None
    assert asset.resolve_import(1) is None
    assert asset.resolve_import(-3) is None


def test_load_yaml_descriptors(tmp_path: Path):
    doc = tmp_path / "assets.yml"
    doc.write_text(
        "assets:\n"
        "  - path: MyGame/Content/A.uasset\n"
        "    exports: [{outer_index: 0, object_name: A, class_index: -1}]\n"
        "    imports: [{object_name: Texture2D, class_package: /Script/Engine}]\n",
        encoding="utf-8",
    )
    ((path, asset),) = load_asset_descriptors(doc)
    assert path == "MyGame/Content/A.uasset"
    assert asset.exports[0].object_name == "A"
    assert asset.imports[0].class_package == "/Script/Engine"


def test_load_rejects_missing_assets_list(tmp_path: Path):
    doc = tmp_path / "assets.json"
    doc.write_text('{"packages": []}', encoding="utf-8")
    with pytest.raises(ValueError):
        load_asset_descriptors(doc)


def test_load_rejects_entry_without_path(tmp_path: Path):
    doc = tmp_path / "assets.json"
    doc.write_text('{"assets": [{"exports": []}]}', encoding="utf-8")
    with pytest.raises(ValueError):
        load_asset_descriptors(doc)


def test_load_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_asset_descriptors(tmp_path / "absent.yaml")

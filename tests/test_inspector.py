import pytest

from assetreg.codec.errors import IndexOutOfRange
from assetreg.codec.names import Names
from assetreg.codec.primitives import NameIndex, Pair, ValueId, ValueType
from assetreg.codec.registry import AssetRegistry
from assetreg.inspector import (
    describe_asset,
    describe_pair,
    format_registry,
    summarize_registry,
    validate_registry,
)

from registry_helpers import make_asset, sample_registry


def test_describe_asset_resolves_every_value():
    reg = sample_registry()
    desc = describe_asset(reg, reg.asset_data[0])
    assert desc["object_path"] == "/Game/Maps/Entry.Entry"
    assert desc["chunk_ids"] == [0, 3]
    tags = {t["name"]: t["value"] for t in desc["tags"]}
    assert tags == {
        "Description": "ansi value",
        "Label": "wïde ✓",
        "Map": "Map",
        "Owner": "World",
        "Source": {
            "object_path": "/Game/Maps/Entry.Entry",
            "package_path": "/Game/Maps",
            "asset_class": "World",
        },
        "Target": {
            "object_path": "/Game/Maps/Entry.Entry",
            "package_path": "/Game/Maps",
            "asset_class": "World",
        },
        "Greeting": "Hello, world",
    }


def test_describe_pair_out_of_range():
    reg = sample_registry()
    bad = Pair(NameIndex(5), ValueId(ValueType.WIDE_STRING, 4))
    with pytest.raises(IndexOutOfRange) as exc:
        describe_pair(reg, bad)
    assert exc.value.context == {"type": "WIDE_STRING", "index": 4}


def test_summarize_registry():
    info = summarize_registry(sample_registry())
    assert info["version"] == bytes(range(16)).hex()
    assert info["names"] == 13
    assert info["assets"] == 1
    assert info["store"]["pairs"] == 7
    assert info["dependencies"] == {
        "declared_size": 12,
        "count": 3,
        "package_data_buffer_size": 0,
    }


def test_format_registry_sorted_by_object_path():
    reg = AssetRegistry()
    reg.populate("/Game/Z/Zed", make_asset("Zed", "World"))
    reg.populate("/Game/A/Aye", make_asset("Aye", "World"))
    text = format_registry(reg)
    assert text.index("/Game/A/Aye.Aye") < text.index("/Game/Z/Zed.Zed")


def test_validate_clean_registry():
    assert validate_registry(sample_registry()) == []


def test_validate_reports_bad_indices():
    reg = sample_registry()
    reg.store.pairs.append(Pair(NameIndex(99), ValueId(ValueType.ANSI_STRING, 0)))
    reg.store.texts.clear()
    issues = validate_registry(reg)
    assert any("store.pairs[7].name" in i for i in issues)
    assert any("LOCALIZED_TEXT index 0 outside table of 0" in i for i in issues)


def test_validate_reports_tag_range():
    reg = sample_registry()
    del reg.store.pairs[6:]
    issues = validate_registry(reg)
    assert issues == ["asset_data[0].tags: range 0+7 outside 6 pairs"]


def test_validate_reports_duplicate_names():
    reg = AssetRegistry(names=Names(["A", "B", "A"]))
    assert validate_registry(reg) == ["Duplicate name table entry: 'A'"]

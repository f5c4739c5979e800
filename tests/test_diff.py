from assetreg.codec.registry import AssetRegistry
from assetreg.diff import diff_registries

from registry_helpers import make_asset, sample_registry


def test_identical_registries():
    result = diff_registries(sample_registry(), sample_registry())
    assert result["summary"]["count"] == 0
    assert result["assets"] == {"added": [], "removed": [], "changed": []}


def test_populated_assets_show_as_added():
    left = sample_registry()
    right = sample_registry()
    right.populate("/Game/Props/Door", make_asset("Door", "StaticMesh"))
    result = diff_registries(left, right)
    assert result["assets"]["added"] == ["/Game/Props/Door.Door"]
    assert result["names"]["added"] == [
        "/Game/Props",
        "/Game/Props/Door",
        "/Game/Props/Door.Door",
        "Door",
        "StaticMesh",
    ]
    assert result["summary"]["count"] == 6

    reverse = diff_registries(right, left)
    assert reverse["assets"]["removed"] == ["/Game/Props/Door.Door"]


def test_name_order_does_not_matter():
    left = AssetRegistry()
    left.populate("/Game/A/Aye", make_asset("Aye", "World"))
    left.populate("/Game/B/Bee", make_asset("Bee", "World"))
    right = AssetRegistry()
    right.populate("/Game/B/Bee", make_asset("Bee", "World"))
    right.populate("/Game/A/Aye", make_asset("Aye", "World"))
    assert diff_registries(left, right)["summary"]["count"] == 0


def test_header_and_dependency_changes():
    left = sample_registry()
    right = sample_registry()
    right.version_int = 2
    right.dependencies.dependencies.append(4)
    result = diff_registries(left, right)
    assert result["header"] == [{"field": "version_int", "left": 1, "right": 2}]
    assert result["dependencies"] == [
        {"field": "dependencies", "left": [1, 2, 3], "right": [1, 2, 3, 4]}
    ]


def test_changed_asset_field():
    left = sample_registry()
    right = sample_registry()
    right.asset_data[0].chunk_ids = [1]
    changed = diff_registries(left, right)["assets"]["changed"]
    assert changed == [
        {
            "object_path": "/Game/Maps/Entry.Entry",
            "field": "chunk_ids",
            "left": [0, 3],
            "right": [1],
        }
    ]

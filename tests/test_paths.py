import pytest

from assetreg.paths import (
    archive_path_to_logical_path,
    logical_parent,
    strip_package_extension,
)


@pytest.mark.parametrize(
    "archive, logical",
    [
        ("MyGame/Content/Maps/Entry", "/Game/Maps/Entry"),
        ("MyGame/Content", "/Game"),
        ("Engine/Content/BasicShapes/Cube", "/Engine/BasicShapes/Cube"),
        ("Engine/Plugins/Runtime/Foo/Content/Bar/Baz", "/Foo/Bar/Baz"),
        ("Engine/Plugins/Foo/Content/Baz", "/Foo/Baz"),
        ("Engine/Plugins/Content/Baz", None),
        ("Engine/Plugins/Foo/Resources/Baz", None),
        ("Engine/Shaders/Private/Common", None),
        ("MyGame/Binaries/Win64/Game", None),
        ("MyGame/Plugins/Foo/Content/Baz", None),
        ("/MyGame/Content/Maps/Entry", None),
        ("MyGame", None),
    ],
)
def test_archive_path_mapping(archive, logical):
    assert archive_path_to_logical_path(archive) == logical


def test_strip_package_extension():
    assert strip_package_extension("A/B.uasset") == "A/B"
    assert strip_package_extension("A/B.umap") == "A/B"
    assert strip_package_extension("A/B.uexp") == "A/B.uexp"


def test_logical_parent():
    assert logical_parent("/Game/Maps/Entry") == "/Game/Maps"
    assert logical_parent("/Game") == "/"
    assert logical_parent("Entry") is None

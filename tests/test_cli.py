import json
from pathlib import Path

from assetreg.api import save_registry
from assetreg.cli import main
from assetreg.codec.registry import AssetRegistry

from registry_helpers import make_asset, sample_registry


def _write(path: Path, reg: AssetRegistry) -> Path:
    path.write_bytes(reg.to_bytes())
    return path


def test_inspect_prints_summary(tmp_path: Path, capsys):
    path = _write(tmp_path / "a.bin", sample_registry())
    assert main(["-r", "silent", "inspect", str(path)]) == 0
    info = json.loads(capsys.readouterr().out)
    assert info["names"] == 13
    assert info["file_size"] == path.stat().st_size


def test_dump_prints_assets(tmp_path: Path, capsys):
    path = _write(tmp_path / "a.bin", sample_registry())
    assert main(["-r", "silent", "dump", str(path)]) == 0
    desc = json.loads(capsys.readouterr().out)
    assert desc["asset_name"] == "Entry"


def test_validate_exit_codes(tmp_path: Path):
    good = _write(tmp_path / "good.bin", sample_registry())
    assert main(["-r", "silent", "validate", str(good)]) == 0
    reg = sample_registry()
    del reg.store.pairs[3:]
    bad = _write(tmp_path / "bad.bin", reg)
    assert main(["-r", "silent", "validate", str(bad)]) == 1


def test_roundtrip_exit_code(tmp_path: Path):
    path = _write(tmp_path / "a.bin", sample_registry())
    assert main(["-r", "silent", "roundtrip", str(path)]) == 0


def test_diff_exit_codes(tmp_path: Path, capsys):
    left = _write(tmp_path / "left.bin", sample_registry())
    assert main(["-r", "silent", "diff", str(left), str(left)]) == 0
    capsys.readouterr()
    reg = sample_registry()
    reg.populate("/Game/Props/Door", make_asset("Door", "StaticMesh"))
    right = _write(tmp_path / "right.bin", reg)
    assert main(["-r", "silent", "diff", str(left), str(right)]) == 1
    result = json.loads(capsys.readouterr().out)
    assert result["assets"]["added"] == ["/Game/Props/Door.Door"]


def test_populate_from_json(tmp_path: Path):
    registry = tmp_path / "in.bin"
    save_registry(AssetRegistry(), registry)
    assets = tmp_path / "assets.json"
    assets.write_text(
        json.dumps(
            {
                "assets": [
                    {
                        "path": "Engine/Plugins/FX/Niagara/Content/Spark.uasset",
                        "exports": [
                            {"outer_index": 0, "object_name": "Spark", "class_index": -1}
                        ],
                        "imports": [{"object_name": "NiagaraSystem"}],
                    }
                ]
            }
        )
    )
    out = tmp_path / "out.bin"
    args = ["-r", "silent", "populate", str(registry), str(assets), str(out)]
    assert main(args) == 0
    reg = AssetRegistry.from_bytes(out.read_bytes())
    assert list(reg.names) == [
        "/Niagara/Spark.Spark",
        "/Niagara",
        "NiagaraSystem",
        "/Niagara/Spark",
        "Spark",
    ]


def test_corrupt_input_exit_code(tmp_path: Path, capsys):
    path = tmp_path / "junk.bin"
    path.write_bytes(b"junk")
    assert main(["-r", "json", "inspect", str(path)]) == 2
    events = [json.loads(line) for line in capsys.readouterr().err.splitlines()]
    errors = [e for e in events if e.get("level") == "error"]
    assert errors and errors[0]["message"].startswith("E_TRUNCATED_INPUT")
    assert errors[0]["error"]["context"]["offset"] == 0


def test_missing_file_exit_code(tmp_path: Path):
    assert main(["-r", "silent", "inspect", str(tmp_path / "nope.bin")]) == 2


def test_huge_count_header_exit_code(tmp_path: Path):
    path = tmp_path / "corrupt.bin"
    header = (1).to_bytes(4, "little") + b"\xff\xff\xff\xff" + bytes(4 + 8)
    path.write_bytes(bytes(16) + header)
    assert main(["-r", "silent", "inspect", str(path)]) == 2

"""Command line interface for assetreg."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .api import (
    PopulateOptions,
    diff_registry_files,
    inspect_registry,
    load_registry,
    populate_registry,
    roundtrip_check,
    validate_registry_file,
)
from .codec.errors import RegistryError
from .inspector import format_registry
from .logging import configure_logging, section, step
from .reporting import (
    JsonLinesReporter,
    PlainReporter,
    RichReporter,
    SilentReporter,
    get_reporter,
    set_reporter,
    set_verbosity,
)


def _inspect_cmd(args: argparse.Namespace) -> int:
    info = inspect_registry(args.registry)
    print(json.dumps(info, indent=2, sort_keys=True))
    return 0


def _dump_cmd(args: argparse.Namespace) -> int:
    reg = load_registry(args.registry)
    print(format_registry(reg))
    return 0


def _validate_cmd(args: argparse.Namespace) -> int:
    issues = validate_registry_file(args.registry)
    if issues:
        with section(f"Issues in {args.registry.name}") as log:
            for issue in issues:
                log.warning(issue)
    return 1 if issues else 0


def _roundtrip_cmd(args: argparse.Namespace) -> int:
    step(f"re-encoding {args.registry.name}")
    return 0 if roundtrip_check(args.registry) else 1


def _diff_cmd(args: argparse.Namespace) -> int:
    step("diffing registries")
    result = diff_registry_files(args.left, args.right)
    count = result["summary"]["count"]
    get_reporter().summary(
        "diff", count=count, left=args.left.name, right=args.right.name
    )
    print(json.dumps(result, indent=2, sort_keys=True))
    return 1 if count else 0


def _populate_cmd(args: argparse.Namespace) -> int:
    populate_registry(
        PopulateOptions(
            registry_path=args.registry,
            assets_path=args.assets,
            output_path=args.output,
            rebuild=args.rebuild,
        )
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="assetreg", description="Asset registry inspection and editing"
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=["plain", "rich", "json", "silent"],
        default="plain",
        help="Reporter backend: plain (default), rich, json (JSONL events), silent",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    i = sub.add_parser("inspect", help="Print registry header and table counts")
    i.add_argument("registry", type=Path)
    i.set_defaults(func=_inspect_cmd)

    d = sub.add_parser("dump", help="Print every asset with names resolved")
    d.add_argument("registry", type=Path)
    d.set_defaults(func=_dump_cmd)

    v = sub.add_parser("validate", help="Check every table index is in range")
    v.add_argument("registry", type=Path)
    v.set_defaults(func=_validate_cmd)

    rt = sub.add_parser(
        "roundtrip", help="Decode and re-encode, comparing bytes"
    )
    rt.add_argument("registry", type=Path)
    rt.set_defaults(func=_roundtrip_cmd)

    df = sub.add_parser("diff", help="Diff two registries")
    df.add_argument("left", type=Path)
    df.add_argument("right", type=Path)
    df.set_defaults(func=_diff_cmd)

    po = sub.add_parser(
        "populate", help="Append entries for packages described in JSON/YAML"
    )
    po.add_argument("registry", type=Path)
    po.add_argument("assets", type=Path)
    po.add_argument("output", type=Path)
    po.add_argument(
        "--rebuild",
        action="store_true",
        help="Drop existing asset entries before populating",
    )
    po.set_defaults(func=_populate_cmd)

    return p


def _select_reporter(name: str) -> None:
    if name == "json":
        set_reporter(JsonLinesReporter(stream=sys.stderr))
    elif name == "silent":
        set_reporter(SilentReporter())
    elif name == "rich" and sys.stderr.isatty():
        set_reporter(RichReporter())
    else:
        set_reporter(PlainReporter())


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    args = build_parser().parse_args(argv)
    _select_reporter(args.reporter)
    set_verbosity(args.verbose)
    configure_logging(args.verbose)
    try:
        return args.func(args)
    except RegistryError as e:
        get_reporter().error(f"{e.code}: {e.message}", error=e.to_dict())
        return 2
    except FileNotFoundError as e:
        get_reporter().error(f"File not found: {e.filename or e}")
        return 2
    finally:
        get_reporter().flush()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

"""Command line entry point.

    smlogic list
    smlogic build adder --param word_size=16 --out adder.json
    smlogic build inverter --blueprints ~/Blueprints --name "inverter 8"
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

from dotenv import load_dotenv

from smlogic.config import settings
from smlogic.engine.config import set_default_config
from smlogic.engine.errors import SmLogicError
from smlogic.engine.scheme import Scheme
from smlogic.presets.registry import get_registry, load_presets
from smlogic.storage.blueprints import BlueprintStore

logger = logging.getLogger(__name__)


def _parse_params(raw: list[str]) -> dict[str, str]:
    params: dict[str, str] = {}
    for item in raw:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected key=value, got {item!r}")
        params[key] = value
    return params


def _slot_summary(scheme: Scheme) -> list[str]:
    lines = []
    for side, slots in (("input", scheme.inputs), ("output", scheme.outputs)):
        for slot in slots:
            lines.append(f"  {side:<6} {slot.name!r:<10} kind={slot.kind} size={slot.size}")
    return lines


def cmd_list(args: argparse.Namespace) -> int:
    for spec in get_registry().all():
        params = ", ".join(f"{k}={v}" for k, v in spec.params.items())
        print(f"{spec.name:<16} {params:<28} {spec.description}")
    return 0


def cmd_build(args: argparse.Namespace) -> int:
    registry = get_registry()
    try:
        spec = registry.get(args.preset)
    except KeyError:
        print(f"Unknown preset {args.preset!r}, see 'smlogic list'", file=sys.stderr)
        return 2

    start = time.perf_counter()
    scheme = spec.build(**_parse_params(args.param))
    if args.remove_unused:
        scheme.remove_unused()
    elapsed = (time.perf_counter() - start) * 1000

    print(f"{spec.name}: {scheme.shapes_count()} units, bounds {scheme.bounds} ({elapsed:.0f}ms)")
    for line in _slot_summary(scheme):
        print(line)

    blueprint = scheme.to_blueprint()
    if args.out:
        out = Path(args.out)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(json.dumps(blueprint.model_dump()), encoding="utf-8")
        print(f"Wrote {out}")

    folder = args.blueprints or settings.smlogic_blueprints_dir
    if folder:
        store = BlueprintStore.from_folder(folder)
        name = args.name or spec.name
        if store.save(name, blueprint, overwrite=not args.keep_existing):
            print(f"Saved blueprint {name!r} to {store.folder}")
        else:
            print(f"Blueprint {name!r} already exists, left untouched")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="smlogic", description=__doc__.splitlines()[0])
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="show registered presets")
    p_list.set_defaults(func=cmd_list)

    p_build = sub.add_parser("build", help="compile a preset into a blueprint")
    p_build.add_argument("preset")
    p_build.add_argument("--param", action="append", default=[], metavar="KEY=VALUE")
    p_build.add_argument("--name", help="blueprint name in the game (default: preset name)")
    p_build.add_argument("--out", help="write the blueprint json to this file")
    p_build.add_argument("--remove-unused", action="store_true", help="drop units no output depends on")
    p_build.add_argument("--blueprints", help="game blueprint folder (default: SMLOGIC_BLUEPRINTS_DIR)")
    p_build.add_argument("--keep-existing", action="store_true", help="do not overwrite a blueprint of the same name")
    p_build.set_defaults(func=cmd_build)
    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    logging.basicConfig(
        level=getattr(logging, settings.smlogic_log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    set_default_config(settings.compile_config())
    load_presets()

    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except (SmLogicError, ValueError, OSError) as e:
        logger.error("%s failed: %s", args.command, e)
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""
padpack — entry point.

Usage:
    python -m padpack pack input.json                 # print packed JSON
    python -m padpack pack input.json --out out.json  # write packed JSON
    python -m padpack pack input.json --png out.png   # also render a PNG
    python -m padpack pack input.json -v              # debug logging
"""

import json
import logging
import sys
from pathlib import Path

USAGE = "Usage: python -m padpack pack INPUT.json [--out OUT.json] [--png OUT.png] [-v]"


def _pack(args: list[str]) -> int:
    from padpack.placer import (
        PackEngine, parse_pack_input, pack_output_to_dict,
        validate_pack_input,
    )
    from padpack.visualize import render_png

    if not args or args[0].startswith("-"):
        print(USAGE)
        return 1
    in_path = Path(args[0])
    out_path = None
    png_path = None
    for i, a in enumerate(args):
        if a == "--out" and i + 1 < len(args):
            out_path = Path(args[i + 1])
        elif a == "--png" and i + 1 < len(args):
            png_path = Path(args[i + 1])

    try:
        pack_input = parse_pack_input(json.loads(in_path.read_text(encoding="utf-8")))
    except (OSError, ValueError, KeyError, TypeError) as exc:
        print(f"Cannot read {in_path}: {exc}")
        return 1

    errors = validate_pack_input(pack_input)
    if errors:
        for e in errors:
            print(f"  - {e}")
        return 1

    engine = PackEngine(pack_input)
    engine.solve()
    if png_path is not None:
        render_png(engine.visualize(), png_path)
    if engine.failed:
        print(engine.failure_reason)
        return 1

    text = json.dumps(pack_output_to_dict(engine.result), indent=2)
    if out_path is not None:
        out_path.write_text(text, encoding="utf-8")
    else:
        print(text)
    return 0


def main():
    args = sys.argv[1:]
    cmd = args[0] if args else ""
    verbose = "-v" in args
    args = [a for a in args if a != "-v"]

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if cmd == "pack":
        sys.exit(_pack(args[1:]))
    else:
        print(f"Unknown command: {cmd}")
        print(USAGE)
        sys.exit(1)


if __name__ == "__main__":
    main()

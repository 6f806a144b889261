"""
gridhdl — entry point.

Usage:
    python -m gridhdl compile design.json --text
    python -m gridhdl compile design.json --mts design.mts --lua design.lua
    python -m gridhdl gates
    python -m gridhdl serve --port 3000
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from gridhdl.catalog import catalog_to_dict
from gridhdl.netlist import load_netlist
from gridhdl.pipeline.config import LAYOUT_RULES
from gridhdl.pipeline.errors import LayoutError
from gridhdl.pipeline.layout import compile_netlist
from gridhdl.pipeline.render import grid_to_lua, grid_to_mts, grid_to_text, layout_to_dict


log = logging.getLogger("gridhdl")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="gridhdl",
        description="Yosys JSON netlist → placed and routed Minetest schematic",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    c = sub.add_parser("compile", help="Place and route a netlist")
    c.add_argument("netlist", help="Path to the Yosys JSON netlist")
    c.add_argument("-t", "--text", action="store_true", help="Print a text overview on stdout")
    c.add_argument("-l", "--lua", default=None, help="Write a Lua schematic to this file")
    c.add_argument("-m", "--mts", default=None, help="Write an MTS schematic to this file")
    c.add_argument("--json", default=None, help="Write a JSON layout summary to this file")
    c.add_argument("--workers", type=int, default=LAYOUT_RULES.route_workers,
                   help="Threads used for routing")
    c.add_argument("--lenient", action="store_true",
                   help="Warn about unused nets instead of failing")

    sub.add_parser("gates", help="List the supported gate types")

    sv = sub.add_parser("serve", help="Start the web service")
    sv.add_argument("--host", default="127.0.0.1", help="Host to bind")
    sv.add_argument("--port", type=int, default=8000, help="Port to bind")

    return p


def _compile(args: argparse.Namespace) -> int:
    rules = replace(LAYOUT_RULES, route_workers=max(1, args.workers))
    netlist = load_netlist(args.netlist)
    result = compile_netlist(netlist, rules, strict_unused=not args.lenient)

    if args.text:
        print("*** text overview ***")
        print(grid_to_text(result.grid), end="")
    if args.lua:
        log.info("Writing Lua schematic to %s", args.lua)
        Path(args.lua).write_text(grid_to_lua(result.grid), encoding="utf-8")
    if args.mts:
        log.info("Writing MTS schematic to %s", args.mts)
        Path(args.mts).write_bytes(grid_to_mts(result.grid))
    if args.json:
        log.info("Writing layout summary to %s", args.json)
        Path(args.json).write_text(json.dumps(layout_to_dict(result), indent=2),
                                   encoding="utf-8")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s",
    )

    if args.cmd == "compile":
        try:
            return _compile(args)
        except LayoutError as e:
            log.error("%s", e)
            return 1

    if args.cmd == "gates":
        for entry in catalog_to_dict()["gates"]:
            pins = ",".join(pin["name"] for pin in entry["inputs"])
            print(f"$_{entry['cell_type']}_  {entry['width']}x{entry['height']}  inputs={pins}")
        return 0

    if args.cmd == "serve":
        from gridhdl.web.server import main as serve
        serve(host=args.host, port=args.port)
        return 0

    return 2


if __name__ == "__main__":
    sys.exit(main())

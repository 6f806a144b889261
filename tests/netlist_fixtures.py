"""Netlist test fixtures — small hand-written Yosys JSON documents.

Each function returns a fresh dict, since compiling places the parsed
circuits in place.

  and_gate      y = a & b                        (1 gate, 3 stages)
  half_adder    s = a ^ b, c = a & b             (2 gates sharing inputs)
  constant_and  y = a & 1                        (one constant-true input)
  circular      AND and NOT feeding each other   (never schedulable)
  unused_input  y = !a, input b unused           (unused net 3)
  unused_middle y = a & c, input b unused        (net 3 between the AND inputs)
"""

from __future__ import annotations


def _cell(cell_type: str, **pins) -> dict:
    directions = {name: ("output" if name in ("Y", "Q") else "input") for name in pins}
    return {
        "hide_name": 1,
        "type": cell_type,
        "parameters": {},
        "attributes": {},
        "port_directions": directions,
        "connections": {name: [bit] for name, bit in pins.items()},
    }


def _module(ports: dict, cells: dict) -> dict:
    return {
        "creator": "Yosys 0.9",
        "modules": {
            "top": {
                "attributes": {},
                "ports": ports,
                "cells": cells,
                "netnames": {},
            }
        },
    }


def and_gate() -> dict:
    return _module(
        ports={
            "a": {"direction": "input", "bits": [2]},
            "b": {"direction": "input", "bits": [3]},
            "y": {"direction": "output", "bits": [4]},
        },
        cells={"$abc$1": _cell("$_AND_", A=2, B=3, Y=4)},
    )


def half_adder() -> dict:
    return _module(
        ports={
            "a": {"direction": "input", "bits": [2]},
            "b": {"direction": "input", "bits": [3]},
            "s": {"direction": "output", "bits": [4]},
            "c": {"direction": "output", "bits": [5]},
        },
        cells={
            "$abc$1": _cell("$_XOR_", A=2, B=3, Y=4),
            "$abc$2": _cell("$_AND_", A=2, B=3, Y=5),
        },
    )


def constant_and() -> dict:
    return _module(
        ports={
            "a": {"direction": "input", "bits": [2]},
            "y": {"direction": "output", "bits": [3]},
        },
        cells={"$abc$1": _cell("$_AND_", A=2, B="1", Y=3)},
    )


def circular() -> dict:
    return _module(
        ports={
            "a": {"direction": "input", "bits": [2]},
            "y": {"direction": "output", "bits": [5]},
        },
        cells={
            "$abc$1": _cell("$_AND_", A=2, B=4, Y=5),
            "$abc$2": _cell("$_NOT_", A=5, Y=4),
        },
    )


def unused_input() -> dict:
    return _module(
        ports={
            "a": {"direction": "input", "bits": [2]},
            "b": {"direction": "input", "bits": [3]},
            "y": {"direction": "output", "bits": [4]},
        },
        cells={"$abc$1": _cell("$_NOT_", A=2, Y=4)},
    )


def unused_middle() -> dict:
    return _module(
        ports={
            "a": {"direction": "input", "bits": [2]},
            "b": {"direction": "input", "bits": [3]},
            "c": {"direction": "input", "bits": [4]},
            "y": {"direction": "output", "bits": [5]},
        },
        cells={"$abc$1": _cell("$_AND_", A=2, B=4, Y=5)},
    )

"""Grid serialization — text overview, Minetest schematics, JSON summary.

Schematics are two layers high: a stone floor (z = 0) and the circuit
layer on top of it (z = 1).  Minetest's x axis runs along grid rows and
its z axis along grid columns.
"""

from __future__ import annotations

import struct
import zlib
from typing import TYPE_CHECKING

from .grid import Grid, GridBoundsError

if TYPE_CHECKING:
    from gridhdl.pipeline.layout import LayoutResult


# Node names in the order the MTS name table lists them.
NODE_NAMES = (
    "air",
    "stone",
    "mesecons_lamp:lamp_off",
    "mesecons_walllever:wall_lever_off",
    "mesecons_gates:and_off",
    "mesecons_gates:nand_off",
    "mesecons_gates:nor_off",
    "mesecons_gates:not_off",
    "mesecons_gates:or_off",
    "mesecons_gates:xor_off",
    "mesecons:mesecon_off",
    "mesecons_insulated:insulated_off",
    "mesecons_extrawires:corner_off",
    "mesecons_extrawires:tjunction_off",
    "mesecons_extrawires:crossover_off",
    "mesecons_torch:mesecon_torch_off",
)
_NODE_IDS = {name: idx for idx, name in enumerate(NODE_NAMES)}

_I16_MAX = 2 ** 15 - 1


def grid_to_text(grid: Grid) -> str:
    """Render the used extent with box-drawing characters, one line per row."""
    return "".join(
        "".join(cell.char for cell in row) + "\n"
        for row in grid.rows()
    )


def _layer_cells(grid: Grid):
    """Yield (layer, cell) in schematic order: column, layer, row."""
    width, height = grid.dimensions
    for x in range(width):
        for z in range(2):
            for y in range(height):
                yield z, grid.get(x, y)


def grid_to_lua(grid: Grid) -> str:
    """Minetest Lua schematic table for the grid."""
    width, height = grid.dimensions
    lines = [
        "schematic = {",
        f"\tsize = {{x={height}, y=2, z={width}}},",
        "\tdata = {",
    ]
    for z, cell in _layer_cells(grid):
        if z == 0:
            lines.append('\t\t{name="stone"},')
        else:
            lines.append(f'\t\t{{name="{cell.node_name}", param2={cell.param2}}},')
    lines.append("\t}")
    lines.append("}")
    return "\n".join(lines) + "\n"


def grid_to_mts(grid: Grid) -> bytes:
    """Minetest MTS (version 1) schematic for the grid.

    Raises
    ------
    GridBoundsError
        If the grid does not fit the format's signed 16-bit sizes.
    """
    width, height = grid.dimensions
    if height > _I16_MAX or width >= _I16_MAX:
        raise GridBoundsError(width, height, _I16_MAX, _I16_MAX)

    header = bytearray(b"MTSM")
    header += struct.pack(">H", 1)
    header += struct.pack(">hhh", height, 2, width)
    header += struct.pack(">H", len(NODE_NAMES))
    for name in NODE_NAMES:
        raw = name.encode("ascii")
        header += struct.pack(">H", len(raw)) + raw

    body = bytearray()
    for z, cell in _layer_cells(grid):
        name = "stone" if z == 0 else cell.node_name
        body += struct.pack(">H", _NODE_IDS[name])
    body += bytes(2 * width * height)   # param1
    for z, cell in _layer_cells(grid):
        body.append(0 if z == 0 else cell.param2)

    return bytes(header) + zlib.compress(bytes(body), 9)


def layout_to_dict(result: LayoutResult) -> dict:
    """Serialize a LayoutResult to a JSON-safe dict."""
    width, height = result.grid.dimensions
    return {
        "width": width,
        "height": height,
        "stages": [
            {
                "gates": len(stage),
                "kinds": sorted({c.kind.name for c in stage}),
                "channel_substeps": len(steps),
            }
            for stage, steps in zip(result.stages, result.substeps_per_stage + [[]])
        ],
        "gate_count": result.gate_count,
        "substep_count": result.substep_count,
        "rows": grid_to_text(result.grid).splitlines(),
    }

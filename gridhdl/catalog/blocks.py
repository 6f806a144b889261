"""Grid cell palette — the closed set of blocks a layout is built from.

A cell is one of: air, horizontal / vertical wire, crossing, corner
(4 orientations), T-junction (4 orientations), star, gate body (tagged
with the Mesecons gate block it stands for) or constant source.

Orientation names list the sides a cell connects to, so a
``Corner.DOWN_RIGHT`` corner joins the cell below with the cell to the
right (``┌``).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class GateBlock(Enum):
    """Physical gate blocks, keyed by their Mesecons node name."""

    INPUT = "mesecons_walllever:wall_lever_off"
    OUTPUT = "mesecons_lamp:lamp_off"
    FORWARD = "mesecons_insulated:insulated_off"
    AND = "mesecons_gates:and_off"
    NAND = "mesecons_gates:nand_off"
    OR = "mesecons_gates:or_off"
    NOR = "mesecons_gates:nor_off"
    NOT = "mesecons_gates:not_off"
    XOR = "mesecons_gates:xor_off"


class Corner(Enum):
    LEFT_UP = "left_up"
    LEFT_DOWN = "left_down"
    DOWN_RIGHT = "down_right"
    UP_RIGHT = "up_right"


class Tee(Enum):
    LEFT_RIGHT_DOWN = "left_right_down"
    LEFT_RIGHT_UP = "left_right_up"
    RIGHT_UP_DOWN = "right_up_down"
    LEFT_UP_DOWN = "left_up_down"


class CellKind(Enum):
    AIR = "air"
    WIRE_H = "wire_h"
    WIRE_V = "wire_v"
    CROSSING = "crossing"
    CORNER = "corner"
    TEE = "tee"
    STAR = "star"
    GATE = "gate"
    CONSTANT = "constant"


@dataclass(frozen=True)
class Cell:
    """One grid position.  Exactly one kind; orientation where it applies."""

    kind: CellKind
    corner: Corner | None = None
    tee: Tee | None = None
    gate: GateBlock | None = None

    def __str__(self) -> str:
        return self.char

    @property
    def char(self) -> str:
        """Single character used by the text overview."""
        if self.kind is CellKind.CORNER:
            return _CORNER_CHARS[self.corner]
        if self.kind is CellKind.TEE:
            return _TEE_CHARS[self.tee]
        if self.kind is CellKind.GATE:
            return _GATE_CHARS.get(self.gate, "▓")
        return _KIND_CHARS[self.kind]

    @property
    def node_name(self) -> str:
        """Mesecons node placed for this cell in a schematic."""
        if self.kind is CellKind.GATE:
            return self.gate.value
        return _KIND_NODES[self.kind]

    @property
    def param2(self) -> int:
        """Minetest facedir rotation for this cell."""
        if self.kind is CellKind.WIRE_H:
            return 3
        if self.kind is CellKind.CORNER:
            return _CORNER_PARAM2[self.corner]
        if self.kind is CellKind.TEE:
            return _TEE_PARAM2[self.tee]
        if self.kind is CellKind.GATE:
            return 0 if self.gate in (GateBlock.INPUT, GateBlock.OUTPUT) else 3
        return 0


def corner(orientation: Corner) -> Cell:
    return Cell(CellKind.CORNER, corner=orientation)


def tee(rotation: Tee) -> Cell:
    return Cell(CellKind.TEE, tee=rotation)


def gate(block: GateBlock) -> Cell:
    return Cell(CellKind.GATE, gate=block)


AIR = Cell(CellKind.AIR)
WIRE_H = Cell(CellKind.WIRE_H)
WIRE_V = Cell(CellKind.WIRE_V)
CROSSING = Cell(CellKind.CROSSING)
STAR = Cell(CellKind.STAR)
CONSTANT = Cell(CellKind.CONSTANT)


_KIND_CHARS = {
    CellKind.AIR: " ",
    CellKind.WIRE_H: "─",
    CellKind.WIRE_V: "│",
    CellKind.CROSSING: "╂",
    CellKind.STAR: "┼",
    CellKind.CONSTANT: "o",
}

_CORNER_CHARS = {
    Corner.DOWN_RIGHT: "┌",
    Corner.LEFT_UP: "┘",
    Corner.LEFT_DOWN: "┐",
    Corner.UP_RIGHT: "└",
}

_TEE_CHARS = {
    Tee.LEFT_RIGHT_DOWN: "┬",
    Tee.LEFT_RIGHT_UP: "┴",
    Tee.RIGHT_UP_DOWN: "├",
    Tee.LEFT_UP_DOWN: "┤",
}

_GATE_CHARS = {
    GateBlock.INPUT: "░",
    GateBlock.FORWARD: "»",
    GateBlock.NOT: "¬",
    GateBlock.OR: "v",
    GateBlock.AND: "^",
}

_KIND_NODES = {
    CellKind.AIR: "air",
    CellKind.WIRE_H: "mesecons_insulated:insulated_off",
    CellKind.WIRE_V: "mesecons_insulated:insulated_off",
    CellKind.CROSSING: "mesecons_extrawires:crossover_off",
    CellKind.CORNER: "mesecons_extrawires:corner_off",
    CellKind.TEE: "mesecons_extrawires:tjunction_off",
    CellKind.STAR: "mesecons:mesecon_off",
    CellKind.CONSTANT: "mesecons_torch:mesecon_torch_off",
}

_CORNER_PARAM2 = {
    Corner.LEFT_UP: 0,
    Corner.UP_RIGHT: 1,
    Corner.DOWN_RIGHT: 2,
    Corner.LEFT_DOWN: 3,
}

_TEE_PARAM2 = {
    Tee.LEFT_UP_DOWN: 0,
    Tee.LEFT_RIGHT_UP: 1,
    Tee.RIGHT_UP_DOWN: 2,
    Tee.LEFT_RIGHT_DOWN: 3,
}

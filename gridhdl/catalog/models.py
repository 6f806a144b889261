"""Catalog dataclasses — gate kinds and their static shapes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from gridhdl.pipeline.errors import LayoutError

from .blocks import Cell


class GateKind(Enum):
    """Logic-function kinds known to the layout engine.

    The value is the Yosys cell type (``$_AND_`` without the ``$_``
    decoration) for kinds that can appear in a netlist.  The three
    synthetic kinds never come from a netlist.
    """

    AND = "AND"
    NAND = "NAND"
    ANDNOT = "ANDNOT"
    OR = "OR"
    NOR = "NOR"
    ORNOT = "ORNOT"
    NOT = "NOT"
    XOR = "XOR"
    XNOR = "XNOR"
    BUF = "BUF"
    DFF_P = "DFF_P"

    # Synthetic circuits inserted by the compiler.
    INPUT = "_input"
    OUTPUT = "_output"
    FORWARD = "_forward"

    @property
    def synthetic(self) -> bool:
        return self.value.startswith("_")


@dataclass(frozen=True)
class GateShape:
    """Static footprint of a gate kind.

    ``pattern`` is row-major, ``width * height`` cells.  Pin offsets are
    rows relative to the gate's anchor; inputs enter on the column left
    of the gate, outputs leave on its right edge.
    """

    kind: GateKind
    width: int
    height: int
    pattern: tuple[Cell, ...]
    input_names: tuple[str, ...]
    input_offsets: tuple[int, ...]
    output_names: tuple[str, ...]
    output_offsets: tuple[int, ...]
    can_swap_inputs: bool

    def cell_at(self, dx: int, dy: int) -> Cell:
        return self.pattern[dy * self.width + dx]

    def input_offset(self, idx: int) -> int:
        return self.input_offsets[idx]

    def output_offset(self, idx: int) -> int:
        return self.output_offsets[idx]


@dataclass
class ValidationError:
    kind: str
    field: str
    message: str

    def __str__(self) -> str:
        return f"[{self.kind}] {self.field}: {self.message}"


class UnknownGateError(LayoutError):
    """Raised when a netlist names a cell type the catalog does not know."""

    def __init__(self, cell_type: str) -> None:
        self.cell_type = cell_type
        super().__init__(f"Unknown gate type '{cell_type}'")

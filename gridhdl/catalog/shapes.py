"""Gate shape table — static footprints, lookup, and validation."""

from __future__ import annotations

from .blocks import (
    AIR, CROSSING, WIRE_H, WIRE_V,
    Corner, GateBlock, Tee, corner, gate, tee,
)
from .models import GateKind, GateShape, UnknownGateError, ValidationError


# ── Shape builders ─────────────────────────────────────────────────


def _two_input(kind: GateKind, block: GateBlock) -> GateShape:
    """1×3 gate: inputs on rows 0 and 2 folded into the body on row 1."""
    return GateShape(
        kind=kind,
        width=1,
        height=3,
        pattern=(
            corner(Corner.LEFT_DOWN),
            gate(block),
            corner(Corner.LEFT_UP),
        ),
        input_names=("A", "B"),
        input_offsets=(0, 2),
        output_names=("Y",),
        output_offsets=(1,),
        can_swap_inputs=True,
    )


def _inverted_two_input(kind: GateKind, block: GateBlock) -> GateShape:
    """2×3 gate: a two-input body followed by a NOT."""
    return GateShape(
        kind=kind,
        width=2,
        height=3,
        pattern=(
            corner(Corner.LEFT_DOWN), AIR,
            gate(block), gate(GateBlock.NOT),
            corner(Corner.LEFT_UP), AIR,
        ),
        input_names=("A", "B"),
        input_offsets=(0, 2),
        output_names=("Y",),
        output_offsets=(1,),
        can_swap_inputs=True,
    )


def _negated_second_input(kind: GateKind, block: GateBlock) -> GateShape:
    """2×3 gate computing ``A op !B`` — the inputs are not interchangeable."""
    return GateShape(
        kind=kind,
        width=2,
        height=3,
        pattern=(
            WIRE_H, corner(Corner.LEFT_DOWN),
            AIR, gate(block),
            gate(GateBlock.NOT), corner(Corner.LEFT_UP),
        ),
        input_names=("A", "B"),
        input_offsets=(0, 2),
        output_names=("Y",),
        output_offsets=(1,),
        can_swap_inputs=False,
    )


def _single_cell(kind: GateKind, block: GateBlock, *, has_input: bool = True,
                 has_output: bool = True) -> GateShape:
    return GateShape(
        kind=kind,
        width=1,
        height=1,
        pattern=(gate(block),),
        input_names=("A",) if has_input else (),
        input_offsets=(0,) if has_input else (),
        output_names=("Y",) if has_output else (),
        output_offsets=(0,) if has_output else (),
        can_swap_inputs=True,
    )


def _dff_positive() -> GateShape:
    """7×7 positive-edge D flip-flop built from NOT / AND / NOR blocks."""
    not_, and_, nor = gate(GateBlock.NOT), gate(GateBlock.AND), gate(GateBlock.NOR)
    ld, lu = corner(Corner.LEFT_DOWN), corner(Corner.LEFT_UP)
    dr, ur = corner(Corner.DOWN_RIGHT), corner(Corner.UP_RIGHT)
    lrd, lud = tee(Tee.LEFT_RIGHT_DOWN), tee(Tee.LEFT_UP_DOWN)
    return GateShape(
        kind=GateKind.DFF_P,
        width=7,
        height=7,
        pattern=(
            lrd, not_, ld, AIR, AIR, AIR, AIR,
            WIRE_V, AIR, and_, WIRE_H, ld, AIR, dr,
            CROSSING, WIRE_H, lud, AIR, nor, lrd, lu,
            WIRE_V, AIR, WIRE_V, AIR, ur, CROSSING, ld,
            WIRE_V, AIR, WIRE_V, AIR, dr, lu, WIRE_V,
            WIRE_V, AIR, and_, ld, nor, WIRE_H, lu,
            ur, WIRE_H, lu, ur, lu, AIR, AIR,
        ),
        input_names=("C", "D"),
        input_offsets=(0, 2),
        output_names=("Q",),
        output_offsets=(1,),
        can_swap_inputs=False,
    )


SHAPES: dict[GateKind, GateShape] = {
    shape.kind: shape
    for shape in (
        _two_input(GateKind.AND, GateBlock.AND),
        _two_input(GateKind.OR, GateBlock.OR),
        _two_input(GateKind.XOR, GateBlock.XOR),
        _two_input(GateKind.NAND, GateBlock.NAND),
        _two_input(GateKind.NOR, GateBlock.NOR),
        _inverted_two_input(GateKind.XNOR, GateBlock.XOR),
        _negated_second_input(GateKind.ANDNOT, GateBlock.AND),
        _negated_second_input(GateKind.ORNOT, GateBlock.OR),
        _single_cell(GateKind.BUF, GateBlock.FORWARD),
        _single_cell(GateKind.NOT, GateBlock.NOT),
        _single_cell(GateKind.INPUT, GateBlock.INPUT, has_input=False),
        _single_cell(GateKind.OUTPUT, GateBlock.OUTPUT, has_output=False),
        _single_cell(GateKind.FORWARD, GateBlock.FORWARD),
        _dff_positive(),
    )
}


# ── Lookup ─────────────────────────────────────────────────────────


def get_shape(kind: GateKind) -> GateShape:
    """Return the static shape for *kind*."""
    return SHAPES[kind]


def kind_from_cell_type(cell_type: str) -> GateKind:
    """Map a Yosys cell type (``AND`` or ``$_AND_``) to a gate kind.

    Raises
    ------
    UnknownGateError
        If the type is not in the catalog or names a synthetic kind.
    """
    name = cell_type
    if name.startswith("$_") and name.endswith("_"):
        name = name[2:-1]
    for kind in GateKind:
        if not kind.synthetic and kind.value == name:
            return kind
    raise UnknownGateError(cell_type)


def netlist_kinds() -> list[GateKind]:
    """Gate kinds that may appear in a netlist (synthetic kinds excluded)."""
    return [k for k in GateKind if not k.synthetic]


# ── Validation ─────────────────────────────────────────────────────


def validate_shape(shape: GateShape) -> list[ValidationError]:
    """Run all consistency checks on a single shape."""
    errs: list[ValidationError] = []
    name = shape.kind.name

    if shape.width <= 0 or shape.height <= 0:
        errs.append(ValidationError(name, "footprint", "Width and height must be > 0"))
    if len(shape.pattern) != shape.width * shape.height:
        errs.append(ValidationError(
            name, "pattern",
            f"Expected {shape.width * shape.height} cells, got {len(shape.pattern)}",
        ))
    if len(shape.input_names) != len(shape.input_offsets):
        errs.append(ValidationError(name, "inputs", "Names and offsets differ in length"))
    if len(shape.output_names) != len(shape.output_offsets):
        errs.append(ValidationError(name, "outputs", "Names and offsets differ in length"))

    for field, offsets in (("input_offsets", shape.input_offsets),
                           ("output_offsets", shape.output_offsets)):
        for off in offsets:
            if not 0 <= off < shape.height:
                errs.append(ValidationError(name, field, f"Row {off} outside footprint"))

    if len(set(shape.input_offsets)) != len(shape.input_offsets):
        errs.append(ValidationError(name, "input_offsets", "Two inputs share a row"))

    if shape.can_swap_inputs and len(shape.input_offsets) == 2 and shape.kind in (
        GateKind.ANDNOT, GateKind.ORNOT, GateKind.DFF_P,
    ):
        errs.append(ValidationError(name, "can_swap_inputs", "Inputs are not commutative"))

    return errs


def validate_catalog() -> list[ValidationError]:
    """Validate every shape in the table; empty list means consistent."""
    errs: list[ValidationError] = []
    for kind in GateKind:
        if kind not in SHAPES:
            errs.append(ValidationError(kind.name, "shape", "Missing from catalog"))
            continue
        errs.extend(validate_shape(SHAPES[kind]))
    return errs

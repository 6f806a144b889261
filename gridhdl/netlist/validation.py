"""Netlist validation — check a Yosys document before it is converted."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from gridhdl.catalog import GateShape, UnknownGateError, get_shape, kind_from_cell_type

from .models import CONSTANT_BITS, YosysCell, YosysJson


def pin_direction(cell: YosysCell, pin: str, shape: GateShape) -> str | None:
    """Direction of *pin*: from the cell, else from the gate's pin names."""
    if pin in cell.port_directions:
        return cell.port_directions[pin]
    if pin in shape.input_names:
        return "input"
    if pin in shape.output_names:
        return "output"
    return None


def _check_bits(where: str, bits: list, errors: list[str]) -> None:
    for bit in bits:
        if isinstance(bit, str) and bit not in CONSTANT_BITS:
            errors.append(f"{where}: unknown constant bit {bit!r}")


def _validate_cell(name: str, cell: YosysCell, errors: list[str]) -> None:
    try:
        kind = kind_from_cell_type(cell.type)
    except UnknownGateError:
        errors.append(f"Cell '{name}': unknown cell type '{cell.type}'")
        return
    shape = get_shape(kind)

    for pin, bits in cell.connections.items():
        if len(bits) != 1:
            errors.append(f"Cell '{name}': connection '{pin}' has {len(bits)} bits (expected 1)")
        _check_bits(f"Cell '{name}' pin '{pin}'", bits, errors)

    inputs = [p for p in cell.connections if pin_direction(cell, p, shape) == "input"]
    outputs = [p for p in cell.connections if pin_direction(cell, p, shape) == "output"]
    unknown = [p for p in cell.connections if pin_direction(cell, p, shape) is None]
    for pin in unknown:
        errors.append(f"Cell '{name}': unknown pin '{pin}' on {kind.name}")
    if len(inputs) != len(shape.input_names):
        errors.append(
            f"Cell '{name}': {kind.name} needs {len(shape.input_names)} inputs, got {len(inputs)}"
        )
    if len(outputs) != len(shape.output_names):
        errors.append(
            f"Cell '{name}': {kind.name} needs {len(shape.output_names)} outputs, got {len(outputs)}"
        )


def validate_netlist(data: dict[str, Any]) -> list[str]:
    """Validate a raw Yosys JSON document. Returns error messages (empty = valid)."""
    try:
        doc = YosysJson.model_validate(data)
    except PydanticValidationError as e:
        return [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]

    errors: list[str] = []

    # ── Exactly one module ──
    if len(doc.modules) != 1:
        errors.append(f"Expected exactly one module, found {len(doc.modules)}")
        return errors
    module = next(iter(doc.modules.values()))

    # ── Ports ──
    for name, port in module.ports.items():
        if port.direction == "inout":
            errors.append(f"Port '{name}': inout ports are not supported")
        _check_bits(f"Port '{name}'", port.bits, errors)

    # ── Cells ──
    for name, cell in module.cells.items():
        _validate_cell(name, cell, errors)

    # ── Each net driven once ──
    drivers: dict[int, str] = {}
    for name, port in module.ports.items():
        if port.direction == "input":
            for bit in port.bits:
                if isinstance(bit, int):
                    drivers.setdefault(bit, f"port '{name}'")
    for name, cell in module.cells.items():
        try:
            shape = get_shape(kind_from_cell_type(cell.type))
        except UnknownGateError:
            continue  # already reported
        for pin, bits in cell.connections.items():
            if pin_direction(cell, pin, shape) != "output":
                continue
            for bit in bits:
                if not isinstance(bit, int):
                    continue
                if bit in drivers:
                    errors.append(
                        f"Net {bit} driven by both {drivers[bit]} and cell '{name}'"
                    )
                else:
                    drivers[bit] = f"cell '{name}'"

    return errors

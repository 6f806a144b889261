"""Netlist parsing — turn a Yosys module into unplaced circuits."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from gridhdl.catalog import GateKind, get_shape, kind_from_cell_type
from gridhdl.pipeline.placer.models import Circuit, Port

from .models import Netlist, NetlistError, YosysCell, YosysJson, bit_to_connection
from .validation import pin_direction, validate_netlist


log = logging.getLogger(__name__)


def _cell_to_circuit(name: str, cell: YosysCell) -> Circuit:
    kind = kind_from_cell_type(cell.type)
    shape = get_shape(kind)
    # Inputs by pin name so gates always see A before B (C before D).
    inputs = [
        Port(bit_to_connection(bits[0]))
        for pin, bits in sorted(cell.connections.items())
        if pin_direction(cell, pin, shape) == "input"
    ]
    outputs = [
        Port(bit_to_connection(bits[0]))
        for pin, bits in cell.connections.items()
        if pin_direction(cell, pin, shape) == "output"
    ]
    return Circuit(kind, inputs=inputs, outputs=outputs, name=name)


def _circuit_order(circuit: Circuit) -> tuple:
    """External inputs first by net, then gates by their first input."""
    if circuit.kind is GateKind.INPUT:
        return (0, circuit.outputs[0].connection.sort_key())
    if circuit.inputs:
        return (1, circuit.inputs[0].connection.sort_key())
    return (1, (0, 0))


def parse_netlist(data: dict[str, Any] | YosysJson) -> Netlist:
    """Convert a Yosys JSON document into a :class:`Netlist`.

    The document is assumed to be valid (see ``validate_netlist``).

    Raises
    ------
    NetlistError
        If the document does not hold exactly one module.
    """
    doc = data if isinstance(data, YosysJson) else YosysJson.model_validate(data)
    if len(doc.modules) != 1:
        raise NetlistError([f"Expected exactly one module, found {len(doc.modules)}"])
    module_name, module = next(iter(doc.modules.items()))

    circuits = [_cell_to_circuit(name, cell) for name, cell in module.cells.items()]

    for port in module.ports.values():
        if port.direction == "input":
            for bit in port.bits:
                circuits.append(Circuit.external_input(bit_to_connection(bit)))

    output_ports = sorted(
        (
            bit_to_connection(bit)
            for port in module.ports.values()
            if port.direction == "output"
            for bit in port.bits
        ),
        key=lambda c: c.sort_key(),
    )

    circuits.sort(key=_circuit_order)
    log.info("Parsed module '%s': %d cells, %d outputs",
             module_name, len(module.cells), len(output_ports))
    return Netlist(circuits=circuits, output_ports=output_ports, name=module_name)


def load_netlist(path: str | Path) -> Netlist:
    """Read, validate and parse a Yosys JSON file.

    Raises
    ------
    NetlistError
        If the file cannot be read, is not JSON, or fails validation.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise NetlistError([f"Cannot read {path}: {e}"]) from e
    except json.JSONDecodeError as e:
        raise NetlistError([f"{path} is not valid JSON: {e}"]) from e

    if not isinstance(data, dict):
        raise NetlistError([f"{path}: top level must be a JSON object"])
    errors = validate_netlist(data)
    if errors:
        raise NetlistError(errors)
    return parse_netlist(data)

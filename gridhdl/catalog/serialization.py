"""Catalog serialization — convert gate shapes to JSON-safe dicts."""

from __future__ import annotations

from .models import GateShape
from .shapes import SHAPES, netlist_kinds


def shape_to_dict(shape: GateShape) -> dict:
    """Convert a GateShape to a JSON-serializable dict."""
    return {
        "kind": shape.kind.name,
        "cell_type": shape.kind.value,
        "width": shape.width,
        "height": shape.height,
        "inputs": [
            {"name": n, "row": off}
            for n, off in zip(shape.input_names, shape.input_offsets)
        ],
        "outputs": [
            {"name": n, "row": off}
            for n, off in zip(shape.output_names, shape.output_offsets)
        ],
        "can_swap_inputs": shape.can_swap_inputs,
        "pattern": [
            "".join(shape.cell_at(x, y).char for x in range(shape.width))
            for y in range(shape.height)
        ],
    }


def catalog_to_dict() -> dict:
    """Serialize every gate kind a netlist may use."""
    return {
        "gates": [shape_to_dict(SHAPES[k]) for k in netlist_kinds()],
    }

"""Gate catalog — cell palette, gate shapes, lookup, and serialization."""

from .blocks import (
    Cell, CellKind, Corner, Tee, GateBlock,
    AIR, WIRE_H, WIRE_V, CROSSING, STAR, CONSTANT,
    corner, tee, gate,
)
from .models import GateKind, GateShape, ValidationError, UnknownGateError
from .shapes import SHAPES, get_shape, kind_from_cell_type, netlist_kinds, validate_catalog
from .serialization import catalog_to_dict, shape_to_dict

__all__ = [
    # Blocks
    "Cell", "CellKind", "Corner", "Tee", "GateBlock",
    "AIR", "WIRE_H", "WIRE_V", "CROSSING", "STAR", "CONSTANT",
    "corner", "tee", "gate",
    # Models
    "GateKind", "GateShape", "ValidationError", "UnknownGateError",
    # Shapes
    "SHAPES", "get_shape", "kind_from_cell_type", "netlist_kinds", "validate_catalog",
    # Serialization
    "catalog_to_dict", "shape_to_dict",
]

"""Netlist — read synthesized Yosys JSON into unplaced circuits.

Submodules:
  models      Pydantic Yosys models, Netlist record, NetlistError.
  validation  Collect every problem in a document without raising.
  parsing     Cells to circuits, input pins, sorted output ports.
"""

from .models import (
    YosysJson, YosysModule, YosysPort, YosysCell,
    Netlist, NetlistError, bit_to_connection,
)
from .validation import validate_netlist
from .parsing import parse_netlist, load_netlist

__all__ = [
    # Models
    "YosysJson", "YosysModule", "YosysPort", "YosysCell",
    "Netlist", "NetlistError", "bit_to_connection",
    # Validation
    "validate_netlist",
    # Parsing
    "parse_netlist", "load_netlist",
]

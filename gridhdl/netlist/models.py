"""Yosys JSON netlist models (pydantic) and the parsed netlist record.

Only the parts of the Yosys ``write_json`` output the layout needs are
modelled; everything else in the document is ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

from pydantic import BaseModel

from gridhdl.pipeline.errors import LayoutError
from gridhdl.pipeline.placer.models import Circuit, PinConnection


# A bit is a net id or one of the constant strings "0", "1", "x", "z".
Bit = Union[int, str]

CONSTANT_BITS = {"0": False, "1": True, "x": False, "z": False}


class YosysPort(BaseModel):
    direction: Literal["input", "output", "inout"]
    bits: list[Bit] = []


class YosysCell(BaseModel):
    type: str
    connections: dict[str, list[Bit]] = {}
    port_directions: dict[str, str] = {}
    hide_name: int = 0


class YosysModule(BaseModel):
    ports: dict[str, YosysPort] = {}
    cells: dict[str, YosysCell] = {}


class YosysJson(BaseModel):
    creator: str = ""
    modules: dict[str, YosysModule]


class NetlistError(LayoutError):
    """Raised when a netlist cannot be read or fails validation."""

    def __init__(self, messages: list[str]) -> None:
        self.messages = messages
        super().__init__("Invalid netlist:\n  " + "\n  ".join(messages))


@dataclass
class Netlist:
    """Unplaced circuits and the external outputs of one module."""

    circuits: list[Circuit] = field(default_factory=list)
    output_ports: list[PinConnection] = field(default_factory=list)
    name: str = ""


def bit_to_connection(bit: Bit) -> PinConnection:
    """Map a Yosys bit to a pin connection ("x" and "z" read as low)."""
    if isinstance(bit, int):
        return PinConnection.of_net(bit)
    if bit in CONSTANT_BITS:
        return PinConnection.constant(CONSTANT_BITS[bit])
    raise NetlistError([f"Unknown constant bit {bit!r}"])

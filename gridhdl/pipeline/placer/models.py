"""Placer dataclasses — pin connections, ports, and gate placement records."""

from __future__ import annotations

from dataclasses import dataclass, field

from gridhdl.catalog import GateKind, GateShape, get_shape
from gridhdl.pipeline.errors import LayoutError
from gridhdl.pipeline.router.models import CONSTANT, OCCUPIED, ChannelState


# ── Pins ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class PinConnection:
    """What a pin is wired to: a net, or a constant level."""

    net: int | None = None
    value: bool = False     # constant level, only when net is None

    @classmethod
    def of_net(cls, net: int) -> PinConnection:
        return cls(net=net)

    @classmethod
    def constant(cls, value: bool) -> PinConnection:
        return cls(net=None, value=value)

    @property
    def is_constant(self) -> bool:
        return self.net is None

    def to_channel_state(self) -> ChannelState:
        if self.net is not None:
            return ChannelState.of_net(self.net)
        return CONSTANT if self.value else OCCUPIED

    def sort_key(self) -> tuple[int, int]:
        """Nets order by id; constants order before every net."""
        return (1, self.net) if self.net is not None else (0, 0)

    def __repr__(self) -> str:
        if self.net is not None:
            return f"Net({self.net})"
        return f"Const({int(self.value)})"


@dataclass(frozen=True)
class Position:
    x: int
    y: int


@dataclass
class Port:
    connection: PinConnection
    position: Position | None = None


class PlacementError(LayoutError):
    """Raised when a gate cannot be placed (or is placed twice)."""


# ── Circuits ───────────────────────────────────────────────────────


@dataclass
class Circuit:
    """A gate instance and its placement state.

    Created unplaced, placed exactly once by the placer, then moved along
    x only once the channel in front of it has been routed.
    """

    kind: GateKind
    inputs: list[Port] = field(default_factory=list)
    outputs: list[Port] = field(default_factory=list)
    position: Position | None = None
    name: str = ""

    # ── Constructors for synthetic circuits ────────────────────────

    @classmethod
    def external_input(cls, connection: PinConnection) -> Circuit:
        return cls(GateKind.INPUT, outputs=[Port(connection)], name="input")

    @classmethod
    def external_output(cls, connection: PinConnection) -> Circuit:
        return cls(GateKind.OUTPUT, inputs=[Port(connection)], name="output")

    @classmethod
    def forwarding(cls, net: int) -> Circuit:
        conn = PinConnection.of_net(net)
        return cls(GateKind.FORWARD, inputs=[Port(conn)], outputs=[Port(conn)],
                   name="forward")

    # ── Shape ──────────────────────────────────────────────────────

    @property
    def shape(self) -> GateShape:
        return get_shape(self.kind)

    @property
    def width(self) -> int:
        return self.shape.width

    @property
    def height(self) -> int:
        return self.shape.height

    @property
    def is_placed(self) -> bool:
        return self.position is not None

    def can_swap_inputs(self) -> bool:
        return self.shape.can_swap_inputs

    def swap_inputs(self) -> None:
        if not self.can_swap_inputs() or len(self.inputs) != 2:
            raise PlacementError(f"Inputs of {self.kind.name} cannot be swapped")
        self.inputs[0], self.inputs[1] = self.inputs[1], self.inputs[0]

    def input_nets(self) -> list[int]:
        return [p.connection.net for p in self.inputs if not p.connection.is_constant]

    def output_nets(self) -> list[int]:
        return [p.connection.net for p in self.outputs if not p.connection.is_constant]

    # ── Placement ──────────────────────────────────────────────────

    def place(self, x: int, y: int) -> None:
        """Anchor the gate at (x, y) and resolve all pin positions."""
        if self.position is not None:
            raise PlacementError(f"{self.kind.name} circuit was already placed")
        self.position = Position(x, y)
        self._resolve_pins()

    def reposition(self, x: int) -> None:
        """Move a placed gate to column *x*, keeping its rows."""
        if self.position is None:
            raise PlacementError(f"{self.kind.name} circuit moved before being placed")
        self.position = Position(x, self.position.y)
        self._resolve_pins()

    def _resolve_pins(self) -> None:
        pos = self.position
        shape = self.shape
        for idx, port in enumerate(self.inputs):
            port.position = Position(pos.x - 1, pos.y + shape.input_offset(idx))
        for idx, port in enumerate(self.outputs):
            port.position = Position(pos.x + shape.width, pos.y + shape.output_offset(idx))

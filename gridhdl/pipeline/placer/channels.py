"""Channel layout extraction — read a stage's live pin rows as tracks."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from gridhdl.pipeline.router.models import OCCUPIED, ChannelLayout

from .models import Circuit, PlacementError


class PinSide(Enum):
    INPUT = "input"     # right side of a channel: pins entering the next stage
    OUTPUT = "output"   # left side of a channel: pins leaving a stage


def determine_channel_layout(circuits: Iterable[Circuit], side: PinSide) -> ChannelLayout:
    """Build the track layout formed by the given pins of *circuits*.

    Rows between pins are ``OCCUPIED`` (gate bodies, spacing); the layout
    ends at the last pin row.
    """
    layout: ChannelLayout = []
    for circuit in circuits:
        ports = circuit.inputs if side is PinSide.INPUT else circuit.outputs
        for port in ports:
            if port.position is None:
                raise PlacementError(
                    f"{circuit.kind.name} circuit has an unplaced {side.value} pin"
                )
            row = port.position.y
            while row >= len(layout):
                layout.append(OCCUPIED)
            layout[row] = port.connection.to_channel_state()
    return layout


def count_nets(layout: ChannelLayout) -> int:
    return sum(1 for s in layout if s.contains_net)

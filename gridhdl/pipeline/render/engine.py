"""Route renderer — paint routed sub-steps and placed gates onto the grid.

Each sub-step becomes one grid column (plus optional padding columns):

  1. Every occupied track gets a horizontal wire (a crossing where a
     vertical wire already runs through the cell).
  2. Every wire connection becomes a vertical bus.  Destinations of a
     fan-out are joined top to bottom, tapped with T-junctions.
  3. The source row is joined to that bus: from outside the span with a
     corner at the source and an upgraded cell where it meets the span,
     from inside the span with a T-junction or a star.
"""

from __future__ import annotations

import logging
from enum import Enum

from gridhdl.catalog import (
    AIR, CONSTANT, CROSSING, STAR, WIRE_H, WIRE_V,
    Cell, Corner, Tee, corner, tee,
)
from gridhdl.pipeline.placer.models import Circuit, PlacementError
from gridhdl.pipeline.router.models import ChannelLayout, ChannelOp, ChannelSubState

from .grid import Grid


log = logging.getLogger(__name__)


class _SourceSide(Enum):
    ABOVE = "above"
    BELOW = "below"


# (is source row, side of the source, prior cell) -> upgraded cell
_JOIN_TABLE: dict[tuple[bool, _SourceSide, Cell], Cell] = {
    # The source row is left behind on a move and should be empty.
    (True, _SourceSide.ABOVE, AIR): corner(Corner.LEFT_DOWN),
    (True, _SourceSide.BELOW, AIR): corner(Corner.LEFT_UP),
    # Meeting a fan-out bus at its end corner.
    (False, _SourceSide.ABOVE, corner(Corner.DOWN_RIGHT)): tee(Tee.RIGHT_UP_DOWN),
    (False, _SourceSide.BELOW, corner(Corner.UP_RIGHT)): tee(Tee.RIGHT_UP_DOWN),
    # Meeting a single destination track.
    (False, _SourceSide.BELOW, WIRE_H): corner(Corner.DOWN_RIGHT),
    (False, _SourceSide.ABOVE, WIRE_H): corner(Corner.UP_RIGHT),
}


def _pass_vertical(grid: Grid, x: int, y: int) -> None:
    """Run a vertical wire through (x, y) without breaking what is there."""
    prior = grid.get(x, y)
    if prior == AIR:
        grid.set(x, y, WIRE_V)
    elif prior == WIRE_H:
        grid.set(x, y, CROSSING)


def _draw_occupied(grid: Grid, step: ChannelSubState, x: int) -> None:
    for row in step.occupied_tracks():
        if grid.get(x, row) == WIRE_V:
            grid.set(x, row, CROSSING)
        else:
            grid.set(x, row, WIRE_H)


def _draw_connection(grid: Grid, x: int, source: int, targets: list[int]) -> None:
    lo, hi = min(targets), max(targets)

    # Join all destinations of the same net.
    if lo != hi:
        for y in range(lo, hi + 1):
            if y == lo:
                grid.set(x, y, corner(Corner.DOWN_RIGHT))
            elif y == hi:
                grid.set(x, y, corner(Corner.UP_RIGHT))
            elif y in targets:
                grid.set(x, y, tee(Tee.RIGHT_UP_DOWN))
            else:
                _pass_vertical(grid, x, y)

    if lo <= source <= hi:
        if source in targets:
            if source == lo:
                grid.set(x, source, tee(Tee.LEFT_RIGHT_DOWN))
            elif source == hi:
                grid.set(x, source, tee(Tee.LEFT_RIGHT_UP))
            else:
                grid.set(x, source, STAR)
        else:
            grid.set(x, source, tee(Tee.LEFT_UP_DOWN))
        return

    if source < lo:
        start, end, side = source, lo, _SourceSide.ABOVE
    else:
        start, end, side = hi, source, _SourceSide.BELOW

    for y in range(start, end + 1):
        if y in (start, end):
            prior = grid.get(x, y)
            cell = _JOIN_TABLE.get((y == source, side, prior))
            if cell is None:
                log.warning("Unexpected prior cell %r at (%d, %d): source=%s side=%s",
                            prior, x, y, y == source, side.value)
                cell = CONSTANT
            grid.set(x, y, cell)
        else:
            _pass_vertical(grid, x, y)


def draw_channel_wires(
    grid: Grid,
    steps: list[ChannelSubState],
    x: int,
    *,
    padding: int = 0,
) -> int:
    """Render routed sub-steps starting at column *x*.

    Returns the column after the last one drawn.
    """
    for step in steps:
        for xi in range(1 + padding):
            _draw_occupied(grid, step, x + xi)

        for wire in step.wires:
            targets = list(wire.targets)
            if wire.mode is ChannelOp.COPY:
                targets.append(wire.source)
            _draw_connection(grid, x, wire.source, targets)

        x += 1 + padding
    return x


def draw_lead_wires(grid: Grid, layout: ChannelLayout, x: int, length: int) -> int:
    """Draw straight wires on every net track for *length* columns."""
    for xi in range(length):
        for row, state in enumerate(layout):
            if state.contains_net:
                grid.set(x + xi, row, WIRE_H)
    return x + length


def draw_circuit(grid: Grid, circuit: Circuit, extend_to: int = 0) -> None:
    """Paint a placed circuit's cell pattern.

    If *extend_to* is wider than the circuit, its first output is carried
    to that width with a horizontal wire so the whole stage ends in one
    column.
    """
    if circuit.position is None:
        raise PlacementError(f"{circuit.kind.name} circuit was not placed")
    pos = circuit.position
    shape = circuit.shape
    for dy in range(shape.height):
        for dx in range(shape.width):
            grid.set(pos.x + dx, pos.y + dy, shape.cell_at(dx, dy))

    if circuit.outputs:
        row = pos.y + shape.output_offset(0)
        for dx in range(shape.width, extend_to):
            grid.set(pos.x + dx, row, WIRE_H)

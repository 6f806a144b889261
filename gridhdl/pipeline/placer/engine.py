"""Main placement engine — assign every gate of a stage its rows.

Algorithm overview:
  1. Swap commutative inputs so they enter in the same vertical order as
     their source tracks (fewer crossings in the channel).
  2. Put single-input gates directly in line with their source track when
     those rows are still free.
  3. Put every other gate into the first free run of rows tall enough for
     its footprint, growing the layout when none exists.

The x coordinate is not known until the channel in front of the stage
has been routed; gates are anchored at a placeholder column and moved
with ``Circuit.reposition`` afterwards.
"""

from __future__ import annotations

import logging

from gridhdl.pipeline.router.models import FREE, OCCUPIED, ChannelLayout, ChannelState

from .models import Circuit, PlacementError


log = logging.getLogger(__name__)

PENDING_COLUMN = 1


# ── Layout helpers ─────────────────────────────────────────────────


def get_net_index_in_layout(layout: ChannelLayout, net: int) -> int | None:
    """Return the first track holding *net*, or None."""
    wanted = ChannelState.of_net(net)
    for idx, state in enumerate(layout):
        if state == wanted:
            return idx
    return None


def _source_track(layout: ChannelLayout, net: int, circuit: Circuit) -> int:
    idx = get_net_index_in_layout(layout, net)
    if idx is None:
        raise PlacementError(
            f"Net {net} needed by {circuit.kind.name} is not in the incoming channel"
        )
    return idx


def _rows_free(layout: ChannelLayout, start: int, height: int) -> bool:
    """True if rows [start, start+height) are free (rows past the end are)."""
    return all(
        row >= len(layout) or layout[row].is_free
        for row in range(start, start + height)
    )


def _find_free_rows(layout: ChannelLayout, height: int) -> int:
    """First row of a fully free run of *height* rows, else the layout end."""
    for start in range(len(layout) - height + 1):
        if _rows_free(layout, start, height):
            return start
    return len(layout)


def _claim_rows(layout: ChannelLayout, circuit: Circuit) -> None:
    """Mark a placed circuit's footprint and input rows in *layout*."""
    top = circuit.position.y
    while len(layout) < top + circuit.height:
        layout.append(FREE)
    for row in range(top, top + circuit.height):
        layout[row] = OCCUPIED
    for port in circuit.inputs:
        layout[port.position.y] = port.connection.to_channel_state()


# ── Main placement functions ───────────────────────────────────────


def place_gates(
    channel_layout: ChannelLayout,
    circuits: list[Circuit],
    *,
    x: int = PENDING_COLUMN,
) -> ChannelLayout:
    """Place all *circuits* of one stage against an incoming channel.

    Parameters
    ----------
    channel_layout : ChannelLayout
        Tracks leaving the previous stage.
    circuits : list[Circuit]
        Unplaced circuits of the stage.  Mutated in place: inputs may be
        swapped and every circuit gets a position.
    x : int
        Placeholder column for the anchors.

    Returns
    -------
    ChannelLayout
        The layout the channel must deliver to this stage.

    Raises
    ------
    PlacementError
        If an input net is missing from the incoming channel or a circuit
        is left unplaced.
    """
    desired: ChannelLayout = [FREE] * len(channel_layout)

    # ── 1. Align with the previous stage ───────────────────────────
    for circuit in circuits:
        if len(circuit.inputs) == 2:
            if not circuit.can_swap_inputs():
                continue
            first, second = (p.connection for p in circuit.inputs)
            if first.is_constant or second.is_constant:
                continue
            p1 = _source_track(channel_layout, first.net, circuit)
            p2 = _source_track(channel_layout, second.net, circuit)
            if p1 > p2:
                circuit.swap_inputs()
        elif len(circuit.inputs) == 1:
            conn = circuit.inputs[0].connection
            if conn.is_constant:
                continue
            row = _source_track(channel_layout, conn.net, circuit)
            if _rows_free(desired, row, circuit.height):
                circuit.place(x, row)
                _claim_rows(desired, circuit)

    # ── 2. Fill in everything else ─────────────────────────────────
    for circuit in circuits:
        if circuit.is_placed:
            continue
        row = _find_free_rows(desired, circuit.height)
        circuit.place(x, row)
        _claim_rows(desired, circuit)

    unplaced = [c for c in circuits if not c.is_placed]
    if unplaced:
        raise PlacementError(f"{len(unplaced)} circuits were not placed")

    log.debug("Placed %d circuits over %d rows", len(circuits), len(desired))
    return desired


def place_first_stage(circuits: list[Circuit], x: int = 0) -> int:
    """Stack the first stage top to bottom at column *x*.

    Returns the widest footprint so the caller can start the first
    channel right after it.
    """
    y = 0
    widest = 0
    for circuit in circuits:
        circuit.place(x, y)
        y += circuit.height
        widest = max(widest, circuit.width)
    return widest

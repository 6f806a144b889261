"""Tests for the grid and the route renderer.

Validates:
  - Grid bounds checks and used extent
  - Fan-out buses, source joins and T-junction upgrades
  - The diagnostic fallback for an unexpected prior cell
  - Rendering is deterministic
  - Gates are painted with their pattern and extended to a common width

Run:  python -m pytest tests/test_render.py -v
"""

from __future__ import annotations

import unittest

from gridhdl.catalog import (
    AIR, CONSTANT, CROSSING, STAR, WIRE_H, WIRE_V,
    Corner, GateBlock, GateKind, Tee, corner, gate, tee,
)
from gridhdl.pipeline.placer import Circuit, PinConnection, Port
from gridhdl.pipeline.render import (
    Grid, GridBoundsError, draw_channel_wires, draw_circuit, draw_lead_wires,
)
from gridhdl.pipeline.router import (
    FREE, ChannelOp, ChannelState, ChannelSubState, WireConnection, route_channel,
)


def _step(wires: list[WireConnection], occupied: list[int], tracks: int) -> ChannelSubState:
    occupancy = bytearray(tracks)
    for row in occupied:
        occupancy[row] = 1
    return ChannelSubState(wires=wires, occupancy=occupancy)


class TestGrid(unittest.TestCase):

    def test_empty_grid(self):
        grid = Grid()
        self.assertEqual(grid.dimensions, (0, 0))
        self.assertEqual(list(grid.rows()), [])

    def test_unwritten_cells_are_air(self):
        grid = Grid()
        grid.set(3, 1, WIRE_H)
        self.assertEqual(grid.dimensions, (4, 2))
        self.assertEqual(grid.get(0, 0), AIR)
        self.assertEqual(grid.count(AIR), 7)
        self.assertEqual(grid.count(WIRE_H), 1)

    def test_last_writer_wins(self):
        grid = Grid()
        grid.set(0, 0, WIRE_H)
        grid.set(0, 0, CROSSING)
        self.assertEqual(grid.get(0, 0), CROSSING)

    def test_out_of_bounds(self):
        grid = Grid(max_width=4, max_height=4)
        for x, y in ((4, 0), (0, 4), (-1, 0)):
            with self.assertRaises(GridBoundsError):
                grid.set(x, y, WIRE_H)
        with self.assertRaises(IndexError):
            grid.get(10, 10)


class TestChannelWires(unittest.TestCase):

    def test_source_above_fan_out(self):
        """Net on track 0 fans out to tracks 2 and 5."""
        grid = Grid()
        step = _step([WireConnection(0, [2, 5])], occupied=[1, 2, 5], tracks=6)
        x = draw_channel_wires(grid, [step], 0)
        self.assertEqual(x, 1)
        self.assertEqual(grid.get(0, 0), corner(Corner.LEFT_DOWN))
        self.assertEqual(grid.get(0, 1), CROSSING)
        self.assertEqual(grid.get(0, 2), tee(Tee.RIGHT_UP_DOWN))
        self.assertEqual(grid.get(0, 3), WIRE_V)
        self.assertEqual(grid.get(0, 4), WIRE_V)
        self.assertEqual(grid.get(0, 5), corner(Corner.UP_RIGHT))

    def test_source_below_single_target(self):
        grid = Grid()
        step = _step([WireConnection(3, [0])], occupied=[0], tracks=4)
        draw_channel_wires(grid, [step], 0)
        self.assertEqual(grid.get(0, 0), corner(Corner.DOWN_RIGHT))
        self.assertEqual(grid.get(0, 1), WIRE_V)
        self.assertEqual(grid.get(0, 2), WIRE_V)
        self.assertEqual(grid.get(0, 3), corner(Corner.LEFT_UP))

    def test_copy_inside_span_is_a_star(self):
        grid = Grid()
        step = _step([WireConnection(1, [0, 2], ChannelOp.COPY)], occupied=[0, 1, 2], tracks=3)
        draw_channel_wires(grid, [step], 0)
        self.assertEqual(grid.get(0, 0), corner(Corner.DOWN_RIGHT))
        self.assertEqual(grid.get(0, 1), STAR)
        self.assertEqual(grid.get(0, 2), corner(Corner.UP_RIGHT))

    def test_copy_at_span_edge(self):
        grid = Grid()
        step = _step([WireConnection(0, [2], ChannelOp.COPY)], occupied=[0, 2], tracks=3)
        draw_channel_wires(grid, [step], 0)
        self.assertEqual(grid.get(0, 0), tee(Tee.LEFT_RIGHT_DOWN))
        self.assertEqual(grid.get(0, 1), WIRE_V)

    def test_move_inside_span(self):
        grid = Grid()
        step = _step([WireConnection(1, [0, 2])], occupied=[0, 2], tracks=3)
        draw_channel_wires(grid, [step], 0)
        self.assertEqual(grid.get(0, 1), tee(Tee.LEFT_UP_DOWN))

    def test_unexpected_prior_cell_falls_back(self):
        """A star where the bus meets the source cannot be joined."""
        grid = Grid()
        grid.set(0, 2, STAR)
        step = _step([WireConnection(0, [2])], occupied=[], tracks=3)
        with self.assertLogs("gridhdl.pipeline.render.engine", "WARNING"):
            draw_channel_wires(grid, [step], 0)
        self.assertEqual(grid.get(0, 2), CONSTANT)

    def test_padding_repeats_occupied_tracks(self):
        grid = Grid()
        step = _step([WireConnection(0, [1])], occupied=[1], tracks=2)
        x = draw_channel_wires(grid, [step, step], 5, padding=2)
        self.assertEqual(x, 11)
        self.assertEqual(grid.get(6, 1), WIRE_H)
        self.assertEqual(grid.get(7, 1), WIRE_H)

    def test_rendering_is_deterministic(self):
        N = ChannelState.of_net
        start, end = [N(1), N(2), N(3)], [N(3), FREE, N(1), N(2)]
        steps = route_channel(start, end)
        first, second = Grid(), Grid()
        draw_channel_wires(first, steps, 0)
        draw_channel_wires(second, steps, 0)
        self.assertEqual(first, second)

    def test_lead_wires(self):
        N = ChannelState.of_net
        grid = Grid()
        x = draw_lead_wires(grid, [N(1), FREE, N(2)], 2, 3)
        self.assertEqual(x, 5)
        self.assertEqual(grid.count(WIRE_H), 6)
        self.assertEqual(grid.get(3, 1), AIR)


class TestDrawCircuit(unittest.TestCase):

    def test_pattern_and_extension(self):
        c = Circuit(
            GateKind.AND,
            inputs=[Port(PinConnection.of_net(1)), Port(PinConnection.of_net(2))],
            outputs=[Port(PinConnection.of_net(3))],
        )
        c.place(2, 0)
        grid = Grid()
        draw_circuit(grid, c, extend_to=3)
        self.assertEqual(grid.get(2, 1), gate(GateBlock.AND))
        self.assertEqual(grid.get(2, 0), corner(Corner.LEFT_DOWN))
        self.assertEqual(grid.get(3, 1), WIRE_H)
        self.assertEqual(grid.get(4, 1), WIRE_H)
        self.assertEqual(grid.get(5, 1), AIR)

    def test_unplaced_circuit_raises(self):
        from gridhdl.pipeline.placer import PlacementError

        with self.assertRaises(PlacementError):
            draw_circuit(Grid(), Circuit.forwarding(1))


if __name__ == "__main__":
    unittest.main()

"""Tests for the stage builder.

Validates:
  - Every stage only reads nets produced by the stage before it
  - Forwarding circuits carry nets across skipped stages
  - The last stage holds one sink per output, in net order
  - Circular dependencies and unused nets are reported

Run:  python -m pytest tests/test_stages.py -v
"""

from __future__ import annotations

import unittest

from gridhdl.catalog import GateKind
from gridhdl.pipeline.placer import Circuit, PinConnection, Port
from gridhdl.pipeline.stages import (
    CircularDependencyError, UnusedNetError,
    add_forwarding_circuits, build_stages, stage_summary,
)


def _net(n: int) -> PinConnection:
    return PinConnection.of_net(n)


def _gate(kind: GateKind, inputs: list[PinConnection], output: int) -> Circuit:
    return Circuit(kind, inputs=[Port(c) for c in inputs], outputs=[Port(_net(output))])


def _inputs(*nets: int) -> list[Circuit]:
    return [Circuit.external_input(_net(n)) for n in nets]


class TestBuildStages(unittest.TestCase):

    def _chain(self) -> list[Circuit]:
        """in1, in2 → NOT(1)=3 → AND(3, 2)=4."""
        return _inputs(1, 2) + [
            _gate(GateKind.AND, [_net(3), _net(2)], 4),
            _gate(GateKind.NOT, [_net(1)], 3),
        ]

    def test_layers_by_dependency(self):
        stages = build_stages(self._chain(), [_net(4)])
        self.assertEqual(len(stages), 4)
        self.assertEqual({c.kind for c in stages[0]}, {GateKind.INPUT})
        self.assertIn(GateKind.NOT, {c.kind for c in stages[1]})
        self.assertEqual([c.kind for c in stages[2]], [GateKind.AND])
        self.assertEqual([c.kind for c in stages[3]], [GateKind.OUTPUT])

    def test_each_stage_reads_only_the_previous_stage(self):
        stages = build_stages(self._chain(), [_net(4)])
        for idx in range(1, len(stages)):
            provided = {n for c in stages[idx - 1] for n in c.output_nets()}
            needed = {n for c in stages[idx] for n in c.input_nets()}
            self.assertLessEqual(needed, provided, f"stage {idx}")

    def test_forwarding_carries_skipped_net(self):
        """Net 2 skips the NOT stage, so a forwarder is added there."""
        stages = build_stages(self._chain(), [_net(4)])
        forwarders = [c for c in stages[1] if c.kind is GateKind.FORWARD]
        self.assertEqual(len(forwarders), 1)
        self.assertEqual(forwarders[0].input_nets(), [2])
        self.assertEqual(forwarders[0].output_nets(), [2])
        self.assertEqual(stage_summary(stages)[1], (2, 1))

    def test_stage_sorted_by_output_net(self):
        circuits = _inputs(7, 3, 5)
        stages = build_stages(circuits, [_net(3), _net(5), _net(7)])
        self.assertEqual([c.output_nets() for c in stages[0]], [[3], [5], [7]])

    def test_sinks_in_sorted_order(self):
        stages = build_stages(_inputs(1, 2), [_net(2), _net(1)])
        self.assertEqual([c.input_nets() for c in stages[-1]], [[1], [2]])

    def test_constant_inputs_are_always_ready(self):
        circuits = _inputs(1) + [
            _gate(GateKind.AND, [_net(1), PinConnection.constant(True)], 2),
        ]
        stages = build_stages(circuits, [_net(2)])
        self.assertEqual([c.kind for c in stages[1]], [GateKind.AND])

    def test_forwarding_is_added_once_per_net(self):
        """Two readers of the same skipped net share one forwarder."""
        stages = [
            _inputs(1),
            [_gate(GateKind.NOT, [_net(1)], 2)],
            [_gate(GateKind.AND, [_net(1), _net(2)], 3),
             _gate(GateKind.OR, [_net(1), _net(2)], 4)],
        ]
        added = add_forwarding_circuits(stages)
        self.assertEqual(added, 1)


class TestStageErrors(unittest.TestCase):

    def test_circular_dependency(self):
        circuits = _inputs(1) + [
            _gate(GateKind.AND, [_net(1), _net(3)], 2),
            _gate(GateKind.NOT, [_net(2)], 3),
        ]
        with self.assertRaises(CircularDependencyError) as ctx:
            build_stages(circuits, [_net(2)])
        self.assertEqual(len(ctx.exception.circuits), 2)

    def test_unused_net_raises(self):
        circuits = _inputs(1, 2) + [_gate(GateKind.NOT, [_net(1)], 3)]
        with self.assertRaises(UnusedNetError) as ctx:
            build_stages(circuits, [_net(3)])
        self.assertEqual(ctx.exception.nets, [2])

    def test_all_unused_nets_are_reported(self):
        circuits = _inputs(1, 2, 5) + [_gate(GateKind.NOT, [_net(1)], 3)]
        with self.assertRaises(UnusedNetError) as ctx:
            build_stages(circuits, [_net(3)])
        self.assertEqual(ctx.exception.nets, [2, 5])

    def test_unused_net_lenient_logs_warning(self):
        circuits = _inputs(1, 2) + [_gate(GateKind.NOT, [_net(1)], 3)]
        with self.assertLogs("gridhdl.pipeline.stages", "WARNING") as logs:
            stages = build_stages(circuits, [_net(3)], strict_unused=False)
        self.assertEqual(len(stages), 3)
        self.assertTrue(any("Net 2" in line for line in logs.output))

    def test_output_net_counts_as_used(self):
        """An input routed straight to an output is not unused."""
        stages = build_stages(_inputs(1), [_net(1)])
        self.assertEqual(len(stages), 2)


if __name__ == "__main__":
    unittest.main()

"""Tests for the gate catalog.

Validates:
  - Every shape is internally consistent
  - Yosys cell types map to gate kinds (with and without $_..._)
  - Synthetic kinds never come from a netlist
  - Catalog serialization lists every netlist gate

Run:  python -m pytest tests/test_catalog.py -v
"""

from __future__ import annotations

import unittest

from gridhdl.catalog import (
    AIR, GateBlock, GateKind, UnknownGateError,
    catalog_to_dict, gate, get_shape, kind_from_cell_type, netlist_kinds,
    validate_catalog,
)


class TestShapes(unittest.TestCase):

    def test_catalog_is_valid(self):
        """No shape reports a consistency error."""
        errors = validate_catalog()
        self.assertEqual(errors, [], "\n".join(str(e) for e in errors))

    def test_two_input_gate_footprint(self):
        """AND is 1×3 with inputs on rows 0 and 2, output on row 1."""
        shape = get_shape(GateKind.AND)
        self.assertEqual((shape.width, shape.height), (1, 3))
        self.assertEqual(shape.input_offsets, (0, 2))
        self.assertEqual(shape.output_offset(0), 1)
        self.assertEqual(shape.cell_at(0, 1), gate(GateBlock.AND))

    def test_negated_input_gates_do_not_swap(self):
        """A op !B is not commutative."""
        self.assertFalse(get_shape(GateKind.ANDNOT).can_swap_inputs)
        self.assertFalse(get_shape(GateKind.ORNOT).can_swap_inputs)
        self.assertTrue(get_shape(GateKind.XOR).can_swap_inputs)

    def test_dff_is_seven_by_seven(self):
        shape = get_shape(GateKind.DFF_P)
        self.assertEqual((shape.width, shape.height), (7, 7))
        self.assertEqual(shape.input_names, ("C", "D"))
        self.assertEqual(shape.cell_at(6, 6), AIR)


class TestCellTypeLookup(unittest.TestCase):

    def test_yosys_internal_names(self):
        self.assertIs(kind_from_cell_type("$_AND_"), GateKind.AND)
        self.assertIs(kind_from_cell_type("$_XNOR_"), GateKind.XNOR)
        self.assertIs(kind_from_cell_type("$_DFF_P_"), GateKind.DFF_P)

    def test_plain_names(self):
        self.assertIs(kind_from_cell_type("NOT"), GateKind.NOT)
        self.assertIs(kind_from_cell_type("ANDNOT"), GateKind.ANDNOT)

    def test_unknown_type_raises(self):
        with self.assertRaises(UnknownGateError) as ctx:
            kind_from_cell_type("$_MUX_")
        self.assertEqual(ctx.exception.cell_type, "$_MUX_")

    def test_synthetic_kinds_are_not_netlist_types(self):
        """Input pins, sinks and forwarders are compiler-internal."""
        for kind in (GateKind.INPUT, GateKind.OUTPUT, GateKind.FORWARD):
            self.assertTrue(kind.synthetic)
            self.assertNotIn(kind, netlist_kinds())
            with self.assertRaises(UnknownGateError):
                kind_from_cell_type(kind.value)


class TestCatalogSerialization(unittest.TestCase):

    def test_lists_every_netlist_gate(self):
        data = catalog_to_dict()
        kinds = {entry["kind"] for entry in data["gates"]}
        self.assertEqual(kinds, {k.name for k in netlist_kinds()})

    def test_pattern_rows_match_shape(self):
        for entry in catalog_to_dict()["gates"]:
            self.assertEqual(len(entry["pattern"]), entry["height"])
            for row in entry["pattern"]:
                self.assertEqual(len(row), entry["width"])


if __name__ == "__main__":
    unittest.main()

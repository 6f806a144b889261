"""Layout pipeline — netlist in, placed and routed grid out.

Runs the pipeline stages in order:

  1. Layer gates into stages (``stages.build_stages``).
  2. Stack stage 0 at column 0.
  3. Place every following stage against the channel in front of it.
  4. Route all channels, in parallel.
  5. Draw the channels left to right, moving each stage to the column
     right after its channel.
  6. Draw the gates, then the constant sources.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gridhdl.catalog import CONSTANT
from gridhdl.pipeline.config import LAYOUT_RULES, LayoutRules
from gridhdl.pipeline.placer import (
    PinSide, count_nets, determine_channel_layout,
    place_first_stage, place_gates,
)
from gridhdl.pipeline.render import Grid, draw_channel_wires, draw_circuit, draw_lead_wires
from gridhdl.pipeline.router import ChannelSubState, RouterConfig, route_stages
from gridhdl.pipeline.stages import Stage, build_stages, stage_summary

if TYPE_CHECKING:
    from gridhdl.netlist import Netlist


log = logging.getLogger(__name__)


@dataclass
class LayoutResult:
    """Everything the exporters and reports need from one compile run."""

    grid: Grid
    stages: list[Stage] = field(default_factory=list)
    substeps_per_stage: list[list[ChannelSubState]] = field(default_factory=list)

    @property
    def dimensions(self) -> tuple[int, int]:
        return self.grid.dimensions

    @property
    def stage_count(self) -> int:
        return len(self.stages)

    @property
    def gate_count(self) -> int:
        """Real gates, without input pins, sinks and forwarding circuits."""
        return sum(1 for stage in self.stages for c in stage if not c.kind.synthetic)

    @property
    def substep_count(self) -> int:
        return sum(len(steps) for steps in self.substeps_per_stage)


def _widest(stage: Stage) -> int:
    return max((c.width for c in stage), default=1)


# ── Main entry point ───────────────────────────────────────────────


def compile_netlist(
    netlist: Netlist,
    rules: LayoutRules | None = None,
    *,
    strict_unused: bool = True,
    router_config: RouterConfig | None = None,
) -> LayoutResult:
    """Place and route *netlist* onto a fresh grid.

    Parameters
    ----------
    netlist : Netlist
        Parsed circuits and output ports.  The circuits are placed in
        place, so a netlist can only be compiled once.
    rules : LayoutRules | None
        Layout constants.  Uses ``LAYOUT_RULES`` when *None*.
    strict_unused : bool
        Fail on nets nothing consumes (see ``build_stages``).
    router_config : RouterConfig | None
        Router parameters.  Built from *rules* when *None*.

    Raises
    ------
    LayoutError
        Any stage failure: circular or unused nets, placement, routing,
        or drawing outside the grid.
    """
    if rules is None:
        rules = LAYOUT_RULES
    if router_config is None:
        router_config = RouterConfig(
            utilization_cap=rules.utilization_cap,
            eviction_penalty=rules.eviction_penalty,
            widen_divisor=rules.widen_divisor,
            workers=rules.route_workers,
        )

    stages = build_stages(netlist.circuits, netlist.output_ports,
                          strict_unused=strict_unused)
    boundaries = len(stages) - 1
    for idx, (total, forwarding) in enumerate(stage_summary(stages)):
        log.debug("Stage %d: %d circuits (%d forwarding)", idx, total, forwarding)

    # ── 1. Place ───────────────────────────────────────────────────
    log.info("Placing gates")
    cursor = place_first_stage(stages[0], x=0)
    for idx in range(boundaries):
        channel = determine_channel_layout(stages[idx], PinSide.OUTPUT)
        log.info("Step %d/%d - %d inputs to %d gates",
                 idx + 1, boundaries, count_nets(channel), len(stages[idx + 1]))
        place_gates(channel, stages[idx + 1])

    # ── 2. Route ───────────────────────────────────────────────────
    log.info("Routing %d channels", boundaries)
    pairs = [
        (determine_channel_layout(stages[idx], PinSide.OUTPUT),
         determine_channel_layout(stages[idx + 1], PinSide.INPUT))
        for idx in range(boundaries)
    ]
    substeps = route_stages(pairs, router_config)

    # ── 3. Draw channels ───────────────────────────────────────────
    log.info("Drawing to grid")
    grid = Grid(rules.max_grid_width, rules.max_grid_height)
    constant_sources: list[tuple[int, int]] = []
    for idx, steps in enumerate(substeps):
        start, end = pairs[idx]
        x = draw_lead_wires(grid, start, cursor, rules.wire_length_after_gate)
        x = draw_channel_wires(grid, steps, x, padding=rules.channel_wire_padding)

        for circuit in stages[idx + 1]:
            circuit.reposition(x)
        constant_sources.extend(
            (x, row) for row, state in enumerate(end) if state.is_constant_on
        )
        cursor = x + _widest(stages[idx + 1])

    # ── 4. Draw gates and constants ────────────────────────────────
    for stage in stages:
        widest = _widest(stage)
        for circuit in stage:
            draw_circuit(grid, circuit, extend_to=widest)
    for x, y in constant_sources:
        grid.set(x, y, CONSTANT)

    result = LayoutResult(grid=grid, stages=stages, substeps_per_stage=substeps)
    log.info("Grid dimensions: %s (%d gates, %d routing steps)",
             result.dimensions, result.gate_count, result.substep_count)
    return result


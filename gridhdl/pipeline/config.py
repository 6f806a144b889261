"""Shared layout constants for the placement-and-routing pipeline.

These values describe how channels are drawn and how far the router may
go when it packs a channel.  Both the **router** (which decides how many
sub-steps a channel needs) and the **renderer** (which turns each
sub-step into grid columns) derive their parameters from this single
source of truth.

Pass a modified copy (``dataclasses.replace(LAYOUT_RULES, ...)``) to
``compile_netlist`` to change them for one run.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LayoutRules:
    """Layout rules, all distances in grid cells."""

    channel_wire_padding: int = 0
    """Extra straight columns drawn after every routed sub-step."""

    wire_length_after_gate: int = 1
    """Straight wire columns between a stage's gates and its channel."""

    max_grid_width: int = 8 * 1024
    max_grid_height: int = 8 * 1024
    """Addressable grid extent.  Writes outside it are errors."""

    utilization_cap: float = 0.5
    """Fraction of the channel one sub-step may claim before the router
    defers the remaining tasks to the next sub-step."""

    eviction_penalty: int = 2
    """Cost per track an evicted net lands outside its destinations."""

    widen_divisor: int = 10
    """Channel widening step: ceil(pending_tasks / widen_divisor) + 1."""

    route_workers: int = 4
    """Threads used to route independent stage boundaries."""


# Shared by the router, renderer, CLI and web service.
LAYOUT_RULES = LayoutRules()

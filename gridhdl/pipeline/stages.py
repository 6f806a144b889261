"""Stage builder — layer circuits by dependency.

A circuit can sit in a stage once every one of its input nets is produced
by an earlier stage.  Channels only connect neighbouring stages, so a net
that skips stages is carried through the stages in between by
pass-through (forwarding) circuits.  The last stage holds one sink per
external output.
"""

from __future__ import annotations

import logging

from gridhdl.catalog import GateKind
from gridhdl.pipeline.errors import LayoutError
from gridhdl.pipeline.placer.models import Circuit, PinConnection


log = logging.getLogger(__name__)

Stage = list[Circuit]


class CircularDependencyError(LayoutError):
    """Raised when the remaining circuits all wait on each other."""

    def __init__(self, circuits: list[Circuit]) -> None:
        self.circuits = circuits
        super().__init__(
            f"Circular dependency detected: {len(circuits)} circuits can never be scheduled"
        )


class UnusedNetError(LayoutError):
    """Raised when nets are produced but nothing consumes them."""

    def __init__(self, nets: list[int]) -> None:
        self.nets = nets
        listed = ", ".join(str(n) for n in nets)
        super().__init__(f"Nets produced but never used: {listed}")


def _inputs_ready(circuit: Circuit, available: set[int]) -> bool:
    return all(
        port.connection.is_constant or port.connection.net in available
        for port in circuit.inputs
    )


def _first_output_key(circuit: Circuit) -> tuple[int, int]:
    if not circuit.outputs:
        return (0, 0)
    return circuit.outputs[0].connection.sort_key()


# ── Main entry point ───────────────────────────────────────────────


def build_stages(
    circuits: list[Circuit],
    output_ports: list[PinConnection],
    *,
    strict_unused: bool = True,
) -> list[Stage]:
    """Layer *circuits* into stages and add forwarding and sink circuits.

    Parameters
    ----------
    circuits : list[Circuit]
        All unplaced circuits, external input pins included.
    output_ports : list[PinConnection]
        External outputs; one sink circuit is created for each.
    strict_unused : bool
        Raise on nets that are produced but never used.  When False they
        are only logged.

    Raises
    ------
    CircularDependencyError
        If some circuits can never have all their inputs available.
    UnusedNetError
        If *strict_unused* and some produced net is never consumed.
    """
    log.info("Calculating gate layout for %d circuits", len(circuits))
    stages: list[Stage] = []
    available: set[int] = set()
    required: set[int] = set()
    remaining = list(circuits)

    while remaining:
        ready: Stage = []
        waiting: Stage = []
        for circuit in remaining:
            (ready if _inputs_ready(circuit, available) else waiting).append(circuit)
        if not ready:
            raise CircularDependencyError(waiting)

        ready.sort(key=_first_output_key)
        for circuit in ready:
            available.update(circuit.output_nets())
            required.update(circuit.input_nets())
        stages.append(ready)
        remaining = waiting

    sinks = sorted(output_ports, key=lambda p: p.sort_key())
    stages.append([Circuit.external_output(p) for p in sinks])

    output_nets = {p.net for p in output_ports if not p.is_constant}
    unused = sorted(available - required - output_nets)
    if unused:
        if strict_unused:
            raise UnusedNetError(unused)
        for net in unused:
            log.warning("Net %d seems to be not used", net)

    added = add_forwarding_circuits(stages)
    log.info("Built %d stages, added %d forwarding circuits", len(stages), added)
    return stages


def add_forwarding_circuits(stages: list[Stage]) -> int:
    """Make every stage output exactly what the next stage reads.

    Walks from the last stage to the second, adding a forwarding circuit
    to stage *i-1* for every net stage *i* needs but *i-1* does not
    output.  Added circuits add requirements to stage *i-1*, which the
    walk handles next.  Returns the number of circuits added.
    """
    added = 0
    for idx in range(len(stages) - 1, 0, -1):
        provided = {net for c in stages[idx - 1] for net in c.output_nets()}
        for circuit in list(stages[idx]):
            for net in circuit.input_nets():
                if net not in provided:
                    stages[idx - 1].append(Circuit.forwarding(net))
                    provided.add(net)
                    added += 1
    return added


def stage_summary(stages: list[Stage]) -> list[tuple[int, int]]:
    """(circuit count, forwarding count) per stage, for logs and reports."""
    return [
        (len(stage), sum(1 for c in stage if c.kind is GateKind.FORWARD))
        for stage in stages
    ]

"""Routing replay — apply sub-steps to a layout and check the outcome.

The renderer only sees wire connections and occupancy bitmaps.  Replaying
exactly that information against the source layout must reproduce the
destination layout, so these checks run against the router's own output
rather than its internal state.
"""

from __future__ import annotations

from .models import FREE, ChannelLayout, ChannelOp, ChannelSubState, RoutingError


def replay_substeps(start: ChannelLayout, steps: list[ChannelSubState]) -> ChannelLayout:
    """Apply *steps* to a copy of *start* and return the resulting layout.

    Within a step, connections are applied in order; afterwards every
    track the step reports as unoccupied loses its net (released wires).

    Raises
    ------
    RoutingError
        If a connection starts at a track without a net, or would write a
        net over a different live net.
    """
    state = list(start)
    for step_idx, step in enumerate(steps):
        while len(state) < len(step.occupancy):
            state.append(FREE)

        for wire in step.wires:
            carried = state[wire.source]
            if not carried.contains_net:
                raise RoutingError(
                    f"Step {step_idx}: track {wire.source} has no net to connect"
                )
            for target in wire.targets:
                current = state[target]
                if current.contains_net and current != carried:
                    raise RoutingError(
                        f"Step {step_idx}: {carried!r} would overwrite "
                        f"{current!r} on track {target}"
                    )
                state[target] = carried
            if wire.mode is ChannelOp.MOVE:
                state[wire.source] = FREE

        for row, occupied in enumerate(step.occupancy):
            if not occupied and state[row].contains_net:
                state[row] = FREE

    return state


def verify_routing(
    start: ChannelLayout,
    end: ChannelLayout,
    steps: list[ChannelSubState],
) -> ChannelLayout:
    """Replay *steps* and check the result matches *end*.

    Every net track of *end* must carry its net.  Every other track,
    including tracks added by widening, must finish without a net: a
    left-over wire would run into a gate body or spacer.  Returns the
    replayed layout.
    """
    final = replay_substeps(start, steps)
    for row in range(max(len(final), len(end))):
        wanted = end[row] if row < len(end) else FREE
        got = final[row] if row < len(final) else FREE
        if wanted.contains_net:
            if got != wanted:
                raise RoutingError(f"Track {row}: expected {wanted!r}, routed {got!r}")
        elif got.contains_net:
            raise RoutingError(f"Track {row}: {got!r} left on a {wanted!r} track")
    return final

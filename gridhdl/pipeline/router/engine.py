"""Main channel routing engine — turn one track layout into another.

Algorithm overview:
  1. Release nets the destination never reads, then build one task per
     source track: the net there and every destination track that needs
     it but does not hold it yet.
  2. Order tasks by the width of channel they cover (narrow first).
  3. Each outer iteration emits one sub-step (one grid column).  Tasks
     whose destinations are free and whose covering range is still
     unclaimed in this column are completed.  A task may stay on its
     source track too (copy) when the destination also wants it there.
  4. If no task could complete, every remaining task is blocked by
     another net sitting on one of its destinations.  The blocking nets
     are evicted to free tracks close to (ideally between) their own
     destinations.  With no free track left the channel is widened.

Routing of different channels is independent; ``route_stages`` fans the
work out over a thread pool and collects results in order.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from .models import (
    FREE, ChannelLayout, ChannelOp, ChannelState, ChannelSubState,
    RouterConfig, RoutingError, WireConnection,
)
from .ranges import ClaimedRanges
from .replay import verify_routing


log = logging.getLogger(__name__)


# ── Tasks ──────────────────────────────────────────────────────────


@dataclass
class _Task:
    """Bring ``net`` from track ``source`` to every track in ``targets``."""

    net: int
    source: int
    targets: list[int]

    def covering_range(self) -> tuple[int, int]:
        rows = [self.source, *self.targets]
        return min(rows), max(rows)

    def width(self) -> int:
        lo, hi = self.covering_range()
        return hi - lo + 1

    def blocking_targets(self, state: ChannelLayout) -> list[int]:
        """Destination tracks currently held by a different net."""
        mine = ChannelState.of_net(self.net)
        return [
            t for t in self.targets
            if state[t].contains_net and state[t] != mine
        ]

    def eviction_cost(self, row: int, penalty: int) -> int:
        """How good *row* is as a new source for this task (lower is better).

        Distance from the current source, plus *penalty* per track the row
        lies outside the span of this task's destinations.
        """
        lo, hi = min(self.targets), max(self.targets)
        dist = abs(self.source - row)
        if row > hi:
            return penalty * (row - hi) + dist
        if row < lo:
            return penalty * (lo - row) + dist
        return dist


def _build_tasks(state: ChannelLayout, end: ChannelLayout) -> list[_Task]:
    by_source: dict[int, list[int]] = {}
    for end_idx, wanted in enumerate(end):
        if not wanted.contains_net or wanted == state[end_idx]:
            continue
        try:
            source = state.index(wanted)
        except ValueError:
            raise RoutingError(
                f"Required {wanted!r} for track {end_idx} not found in the channel"
            ) from None
        by_source.setdefault(source, []).append(end_idx)

    tasks = [
        _Task(net=state[source].net, source=source, targets=targets)
        for source, targets in by_source.items()
    ]
    tasks.sort(key=lambda t: t.width())
    return tasks


def _occupancy(state: ChannelLayout) -> bytearray:
    return bytearray(1 if s.contains_net else 0 for s in state)


# ── Main entry point ───────────────────────────────────────────────


def route_channel(
    start: ChannelLayout,
    end: ChannelLayout,
    config: RouterConfig | None = None,
) -> list[ChannelSubState]:
    """Route the channel between two stages.

    Parameters
    ----------
    start : ChannelLayout
        Tracks leaving the left stage.
    end : ChannelLayout
        Tracks the right stage needs.  Only net tracks are routed;
        constants are supplied by constant sources after the channel.
    config : RouterConfig | None
        Tuneable parameters.  Uses defaults when *None*.

    Returns
    -------
    list[ChannelSubState]
        At least one sub-step.  Replaying them against *start* delivers
        every net track of *end* and leaves every other track free.  Nets
        of *start* that *end* does not read are released in the first
        sub-step.

    Raises
    ------
    RoutingError
        If *end* needs a net that is not in *start*.
    """
    if config is None:
        config = RouterConfig()

    state = list(start)
    while len(state) < len(end):
        state.append(FREE)

    # Nets nothing downstream reads end at the channel entrance.
    needed = {s for s in end if s.contains_net}
    for row, s in enumerate(state):
        if s.contains_net and s not in needed:
            log.debug("Router: releasing unused %r on track %d", s, row)
            state[row] = FREE

    tasks = _build_tasks(state, end)
    log.debug("Router: %d tracks in, %d tracks out, %d tasks",
              len(start), len(end), len(tasks))

    steps: list[ChannelSubState] = []
    while True:
        claimed = ClaimedRanges()
        wires: list[WireConnection] = []
        pending: list[_Task] = []
        cap = int(max(len(state), len(end)) * config.utilization_cap)

        for task in tasks:
            # Only fill the column up to the utilization cap.
            if claimed.span_sum() > cap:
                pending.append(task)
                continue

            lo, hi = task.covering_range()
            if claimed.overlaps(lo, hi) or task.blocking_targets(state):
                pending.append(task)
                continue

            keep = task.source < len(end) and state[task.source] == end[task.source]
            if not keep:
                state[task.source] = FREE
            wires.append(WireConnection(
                source=task.source,
                targets=list(task.targets),
                mode=ChannelOp.COPY if keep else ChannelOp.MOVE,
            ))
            claimed.add(lo, hi)
            for target in task.targets:
                state[target] = ChannelState.of_net(task.net)

        if pending and len(pending) == len(tasks):
            _evict(state, end, pending, claimed, wires, config)

        tasks = pending
        steps.append(ChannelSubState(wires=wires, occupancy=_occupancy(state)))
        log.debug("Router: step %d — %d connections, %d tasks left",
                  len(steps), len(wires), len(tasks))
        if not tasks:
            break

    if config.verify:
        verify_routing(start, end, steps)
    return steps


# ── Eviction ───────────────────────────────────────────────────────


def _evict(
    state: ChannelLayout,
    end: ChannelLayout,
    tasks: list[_Task],
    claimed: ClaimedRanges,
    wires: list[WireConnection],
    config: RouterConfig,
) -> None:
    """Move nets that sit on other tasks' destinations out of the way.

    Mutates *state*, the blocking tasks' sources, *claimed* and *wires*.
    """
    free_rows = [
        row for row, s in enumerate(state)
        if not s.contains_net and (row >= len(end) or not end[row].contains_net)
    ]

    if not free_rows:
        grow = math.ceil(len(tasks) / config.widen_divisor) + 1
        log.warning("Router: no free tracks left, widening channel by %d", grow)
        for _ in range(grow):
            state.append(FREE)
            free_rows.append(len(state) - 1)

    for task in tasks:
        for row in task.blocking_targets(state):
            owner = next((t for t in tasks if t.source == row), None)
            if owner is None:
                # Nothing downstream needs this net; let the wire end here.
                log.debug("Router: releasing unused %r on track %d", state[row], row)
                state[row] = FREE
                continue
            if not free_rows:
                return

            new_row = min(
                free_rows,
                key=lambda r: owner.eviction_cost(r, config.eviction_penalty),
            )
            if claimed.overlaps(owner.source, new_row):
                continue

            free_rows.remove(new_row)
            claimed.add(owner.source, new_row)
            wires.append(WireConnection(
                source=owner.source, targets=[new_row], mode=ChannelOp.MOVE,
            ))
            state[new_row] = ChannelState.of_net(owner.net)
            state[owner.source] = FREE
            owner.source = new_row


# ── Parallel routing ───────────────────────────────────────────────


def route_stages(
    pairs: list[tuple[ChannelLayout, ChannelLayout]],
    config: RouterConfig | None = None,
) -> list[list[ChannelSubState]]:
    """Route several independent channels, returning results in order."""
    if config is None:
        config = RouterConfig()

    def _route(pair: tuple[ChannelLayout, ChannelLayout]) -> list[ChannelSubState]:
        return route_channel(pair[0], pair[1], config)

    if config.workers <= 1 or len(pairs) <= 1:
        return [_route(p) for p in pairs]

    with ThreadPoolExecutor(max_workers=config.workers) as pool:
        return list(pool.map(_route, pairs))

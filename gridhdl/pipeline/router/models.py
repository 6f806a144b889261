"""Router dataclasses — track states, wire connections, sub-steps, config."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from gridhdl.pipeline.config import LAYOUT_RULES
from gridhdl.pipeline.errors import LayoutError


# ── Track layout ───────────────────────────────────────────────────


class TrackKind(Enum):
    FREE = "free"
    OCCUPIED = "occupied"       # no connection; same as a constant false
    CONSTANT = "constant"       # constant true
    NET = "net"


@dataclass(frozen=True)
class ChannelState:
    """State of one track in a channel layout."""

    kind: TrackKind
    net: int | None = None

    @classmethod
    def of_net(cls, net: int) -> ChannelState:
        return cls(TrackKind.NET, net)

    @property
    def is_free(self) -> bool:
        return self.kind is TrackKind.FREE

    @property
    def contains_net(self) -> bool:
        return self.kind is TrackKind.NET

    @property
    def is_constant_on(self) -> bool:
        return self.kind is TrackKind.CONSTANT

    def __repr__(self) -> str:
        if self.kind is TrackKind.NET:
            return f"Net({self.net})"
        return self.kind.name.capitalize()


FREE = ChannelState(TrackKind.FREE)
OCCUPIED = ChannelState(TrackKind.OCCUPIED)
CONSTANT = ChannelState(TrackKind.CONSTANT)

ChannelLayout = list[ChannelState]


# ── Router output ──────────────────────────────────────────────────


class ChannelOp(Enum):
    MOVE = "move"   # source track is released
    COPY = "copy"   # source track keeps the net (it is needed there too)


@dataclass
class WireConnection:
    """Connect one source track to one or more target tracks."""

    source: int
    targets: list[int]
    mode: ChannelOp = ChannelOp.MOVE


@dataclass
class ChannelSubState:
    """One renderable routing step.

    ``occupancy[i]`` is 1 when track *i* carries a net after the step's
    connections have been applied.
    """

    wires: list[WireConnection]
    occupancy: bytearray

    def occupied_tracks(self) -> list[int]:
        return [i for i, v in enumerate(self.occupancy) if v]


class RoutingError(LayoutError):
    """Raised when a channel cannot be routed or a routing fails replay."""


# ── Router configuration ──────────────────────────────────────────
#
# Shared layout rules come from gridhdl.pipeline.config.LAYOUT_RULES.
# Router-only knobs live here.


@dataclass
class RouterConfig:
    """All tuneable router parameters in one place.

    Heuristic constants default to ``LAYOUT_RULES`` so the CLI, the web
    service and the tests see the same values.
    """

    utilization_cap: float = LAYOUT_RULES.utilization_cap
    eviction_penalty: int = LAYOUT_RULES.eviction_penalty
    widen_divisor: int = LAYOUT_RULES.widen_divisor
    workers: int = LAYOUT_RULES.route_workers

    # Run replay verification on every routed channel.
    verify: bool = True

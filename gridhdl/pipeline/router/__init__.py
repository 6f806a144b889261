"""Router — channel routing between two placement stages.

Submodules:
  models        Track states, wire connections, sub-steps, RouterConfig.
  ranges        Claimed track intervals within one sub-step.
  engine        Main routing algorithm (greedy tasks with eviction).
  replay        Replay and verification of routed sub-steps.
"""

from .models import (
    TrackKind, ChannelState, ChannelLayout, FREE, OCCUPIED, CONSTANT,
    ChannelOp, WireConnection, ChannelSubState, RouterConfig, RoutingError,
)
from .engine import route_channel, route_stages
from .replay import replay_substeps, verify_routing

__all__ = [
    # Models
    "TrackKind", "ChannelState", "ChannelLayout", "FREE", "OCCUPIED", "CONSTANT",
    "ChannelOp", "WireConnection", "ChannelSubState", "RouterConfig", "RoutingError",
    # Engine
    "route_channel", "route_stages",
    # Replay
    "replay_substeps", "verify_routing",
]

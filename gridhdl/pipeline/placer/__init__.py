"""Placer — assigns rows to the gates of each stage.

Submodules:
  models        Pin connections, ports, circuits, PlacementError.
  channels      Track layout extraction from placed pins.
  engine        Per-stage placement (input swapping, greedy alignment).
"""

from .models import PinConnection, Position, Port, Circuit, PlacementError
from .channels import PinSide, determine_channel_layout, count_nets
from .engine import place_gates, place_first_stage, get_net_index_in_layout

__all__ = [
    # Models
    "PinConnection", "Position", "Port", "Circuit", "PlacementError",
    # Channels
    "PinSide", "determine_channel_layout", "count_nets",
    # Engine
    "place_gates", "place_first_stage", "get_net_index_in_layout",
]

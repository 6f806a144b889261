"""Render — the shared grid and everything that draws into it.

Submodules:
  grid          Bounded, growable cell grid (GridBoundsError).
  engine        Channel wire rendering, lead wires, gate patterns.
  serialization Text overview, Lua / MTS schematics, JSON summary.
"""

from .grid import Grid, GridBoundsError
from .engine import draw_channel_wires, draw_lead_wires, draw_circuit
from .serialization import grid_to_text, grid_to_lua, grid_to_mts, layout_to_dict

__all__ = [
    # Grid
    "Grid", "GridBoundsError",
    # Engine
    "draw_channel_wires", "draw_lead_wires", "draw_circuit",
    # Serialization
    "grid_to_text", "grid_to_lua", "grid_to_mts", "layout_to_dict",
]

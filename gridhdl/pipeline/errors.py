"""Common base for every error the layout pipeline raises.

Each stage defines its own subclass next to its models; callers that
only care about "the layout failed" catch :class:`LayoutError`.
"""

from __future__ import annotations


class LayoutError(Exception):
    """Base class for all netlist, placement, routing and grid errors."""

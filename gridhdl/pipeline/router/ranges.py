"""Claimed track ranges within one routing sub-step."""

from __future__ import annotations


class ClaimedRanges:
    """Inclusive track intervals already used by wires of the current step.

    Two vertical wires in the same column must not share a track, so a
    connection may only be drawn if its covering interval is disjoint
    from every interval claimed so far.
    """

    def __init__(self) -> None:
        self._ranges: list[tuple[int, int]] = []

    def add(self, a: int, b: int) -> None:
        self._ranges.append((min(a, b), max(a, b)))

    def overlaps(self, a: int, b: int) -> bool:
        lo, hi = min(a, b), max(a, b)
        return any(lo <= r_hi and r_lo <= hi for r_lo, r_hi in self._ranges)

    def span_sum(self) -> int:
        """Total number of tracks claimed."""
        return sum(hi - lo + 1 for lo, hi in self._ranges)

"""
Type definitions for the Stitch-Consumption Table.

Entries are loaded from ``data/stitch_values.yaml`` and are frozen after
startup. RowStitchCount is the runtime result of counting a written row.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TechniqueEntry:
    """
    How many live stitches a technique takes from the left needle and how
    many it leaves on the right needle.

    Example: SSK consumes 2 and produces 1 (net -1).
    """

    id: str
    consumes: int
    produces: int

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("TechniqueEntry.id must be non-empty")
        if self.consumes < 0:
            raise ValueError(f"{self.id}: consumes must be >= 0, got {self.consumes}")
        if self.produces < 0:
            raise ValueError(f"{self.id}: produces must be >= 0, got {self.produces}")

    @property
    def stitch_change(self) -> int:
        """Net stitch change: positive for increases, negative for decreases."""
        return self.produces - self.consumes


@dataclass(frozen=True)
class RowStitchCount:
    """Stitch totals for one written row."""

    starting_stitches: int
    consumed: int
    produced: int

    @property
    def stitch_change(self) -> int:
        return self.produced - self.consumed

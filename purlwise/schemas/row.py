"""
Row-level vocabulary shared by every generator: how the fabric is worked,
which face of it is towards the knitter, and the Instruction value the router
hands back to its caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Construction(str, Enum):
    """How the fabric is worked."""

    FLAT = "flat"
    ROUND = "round"

    @property
    def row_term(self) -> str:
        return "round" if self is Construction.ROUND else "row"


class Side(str, Enum):
    """Face of the fabric towards the knitter."""

    RS = "RS"
    WS = "WS"


class InstructionSource(str, Enum):
    """Which generator answered a routed request."""

    BRIOCHE = "brioche"
    CONSTRUCTION = "construction"
    SHAPING = "shaping"
    ROW_BY_ROW = "row_by_row"
    ALGORITHMIC = "algorithmic"
    FALLBACK = "fallback"


def side_for_row(row_number: int, construction: Construction) -> Side:
    """
    Flat fabric alternates RS (odd rows) and WS (even rows); round fabric has
    no wrong side.
    """
    if construction is Construction.ROUND:
        return Side.RS
    return Side.RS if row_number % 2 == 1 else Side.WS


@dataclass(frozen=True)
class Instruction:
    """
    One synthesized row instruction.

    ``stitch_change`` is the net change across the whole row. ``help_topic``
    is an opaque key resolved by an external guide store.
    """

    text: str
    is_valid: bool = True
    is_supported: bool = True
    stitch_change: int = 0
    help_topic: Optional[str] = None
    source: InstructionSource = InstructionSource.ALGORITHMIC

    def __post_init__(self) -> None:
        if not isinstance(self.text, str):
            raise ValueError(f"Instruction.text must be a string, got {type(self.text).__name__}")

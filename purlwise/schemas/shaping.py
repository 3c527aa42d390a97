"""
Shaping vocabulary: the marker array a shaped row is read against, the
actions applied on that row, and how often the row recurs.

All types are frozen. ShapingAction is a closed union of four dataclasses;
consumers dispatch on the concrete type with ``match``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional, Union

BOR = "BOR"  # beginning-of-round marker


# ── Enums ──────────────────────────────────────────────────────────────────────


class EdgeTarget(str, Enum):
    BEGINNING = "beginning"
    END = "end"


class MarkerPosition(str, Enum):
    """Where a technique is worked relative to its marker."""

    BEFORE = "before"
    AFTER = "after"
    BEFORE_AND_AFTER = "before_and_after"


def parse_distance(value: Union[int, str, None]) -> int:
    """
    Normalize an authored stand-off distance.

    ``"at"`` and ``None`` mean directly at the marker or edge (0). Numeric
    strings are accepted. Negative distances raise ValueError.
    """
    if value is None or value == "at":
        return 0
    distance = int(value)
    if distance < 0:
        raise ValueError(f"distance must be >= 0, got {distance}")
    return distance


# ── Actions ────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ContinueAction:
    """Work the row in the base pattern with no stitch change."""


@dataclass(frozen=True)
class EdgeAction:
    """
    A technique worked at the beginning and/or end of the row.

    When both edges are targeted, a compound technique such as
    ``"SSK_K2tog"`` is split: first half at the beginning, second at the end.
    ``distance`` is the number of plain stitches between the edge and the
    technique.
    """

    technique: str
    targets: tuple[EdgeTarget, ...]
    distance: int = 0

    def __post_init__(self) -> None:
        if not self.technique:
            raise ValueError("EdgeAction.technique must be non-empty")
        if not self.targets:
            raise ValueError("EdgeAction.targets must name at least one edge")
        if self.distance < 0:
            raise ValueError(f"EdgeAction.distance must be >= 0, got {self.distance}")


@dataclass(frozen=True)
class MarkerAction:
    """
    A technique worked beside one or more named markers.

    ``targets`` may include the beginning-of-round marker ``"BOR"``; those
    applications are rendered as edge work at the start and end of the round.
    """

    technique: str
    targets: tuple[str, ...]
    position: MarkerPosition
    distance: int = 0

    def __post_init__(self) -> None:
        if not self.technique:
            raise ValueError("MarkerAction.technique must be non-empty")
        if not self.targets:
            raise ValueError("MarkerAction.targets must name at least one marker")
        if self.distance < 0:
            raise ValueError(f"MarkerAction.distance must be >= 0, got {self.distance}")

    @property
    def signature(self) -> tuple[str, MarkerPosition, int]:
        """What this action does at a marker, independent of which marker."""
        return (self.technique, self.position, self.distance)


@dataclass(frozen=True)
class BindOffAction:
    """Bind off ``amount`` stitches (or ``"all"``) at the named location(s)."""

    amount: Union[int, Literal["all"]]
    targets: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.amount != "all" and (not isinstance(self.amount, int) or self.amount < 1):
            raise ValueError(f"BindOffAction.amount must be >= 1 or 'all', got {self.amount!r}")


ShapingAction = Union[ContinueAction, EdgeAction, MarkerAction, BindOffAction]


# ── Timing ─────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Timing:
    """
    How often a shaping row recurs.

    ``frequency`` is the row interval (every Nth row). At most one of
    ``times`` (repeat count) and ``target_stitches`` (stop when this many
    stitches remain) may be set.
    """

    frequency: int = 1
    times: Optional[int] = None
    target_stitches: Optional[int] = None

    def __post_init__(self) -> None:
        if self.frequency < 1:
            raise ValueError(f"Timing.frequency must be >= 1, got {self.frequency}")
        if self.times is not None and self.target_stitches is not None:
            raise ValueError("Timing.times and Timing.target_stitches are mutually exclusive")
        if self.times is not None and self.times < 1:
            raise ValueError(f"Timing.times must be >= 1, got {self.times}")
        if self.target_stitches is not None and self.target_stitches < 0:
            raise ValueError(
                f"Timing.target_stitches must be >= 0, got {self.target_stitches}"
            )


# ── Marker array ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class MarkerArray:
    """
    Ordered stitch segments and marker names as laid out on the needle,
    e.g. ``(10, "A", 20, "B", 10)`` or ``("BOR", 24, "M1", 24)``.
    """

    items: tuple[Union[int, str], ...] = ()

    def __post_init__(self) -> None:
        for item in self.items:
            if isinstance(item, bool) or not isinstance(item, (int, str)):
                raise ValueError(f"MarkerArray items must be int or str, got {item!r}")
            if isinstance(item, int) and item < 0:
                raise ValueError(f"MarkerArray segment counts must be >= 0, got {item}")
            if isinstance(item, str) and not item:
                raise ValueError("MarkerArray marker names must be non-empty")

    @property
    def markers(self) -> tuple[str, ...]:
        """Marker names in needle order, excluding the beginning-of-round marker."""
        return tuple(i for i in self.items if isinstance(i, str) and i != BOR)

    @property
    def has_bor(self) -> bool:
        return BOR in self.items

    @property
    def stitch_total(self) -> int:
        return sum(i for i in self.items if isinstance(i, int))

    def matches(self, stitch_count: int) -> bool:
        """True if the segment counts add up to ``stitch_count``."""
        return self.stitch_total == stitch_count

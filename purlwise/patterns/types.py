"""
Core type definitions for the Pattern Repeat Calculator.

PatternKind is the closed set of patterns the calculator knows; each kind has
exactly one StitchPatternDefinition in the registry. Definitions are loaded
from ``data/patterns.yaml`` and are frozen after startup.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# ── Enums ──────────────────────────────────────────────────────────────────────


class PatternKind(str, Enum):
    STOCKINETTE = "STOCKINETTE"
    GARTER = "GARTER"
    REVERSE_STOCKINETTE = "REVERSE_STOCKINETTE"
    SEED = "SEED"
    MOSS = "MOSS"
    DOUBLE_SEED = "DOUBLE_SEED"
    BASKETWEAVE = "BASKETWEAVE"
    RIB_1X1 = "RIB_1X1"
    RIB_2X2 = "RIB_2X2"
    RIB_3X3 = "RIB_3X3"
    RIB_2X1 = "RIB_2X1"
    TWISTED_RIB_1X1 = "TWISTED_RIB_1X1"
    TWISTED_RIB_2X2 = "TWISTED_RIB_2X2"
    LINEN = "LINEN"
    RICE = "RICE"
    TRINITY = "TRINITY"
    BROKEN_RIB = "BROKEN_RIB"


class RowFamily(str, Enum):
    """How a pattern's wrong-side rows are derived from its row table."""

    RIB = "rib"  # WS = RS instruction with K and P exchanged
    TEXTURE = "texture"  # WS = unit walked backward, flipped, end-anchored
    CLUSTER = "cluster"  # rows written as worked; no derivation


# ── Stitches ───────────────────────────────────────────────────────────────────

_FLIPPED_BASE = {"K": "P", "P": "K"}
_FLIPPED_SUFFIX = {"wyif": "wyib", "wyib": "wyif"}


@dataclass(frozen=True)
class StitchToken:
    """
    One stitch as it is worked.

    Plain stitches have ``base`` K, P or sl and a ``suffix`` (``"tbl"``,
    ``"wyif"``, ``"wyib"``). Literal stitches (clusters, multi-stitch
    decreases) carry their full text in ``base`` and consume ``width``
    stitches.
    """

    base: str
    suffix: str = ""
    width: int = 1
    literal: bool = False

    def __post_init__(self) -> None:
        if self.width < 0:
            raise ValueError(f"StitchToken.width must be >= 0, got {self.width}")

    def flipped(self) -> StitchToken:
        """The same stitch as worked from the other face of the fabric."""
        if self.literal:
            return self
        return StitchToken(
            base=_FLIPPED_BASE.get(self.base, self.base),
            suffix=_FLIPPED_SUFFIX.get(self.suffix, self.suffix),
        )

    def render(self, count: int = 1) -> str:
        """Text for ``count`` consecutive copies: ``K2``, ``K1tbl``, ``sl1 wyif``."""
        if self.literal:
            return self.base
        if self.base == "sl":
            return f"sl{count} {self.suffix}".rstrip()
        return f"{self.base}{count}{self.suffix}"

    @property
    def is_plain(self) -> bool:
        """A bare knit or purl."""
        return not self.literal and not self.suffix and self.base in ("K", "P")


@dataclass(frozen=True)
class RowSpec:
    """One pattern row's repeat unit."""

    unit: tuple[StitchToken, ...]

    def __post_init__(self) -> None:
        if not self.unit:
            raise ValueError("RowSpec.unit must contain at least one stitch")
        if self.width < 1:
            raise ValueError("RowSpec.unit must consume at least one stitch")

    @property
    def width(self) -> int:
        """Stitches consumed by one repeat of the unit."""
        return sum(t.width for t in self.unit)

    @property
    def has_literals(self) -> bool:
        return any(t.literal for t in self.unit)


@dataclass(frozen=True)
class StitchPatternDefinition:
    kind: PatternKind
    name: str
    family: RowFamily
    stitch_multiple: int
    rows: tuple[RowSpec, ...]
    description: str = ""
    aliases: tuple[str, ...] = ()
    help_topic: str | None = None

    def __post_init__(self) -> None:
        if self.stitch_multiple < 1:
            raise ValueError(f"{self.name}: stitch_multiple must be >= 1, got {self.stitch_multiple}")
        if not self.rows:
            raise ValueError(f"{self.name}: at least one row is required")

    @property
    def row_height(self) -> int:
        """Rows per full repeat of the pattern."""
        return len(self.rows)


@dataclass(frozen=True)
class PatternMetadata:
    """Public summary of a pattern, without its row table."""

    name: str
    row_height: int
    stitch_multiple: int
    description: str
    family: RowFamily

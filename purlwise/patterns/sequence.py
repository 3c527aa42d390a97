"""
Row segment arithmetic: lay a repeat unit across a row of N stitches.

A row is described as a short list of RowSegments (a unit and how many
times it is worked), never as N individual stitches, so every function here
runs in time proportional to the unit length.

Orientation rules:
  - start-anchored (RS rows, rounds): full repeats first, then the leading
    ``remainder`` stitches of the unit.
  - end-anchored (texture WS rows): the trailing ``remainder`` stitches of
    the reversed, flipped unit first, then full repeats of it. Read in
    knitting order this is exactly the RS stitch sequence seen from behind.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from purlwise.utilities.formatting import collapse_blocks, format_repeat

from .types import StitchToken

PURL = StitchToken(base="P")


@dataclass(frozen=True)
class RowSegment:
    """``repeats`` consecutive copies of ``stitches``."""

    stitches: tuple[StitchToken, ...]
    repeats: int = 1

    def __post_init__(self) -> None:
        if not self.stitches:
            raise ValueError("RowSegment.stitches must be non-empty")
        if self.repeats < 1:
            raise ValueError(f"RowSegment.repeats must be >= 1, got {self.repeats}")

    @property
    def stitches_per_repeat(self) -> int:
        return sum(t.width for t in self.stitches)

    @property
    def consumed(self) -> int:
        """Live stitches this segment works."""
        return self.stitches_per_repeat * self.repeats

    @property
    def unit_text(self) -> str:
        return unit_text(self.stitches)

    @property
    def text(self) -> str:
        return format_repeat(self.unit_text, self.repeats)


def unit_text(stitches: Sequence[StitchToken]) -> str:
    """Group runs of identical plain stitches: ``K, K, P, P`` → ``"K2, P2"``."""
    runs: list[str] = []
    index = 0
    while index < len(stitches):
        stitch = stitches[index]
        count = 1
        if not stitch.literal:
            while index + count < len(stitches) and stitches[index + count] == stitch:
                count += 1
        runs.append(stitch.render(count))
        index += count
    return ", ".join(runs)


def flip_stitches(stitches: Sequence[StitchToken]) -> tuple[StitchToken, ...]:
    return tuple(s.flipped() for s in stitches)


def start_anchored(unit: tuple[StitchToken, ...], stitch_count: int) -> list[RowSegment]:
    """Full repeats of ``unit`` followed by its leading partial repeat."""
    repeats, remainder = divmod(stitch_count, len(unit))
    segments: list[RowSegment] = []
    if repeats:
        segments.append(RowSegment(unit, repeats))
    if remainder:
        segments.append(RowSegment(unit[:remainder]))
    return segments


def end_anchored_mirror(unit: tuple[StitchToken, ...], stitch_count: int) -> list[RowSegment]:
    """
    The wrong-side view of ``start_anchored(unit, stitch_count)``.

    Walks the unit backward from its last stitch with every stitch flipped.
    The partial repeat comes first and is taken from the end of the walked
    unit, because the stitches the RS row finished on are the first ones the
    WS row meets.
    """
    walked = flip_stitches(unit[::-1])
    repeats, remainder = divmod(stitch_count, len(unit))
    segments: list[RowSegment] = []
    if remainder:
        segments.append(RowSegment(walked[len(walked) - remainder :]))
    if repeats:
        segments.append(RowSegment(walked, repeats))
    return segments


def element_flip(segments: Sequence[RowSegment]) -> list[RowSegment]:
    """Exchange K and P in every segment, keeping counts and order."""
    return [RowSegment(flip_stitches(s.stitches), s.repeats) for s in segments]


def cluster_row(unit: tuple[StitchToken, ...], stitch_count: int) -> list[RowSegment]:
    """Full repeats of a cluster unit; stitches too few for another cluster are purled."""
    width = sum(t.width for t in unit)
    repeats, remainder = divmod(stitch_count, width)
    segments: list[RowSegment] = []
    if repeats:
        segments.append(RowSegment(unit, repeats))
    if remainder:
        segments.append(RowSegment((PURL,) * remainder))
    return segments


def uniform_stitch(segments: Sequence[RowSegment]) -> StitchToken | None:
    """The single stitch every segment is made of, or None if the row mixes stitches."""
    stitches = {s for seg in segments for s in seg.stitches}
    if len(stitches) == 1:
        stitch = next(iter(stitches))
        return None if stitch.literal else stitch
    return None


def render_segments(segments: Sequence[RowSegment]) -> str:
    """Join segments into row text, merging adjacent identical units."""
    blocks = collapse_blocks([(seg.unit_text, seg.repeats) for seg in segments])
    return ", ".join(format_repeat(text, count) for text, count in blocks)

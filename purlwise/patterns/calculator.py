"""
Pattern Repeat Calculator: the instruction for one row of a periodic stitch
pattern.

calculate_row(name, row, stitches, construction, offset) resolves the
pattern, picks the pattern row for the effective phase, lays its repeat unit
across the live stitches for the side being worked, and renders the result.

Unknown pattern names return None so the caller can try something else.
Any other failure degrades to "Work in <pattern> pattern" with a
RuntimeWarning; nothing is raised to the caller.
"""

from __future__ import annotations

import warnings
from typing import Optional, Union

from purlwise.schemas.row import Construction, Side, side_for_row

from .registry import get_registry
from .sequence import (
    RowSegment,
    cluster_row,
    element_flip,
    end_anchored_mirror,
    render_segments,
    start_anchored,
    uniform_stitch,
)
from .types import PatternMetadata, RowFamily, StitchPatternDefinition


def effective_phase(row_number: int, starting_row_offset: int, row_height: int) -> int:
    """
    1-based pattern row worked on ``row_number`` when the step began on
    pattern row ``starting_row_offset``.
    """
    return ((row_number - 1 + starting_row_offset - 1) % row_height) + 1


def _build_segments(
    definition: StitchPatternDefinition,
    row_number: int,
    stitch_count: int,
    construction: Construction,
    starting_row_offset: int,
) -> list[RowSegment]:
    if row_number < 1:
        raise ValueError(f"row_number must be >= 1, got {row_number}")
    if stitch_count < 1:
        raise ValueError(f"stitch_count must be >= 1, got {stitch_count}")
    if starting_row_offset < 1:
        raise ValueError(f"starting_row_offset must be >= 1, got {starting_row_offset}")

    phase = effective_phase(row_number, starting_row_offset, definition.row_height)
    unit = definition.rows[phase - 1].unit
    side = side_for_row(row_number, construction)

    match definition.family:
        case RowFamily.RIB:
            segments = start_anchored(unit, stitch_count)
            return segments if side is Side.RS else element_flip(segments)
        case RowFamily.TEXTURE:
            if side is Side.RS:
                return start_anchored(unit, stitch_count)
            return end_anchored_mirror(unit, stitch_count)
        case RowFamily.CLUSTER:
            if any(t.literal for t in unit):
                return cluster_row(unit, stitch_count)
            return start_anchored(unit, stitch_count)
        case _:
            raise ValueError(f"Unhandled row family {definition.family!r}")


def _render(segments: list[RowSegment]) -> str:
    stitch = uniform_stitch(segments)
    if stitch is not None:
        if stitch.is_plain:
            return "Knit all" if stitch.base == "K" else "Purl all"
        return stitch.render(sum(s.consumed for s in segments))
    return render_segments(segments)


def row_segments(
    pattern_name: str,
    row_number: int,
    stitch_count: int,
    construction: Union[Construction, str] = Construction.FLAT,
    starting_row_offset: int = 1,
) -> Optional[list[RowSegment]]:
    """
    Structured form of a pattern row: the segments ``calculate_row`` renders.

    Returns None for an unknown pattern name.

    Raises
    ------
    ValueError
        If ``row_number``, ``stitch_count`` or ``starting_row_offset`` is
        below 1, or ``construction`` is not a known construction.
    """
    definition = get_registry().resolve(pattern_name)
    if definition is None:
        return None
    return _build_segments(
        definition, row_number, stitch_count, Construction(construction), starting_row_offset
    )


def calculate_row(
    pattern_name: str,
    row_number: int,
    stitch_count: int,
    construction: Union[Construction, str] = Construction.FLAT,
    starting_row_offset: int = 1,
) -> Optional[str]:
    """
    Compute the instruction for one row of a stitch pattern.

    Parameters
    ----------
    pattern_name:
        Authored pattern name, e.g. ``"2x2 Rib"`` or ``"seed"``.
    row_number:
        Absolute 1-based row within the step. Its parity decides RS/WS for
        flat work.
    stitch_count:
        Live stitches on the needle.
    construction:
        ``flat`` or ``round``. Rounds are always worked from the RS.
    starting_row_offset:
        Pattern row the step started on (1 = beginning of the pattern).

    Returns
    -------
    str | None
        Instruction text, or None if the pattern is not known here.
    """
    definition = get_registry().resolve(pattern_name)
    if definition is None:
        return None
    try:
        segments = _build_segments(
            definition, row_number, stitch_count, Construction(construction), starting_row_offset
        )
        return _render(segments)
    except Exception as exc:  # noqa: BLE001
        warnings.warn(
            f"Could not calculate {definition.name} row {row_number}: {exc}",
            RuntimeWarning,
            stacklevel=2,
        )
        return f"Work in {definition.name} pattern"


def is_algorithmic_pattern(pattern_name: str) -> bool:
    return get_registry().resolve(pattern_name) is not None


def pattern_metadata(pattern_name: str) -> Optional[PatternMetadata]:
    """Row height, stitch multiple and description of a known pattern, else None."""
    definition = get_registry().resolve(pattern_name)
    if definition is None:
        return None
    return PatternMetadata(
        name=definition.name,
        row_height=definition.row_height,
        stitch_multiple=definition.stitch_multiple,
        description=definition.description,
        family=definition.family,
    )


def list_patterns() -> list[str]:
    return get_registry().list_names()

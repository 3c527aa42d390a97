"""
Authored row text: colorwork, row-by-row entries and two-colour brioche.

These generators never compute stitches themselves. They pick the authored
text that belongs to the current row and report its stitch change, counted
from the written row where the author did not give one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from purlwise.patterns.calculator import effective_phase
from purlwise.schemas.step import BriocheConfig, StepDescription
from purlwise.techniques.counting import count_row_stitches
from purlwise.utilities.formatting import expand_abbreviations, strip_row_prefix

BRIOCHE_PATTERN = "Two-Color Brioche"


@dataclass(frozen=True)
class AuthoredRow:
    text: str
    stitch_change: int = 0


def _row_by_row_text(step: StepDescription, current_row: int) -> Optional[str]:
    if not step.row_instructions:
        return None
    index = effective_phase(current_row, step.starting_row_in_pattern, len(step.row_instructions))
    text = step.row_instructions[index - 1]
    return text if text and text.strip() else None


def authored_row_text(step: StepDescription, current_row: int) -> Optional[str]:
    """
    Text authored for ``current_row``, or None if the step carries none.

    Lookup order: explicit per-row text (absolute row within the step), then
    the row-by-row sequence wrapped on its own length from the step's
    starting row, then the colorwork description.
    """
    explicit = step.row_text.get(current_row)
    if explicit and explicit.strip():
        return explicit
    sequenced = _row_by_row_text(step, current_row)
    if sequenced is not None:
        return sequenced
    if step.colorwork and step.colorwork.text and step.colorwork.text.strip():
        return step.colorwork.text
    return None


def authored_row(
    step: StepDescription, current_row: int, current_stitch_count: int
) -> Optional[AuthoredRow]:
    """Authored text for the row; row-by-row entries have abbreviations spelled out."""
    text = authored_row_text(step, current_row)
    if text is None:
        return None
    explicit = step.row_text.get(current_row)
    sequenced = not (explicit and explicit.strip()) and text == _row_by_row_text(step, current_row)
    text = strip_row_prefix(text)
    counted = count_row_stitches(text, current_stitch_count)
    if sequenced:
        text = expand_abbreviations(text)
    return AuthoredRow(text=text, stitch_change=counted.stitch_change)


def is_brioche_step(step: StepDescription) -> bool:
    return step.brioche is not None or step.pattern.strip().casefold() == BRIOCHE_PATTERN.casefold()


def brioche_row(
    brioche: BriocheConfig, current_row: int, starting_row_in_pattern: int = 1
) -> Optional[AuthoredRow]:
    """
    Both halves of the pattern row worked on ``current_row``.

    Half ``a`` is worked with the first colour and carries the row's stitch
    change; half ``b`` is worked with the second colour and slides back
    along the needle without turning.
    """
    pairs = brioche.pair_count
    if pairs == 0:
        return None
    pair = effective_phase(current_row, starting_row_in_pattern, pairs)
    first = brioche.half(pair, "a")
    second = brioche.half(pair, "b")
    color_a, color_b = brioche.colors

    parts: list[str] = []
    if first and first.instruction.strip():
        parts.append(f"With color {color_a}: {strip_row_prefix(first.instruction)}")
    if second and second.instruction.strip():
        parts.append(f"With color {color_b}: {strip_row_prefix(second.instruction)}")
    if not parts:
        return None
    return AuthoredRow(text=". ".join(parts), stitch_change=first.stitch_change if first else 0)

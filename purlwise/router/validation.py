"""
Pre-flight checks for a step before rows are requested from it.

validate_step() never raises. It reports problems as errors (the router can
only fall back) and warnings (instructions will render, but may not be what
the knitter expects).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from purlwise.patterns.calculator import pattern_metadata
from purlwise.schemas.shaping import BOR, MarkerAction
from purlwise.schemas.step import StepDescription

from .colorwork import is_brioche_step
from .construction import ConstructionKind, get_registry


@dataclass(frozen=True)
class PatternSupport:
    """Which router tiers can answer for a step."""

    pattern_name: Optional[str]
    is_brioche: bool = False
    is_construction: bool = False
    is_shaping: bool = False
    has_authored_rows: bool = False
    is_algorithmic: bool = False

    @property
    def is_fully_supported(self) -> bool:
        return (
            self.is_brioche
            or self.is_construction
            or self.is_shaping
            or self.has_authored_rows
            or self.is_algorithmic
        )


@dataclass(frozen=True)
class StepValidation:
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    support: Optional[PatternSupport] = None

    @property
    def is_valid(self) -> bool:
        return not self.errors


def pattern_support(step: StepDescription) -> PatternSupport:
    pattern = step.pattern if isinstance(step.pattern, str) and step.pattern.strip() else None
    if pattern is None:
        return PatternSupport(pattern_name=None)
    has_authored = bool(
        any(t.strip() for t in step.row_text.values())
        or any(t.strip() for t in step.row_instructions)
        or (step.colorwork and step.colorwork.text and step.colorwork.text.strip())
    )
    return PatternSupport(
        pattern_name=pattern,
        is_brioche=is_brioche_step(step),
        is_construction=get_registry().construction_kind(pattern) is not None,
        is_shaping=step.is_shaping and step.shaping is not None,
        has_authored_rows=has_authored,
        is_algorithmic=pattern_metadata(pattern) is not None,
    )


def _shaping_warnings(step: StepDescription, stitch_count: int) -> list[str]:
    if step.shaping is None:
        return []
    warnings: list[str] = []
    array = step.shaping.marker_array
    if not step.shaping.actions:
        warnings.append("Shaping step has no actions")
    if array.stitch_total and not array.matches(stitch_count):
        warnings.append(
            f"Marker array holds {array.stitch_total} stitches but the step has {stitch_count}"
        )
    known = set(array.markers)
    for action in step.shaping.actions:
        if not isinstance(action, MarkerAction):
            continue
        for target in action.targets:
            if target == BOR and array.has_bor:
                continue
            if target not in known:
                warnings.append(f"Marker {target!r} is not in the marker array and will be skipped")
    return warnings


def validate_step(step: StepDescription, stitch_count: int) -> StepValidation:
    """
    Check that ``step`` has what the router needs at ``stitch_count`` stitches.

    Errors: no pattern name; a stitch count below 1 (cast-on steps may start
    from zero). Warnings: a stitch count that is not a multiple of the
    pattern's stitch multiple; marker arrays that disagree with the stitch
    count; marker actions aimed at markers the array does not have.
    """
    support = pattern_support(step)
    errors: list[str] = []
    warnings: list[str] = []

    if support.pattern_name is None:
        errors.append("Step has no pattern defined")

    starts_empty = (
        support.pattern_name is not None
        and get_registry().construction_kind(support.pattern_name) is ConstructionKind.CAST_ON
    )
    if not isinstance(stitch_count, int) or stitch_count < (0 if starts_empty else 1):
        errors.append("Invalid stitch count")
        return StepValidation(errors=tuple(errors), warnings=tuple(warnings), support=support)

    if support.is_algorithmic and support.pattern_name is not None:
        metadata = pattern_metadata(support.pattern_name)
        if metadata and metadata.stitch_multiple > 1 and stitch_count % metadata.stitch_multiple:
            warnings.append(
                f"{metadata.name} works best with multiples of "
                f"{metadata.stitch_multiple} stitches"
            )

    if support.is_shaping:
        warnings.extend(_shaping_warnings(step, stitch_count))

    return StepValidation(errors=tuple(errors), warnings=tuple(warnings), support=support)

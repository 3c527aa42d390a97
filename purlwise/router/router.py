"""
Instruction Router: pick the generator that answers one row of one step.

Tiers, first match wins, re-evaluated on every call:

  1. Two-colour brioche        paired rows, one colour each
  2. Construction-only steps   cast on, bind off, pick up, holders...
  3. Shaping steps             Marker Shaping Synthesizer
  4. Authored text             per-row text, row-by-row entries, colorwork
  5. Known stitch patterns     Pattern Repeat Calculator
  6. Fallback                  "Work in <pattern> pattern", unsupported

Every answer has any leading "Row 3:" label stripped. Exceptions raised
inside any tier are converted to the fallback with a RuntimeWarning.
"""

from __future__ import annotations

import warnings
from typing import Optional, Union

from purlwise.patterns.calculator import calculate_row
from purlwise.patterns.registry import get_registry as get_pattern_registry
from purlwise.schemas.row import Construction, Instruction, InstructionSource
from purlwise.schemas.step import StepDescription
from purlwise.shaping.synthesizer import NO_ACTIONS, NO_VALID_ACTIONS, synthesize_shaping
from purlwise.utilities.formatting import strip_row_prefix

from .colorwork import authored_row, brioche_row, is_brioche_step
from .construction import StepRegistry, get_registry, render_construction

BRIOCHE_HELP = "brioche_help"


def _instruction(
    text: str,
    source: InstructionSource,
    stitch_change: int = 0,
    help_topic: Optional[str] = None,
    is_valid: bool = True,
    is_supported: bool = True,
) -> Instruction:
    return Instruction(
        text=strip_row_prefix(text),
        is_valid=is_valid,
        is_supported=is_supported,
        stitch_change=stitch_change,
        help_topic=help_topic,
        source=source,
    )


def fallback_instruction(step: Optional[StepDescription]) -> Instruction:
    """Generic "work in pattern" line, marked unsupported."""
    pattern = getattr(step, "pattern", None)
    if not isinstance(pattern, str) or not pattern.strip():
        pattern = None
    description = getattr(step, "description", None)
    if isinstance(description, str) and description.strip():
        text = description
    elif pattern:
        text = f"Work in {pattern} pattern"
    else:
        text = "Work in pattern"
    help_topic = get_registry().help_for_pattern(pattern) if pattern else None
    return _instruction(
        text, InstructionSource.FALLBACK, help_topic=help_topic, is_supported=False
    )


# ── Tiers ──────────────────────────────────────────────────────────────────────


def _brioche(step: StepDescription, current_row: int, registry: StepRegistry) -> Optional[Instruction]:
    if not is_brioche_step(step):
        return None
    config = step.brioche if step.brioche and step.brioche.pair_count else registry.brioche_reference
    row = brioche_row(config, current_row, step.starting_row_in_pattern)
    if row is None:
        return None
    return _instruction(row.text, InstructionSource.BRIOCHE, row.stitch_change, BRIOCHE_HELP)


def _construction(
    step: StepDescription, current_stitch_count: int, registry: StepRegistry
) -> Optional[Instruction]:
    kind = registry.construction_kind(step.pattern)
    if kind is None:
        return None
    result = render_construction(kind, step.construction_params, current_stitch_count, registry)
    return _instruction(
        result.text, InstructionSource.CONSTRUCTION, result.stitch_change, result.help_topic
    )


def _shaping(
    step: StepDescription, current_stitch_count: int, construction: Construction
) -> Optional[Instruction]:
    if not step.is_shaping or step.shaping is None:
        return None
    shaping = step.shaping
    result = synthesize_shaping(
        shaping.actions,
        timing=shaping.timing,
        marker_array=shaping.marker_array,
        construction=construction,
        base_pattern=shaping.base_pattern or "pattern",
        stitch_count=current_stitch_count,
    )
    return _instruction(
        result.text,
        InstructionSource.SHAPING,
        result.stitch_change,
        is_valid=result.text not in (NO_ACTIONS, NO_VALID_ACTIONS),
    )


def _authored(
    step: StepDescription, current_row: int, current_stitch_count: int, registry: StepRegistry
) -> Optional[Instruction]:
    row = authored_row(step, current_row, current_stitch_count)
    if row is None:
        return None
    kind = step.colorwork.kind if step.colorwork else None
    help_topic = registry.help_for_colorwork(kind) or registry.help_for_pattern(step.pattern)
    return _instruction(row.text, InstructionSource.ROW_BY_ROW, row.stitch_change, help_topic)


def _algorithmic(
    step: StepDescription, current_row: int, current_stitch_count: int, construction: Construction
) -> Optional[Instruction]:
    text = calculate_row(
        step.pattern,
        current_row,
        current_stitch_count,
        construction,
        starting_row_offset=step.starting_row_in_pattern,
    )
    if text is None:
        return None
    definition = get_pattern_registry().resolve(step.pattern)
    help_topic = definition.help_topic if definition else None
    return _instruction(text, InstructionSource.ALGORITHMIC, help_topic=help_topic)


# ── Public entry point ─────────────────────────────────────────────────────────


def route(
    step: StepDescription,
    current_row: int,
    current_stitch_count: int,
    construction: Union[Construction, str] = Construction.FLAT,
) -> Instruction:
    """
    Instruction for ``current_row`` of ``step``.

    Parameters
    ----------
    step:
        The authored step the row belongs to.
    current_row:
        Absolute 1-based row within the step.
    current_stitch_count:
        Live stitches at the start of the row.
    construction:
        ``flat`` or ``round``.

    Returns
    -------
    Instruction
        Always a well-formed instruction. Steps no generator recognises get
        ``"Work in <pattern> pattern"`` with ``is_supported=False``.
    """
    try:
        construction = Construction(construction)
        registry = get_registry()
        instruction = (
            _brioche(step, current_row, registry)
            or _construction(step, current_stitch_count, registry)
            or _shaping(step, current_stitch_count, construction)
            or _authored(step, current_row, current_stitch_count, registry)
            or _algorithmic(step, current_row, current_stitch_count, construction)
        )
        return instruction or fallback_instruction(step)
    except Exception as exc:  # noqa: BLE001
        warnings.warn(
            f"Instruction routing failed for row {current_row}: {exc}",
            RuntimeWarning,
            stacklevel=2,
        )
        return fallback_instruction(step)

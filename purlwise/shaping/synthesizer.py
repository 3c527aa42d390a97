"""
Marker Shaping Synthesizer: compose one shaping row from its actions.

Order of work:
  1. No actions                → "No actions defined"
  2. Only continue actions     → "Work in <base> until end of row"
  3. Any bind-off action       → bind-off sentence; other actions are not
                                 rendered on a bind-off row
  4. Edge work, then marker work, joined with " and "
  5. Capitalize, then append frequency, repeat and stitch-change wording

Unknown marker targets are skipped. When nothing renders the result is
"No valid actions defined".
"""

from __future__ import annotations

import warnings
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional, Union

from purlwise.schemas.row import Construction
from purlwise.schemas.shaping import (
    BindOffAction,
    ContinueAction,
    EdgeAction,
    EdgeTarget,
    MarkerAction,
    MarkerArray,
    ShapingAction,
    Timing,
)
from purlwise.techniques.registry import TechniqueRegistry, get_registry
from purlwise.utilities.formatting import capitalize_first, plural, stitch_change_suffix

from .edges import plan_edges, render_edges
from .markers import plan_markers, select_strategy

NO_ACTIONS = "No actions defined"
NO_VALID_ACTIONS = "No valid actions defined"


@dataclass(frozen=True)
class ShapingResult:
    text: str
    stitch_change: int = 0


def timing_text(timing: Timing, construction: Construction) -> str:
    """``" every 2 rows 5 times"``, ``" every 4 rounds until 60 stitches remain"``, or ``""``."""
    text = ""
    if timing.frequency > 1:
        text += f" every {timing.frequency} {construction.row_term}s"
    if timing.target_stitches is not None:
        text += f" until {timing.target_stitches} stitches remain"
    elif timing.times is not None and timing.times > 1:
        text += f" {timing.times} times"
    return text


def _bind_off_location(targets: Sequence[str], row_term: str) -> str:
    if not targets:
        return ""
    names = [
        f"{t} of {row_term}" if t in (EdgeTarget.BEGINNING.value, EdgeTarget.END.value) else t
        for t in targets
    ]
    return " at " + " and ".join(names)


def _bind_off(
    actions: Sequence[BindOffAction],
    total_stitches: int,
    base_pattern: str,
    construction: Construction,
) -> tuple[str, int]:
    sentences: list[str] = []
    change = 0
    for action in actions:
        if action.amount == "all" or (total_stitches and action.amount >= total_stitches):
            sentences.append("Bind off all stitches")
            change -= total_stitches
        else:
            location = _bind_off_location(action.targets, construction.row_term)
            sentences.append(
                f"Bind off {plural(action.amount, 'stitch')}{location} "
                f"then work in {base_pattern} until end of {construction.row_term}"
            )
            change -= action.amount
    return " and ".join(sentences), change


def synthesize_shaping(
    actions: Sequence[ShapingAction],
    timing: Optional[Timing] = None,
    marker_array: Optional[MarkerArray] = None,
    construction: Union[Construction, str] = Construction.FLAT,
    base_pattern: str = "pattern",
    stitch_count: Optional[int] = None,
    registry: Optional[TechniqueRegistry] = None,
) -> ShapingResult:
    """
    Compose the instruction for one shaping row.

    Parameters
    ----------
    actions:
        Shaping actions for the row.
    timing:
        Frequency and repeat of the shaping row; every row, once, by default.
    marker_array:
        Needle layout the marker actions refer to.
    construction:
        ``flat`` or ``round``; decides "row" versus "round" wording.
    base_pattern:
        Stitch pattern worked between shaping points.
    stitch_count:
        Live stitches, used to size "bind off all". The marker array total
        is used only when no live count is given.
    registry:
        Technique registry; the module singleton when omitted.

    Returns
    -------
    ShapingResult
        Instruction text and net stitch change for one shaping row.
    """
    timing = timing or Timing()
    marker_array = marker_array or MarkerArray()
    construction = Construction(construction)
    registry = registry or get_registry()

    if not actions:
        return ShapingResult(NO_ACTIONS)

    if all(isinstance(a, ContinueAction) for a in actions):
        text = f"Work in {base_pattern} until end of {construction.row_term}"
        return ShapingResult(text + timing_text(timing, construction))

    bind_offs = [a for a in actions if isinstance(a, BindOffAction)]
    if bind_offs:
        total = stitch_count if stitch_count is not None else marker_array.stitch_total
        text, change = _bind_off(bind_offs, total, base_pattern, construction)
        return ShapingResult(text + timing_text(timing, construction), change)

    edge_actions = [a for a in actions if isinstance(a, EdgeAction)]
    marker_actions = [a for a in actions if isinstance(a, MarkerAction)]
    marker_plan, bor_actions = plan_markers(marker_actions, marker_array)
    edge_plan = plan_edges(edge_actions, bor_actions)

    clauses: list[str] = []
    change = 0
    if edge_plan:
        edge_text, edge_change = render_edges(
            edge_plan, base_pattern, construction.row_term, registry
        )
        clauses.append(edge_text)
        change += edge_change
    if marker_plan.acted:
        rendering = select_strategy(marker_plan).render(marker_plan, base_pattern, registry)
        clauses.append(rendering.text)
        change += rendering.stitch_change

    if not clauses:
        return ShapingResult(NO_VALID_ACTIONS)

    text = (
        capitalize_first(" and ".join(clauses))
        + timing_text(timing, construction)
        + stitch_change_suffix(change)
    )
    return ShapingResult(text, change)


def synthesize(
    actions: Sequence[ShapingAction],
    timing: Optional[Timing] = None,
    marker_array: Optional[MarkerArray] = None,
    construction: Union[Construction, str] = Construction.FLAT,
    base_pattern: str = "pattern",
) -> str:
    """Instruction text for one shaping row; never raises."""
    try:
        return synthesize_shaping(actions, timing, marker_array, construction, base_pattern).text
    except Exception as exc:  # noqa: BLE001
        warnings.warn(f"Shaping synthesis failed: {exc}", RuntimeWarning, stacklevel=2)
        pattern = base_pattern.strip() if isinstance(base_pattern, str) else ""
        if not pattern or pattern.endswith("pattern"):
            return f"Work in {pattern or 'pattern'}"
        return f"Work in {pattern} pattern"

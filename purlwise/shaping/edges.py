"""
Edge shaping: techniques worked at the beginning and end of a row or round.

Edge actions and actions on the beginning-of-round marker are gathered into
one EdgePlan, then rendered as a single flow:

    [k<d>, technique...], work in <base> until <n> stitches before end of row,
    [technique, k<d>...]

``n`` (the stand-off) is the stitches each end technique consumes plus the
plain stitches requested between it and the edge, so the knitter stops early
enough to work it.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from purlwise.schemas.shaping import EdgeAction, EdgeTarget, MarkerAction, MarkerPosition
from purlwise.techniques.registry import TechniqueRegistry, split_compound
from purlwise.utilities.formatting import plural


@dataclass(frozen=True)
class EdgeOp:
    technique: str
    distance: int = 0


@dataclass(frozen=True)
class EdgePlan:
    beginning: tuple[EdgeOp, ...] = ()
    end: tuple[EdgeOp, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.beginning or self.end)


def plan_edges(
    edge_actions: Sequence[EdgeAction],
    bor_actions: Sequence[MarkerAction] = (),
) -> EdgePlan:
    """
    Collect edge work in action order.

    A compound technique (``"SSK_K2tog"``) contributes its first half at the
    beginning and its second half at the end. On the beginning-of-round
    marker, ``after`` is the start of the round and ``before`` its end; a
    ``before_and_after`` compound works its first half before the marker
    (end of round) and its second half after it (start of round).
    """
    beginning: list[EdgeOp] = []
    end: list[EdgeOp] = []
    for edge in edge_actions:
        first, second = split_compound(edge.technique)
        if EdgeTarget.BEGINNING in edge.targets:
            beginning.append(EdgeOp(first, edge.distance))
        if EdgeTarget.END in edge.targets:
            end.append(EdgeOp(second, edge.distance))
    for action in bor_actions:
        before, after = split_compound(action.technique)
        if action.position in (MarkerPosition.AFTER, MarkerPosition.BEFORE_AND_AFTER):
            beginning.append(EdgeOp(after, action.distance))
        if action.position in (MarkerPosition.BEFORE, MarkerPosition.BEFORE_AND_AFTER):
            end.append(EdgeOp(before, action.distance))
    return EdgePlan(beginning=tuple(beginning), end=tuple(end))


def render_edges(
    plan: EdgePlan,
    base_pattern: str,
    row_term: str,
    registry: TechniqueRegistry,
) -> tuple[str, int]:
    """Return the edge clause and the net stitch change of every edge technique."""
    parts: list[str] = []
    change = 0
    for op in plan.beginning:
        if op.distance:
            parts.append(f"k{op.distance}")
        parts.append(op.technique)
        change += registry.stitch_change(op.technique)

    if plan.end:
        standoff = sum(registry.consumption(op.technique) + op.distance for op in plan.end)
        if standoff > 0:
            parts.append(
                f"work in {base_pattern} until {plural(standoff, 'stitch')} before end of {row_term}"
            )
        else:
            parts.append(f"work in {base_pattern} to end of {row_term}")
        for op in plan.end:
            parts.append(op.technique)
            if op.distance:
                parts.append(f"k{op.distance}")
            change += registry.stitch_change(op.technique)
    else:
        parts.append(f"work in {base_pattern} until end of {row_term}")

    return ", ".join(parts), change

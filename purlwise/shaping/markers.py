"""
Marker shaping strategies.

A MarkerPlan lists the regular markers in needle order and the actions
aimed at each. One of two strategies renders it:

UniformMarkerStrategy
    Every marker carries the same actions. One representative marker is
    written out, followed by "repeat <N-1> times, work to end". Raglan and
    yoke shaping with many markers stays one short clause.

IndividualMarkerStrategy
    Markers differ. The needle is walked left to right up to the last marker
    with an action; idle markers get "work to marker, slip marker".

select_strategy() picks between them by comparing action signatures.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Protocol, runtime_checkable

from purlwise.schemas.shaping import BOR, MarkerAction, MarkerArray, MarkerPosition
from purlwise.techniques.registry import TechniqueRegistry, split_compound
from purlwise.utilities.formatting import plural, times_text


@dataclass(frozen=True)
class MarkerPlan:
    """Actions per regular marker, with unknown targets already dropped."""

    order: tuple[str, ...]
    actions: Mapping[str, tuple[MarkerAction, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "actions", MappingProxyType(dict(self.actions)))

    @property
    def acted(self) -> tuple[str, ...]:
        """Markers with at least one action, in needle order."""
        return tuple(m for m in self.order if self.actions.get(m))

    def signature(self, marker: str) -> tuple[tuple[str, MarkerPosition, int], ...]:
        return tuple(a.signature for a in self.actions.get(marker, ()))


def plan_markers(
    marker_actions: Sequence[MarkerAction],
    marker_array: MarkerArray,
) -> tuple[MarkerPlan, tuple[MarkerAction, ...]]:
    """
    Group actions by target marker.

    Returns the plan for regular markers and the actions (one per targeting)
    aimed at the beginning-of-round marker. Targets that do not appear in the
    marker array are skipped.
    """
    known = set(marker_array.markers)
    grouped: dict[str, list[MarkerAction]] = {}
    bor_actions: list[MarkerAction] = []
    for action in marker_actions:
        for target in action.targets:
            if target == BOR and marker_array.has_bor:
                bor_actions.append(action)
            elif target in known:
                grouped.setdefault(target, []).append(action)
    plan = MarkerPlan(
        order=marker_array.markers,
        actions={marker: tuple(acts) for marker, acts in grouped.items()},
    )
    return plan, tuple(bor_actions)


@dataclass(frozen=True)
class MarkerRendering:
    text: str
    stitch_change: int


def marker_clause(
    actions: Sequence[MarkerAction],
    lead: str,
    registry: TechniqueRegistry,
) -> tuple[str, int]:
    """
    Render the work at one marker, approaching it with ``lead``
    (``"work in stockinette"`` or ``"work"``).
    """
    before: list[tuple[str, int]] = []
    after: list[tuple[str, int]] = []
    for action in actions:
        first, second = split_compound(action.technique)
        match action.position:
            case MarkerPosition.BEFORE:
                before.append((action.technique, action.distance))
            case MarkerPosition.AFTER:
                after.append((action.technique, action.distance))
            case MarkerPosition.BEFORE_AND_AFTER:
                before.append((first, action.distance))
                after.append((second, action.distance))

    standoff = sum(registry.consumption(t) + d for t, d in before)
    if standoff > 0:
        parts = [f"{lead} until {plural(standoff, 'stitch')} before marker"]
    else:
        parts = [f"{lead} to marker"]

    change = 0
    for technique, distance in before:
        parts.append(technique)
        if distance:
            parts.append(f"k{distance}")
        change += registry.stitch_change(technique)
    parts.append("slip marker")
    for technique, distance in after:
        if distance:
            parts.append(f"k{distance}")
        parts.append(technique)
        change += registry.stitch_change(technique)
    return ", ".join(parts), change


@runtime_checkable
class MarkerStrategy(Protocol):
    """Renders a MarkerPlan into one clause."""

    def render(
        self, plan: MarkerPlan, base_pattern: str, registry: TechniqueRegistry
    ) -> MarkerRendering: ...


class UniformMarkerStrategy:
    """One representative marker, then "repeat N-1 times"."""

    def render(
        self, plan: MarkerPlan, base_pattern: str, registry: TechniqueRegistry
    ) -> MarkerRendering:
        count = len(plan.order)
        clause, change = marker_clause(
            plan.actions[plan.order[0]], f"work in {base_pattern}", registry
        )
        text = f"{clause}, repeat {times_text(count - 1)}, work to end"
        return MarkerRendering(text=text, stitch_change=change * count)


class IndividualMarkerStrategy:
    """Each marker in needle order, up to the last one with an action."""

    def render(
        self, plan: MarkerPlan, base_pattern: str, registry: TechniqueRegistry
    ) -> MarkerRendering:
        acted = set(plan.acted)
        last = max(i for i, m in enumerate(plan.order) if m in acted)
        parts: list[str] = []
        change = 0
        for index, marker in enumerate(plan.order[: last + 1]):
            lead = f"work in {base_pattern}" if index == 0 else "work"
            if marker in acted:
                clause, marker_change = marker_clause(plan.actions[marker], lead, registry)
                parts.append(clause)
                change += marker_change
            else:
                parts.append(f"{lead} to marker, slip marker")
        parts.append("work to end")
        return MarkerRendering(text=", ".join(parts), stitch_change=change)


def is_uniform(plan: MarkerPlan) -> bool:
    """Two or more markers, every one carrying identical actions."""
    if len(plan.order) < 2 or len(plan.acted) != len(plan.order):
        return False
    first = plan.signature(plan.order[0])
    return all(plan.signature(m) == first for m in plan.order[1:])


def select_strategy(plan: MarkerPlan) -> MarkerStrategy:
    if is_uniform(plan):
        return UniformMarkerStrategy()
    return IndividualMarkerStrategy()

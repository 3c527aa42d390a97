"""
StepDescription: everything the router needs to know about the step a row
belongs to.

A step is authored once (pattern name, construction parameters, shaping
rules, colorwork rows) and then evaluated row by row. All types here are
frozen; mappings are promoted to MappingProxyType in __post_init__.

step_from_config builds a StepDescription from a plain authored dict so
callers holding JSON or YAML step definitions need not construct the
dataclasses by hand.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Optional, Union

from .shaping import (
    BindOffAction,
    ContinueAction,
    EdgeAction,
    EdgeTarget,
    MarkerAction,
    MarkerArray,
    MarkerPosition,
    ShapingAction,
    Timing,
    parse_distance,
)

_BRIOCHE_KEY = re.compile(r"^(\d+)([ab])$")


@dataclass(frozen=True)
class ConstructionParams:
    """Parameters of a construction-only step (cast on, bind off, pick up...)."""

    method: Optional[str] = None
    stitch_count: Union[int, str, None] = None  # int, or "all" for bind off / holder
    custom_text: Optional[str] = None
    custom_method: Optional[str] = None


@dataclass(frozen=True)
class ShapingConfig:
    """Marker-relative shaping rules applied on every shaping row of the step."""

    actions: tuple[ShapingAction, ...]
    timing: Timing = field(default_factory=Timing)
    marker_array: MarkerArray = field(default_factory=MarkerArray)
    base_pattern: Optional[str] = None


@dataclass(frozen=True)
class ColorworkConfig:
    """Authored colorwork: a kind (stripes, fair_isle, ...), a description, yarn letters."""

    kind: Optional[str] = None
    text: Optional[str] = None
    letters: tuple[str, ...] = ()


@dataclass(frozen=True)
class BriocheRow:
    instruction: str
    stitch_change: int = 0


@dataclass(frozen=True)
class BriocheConfig:
    """
    Two-colour brioche rows keyed ``"1a"``, ``"1b"``, ``"2a"``... Each pattern
    row is worked twice: half ``a`` with colour A, half ``b`` with colour B.
    Only half ``a`` carries the row's stitch change.
    """

    rows: Mapping[str, BriocheRow] = field(default_factory=dict)
    colors: tuple[str, str] = ("A", "B")

    def __post_init__(self) -> None:
        for key in self.rows:
            if not _BRIOCHE_KEY.match(key):
                raise ValueError(f"Brioche row keys must look like '1a' or '1b', got {key!r}")
        if len(self.colors) != 2:
            raise ValueError(f"BriocheConfig.colors must name two colours, got {self.colors!r}")
        object.__setattr__(self, "rows", MappingProxyType(dict(self.rows)))

    @property
    def pair_count(self) -> int:
        """Number of distinct pattern rows (highest N among the ``Na``/``Nb`` keys)."""
        numbers = [int(m.group(1)) for k in self.rows if (m := _BRIOCHE_KEY.match(k))]
        return max(numbers, default=0)

    def half(self, pair: int, half: str) -> Optional[BriocheRow]:
        return self.rows.get(f"{pair}{half}")


@dataclass(frozen=True)
class StepDescription:
    """
    The authored configuration of one pattern step.

    ``row_text`` holds explicit text for specific rows (1-based, absolute
    within the step); ``row_instructions`` holds a repeating row-by-row
    sequence that wraps around on its own length.
    """

    pattern: str
    starting_row_in_pattern: int = 1
    construction_params: Optional[ConstructionParams] = None
    shaping: Optional[ShapingConfig] = None
    is_shaping: bool = False
    colorwork: Optional[ColorworkConfig] = None
    brioche: Optional[BriocheConfig] = None
    row_instructions: tuple[str, ...] = ()
    row_text: Mapping[int, str] = field(default_factory=dict)
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if self.starting_row_in_pattern < 1:
            raise ValueError(
                f"starting_row_in_pattern must be >= 1, got {self.starting_row_in_pattern}"
            )
        object.__setattr__(self, "row_text", MappingProxyType(dict(self.row_text)))


# ── Building from authored dicts ───────────────────────────────────────────────


def _edge_targets(raw: Any) -> tuple[EdgeTarget, ...]:
    names = [raw] if isinstance(raw, str) else list(raw or [])
    targets: list[EdgeTarget] = []
    for name in names:
        if name in ("both", "both_ends"):
            targets.extend([EdgeTarget.BEGINNING, EdgeTarget.END])
        else:
            targets.append(EdgeTarget(name))
    return tuple(dict.fromkeys(targets))


def action_from_config(raw: Mapping[str, Any]) -> ShapingAction:
    """Build one ShapingAction from its authored dict form."""
    kind = raw.get("type", "marker")
    match kind:
        case "continue":
            return ContinueAction()
        case "edge":
            return EdgeAction(
                technique=raw["technique"],
                targets=_edge_targets(raw.get("targets", raw.get("position"))),
                distance=parse_distance(raw.get("distance")),
            )
        case "marker":
            targets = raw.get("targets", ())
            return MarkerAction(
                technique=raw["technique"],
                targets=(targets,) if isinstance(targets, str) else tuple(targets),
                position=MarkerPosition(raw.get("position", "before")),
                distance=parse_distance(raw.get("distance")),
            )
        case "bind_off":
            amount = raw.get("amount", "all")
            targets = raw.get("targets", ())
            return BindOffAction(
                amount=amount if amount == "all" else int(amount),
                targets=(targets,) if isinstance(targets, str) else tuple(targets),
            )
        case _:
            raise ValueError(f"Unknown shaping action type {kind!r}")


def step_from_config(config: Mapping[str, Any]) -> StepDescription:
    """
    Build a StepDescription from an authored dict.

    Recognised keys: ``pattern`` (required), ``starting_row_in_pattern``,
    ``method``/``stitch_count``/``custom_text``/``custom_method`` for
    construction steps, ``shaping`` (``actions``, ``timing``,
    ``marker_array``, ``base_pattern``), ``colorwork`` (``type``, ``text``,
    ``letters``), ``brioche_rows``, ``row_instructions``, ``row_text`` and
    ``description``.

    Raises
    ------
    ValueError
        If ``pattern`` is missing or any nested value is malformed.
    """
    pattern = config.get("pattern")
    if not pattern:
        raise ValueError("Step config is missing 'pattern'")

    construction_params = None
    if any(k in config for k in ("method", "stitch_count", "custom_text", "custom_method")):
        construction_params = ConstructionParams(
            method=config.get("method"),
            stitch_count=config.get("stitch_count"),
            custom_text=config.get("custom_text"),
            custom_method=config.get("custom_method"),
        )

    shaping = None
    raw_shaping = config.get("shaping")
    if raw_shaping:
        shaping = ShapingConfig(
            actions=tuple(action_from_config(a) for a in raw_shaping.get("actions", ())),
            timing=Timing(**raw_shaping.get("timing", {})),
            marker_array=MarkerArray(tuple(raw_shaping.get("marker_array", ()))),
            base_pattern=raw_shaping.get("base_pattern"),
        )

    colorwork = None
    raw_colorwork = config.get("colorwork")
    if raw_colorwork:
        colorwork = ColorworkConfig(
            kind=raw_colorwork.get("type"),
            text=raw_colorwork.get("text"),
            letters=tuple(raw_colorwork.get("letters", ())),
        )

    brioche = None
    raw_brioche = config.get("brioche_rows")
    if raw_brioche:
        letters = colorwork.letters if colorwork and len(colorwork.letters) == 2 else ("A", "B")
        brioche = BriocheConfig(
            rows={
                key: BriocheRow(
                    instruction=row["instruction"],
                    stitch_change=int(row.get("stitch_change", 0)),
                )
                for key, row in raw_brioche.items()
            },
            colors=(letters[0], letters[1]),
        )

    return StepDescription(
        pattern=pattern,
        starting_row_in_pattern=int(config.get("starting_row_in_pattern", 1)),
        construction_params=construction_params,
        shaping=shaping,
        is_shaping=bool(config.get("is_shaping", shaping is not None)),
        colorwork=colorwork,
        brioche=brioche,
        row_instructions=tuple(config.get("row_instructions", ())),
        row_text={int(k): v for k, v in config.get("row_text", {}).items()},
        description=config.get("description"),
    )

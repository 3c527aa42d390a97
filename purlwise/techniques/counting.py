"""
Row stitch counter: reads a written row ("[K2, P2] 2 times, K2tog × 3, K to
end") and totals the stitches it consumes and produces.

Used to report the net stitch change of authored row-by-row text, where no
structured shaping rules exist. Operations are resolved through the
Stitch-Consumption Table; anything unrecognised counts as one plain stitch.
"""

from __future__ import annotations

import re
from typing import Optional

from .registry import TechniqueRegistry, get_registry
from .types import RowStitchCount

_ALL_ROW = re.compile(r"^(?:k|p|knit|purl|work)\s+all(?:\s+st(?:itche)?s)?$", re.IGNORECASE)
_TO_END = re.compile(
    r"^(?:k|p|knit|purl|work)(?:\s+in\s+[\w\s]+?)?\s+to\s+end$|^k/p\s+as\s+set$",
    re.IGNORECASE,
)
_GROUP = re.compile(r"^([\[(])(.*)([\])])\s*(.*)$", re.DOTALL)
_REPEAT_COUNT = re.compile(r"^(?:×|\*|x)?\s*(\d+)\s*(?:times?|x)?$", re.IGNORECASE)
_REPEAT_TO_END = re.compile(r"^(?:rep(?:eat)?\s+)?to\s+end$", re.IGNORECASE)
_IN_NEXT_STITCH = re.compile(r"^in\s+(?:the\s+)?next\s+st(?:itch)?$", re.IGNORECASE)
_MULTIPLIER = re.compile(r"^(.+?)\s*(?:×|\bx)\s*(\d+)$")
_NUMBERED = re.compile(r"^([A-Za-z]+)(\d+)(\s*tbl|\s+wyi[fb])?$", re.IGNORECASE)


def split_top_level(text: str) -> list[str]:
    """Split on commas that are not inside brackets or parentheses."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char in "[(":
            depth += 1
        elif char in "])":
            depth = max(depth - 1, 0)
        elif char == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    parts.append("".join(current).strip())
    return [p for p in parts if p]


def _repeat_count(suffix: str) -> Optional[int]:
    if not suffix.strip():
        return 1
    match = _REPEAT_COUNT.match(suffix.strip())
    return int(match.group(1)) if match else None


def _count_operation(op: str, registry: TechniqueRegistry) -> tuple[int, int]:
    entry = registry.lookup(op)
    if entry is not None:
        return entry.consumes, entry.produces

    multiplied = _MULTIPLIER.match(op)
    if multiplied:
        consumed, produced = _count_operation(multiplied.group(1).strip(), registry)
        count = int(multiplied.group(2))
        return consumed * count, produced * count

    numbered = _NUMBERED.match(op)
    if numbered:
        base = numbered.group(1) + "1" + (numbered.group(3) or "")
        unit = registry.lookup(base) or registry.lookup(numbered.group(1))
        count = int(numbered.group(2))
        if unit is not None:
            return unit.consumes * count, unit.produces * count
        return count, count

    return registry.consumption(op), registry.production(op)


def _count(text: str, available: int, registry: TechniqueRegistry) -> tuple[int, int]:
    consumed = 0
    produced = 0
    for part in split_top_level(text):
        part = part.rstrip(".").strip()
        if _ALL_ROW.match(part) or _TO_END.match(part):
            remaining = max(available - consumed, 0)
            consumed += remaining
            produced += remaining
            continue

        group = _GROUP.match(part)
        if group and group.group(1) + group.group(3) in ("[]", "()"):
            inner, suffix = group.group(2), group.group(4)
            inner_consumed, inner_produced = _count(inner, 0, registry)
            if group.group(1) == "(" and _IN_NEXT_STITCH.match(suffix.strip()):
                consumed += 1
                produced += inner_produced
                continue
            if _REPEAT_TO_END.match(suffix.strip()) and inner_consumed > 0:
                remaining = max(available - consumed, 0)
                times, leftover = divmod(remaining, inner_consumed)
                consumed += inner_consumed * times + leftover
                produced += inner_produced * times + leftover
                continue
            times = _repeat_count(suffix)
            if times is not None:
                consumed += inner_consumed * times
                produced += inner_produced * times
                continue

        op_consumed, op_produced = _count_operation(part, registry)
        consumed += op_consumed
        produced += op_produced
    return consumed, produced


def count_row_stitches(
    instruction: str,
    starting_stitches: int = 0,
    registry: Optional[TechniqueRegistry] = None,
) -> RowStitchCount:
    """
    Total the stitches consumed and produced by a written row.

    Parameters
    ----------
    instruction:
        Row text, e.g. ``"K1, SSK, [K2, P2] 3 times, K2tog, K1"``.
    starting_stitches:
        Live stitches at the start of the row. Needed to resolve
        open-ended operations such as ``"K to end"`` or ``"Knit all"``.
    registry:
        Technique registry to resolve operations; the module singleton when
        omitted.

    Returns
    -------
    RowStitchCount
        Consumed and produced totals; ``stitch_change`` is their difference.
    """
    registry = registry or get_registry()
    if not instruction or not instruction.strip():
        return RowStitchCount(starting_stitches=starting_stitches, consumed=0, produced=0)
    consumed, produced = _count(instruction.strip(), starting_stitches, registry)
    return RowStitchCount(
        starting_stitches=starting_stitches, consumed=consumed, produced=produced
    )

"""
Shared text helpers for instruction prose: repeat wording, stitch-change
suffixes, row-number prefix stripping and abbreviation expansion.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Optional, Union

_ROW_PREFIX = re.compile(
    r"^\s*(?:row|round|rnd)s?\s*\d+[a-z]?\s*(?:[:.)\-–—]\s*)+", re.IGNORECASE
)


def plural(count: int, singular: str, plural_form: Optional[str] = None) -> str:
    """``plural(1, "stitch")`` → ``"1 stitch"``; ``plural(3, "stitch")`` → ``"3 stitches"``."""
    if count == 1:
        return f"{count} {singular}"
    if plural_form is None:
        plural_form = singular + ("es" if singular.endswith(("ch", "sh", "s", "x")) else "s")
    return f"{count} {plural_form}"


def times_text(count: int) -> str:
    return "1 time" if count == 1 else f"{count} times"


def format_repeat(block: str, count: int) -> str:
    """Render ``count`` consecutive copies of ``block``; a single copy is written plainly."""
    if count == 1:
        return block
    return f"[{block}] {times_text(count)}"


def collapse_blocks(blocks: Sequence[Union[str, tuple[str, int]]]) -> list[tuple[str, int]]:
    """
    Merge runs of identical adjacent blocks into ``(block, count)`` pairs.
    Blocks may be given as plain strings or as ``(block, count)`` pairs.

    >>> collapse_blocks(["K2, P2", "K2, P2", "K2"])
    [('K2, P2', 2), ('K2', 1)]
    """
    result: list[tuple[str, int]] = []
    for item in blocks:
        block, count = (item, 1) if isinstance(item, str) else item
        if result and result[-1][0] == block:
            result[-1] = (block, result[-1][1] + count)
        else:
            result.append((block, count))
    return result


def stitch_change_suffix(change: int) -> str:
    """``" (+4 sts)"`` / ``" (-2 sts)"``; empty for no change."""
    if change == 0:
        return ""
    sign = "+" if change > 0 else ""
    return f" ({sign}{change} sts)"


def strip_row_prefix(text: str) -> str:
    """Remove a leading ``"Row 3:"`` / ``"Round 12 -"`` label, repeatedly."""
    previous = None
    while previous != text:
        previous = text
        text = _ROW_PREFIX.sub("", text, count=1)
    return text.strip()


def capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:] if text else text


# Spelled out in row-by-row text; stitch counting reads the original.
_ABBREVIATIONS = {
    "K to end": "Knit to end",
    "P to end": "Purl to end",
    "K/P as set": "Knit the knits, Purl the purls",
    "YO": "Yarn over",
    "K2tog": "Knit 2 together",
    "SSK": "Slip, slip, knit",
    "CDD": "Central double decrease",
}
_ABBREVIATION_PATTERNS = [
    (re.compile(rf"(?<![\w/]){re.escape(abbrev)}(?![\w/])"), expansion)
    for abbrev, expansion in _ABBREVIATIONS.items()
]


def expand_abbreviations(text: str) -> str:
    """
    Spell out common abbreviations in an authored row.

    >>> expand_abbreviations("K1, SSK, K to end")
    'K1, Slip, slip, knit, Knit to end'
    """
    text = text.strip()
    if text in _ABBREVIATIONS:
        return _ABBREVIATIONS[text]
    for pattern, expansion in _ABBREVIATION_PATTERNS:
        text = pattern.sub(expansion, text)
    return text

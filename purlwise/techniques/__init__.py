from .types import RowStitchCount, TechniqueEntry
from .registry import (
    TechniqueRegistry,
    get_registry,
    get_stitch_change,
    get_stitch_consumption,
    split_compound,
)
from .counting import count_row_stitches

__all__ = [
    "TechniqueEntry",
    "RowStitchCount",
    "TechniqueRegistry",
    "get_registry",
    "get_stitch_consumption",
    "get_stitch_change",
    "split_compound",
    "count_row_stitches",
]

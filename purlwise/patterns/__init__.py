from .types import (
    PatternKind,
    PatternMetadata,
    RowFamily,
    RowSpec,
    StitchPatternDefinition,
    StitchToken,
)
from .registry import PatternRegistry, get_registry
from .sequence import RowSegment
from .calculator import (
    calculate_row,
    effective_phase,
    is_algorithmic_pattern,
    list_patterns,
    pattern_metadata,
    row_segments,
)

__all__ = [
    "PatternKind",
    "RowFamily",
    "StitchToken",
    "RowSpec",
    "StitchPatternDefinition",
    "PatternMetadata",
    "PatternRegistry",
    "get_registry",
    "RowSegment",
    "calculate_row",
    "row_segments",
    "effective_phase",
    "is_algorithmic_pattern",
    "pattern_metadata",
    "list_patterns",
]

from .construction import (
    ConstructionEntry,
    ConstructionKind,
    ConstructionResult,
    MethodEntry,
    StepRegistry,
    get_registry,
    render_construction,
)
from .colorwork import (
    BRIOCHE_PATTERN,
    AuthoredRow,
    authored_row,
    authored_row_text,
    brioche_row,
    is_brioche_step,
)
from .router import fallback_instruction, route
from .validation import PatternSupport, StepValidation, pattern_support, validate_step

__all__ = [
    "ConstructionKind",
    "MethodEntry",
    "ConstructionEntry",
    "ConstructionResult",
    "StepRegistry",
    "get_registry",
    "render_construction",
    "BRIOCHE_PATTERN",
    "AuthoredRow",
    "authored_row",
    "authored_row_text",
    "brioche_row",
    "is_brioche_step",
    "route",
    "fallback_instruction",
    "PatternSupport",
    "StepValidation",
    "pattern_support",
    "validate_step",
]

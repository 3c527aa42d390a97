from .edges import EdgeOp, EdgePlan, plan_edges, render_edges
from .markers import (
    IndividualMarkerStrategy,
    MarkerPlan,
    MarkerRendering,
    MarkerStrategy,
    UniformMarkerStrategy,
    is_uniform,
    plan_markers,
    select_strategy,
)
from .synthesizer import ShapingResult, synthesize, synthesize_shaping, timing_text

__all__ = [
    "EdgeOp",
    "EdgePlan",
    "plan_edges",
    "render_edges",
    "MarkerPlan",
    "MarkerRendering",
    "MarkerStrategy",
    "UniformMarkerStrategy",
    "IndividualMarkerStrategy",
    "is_uniform",
    "plan_markers",
    "select_strategy",
    "ShapingResult",
    "synthesize",
    "synthesize_shaping",
    "timing_text",
]

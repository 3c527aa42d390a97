from .row import Construction, Instruction, InstructionSource, Side, side_for_row
from .shaping import (
    BOR,
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
from .step import (
    BriocheConfig,
    BriocheRow,
    ColorworkConfig,
    ConstructionParams,
    ShapingConfig,
    StepDescription,
    action_from_config,
    step_from_config,
)

__all__ = [
    "Construction",
    "Side",
    "Instruction",
    "InstructionSource",
    "side_for_row",
    "BOR",
    "EdgeTarget",
    "MarkerPosition",
    "ContinueAction",
    "EdgeAction",
    "MarkerAction",
    "BindOffAction",
    "ShapingAction",
    "Timing",
    "MarkerArray",
    "parse_distance",
    "ConstructionParams",
    "ShapingConfig",
    "ColorworkConfig",
    "BriocheRow",
    "BriocheConfig",
    "StepDescription",
    "action_from_config",
    "step_from_config",
]

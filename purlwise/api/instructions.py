"""
Public row-instruction API.

row_instruction() takes an authored step config (a plain dict, as stored by
the pattern editor), builds the StepDescription and routes one row of it.
knitting_instruction() does the same after validating the step, and returns
a KnittingReport carrying the validation errors and warnings alongside the
instruction. Neither raises.
"""

from __future__ import annotations

import warnings
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from purlwise.router.router import fallback_instruction, route
from purlwise.router.validation import StepValidation, validate_step
from purlwise.schemas.row import Construction, Instruction
from purlwise.schemas.step import StepDescription, step_from_config

UNABLE_TO_GENERATE = "Unable to generate instruction - see errors"


@dataclass(frozen=True)
class KnittingReport:
    """Outcome of asking for one row of a step.

    Attributes:
        instruction: The routed instruction, or a placeholder when the step is invalid.
        validation: Errors and warnings found for the step, or None if the config
            could not be read at all.
        config_error: Error message if the authored config was malformed, else None.
    """

    instruction: Instruction
    validation: StepValidation | None
    config_error: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.config_error is None and self.validation is not None and self.validation.is_valid


def _step(config: Union[Mapping[str, Any], StepDescription]) -> StepDescription:
    if isinstance(config, StepDescription):
        return config
    return step_from_config(config)


def row_instruction(
    config: Union[Mapping[str, Any], StepDescription],
    row: int,
    stitches: int,
    construction: Union[Construction, str] = "flat",
) -> Instruction:
    """
    Instruction for one row of an authored step.

    Parameters
    ----------
    config:
        Authored step dict (see ``step_from_config``) or a ready StepDescription.
    row:
        Absolute 1-based row within the step.
    stitches:
        Live stitches at the start of the row.
    construction:
        ``"flat"`` or ``"round"``.

    Returns
    -------
    Instruction
        Always returned. A config that cannot be read yields the unsupported
        fallback and a RuntimeWarning.
    """
    try:
        step = _step(config)
    except Exception as exc:  # noqa: BLE001
        warnings.warn(f"Could not read step config: {exc}", RuntimeWarning, stacklevel=2)
        return fallback_instruction(None)
    return route(step, row, stitches, construction)


def knitting_instruction(
    config: Union[Mapping[str, Any], StepDescription],
    row: int,
    stitches: int,
    construction: Union[Construction, str] = "flat",
) -> KnittingReport:
    """Validate the step, then route ``row`` if validation found no errors."""
    try:
        step = _step(config)
    except Exception as exc:  # noqa: BLE001
        return KnittingReport(
            instruction=fallback_instruction(None), validation=None, config_error=str(exc)
        )

    validation = validate_step(step, stitches)
    if not validation.is_valid:
        placeholder = Instruction(text=UNABLE_TO_GENERATE, is_valid=False, is_supported=False)
        return KnittingReport(instruction=placeholder, validation=validation)
    return KnittingReport(instruction=route(step, row, stitches, construction), validation=validation)

"""Calibration loop: helpers, objective, optimizers and stopping criteria."""

from volcal.calibration.end_criteria import EndCriteria
from volcal.calibration.helpers import (
    CalibrationErrorType,
    CalibrationHelper,
    CalibrationQuote,
    HestonModelHelper,
)
from volcal.calibration.optimizers import (
    LevenbergMarquardt,
    Optimizer,
    Simplex,
    get_optimizer,
)
from volcal.calibration.problem import CalibrationProblem, CostFunction, calibration_error
from volcal.calibration.results import (
    CalibrationResult,
    OptimizationResult,
    OptimizationState,
    TerminationReason,
)


__all__ = [
    "CalibrationErrorType",
    "CalibrationHelper",
    "CalibrationProblem",
    "CalibrationQuote",
    "CalibrationResult",
    "CostFunction",
    "EndCriteria",
    "HestonModelHelper",
    "LevenbergMarquardt",
    "OptimizationResult",
    "OptimizationState",
    "Optimizer",
    "Simplex",
    "TerminationReason",
    "calibration_error",
    "get_optimizer",
]

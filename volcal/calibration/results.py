"""Optimization state and calibration outcome containers."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any, Literal, Tuple

import numpy as np

TerminationReason = Literal[
    "none",
    "max_iterations",
    "stationary_point",
    "stationary_function_value",
    "zero_gradient_norm",
    "optimization_failure",
]

CONVERGED_REASONS: Tuple[str, ...] = (
    "stationary_point",
    "stationary_function_value",
    "zero_gradient_norm",
)


@dataclass
class OptimizationState:
    """Mutable bookkeeping for one optimizer run.

    Args:
        x: Most recent trial parameter vector.
        value: Objective at ``x``.
        iterations: Number of trial steps evaluated.
        evaluations: Number of objective evaluations, Jacobian columns included.
        stationary_iterations: Consecutive trial steps without sufficient change.
        best_x: Lowest-objective point evaluated so far.
        best_value: Objective at ``best_x``.
    """

    x: np.ndarray
    value: float = math.nan
    iterations: int = 0
    evaluations: int = 0
    stationary_iterations: int = 0
    best_x: np.ndarray | None = None
    best_value: float = math.inf

    def record(self, x: np.ndarray, value: float) -> None:
        """Store a successfully evaluated trial point."""

        self.x = np.array(x, dtype=float)
        self.value = float(value)
        if value < self.best_value:
            self.best_x = self.x.copy()
            self.best_value = float(value)

    @property
    def final_x(self) -> np.ndarray:
        return self.best_x if self.best_x is not None else self.x


@dataclass(frozen=True)
class OptimizationResult:
    """What an optimizer hands back to the calibration loop."""

    x: np.ndarray
    value: float
    reason: TerminationReason
    state: OptimizationState
    message: str = ""

    @property
    def converged(self) -> bool:
        return self.reason in CONVERGED_REASONS


@dataclass
class CalibrationResult:
    """Summary of the last :meth:`CalibratedModel.calibrate` call."""

    parameters: dict[str, float]
    reason: TerminationReason
    objective: float
    calibration_error: float
    iterations: int
    evaluations: int
    optimizer: str
    fixed: Tuple[str, ...] = ()
    message: str = ""
    helper_errors: list[float] = field(default_factory=list)

    @property
    def converged(self) -> bool:
        return self.reason in CONVERGED_REASONS

    def to_mapping(self) -> dict[str, Any]:
        """Return a dictionary representation of the result."""

        return asdict(self)

    def __getitem__(self, key: str) -> Any:
        return getattr(self, key)


__all__ = [
    "CONVERGED_REASONS",
    "CalibrationResult",
    "OptimizationResult",
    "OptimizationState",
    "TerminationReason",
]

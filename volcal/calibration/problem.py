"""Calibration objective: helper errors as a function of free model parameters."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Iterable, Protocol, Sequence, Tuple

import numpy as np

from volcal.core.errors import InvalidInputError

if TYPE_CHECKING:
    from volcal.calibration.helpers import CalibrationHelper
    from volcal.models.base import CalibratedModel


class CostFunction(Protocol):
    """Objective capability consumed by optimizers."""

    def values(self, x: np.ndarray) -> np.ndarray:
        ...

    def value(self, x: np.ndarray) -> float:
        ...

    def is_feasible(self, x: np.ndarray) -> bool:
        ...

    def bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        ...


def calibration_error(helpers: Iterable[CalibrationHelper]) -> float:
    """Sum of squared helper errors expressed in percent, ``sum((100 e_i)**2)``.

    Helpers are evaluated in iteration order.
    """

    total = 0.0
    for helper in helpers:
        diff = helper.calibration_error() * 100.0
        total += diff * diff
    return total


class CalibrationProblem:
    """Least-squares view of a model calibration.

    Residual ``i`` is ``error_i * sqrt(weight_i)``; :meth:`value` is their sum
    of squares. Each evaluation writes the full parameter vector into the
    model first, then prices every helper against that frozen vector. With
    ``workers > 1`` helpers are priced on a thread pool and the results are
    gathered in insertion order before returning.

    Args:
        model: Model whose parameters are calibrated.
        helpers: Market quotes with pricing engines attached.
        weights: Per-helper weights. Defaults to each helper's own weight.
        fix_parameters: Mask of parameters held at their current value.
        workers: Number of threads used to price helpers.

    Raises:
        InvalidInputError: On empty helper sets or mis-sized weights/masks.
    """

    def __init__(
        self,
        model: CalibratedModel,
        helpers: Sequence[CalibrationHelper],
        *,
        weights: Sequence[float] | None = None,
        fix_parameters: Sequence[bool] | None = None,
        workers: int = 1,
    ) -> None:
        self.model = model
        self.helpers = list(helpers)
        if not self.helpers:
            raise InvalidInputError("Calibration needs at least one helper")

        if weights is None:
            weights = [helper.weight for helper in self.helpers]
        self.weights = np.asarray(weights, dtype=float)
        if self.weights.shape != (len(self.helpers),):
            raise InvalidInputError(
                f"Got {self.weights.size} weights for {len(self.helpers)} helpers"
            )
        if np.any(self.weights < 0.0) or not np.all(np.isfinite(self.weights)):
            raise InvalidInputError("Calibration weights must be finite and non-negative")
        self._sqrt_weights = np.sqrt(self.weights)

        n_params = len(model.parameter_names)
        if fix_parameters is None:
            fixed = np.zeros(n_params, dtype=bool)
        else:
            fixed = np.asarray(fix_parameters, dtype=bool)
            if fixed.shape != (n_params,):
                raise InvalidInputError(
                    f"Fixed-parameter mask has {fixed.size} entries, model has {n_params} parameters"
                )
        if fixed.all():
            raise InvalidInputError("Every model parameter is fixed; nothing to calibrate")
        self.fixed = fixed
        self._free = np.flatnonzero(~fixed)
        self._anchor = model.params

        if workers < 1:
            raise InvalidInputError(f"workers ({workers}) must be at least 1")
        self.workers = int(workers)
        self._executor: ThreadPoolExecutor | None = None
        self.evaluations = 0

    def __enter__(self) -> CalibrationProblem:
        if self.workers > 1:
            self._executor = ThreadPoolExecutor(
                max_workers=self.workers, thread_name_prefix="volcal-helper"
            )
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    @property
    def size(self) -> int:
        return len(self._free)

    @property
    def free_parameter_names(self) -> list[str]:
        names = self.model.parameter_names
        return [names[i] for i in self._free]

    def initial_guess(self) -> np.ndarray:
        return self._anchor[self._free].copy()

    def full_params(self, x: np.ndarray) -> np.ndarray:
        """Embed a free-parameter vector into the full model vector."""

        params = self._anchor.copy()
        params[self._free] = np.asarray(x, dtype=float)
        return params

    def bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        lower, upper = self.model.bounds
        return lower[self._free], upper[self._free]

    def is_feasible(self, x: np.ndarray) -> bool:
        return self.model.is_feasible(self.full_params(x))

    def helper_errors(self) -> np.ndarray:
        """Price every helper against the model's current parameters."""

        if self._executor is None:
            errors = [helper.calibration_error() for helper in self.helpers]
        else:
            errors = list(self._executor.map(_helper_error, self.helpers))
        return np.asarray(errors, dtype=float)

    def values(self, x: np.ndarray) -> np.ndarray:
        """Weighted residual vector at ``x``."""

        self.model.set_params(self.full_params(x))
        self.evaluations += 1
        return self.helper_errors() * self._sqrt_weights

    def value(self, x: np.ndarray) -> float:
        residuals = self.values(x)
        return float(residuals @ residuals)

    def calibration_error(self) -> float:
        """Unweighted ``sum((100 e_i)**2)`` at the model's current parameters."""

        return calibration_error(self.helpers)


def _helper_error(helper: CalibrationHelper) -> float:
    return helper.calibration_error()


__all__ = ["CalibrationProblem", "CostFunction", "calibration_error"]

"""Models owning a calibratable parameter vector."""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence, Tuple

import numpy as np

from volcal.calibration.end_criteria import EndCriteria
from volcal.calibration.optimizers import LevenbergMarquardt, Optimizer
from volcal.calibration.problem import CalibrationProblem, calibration_error
from volcal.calibration.results import CalibrationResult, TerminationReason
from volcal.core.errors import CalculationError, InvalidInputError
from volcal.logging import get_logger
from volcal.models.parameters import Parameter

logger = get_logger("volcal.calibration")


class CalibratedModel:
    """Parametric model whose parameter vector is fitted to market quotes.

    The model is the only writer of its parameter vector. Pricing engines
    and helpers hold a reference to the model and read the vector at
    pricing time.

    Args:
        parameters: Ordered parameter descriptions.
        values: Initial values, one per parameter.

    Raises:
        InvalidInputError: If a value lies outside its parameter's bounds.
    """

    def __init__(self, parameters: Sequence[Parameter], values: Sequence[float]) -> None:
        self._parameters: Tuple[Parameter, ...] = tuple(parameters)
        self._params = np.empty(len(self._parameters))
        self.last_calibration: CalibrationResult | None = None
        self.set_params(values)

    @property
    def parameter_names(self) -> list[str]:
        return [parameter.name for parameter in self._parameters]

    @property
    def bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        lower = np.array([parameter.lower for parameter in self._parameters])
        upper = np.array([parameter.upper for parameter in self._parameters])
        return lower, upper

    @property
    def params(self) -> np.ndarray:
        """Copy of the current parameter vector."""

        return self._params.copy()

    def as_dict(self) -> dict[str, float]:
        return {
            parameter.name: float(value)
            for parameter, value in zip(self._parameters, self._params)
        }

    def is_feasible(self, values: Sequence[float]) -> bool:
        values = np.asarray(values, dtype=float)
        if values.shape != self._params.shape:
            return False
        return all(
            parameter.contains(value) for parameter, value in zip(self._parameters, values)
        )

    def set_params(self, values: Sequence[float]) -> None:
        """Overwrite the parameter vector.

        Raises:
            InvalidInputError: On a wrong length or a value outside its bounds.
        """

        values = np.array(values, dtype=float)
        if values.shape != self._params.shape:
            raise InvalidInputError(
                f"Expected {self._params.size} parameters ({self.parameter_names}), got {values.size}"
            )
        for parameter, value in zip(self._parameters, values):
            if not parameter.contains(value):
                raise InvalidInputError(
                    f"Parameter {parameter.name}={value} violates {parameter.describe()}"
                )
        self._params = values

    def _fixed_mask(
        self, fix_parameters: Iterable[bool] | Iterable[str] | None
    ) -> np.ndarray | None:
        if fix_parameters is None:
            return None
        entries = list(fix_parameters)
        if all(isinstance(entry, str) for entry in entries):
            unknown = set(entries) - set(self.parameter_names)
            if unknown:
                raise InvalidInputError(f"Unknown parameter(s) to fix: {sorted(unknown)}")
            return np.array([name in entries for name in self.parameter_names])
        return np.asarray(entries, dtype=bool)

    def calibrate(
        self,
        helpers: Sequence,
        optimizer: Optimizer | None = None,
        end_criteria: EndCriteria | Mapping | None = None,
        *,
        weights: Sequence[float] | None = None,
        fix_parameters: Iterable[bool] | Iterable[str] | None = None,
        workers: int = 1,
    ) -> TerminationReason:
        """Fit the free parameters to ``helpers``.

        Each trial vector proposed by ``optimizer`` is written into the model
        before every helper is re-priced with its attached engine. The run
        always returns: numerical trouble is reported as
        ``"optimization_failure"`` and the model is left at the best point
        that was evaluated successfully.

        Args:
            helpers: Calibration helpers whose engines price against this model.
            optimizer: Optimization strategy. Defaults to Levenberg-Marquardt.
            end_criteria: Stopping criteria or a mapping of overrides.
            weights: Per-helper weights. Defaults to the helpers' own weights.
            fix_parameters: Boolean mask or parameter names held constant.
            workers: Threads used to price helpers within one trial step.

        Returns:
            The termination reason of the optimizer.
        """

        optimizer = optimizer if optimizer is not None else LevenbergMarquardt()
        criteria = EndCriteria.from_mapping(end_criteria)
        mask = self._fixed_mask(fix_parameters)

        with CalibrationProblem(
            self, helpers, weights=weights, fix_parameters=mask, workers=workers
        ) as problem:
            logger.info(
                "Calibrating %s: %d helpers, free parameters %s, optimizer %s",
                type(self).__name__,
                len(problem.helpers),
                problem.free_parameter_names,
                optimizer.name,
            )
            result = optimizer.minimize(problem, problem.initial_guess(), criteria)
            self.set_params(problem.full_params(result.x))
            try:
                errors = problem.helper_errors()
            except (CalculationError, ArithmeticError) as exc:
                logger.warning("Cannot re-price helpers at the final parameters: %s", exc)
                errors = np.full(len(problem.helpers), np.nan)
            objective = float(np.sum(problem.weights * errors**2))

        self.last_calibration = CalibrationResult(
            parameters=self.as_dict(),
            reason=result.reason,
            objective=objective,
            calibration_error=float(np.sum((100.0 * errors) ** 2)),
            iterations=result.state.iterations,
            evaluations=result.state.evaluations,
            optimizer=optimizer.name,
            fixed=tuple(
                name for name, fixed in zip(self.parameter_names, problem.fixed) if fixed
            ),
            message=result.message,
            helper_errors=errors.tolist(),
        )
        log = logger.warning if result.reason == "optimization_failure" else logger.info
        log(
            "Calibration of %s ended with %s after %d trials (%d evaluations): "
            "objective=%.8g calibration error=%.6g",
            type(self).__name__,
            result.reason,
            result.state.iterations,
            result.state.evaluations,
            objective,
            self.last_calibration.calibration_error,
        )
        return result.reason

    def calibration_error(self, helpers: Iterable) -> float:
        """``sum((100 e_i)**2)`` of ``helpers`` at the current parameters."""

        return calibration_error(helpers)


__all__ = ["CalibratedModel"]

"""Optimizer strategies driving a calibration objective.

Both strategies share the same accounting: every objective evaluation
(Jacobian columns included) counts towards ``max_iterations``, every trial
step feeds the stationary-value counter, and numerical failures end the run
with ``"optimization_failure"`` at the best point evaluated so far rather
than raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import numpy as np
from scipy.optimize import least_squares, minimize

from volcal.calibration.end_criteria import EndCriteria
from volcal.calibration.problem import CostFunction
from volcal.calibration.results import OptimizationResult, OptimizationState, TerminationReason
from volcal.core.errors import CalculationError, InvalidInputError
from volcal.logging import get_logger

logger = get_logger("volcal.calibration")

_MACHINE_EPSILON = float(np.finfo(float).eps)

_LEAST_SQUARES_STATUS: dict[int, TerminationReason] = {
    0: "max_iterations",
    1: "zero_gradient_norm",
    2: "stationary_function_value",
    3: "stationary_point",
    4: "stationary_function_value",
}

_NELDER_MEAD_STATUS: dict[int, TerminationReason] = {
    0: "stationary_point",
    1: "max_iterations",
    2: "max_iterations",
}


class Optimizer(Protocol):
    """Strategy minimising a :class:`CostFunction` under :class:`EndCriteria`."""

    name: str

    def minimize(
        self,
        problem: CostFunction,
        initial_guess: np.ndarray,
        end_criteria: EndCriteria,
    ) -> OptimizationResult:
        ...


class _StopOptimization(Exception):
    def __init__(self, reason: TerminationReason, message: str = "") -> None:
        super().__init__(message or reason)
        self.reason = reason


class _NumericalFailure(Exception):
    pass


class _Tracker:
    """Counts evaluations and trial steps and enforces the end criteria."""

    def __init__(self, problem: CostFunction, end_criteria: EndCriteria, x0: np.ndarray) -> None:
        self.problem = problem
        self.end_criteria = end_criteria
        self.state = OptimizationState(x=np.array(x0, dtype=float))
        self._cache: list[tuple[np.ndarray, np.ndarray]] = []
        # the base point plus one shifted point per Jacobian column
        self._cache_size = self.state.x.size + 2

    def evaluate(self, x: np.ndarray) -> np.ndarray:
        for cached_x, cached_f in self._cache:
            if np.array_equal(cached_x, x):
                return cached_f
        if self.end_criteria.check_max_iterations(self.state.evaluations):
            raise _StopOptimization("max_iterations")
        self.state.evaluations += 1
        try:
            residuals = np.asarray(self.problem.values(x), dtype=float)
        except (CalculationError, ArithmeticError, np.linalg.LinAlgError) as exc:
            raise _NumericalFailure(f"objective evaluation failed at {x}: {exc}") from exc
        if not np.all(np.isfinite(residuals)):
            raise _NumericalFailure(f"non-finite objective at {x}")
        self._cache = [(np.array(x, dtype=float), residuals)] + self._cache[: self._cache_size - 1]
        return residuals

    def trial(self, x: np.ndarray) -> np.ndarray:
        state = self.state
        repeated = state.iterations > 0 and np.array_equal(x, state.x)
        residuals = self.evaluate(x)
        if repeated:
            return residuals
        value = float(residuals @ residuals)
        previous = state.value
        state.iterations += 1
        state.record(x, value)
        logger.debug(
            "trial %d: objective=%.10g evaluations=%d x=%s",
            state.iterations,
            value,
            state.evaluations,
            np.array2string(np.asarray(x), precision=6),
        )
        if self.end_criteria.check_stationary_function_value(previous, value, state):
            raise _StopOptimization("stationary_function_value")
        return residuals

    def jacobian(self, x: np.ndarray, epsfcn: float) -> np.ndarray:
        """Forward-difference Jacobian with MINPACK's step rule."""

        x = np.asarray(x, dtype=float)
        f0 = self.evaluate(x)
        scale = np.sqrt(max(epsfcn, _MACHINE_EPSILON))
        jac = np.empty((f0.size, x.size))
        for j in range(x.size):
            h = scale * abs(x[j]) or scale
            shifted = x.copy()
            shifted[j] += h
            if not self.problem.is_feasible(shifted):
                h = -h
                shifted[j] = x[j] + h
            jac[:, j] = (self.evaluate(shifted) - f0) / h
        return jac

    def result(self, reason: TerminationReason, message: str = "") -> OptimizationResult:
        state = self.state
        x = state.final_x.copy()
        value = state.best_value if state.best_x is not None else state.value
        return OptimizationResult(x=x, value=value, reason=reason, state=state, message=message)


def _check_initial_point(problem: CostFunction, x0: np.ndarray) -> None:
    if not problem.is_feasible(x0):
        raise InvalidInputError(f"Initial guess {x0} violates the parameter bounds")


@dataclass(frozen=True)
class LevenbergMarquardt:
    """MINPACK Levenberg-Marquardt with bound handling by step rejection.

    Trial points outside the parameter bounds are answered with the
    residuals of the initial point, which the algorithm always rejects, so
    accepted iterates stay feasible.

    Args:
        epsfcn: Relative error of the objective, setting the finite
            difference step ``sqrt(epsfcn) * |x_j|``.
    """

    epsfcn: float = 1.0e-8
    name: str = "levenberg_marquardt"

    def minimize(
        self,
        problem: CostFunction,
        initial_guess: np.ndarray,
        end_criteria: EndCriteria,
    ) -> OptimizationResult:
        x0 = np.array(initial_guess, dtype=float)
        _check_initial_point(problem, x0)
        tracker = _Tracker(problem, end_criteria, x0)

        try:
            initial = tracker.trial(x0).copy()
        except _NumericalFailure as exc:
            logger.warning("Levenberg-Marquardt failed at the initial point: %s", exc)
            return tracker.result("optimization_failure", str(exc))
        except _StopOptimization as stop:
            return tracker.result(stop.reason)

        if initial.size < x0.size:
            raise InvalidInputError(
                f"Levenberg-Marquardt needs at least as many helpers ({initial.size}) "
                f"as free parameters ({x0.size})"
            )

        def fun(x: np.ndarray) -> np.ndarray:
            if not problem.is_feasible(x):
                return initial
            return tracker.trial(x)

        def jac(x: np.ndarray) -> np.ndarray:
            return tracker.jacobian(x, self.epsfcn)

        try:
            solution = least_squares(
                fun,
                x0,
                jac=jac,
                method="lm",
                ftol=end_criteria.function_epsilon,
                xtol=end_criteria.root_epsilon,
                gtol=end_criteria.gradient_norm_epsilon,
                x_scale="jac",
                max_nfev=end_criteria.max_iterations,
            )
        except _StopOptimization as stop:
            return tracker.result(stop.reason)
        except _NumericalFailure as exc:
            logger.warning("Levenberg-Marquardt stopped on a numerical failure: %s", exc)
            return tracker.result("optimization_failure", str(exc))

        reason = _LEAST_SQUARES_STATUS.get(solution.status, "none")
        return tracker.result(reason, solution.message)


@dataclass(frozen=True)
class Simplex:
    """Nelder-Mead downhill simplex on the summed squared residuals.

    Args:
        step: Edge length of the initial simplex around the starting point.
    """

    step: float = 0.1
    name: str = "simplex"

    def minimize(
        self,
        problem: CostFunction,
        initial_guess: np.ndarray,
        end_criteria: EndCriteria,
    ) -> OptimizationResult:
        x0 = np.array(initial_guess, dtype=float)
        _check_initial_point(problem, x0)
        tracker = _Tracker(problem, end_criteria, x0)

        def fun(x: np.ndarray) -> float:
            if not problem.is_feasible(x):
                return np.inf
            residuals = tracker.trial(x)
            return float(residuals @ residuals)

        simplex = np.vstack([x0, x0 + self.step * np.eye(x0.size)])
        try:
            solution = minimize(
                fun,
                x0,
                method="Nelder-Mead",
                options={
                    "maxfev": end_criteria.max_iterations,
                    "xatol": end_criteria.root_epsilon,
                    "fatol": end_criteria.function_epsilon,
                    "initial_simplex": simplex,
                },
            )
        except _StopOptimization as stop:
            return tracker.result(stop.reason)
        except _NumericalFailure as exc:
            logger.warning("Simplex stopped on a numerical failure: %s", exc)
            return tracker.result("optimization_failure", str(exc))

        reason = _NELDER_MEAD_STATUS.get(solution.status, "none")
        return tracker.result(reason, str(solution.message))


_OPTIMIZERS = {
    "levenberg_marquardt": LevenbergMarquardt,
    "lm": LevenbergMarquardt,
    "simplex": Simplex,
}


def get_optimizer(name: str, **kwargs) -> Optimizer:
    """Instantiate an optimizer strategy by name."""

    try:
        factory = _OPTIMIZERS[name.lower()]
    except KeyError as exc:
        raise ValueError(
            f"Unknown optimizer '{name}'. Available: {sorted(_OPTIMIZERS)}"
        ) from exc
    return factory(**kwargs)


__all__ = ["LevenbergMarquardt", "Optimizer", "Simplex", "get_optimizer"]

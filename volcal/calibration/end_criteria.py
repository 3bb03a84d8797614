"""Stopping criteria for calibration runs."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields, replace
from typing import TYPE_CHECKING, Any, Mapping

from volcal.core.errors import InvalidInputError

if TYPE_CHECKING:
    from volcal.calibration.results import OptimizationState


@dataclass(frozen=True)
class EndCriteria:
    """Configuration knobs deciding when an optimizer stops.

    Args:
        max_iterations: Cap on objective evaluations, Jacobian columns
            included, as in MINPACK's ``maxfev``.
        max_stationary_iterations: Number of consecutive trial steps whose
            objective moved by less than ``function_epsilon`` after which
            the run stops.
        root_epsilon: Tolerance on the relative change of the parameters.
        function_epsilon: Tolerance on the change of the objective.
        gradient_norm_epsilon: Tolerance on the scaled gradient norm.
    """

    max_iterations: int = 1000
    max_stationary_iterations: int = 100
    root_epsilon: float = 1.0e-8
    function_epsilon: float = 1.0e-8
    gradient_norm_epsilon: float = 1.0e-8

    def __post_init__(self) -> None:
        if self.max_iterations < 1:
            raise InvalidInputError(f"max_iterations ({self.max_iterations}) must be positive")
        if self.max_stationary_iterations < 1:
            raise InvalidInputError(
                f"max_stationary_iterations ({self.max_stationary_iterations}) must be positive"
            )
        if self.max_stationary_iterations > self.max_iterations:
            raise InvalidInputError(
                f"max_stationary_iterations ({self.max_stationary_iterations}) must not "
                f"exceed max_iterations ({self.max_iterations})"
            )
        for name in ("root_epsilon", "function_epsilon", "gradient_norm_epsilon"):
            value = getattr(self, name)
            if not (value > 0.0 and math.isfinite(value)):
                raise InvalidInputError(f"{name} ({value}) must be a positive finite number")

    @classmethod
    def field_names(cls) -> set[str]:
        """Return the names of supported configuration fields."""

        return {f.name for f in fields(cls)}

    @classmethod
    def from_mapping(
        cls, overrides: EndCriteria | Mapping[str, Any] | None = None
    ) -> EndCriteria:
        """Build criteria from optional overrides.

        Args:
            overrides: Either an existing :class:`EndCriteria` instance or a
                mapping of field overrides.

        Returns:
            A fully populated :class:`EndCriteria` instance.

        Raises:
            TypeError: If ``overrides`` contains unrecognised keys.
        """

        if overrides is None:
            return cls()
        if isinstance(overrides, cls):
            return overrides
        unknown = set(overrides) - cls.field_names()
        if unknown:
            raise TypeError(f"Unknown end criteria option(s): {sorted(unknown)}")
        return replace(cls(), **{name: overrides[name] for name in overrides})

    def to_mapping(self) -> dict[str, Any]:
        """Return a mapping representation of the criteria."""

        return asdict(self)

    def check_max_iterations(self, evaluations: int) -> bool:
        return evaluations >= self.max_iterations

    def check_stationary_function_value(
        self, previous: float, current: float, state: OptimizationState
    ) -> bool:
        """Update the stationary counter and report whether it ran out.

        A step counts as stationary when the objective moved by less than
        ``function_epsilon``; any larger move resets the counter.
        """

        if not math.isfinite(previous) or abs(current - previous) >= self.function_epsilon:
            state.stationary_iterations = 0
            return False
        state.stationary_iterations += 1
        return state.stationary_iterations >= self.max_stationary_iterations


__all__ = ["EndCriteria"]

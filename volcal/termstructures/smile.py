"""Single-expiry volatility smiles returned by swaption surfaces."""

from __future__ import annotations

import math


class SmileSection:
    """Volatility as a function of strike at a fixed exercise time.

    Args:
        exercise_time: Option time of the section.
        swap_length: Underlying swap length the section refers to.
        min_strike: Lowest strike of the section's domain.
        max_strike: Highest strike of the section's domain.
    """

    def __init__(
        self,
        exercise_time: float,
        swap_length: float = 0.0,
        *,
        min_strike: float = -math.inf,
        max_strike: float = math.inf,
    ) -> None:
        self.exercise_time = float(exercise_time)
        self.swap_length = float(swap_length)
        self.min_strike = float(min_strike)
        self.max_strike = float(max_strike)

    def _volatility_impl(self, strike: float) -> float:
        raise NotImplementedError

    def volatility(self, strike: float) -> float:
        return self._volatility_impl(strike)

    def variance(self, strike: float) -> float:
        """Total Black variance ``vol**2 * exercise_time`` at ``strike``."""

        vol = self._volatility_impl(strike)
        return vol * vol * self.exercise_time


class FlatSmileSection(SmileSection):
    """Strike-independent smile."""

    def __init__(
        self, exercise_time: float, volatility: float, swap_length: float = 0.0, **kwargs
    ) -> None:
        super().__init__(exercise_time, swap_length, **kwargs)
        self._volatility = float(volatility)

    def _volatility_impl(self, strike: float) -> float:
        return self._volatility

    def __repr__(self) -> str:
        return (
            f"FlatSmileSection(exercise_time={self.exercise_time:.6f}, "
            f"volatility={self._volatility:.6f})"
        )


__all__ = ["FlatSmileSection", "SmileSection"]

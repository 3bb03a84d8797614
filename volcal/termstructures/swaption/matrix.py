"""At-the-money swaption volatility matrix."""

from __future__ import annotations

import math
from datetime import date
from typing import Sequence

import numpy as np
from scipy.interpolate import RegularGridInterpolator

from volcal.core.errors import InvalidInputError
from volcal.termstructures.smile import FlatSmileSection, SmileSection
from volcal.termstructures.swaption.structure import SwaptionVolatilityStructure
from volcal.time.period import Period, add_period


class SwaptionVolatilityMatrix(SwaptionVolatilityStructure):
    """ATM volatilities on an option-tenor by swap-tenor grid.

    Option tenors are rolled into dates on the structure's calendar and both
    axes are converted to year fractions from the current reference date, so
    a matrix observing an evaluation-date provider re-anchors itself when
    the provider moves. Values are interpolated bilinearly in
    ``(option_time, swap_length)`` and extended linearly outside the grid.

    Args:
        option_tenors: Increasing option expiries.
        swap_tenors: Increasing underlying swap tenors.
        volatilities: Matrix of shape ``(len(option_tenors), len(swap_tenors))``.
        **kwargs: Reference-frame arguments forwarded to the base class.

    Raises:
        InvalidInputError: If the grid is malformed.
    """

    def __init__(
        self,
        option_tenors: Sequence[Period | str],
        swap_tenors: Sequence[Period | str],
        volatilities: Sequence[Sequence[float]] | np.ndarray,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.option_tenors = [Period.parse(p) for p in option_tenors]
        self.swap_tenors = [Period.parse(p) for p in swap_tenors]
        vols = np.asarray(volatilities, dtype=float)

        if len(self.option_tenors) < 2 or len(self.swap_tenors) < 2:
            raise InvalidInputError("A volatility matrix needs at least a 2x2 grid")
        if vols.shape != (len(self.option_tenors), len(self.swap_tenors)):
            raise InvalidInputError(
                f"Volatility matrix shape {vols.shape} does not match "
                f"{len(self.option_tenors)} option tenors x {len(self.swap_tenors)} swap tenors"
            )
        if np.any(vols < 0.0) or not np.all(np.isfinite(vols)):
            raise InvalidInputError("Volatilities must be finite and non-negative")
        for axis in (self.option_tenors, self.swap_tenors):
            if any(later <= earlier for earlier, later in zip(axis, axis[1:])):
                raise InvalidInputError(f"Tenors must be strictly increasing, got {list(map(str, axis))}")
        self.volatilities = vols

    def option_dates(self) -> list[date]:
        return [self.option_date_from_tenor(p) for p in self.option_tenors]

    def option_times(self) -> np.ndarray:
        return np.array([self.time_from_reference(d) for d in self.option_dates()])

    def swap_lengths(self) -> np.ndarray:
        reference = self.reference_date
        return np.array(
            [
                self.day_counter.year_fraction(reference, add_period(reference, p))
                for p in self.swap_tenors
            ]
        )

    def _interpolator(self) -> RegularGridInterpolator:
        return RegularGridInterpolator(
            (self.option_times(), self.swap_lengths()),
            self.volatilities,
            method="linear",
            bounds_error=False,
            fill_value=None,
        )

    @property
    def max_date(self) -> date:
        return self.option_dates()[-1]

    def max_swap_tenor(self) -> Period:
        return self.swap_tenors[-1]

    def min_strike(self) -> float:
        return -math.inf

    def max_strike(self) -> float:
        return math.inf

    def _volatility_impl(self, option_time: float, swap_length: float, strike: float) -> float:
        return float(self._interpolator()([[option_time, swap_length]])[0])

    def _smile_section_impl(self, option_time: float, swap_length: float) -> SmileSection:
        vol = self._volatility_impl(option_time, swap_length, 0.0)
        return FlatSmileSection(option_time, vol, swap_length)


__all__ = ["SwaptionVolatilityMatrix"]

"""Flat swaption volatility surface."""

from __future__ import annotations

import math
from datetime import date

from volcal.core.errors import InvalidInputError
from volcal.termstructures.smile import FlatSmileSection, SmileSection
from volcal.termstructures.swaption.structure import SwaptionVolatilityStructure
from volcal.time.period import Period


class ConstantSwaptionVolatility(SwaptionVolatilityStructure):
    """Surface returning one volatility everywhere inside its domain.

    Args:
        volatility: Black volatility quoted at every coordinate.
        max_swap_tenor: Longest underlying swap tenor. Defaults to ``100Y``.
        min_strike: Lowest admissible strike.
        max_strike: Highest admissible strike.
        max_date: Last admissible option date. Defaults to no limit.
        **kwargs: Reference-frame arguments forwarded to the base class.

    Raises:
        InvalidInputError: If the volatility is negative or the strike bounds
            are inverted.
    """

    def __init__(
        self,
        volatility: float,
        *,
        max_swap_tenor: Period | str = Period(100, "Y"),
        min_strike: float = -math.inf,
        max_strike: float = math.inf,
        max_date: date | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        if volatility < 0.0:
            raise InvalidInputError(f"Negative volatility ({volatility}) given")
        if min_strike > max_strike:
            raise InvalidInputError(
                f"Min strike ({min_strike}) is greater than max strike ({max_strike})"
            )
        self._volatility = float(volatility)
        self._max_swap_tenor = Period.parse(max_swap_tenor)
        self._min_strike = float(min_strike)
        self._max_strike = float(max_strike)
        self._max_date = max_date

    @property
    def max_date(self) -> date:
        return self._max_date if self._max_date is not None else date.max

    def max_swap_tenor(self) -> Period:
        return self._max_swap_tenor

    def min_strike(self) -> float:
        return self._min_strike

    def max_strike(self) -> float:
        return self._max_strike

    def _volatility_impl(self, option_time: float, swap_length: float, strike: float) -> float:
        return self._volatility

    def _smile_section_impl(self, option_time: float, swap_length: float) -> SmileSection:
        return FlatSmileSection(
            option_time,
            self._volatility,
            swap_length,
            min_strike=self._min_strike,
            max_strike=self._max_strike,
        )


__all__ = ["ConstantSwaptionVolatility"]

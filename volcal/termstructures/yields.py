"""Discount curves with continuously compounded zero rates."""

from __future__ import annotations

from datetime import date
from typing import Sequence

import numpy as np
from scipy.interpolate import interp1d

from volcal.core.errors import InvalidInputError
from volcal.termstructures.base import TermStructure
from volcal.time.dates import DateLike, as_date


class YieldTermStructure(TermStructure):
    """Discount-factor curve keyed by time or date."""

    def _zero_rate_impl(self, t: float) -> float:
        raise NotImplementedError

    def _as_time(self, when: float | DateLike) -> float:
        if isinstance(when, (int, float, np.floating)):
            return float(when)
        return self.time_from_reference(when)

    def zero_rate(self, when: float | DateLike, extrapolate: bool = False) -> float:
        """Continuously compounded zero rate to ``when`` (a time or a date)."""

        t = self._as_time(when)
        self.check_range(t, extrapolate)
        return self._zero_rate_impl(t)

    def discount(self, when: float | DateLike, extrapolate: bool = False) -> float:
        """Discount factor to ``when`` (a time or a date)."""

        t = self._as_time(when)
        self.check_range(t, extrapolate)
        if t == 0.0:
            return 1.0
        return float(np.exp(-self._zero_rate_impl(t) * t))


class FlatForward(YieldTermStructure):
    """Curve with a single continuously compounded rate at every horizon.

    Args:
        rate: Continuously compounded zero rate.
        **kwargs: Reference-frame arguments forwarded to
            :class:`~volcal.termstructures.base.TermStructure`.
    """

    def __init__(self, rate: float, **kwargs) -> None:
        super().__init__(**kwargs)
        self.rate = float(rate)

    @property
    def max_date(self) -> date:
        return date.max

    def _zero_rate_impl(self, t: float) -> float:
        return self.rate


class ZeroCurve(YieldTermStructure):
    """Curve linearly interpolating zero rates between pillar dates.

    The first pillar is the reference date. Past the last pillar the
    interpolant is extended linearly when extrapolation is permitted.

    Args:
        dates: Strictly increasing pillar dates, the first being the anchor.
        rates: Continuously compounded zero rates at each pillar.
        **kwargs: ``calendar`` and ``day_counter`` forwarded to the base class.

    Raises:
        InvalidInputError: If the pillars are malformed.
    """

    def __init__(self, dates: Sequence[DateLike], rates: Sequence[float], **kwargs) -> None:
        pillars = [as_date(d) for d in dates]
        if len(pillars) < 2:
            raise InvalidInputError("ZeroCurve needs at least two pillars")
        if len(pillars) != len(rates):
            raise InvalidInputError(
                f"Got {len(pillars)} pillar dates but {len(rates)} rates"
            )
        if any(later <= earlier for earlier, later in zip(pillars, pillars[1:])):
            raise InvalidInputError("ZeroCurve pillar dates must be strictly increasing")

        super().__init__(reference_date=pillars[0], **kwargs)
        self.dates = pillars
        self.rates = np.asarray(rates, dtype=float)
        self.times = np.array([self.time_from_reference(d) for d in pillars])
        self._interpolant = interp1d(
            self.times,
            self.rates,
            kind="linear",
            fill_value="extrapolate",
            assume_sorted=True,
        )

    @property
    def max_date(self) -> date:
        return self.dates[-1]

    def _zero_rate_impl(self, t: float) -> float:
        return float(self._interpolant(t))


__all__ = ["FlatForward", "YieldTermStructure", "ZeroCurve"]

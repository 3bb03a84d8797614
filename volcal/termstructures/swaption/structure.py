"""Query protocol shared by every swaption volatility surface.

Every lookup accepts three calling conventions:

* ``(option_time, swap_length, strike)`` with both coordinates as floats,
* ``(option_date, swap_tenor, strike)`` with a date and a :class:`Period`,
* ``(option_tenor, swap_tenor, strike)`` with two periods.

Date and tenor forms are first normalised to time coordinates through
:meth:`SwaptionVolatilityStructure.convert_dates`, then routed through the
time form, so range checking and the implementation hook are shared by all
three entry points.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol, Tuple, Union

import numpy as np

from volcal.core.errors import InvalidInputError, InvalidTenorError, OutOfRangeError
from volcal.termstructures.base import TermStructure
from volcal.termstructures.smile import SmileSection
from volcal.time.calendars import BusinessDayConvention
from volcal.time.daycounters import DayCounter
from volcal.time.dates import DateLike, as_date
from volcal.time.period import Period, add_period

OptionCoordinate = Union[float, date, Period]
SwapCoordinate = Union[float, Period]


class VolatilitySurface(Protocol):
    """Capability set of a volatility surface: lookups plus domain bounds."""

    def volatility(
        self,
        option: OptionCoordinate,
        swap: SwapCoordinate,
        strike: float,
        extrapolate: bool = False,
    ) -> float:
        ...

    def black_variance(
        self,
        option: OptionCoordinate,
        swap: SwapCoordinate,
        strike: float,
        extrapolate: bool = False,
    ) -> float:
        ...

    def max_swap_tenor(self) -> Period:
        ...

    def min_strike(self) -> float:
        ...

    def max_strike(self) -> float:
        ...


def convert_dates(
    reference_date: DateLike,
    option_date: DateLike,
    swap_tenor: Period | str,
    day_counter: DayCounter,
) -> Tuple[float, float]:
    """Turn an option date and swap tenor into ``(option_time, swap_length)``.

    Args:
        reference_date: Date mapped to time zero.
        option_date: Exercise date of the option.
        swap_tenor: Tenor of the underlying swap.
        day_counter: Convention used for both year fractions.

    Returns:
        ``option_time`` measured from ``reference_date`` and ``swap_length``
        measured from ``option_date`` to ``option_date + swap_tenor``.

    Raises:
        InvalidTenorError: If the swap end date is not strictly after
            ``option_date``.
    """

    option_date = as_date(option_date)
    swap_tenor = Period.parse(swap_tenor)
    end = add_period(option_date, swap_tenor)
    if end <= option_date:
        raise InvalidTenorError(
            f"Non-positive swap tenor ({swap_tenor}) given: end date "
            f"{end.isoformat()} is not after option date {option_date.isoformat()}"
        )
    option_time = day_counter.year_fraction(as_date(reference_date), option_date)
    swap_length = day_counter.year_fraction(option_date, end)
    return option_time, swap_length


def _is_time(value: object) -> bool:
    return isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, bool)


class SwaptionVolatilityStructure(TermStructure):
    """Abstract swaption volatility surface.

    Concrete surfaces implement :meth:`max_swap_tenor`, :meth:`min_strike`,
    :meth:`max_strike`, :attr:`max_date`, :meth:`_volatility_impl` and
    :meth:`_smile_section_impl`; everything else is derived here.

    Args:
        business_day_convention: Rolling applied when an option tenor is
            turned into an option date.
        **kwargs: Reference-frame arguments forwarded to
            :class:`~volcal.termstructures.base.TermStructure`.
    """

    def __init__(
        self,
        *,
        business_day_convention: BusinessDayConvention = "following",
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.business_day_convention = business_day_convention

    # -- hooks ---------------------------------------------------------------

    def max_swap_tenor(self) -> Period:
        raise NotImplementedError

    def min_strike(self) -> float:
        raise NotImplementedError

    def max_strike(self) -> float:
        raise NotImplementedError

    def _volatility_impl(self, option_time: float, swap_length: float, strike: float) -> float:
        raise NotImplementedError

    def _smile_section_impl(self, option_time: float, swap_length: float) -> SmileSection:
        raise NotImplementedError

    # -- coordinates ---------------------------------------------------------

    def max_swap_length(self) -> float:
        """Year fraction spanned by :meth:`max_swap_tenor` from the reference date.

        Recomputed on each call so structures anchored to a moving
        evaluation date stay consistent.
        """

        reference = self.reference_date
        return self.time_from_reference(add_period(reference, self.max_swap_tenor()))

    def option_date_from_tenor(self, option_tenor: Period | str) -> date:
        """Roll the reference date forward by ``option_tenor`` on the structure's calendar."""

        return self.calendar.advance(
            self.reference_date, Period.parse(option_tenor), self.business_day_convention
        )

    def convert_dates(self, option_date: DateLike, swap_tenor: Period | str) -> Tuple[float, float]:
        """Return ``(option_time, swap_length)`` for an option date and swap tenor."""

        return convert_dates(self.reference_date, option_date, swap_tenor, self.day_counter)

    def coordinates(self, option: OptionCoordinate, swap: SwapCoordinate) -> Tuple[float, float]:
        """Normalise any supported calling convention to ``(option_time, swap_length)``.

        Raises:
            InvalidInputError: If the argument combination is not supported.
            InvalidTenorError: If the swap tenor is not positive.
        """

        if _is_time(option) and _is_time(swap):
            return float(option), float(swap)  # type: ignore[arg-type]
        return self.convert_dates(*self._date_coordinates(option, swap))

    def _date_coordinates(
        self, option: OptionCoordinate, swap: SwapCoordinate
    ) -> Tuple[DateLike, Period | str]:
        if isinstance(swap, (Period, str)):
            if isinstance(option, Period) or _is_period_string(option):
                option = self.option_date_from_tenor(option)  # type: ignore[arg-type]
            if isinstance(option, (date, str)):
                return option, swap
        raise InvalidInputError(
            "Expected (time, time), (date, tenor) or (tenor, tenor) coordinates, got "
            f"({type(option).__name__}, {type(swap).__name__})"
        )

    # -- range checks --------------------------------------------------------

    def check_range(  # type: ignore[override]
        self,
        option_time: float,
        swap_length: float | None = None,
        strike: float | None = None,
        extrapolate: bool = False,
    ) -> None:
        """Validate a time-based query.

        ``swap_length`` and ``strike`` may be omitted to run only the checks
        that apply to the supplied coordinates.

        Raises:
            InvalidInputError: On a negative option time or swap length.
            OutOfRangeError: When a coordinate leaves the surface's domain and
                neither ``extrapolate`` nor the structure-wide switch is on.
        """

        super().check_range(option_time, extrapolate)
        if swap_length is not None and swap_length < 0.0:
            raise InvalidInputError(f"Negative swap length ({swap_length}) given")
        if extrapolate or self.allows_extrapolation:
            return
        if swap_length is not None:
            max_length = self.max_swap_length()
            if swap_length > max_length:
                raise OutOfRangeError(
                    f"Swap length ({swap_length}) is past max swap length ({max_length})"
                )
        if strike is not None:
            self._check_strike(strike)

    def check_range_dates(
        self,
        option_date: DateLike,
        swap_tenor: Period | str,
        strike: float | None = None,
        extrapolate: bool = False,
    ) -> None:
        """Validate a date-based query, bounding the tenor directly.

        The swap tenor is compared with :meth:`max_swap_tenor` as a period.
        When the two periods cannot be ordered without a reference date
        (e.g. ``1M`` against ``30D``) the comparison falls back to the
        converted swap length.

        Raises:
            InvalidInputError: If ``option_date`` precedes the reference date.
            InvalidTenorError: If ``swap_tenor`` is not positive.
            OutOfRangeError: As for :meth:`check_range`.
        """

        option_date = as_date(option_date)
        swap_tenor = Period.parse(swap_tenor)
        self.check_range_date(option_date, extrapolate)
        if swap_tenor.length <= 0:
            raise InvalidTenorError(f"Non-positive swap tenor ({swap_tenor}) given")
        if extrapolate or self.allows_extrapolation:
            return

        max_tenor = self.max_swap_tenor()
        try:
            within = swap_tenor <= max_tenor
        except InvalidInputError:
            _, swap_length = self.convert_dates(option_date, swap_tenor)
            within = swap_length <= self.max_swap_length()
        if not within:
            raise OutOfRangeError(f"Swap tenor ({swap_tenor}) is past max tenor ({max_tenor})")
        if strike is not None:
            self._check_strike(strike)

    def _check_strike(self, strike: float) -> None:
        low, high = self.min_strike(), self.max_strike()
        if not low <= strike <= high:
            raise OutOfRangeError(
                f"Strike ({strike}) is outside the surface domain [{low}, {high}]"
            )

    # -- queries -------------------------------------------------------------

    def volatility(
        self,
        option: OptionCoordinate,
        swap: SwapCoordinate,
        strike: float,
        extrapolate: bool = False,
    ) -> float:
        """Black volatility at the given coordinates.

        Raises:
            InvalidInputError: On malformed coordinates.
            InvalidTenorError: On a non-positive swap tenor.
            OutOfRangeError: Outside the surface domain without extrapolation.
        """

        option_time, swap_length = self._locate(option, swap, strike, extrapolate)
        return self._volatility_impl(option_time, swap_length, strike)

    def black_variance(
        self,
        option: OptionCoordinate,
        swap: SwapCoordinate,
        strike: float,
        extrapolate: bool = False,
    ) -> float:
        """Total Black variance ``vol**2 * option_time``.

        The option time is the one produced by the same conversion that
        located the volatility.
        """

        option_time, swap_length = self._locate(option, swap, strike, extrapolate)
        vol = self._volatility_impl(option_time, swap_length, strike)
        return vol * vol * option_time

    def _locate(
        self,
        option: OptionCoordinate,
        swap: SwapCoordinate,
        strike: float | None,
        extrapolate: bool,
    ) -> Tuple[float, float]:
        """Resolve coordinates, checking dates and tenors before they become times."""

        if _is_time(option) and _is_time(swap):
            option_time, swap_length = float(option), float(swap)  # type: ignore[arg-type]
            self.check_range(option_time, swap_length, strike, extrapolate)
            return option_time, swap_length
        option_date, swap_tenor = self._date_coordinates(option, swap)
        self.check_range_dates(option_date, swap_tenor, strike, extrapolate)
        return self.convert_dates(option_date, swap_tenor)

    def smile_section(
        self,
        option: OptionCoordinate,
        swap: SwapCoordinate,
        extrapolate: bool = False,
    ) -> SmileSection:
        """Smile at the given option/swap coordinates."""

        option_time, swap_length = self._locate(option, swap, None, extrapolate)
        return self._smile_section_impl(option_time, swap_length)


def _is_period_string(value: object) -> bool:
    if not isinstance(value, str):
        return False
    try:
        Period.parse(value)
    except InvalidInputError:
        return False
    return True


__all__ = [
    "OptionCoordinate",
    "SwapCoordinate",
    "SwaptionVolatilityStructure",
    "VolatilitySurface",
    "convert_dates",
]

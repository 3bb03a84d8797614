"""Business-day calendars and date rolling conventions."""

from __future__ import annotations

import calendar as _calendar
from datetime import date, timedelta
from typing import Dict, Literal, Set

import pandas as pd
from pandas.tseries.holiday import AbstractHolidayCalendar, Holiday
from pandas.tseries.offsets import Day, Easter

from volcal.core.errors import InvalidInputError
from volcal.time.period import Period, add_period

BusinessDayConvention = Literal[
    "following",
    "modified_following",
    "preceding",
    "modified_preceding",
    "unadjusted",
]

_CONVENTIONS: tuple[str, ...] = (
    "following",
    "modified_following",
    "preceding",
    "modified_preceding",
    "unadjusted",
)


class Calendar:
    """Base calendar treating Saturdays and Sundays as the only closed days.

    Subclasses override :meth:`_holidays_for_year` to add market holidays.
    """

    name = "weekends only"
    has_weekends = True

    def __init__(self) -> None:
        self._holiday_cache: Dict[int, Set[date]] = {}

    def _holidays_for_year(self, year: int) -> Set[date]:
        return set()

    def holidays(self, year: int) -> Set[date]:
        """Return the market holidays falling in ``year`` (weekends excluded)."""

        if year not in self._holiday_cache:
            self._holiday_cache[year] = self._holidays_for_year(year)
        return self._holiday_cache[year]

    def is_weekend(self, d: date) -> bool:
        return self.has_weekends and d.weekday() >= 5

    def is_business_day(self, d: date) -> bool:
        return not self.is_weekend(d) and d not in self.holidays(d.year)

    def is_holiday(self, d: date) -> bool:
        return not self.is_business_day(d)

    def is_end_of_month(self, d: date) -> bool:
        return d.month != self.adjust(d + timedelta(days=1), "following").month

    def end_of_month(self, d: date) -> date:
        last = date(d.year, d.month, _calendar.monthrange(d.year, d.month)[1])
        return self.adjust(last, "preceding")

    def adjust(self, d: date, convention: BusinessDayConvention = "following") -> date:
        """Roll ``d`` onto a business day according to ``convention``.

        Raises:
            InvalidInputError: If ``convention`` is not recognised.
        """

        if convention not in _CONVENTIONS:
            raise InvalidInputError(
                f"Unknown business day convention '{convention}'; "
                f"expected one of {_CONVENTIONS}"
            )
        if convention == "unadjusted":
            return d

        step = 1 if convention in ("following", "modified_following") else -1
        rolled = d
        while self.is_holiday(rolled):
            rolled += timedelta(days=step)

        if convention.startswith("modified") and rolled.month != d.month:
            opposite = "preceding" if step == 1 else "following"
            return self.adjust(d, opposite)  # type: ignore[arg-type]
        return rolled

    def advance(
        self,
        d: date,
        period: Period | str,
        convention: BusinessDayConvention = "following",
        end_of_month: bool = False,
    ) -> date:
        """Move ``d`` forward (or back) by ``period``.

        Day periods count business days. Week, month and year periods shift
        the calendar date and then roll it with ``convention``.
        """

        period = Period.parse(period)
        if period.unit == "D":
            remaining = period.length
            if remaining == 0:
                return self.adjust(d, convention)
            step = 1 if remaining > 0 else -1
            moved = d
            for _ in range(abs(remaining)):
                moved += timedelta(days=step)
                while self.is_holiday(moved):
                    moved += timedelta(days=step)
            return moved

        shifted = add_period(d, period)
        if end_of_month and period.unit in ("M", "Y") and self.is_end_of_month(d):
            return self.end_of_month(shifted)
        return self.adjust(shifted, convention)

    def business_days_between(
        self,
        start: date,
        end: date,
        include_first: bool = True,
        include_last: bool = False,
    ) -> int:
        """Count business days between two dates (negative when ``end < start``)."""

        if start == end:
            return int(include_first and include_last and self.is_business_day(start))
        if start > end:
            return -self.business_days_between(end, start, include_last, include_first)

        days = pd.date_range(start, end, freq="D")
        count = sum(1 for ts in days[1:-1] if self.is_business_day(ts.date()))
        if include_first and self.is_business_day(start):
            count += 1
        if include_last and self.is_business_day(end):
            count += 1
        return count

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class WeekendsOnly(Calendar):
    """Calendar closed on weekends only."""

    name = "weekends only"


class NullCalendar(Calendar):
    """Calendar on which every day is a business day."""

    name = "null"
    has_weekends = False


class _TargetHolidayRules(AbstractHolidayCalendar):
    rules = [
        Holiday("New Year's Day", month=1, day=1),
        Holiday(
            "Good Friday",
            month=1,
            day=1,
            offset=[Easter(), Day(-2)],
            start_date=pd.Timestamp("2000-01-01"),
        ),
        Holiday(
            "Easter Monday",
            month=1,
            day=1,
            offset=[Easter(), Day(1)],
            start_date=pd.Timestamp("2000-01-01"),
        ),
        Holiday("Labour Day", month=5, day=1, start_date=pd.Timestamp("2000-01-01")),
        Holiday("Christmas Day", month=12, day=25),
        Holiday("St. Stephen's Day", month=12, day=26, start_date=pd.Timestamp("2000-01-01")),
        Holiday(
            "Year End Closing",
            month=12,
            day=31,
            start_date=pd.Timestamp("1998-01-01"),
            end_date=pd.Timestamp("1999-12-31"),
        ),
        Holiday(
            "Year End Closing 2001",
            month=12,
            day=31,
            start_date=pd.Timestamp("2001-01-01"),
            end_date=pd.Timestamp("2001-12-31"),
        ),
    ]


class TARGET(Calendar):
    """Trans-European settlement calendar used for euro-denominated markets."""

    name = "TARGET"

    def __init__(self) -> None:
        super().__init__()
        self._rules = _TargetHolidayRules()

    def _holidays_for_year(self, year: int) -> Set[date]:
        observed = self._rules.holidays(
            start=pd.Timestamp(year, 1, 1), end=pd.Timestamp(year, 12, 31)
        )
        return {ts.date() for ts in observed}


_CALENDARS = {
    "null": NullCalendar,
    "weekends_only": WeekendsOnly,
    "target": TARGET,
}


def get_calendar(name: str) -> Calendar:
    """Return a calendar instance by short name (``"target"``, ``"null"``...)."""

    try:
        return _CALENDARS[name.lower()]()
    except KeyError as exc:
        raise ValueError(
            f"Unknown calendar '{name}'. Available: {sorted(_CALENDARS)}"
        ) from exc


__all__ = [
    "BusinessDayConvention",
    "Calendar",
    "NullCalendar",
    "TARGET",
    "WeekendsOnly",
    "get_calendar",
]

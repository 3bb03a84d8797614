"""Day-count conventions turning date pairs into year fractions."""

from __future__ import annotations

import calendar as _calendar
from datetime import date


class DayCounter:
    """Base day counter using the actual number of days between two dates."""

    name = "actual"

    def day_count(self, start: date, end: date) -> int:
        return (end - start).days

    def year_fraction(self, start: date, end: date) -> float:
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self).__name__)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Actual365Fixed(DayCounter):
    name = "Actual/365 (Fixed)"

    def year_fraction(self, start: date, end: date) -> float:
        return self.day_count(start, end) / 365.0


class Actual360(DayCounter):
    name = "Actual/360"

    def year_fraction(self, start: date, end: date) -> float:
        return self.day_count(start, end) / 360.0


class ActualActual(DayCounter):
    """Actual/Actual (ISDA): days in each calendar year over that year's length."""

    name = "Actual/Actual (ISDA)"

    def year_fraction(self, start: date, end: date) -> float:
        if start == end:
            return 0.0
        if start > end:
            return -self.year_fraction(end, start)

        def basis(year: int) -> float:
            return 366.0 if _calendar.isleap(year) else 365.0

        if start.year == end.year:
            return (end - start).days / basis(start.year)

        fraction = (date(start.year + 1, 1, 1) - start).days / basis(start.year)
        fraction += end.year - start.year - 1
        fraction += (end - date(end.year, 1, 1)).days / basis(end.year)
        return fraction


class Thirty360(DayCounter):
    """30/360 bond basis."""

    name = "30/360 (Bond Basis)"

    def day_count(self, start: date, end: date) -> int:
        d1, d2 = start.day, end.day
        if d1 == 31:
            d1 = 30
        if d2 == 31 and d1 >= 30:
            d2 = 30
        return (
            360 * (end.year - start.year)
            + 30 * (end.month - start.month)
            + (d2 - d1)
        )

    def year_fraction(self, start: date, end: date) -> float:
        return self.day_count(start, end) / 360.0


_DAY_COUNTERS = {
    "act365f": Actual365Fixed,
    "act360": Actual360,
    "actact": ActualActual,
    "30/360": Thirty360,
}


def get_day_counter(name: str) -> DayCounter:
    """Return a day counter by short name (``"act365f"``, ``"actact"``...)."""

    try:
        return _DAY_COUNTERS[name.lower()]()
    except KeyError as exc:
        raise ValueError(
            f"Unknown day counter '{name}'. Available: {sorted(_DAY_COUNTERS)}"
        ) from exc


__all__ = [
    "Actual360",
    "Actual365Fixed",
    "ActualActual",
    "DayCounter",
    "Thirty360",
    "get_day_counter",
]

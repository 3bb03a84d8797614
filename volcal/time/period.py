"""Tenors (``6M``, ``10Y``) and plain calendar arithmetic on them."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Literal, Tuple

from dateutil.relativedelta import relativedelta

from volcal.core.errors import InvalidInputError

TimeUnit = Literal["D", "W", "M", "Y"]

_UNITS: tuple[str, ...] = ("D", "W", "M", "Y")
_PERIOD_PATTERN = re.compile(r"^\s*([+-]?\d+)\s*([DWMYdwmy])\s*$")


@dataclass(frozen=True, eq=False)
class Period:
    """A signed length of time expressed in a single unit.

    Args:
        length: Signed number of units.
        unit: One of ``"D"``, ``"W"``, ``"M"`` or ``"Y"``.
    """

    length: int
    unit: TimeUnit

    def __post_init__(self) -> None:
        if self.unit not in _UNITS:
            raise InvalidInputError(
                f"Unknown time unit '{self.unit}'; expected one of {_UNITS}"
            )
        if int(self.length) != self.length:
            raise InvalidInputError(f"Period length must be integral, got {self.length}")
        object.__setattr__(self, "length", int(self.length))

    @classmethod
    def parse(cls, text: str | Period) -> Period:
        """Build a period from strings such as ``"6M"`` or ``"-2w"``.

        Raises:
            InvalidInputError: If ``text`` is not a single ``<int><unit>`` token.
        """

        if isinstance(text, Period):
            return text
        match = _PERIOD_PATTERN.match(str(text))
        if match is None:
            raise InvalidInputError(f"Cannot parse period from '{text}'")
        return cls(int(match.group(1)), match.group(2).upper())  # type: ignore[arg-type]

    def normalized(self) -> Period:
        """Return the equivalent period in the smallest exact unit (days or months)."""

        if self.unit == "W":
            return Period(self.length * 7, "D")
        if self.unit == "Y":
            return Period(self.length * 12, "M")
        return self

    def _day_range(self) -> Tuple[int, int]:
        if self.unit == "D":
            bounds = self.length, self.length
        elif self.unit == "W":
            bounds = 7 * self.length, 7 * self.length
        elif self.unit == "M":
            bounds = 28 * self.length, 31 * self.length
        else:
            bounds = 365 * self.length, 366 * self.length
        # negative lengths flip the order
        return min(bounds), max(bounds)

    def _compare(self, other: Period) -> int:
        if not isinstance(other, Period):
            raise TypeError(f"Cannot compare Period with {type(other).__name__}")
        left, right = self.normalized(), other.normalized()
        if left.length == 0 and right.length == 0:
            return 0
        if left.unit == right.unit or left.length == 0 or right.length == 0:
            return (left.length > right.length) - (left.length < right.length)

        left_min, left_max = self._day_range()
        right_min, right_max = other._day_range()
        if left_max < right_min:
            return -1
        if left_min > right_max:
            return 1
        raise InvalidInputError(f"Undecidable comparison between {self} and {other}")

    def __lt__(self, other: Period) -> bool:
        return self._compare(other) < 0

    def __le__(self, other: Period) -> bool:
        return self._compare(other) <= 0

    def __gt__(self, other: Period) -> bool:
        return self._compare(other) > 0

    def __ge__(self, other: Period) -> bool:
        return self._compare(other) >= 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Period):
            return NotImplemented
        left, right = self.normalized(), other.normalized()
        if left.length == 0 and right.length == 0:
            return True
        return left.unit == right.unit and left.length == right.length

    def __hash__(self) -> int:
        normal = self.normalized()
        if normal.length == 0:
            return hash(0)
        return hash((normal.length, normal.unit))

    def __neg__(self) -> Period:
        return Period(-self.length, self.unit)

    def __mul__(self, factor: int) -> Period:
        return Period(self.length * int(factor), self.unit)

    __rmul__ = __mul__

    def __str__(self) -> str:
        return f"{self.length}{self.unit}"


def add_period(start: date, period: Period | str) -> date:
    """Shift ``start`` by ``period`` without any business-day adjustment.

    Month and year shifts clip to the end of the target month, so
    ``2024-01-31 + 1M`` is ``2024-02-29``.
    """

    period = Period.parse(period)
    if period.unit == "D":
        return start + timedelta(days=period.length)
    if period.unit == "W":
        return start + timedelta(weeks=period.length)
    if period.unit == "M":
        return start + relativedelta(months=period.length)
    return start + relativedelta(years=period.length)


__all__ = ["Period", "TimeUnit", "add_period"]

"""Reference frame shared by every term structure."""

from __future__ import annotations

from datetime import date

from volcal.core.errors import InvalidInputError, OutOfRangeError
from volcal.time.calendars import Calendar, NullCalendar
from volcal.time.dates import DateLike, EvaluationDate, as_date
from volcal.time.daycounters import Actual365Fixed, DayCounter
from volcal.time.period import Period


class TermStructure:
    """Anchor a structure in time and govern extrapolation.

    A structure either owns a fixed ``reference_date`` or observes an
    :class:`~volcal.time.dates.EvaluationDate` provider, in which case its
    reference date is the provider's date advanced by ``settlement_days``
    business days and moves whenever the provider moves.

    Args:
        reference_date: Fixed anchor date.
        evaluation_date: Provider used when no fixed anchor is given.
        settlement_days: Business days between the provider date and the
            reference date.
        calendar: Calendar used for settlement and tenor rolling.
        day_counter: Convention converting dates into times.

    Raises:
        InvalidInputError: If neither an anchor nor a provider is supplied.
    """

    def __init__(
        self,
        *,
        reference_date: DateLike | None = None,
        evaluation_date: EvaluationDate | None = None,
        settlement_days: int = 0,
        calendar: Calendar | None = None,
        day_counter: DayCounter | None = None,
    ) -> None:
        if reference_date is None and evaluation_date is None:
            raise InvalidInputError(
                "A term structure needs either a reference date or an evaluation-date provider"
            )
        if settlement_days < 0:
            raise InvalidInputError(f"Negative settlement days ({settlement_days}) given")
        self._reference_date = as_date(reference_date) if reference_date is not None else None
        self._evaluation_date = evaluation_date
        self._settlement_days = int(settlement_days)
        self.calendar = calendar if calendar is not None else NullCalendar()
        self.day_counter = day_counter if day_counter is not None else Actual365Fixed()
        self._allows_extrapolation = False

    @property
    def reference_date(self) -> date:
        if self._reference_date is not None:
            return self._reference_date
        if self._evaluation_date is None:
            raise InvalidInputError(
                "Term structure has neither a reference date nor an evaluation-date provider"
            )
        return self.calendar.advance(
            self._evaluation_date.date, Period(self._settlement_days, "D")
        )

    @property
    def settlement_days(self) -> int:
        return self._settlement_days

    @property
    def allows_extrapolation(self) -> bool:
        return self._allows_extrapolation

    def enable_extrapolation(self, enabled: bool = True) -> None:
        """Allow queries past the structure's domain for every caller."""

        self._allows_extrapolation = bool(enabled)

    def disable_extrapolation(self) -> None:
        self._allows_extrapolation = False

    def time_from_reference(self, d: DateLike) -> float:
        """Return the year fraction between the reference date and ``d``."""

        return self.day_counter.year_fraction(self.reference_date, as_date(d))

    @property
    def max_date(self) -> date:
        raise NotImplementedError

    @property
    def max_time(self) -> float:
        return self.time_from_reference(self.max_date)

    def check_range(self, t: float, extrapolate: bool = False) -> None:
        """Validate a time coordinate against the structure's domain.

        Raises:
            InvalidInputError: If ``t`` is negative.
            OutOfRangeError: If ``t`` is past :attr:`max_time` and neither the
                per-call flag nor the structure-wide switch permits
                extrapolation.
        """

        if t < 0.0:
            raise InvalidInputError(f"Negative time ({t}) given")
        if extrapolate or self._allows_extrapolation:
            return
        max_time = self.max_time
        if t > max_time:
            raise OutOfRangeError(f"Time ({t}) is past max curve time ({max_time})")

    def check_range_date(self, d: DateLike, extrapolate: bool = False) -> None:
        """Date counterpart of :meth:`check_range`."""

        d = as_date(d)
        reference = self.reference_date
        if d < reference:
            raise InvalidInputError(
                f"Date ({d.isoformat()}) before reference date ({reference.isoformat()})"
            )
        if extrapolate or self._allows_extrapolation:
            return
        max_date = self.max_date
        if d > max_date:
            raise OutOfRangeError(
                f"Date ({d.isoformat()}) is past max curve date ({max_date.isoformat()})"
            )


__all__ = ["TermStructure"]

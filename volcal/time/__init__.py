"""Calendar, day-count and tenor utilities."""

from volcal.time.calendars import (
    TARGET,
    BusinessDayConvention,
    Calendar,
    NullCalendar,
    WeekendsOnly,
    get_calendar,
)
from volcal.time.dates import DateLike, EvaluationDate, as_date
from volcal.time.daycounters import (
    Actual360,
    Actual365Fixed,
    ActualActual,
    DayCounter,
    Thirty360,
    get_day_counter,
)
from volcal.time.period import Period, TimeUnit, add_period


__all__ = [
    "Actual360",
    "Actual365Fixed",
    "ActualActual",
    "BusinessDayConvention",
    "Calendar",
    "DateLike",
    "DayCounter",
    "EvaluationDate",
    "NullCalendar",
    "Period",
    "TARGET",
    "Thirty360",
    "TimeUnit",
    "WeekendsOnly",
    "add_period",
    "as_date",
    "get_calendar",
    "get_day_counter",
]

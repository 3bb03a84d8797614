"""Date coercion and the injectable evaluation-date provider."""

from __future__ import annotations

from datetime import date, datetime
from typing import Union

import pandas as pd

from volcal.core.errors import InvalidInputError

DateLike = Union[date, datetime, pd.Timestamp, str]


def as_date(value: DateLike) -> date:
    """Coerce strings, timestamps and datetimes to a plain :class:`datetime.date`.

    Raises:
        InvalidInputError: If ``value`` cannot be interpreted as a date.
    """

    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return pd.Timestamp(value).date()
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Cannot interpret {value!r} as a date") from exc


class EvaluationDate:
    """Mutable valuation-date provider shared by lazily anchored structures.

    Term structures built against a provider re-derive their reference date
    every time it is requested, so moving the provider moves every structure
    that observes it. Nothing in the package reads a process-wide date; a
    provider is always passed in explicitly.

    Args:
        value: Initial valuation date. Defaults to today.
    """

    def __init__(self, value: DateLike | None = None) -> None:
        self._date = as_date(value) if value is not None else date.today()

    @property
    def date(self) -> date:
        return self._date

    def set(self, value: DateLike) -> None:
        """Move the valuation date."""

        self._date = as_date(value)

    def __repr__(self) -> str:
        return f"EvaluationDate({self._date.isoformat()})"


__all__ = ["DateLike", "EvaluationDate", "as_date"]

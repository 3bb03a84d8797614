from datetime import date

import pytest

from volcal.core.errors import InvalidInputError
from volcal.time import Period, add_period


def test_parse_accepts_unit_letters_in_any_case():
    assert Period.parse("6M") == Period(6, "M")
    assert Period.parse("-2w") == Period(-2, "W")
    assert Period.parse(" 10Y ") == Period(10, "Y")
    assert Period.parse(Period(3, "D")) == Period(3, "D")


@pytest.mark.parametrize("text", ["", "M", "1.5Y", "3Q", "1Y6M"])
def test_parse_rejects_malformed_tenors(text):
    with pytest.raises(InvalidInputError):
        Period.parse(text)


def test_unknown_unit_rejected():
    with pytest.raises(InvalidInputError):
        Period(1, "Q")


def test_equality_normalises_weeks_and_years():
    assert Period(12, "M") == Period(1, "Y")
    assert Period(14, "D") == Period(2, "W")
    assert hash(Period(24, "M")) == hash(Period(2, "Y"))
    assert Period(0, "Y") == Period(0, "D")
    assert Period(1, "M") != Period(30, "D")


def test_ordering_within_and_across_units():
    assert Period(1, "Y") < Period(13, "M")
    assert Period(2, "W") < Period(1, "M")
    assert Period(1, "M") < Period(32, "D")
    assert Period(2, "Y") > Period(700, "D")
    assert Period(30, "Y") <= Period(360, "M")


def test_ambiguous_ordering_raises():
    with pytest.raises(InvalidInputError, match="Undecidable"):
        Period(1, "M") < Period(30, "D")
    with pytest.raises(InvalidInputError):
        Period(1, "Y") <= Period(365, "D")


def test_negative_periods_keep_their_day_bounds_ordered():
    with pytest.raises(InvalidInputError, match="Undecidable"):
        Period(-1, "M") < Period(-30, "D")
    with pytest.raises(InvalidInputError):
        Period(-1, "Y") > Period(-365, "D")
    assert Period(-1, "M") > Period(-32, "D")
    assert Period(-1, "M") < Period(-27, "D")
    assert Period(-1, "Y") < Period(-11, "M")


def test_comparison_with_other_types_raises():
    with pytest.raises(TypeError):
        Period(1, "Y") < 1.0


def test_arithmetic_and_formatting():
    assert -Period(3, "M") == Period(-3, "M")
    assert 2 * Period(3, "M") == Period(6, "M")
    assert str(Period(10, "Y")) == "10Y"


def test_add_period_clips_to_month_end():
    assert add_period(date(2024, 1, 31), "1M") == date(2024, 2, 29)
    assert add_period(date(2023, 1, 31), "1M") == date(2023, 2, 28)
    assert add_period(date(2024, 2, 29), "1Y") == date(2025, 2, 28)
    assert add_period(date(2023, 3, 1), "-1W") == date(2023, 2, 22)
    assert add_period(date(2023, 3, 1), Period(10, "D")) == date(2023, 3, 11)

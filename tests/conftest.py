"""Shared market fixtures for calibration and pricing tests."""

from datetime import date

import pytest

from volcal import (
    Actual365Fixed,
    FlatForward,
    HestonProcess,
    NullCalendar,
)

REFERENCE_DATE = date(2023, 1, 2)


def flat_curve(rate, reference_date=REFERENCE_DATE, day_counter=None):
    """Build a flat continuously compounded curve.

    Args:
        rate: Zero rate of the curve.
        reference_date: Anchor date of the curve.
        day_counter: Day counter; defaults to Actual/365 Fixed.

    Returns:
        FlatForward: Curve anchored at ``reference_date``.
    """
    return FlatForward(
        rate,
        reference_date=reference_date,
        day_counter=day_counter or Actual365Fixed(),
    )


@pytest.fixture
def calendar():
    return NullCalendar()


@pytest.fixture
def curves():
    """Risk-free and dividend curves shared by the calibration tests.

    Returns:
        tuple: ``(risk_free, dividend)`` flat curves at 3% and 1%.
    """
    return flat_curve(0.03), flat_curve(0.01)


@pytest.fixture
def heston_process(curves):
    risk_free, dividend = curves
    return HestonProcess(
        spot=100.0,
        risk_free=risk_free,
        dividend=dividend,
        v0=0.04,
        kappa=2.0,
        theta=0.06,
        sigma=0.6,
        rho=-0.6,
    )

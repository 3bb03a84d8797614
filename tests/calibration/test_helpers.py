import math
from datetime import date

import pytest

from volcal.calibration import CalibrationQuote, HestonModelHelper, calibration_error
from volcal.core.errors import InvalidInputError
from volcal.models import BlackScholesProcess
from volcal.pricing import black_formula
from volcal.pricing.engines import AnalyticEuropeanEngine
from volcal.termstructures import FlatForward
from volcal.time import TARGET, Period


def _black_engine(curves, volatility):
    risk_free, dividend = curves
    process = BlackScholesProcess(spot=100.0, risk_free=risk_free, dividend=dividend, volatility=volatility)
    return AnalyticEuropeanEngine(process)


def _helper(curves, calendar, strike=110.0, volatility=0.2, error_type="relative_price"):
    risk_free, dividend = curves
    return HestonModelHelper(
        "1Y", calendar, 100.0, strike, volatility, risk_free, dividend, error_type=error_type
    )


def test_exercise_date_and_forward(curves, calendar):
    helper = _helper(curves, calendar)
    assert helper.exercise_date == date(2024, 1, 2)
    assert helper.tau == 1.0
    assert helper.forward == pytest.approx(100.0 * math.exp(0.02))


def test_exercise_date_rolls_on_the_calendar():
    risk_free = FlatForward(0.03, reference_date=date(2004, 3, 26))
    dividend = FlatForward(0.0, reference_date=date(2004, 3, 26))
    helper = HestonModelHelper("2W", TARGET(), 100.0, 100.0, 0.2, risk_free, dividend)
    # 2004-04-09 is Good Friday and 2004-04-12 Easter Monday
    assert helper.exercise_date == date(2004, 4, 13)


@pytest.mark.parametrize("strike, option_type", [(110.0, "call"), (95.0, "put"), (102.0, "put")])
def test_helper_prices_the_out_of_the_money_side(curves, calendar, strike, option_type):
    assert _helper(curves, calendar, strike=strike).option_type == option_type


def test_market_value_is_black_price_at_quote(curves, calendar):
    helper = _helper(curves, calendar)
    risk_free, _ = curves
    expected = black_formula("call", 110.0, helper.forward, 0.2, risk_free.discount(1.0))
    assert helper.market_value == pytest.approx(expected, rel=1e-14)


@pytest.mark.parametrize("error_type", ["relative_price", "price", "implied_vol"])
def test_errors_vanish_when_model_reproduces_quote(curves, calendar, error_type):
    helper = _helper(curves, calendar, error_type=error_type)
    helper.set_pricing_engine(_black_engine(curves, 0.2))
    assert helper.calibration_error() == pytest.approx(0.0, abs=1e-9)


def test_rebinding_engine_changes_only_model_value(curves, calendar):
    helper = _helper(curves, calendar, error_type="price")
    helper.set_pricing_engine(_black_engine(curves, 0.2))
    market = helper.market_value

    helper.set_pricing_engine(_black_engine(curves, 0.25))
    assert helper.market_value == market
    assert helper.calibration_error() < 0.0

    helper.error_type = "implied_vol"
    assert helper.calibration_error() == pytest.approx(0.05, abs=1e-9)
    helper.error_type = "relative_price"
    relative = abs(market - helper.model_value()) / market
    assert helper.calibration_error() == pytest.approx(relative)


def test_implied_vol_error_is_clamped(curves, calendar):
    helper = _helper(curves, calendar, error_type="implied_vol")
    helper.set_pricing_engine(_black_engine(curves, 20.0))
    assert helper.calibration_error() == pytest.approx(10.0 - 0.2)
    helper.set_pricing_engine(_black_engine(curves, 1.0e-4))
    assert helper.calibration_error() == pytest.approx(0.001 - 0.2)


def test_model_value_requires_an_engine(curves, calendar):
    with pytest.raises(InvalidInputError, match="No pricing engine"):
        _helper(curves, calendar).model_value()


def test_aggregate_error_is_percent_squared(curves, calendar):
    helpers = [
        _helper(curves, calendar, strike=strike, error_type="implied_vol") for strike in (90.0, 110.0)
    ]
    for helper in helpers:
        helper.set_pricing_engine(_black_engine(curves, 0.25))
    assert calibration_error(helpers) == pytest.approx(50.0, abs=1e-5)


def test_helper_from_quote_keeps_weight(curves, calendar):
    risk_free, dividend = curves
    quote = CalibrationQuote("6M", 105.0, 0.22, weight=2.0)
    helper = HestonModelHelper.from_quote(quote, calendar, 100.0, risk_free, dividend)
    assert helper.weight == 2.0
    assert helper.maturity == Period(6, "M")
    assert helper.volatility == 0.22


def test_invalid_helper_inputs(curves, calendar):
    with pytest.raises(InvalidInputError):
        _helper(curves, calendar, error_type="log_price")
    with pytest.raises(InvalidInputError):
        _helper(curves, calendar, volatility=0.0)
    with pytest.raises(InvalidInputError):
        CalibrationQuote("1Y", 100.0, -0.2)

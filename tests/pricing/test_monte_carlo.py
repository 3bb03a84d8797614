import math
from datetime import date

import pytest

from volcal.core.errors import CalculationError, InvalidInputError
from volcal.models import BatesModel, HestonModel, HestonProcess, Merton76Process
from volcal.pricing import (
    AnalyticHestonEngine,
    JumpDiffusionEngine,
    MCEuropeanHestonEngine,
    VanillaOption,
)
from volcal.termstructures import FlatForward
from volcal.time import ActualActual, add_period

TODAY = date(2023, 1, 2)


def _curve(rate, today=TODAY):
    return FlatForward(rate, reference_date=today, day_counter=ActualActual())


def _heston(**dynamics):
    return HestonProcess(spot=100.0, risk_free=_curve(0.03), dividend=_curve(0.0), **dynamics)


def test_mc_bates_matches_merton_when_variance_is_frozen():
    v0 = 0.0433
    process = HestonProcess(
        spot=100.0,
        risk_free=_curve(0.10),
        dividend=_curve(0.04),
        v0=v0,
        kappa=0.5,
        theta=v0,
        sigma=1.0e-4,
        rho=0.0,
    )
    model = BatesModel(process, lambda_=2.0, nu=-0.2, delta=0.2)
    merton = Merton76Process(
        spot=100.0,
        risk_free=process.risk_free,
        dividend=process.dividend,
        volatility=math.sqrt(v0),
        jump_intensity=2.0,
        log_jump_mean=-0.2,
        log_jump_volatility=0.2,
    )
    option = VanillaOption("put", 95.0, add_period(TODAY, "1Y"))

    expected = JumpDiffusionEngine(merton).price(option)
    engine = MCEuropeanHestonEngine(model, time_steps_per_year=2, required_tolerance=0.05)
    assert engine.price(option) == pytest.approx(expected, abs=0.2)


@pytest.mark.slow
@pytest.mark.parametrize("with_jumps", [False, True], ids=["heston", "bates"])
def test_mc_matches_transform_engine(with_jumps):
    today = date(2007, 3, 30)
    process = HestonProcess(
        spot=100.0,
        risk_free=_curve(0.04, today),
        dividend=_curve(0.0, today),
        v0=0.0776,
        kappa=1.88,
        theta=0.0919,
        sigma=0.6526,
        rho=-0.9549,
    )
    if with_jumps:
        model = BatesModel(process, lambda_=2.0, nu=-0.2, delta=0.25)
    else:
        model = HestonModel(process)
    option = VanillaOption("put", 100.0, date(2012, 3, 30))

    expected = AnalyticHestonEngine(model).price(option)
    engine = MCEuropeanHestonEngine(model, time_steps_per_year=10, required_tolerance=0.1)
    assert engine.price(option) == pytest.approx(expected, abs=0.5)


def test_fixed_seed_is_reproducible():
    process = _heston(v0=0.04, kappa=1.5, theta=0.04, sigma=0.5, rho=-0.5)
    engine = MCEuropeanHestonEngine(HestonModel(process), time_steps=4, required_samples=2048, seed=7)
    option = VanillaOption("call", 100.0, add_period(TODAY, "6M"))
    assert engine.price(option) == engine.price(option)


def test_sample_ceiling_raises():
    process = _heston(v0=0.04, kappa=1.5, theta=0.04, sigma=0.5, rho=-0.5)
    engine = MCEuropeanHestonEngine(
        HestonModel(process), time_steps=2, required_tolerance=1.0e-6, max_samples=2000
    )
    with pytest.raises(CalculationError, match="Max number of samples"):
        engine.price(VanillaOption("call", 100.0, add_period(TODAY, "6M")))


@pytest.mark.parametrize(
    "options",
    [
        {"required_samples": 100},
        {"time_steps": 10, "time_steps_per_year": 10, "required_samples": 100},
        {"time_steps": 10},
        {"time_steps": 10, "required_tolerance": -0.1},
        {"time_steps": 0, "required_samples": 100},
    ],
)
def test_invalid_configuration(options):
    process = _heston()
    with pytest.raises(InvalidInputError):
        MCEuropeanHestonEngine(HestonModel(process), **options)


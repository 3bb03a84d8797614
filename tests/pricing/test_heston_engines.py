"""Transform engines against closed forms and an adaptive quadrature."""

import math
from datetime import date

import numpy as np
import pytest
from scipy.integrate import quad

from volcal.core.errors import InvalidInputError
from volcal.models import (
    BatesDetJumpModel,
    BatesDoubleExpDetJumpModel,
    BatesDoubleExpModel,
    BatesModel,
    HestonModel,
    HestonProcess,
    Merton76Process,
)
from volcal.pricing import (
    AnalyticHestonEngine,
    BatesEngine,
    JumpDiffusionEngine,
    VanillaOption,
    black_formula,
    black_scholes_price,
)
from volcal.termstructures import FlatForward
from volcal.time import ActualActual, add_period

TODAY = date(2023, 1, 2)


def _curve(rate):
    return FlatForward(rate, reference_date=TODAY, day_counter=ActualActual())


def _process(spot, r, q, **dynamics):
    return HestonProcess(spot=spot, risk_free=_curve(r), dividend=_curve(q), **dynamics)


@pytest.fixture(scope="module")
def near_black_process():
    return _process(32.0, 0.10, 0.04, v0=0.05, kappa=5.0, theta=0.05, sigma=1.0e-4, rho=0.0)


@pytest.mark.parametrize(
    "build",
    [
        lambda p: AnalyticHestonEngine(HestonModel(p)),
        lambda p: BatesEngine(BatesModel(p, lambda_=1.0e-4, nu=0.0, delta=1.0e-4)),
        lambda p: BatesEngine(
            BatesDoubleExpModel(p, lambda_=1.0e-4, nu_up=1.0e-4, nu_down=1.0e-4, p=0.5)
        ),
        lambda p: BatesEngine(
            BatesDetJumpModel(
                p, lambda_=1.0e-4, nu=0.0, delta=1.0e-4, kappa_lambda=1.0, theta_lambda=1.0e-4
            ),
            64,
        ),
        lambda p: BatesEngine(
            BatesDoubleExpDetJumpModel(
                p,
                lambda_=1.0e-4,
                nu_up=1.0e-4,
                nu_down=1.0e-4,
                p=0.5,
                kappa_lambda=1.0,
                theta_lambda=1.0e-4,
            ),
            64,
        ),
    ],
    ids=["heston", "bates", "bates_double_exp", "bates_det_jump", "bates_double_exp_det_jump"],
)
def test_vanishing_vol_of_vol_gives_black_price(near_black_process, build):
    engine = build(near_black_process)
    exercise = add_period(TODAY, "6M")
    option = VanillaOption("put", 30.0, exercise)

    assert engine.price(option) == pytest.approx(
        _black_put(near_black_process, exercise), abs=2.0e-7
    )


def _black_put(process, exercise):
    t = process.time(exercise)
    discount = process.risk_free.discount(exercise)
    forward = process.forward(exercise)
    return black_formula("put", 30.0, forward, math.sqrt(0.05 * t), discount)


@pytest.mark.parametrize("sigma", [1.0e-6, 1.0e-7])
def test_tiny_vol_of_vol_stays_accurate(sigma):
    process = _process(32.0, 0.10, 0.04, v0=0.05, kappa=5.0, theta=0.05, sigma=sigma, rho=0.0)
    exercise = add_period(TODAY, "6M")
    engine = AnalyticHestonEngine(HestonModel(process))

    price = engine.price(VanillaOption("put", 30.0, exercise))
    assert price == pytest.approx(_black_put(process, exercise), abs=2.0e-7)


@pytest.mark.parametrize("years", [1, 3, 5])
def test_bates_matches_merton_jump_diffusion(years):
    v0 = 0.0433
    heston = _process(100.0, 0.10, 0.04, v0=v0, kappa=0.5, theta=v0, sigma=1.0e-4, rho=0.0)
    bates = BatesModel(heston, lambda_=2.0, nu=-0.2, delta=0.2)
    merton = Merton76Process(
        spot=100.0,
        risk_free=heston.risk_free,
        dividend=heston.dividend,
        volatility=math.sqrt(v0),
        jump_intensity=2.0,
        log_jump_mean=-0.2,
        log_jump_volatility=0.2,
    )
    option = VanillaOption("put", 95.0, add_period(TODAY, f"{years}Y"))

    expected = JumpDiffusionEngine(merton).price(option)
    assert BatesEngine(bates, 160).price(option) == pytest.approx(expected, rel=2e-8)


def _quad_call(model, option, process):
    t = process.time(option.exercise_date)
    forward = process.forward(option.exercise_date)
    m = math.log(forward / option.strike)

    def integrand(u, shift):
        z = np.array([u - 1j * shift])
        value = np.exp(1j * u * m + model.log_characteristic(z, t)[0]) / (1j * u)
        return value.real

    p1 = 0.5 + quad(integrand, 0.0, 200.0, args=(1.0,), limit=500)[0] / math.pi
    p2 = 0.5 + quad(integrand, 0.0, 200.0, args=(0.0,), limit=500)[0] / math.pi
    return process.risk_free.discount(option.exercise_date) * (forward * p1 - option.strike * p2)


@pytest.mark.parametrize("strike", [80.0, 100.0, 125.0])
def test_laguerre_quadrature_matches_adaptive_integration(strike):
    process = _process(100.0, 0.03, 0.01, v0=0.04, kappa=1.5, theta=0.05, sigma=0.5, rho=-0.7)
    model = HestonModel(process)
    option = VanillaOption("call", strike, add_period(TODAY, "1Y"))

    expected = _quad_call(model, option, process)
    assert AnalyticHestonEngine(model).price(option) == pytest.approx(expected, abs=1e-6)


def test_put_call_parity_under_jumps():
    process = _process(100.0, 0.03, 0.01, v0=0.04, kappa=1.5, theta=0.05, sigma=0.5, rho=-0.7)
    engine = BatesEngine(BatesDoubleExpModel(process, lambda_=0.5, nu_up=0.05, nu_down=0.1, p=0.3))
    exercise = add_period(TODAY, "2Y")
    call = engine.price(VanillaOption("call", 105.0, exercise))
    put = engine.price(VanillaOption("put", 105.0, exercise))
    discount = process.risk_free.discount(exercise)
    assert call - put == pytest.approx(discount * (process.forward(exercise) - 105.0), abs=1e-10)
    assert call > 0.0 and put > 0.0


def test_engine_reads_parameters_at_pricing_time():
    process = _process(100.0, 0.03, 0.01, v0=0.04, kappa=1.5, theta=0.04, sigma=0.3, rho=-0.5)
    model = HestonModel(process)
    engine = AnalyticHestonEngine(model)
    option = VanillaOption("call", 100.0, add_period(TODAY, "1Y"))

    before = engine.price(option)
    params = model.params
    params[4] = 0.09  # v0
    model.set_params(params)
    assert engine.price(option) > before


def test_zero_intensity_jump_diffusion_is_black_scholes():
    process = Merton76Process(spot=100.0, risk_free=_curve(0.05), dividend=_curve(0.0), volatility=0.2)
    exercise = add_period(TODAY, "1Y")
    price = JumpDiffusionEngine(process).price(VanillaOption("call", 100.0, exercise))
    t = process.time(exercise)
    assert price == pytest.approx(black_scholes_price("call", 100.0, 100.0, 0.2, t, 0.05), abs=1e-12)


def test_bates_engine_requires_jumps(near_black_process):
    with pytest.raises(InvalidInputError):
        BatesEngine(HestonModel(near_black_process))


def test_expired_option_is_rejected(near_black_process):
    engine = AnalyticHestonEngine(HestonModel(near_black_process))
    with pytest.raises(InvalidInputError, match="expired"):
        engine.price(VanillaOption("call", 30.0, TODAY))

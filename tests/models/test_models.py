from datetime import date

import numpy as np
import pytest

from volcal.core.errors import InvalidInputError
from volcal.models import (
    BatesDetJumpModel,
    BatesDoubleExpDetJumpModel,
    BatesDoubleExpModel,
    BatesModel,
    DoubleExponentialJumps,
    HestonModel,
    HestonProcess,
    DeterministicLognormalJumps,
    LognormalJumps,
    Merton76Process,
    Parameter,
    heston_log_characteristic,
)
from volcal.termstructures import FlatForward


@pytest.fixture
def process():
    curve = FlatForward(0.02, reference_date=date(2023, 1, 2))
    return HestonProcess(
        spot=100.0,
        risk_free=curve,
        dividend=curve,
        v0=0.04,
        kappa=1.2,
        theta=0.05,
        sigma=0.4,
        rho=-0.6,
    )


def test_parameter_order(process):
    assert HestonModel(process).parameter_names == ["theta", "kappa", "sigma", "rho", "v0"]
    assert BatesModel(process).parameter_names[5:] == ["nu", "delta", "lambda"]
    assert BatesDoubleExpModel(process).parameter_names[5:] == ["p", "nu_down", "nu_up", "lambda"]
    assert BatesDetJumpModel(process).parameter_names[8:] == ["kappa_lambda", "theta_lambda"]
    assert BatesDoubleExpDetJumpModel(process).parameter_names[5:] == [
        "p",
        "nu_down",
        "nu_up",
        "lambda",
        "kappa_lambda",
        "theta_lambda",
    ]


def test_initial_values_come_from_process(process):
    model = BatesModel(process, lambda_=1.1, nu=-0.12, delta=0.17)
    np.testing.assert_allclose(model.params, [0.05, 1.2, 0.4, -0.6, 0.04, -0.12, 0.17, 1.1])
    assert model.as_dict()["lambda"] == 1.1
    assert (model.theta, model.kappa, model.sigma, model.rho, model.v0) == (0.05, 1.2, 0.4, -0.6, 0.04)


def test_params_returns_a_copy(process):
    model = HestonModel(process)
    params = model.params
    params[0] = 1.0
    assert model.theta == 0.05


@pytest.mark.parametrize(
    "index, value",
    [(3, 1.0), (3, -1.0), (0, 0.0), (2, -0.1), (4, np.nan)],
)
def test_set_params_enforces_open_bounds(process, index, value):
    model = HestonModel(process)
    params = model.params
    params[index] = value
    assert not model.is_feasible(params)
    with pytest.raises(InvalidInputError):
        model.set_params(params)


def test_set_params_rejects_wrong_length(process):
    with pytest.raises(InvalidInputError, match="Expected 5 parameters"):
        HestonModel(process).set_params([0.04, 1.0, 0.5])


@pytest.mark.parametrize(
    "build",
    [
        HestonModel,
        lambda p: BatesModel(p, lambda_=0.8, nu=-0.15, delta=0.2),
        lambda p: BatesDoubleExpModel(p, lambda_=0.8, nu_up=0.08, nu_down=0.12, p=0.35),
        lambda p: BatesDetJumpModel(p, lambda_=1.5, nu=-0.1, kappa_lambda=2.0, theta_lambda=0.3),
        lambda p: BatesDoubleExpDetJumpModel(p, lambda_=0.2, kappa_lambda=0.5, theta_lambda=0.9),
    ],
    ids=["heston", "bates", "bates_double_exp", "bates_det_jump", "bates_double_exp_det_jump"],
)
def test_characteristic_function_is_a_martingale(process, build):
    model = build(process)
    for t in (0.1, 1.0, 10.0):
        assert abs(model.log_characteristic(np.array([0.0 + 0.0j]), t)[0]) < 1e-14
        # E[S_t / F_t] = phi(-i) = 1
        assert abs(model.log_characteristic(np.array([-1j]), t)[0]) < 1e-12


def test_zero_vol_of_vol_limit_is_deterministic_variance():
    z = np.array([0.3, 1.0 - 0.5j, 4.0])
    t, theta, kappa, v0 = 1.5, 0.05, 1.2, 0.03
    integrated = theta * t + (v0 - theta) * (1.0 - np.exp(-kappa * t)) / kappa
    expected = -0.5 * (1j * z + z * z) * integrated

    exact = heston_log_characteristic(z, t, theta, kappa, 0.0, -0.5, v0)
    np.testing.assert_allclose(exact, expected, rtol=1e-12)
    nearby = heston_log_characteristic(z, t, theta, kappa, 1.0e-7, -0.5, v0)
    np.testing.assert_allclose(nearby, expected, rtol=1e-6)


def test_jump_law_means():
    lognormal = LognormalJumps()
    params = np.array([-0.1, 0.2, 1.0])
    assert lognormal.mean_jump(params) == pytest.approx(np.exp(-0.1 + 0.02) - 1.0)

    double = DoubleExponentialJumps()
    params = np.array([0.4, 0.1, 0.05, 1.0])
    expected = 0.4 / (1.0 - 0.05) + 0.6 / (1.0 + 0.1) - 1.0
    assert double.mean_jump(params) == pytest.approx(expected)


def test_mean_reverting_intensity_integrates_the_decay():
    law = DeterministicLognormalJumps()
    # nu, delta, lambda, kappa_lambda, theta_lambda
    params = np.array([-0.1, 0.2, 2.0, 1.5, 0.5])
    t = 0.8
    expected = 0.5 * t + 1.5 * (1.0 - np.exp(-1.5 * t)) / 1.5
    assert law.integrated_intensity(t, params) == pytest.approx(expected, rel=1e-14)
    assert law.integrated_intensity(0.0, params) == 0.0

    steady = params.copy()
    steady[4] = steady[2]
    assert law.integrated_intensity(t, steady) == pytest.approx(2.0 * t, rel=1e-14)


def test_det_jump_model_at_its_long_run_level_is_bates(process):
    det = BatesDetJumpModel(process, lambda_=0.7, nu=-0.2, delta=0.15, theta_lambda=0.7)
    bates = BatesModel(process, lambda_=0.7, nu=-0.2, delta=0.15)
    z = np.array([0.5, 2.0 - 0.5j, 10.0])
    np.testing.assert_allclose(
        det.log_characteristic(z, 2.0), bates.log_characteristic(z, 2.0), rtol=1e-13
    )
    assert det.kappa_lambda == 1.0
    assert det.theta_lambda == 0.7
    assert det.lambda_ == 0.7


def test_double_exponential_sampling_moments():
    law = DoubleExponentialJumps()
    params = np.array([0.4, 0.1, 0.05, 1.0])
    rng = np.random.default_rng(1)
    sample = law.sample(rng, np.ones(200_000, dtype=int), params)
    assert sample.mean() == pytest.approx(0.4 * 0.05 - 0.6 * 0.1, abs=2e-3)


def test_processes_validate_inputs():
    curve = FlatForward(0.02, reference_date=date(2023, 1, 2))
    with pytest.raises(InvalidInputError):
        HestonProcess(spot=100.0, risk_free=curve, dividend=curve, rho=1.5)
    with pytest.raises(InvalidInputError):
        HestonProcess(spot=-1.0, risk_free=curve, dividend=curve)
    merton = Merton76Process(
        spot=100.0,
        risk_free=curve,
        dividend=curve,
        volatility=0.2,
        jump_intensity=1.0,
        log_jump_mean=-0.1,
        log_jump_volatility=0.2,
    )
    assert merton.mean_jump == pytest.approx(np.exp(-0.08) - 1.0)
    assert merton.forward(date(2024, 1, 2)) == pytest.approx(100.0)


def test_parameter_interval_is_open():
    rho = Parameter("rho", -1.0, 1.0)
    assert rho.contains(0.99)
    assert not rho.contains(-1.0)
    assert rho.describe() == "rho in (-1.0, 1.0)"

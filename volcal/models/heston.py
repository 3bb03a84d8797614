"""Heston stochastic-volatility model and its Bates jump extensions."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from volcal.models.base import CalibratedModel
from volcal.models.jumps import (
    DeterministicDoubleExponentialJumps,
    DeterministicLognormalJumps,
    DoubleExponentialJumps,
    JumpLaw,
    LognormalJumps,
)
from volcal.models.parameters import Parameter, positive
from volcal.models.processes import HestonProcess


def _complex_log1p(x: np.ndarray) -> np.ndarray:
    """``log(1 + x)`` for complex ``x``, accurate when ``|x|`` is tiny."""

    re, im = x.real, x.imag
    modulus = 0.5 * np.log1p(re * (2.0 + re) + im * im)
    return modulus + 1j * np.arctan2(im, 1.0 + re)


HESTON_PARAMETERS: tuple[Parameter, ...] = (
    positive("theta"),
    positive("kappa"),
    positive("sigma"),
    Parameter("rho", -1.0, 1.0),
    positive("v0"),
)


def heston_log_characteristic(
    z: np.ndarray,
    t: float,
    theta: float,
    kappa: float,
    sigma: float,
    rho: float,
    v0: float,
) -> np.ndarray:
    """``log E[exp(i z X_t)]`` for ``X_t = log(S_t / F_t)`` under Heston dynamics.

    Uses the rotation-free formulation of Albrecher et al. and rewrites
    every ``1 / sigma**2`` factor so the expression stays finite and
    accurate as the volatility of variance tends to zero.

    Args:
        z: Complex evaluation points.
        t: Horizon in years.
        theta: Long-run variance.
        kappa: Mean-reversion speed.
        sigma: Volatility of variance.
        rho: Spot/variance correlation.
        v0: Initial variance.
    """

    z = np.asarray(z, dtype=complex)
    sigma2 = sigma * sigma
    a = 1j * z + z * z
    beta = kappa - rho * sigma * 1j * z
    d = np.sqrt(beta * beta + sigma2 * a)
    beta_plus_d = beta + d
    # (beta - d) / sigma**2 == -a / (beta + d)
    b = -a / beta_plus_d
    h = b / beta_plus_d
    g = sigma2 * h
    decay = np.exp(-d * t)
    growth = (1.0 - decay) / (1.0 - g)

    big_d = b * (1.0 - decay) / (1.0 - g * decay)
    # log((1 - g e^{-dt}) / (1 - g)) / sigma**2 == log1p(g * growth) / sigma**2
    if sigma2 > 0.0:
        log_ratio = _complex_log1p(g * growth) / sigma2
    else:
        log_ratio = h * growth
    big_c = kappa * theta * (b * t - 2.0 * log_ratio)
    return big_c + big_d * v0


class HestonModel(CalibratedModel):
    """Heston model with an optional compound-Poisson jump component.

    Parameters are ordered ``theta, kappa, sigma, rho, v0`` followed by the
    jump law's own parameters.

    Args:
        process: Market data (spot and curves) and initial Heston dynamics.
        jumps: Optional jump law composed into the dynamics.
        jump_values: Initial jump parameters, in the jump law's order.
    """

    def __init__(
        self,
        process: HestonProcess,
        jumps: JumpLaw | None = None,
        jump_values: Sequence[float] = (),
    ) -> None:
        self.process = process
        self.jumps = jumps
        specs = HESTON_PARAMETERS + (jumps.parameters if jumps is not None else ())
        values = [process.theta, process.kappa, process.sigma, process.rho, process.v0]
        super().__init__(specs, list(values) + list(jump_values))

    @property
    def theta(self) -> float:
        return float(self._params[0])

    @property
    def kappa(self) -> float:
        return float(self._params[1])

    @property
    def sigma(self) -> float:
        return float(self._params[2])

    @property
    def rho(self) -> float:
        return float(self._params[3])

    @property
    def v0(self) -> float:
        return float(self._params[4])

    @property
    def jump_params(self) -> np.ndarray:
        return self._params[len(HESTON_PARAMETERS):].copy()

    def log_characteristic(self, z: np.ndarray, t: float) -> np.ndarray:
        """``log E[exp(i z log(S_t / F_t))]`` including any jump component."""

        params = self._params
        result = heston_log_characteristic(z, t, *params[: len(HESTON_PARAMETERS)])
        if self.jumps is not None:
            result = result + self.jumps.log_characteristic(
                z, t, params[len(HESTON_PARAMETERS):]
            )
        return result


class BatesModel(HestonModel):
    """Heston dynamics with lognormal jumps (Bates 1996).

    Args:
        process: Market data and initial Heston dynamics.
        lambda_: Jump intensity per year.
        nu: Mean log jump.
        delta: Standard deviation of the log jump.
    """

    def __init__(
        self,
        process: HestonProcess,
        lambda_: float = 0.1,
        nu: float = 0.0,
        delta: float = 0.1,
    ) -> None:
        super().__init__(process, LognormalJumps(), (nu, delta, lambda_))

    @property
    def nu(self) -> float:
        return float(self._params[5])

    @property
    def delta(self) -> float:
        return float(self._params[6])

    @property
    def lambda_(self) -> float:
        return float(self._params[7])


class BatesDoubleExpModel(HestonModel):
    """Heston dynamics with double-exponential jumps.

    Args:
        process: Market data and initial Heston dynamics.
        lambda_: Jump intensity per year.
        nu_up: Mean size of upward log jumps, below one.
        nu_down: Mean size of downward log jumps.
        p: Probability that a jump is upward.
    """

    def __init__(
        self,
        process: HestonProcess,
        lambda_: float = 0.1,
        nu_up: float = 0.1,
        nu_down: float = 0.1,
        p: float = 0.5,
    ) -> None:
        super().__init__(process, DoubleExponentialJumps(), (p, nu_down, nu_up, lambda_))

    @property
    def p(self) -> float:
        return float(self._params[5])

    @property
    def nu_down(self) -> float:
        return float(self._params[6])

    @property
    def nu_up(self) -> float:
        return float(self._params[7])

    @property
    def lambda_(self) -> float:
        return float(self._params[8])


class _MeanRevertingIntensityMixin:
    """Accessors for the two trailing intensity parameters."""

    @property
    def kappa_lambda(self) -> float:
        return float(self._params[-2])

    @property
    def theta_lambda(self) -> float:
        return float(self._params[-1])


class BatesDetJumpModel(_MeanRevertingIntensityMixin, BatesModel):
    """Bates model whose jump intensity decays deterministically.

    The intensity starts at ``lambda_`` and mean-reverts to ``theta_lambda``
    at speed ``kappa_lambda``; only its time integral enters prices.

    Args:
        process: Market data and initial Heston dynamics.
        lambda_: Initial jump intensity per year.
        nu: Mean log jump.
        delta: Standard deviation of the log jump.
        kappa_lambda: Mean-reversion speed of the intensity.
        theta_lambda: Long-run intensity.
    """

    def __init__(
        self,
        process: HestonProcess,
        lambda_: float = 0.1,
        nu: float = 0.0,
        delta: float = 0.1,
        kappa_lambda: float = 1.0,
        theta_lambda: float = 0.1,
    ) -> None:
        HestonModel.__init__(
            self,
            process,
            DeterministicLognormalJumps(),
            (nu, delta, lambda_, kappa_lambda, theta_lambda),
        )


class BatesDoubleExpDetJumpModel(_MeanRevertingIntensityMixin, BatesDoubleExpModel):
    """Double-exponential Bates model with a mean-reverting jump intensity.

    Args:
        process: Market data and initial Heston dynamics.
        lambda_: Initial jump intensity per year.
        nu_up: Mean size of upward log jumps, below one.
        nu_down: Mean size of downward log jumps.
        p: Probability that a jump is upward.
        kappa_lambda: Mean-reversion speed of the intensity.
        theta_lambda: Long-run intensity.
    """

    def __init__(
        self,
        process: HestonProcess,
        lambda_: float = 0.1,
        nu_up: float = 0.1,
        nu_down: float = 0.1,
        p: float = 0.5,
        kappa_lambda: float = 1.0,
        theta_lambda: float = 0.1,
    ) -> None:
        HestonModel.__init__(
            self,
            process,
            DeterministicDoubleExponentialJumps(),
            (p, nu_down, nu_up, lambda_, kappa_lambda, theta_lambda),
        )


__all__ = [
    "BatesDetJumpModel",
    "BatesDoubleExpDetJumpModel",
    "BatesDoubleExpModel",
    "BatesModel",
    "HESTON_PARAMETERS",
    "HestonModel",
    "heston_log_characteristic",
]

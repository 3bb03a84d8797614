"""Jump laws added on top of a diffusive model.

A jump law is a stateless description: it declares its parameters and
computes characteristic-function add-ons, compensators and Monte Carlo
samples from a parameter slice handed in by the owning model.
"""

from __future__ import annotations

import numpy as np

from volcal.models.parameters import Parameter, positive, unbounded


class JumpLaw:
    """Compound-Poisson jumps in the log price."""

    name = "jumps"
    parameters: tuple[Parameter, ...] = ()

    def intensity(self, params: np.ndarray) -> float:
        raise NotImplementedError

    def integrated_intensity(self, t: float, params: np.ndarray) -> float:
        """Expected number of jumps over ``[0, t]``."""

        return self.intensity(params) * t

    def mgf(self, w: np.ndarray, params: np.ndarray) -> np.ndarray:
        """Moment generating function ``E[exp(w Y)]`` of a single log jump ``Y``."""

        raise NotImplementedError

    def mean_jump(self, params: np.ndarray) -> float:
        """Expected relative jump size ``E[exp(Y)] - 1``."""

        return float(np.real(self.mgf(np.array(1.0 + 0.0j), params))) - 1.0

    def log_characteristic(self, z: np.ndarray, t: float, params: np.ndarray) -> np.ndarray:
        """Compensated jump contribution to ``log E[exp(i z X_t)]``."""

        w = 1j * np.asarray(z, dtype=complex)
        mass = self.integrated_intensity(t, params)
        return mass * ((self.mgf(w, params) - 1.0) - w * self.mean_jump(params))

    def sample(
        self,
        rng: np.random.Generator,
        counts: np.ndarray,
        params: np.ndarray,
        antithetic: bool = False,
    ) -> np.ndarray:
        """Total log jump per path given the number of jumps on each path."""

        raise NotImplementedError


class LognormalJumps(JumpLaw):
    """Normally distributed log jumps with mean ``nu`` and deviation ``delta``."""

    name = "lognormal"
    parameters = (unbounded("nu"), positive("delta"), positive("lambda"))

    def intensity(self, params: np.ndarray) -> float:
        return float(params[2])

    def mgf(self, w: np.ndarray, params: np.ndarray) -> np.ndarray:
        nu, delta = params[0], params[1]
        return np.exp(nu * w + 0.5 * delta * delta * w * w)

    def sample(self, rng, counts, params, antithetic=False):
        nu, delta = params[0], params[1]
        shocks = rng.standard_normal(counts.shape)
        jumps = counts * nu + delta * np.sqrt(counts) * shocks
        if antithetic:
            mirrored = counts * nu - delta * np.sqrt(counts) * shocks
            return np.concatenate([jumps, mirrored])
        return jumps


class DoubleExponentialJumps(JumpLaw):
    """Kou-style jumps: exponential up moves with mean ``nu_up`` (probability
    ``p``) and exponential down moves with mean ``nu_down``."""

    name = "double_exponential"
    parameters = (
        Parameter("p", 0.0, 1.0),
        positive("nu_down"),
        Parameter("nu_up", 0.0, 1.0),
        positive("lambda"),
    )

    def intensity(self, params: np.ndarray) -> float:
        return float(params[3])

    def mgf(self, w: np.ndarray, params: np.ndarray) -> np.ndarray:
        p, nu_down, nu_up = params[0], params[1], params[2]
        return p / (1.0 - w * nu_up) + (1.0 - p) / (1.0 + w * nu_down)

    def sample(self, rng, counts, params, antithetic=False):
        p, nu_down, nu_up = params[0], params[1], params[2]
        ups = rng.binomial(counts, p)
        downs = counts - ups
        jumps = rng.gamma(ups, nu_up) - rng.gamma(downs, nu_down)
        if antithetic:
            return np.concatenate([jumps, jumps])
        return jumps


class MeanRevertingIntensity:
    """Deterministic jump intensity relaxing towards a long-run level.

    Mixed into a jump law, it appends ``kappa_lambda`` and ``theta_lambda``
    to the law's parameters. The intensity starts at the law's own
    ``lambda`` and follows ``d lambda = kappa_lambda (theta_lambda - lambda) dt``.
    """

    extra_parameters = (positive("kappa_lambda"), positive("theta_lambda"))

    def integrated_intensity(self, t: float, params: np.ndarray) -> float:
        lam = self.intensity(params)
        kappa, theta = float(params[-2]), float(params[-1])
        return theta * t - (lam - theta) * float(np.expm1(-kappa * t)) / kappa


class DeterministicLognormalJumps(MeanRevertingIntensity, LognormalJumps):
    name = "lognormal_det_intensity"
    parameters = LognormalJumps.parameters + MeanRevertingIntensity.extra_parameters


class DeterministicDoubleExponentialJumps(MeanRevertingIntensity, DoubleExponentialJumps):
    name = "double_exponential_det_intensity"
    parameters = DoubleExponentialJumps.parameters + MeanRevertingIntensity.extra_parameters


__all__ = [
    "DeterministicDoubleExponentialJumps",
    "DeterministicLognormalJumps",
    "DoubleExponentialJumps",
    "JumpLaw",
    "LognormalJumps",
    "MeanRevertingIntensity",
]

"""Monte Carlo pricing for Heston-family models."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from volcal.core.errors import CalculationError, InvalidInputError
from volcal.logging import get_logger
from volcal.pricing.engines.base import market_inputs
from volcal.pricing.instruments import VanillaOption

if TYPE_CHECKING:
    from volcal.models.heston import HestonModel

logger = get_logger("volcal.pricing")

_MIN_SAMPLES = 1023
_CHUNK = 65536
_QE_SWITCH = 1.5


def _qe_variance_step(
    v: np.ndarray,
    normals: np.ndarray,
    uniforms: np.ndarray,
    dt: float,
    theta: float,
    kappa: float,
    sigma: float,
) -> np.ndarray:
    """Andersen's quadratic-exponential step of the CIR variance."""

    decay = math.exp(-kappa * dt)
    mean = theta + (v - theta) * decay
    var = (
        v * sigma * sigma * decay * (1.0 - decay) / kappa
        + theta * sigma * sigma * (1.0 - decay) ** 2 / (2.0 * kappa)
    )
    with np.errstate(divide="ignore", invalid="ignore"):
        psi = var / (mean * mean)

    result = np.empty_like(v)
    quadratic = psi <= _QE_SWITCH
    if np.any(quadratic):
        inv = 2.0 / psi[quadratic]
        b2 = inv - 1.0 + np.sqrt(inv) * np.sqrt(inv - 1.0)
        a = mean[quadratic] / (1.0 + b2)
        result[quadratic] = a * (np.sqrt(b2) + normals[quadratic]) ** 2
    exponential = ~quadratic
    if np.any(exponential):
        p = (psi[exponential] - 1.0) / (psi[exponential] + 1.0)
        beta = (1.0 - p) / mean[exponential]
        u = uniforms[exponential]
        with np.errstate(divide="ignore", invalid="ignore"):
            tail = np.log((1.0 - p) / np.maximum(1.0 - u, 1.0e-300)) / beta
        result[exponential] = np.where(u <= p, 0.0, tail)
    return result


class MCEuropeanHestonEngine:
    """Monte Carlo engine for European options under Heston-family models.

    Variance follows Andersen's QE scheme and the log price his
    central-discretisation update; jumps, when the model carries them, are
    drawn exactly per step as compound-Poisson sums. Samples are generated
    in batches until either ``required_samples`` is reached or the standard
    error falls below ``required_tolerance``.

    Args:
        model: Model bound to market data; read at pricing time.
        time_steps: Fixed number of time steps.
        time_steps_per_year: Time steps per year of option life.
        antithetic: Pair every path with its mirrored normals.
        required_samples: Number of samples to draw.
        required_tolerance: Target standard error of the price.
        max_samples: Ceiling on samples in tolerance mode.
        seed: Seed of the random generator; every call restarts from it.

    Raises:
        InvalidInputError: Unless exactly one of each option pair is set.
    """

    name = "mc_heston"

    def __init__(
        self,
        model: HestonModel,
        *,
        time_steps: int | None = None,
        time_steps_per_year: int | None = None,
        antithetic: bool = True,
        required_samples: int | None = None,
        required_tolerance: float | None = None,
        max_samples: int = 1_000_000,
        seed: int = 42,
    ) -> None:
        if (time_steps is None) == (time_steps_per_year is None):
            raise InvalidInputError("Set exactly one of time_steps and time_steps_per_year")
        if (required_samples is None) == (required_tolerance is None):
            raise InvalidInputError(
                "Set exactly one of required_samples and required_tolerance"
            )
        if (time_steps or time_steps_per_year or 0) < 1:
            raise InvalidInputError("The number of time steps must be positive")
        if required_tolerance is not None and required_tolerance <= 0.0:
            raise InvalidInputError(f"Non-positive tolerance ({required_tolerance}) given")
        self.model = model
        self.time_steps = time_steps
        self.time_steps_per_year = time_steps_per_year
        self.antithetic = bool(antithetic)
        self.required_samples = required_samples
        self.required_tolerance = required_tolerance
        self.max_samples = int(max_samples)
        self.seed = seed

    def _steps(self, t: float) -> int:
        if self.time_steps is not None:
            return int(self.time_steps)
        return max(int(self.time_steps_per_year * t), 1)

    def _simulate(
        self,
        rng: np.random.Generator,
        pairs: int,
        t: float,
        log_drifts: np.ndarray,
    ) -> np.ndarray:
        """Return ``log(S_T / S_0)`` for ``pairs`` (antithetic) paths."""

        model = self.model
        theta, kappa, sigma, rho, v0 = model.theta, model.kappa, model.sigma, model.rho, model.v0
        jumps = model.jumps
        jump_params = model.jump_params if jumps is not None else None

        width = 2 * pairs if self.antithetic else pairs
        dt = t / log_drifts.size
        k_mix = kappa * rho / sigma - 0.5
        k0 = -rho * kappa * theta * dt / sigma
        k1 = 0.5 * dt * k_mix - rho / sigma
        k2 = 0.5 * dt * k_mix + rho / sigma
        k3 = 0.5 * dt * (1.0 - rho * rho)

        if jumps is not None:
            grid = dt * np.arange(log_drifts.size + 1)
            mass = np.diff([jumps.integrated_intensity(s, jump_params) for s in grid])
            compensators = mass * jumps.mean_jump(jump_params)

        def draw(sampler, *args) -> np.ndarray:
            base = sampler(*args, size=pairs)
            if not self.antithetic:
                return base
            return np.concatenate([base, -base])

        log_s = np.zeros(width)
        v = np.full(width, v0)
        for step, drift in enumerate(log_drifts):
            z_v = draw(rng.standard_normal)
            uniforms = rng.uniform(size=pairs)
            if self.antithetic:
                uniforms = np.concatenate([uniforms, 1.0 - uniforms])
            z_s = draw(rng.standard_normal)

            v_next = _qe_variance_step(v, z_v, uniforms, dt, theta, kappa, sigma)
            diffusion = np.sqrt(np.maximum(k3 * (v + v_next), 0.0))
            log_s += drift + k0 + k1 * v + k2 * v_next + diffusion * z_s
            if jumps is not None:
                counts = rng.poisson(mass[step], size=pairs)
                log_s += jumps.sample(rng, counts, jump_params, self.antithetic)
                log_s -= compensators[step]
            v = v_next
        return log_s

    def _samples(
        self,
        rng: np.random.Generator,
        count: int,
        option: VanillaOption,
        spot: float,
        t: float,
        log_drifts: np.ndarray,
    ) -> np.ndarray:
        out = []
        remaining = count
        while remaining > 0:
            pairs = min(remaining, _CHUNK)
            terminal = spot * np.exp(self._simulate(rng, pairs, t, log_drifts))
            if option.option_type == "call":
                payoff = np.maximum(terminal - option.strike, 0.0)
            else:
                payoff = np.maximum(option.strike - terminal, 0.0)
            if self.antithetic:
                payoff = 0.5 * (payoff[:pairs] + payoff[pairs:])
            out.append(payoff)
            remaining -= pairs
        return np.concatenate(out)

    def price(self, option: VanillaOption) -> float:
        process = self.model.process
        t, discount, _, _ = market_inputs(process, option)
        steps = self._steps(t)
        grid = np.linspace(0.0, t, steps + 1)
        log_forward = np.array(
            [
                math.log(process.dividend.discount(s) / process.risk_free.discount(s))
                for s in grid
            ]
        )
        log_drifts = np.diff(log_forward)
        rng = np.random.default_rng(self.seed)

        def draw(count: int) -> np.ndarray:
            return discount * self._samples(rng, count, option, process.spot, t, log_drifts)

        if self.required_samples is not None:
            samples = draw(int(self.required_samples))
            return float(samples.mean())

        tolerance = float(self.required_tolerance)
        total = 0.0
        total_sq = 0.0
        n = 0
        batch = _MIN_SAMPLES
        while True:
            samples = draw(batch)
            total += float(samples.sum())
            total_sq += float(samples @ samples)
            n += samples.size
            mean = total / n
            variance = max(total_sq / n - mean * mean, 0.0)
            error = math.sqrt(variance / (n - 1)) if n > 1 else math.inf
            if error <= tolerance:
                logger.debug(
                    "MC price %.8g with error %.3g from %d samples", mean, error, n
                )
                return mean
            if n >= self.max_samples:
                raise CalculationError(
                    f"Max number of samples ({self.max_samples}) reached while the error "
                    f"({error}) is still above tolerance ({tolerance})"
                )
            needed = n * (error / tolerance) ** 2
            batch = int(min(max(0.8 * needed - n, _MIN_SAMPLES), self.max_samples - n))


__all__ = ["MCEuropeanHestonEngine"]

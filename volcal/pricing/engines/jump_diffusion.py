"""Merton (1976) jump-diffusion series engine."""

from __future__ import annotations

import math

from scipy.stats import poisson

from volcal.core.errors import CalculationError, InvalidInputError
from volcal.models.processes import Merton76Process
from volcal.pricing.black import black_formula
from volcal.pricing.engines.base import market_inputs
from volcal.pricing.instruments import VanillaOption


class JumpDiffusionEngine:
    """Price as a Poisson-weighted series of Black-Scholes prices.

    Conditional on ``n`` jumps the log price is Gaussian with variance
    ``sigma**2 T + n delta**2`` and a rate shifted by the jump drift, so the
    option price is a Poisson mixture of Black prices. The series stops
    once past the Poisson mode a term contributes less than
    ``relative_accuracy`` of the running total.

    Args:
        process: Merton-76 process carrying market data and jump parameters.
        relative_accuracy: Truncation threshold of the series.
        max_iterations: Maximum number of series terms.
    """

    name = "jump_diffusion"

    def __init__(
        self,
        process: Merton76Process,
        relative_accuracy: float = 1.0e-10,
        max_iterations: int = 1000,
    ) -> None:
        if relative_accuracy <= 0.0 or max_iterations < 1:
            raise InvalidInputError(
                f"relative_accuracy ({relative_accuracy}) and max_iterations "
                f"({max_iterations}) must be positive"
            )
        self.process = process
        self.relative_accuracy = float(relative_accuracy)
        self.max_iterations = int(max_iterations)

    def price(self, option: VanillaOption) -> float:
        process = self.process
        t, risk_free_discount, dividend_discount, _ = market_inputs(process, option)
        r = -math.log(risk_free_discount) / t
        q = -math.log(dividend_discount) / t

        jump_variance = process.log_jump_volatility**2
        jump_drift = process.log_jump_mean + 0.5 * jump_variance
        k = process.mean_jump
        lam = process.jump_intensity
        mixing = lam * (1.0 + k) * t
        variance = process.volatility**2 * t

        value = 0.0
        for n in range(self.max_iterations):
            weight = poisson.pmf(n, mixing)
            r_n = r - lam * k + n * jump_drift / t
            std_dev = math.sqrt(variance + n * jump_variance)
            forward = process.spot * math.exp((r_n - q) * t)
            term = weight * black_formula(
                option.option_type, option.strike, forward, std_dev, math.exp(-r_n * t)
            )
            value += term
            if n > mixing and term <= self.relative_accuracy * value:
                return value
        raise CalculationError(
            f"Jump-diffusion series did not converge within {self.max_iterations} terms "
            f"(accuracy {self.relative_accuracy}, last value {value})"
        )


__all__ = ["JumpDiffusionEngine"]

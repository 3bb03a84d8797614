"""Closed-form Black-Scholes engine."""

from __future__ import annotations

import math

from volcal.models.processes import BlackScholesProcess
from volcal.pricing.black import black_formula
from volcal.pricing.engines.base import market_inputs
from volcal.pricing.instruments import VanillaOption


class AnalyticEuropeanEngine:
    """Black-Scholes price of a European option on a flat-volatility process."""

    name = "analytic_european"

    def __init__(self, process: BlackScholesProcess) -> None:
        self.process = process

    def price(self, option: VanillaOption) -> float:
        t, discount, _, forward = market_inputs(self.process, option)
        std_dev = self.process.volatility * math.sqrt(t)
        return black_formula(option.option_type, option.strike, forward, std_dev, discount)


__all__ = ["AnalyticEuropeanEngine"]

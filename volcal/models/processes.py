"""Market-bound stochastic processes: spot, curves and initial dynamics."""

from __future__ import annotations

import math
from dataclasses import dataclass

from volcal.core.errors import InvalidInputError
from volcal.termstructures.yields import YieldTermStructure
from volcal.time.dates import DateLike


@dataclass(eq=False)
class BlackScholesProcess:
    """Geometric Brownian motion with deterministic rates and a flat volatility.

    Args:
        spot: Current underlying level.
        risk_free: Discount curve of the option currency.
        dividend: Dividend (or foreign-rate) curve of the underlying.
        volatility: Flat Black-Scholes volatility.
    """

    spot: float
    risk_free: YieldTermStructure
    dividend: YieldTermStructure
    volatility: float = 0.0

    def __post_init__(self) -> None:
        if self.spot <= 0.0:
            raise InvalidInputError(f"Non-positive spot ({self.spot}) given")
        if self.volatility < 0.0:
            raise InvalidInputError(f"Negative volatility ({self.volatility}) given")

    def time(self, d: DateLike) -> float:
        """Year fraction to ``d`` on the risk-free curve's day counter."""

        return self.risk_free.time_from_reference(d)

    def forward(self, d: DateLike) -> float:
        return self.spot * self.dividend.discount(d) / self.risk_free.discount(d)


@dataclass(eq=False)
class HestonProcess(BlackScholesProcess):
    """Square-root stochastic variance process.

    ``dv = kappa (theta - v) dt + sigma sqrt(v) dW_v`` with
    ``d<W_S, W_v> = rho dt``; the ``volatility`` field is unused.
    """

    v0: float = 0.04
    kappa: float = 1.0
    theta: float = 0.04
    sigma: float = 0.5
    rho: float = 0.0

    def __post_init__(self) -> None:
        super().__post_init__()
        if min(self.v0, self.theta) < 0.0 or self.kappa <= 0.0 or self.sigma <= 0.0:
            raise InvalidInputError(
                "Heston process needs v0, theta >= 0 and kappa, sigma > 0, got "
                f"v0={self.v0}, kappa={self.kappa}, theta={self.theta}, sigma={self.sigma}"
            )
        if not -1.0 <= self.rho <= 1.0:
            raise InvalidInputError(f"Correlation ({self.rho}) outside [-1, 1]")


@dataclass(eq=False)
class Merton76Process(BlackScholesProcess):
    """Black-Scholes diffusion with compound-Poisson lognormal jumps.

    Args:
        jump_intensity: Expected number of jumps per year.
        log_jump_mean: Mean of the log jump size.
        log_jump_volatility: Standard deviation of the log jump size.
    """

    jump_intensity: float = 0.0
    log_jump_mean: float = 0.0
    log_jump_volatility: float = 0.0

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.jump_intensity < 0.0 or self.log_jump_volatility < 0.0:
            raise InvalidInputError(
                f"Jump intensity ({self.jump_intensity}) and log-jump volatility "
                f"({self.log_jump_volatility}) must be non-negative"
            )

    @property
    def mean_jump(self) -> float:
        """Expected relative jump size ``E[J] - 1``."""

        return math.exp(self.log_jump_mean + 0.5 * self.log_jump_volatility**2) - 1.0


__all__ = ["BlackScholesProcess", "HestonProcess", "Merton76Process"]

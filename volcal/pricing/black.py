"""Black (1976) formula on forwards and its implied-volatility inverse."""

from __future__ import annotations

import math
from typing import Literal

import numpy as np
from scipy.optimize import brentq
from scipy.special import ndtr

from volcal.core.errors import CalculationError, InvalidInputError

OptionType = Literal["call", "put"]


def _sign(option_type: OptionType) -> float:
    if option_type == "call":
        return 1.0
    if option_type == "put":
        return -1.0
    raise InvalidInputError(f"Unknown option type '{option_type}'; expected 'call' or 'put'")


def black_formula(
    option_type: OptionType,
    strike: float,
    forward: float,
    std_dev: float,
    discount: float = 1.0,
) -> float:
    """Undiscounted-forward Black price times ``discount``.

    Args:
        option_type: ``"call"`` or ``"put"``.
        strike: Option strike, strictly positive.
        forward: Forward of the underlying, strictly positive.
        std_dev: Total standard deviation ``sigma * sqrt(T)``.
        discount: Discount factor to the payment date.

    Raises:
        InvalidInputError: On non-positive strike/forward or negative inputs.
    """

    sign = _sign(option_type)
    if strike <= 0.0 or forward <= 0.0:
        raise InvalidInputError(
            f"Strike ({strike}) and forward ({forward}) must be strictly positive"
        )
    if std_dev < 0.0:
        raise InvalidInputError(f"Negative standard deviation ({std_dev}) given")
    if discount <= 0.0:
        raise InvalidInputError(f"Non-positive discount ({discount}) given")

    if std_dev == 0.0:
        return discount * max(sign * (forward - strike), 0.0)

    d1 = math.log(forward / strike) / std_dev + 0.5 * std_dev
    d2 = d1 - std_dev
    price = sign * (forward * ndtr(sign * d1) - strike * ndtr(sign * d2))
    return discount * max(float(price), 0.0)


def black_scholes_price(
    option_type: OptionType,
    spot: float,
    strike: float,
    sigma: float,
    t: float,
    r: float,
    q: float = 0.0,
) -> float:
    """Black-Scholes price with flat continuously compounded rate and yield."""

    forward = spot * math.exp((r - q) * t)
    return black_formula(option_type, strike, forward, sigma * math.sqrt(t), math.exp(-r * t))


def black_implied_volatility(
    price: float,
    option_type: OptionType,
    strike: float,
    forward: float,
    maturity: float,
    discount: float = 1.0,
    *,
    min_vol: float = 1.0e-7,
    max_vol: float = 4.0,
    accuracy: float = 1.0e-12,
    max_evaluations: int = 5000,
) -> float:
    """Invert :func:`black_formula` for the volatility using Brent's method.

    Raises:
        InvalidInputError: If ``maturity`` is not positive.
        CalculationError: If ``price`` is not bracketed by the prices at
            ``min_vol`` and ``max_vol`` or the solver does not converge.
    """

    if maturity <= 0.0:
        raise InvalidInputError(f"Non-positive maturity ({maturity}) given")
    root_t = math.sqrt(maturity)

    def objective(vol: float) -> float:
        return black_formula(option_type, strike, forward, vol * root_t, discount) - price

    low, high = objective(min_vol), objective(max_vol)
    if np.sign(low) == np.sign(high) and low != 0.0:
        raise CalculationError(
            f"Price {price} is not bracketed by volatilities [{min_vol}, {max_vol}] "
            f"(strike {strike}, forward {forward}, maturity {maturity})"
        )
    try:
        return float(
            brentq(objective, min_vol, max_vol, xtol=accuracy, maxiter=max_evaluations)
        )
    except (RuntimeError, ValueError) as exc:
        raise CalculationError(f"Implied volatility solver failed for price {price}") from exc


__all__ = [
    "OptionType",
    "black_formula",
    "black_implied_volatility",
    "black_scholes_price",
]

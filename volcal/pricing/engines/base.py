"""Pricing-engine capability shared by every pricing algorithm."""

from __future__ import annotations

from typing import Protocol, Tuple

from volcal.core.errors import InvalidInputError
from volcal.pricing.instruments import VanillaOption


class PricingEngine(Protocol):
    """Anything able to price a European option against its bound model."""

    name: str

    def price(self, option: VanillaOption) -> float:
        ...


def market_inputs(process, option: VanillaOption) -> Tuple[float, float, float, float]:
    """Return ``(t, risk_free_discount, dividend_discount, forward)`` for ``option``.

    Raises:
        InvalidInputError: If the option has already expired.
    """

    t = process.time(option.exercise_date)
    if t <= 0.0:
        raise InvalidInputError(
            f"Option exercising on {option.exercise_date.isoformat()} has expired (t={t})"
        )
    risk_free_discount = process.risk_free.discount(option.exercise_date)
    dividend_discount = process.dividend.discount(option.exercise_date)
    forward = process.spot * dividend_discount / risk_free_discount
    return t, risk_free_discount, dividend_discount, forward


__all__ = ["PricingEngine", "market_inputs"]

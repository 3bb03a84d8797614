"""Plain-vanilla European option."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from volcal.core.errors import InvalidInputError
from volcal.pricing.black import OptionType
from volcal.time.dates import as_date


@dataclass(frozen=True)
class VanillaOption:
    """European option paying ``max(S - K, 0)`` or ``max(K - S, 0)`` at exercise.

    Args:
        option_type: ``"call"`` or ``"put"``.
        strike: Strictly positive strike.
        exercise_date: European exercise date.
    """

    option_type: OptionType
    strike: float
    exercise_date: date

    def __post_init__(self) -> None:
        if self.option_type not in ("call", "put"):
            raise InvalidInputError(
                f"Unknown option type '{self.option_type}'; expected 'call' or 'put'"
            )
        if self.strike <= 0.0:
            raise InvalidInputError(f"Non-positive strike ({self.strike}) given")
        object.__setattr__(self, "exercise_date", as_date(self.exercise_date))

    def payoff(self, spot: float) -> float:
        if self.option_type == "call":
            return max(spot - self.strike, 0.0)
        return max(self.strike - spot, 0.0)


__all__ = ["VanillaOption"]

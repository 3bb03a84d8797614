"""Named, bounded model parameters."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Parameter:
    """A model parameter living in the open interval ``(lower, upper)``.

    Args:
        name: Parameter name as reported in calibration results.
        lower: Exclusive lower bound.
        upper: Exclusive upper bound.
    """

    name: str
    lower: float = -math.inf
    upper: float = math.inf

    def contains(self, value: float) -> bool:
        return math.isfinite(value) and self.lower < value < self.upper

    def describe(self) -> str:
        return f"{self.name} in ({self.lower}, {self.upper})"


def positive(name: str) -> Parameter:
    return Parameter(name, 0.0, math.inf)


def unbounded(name: str) -> Parameter:
    return Parameter(name)


__all__ = ["Parameter", "positive", "unbounded"]

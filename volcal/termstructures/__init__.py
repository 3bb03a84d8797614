"""Term structures: reference frames, discount curves and swaption surfaces."""

from volcal.termstructures.base import TermStructure
from volcal.termstructures.smile import FlatSmileSection, SmileSection
from volcal.termstructures.swaption import (
    ConstantSwaptionVolatility,
    SwaptionVolatilityMatrix,
    SwaptionVolatilityStructure,
    VolatilitySurface,
    convert_dates,
)
from volcal.termstructures.yields import FlatForward, YieldTermStructure, ZeroCurve


__all__ = [
    "ConstantSwaptionVolatility",
    "FlatForward",
    "FlatSmileSection",
    "SmileSection",
    "SwaptionVolatilityMatrix",
    "SwaptionVolatilityStructure",
    "TermStructure",
    "VolatilitySurface",
    "YieldTermStructure",
    "ZeroCurve",
    "convert_dates",
]

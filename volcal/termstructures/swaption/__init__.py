from volcal.termstructures.swaption.constant import ConstantSwaptionVolatility
from volcal.termstructures.swaption.matrix import SwaptionVolatilityMatrix
from volcal.termstructures.swaption.structure import (
    OptionCoordinate,
    SwapCoordinate,
    SwaptionVolatilityStructure,
    VolatilitySurface,
    convert_dates,
)


__all__ = [
    "ConstantSwaptionVolatility",
    "OptionCoordinate",
    "SwapCoordinate",
    "SwaptionVolatilityMatrix",
    "SwaptionVolatilityStructure",
    "VolatilitySurface",
    "convert_dates",
]

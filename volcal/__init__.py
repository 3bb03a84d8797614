# volcal - volatility surfaces and model calibration
"""Swaption volatility surface queries and calibration of Heston-family models."""

from volcal.core import (
    CalculationError,
    InvalidInputError,
    InvalidTenorError,
    OutOfRangeError,
    VolcalError,
)
from volcal.logging import configure_logging, get_logger
from volcal.time import (
    TARGET,
    Actual365Fixed,
    ActualActual,
    EvaluationDate,
    NullCalendar,
    Period,
)
from volcal.termstructures import (
    ConstantSwaptionVolatility,
    FlatForward,
    SwaptionVolatilityMatrix,
    SwaptionVolatilityStructure,
    ZeroCurve,
)
from volcal.models import (
    BatesDetJumpModel,
    BatesDoubleExpDetJumpModel,
    BatesDoubleExpModel,
    BatesModel,
    HestonModel,
    HestonProcess,
    Merton76Process,
)
from volcal.pricing import (
    AnalyticHestonEngine,
    BatesEngine,
    JumpDiffusionEngine,
    MCEuropeanHestonEngine,
    VanillaOption,
)
from volcal.calibration import (
    CalibrationQuote,
    EndCriteria,
    HestonModelHelper,
    LevenbergMarquardt,
    Simplex,
    calibration_error,
)

__version__ = "0.1.0"

__all__ = [
    # Exceptions
    "CalculationError",
    "InvalidInputError",
    "InvalidTenorError",
    "OutOfRangeError",
    "VolcalError",
    # Logging
    "configure_logging",
    "get_logger",
    # Dates
    "TARGET",
    "Actual365Fixed",
    "ActualActual",
    "EvaluationDate",
    "NullCalendar",
    "Period",
    # Term structures
    "ConstantSwaptionVolatility",
    "FlatForward",
    "SwaptionVolatilityMatrix",
    "SwaptionVolatilityStructure",
    "ZeroCurve",
    # Models
    "BatesDetJumpModel",
    "BatesDoubleExpDetJumpModel",
    "BatesDoubleExpModel",
    "BatesModel",
    "HestonModel",
    "HestonProcess",
    "Merton76Process",
    # Pricing
    "AnalyticHestonEngine",
    "BatesEngine",
    "JumpDiffusionEngine",
    "MCEuropeanHestonEngine",
    "VanillaOption",
    # Calibration
    "CalibrationQuote",
    "EndCriteria",
    "HestonModelHelper",
    "LevenbergMarquardt",
    "Simplex",
    "calibration_error",
]

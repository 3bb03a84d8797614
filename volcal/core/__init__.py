from volcal.core.errors import (
    CalculationError,
    InvalidInputError,
    InvalidTenorError,
    OutOfRangeError,
    VolcalError,
)


__all__ = [
    "CalculationError",
    "InvalidInputError",
    "InvalidTenorError",
    "OutOfRangeError",
    "VolcalError",
]

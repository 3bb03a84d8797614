"""Centralized error types for the volcal package."""

from __future__ import annotations


class VolcalError(Exception):
    """Base exception for the volcal package."""

    pass


class InvalidInputError(VolcalError):
    """Raised for malformed dates, tenors, strikes or times."""

    pass


class InvalidTenorError(InvalidInputError):
    """Raised when a swap tenor does not produce an end date after its start."""

    pass


class OutOfRangeError(VolcalError):
    """Raised when a query falls outside a structure's domain and extrapolation is off."""

    pass


class CalculationError(VolcalError):
    """Raised when a pricing or root-finding calculation fails."""

    pass


__all__ = [
    "VolcalError",
    "InvalidInputError",
    "InvalidTenorError",
    "OutOfRangeError",
    "CalculationError",
]

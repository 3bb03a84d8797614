"""Calibration helpers: one market quote plus a swappable pricing engine."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Literal

from volcal.core.errors import CalculationError, InvalidInputError
from volcal.pricing.black import OptionType, black_formula, black_implied_volatility
from volcal.pricing.engines.base import PricingEngine
from volcal.pricing.instruments import VanillaOption
from volcal.termstructures.yields import YieldTermStructure
from volcal.time.calendars import Calendar
from volcal.time.period import Period

CalibrationErrorType = Literal["relative_price", "price", "implied_vol"]

_ERROR_TYPES: tuple[str, ...] = ("relative_price", "price", "implied_vol")
MIN_IMPLIED_VOL = 0.001
MAX_IMPLIED_VOL = 10.0


@dataclass(frozen=True)
class CalibrationQuote:
    """A quoted Black volatility for an option of given maturity and strike.

    Args:
        maturity: Time to exercise as a tenor from the curve reference date.
        strike: Option strike.
        volatility: Quoted Black volatility.
        weight: Relative weight of the quote in the calibration objective.
    """

    maturity: Period
    strike: float
    volatility: float
    weight: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "maturity", Period.parse(self.maturity))
        if self.volatility <= 0.0 or not math.isfinite(self.volatility):
            raise InvalidInputError(f"Quoted volatility ({self.volatility}) must be positive")
        if self.weight < 0.0:
            raise InvalidInputError(f"Negative weight ({self.weight}) given")


class CalibrationHelper:
    """Market quote whose model price comes from an attached pricing engine.

    Subclasses define :meth:`black_price` and the wrapped :attr:`option`.

    Args:
        volatility: Quoted Black volatility.
        error_type: How :meth:`calibration_error` compares model and market.
        weight: Default weight of the helper in a calibration.
    """

    def __init__(
        self,
        volatility: float,
        *,
        error_type: CalibrationErrorType = "relative_price",
        weight: float = 1.0,
    ) -> None:
        if error_type not in _ERROR_TYPES:
            raise InvalidInputError(
                f"Unknown calibration error type '{error_type}'; expected one of {_ERROR_TYPES}"
            )
        if volatility <= 0.0:
            raise InvalidInputError(f"Quoted volatility ({volatility}) must be positive")
        self.volatility = float(volatility)
        self.error_type = error_type
        self.weight = float(weight)
        self._engine: PricingEngine | None = None
        self._market_value: float | None = None

    @property
    def option(self) -> VanillaOption:
        raise NotImplementedError

    @property
    def engine(self) -> PricingEngine | None:
        return self._engine

    def set_pricing_engine(self, engine: PricingEngine) -> None:
        """Rebind the engine used for :meth:`model_value`; nothing else changes."""

        self._engine = engine

    def black_price(self, volatility: float) -> float:
        raise NotImplementedError

    @property
    def market_value(self) -> float:
        """Black price of the wrapped option at the quoted volatility."""

        if self._market_value is None:
            self._market_value = self.black_price(self.volatility)
        return self._market_value

    def model_value(self) -> float:
        """Price of the wrapped option under the attached engine.

        Raises:
            InvalidInputError: If no engine has been attached.
        """

        if self._engine is None:
            raise InvalidInputError(f"No pricing engine set on {self!r}")
        return self._engine.price(self.option)

    def implied_volatility(
        self,
        price: float,
        *,
        accuracy: float = 1.0e-12,
        max_evaluations: int = 5000,
        min_vol: float = MIN_IMPLIED_VOL,
        max_vol: float = MAX_IMPLIED_VOL,
    ) -> float:
        """Black volatility reproducing ``price`` for this helper's option."""

        raise NotImplementedError

    def calibration_error(self) -> float:
        """Model-versus-market discrepancy in the configured error type.

        * ``"relative_price"``: ``|market - model| / market``
        * ``"price"``: ``market - model``
        * ``"implied_vol"``: implied volatility of the model price minus the
          quote, with the implied volatility clamped to
          ``[MIN_IMPLIED_VOL, MAX_IMPLIED_VOL]``.
        """

        model = self.model_value()
        if self.error_type == "relative_price":
            market = self.market_value
            return abs(market - model) / market
        if self.error_type == "price":
            return self.market_value - model

        lower = self.black_price(MIN_IMPLIED_VOL)
        upper = self.black_price(MAX_IMPLIED_VOL)
        if model <= lower:
            implied = MIN_IMPLIED_VOL
        elif model >= upper:
            implied = MAX_IMPLIED_VOL
        else:
            implied = self.implied_volatility(model)
        return implied - self.volatility


class HestonModelHelper(CalibrationHelper):
    """European option quote used to calibrate Heston-family models.

    The exercise date is the curve reference date advanced by ``maturity``
    on ``calendar``. The helper always prices the out-of-the-money side:
    a call when ``K * D_r >= S * D_q`` and a put otherwise.

    Args:
        maturity: Tenor to exercise.
        calendar: Calendar rolling the exercise date.
        spot: Underlying level.
        strike: Option strike.
        volatility: Quoted Black volatility.
        risk_free: Discount curve; its day counter measures time to exercise.
        dividend: Dividend yield curve.
        error_type: See :meth:`CalibrationHelper.calibration_error`.
        weight: Default weight in a calibration.
    """

    def __init__(
        self,
        maturity: Period | str,
        calendar: Calendar,
        spot: float,
        strike: float,
        volatility: float,
        risk_free: YieldTermStructure,
        dividend: YieldTermStructure,
        error_type: CalibrationErrorType = "relative_price",
        weight: float = 1.0,
    ) -> None:
        super().__init__(volatility, error_type=error_type, weight=weight)
        if spot <= 0.0 or strike <= 0.0:
            raise InvalidInputError(
                f"Spot ({spot}) and strike ({strike}) must be strictly positive"
            )
        self.maturity = Period.parse(maturity)
        self.calendar = calendar
        self.spot = float(spot)
        self.strike = float(strike)
        self.risk_free = risk_free
        self.dividend = dividend

        self.exercise_date: date = calendar.advance(risk_free.reference_date, self.maturity)
        self.tau = risk_free.day_counter.year_fraction(
            risk_free.reference_date, self.exercise_date
        )
        if self.tau <= 0.0:
            raise InvalidInputError(
                f"Maturity {self.maturity} gives a non-positive time to exercise ({self.tau})"
            )
        self._risk_free_discount = risk_free.discount(self.tau)
        self._dividend_discount = dividend.discount(self.tau)
        self.forward = self.spot * self._dividend_discount / self._risk_free_discount
        option_type: OptionType = (
            "call"
            if self.strike * self._risk_free_discount >= self.spot * self._dividend_discount
            else "put"
        )
        self._option = VanillaOption(option_type, self.strike, self.exercise_date)

    @classmethod
    def from_quote(
        cls,
        quote: CalibrationQuote,
        calendar: Calendar,
        spot: float,
        risk_free: YieldTermStructure,
        dividend: YieldTermStructure,
        error_type: CalibrationErrorType = "relative_price",
    ) -> HestonModelHelper:
        return cls(
            quote.maturity,
            calendar,
            spot,
            quote.strike,
            quote.volatility,
            risk_free,
            dividend,
            error_type=error_type,
            weight=quote.weight,
        )

    @property
    def option(self) -> VanillaOption:
        return self._option

    @property
    def option_type(self) -> OptionType:
        return self._option.option_type

    def black_price(self, volatility: float) -> float:
        return black_formula(
            self.option_type,
            self.strike,
            self.forward,
            volatility * math.sqrt(self.tau),
            self._risk_free_discount,
        )

    def implied_volatility(
        self,
        price: float,
        *,
        accuracy: float = 1.0e-12,
        max_evaluations: int = 5000,
        min_vol: float = MIN_IMPLIED_VOL,
        max_vol: float = MAX_IMPLIED_VOL,
    ) -> float:
        try:
            return black_implied_volatility(
                price,
                self.option_type,
                self.strike,
                self.forward,
                self.tau,
                self._risk_free_discount,
                min_vol=min_vol,
                max_vol=max_vol,
                accuracy=accuracy,
                max_evaluations=max_evaluations,
            )
        except CalculationError as exc:
            raise CalculationError(
                f"Cannot imply volatility for {self.option_type} strike {self.strike} "
                f"maturity {self.maturity} from price {price}"
            ) from exc

    def __repr__(self) -> str:
        return (
            f"HestonModelHelper(maturity={self.maturity}, strike={self.strike}, "
            f"volatility={self.volatility}, type={self.option_type})"
        )


__all__ = [
    "CalibrationErrorType",
    "CalibrationHelper",
    "CalibrationQuote",
    "HestonModelHelper",
    "MAX_IMPLIED_VOL",
    "MIN_IMPLIED_VOL",
]

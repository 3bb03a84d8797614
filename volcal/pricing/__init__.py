from __future__ import annotations

"""Registry + convenience helpers for option pricing engines.

Engines are registered under a short name so calibration code can switch
between pricing algorithms without importing them directly.
"""

from typing import Callable, Dict

from .black import OptionType, black_formula, black_implied_volatility, black_scholes_price
from .engines import (
    AnalyticEuropeanEngine,
    AnalyticHestonEngine,
    BatesEngine,
    JumpDiffusionEngine,
    MCEuropeanHestonEngine,
    PricingEngine,
)
from .instruments import VanillaOption

# Map *engine_name* -> factory taking the bound model/process plus options.
_ENGINES: Dict[str, Callable[..., PricingEngine]] = {
    "analytic_european": AnalyticEuropeanEngine,
    "heston": AnalyticHestonEngine,
    "bates": BatesEngine,
    "jump_diffusion": JumpDiffusionEngine,
    "mc_heston": MCEuropeanHestonEngine,
}


def register_engine(name: str, factory: Callable[..., PricingEngine]) -> None:
    """Register an engine factory under ``name``."""

    _ENGINES[name] = factory


def get_engine(name: str) -> Callable[..., PricingEngine]:
    """Return an engine factory by *name*.

    Raises:
        ValueError: If no engine is registered under ``name``.
    """

    try:
        return _ENGINES[name]
    except KeyError as exc:
        raise ValueError(
            f"Unknown pricing engine '{name}'. Available: {list(_ENGINES.keys())}"
        ) from exc


def create_engine(name: str, target, **options) -> PricingEngine:
    """Build engine *name* bound to ``target`` (a model or a process)."""

    return get_engine(name)(target, **options)


def available_engines() -> list[str]:
    return sorted(_ENGINES)


__all__ = [
    "AnalyticEuropeanEngine",
    "AnalyticHestonEngine",
    "BatesEngine",
    "JumpDiffusionEngine",
    "MCEuropeanHestonEngine",
    "OptionType",
    "PricingEngine",
    "VanillaOption",
    "available_engines",
    "black_formula",
    "black_implied_volatility",
    "black_scholes_price",
    "create_engine",
    "get_engine",
    "register_engine",
]

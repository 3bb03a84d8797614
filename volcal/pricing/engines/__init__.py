from volcal.pricing.engines.analytic import AnalyticEuropeanEngine
from volcal.pricing.engines.base import PricingEngine, market_inputs
from volcal.pricing.engines.heston import AnalyticHestonEngine, BatesEngine
from volcal.pricing.engines.jump_diffusion import JumpDiffusionEngine
from volcal.pricing.engines.monte_carlo import MCEuropeanHestonEngine


__all__ = [
    "AnalyticEuropeanEngine",
    "AnalyticHestonEngine",
    "BatesEngine",
    "JumpDiffusionEngine",
    "MCEuropeanHestonEngine",
    "PricingEngine",
    "market_inputs",
]

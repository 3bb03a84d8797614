"""Calibratable models and the processes they are bound to."""

from volcal.models.base import CalibratedModel
from volcal.models.heston import (
    BatesDetJumpModel,
    BatesDoubleExpDetJumpModel,
    BatesDoubleExpModel,
    BatesModel,
    HestonModel,
    heston_log_characteristic,
)
from volcal.models.jumps import (
    DeterministicDoubleExponentialJumps,
    DeterministicLognormalJumps,
    DoubleExponentialJumps,
    JumpLaw,
    LognormalJumps,
)
from volcal.models.parameters import Parameter
from volcal.models.processes import BlackScholesProcess, HestonProcess, Merton76Process


__all__ = [
    "BatesDetJumpModel",
    "BatesDoubleExpDetJumpModel",
    "BatesDoubleExpModel",
    "BatesModel",
    "BlackScholesProcess",
    "CalibratedModel",
    "DeterministicDoubleExponentialJumps",
    "DeterministicLognormalJumps",
    "DoubleExponentialJumps",
    "HestonModel",
    "HestonProcess",
    "JumpLaw",
    "LognormalJumps",
    "Merton76Process",
    "Parameter",
    "heston_log_characteristic",
]

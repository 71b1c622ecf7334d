from .constants import Polarity, parse_polarity, PROTON_MASS
from .conversion import to_mz, to_mass
from .Tolerance import MassTolerance, DaTolerance, AbsoluteTolerance, PpmTolerance, parse_tolerance

__all__ = [
    "Polarity",
    "parse_polarity",
    "PROTON_MASS",
    "to_mz",
    "to_mass",
    "MassTolerance",
    "DaTolerance",
    "AbsoluteTolerance",
    "PpmTolerance",
    "parse_tolerance",
]

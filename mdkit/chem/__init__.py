from .Formula import Formula
from .Averagine import IsotopeSpacingModel, FixedSpacing, AveragineSpacing

__all__ = [
    "Formula",
    "IsotopeSpacingModel",
    "FixedSpacing",
    "AveragineSpacing",
]

import re
from abc import ABC, abstractmethod
from typing import Tuple

from .constants import PPM
from ..errors import ToleranceFormatError

class MassTolerance(ABC):
    """Base class for mass tolerance calculation (Da or ppm)."""
    unit: str = ""

    def __init__(self, tolerance: float):
        self.tolerance = float(tolerance)

    @property
    def value(self) -> float:
        return self.tolerance

    @abstractmethod
    def error(self, observed: float, theoretical: float) -> float:
        """Compute the signed mass error (Da or ppm)."""
        pass

    @abstractmethod
    def range(self, center: float) -> Tuple[float, float]:
        """Return the inclusive (min, max) interval accepted around center."""
        pass

    def min_value(self, center: float) -> float:
        return self.range(center)[0]

    def max_value(self, center: float) -> float:
        return self.range(center)[1]

    def within(self, observed: float, theoretical: float) -> bool:
        """Check if observed value is within tolerance from theoretical."""
        low, high = self.range(theoretical)
        if low > high:
            low, high = high, low
        return low <= observed <= high

    # --- Operator overloads ---
    def __add__(self, value: float) -> "MassTolerance":
        """Return new instance with increased tolerance."""
        return self.__class__(self.tolerance + value)

    def __sub__(self, value: float) -> "MassTolerance":
        """Return new instance with decreased tolerance."""
        return self.__class__(self.tolerance - value)

    def __mul__(self, value: float) -> "MassTolerance":
        """Return new instance with multiplied tolerance."""
        return self.__class__(self.tolerance * value)

    def __truediv__(self, value: float) -> "MassTolerance":
        """Return new instance with divided tolerance."""
        return self.__class__(self.tolerance / value)

    def __eq__(self, other):
        if not isinstance(other, MassTolerance):
            return False
        return self.unit == other.unit and self.tolerance == other.tolerance

    def __hash__(self):
        return hash((self.unit, self.tolerance))

    def __repr__(self):
        return f"{self.__class__.__name__}(tolerance={self.tolerance})"

    def __str__(self):
        return f"±{self.tolerance:.4f} {self.unit}"

class DaTolerance(MassTolerance):
    """Absolute tolerance in Daltons (or Th when applied to m/z)."""
    unit = "Absolute"

    def __init__(self, tolerance: float):
        super().__init__(tolerance)

    def error(self, observed: float, theoretical: float) -> float:
        return observed - theoretical

    def range(self, center: float) -> Tuple[float, float]:
        return center - self.tolerance, center + self.tolerance


AbsoluteTolerance = DaTolerance


class PpmTolerance(MassTolerance):
    """Relative tolerance in parts-per-million (ppm)."""
    unit = "PPM"

    def __init__(self, tolerance: float):
        super().__init__(tolerance)

    def error(self, observed: float, theoretical: float) -> float:
        return (observed - theoretical) / theoretical / PPM

    def range(self, center: float) -> Tuple[float, float]:
        return center * (1 - self.tolerance * PPM), center * (1 + self.tolerance * PPM)


_UNITS = {
    "ppm": PpmTolerance,
    "da": DaTolerance,
    "absolute": DaTolerance,
}

def parse_tolerance(tolerance_str: str) -> MassTolerance:
    """
    Parse a tolerance string of the form "<number> <unit>".

    Units are case-insensitive: "ppm" gives a PpmTolerance, "da" or "absolute"
    a DaTolerance. A leading "±" is ignored, so str(tolerance) parses back.

    Example:
        >>> parse_tolerance("10 ppm")
        PpmTolerance(tolerance=10.0)
        >>> parse_tolerance("±0.0100 Absolute")
        DaTolerance(tolerance=0.01)
    """
    if not isinstance(tolerance_str, str):
        raise ToleranceFormatError(f"Tolerance must be a string, not {type(tolerance_str)}")

    parts = tolerance_str.strip().lstrip("±").split()
    if len(parts) != 2:
        raise ToleranceFormatError(f"Expected '<number> <unit>', got: {tolerance_str!r}")

    number, unit = parts
    cls = _UNITS.get(unit.lower())
    if cls is None:
        raise ToleranceFormatError(f"Unknown tolerance unit '{unit}' in {tolerance_str!r}")
    if not re.fullmatch(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?", number):
        raise ToleranceFormatError(f"Tolerance value is not numeric: {number!r}")
    return cls(float(number))

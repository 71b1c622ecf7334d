from typing import List, Sequence, Tuple

from mdkit.mass.constants import DEFAULT_ISOTOPE_SPACING
from mdkit.mass.conversion import to_mz


def ladder(mass: float, charge: int, intensities: Sequence[float],
           spacing: float = DEFAULT_ISOTOPE_SPACING) -> List[Tuple[float, float]]:
    """(m/z, intensity) pairs of an ideal isotope ladder starting at the monoisotopic mass."""
    return [(to_mz(mass + i * spacing, charge), intensity) for i, intensity in enumerate(intensities)]


def scaled(intensities: Sequence[float], factor: float) -> List[float]:
    return [i * factor for i in intensities]


PEPTIDE_PROFILE = [60.0, 100.0, 75.0, 40.0, 15.0]
PROTEOFORM_PROFILE = [30.0, 55.0, 80.0, 100.0, 90.0, 70.0, 50.0, 30.0, 15.0, 8.0, 4.0]
PROTEOFORM_MASS = 14037.926829

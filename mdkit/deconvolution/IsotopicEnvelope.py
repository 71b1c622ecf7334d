from dataclasses import dataclass
from typing import Dict, Tuple

from ..mass.conversion import to_mass
from ..spectrum.Peak import Peak


@dataclass(frozen=True)
class IsotopicEnvelope:
    """
    One species at one charge state, as detected by the deconvolution engine.

    Attributes:
        monoisotopic_mass (float): Neutral mass of the lowest-mass isotopologue.
        charge (int): Signed charge state.
        peaks (Tuple[Peak, ...]): Ladder peaks in ascending m/z; the first one is monoisotopic.
        total_intensity (float): Sum of the ladder peak intensities.
    """
    monoisotopic_mass: float
    charge: int
    peaks: Tuple[Peak, ...]
    total_intensity: float

    @property
    def monoisotopic_mz(self) -> float:
        return self.peaks[0].mz

    @property
    def most_abundant_peak(self) -> Peak:
        return max(self.peaks, key=lambda p: p.intensity)

    @property
    def most_abundant_observed_isotopic_mass(self) -> float:
        return to_mass(self.most_abundant_peak.mz, self.charge)

    @property
    def size(self) -> int:
        return len(self.peaks)

    def to_dict(self) -> Dict:
        return {
            "monoisotopic_mass": self.monoisotopic_mass,
            "charge": self.charge,
            "peaks": [[p.mz, p.intensity] for p in self.peaks],
            "total_intensity": self.total_intensity,
        }

    def __repr__(self) -> str:
        return (
            f"IsotopicEnvelope(mass={self.monoisotopic_mass:.4f}, charge={self.charge}, "
            f"n_peaks={len(self.peaks)}, total_intensity={self.total_intensity:g})"
        )

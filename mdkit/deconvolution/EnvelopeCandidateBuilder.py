from typing import List, Optional, Tuple

from .IsotopicEnvelope import IsotopicEnvelope
from ..chem.Averagine import IsotopeSpacingModel, FixedSpacing
from ..errors import ChargeZeroError
from ..mass.conversion import to_mass
from ..mass.Tolerance import MassTolerance
from ..spectrum.MzSpectrum import MzSpectrum
from ..spectrum.Peak import Peak


class EnvelopeCandidateBuilder:
    """
    Builds the isotope ladder around one seed peak at one hypothesized charge.

    The seed does not need to be the monoisotopic peak: the ladder is walked
    towards lower and higher m/z in steps of spacing / |z| until an expected
    position has no peak within tolerance.
    """

    def __init__(self, isotope_spacing: Optional[IsotopeSpacingModel] = None, max_ladder_length: int = 30):
        self.isotope_spacing = isotope_spacing or FixedSpacing()
        self.max_ladder_length = max_ladder_length

    def mz_step(self, neutral_mass: float, charge: int) -> float:
        """m/z distance between neighbouring isotopologues at this charge."""
        if charge == 0:
            raise ChargeZeroError()
        return self.isotope_spacing(neutral_mass) / abs(charge)

    def build(
            self,
            seed: Peak,
            charge: int,
            spectrum: MzSpectrum,
            tolerance: MassTolerance,
            min_intensity_ratio: float,
            isolation_range: Optional[Tuple[float, float]] = None,
            ) -> Optional[IsotopicEnvelope]:
        """
        Try to explain seed as a member of an isotope ladder at the given charge.

        Args:
            seed (Peak): Any peak of the putative ladder.
            charge (int): Signed charge state to test.
            spectrum (MzSpectrum): Spectrum the ladder peaks are looked up in.
            tolerance (MassTolerance): m/z matching tolerance.
            min_intensity_ratio (float): Fraction of the most intense ladder peak a
                peak must reach to be accepted as monoisotopic.
            isolation_range (Tuple[float, float], optional): When given, the
                monoisotopic peak must fall inside it, widened by tolerance.

        Returns:
            IsotopicEnvelope or None when fewer than two peaks support the charge.
        """
        step = self.mz_step(to_mass(seed.mz, charge), charge)

        lower = self._walk(seed, -step, spectrum, tolerance, self.max_ladder_length - 1)
        upper = self._walk(seed, step, spectrum, tolerance, self.max_ladder_length - 1 - len(lower))
        ladder = lower[::-1] + [seed] + upper

        mono_index = self.monoisotopic_index(ladder, min_intensity_ratio)
        peaks = ladder[mono_index:]
        if len(peaks) < 2:
            return None

        mono = peaks[0]
        if isolation_range is not None:
            low, high = isolation_range
            if not tolerance.min_value(low) <= mono.mz <= tolerance.max_value(high):
                return None

        return IsotopicEnvelope(
            monoisotopic_mass=to_mass(mono.mz, charge),
            charge=charge,
            peaks=tuple(peaks),
            total_intensity=sum(p.intensity for p in peaks),
        )

    def _walk(self, seed: Peak, step: float, spectrum: MzSpectrum, tolerance: MassTolerance, budget: int) -> List[Peak]:
        found: List[Peak] = []
        previous = seed
        for k in range(1, budget + 1):
            expected = seed.mz + k * step
            if expected <= 0:
                break
            peak = spectrum.find_nearest(expected, tolerance)
            # Tolerance wider than the step can hand back a peak already on the ladder.
            if peak is None or peak.mz == previous.mz or (step > 0) != (peak.mz > previous.mz):
                break
            found.append(peak)
            previous = peak
        return found

    @staticmethod
    def monoisotopic_index(ladder: List[Peak], min_intensity_ratio: float) -> int:
        """
        Index of the first ladder peak, from low m/z upwards, whose intensity
        reaches min_intensity_ratio times the ladder maximum.
        """
        if not ladder:
            raise ValueError("Cannot pick a monoisotopic peak from an empty ladder")
        threshold = min_intensity_ratio * max(p.intensity for p in ladder)
        for i, peak in enumerate(ladder):
            if peak.intensity >= threshold:
                return i
        return len(ladder) - 1

    @staticmethod
    def intensity_valleys(envelope: IsotopicEnvelope) -> int:
        """
        Number of interior ladder peaks less intense than both neighbours.

        One species gives a unimodal envelope. Two species interleaved at half
        the spacing read as a single ladder at twice the charge, and their
        intensities zig-zag.
        """
        intensities = [p.intensity for p in envelope.peaks]
        return sum(
            1 for left, mid, right in zip(intensities, intensities[1:], intensities[2:])
            if mid < left and mid < right
        )

    def ladder_error(self, envelope: IsotopicEnvelope) -> float:
        """Mean absolute ppm deviation of the ladder peaks from ideal isotope positions."""
        if envelope.size < 2:
            return 0.0
        mono_mz = envelope.monoisotopic_mz
        step = self.mz_step(envelope.monoisotopic_mass, envelope.charge)
        errors = []
        for peak in envelope.peaks[1:]:
            n = round((peak.mz - mono_mz) / step)
            expected = mono_mz + n * step
            errors.append(abs(peak.mz - expected) / expected * 1e6)
        return sum(errors) / len(errors)

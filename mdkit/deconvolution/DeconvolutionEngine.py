import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from itertools import groupby
from typing import List, Optional, Sequence, Tuple

from .DeconvolutionParameters import DeconvolutionParameters, validate_charge_range
from .EnvelopeCandidateBuilder import EnvelopeCandidateBuilder
from .IsotopicEnvelope import IsotopicEnvelope
from ..errors import DeconvolutionCancelled, InvalidInputError
from ..mass.Tolerance import MassTolerance, PpmTolerance
from ..spectrum.MzSpectrum import MzSpectrum

logger = logging.getLogger(__name__)

# (index of the seed peak in the working spectrum, envelope built from it)
Candidate = Tuple[int, IsotopicEnvelope]


class CancellationToken:
    """Cooperative flag checked between iterations of the peak x charge search."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self):
        if self._event.is_set():
            raise DeconvolutionCancelled("Deconvolution was cancelled")


class DeconvolutionEngine:
    """
    Finds isotopic envelopes in a spectrum.

    Deconvolution runs as two explicit stages: every (seed peak, charge) pair
    is handed to an EnvelopeCandidateBuilder, optionally on a thread pool, and
    the collected candidates are then reduced on the calling thread into the
    deduplicated result list.

    Usage:
        engine = DeconvolutionEngine(DeconvolutionParameters(min_charge=1, max_charge=30))
        envelopes = engine.deconvolve(spectrum, isolation_range=(738.37, 742.37))
    """

    def __init__(self, parameters: Optional[DeconvolutionParameters] = None, **overrides):
        parameters = parameters or DeconvolutionParameters()
        if overrides:
            parameters = replace(parameters, **overrides)
        self.parameters = parameters
        self.builder = EnvelopeCandidateBuilder(
            isotope_spacing=parameters.isotope_spacing,
            max_ladder_length=parameters.max_ladder_length,
        )

    def deconvolve(
            self,
            spectrum: MzSpectrum,
            isolation_range: Optional[Tuple[float, float]] = None,
            min_charge: Optional[int] = None,
            max_charge: Optional[int] = None,
            tolerance_ppm: Optional[float] = None,
            min_intensity_ratio: Optional[float] = None,
            cancellation_token: Optional[CancellationToken] = None,
            ) -> List[IsotopicEnvelope]:
        """
        Deconvolve the peaks of spectrum inside isolation_range.

        Arguments left as None fall back to this engine's parameters. When
        isolation_range is None the whole spectrum is used.

        Returns:
            List[IsotopicEnvelope]: Envelopes sorted by descending total intensity.
                Empty when the window holds no peaks or nothing forms a ladder.
        """
        params = self.parameters
        min_charge = params.min_charge if min_charge is None else min_charge
        max_charge = params.max_charge if max_charge is None else max_charge
        tolerance_ppm = params.tolerance_ppm if tolerance_ppm is None else tolerance_ppm
        min_intensity_ratio = params.min_intensity_ratio if min_intensity_ratio is None else min_intensity_ratio

        validate_charge_range(min_charge, max_charge)
        if tolerance_ppm < 0:
            raise InvalidInputError(f"tolerance_ppm must be non-negative, got {tolerance_ppm}")
        if not 0.0 <= min_intensity_ratio <= 1.0:
            raise InvalidInputError(f"min_intensity_ratio must be in [0, 1], got {min_intensity_ratio}")

        if isolation_range is None:
            if spectrum.size == 0:
                return []
            isolation_range = spectrum.mz_range
        low, high = isolation_range
        if low > high:
            raise InvalidInputError(f"Isolation range is inverted: [{low}, {high}]")

        working = spectrum.extract(low, high)
        if working.size == 0:
            logger.debug("No peaks in isolation range [%.4f, %.4f]", low, high)
            return []

        tolerance = PpmTolerance(tolerance_ppm)
        charges = [params.polarity.sign * z for z in range(min_charge, max_charge + 1)]

        candidates = self.generate_candidates(
            spectrum, working, charges, tolerance, min_intensity_ratio, (low, high), cancellation_token
        )
        envelopes = self.reduce_candidates(candidates, tolerance)
        logger.debug(
            "Deconvolved %d peaks in [%.4f, %.4f]: %d candidates -> %d envelopes",
            working.size, low, high, len(candidates), len(envelopes)
        )
        return envelopes

    # -------------------------------------------------------------------------
    # Stage 1: candidate generation
    def generate_candidates(
            self,
            spectrum: MzSpectrum,
            working: MzSpectrum,
            charges: Sequence[int],
            tolerance: MassTolerance,
            min_intensity_ratio: float,
            isolation_range: Tuple[float, float],
            cancellation_token: Optional[CancellationToken] = None,
            ) -> List[Candidate]:
        """
        Build one candidate per (seed, charge) pair that yields a valid ladder.

        Seeds come from working (the isolation window); ladders are looked up
        in the full spectrum. Output order follows seed index then charge,
        whether or not a thread pool is used.
        """
        def evaluate(seed_index: int) -> List[Candidate]:
            seed = working[seed_index]
            found = []
            for charge in charges:
                if cancellation_token is not None:
                    cancellation_token.raise_if_cancelled()
                envelope = self.builder.build(
                    seed, charge, spectrum, tolerance, min_intensity_ratio, isolation_range
                )
                if envelope is not None:
                    found.append((seed_index, envelope))
            return found

        n_workers = self.parameters.n_workers
        if n_workers > 1 and working.size > 1:
            with ThreadPoolExecutor(max_workers=n_workers) as pool:
                per_seed = list(pool.map(evaluate, range(working.size)))
        else:
            per_seed = [evaluate(i) for i in range(working.size)]

        return [candidate for found in per_seed for candidate in found]

    # -------------------------------------------------------------------------
    # Stage 2: reduction
    def reduce_candidates(self, candidates: Sequence[Candidate], tolerance: MassTolerance) -> List[IsotopicEnvelope]:
        """
        Collapse candidates into one envelope per detected species.

        1. For every seed keep its best charge: fewest intensity valleys, then
           most peaks, then smallest ladder error, then highest total intensity,
           then lowest |charge|. Ladders built at a fraction or a neighbour of
           the true charge only cover a subset of the true ladder and lose here.
        2. Same charge and masses within tolerance: keep the most intense.
        3. Different charges and masses within tolerance: keep the lowest
           |charge| unless a higher one is more than charge_dominance_ratio
           times as intense.
        """
        best_per_seed = []
        for _, group in groupby(sorted(candidates, key=lambda c: c[0]), key=lambda c: c[0]):
            best_per_seed.append(min((env for _, env in group), key=self._seed_preference))

        same_charge = []
        for _, group in groupby(sorted(best_per_seed, key=lambda e: e.charge), key=lambda e: e.charge):
            for cluster in self._mass_clusters(list(group), tolerance):
                same_charge.append(max(cluster, key=lambda e: (e.total_intensity, e.size, -e.monoisotopic_mass)))

        envelopes = [self._representative(cluster) for cluster in self._mass_clusters(same_charge, tolerance)]
        return sorted(envelopes, key=lambda e: (-e.total_intensity, e.monoisotopic_mass, abs(e.charge)))

    def _seed_preference(self, envelope: IsotopicEnvelope):
        return (
            self.builder.intensity_valleys(envelope),
            -envelope.size,
            round(self.builder.ladder_error(envelope), 6),
            -envelope.total_intensity,
            abs(envelope.charge),
        )

    @staticmethod
    def _mass_clusters(envelopes: List[IsotopicEnvelope], tolerance: MassTolerance) -> List[List[IsotopicEnvelope]]:
        """Group envelopes whose masses lie within tolerance of the lightest member of their group."""
        clusters: List[List[IsotopicEnvelope]] = []
        for envelope in sorted(envelopes, key=lambda e: (e.monoisotopic_mass, abs(e.charge))):
            if clusters and tolerance.within(envelope.monoisotopic_mass, clusters[-1][0].monoisotopic_mass):
                clusters[-1].append(envelope)
            else:
                clusters.append([envelope])
        return clusters

    def _representative(self, cluster: List[IsotopicEnvelope]) -> IsotopicEnvelope:
        by_intensity = lambda e: (e.total_intensity, -abs(e.charge))
        lowest_charge = min(abs(e.charge) for e in cluster)
        chosen = max((e for e in cluster if abs(e.charge) == lowest_charge), key=by_intensity)
        higher = [e for e in cluster if abs(e.charge) > lowest_charge]
        if higher:
            challenger = max(higher, key=by_intensity)
            if challenger.total_intensity > self.parameters.charge_dominance_ratio * chosen.total_intensity:
                chosen = challenger
        return chosen


def deconvolve(
        spectrum: MzSpectrum,
        isolation_range: Optional[Tuple[float, float]],
        min_charge: int,
        max_charge: int,
        ppm_tolerance: float,
        min_intensity_ratio: float,
        **parameters,
        ) -> List[IsotopicEnvelope]:
    """
    Functional entry point: deconvolve spectrum with explicit core settings.

    Extra keyword arguments are forwarded to DeconvolutionParameters.
    """
    validate_charge_range(min_charge, max_charge)
    params = DeconvolutionParameters(
        min_charge=min_charge,
        max_charge=max_charge,
        tolerance_ppm=ppm_tolerance,
        min_intensity_ratio=min_intensity_ratio,
        **parameters,
    )
    return DeconvolutionEngine(params).deconvolve(spectrum, isolation_range)

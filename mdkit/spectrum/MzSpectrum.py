from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .Peak import Peak
from ..errors import InvalidInputError
from ..mass.Tolerance import MassTolerance


class MzSpectrum:
    """
    Immutable centroided spectrum, sorted by strictly increasing m/z.

    Peaks sharing an m/z value are merged at construction by summing their
    intensities. The underlying numpy arrays are flagged read-only.
    """

    def __init__(self, mz: Sequence[float], intensities: Sequence[float]):
        mz_arr = np.array(mz, dtype=np.float64).ravel()
        int_arr = np.array(intensities, dtype=np.float64).ravel()

        if mz_arr.shape != int_arr.shape:
            raise InvalidInputError(
                f"m/z and intensity arrays differ in length: {mz_arr.size} != {int_arr.size}"
            )
        if np.isnan(mz_arr).any() or np.isnan(int_arr).any():
            raise InvalidInputError("Spectrum arrays must not contain NaN")
        if not np.isfinite(mz_arr).all():
            raise InvalidInputError("m/z values must be finite")
        if (int_arr < 0).any():
            raise InvalidInputError("Peak intensities must be non-negative")

        order = np.argsort(mz_arr, kind="stable")
        mz_arr = mz_arr[order]
        int_arr = int_arr[order]

        if mz_arr.size > 1 and (np.diff(mz_arr) == 0).any():
            mz_arr, inverse = np.unique(mz_arr, return_inverse=True)
            int_arr = np.bincount(inverse, weights=int_arr, minlength=mz_arr.size)

        self._set_arrays(mz_arr, int_arr)

    def _set_arrays(self, mz_arr: np.ndarray, int_arr: np.ndarray):
        mz_arr.flags.writeable = False
        int_arr.flags.writeable = False
        self._mz = mz_arr
        self._intensities = int_arr

    @classmethod
    def _from_sorted(cls, mz_arr: np.ndarray, int_arr: np.ndarray) -> "MzSpectrum":
        spectrum = cls.__new__(cls)
        spectrum._set_arrays(np.array(mz_arr, dtype=np.float64), np.array(int_arr, dtype=np.float64))
        return spectrum

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[float, float]]) -> "MzSpectrum":
        """Build a spectrum from (m/z, intensity) pairs."""
        pairs = list(pairs)
        for pair in pairs:
            if len(pair) != 2:
                raise InvalidInputError(f"Expected (m/z, intensity) pair, got {pair!r}")
        return cls([p[0] for p in pairs], [p[1] for p in pairs])

    @classmethod
    def from_peaks(cls, peaks: Iterable[Peak]) -> "MzSpectrum":
        return cls.from_pairs((p.mz, p.intensity) for p in peaks)

    @staticmethod
    def empty() -> "MzSpectrum":
        return MzSpectrum([], [])

    # -------------------------------------------------------------------------
    # Basic access
    @property
    def mz(self) -> np.ndarray:
        return self._mz

    @property
    def intensities(self) -> np.ndarray:
        return self._intensities

    @property
    def size(self) -> int:
        return int(self._mz.size)

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[Peak]:
        for mz, intensity in zip(self._mz, self._intensities):
            yield Peak(float(mz), float(intensity))

    def __getitem__(self, index: int) -> Peak:
        return Peak(float(self._mz[index]), float(self._intensities[index]))

    @property
    def peaks(self) -> List[Peak]:
        return list(self)

    @property
    def first_mz(self) -> Optional[float]:
        return float(self._mz[0]) if self.size else None

    @property
    def last_mz(self) -> Optional[float]:
        return float(self._mz[-1]) if self.size else None

    @property
    def mz_range(self) -> Optional[Tuple[float, float]]:
        if self.size == 0:
            return None
        return self.first_mz, self.last_mz

    @property
    def sum_of_intensities(self) -> float:
        return float(self._intensities.sum())

    total_intensity = sum_of_intensities

    @property
    def most_intense_peak(self) -> Optional[Peak]:
        if self.size == 0:
            return None
        return self[int(np.argmax(self._intensities))]

    # -------------------------------------------------------------------------
    # Range queries
    def _bounds(self, mz_low: float, mz_high: float) -> Tuple[int, int]:
        start = int(np.searchsorted(self._mz, mz_low, side="left"))
        end = int(np.searchsorted(self._mz, mz_high, side="right"))
        return start, max(start, end)

    def extract(self, mz_low: float, mz_high: float) -> "MzSpectrum":
        """Return a new spectrum holding the peaks in [mz_low, mz_high]."""
        start, end = self._bounds(mz_low, mz_high)
        return MzSpectrum._from_sorted(self._mz[start:end], self._intensities[start:end])

    def num_peaks_within_range(self, mz_low: float, mz_high: float) -> int:
        start, end = self._bounds(mz_low, mz_high)
        return end - start

    def closest_peak_index(self, target_mz: float) -> Optional[int]:
        """Index of the peak closest to target_mz; ties go to the lower m/z."""
        if self.size == 0:
            return None
        index = int(np.searchsorted(self._mz, target_mz, side="left"))
        if index == 0:
            return 0
        if index == self.size:
            return self.size - 1
        before = target_mz - self._mz[index - 1]
        after = self._mz[index] - target_mz
        return index - 1 if before <= after else index

    def find_nearest(self, target_mz: float, tolerance: MassTolerance) -> Optional[Peak]:
        """
        Return the peak closest to target_mz among those inside
        tolerance.range(target_mz), or None when there is none.
        """
        low, high = tolerance.range(target_mz)
        start, end = self._bounds(min(low, high), max(low, high))
        if start == end:
            return None
        window = np.abs(self._mz[start:end] - target_mz)
        return self[start + int(np.argmin(window))]

    # -------------------------------------------------------------------------
    # Filters
    def filter_by_intensity(self, min_intensity: float = 0.0, max_intensity: float = float("inf")) -> "MzSpectrum":
        mask = (self._intensities >= min_intensity) & (self._intensities <= max_intensity)
        return MzSpectrum._from_sorted(self._mz[mask], self._intensities[mask])

    def filter_by_number_of_most_intense(self, top_n: int) -> "MzSpectrum":
        """Keep the top_n most intense peaks; peaks tied at the cutoff are all kept."""
        if top_n <= 0:
            return MzSpectrum.empty()
        if top_n >= self.size:
            return self
        cutoff = np.sort(self._intensities)[::-1][top_n - 1]
        return self.filter_by_intensity(min_intensity=cutoff)

    # -------------------------------------------------------------------------
    def __eq__(self, other) -> bool:
        if not isinstance(other, MzSpectrum):
            return False
        return np.array_equal(self._mz, other._mz) and np.array_equal(self._intensities, other._intensities)

    def __hash__(self):
        return hash((self._mz.tobytes(), self._intensities.tobytes()))

    def __repr__(self) -> str:
        if self.size == 0:
            return "MzSpectrum(size=0)"
        return f"MzSpectrum(size={self.size}, range=[{self.first_mz:.4f}, {self.last_mz:.4f}])"

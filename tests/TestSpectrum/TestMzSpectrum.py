import unittest

import numpy as np

from mdkit.errors import InvalidInputError
from mdkit.mass.Tolerance import DaTolerance, PpmTolerance
from mdkit.spectrum.MzSpectrum import MzSpectrum
from mdkit.spectrum.Peak import Peak


class TestMzSpectrumConstruction(unittest.TestCase):
    def test_sorted_on_construction(self):
        spectrum = MzSpectrum([300.0, 100.0, 200.0], [3.0, 1.0, 2.0])
        self.assertEqual(list(spectrum.mz), [100.0, 200.0, 300.0])
        self.assertEqual(list(spectrum.intensities), [1.0, 2.0, 3.0])

    def test_duplicates_are_merged(self):
        spectrum = MzSpectrum([100.0, 200.0, 100.0], [1.0, 2.0, 4.0])
        self.assertEqual(spectrum.size, 2)
        self.assertEqual(spectrum[0], Peak(100.0, 5.0))
        self.assertTrue((np.diff(spectrum.mz) > 0).all())

    def test_from_pairs(self):
        spectrum = MzSpectrum.from_pairs([(200.0, 2.0), (100.0, 1.0)])
        self.assertEqual(spectrum.peaks, [Peak(100.0, 1.0), Peak(200.0, 2.0)])
        self.assertEqual(MzSpectrum.from_peaks(spectrum.peaks), spectrum)

    def test_length_mismatch_raises(self):
        with self.assertRaises(InvalidInputError):
            MzSpectrum([100.0, 200.0], [1.0])

    def test_nan_raises(self):
        with self.assertRaises(InvalidInputError):
            MzSpectrum([100.0, float("nan")], [1.0, 2.0])
        with self.assertRaises(InvalidInputError):
            MzSpectrum([100.0, 200.0], [1.0, float("nan")])

    def test_negative_intensity_raises(self):
        with self.assertRaises(InvalidInputError):
            MzSpectrum([100.0, 200.0], [1.0, -2.0])

    def test_bad_pair_raises(self):
        with self.assertRaises(InvalidInputError):
            MzSpectrum.from_pairs([(100.0, 1.0, 5.0)])

    def test_arrays_are_read_only(self):
        spectrum = MzSpectrum([100.0, 200.0], [1.0, 2.0])
        with self.assertRaises(ValueError):
            spectrum.mz[0] = 5.0

    def test_input_is_copied(self):
        mz = np.array([100.0, 200.0])
        spectrum = MzSpectrum(mz, [1.0, 2.0])
        mz[0] = 150.0
        self.assertEqual(spectrum.first_mz, 100.0)

    def test_empty(self):
        spectrum = MzSpectrum.empty()
        self.assertEqual(len(spectrum), 0)
        self.assertIsNone(spectrum.mz_range)
        self.assertIsNone(spectrum.most_intense_peak)
        self.assertEqual(spectrum.sum_of_intensities, 0.0)


class TestMzSpectrumQueries(unittest.TestCase):
    def setUp(self):
        self.spectrum = MzSpectrum(
            [100.0, 100.5, 101.0, 150.0, 200.0],
            [10.0, 5.0, 20.0, 1.0, 7.0],
        )

    def test_summary_properties(self):
        self.assertEqual(self.spectrum.size, 5)
        self.assertEqual(self.spectrum.mz_range, (100.0, 200.0))
        self.assertEqual(self.spectrum.sum_of_intensities, 43.0)
        self.assertEqual(self.spectrum.total_intensity, 43.0)
        self.assertEqual(self.spectrum.most_intense_peak, Peak(101.0, 20.0))

    def test_extract_is_inclusive(self):
        extracted = self.spectrum.extract(100.5, 150.0)
        self.assertEqual(list(extracted.mz), [100.5, 101.0, 150.0])
        self.assertEqual(self.spectrum.num_peaks_within_range(100.5, 150.0), 3)

    def test_extract_empty_range(self):
        self.assertEqual(self.spectrum.extract(160.0, 190.0).size, 0)
        self.assertEqual(self.spectrum.extract(500.0, 600.0).size, 0)
        self.assertEqual(self.spectrum.extract(150.0, 120.0).size, 0)

    def test_extract_does_not_modify_source(self):
        self.spectrum.extract(100.0, 101.0)
        self.assertEqual(self.spectrum.size, 5)

    def test_find_nearest(self):
        peak = self.spectrum.find_nearest(100.98, DaTolerance(0.05))
        self.assertEqual(peak, Peak(101.0, 20.0))

    def test_find_nearest_picks_closest_inside_tolerance(self):
        peak = self.spectrum.find_nearest(100.7, DaTolerance(0.5))
        self.assertEqual(peak.mz, 100.5)

    def test_find_nearest_not_found(self):
        self.assertIsNone(self.spectrum.find_nearest(125.0, PpmTolerance(10)))
        self.assertIsNone(MzSpectrum.empty().find_nearest(125.0, PpmTolerance(10)))

    def test_find_nearest_tie_goes_to_lower_mz(self):
        peak = self.spectrum.find_nearest(100.25, DaTolerance(0.3))
        self.assertEqual(peak.mz, 100.0)

    def test_closest_peak_index(self):
        self.assertEqual(self.spectrum.closest_peak_index(0.0), 0)
        self.assertEqual(self.spectrum.closest_peak_index(1000.0), 4)
        self.assertEqual(self.spectrum.closest_peak_index(149.0), 3)
        self.assertIsNone(MzSpectrum.empty().closest_peak_index(1.0))

    def test_filter_by_intensity(self):
        filtered = self.spectrum.filter_by_intensity(min_intensity=7.0)
        self.assertEqual(list(filtered.mz), [100.0, 101.0, 200.0])

    def test_filter_by_number_of_most_intense(self):
        top = self.spectrum.filter_by_number_of_most_intense(2)
        self.assertEqual(list(top.mz), [100.0, 101.0])
        self.assertEqual(self.spectrum.filter_by_number_of_most_intense(0).size, 0)
        self.assertEqual(self.spectrum.filter_by_number_of_most_intense(10), self.spectrum)

    def test_iteration_yields_peaks(self):
        self.assertEqual([p.mz for p in self.spectrum], list(self.spectrum.mz))


if __name__ == "__main__":
    unittest.main()

import unittest

from mdkit.errors import ToleranceFormatError
from mdkit.mass.Tolerance import *


class TestDaTolerance(unittest.TestCase):
    def test_unit(self):
        tol = DaTolerance(0.01)
        self.assertEqual(tol.unit, "Absolute")
        self.assertIs(AbsoluteTolerance, DaTolerance)

    def test_error(self):
        tol = DaTolerance(0.01)
        self.assertAlmostEqual(tol.error(100.005, 100.000), 0.005, places=12)

    def test_range(self):
        tol = DaTolerance(1)
        self.assertEqual(tol.range(5), (4, 6))
        self.assertEqual(tol.min_value(1), 0)
        self.assertEqual(tol.max_value(1), 2)

    def test_within_true(self):
        tol = DaTolerance(0.01)
        self.assertTrue(tol.within(100.009, 100.000))

    def test_within_false(self):
        tol = DaTolerance(0.01)
        self.assertFalse(tol.within(100.011, 100.000))

    def test_within_is_symmetric_and_inclusive(self):
        tol = AbsoluteTolerance(4)
        self.assertTrue(tol.within(3.9, 0))
        self.assertTrue(tol.within(4, 0))
        self.assertFalse(tol.within(4.1, 0))
        self.assertTrue(tol.within(0, 3.9))
        self.assertTrue(tol.within(0, 4))
        self.assertFalse(tol.within(0, 4.1))

    def test_ops(self):
        tol = DaTolerance(0.01)
        self.assertIsInstance(tol + 0.01, DaTolerance)
        self.assertAlmostEqual((tol + 0.01).tolerance, 0.02, places=12)
        self.assertAlmostEqual((tol - 0.005).tolerance, 0.005, places=12)
        self.assertAlmostEqual((tol * 2).tolerance, 0.02, places=12)
        self.assertAlmostEqual((tol / 2).tolerance, 0.005, places=12)

    def test_str(self):
        self.assertEqual(str(AbsoluteTolerance(4)), "±4.0000 Absolute")


class TestPpmTolerance(unittest.TestCase):
    def test_unit(self):
        tol = PpmTolerance(10.0)
        self.assertEqual(tol.unit, "PPM")

    def test_error(self):
        tol = PpmTolerance(10.0)
        # observed - theoretical = 0.001 at theoretical 100.0 -> 10 ppm
        self.assertAlmostEqual(tol.error(100.001, 100.0), 10.0, places=9)

    def test_range(self):
        low, high = PpmTolerance(1).range(1000000)
        self.assertAlmostEqual(low, 999999, places=6)
        self.assertAlmostEqual(high, 1000001, places=6)
        low, high = PpmTolerance(1).range(1e7)
        self.assertAlmostEqual(high - low, 20, places=6)

    def test_within_true(self):
        tol = PpmTolerance(10.1)
        self.assertTrue(tol.within(100.001, 100.0))
        self.assertTrue(PpmTolerance(10).within(500, 500.005))

    def test_within_false(self):
        tol = PpmTolerance(10.0)
        self.assertFalse(tol.within(100.0011, 100.0))  # 11 ppm

    def test_ops(self):
        tol = PpmTolerance(10.0)
        self.assertIsInstance(tol + 5.0, PpmTolerance)
        self.assertAlmostEqual((tol + 5.0).tolerance, 15.0, places=12)
        self.assertAlmostEqual((tol - 2.0).tolerance, 8.0, places=12)
        self.assertAlmostEqual((tol * 2).tolerance, 20.0, places=12)
        self.assertAlmostEqual((tol / 4).tolerance, 2.5, places=12)

    def test_str(self):
        self.assertEqual(str(PpmTolerance(1)), "±1.0000 PPM")


class TestWithinMatchesRange(unittest.TestCase):
    def test_value_is_always_within_itself(self):
        for tol in (DaTolerance(0.0), DaTolerance(0.5), PpmTolerance(0.0), PpmTolerance(20.0)):
            for value in (0.0, 1e-3, 1.5, 586.2143122, 14037.926829, 1e7):
                self.assertTrue(tol.within(value, value), msg=f"{tol} {value}")

    def test_within_iff_inside_range(self):
        for tol in (DaTolerance(0.02), PpmTolerance(15.0)):
            theoretical = 740.372202090153
            low, high = tol.range(theoretical)
            for observed in (low - 1e-6, low, (low + high) / 2, high, high + 1e-6):
                self.assertEqual(tol.within(observed, theoretical), low <= observed <= high)


class TestParseTolerance(unittest.TestCase):
    def test_parse_ppm(self):
        tol = parse_tolerance("10 ppm")
        self.assertIsInstance(tol, PpmTolerance)
        self.assertEqual(tol.value, 10)
        self.assertAlmostEqual(tol.max_value(1), 1 + 1e-5, places=12)
        self.assertAlmostEqual(tol.min_value(1), 1 - 1e-5, places=12)

    def test_parse_is_case_insensitive(self):
        self.assertEqual(parse_tolerance("5 PPM"), PpmTolerance(5))
        self.assertEqual(parse_tolerance("0.01 Da"), DaTolerance(0.01))
        self.assertEqual(parse_tolerance("4 Absolute"), AbsoluteTolerance(4))

    def test_round_trip_through_str(self):
        for tol in (AbsoluteTolerance(4), PpmTolerance(20)):
            self.assertEqual(parse_tolerance(str(tol)), tol)

    def test_unknown_unit_raises(self):
        with self.assertRaises(ToleranceFormatError):
            parse_tolerance("10 mDa")

    def test_non_numeric_value_raises(self):
        with self.assertRaises(ToleranceFormatError):
            parse_tolerance("ten ppm")
        with self.assertRaises(ToleranceFormatError):
            parse_tolerance("nan ppm")

    def test_missing_unit_raises(self):
        with self.assertRaises(ToleranceFormatError):
            parse_tolerance("10")

    def test_format_error_is_a_value_error(self):
        with self.assertRaises(ValueError):
            parse_tolerance("")


if __name__ == "__main__":
    unittest.main()

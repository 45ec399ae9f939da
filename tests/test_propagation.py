"""
Unit Tests for the SGP4 Propagation Adapter

Run with:
    python -m pytest tests/test_propagation.py -v
"""

import unittest
from datetime import timedelta

import numpy as np

from fakes import (
    ISS_EPOCH,
    ISS_LINE1,
    ISS_LINE2,
    ISS_NAME,
    FailingSatrec,
    NonFiniteSatrec,
    fake_elements,
)
from tracking_service.epoch import EpochResolution
from tracking_service.errors import PropagationError
from tracking_service.propagation import SGP4_ERROR_CODES, propagate_many, propagate_position
from tracking_service.tle_parser import parse_elements


class TestPropagatePosition(unittest.TestCase):
    """Single element set propagation."""

    def setUp(self):
        self.elements = parse_elements(ISS_NAME, ISS_LINE1, ISS_LINE2)

    def test_iss_at_epoch(self):
        state = propagate_position(self.elements, ISS_EPOCH)

        radius = np.linalg.norm(state.position_km)
        self.assertGreater(radius, 6378.0 + 350.0)
        self.assertLess(radius, 6378.0 + 450.0)
        self.assertAlmostEqual(state.speed_km_s, 7.66, delta=0.05)
        self.assertAlmostEqual(state.minutes_since_epoch, 0.0, places=6)
        self.assertEqual(state.time, ISS_EPOCH)

    def test_matches_sgp4_library(self):
        """The adapter passes minutes since epoch straight to sgp4."""
        instant = ISS_EPOCH + timedelta(minutes=95)
        state = propagate_position(self.elements, instant)

        error, r, v = self.elements.satrec.sgp4_tsince(95.0)
        self.assertEqual(error, 0)
        np.testing.assert_allclose(state.position_km, r, atol=1e-6)
        np.testing.assert_allclose(state.velocity_km_s, v, atol=1e-9)

    def test_modes_agree_within_year(self):
        instant = ISS_EPOCH + timedelta(hours=30)
        absolute = propagate_position(self.elements, instant, EpochResolution.ABSOLUTE)
        nearest = propagate_position(self.elements, instant, EpochResolution.NEAREST_YEAR)
        np.testing.assert_allclose(absolute.position_km, nearest.position_km, atol=1e-3)

    def test_naive_instant(self):
        naive = (ISS_EPOCH + timedelta(minutes=10)).replace(tzinfo=None)
        state = propagate_position(self.elements, naive)
        self.assertAlmostEqual(state.minutes_since_epoch, 10.0, places=6)

    def test_decayed_satellite(self):
        for code in (5, 6):
            with self.subTest(code=code):
                elements = fake_elements("DECAYED", satrec=FailingSatrec(code))
                with self.assertRaises(PropagationError) as ctx:
                    propagate_position(elements, elements.epoch)
                self.assertEqual(ctx.exception.code, code)
                self.assertIn(SGP4_ERROR_CODES[code], str(ctx.exception))

    def test_unknown_error_code(self):
        elements = fake_elements("ODD", satrec=FailingSatrec(42))
        with self.assertRaises(PropagationError) as ctx:
            propagate_position(elements, elements.epoch)
        self.assertIn("Unknown error code 42", str(ctx.exception))

    def test_non_finite_result(self):
        elements = fake_elements("NAN", satrec=NonFiniteSatrec())
        with self.assertRaises(PropagationError) as ctx:
            propagate_position(elements, elements.epoch)
        self.assertIsNone(ctx.exception.code)


class TestPropagateMany(unittest.TestCase):
    """Batch propagation isolates failures."""

    def test_failure_does_not_affect_others(self):
        iss = parse_elements(ISS_NAME, ISS_LINE1, ISS_LINE2)
        decayed = fake_elements("DECAYED", epoch=ISS_EPOCH, satrec=FailingSatrec(6))

        with self.assertLogs("tracking_service.propagation", level="WARNING"):
            results = propagate_many([decayed, iss], ISS_EPOCH + timedelta(minutes=5))

        self.assertEqual([r.name for r in results], ["DECAYED", ISS_NAME])
        self.assertFalse(results[0].ok)
        self.assertIsInstance(results[0].error, PropagationError)
        self.assertTrue(results[1].ok)
        self.assertAlmostEqual(results[1].value.minutes_since_epoch, 5.0, places=6)


if __name__ == "__main__":
    unittest.main()

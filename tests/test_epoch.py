"""
Unit Tests for TLE Epoch Handling

Run with:
    python -m pytest tests/test_epoch.py -v
"""

import unittest
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from tracking_service.epoch import (
    EpochResolution,
    decode_epoch_field,
    ensure_utc,
    epoch_age_days,
    minutes_since_epoch,
    nearest_year_epoch,
    year_day_to_datetime,
)
from tracking_service.errors import ParseError


def elements_at(year, day_of_year):
    return SimpleNamespace(
        name="TEST",
        epoch=year_day_to_datetime(year, day_of_year),
        epoch_day_of_year=day_of_year,
    )


class TestEpochDecoding(unittest.TestCase):
    """Two-digit year pivot and day-of-year conversion."""

    def test_pivot_years(self):
        """Years below 57 are 2000s, 57 and above are 1900s."""
        self.assertEqual(decode_epoch_field("24001.5"), (2024, 1.5))
        self.assertEqual(decode_epoch_field("57001.5"), (1957, 1.5))
        self.assertEqual(decode_epoch_field("56364.0"), (2056, 364.0))

    def test_padded_field(self):
        """The raw fixed-width field decodes with surrounding spaces."""
        year, day = decode_epoch_field("23259.57580000")
        self.assertEqual(year, 2023)
        self.assertAlmostEqual(day, 259.5758, places=8)

    def test_day_one_is_new_year(self):
        """Day-of-year 1.0 is midnight on January 1."""
        self.assertEqual(
            year_day_to_datetime(2024, 1.0),
            datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc),
        )

    def test_fractional_day(self):
        self.assertEqual(
            year_day_to_datetime(2024, 1.5),
            datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
        )
        # 2024 is a leap year: day 60 is February 29
        self.assertEqual(
            year_day_to_datetime(2024, 60.25),
            datetime(2024, 2, 29, 6, 0, 0, tzinfo=timezone.utc),
        )

    def test_invalid_fields(self):
        for field in ("ABCDE.FGHIJKLM", "", "24000.5", "24400.0", "-1001.0"):
            with self.assertRaises(ParseError, msg=field):
                decode_epoch_field(field)


class TestEpochResolution(unittest.TestCase):
    """Absolute and nearest-year minutes since epoch."""

    def test_modes_agree_within_epoch_year(self):
        """Both policies give the same value in the element set's own year."""
        elements = elements_at(2023, 259.5758)
        instant = datetime(2023, 10, 1, 6, 30, tzinfo=timezone.utc)

        absolute = minutes_since_epoch(elements, instant, EpochResolution.ABSOLUTE)
        nearest = minutes_since_epoch(elements, instant, EpochResolution.NEAREST_YEAR)

        self.assertAlmostEqual(absolute, nearest, places=6)
        expected = (instant - elements.epoch).total_seconds() / 60.0
        self.assertAlmostEqual(absolute, expected, places=6)

    def test_absolute_at_epoch_is_zero(self):
        elements = elements_at(2023, 259.5758)
        self.assertAlmostEqual(minutes_since_epoch(elements, elements.epoch), 0.0)

    def test_nearest_year_after_rollover(self):
        """Shortly after New Year the previous year's anchoring is closest."""
        elements = elements_at(2023, 365.5)
        instant = datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc)

        self.assertEqual(nearest_year_epoch(365.5, instant),
                         datetime(2023, 12, 31, 12, 0, tzinfo=timezone.utc))
        self.assertAlmostEqual(
            minutes_since_epoch(elements, instant, EpochResolution.NEAREST_YEAR), 720.0
        )

    def test_nearest_year_before_rollover(self):
        """Shortly before New Year the next year's anchoring is closest."""
        instant = datetime(2023, 12, 31, 12, 0, tzinfo=timezone.utc)
        elements = elements_at(2023, 1.5)

        self.assertEqual(nearest_year_epoch(1.5, instant),
                         datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))
        self.assertAlmostEqual(
            minutes_since_epoch(elements, instant, EpochResolution.NEAREST_YEAR), -1440.0
        )
        # The absolute epoch is almost a year back
        self.assertGreater(
            minutes_since_epoch(elements, instant, EpochResolution.ABSOLUTE), 500000.0
        )

    def test_nearest_year_ignores_stored_year(self):
        """Only the day-of-year is re-anchored; the stored year is irrelevant."""
        elements = elements_at(2019, 100.0)
        instant = datetime(2024, 4, 9, 0, 0, tzinfo=timezone.utc)  # day 100 of 2024
        self.assertAlmostEqual(
            minutes_since_epoch(elements, instant, EpochResolution.NEAREST_YEAR), 0.0
        )

    def test_naive_instants_are_utc(self):
        naive = datetime(2024, 1, 1, 12, 0)
        self.assertEqual(ensure_utc(naive), datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))

    def test_epoch_age_in_whole_days(self):
        epoch = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.assertEqual(epoch_age_days(epoch, epoch + timedelta(days=95, hours=20)), 95)
        # Age is symmetric for epochs in the future
        self.assertEqual(epoch_age_days(epoch, epoch - timedelta(days=3)), 3)


if __name__ == "__main__":
    unittest.main()

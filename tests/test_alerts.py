"""
Unit Tests for Upcoming Pass Alerts

Run with:
    python -m pytest tests/test_alerts.py -v
"""

import unittest
from datetime import timedelta

from fakes import START, fake_elements
from tracking_service.alerts import compute_alerts, minutes_until
from tracking_service.passes import Pass
from tracking_service.satellite import TrackedSatellite
from tracking_service.settings import AlertSettings


def make_pass(aos, max_elevation=40.0, duration=timedelta(minutes=8)):
    return Pass(
        aos_time=aos,
        los_time=aos + duration,
        max_elevation=max_elevation,
        max_elevation_time=aos + duration / 2,
        aos_azimuth=200.0,
        max_azimuth=270.0,
        los_azimuth=340.0,
        duration_seconds=duration.total_seconds(),
        max_range_km=900.0,
    )


def satellite_with(*passes, name="SAT"):
    return TrackedSatellite(name, fake_elements(name), list(passes))


class TestAlerts(unittest.TestCase):

    def setUp(self):
        self.now = START
        self.settings = AlertSettings(enabled=True, alert_before_pass=10,
                                      min_elevation_for_alert=20.0)

    def test_pass_within_lead_time(self):
        satellite = satellite_with(make_pass(self.now + timedelta(minutes=8)))

        alerts = compute_alerts([satellite], self.now, self.settings)

        self.assertEqual(len(alerts), 1)
        self.assertEqual(alerts[0].satellite_name, "SAT")
        self.assertEqual(alerts[0].time_until_minutes, 8)
        self.assertIs(alerts[0].satellite_pass, satellite.passes[0])

    def test_pass_beyond_lead_time(self):
        satellite = satellite_with(make_pass(self.now + timedelta(minutes=15)))
        self.assertEqual(compute_alerts([satellite], self.now, self.settings), [])

    def test_lead_time_is_inclusive(self):
        satellite = satellite_with(make_pass(self.now + timedelta(minutes=10, seconds=40)))
        alerts = compute_alerts([satellite], self.now, self.settings)
        self.assertEqual([a.time_until_minutes for a in alerts], [10])

    def test_less_than_a_minute_away(self):
        """Whole minutes are truncated, so a pass 30 s away does not alert."""
        satellite = satellite_with(make_pass(self.now + timedelta(seconds=30)))
        self.assertEqual(compute_alerts([satellite], self.now, self.settings), [])

    def test_low_pass_ignored(self):
        satellite = satellite_with(make_pass(self.now + timedelta(minutes=5), max_elevation=15.0))
        self.assertEqual(compute_alerts([satellite], self.now, self.settings), [])

    def test_only_next_pass_considered(self):
        """A high pass behind a low next pass does not alert."""
        satellite = satellite_with(
            make_pass(self.now + timedelta(minutes=3), max_elevation=12.0),
            make_pass(self.now + timedelta(minutes=9), max_elevation=60.0),
        )
        self.assertEqual(compute_alerts([satellite], self.now, self.settings), [])

    def test_started_pass_skipped(self):
        """A pass already in progress is not the next pass."""
        satellite = satellite_with(
            make_pass(self.now - timedelta(minutes=2)),
            make_pass(self.now + timedelta(minutes=6)),
        )
        alerts = compute_alerts([satellite], self.now, self.settings)
        self.assertEqual([a.time_until_minutes for a in alerts], [6])

    def test_disabled(self):
        satellite = satellite_with(make_pass(self.now + timedelta(minutes=8)))
        settings = AlertSettings(enabled=False)
        self.assertEqual(compute_alerts([satellite], self.now, settings), [])

    def test_several_satellites(self):
        satellites = [
            satellite_with(make_pass(self.now + timedelta(minutes=4)), name="A"),
            satellite_with(name="B"),
            satellite_with(make_pass(self.now + timedelta(minutes=9)), name="C"),
        ]
        alerts = compute_alerts(satellites, self.now, self.settings)
        self.assertEqual([a.satellite_name for a in alerts], ["A", "C"])

    def test_minutes_until_truncates(self):
        self.assertEqual(minutes_until(self.now + timedelta(seconds=599), self.now), 9)
        self.assertEqual(minutes_until(self.now + timedelta(seconds=600), self.now), 10)
        self.assertEqual(minutes_until(self.now - timedelta(seconds=90), self.now), -1)


if __name__ == "__main__":
    unittest.main()

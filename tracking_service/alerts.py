"""
Upcoming Pass Alerts

Alerts are recomputed from scratch each refresh cycle: for every satellite
only the next pass (first AOS strictly after now) is considered, and it
alerts when it is high enough and starts within the lead time.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List

from tracking_service.epoch import ensure_utc
from tracking_service.passes import Pass
from tracking_service.settings import AlertSettings


@dataclass(frozen=True)
class Alert:
    satellite_name: str
    satellite_pass: Pass
    time_until_minutes: int


def minutes_until(target: datetime, now: datetime) -> int:
    """Whole minutes from now to target, truncated toward zero."""
    return int((ensure_utc(target) - ensure_utc(now)).total_seconds() / 60.0)


def compute_alerts(satellites: Iterable, now: datetime, settings: AlertSettings) -> List[Alert]:
    """
    Active alerts at now.

    Args:
        satellites: TrackedSatellite objects with predicted passes
        now: Current UTC time
        settings: enabled, min_elevation_for_alert, alert_before_pass (minutes)
    """
    if not settings.enabled:
        return []

    alerts = []
    for satellite in satellites:
        next_pass = satellite.next_pass(now)
        if next_pass is None:
            continue
        if next_pass.max_elevation < settings.min_elevation_for_alert:
            continue

        minutes = minutes_until(next_pass.aos_time, now)
        if 0 < minutes <= settings.alert_before_pass:
            alerts.append(Alert(satellite.name, next_pass, minutes))

    return alerts

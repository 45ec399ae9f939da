"""
Tracked Satellites and Live Positions

A TrackedSatellite pairs a parsed element set with its most recent pass
predictions. compute_current_position() produces the per-refresh
SatellitePosition (geodetic sub-point, speed, look angles) using
nearest-year epoch resolution.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from tracking_service.epoch import EpochResolution, ensure_utc
from tracking_service.frames import eci_to_geodetic, gmst, look_angles
from tracking_service.observer import Observer
from tracking_service.passes import Pass
from tracking_service.propagation import propagate_position
from tracking_service.radio import CommunicationWindow, DopplerShift
from tracking_service.tle_parser import OrbitalElements


@dataclass
class TrackedSatellite:
    """
    A satellite under tracking.

    elements and epoch never change; passes is replaced wholesale by each
    prediction run.
    """

    name: str
    elements: OrbitalElements
    passes: List[Pass] = field(default_factory=list)

    @classmethod
    def from_elements(cls, elements: OrbitalElements) -> "TrackedSatellite":
        return cls(name=elements.name, elements=elements)

    @property
    def epoch(self) -> datetime:
        return self.elements.epoch

    def next_pass(self, now: datetime) -> Optional[Pass]:
        """First pass whose AOS is strictly after now."""
        now = ensure_utc(now)
        for p in self.passes:
            if p.aos_time > now:
                return p
        return None


@dataclass(frozen=True)
class SatellitePosition:
    """Live tracking data for one satellite at one instant."""

    name: str
    time: datetime
    latitude: float
    longitude: float
    altitude_km: float
    velocity_km_s: float
    azimuth: float
    elevation: float
    range_km: float
    is_visible: bool
    doppler: Optional[DopplerShift] = None
    comm_window: Optional[CommunicationWindow] = None


def compute_current_position(satellite: TrackedSatellite, observer: Observer,
                             now: datetime) -> SatellitePosition:
    """
    Live position of a satellite as seen by observer.

    Raises:
        PropagationError: If the SGP4 model fails at now
    """
    now = ensure_utc(now)
    state = propagate_position(satellite.elements, now, EpochResolution.NEAREST_YEAR)

    theta = gmst(now)
    angles = look_angles(
        state.position_km * 1000.0,
        observer.to_ecef(),
        theta,
        observer.latitude,
        observer.longitude,
    )
    lat, lon, alt_km = eci_to_geodetic(state.position_km, theta)

    return SatellitePosition(
        name=satellite.name,
        time=now,
        latitude=lat,
        longitude=lon,
        altitude_km=alt_km,
        velocity_km_s=state.speed_km_s,
        azimuth=angles.azimuth,
        elevation=angles.elevation,
        range_km=angles.range_km,
        is_visible=angles.elevation > 0.0,
    )

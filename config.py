"""
Tracker Configuration and Constants

This module contains the physical constants, prediction thresholds and the
fallback element set used throughout the project.

Constants:
    WGS-84 ellipsoid parameters for observer and sub-satellite geometry.
    Linear GMST coefficients referenced to the J2000 epoch.

Fallback TLE Data:
    Hardcoded ISS TLE data for demonstrations when no element file is given.

    IMPORTANT: element sets older than STALE_ERROR_DAYS are refused by the
    pass predictor, so the fallback is only useful for live-position demos
    unless it is refreshed.

    Sources for updated TLEs:
    - Space-Track.org (requires free registration)
    - CelesTrak.org (public access)
"""

from datetime import datetime, timezone
from typing import Dict, Any

# WGS-84 ellipsoid
WGS84_A_M: float = 6378137.0  # Semi-major axis (m)
WGS84_A_KM: float = WGS84_A_M / 1000.0
WGS84_F: float = 1.0 / 298.257223563  # Flattening
WGS84_E2: float = WGS84_F * (2.0 - WGS84_F)  # First eccentricity squared

# Sidereal time (linear model, no higher-order secular terms)
J2000_EPOCH: datetime = datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
GMST_HOURS_AT_J2000: float = 18.697374558
GMST_HOURS_PER_DAY: float = 24.06570982441908

# Radio
SPEED_OF_LIGHT_M_S: float = 299792458.0

# Two-digit epoch years at or above the pivot belong to the 1900s
EPOCH_PIVOT_YEAR: int = 57

# Element set age policy (whole days)
STALE_WARNING_DAYS: int = 30
STALE_ERROR_DAYS: int = 90

# Geodetic latitude iterations (fixed budget, not convergence checked)
GEODETIC_ITERATIONS: int = 5

# Fallback ISS TLE for demonstrations
FALLBACK_ISS_TLE: Dict[str, Any] = {
    'name': 'ISS (ZARYA)',
    'norad_id': 25544,
    'line1': '1 25544U 98067A   25230.51041667  .00002182  00000-0  13103-3 0  9991',
    'line2': '2 25544  51.6416  45.1234 0002329  75.6910 284.4861 15.50000000123456',
}

"""
Reference Frame Transforms

Sidereal time and the transforms between the inertial frame used by SGP4,
the Earth-fixed frame, topocentric look angles and geodetic coordinates.

Precision note: GMST is the linear J2000 model without higher-order secular
terms, precession or nutation. The resulting Earth-fixed positions are good
to well under a degree of look angle, which is enough for pass prediction
and antenna pointing but not for precise orbit work.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Tuple

import numpy as np

from config import (
    GEODETIC_ITERATIONS,
    GMST_HOURS_AT_J2000,
    GMST_HOURS_PER_DAY,
    J2000_EPOCH,
    WGS84_A_KM,
    WGS84_E2,
)
from tracking_service.epoch import ensure_utc


@dataclass(frozen=True)
class LookAngles:
    """Observer-relative pointing to a target."""

    azimuth: float    # degrees, [0, 360)
    elevation: float  # degrees, [-90, 90]
    range_km: float


def gmst(time: datetime) -> float:
    """
    Greenwich Mean Sidereal Time (linear model).

    Args:
        time: UTC instant

    Returns:
        GMST angle in radians, [0, 2*pi)
    """
    days_since_j2000 = (ensure_utc(time) - J2000_EPOCH).total_seconds() / 86400.0
    gmst_hours = (GMST_HOURS_AT_J2000 + GMST_HOURS_PER_DAY * days_since_j2000) % 24.0
    return math.radians(gmst_hours * 15.0)


def eci_to_ecef(r_eci: np.ndarray, gmst_rad: float) -> np.ndarray:
    """Rotate an inertial vector by -GMST about the polar axis."""
    cos_g = math.cos(gmst_rad)
    sin_g = math.sin(gmst_rad)
    x, y, z = r_eci
    return np.array([
        x * cos_g + y * sin_g,
        -x * sin_g + y * cos_g,
        z,
    ])


def normalize_azimuth(azimuth_deg: float) -> float:
    """Wrap an azimuth into [0, 360)."""
    azimuth_deg = azimuth_deg % 360.0
    # -1e-15 % 360.0 rounds to 360.0
    if azimuth_deg >= 360.0:
        azimuth_deg = 0.0
    return azimuth_deg


def ecef_to_look_angles(sat_ecef_m: np.ndarray, observer_ecef_m: np.ndarray,
                        observer_lat_deg: float, observer_lon_deg: float) -> LookAngles:
    """
    Look angles from an observer to an Earth-fixed target.

    The range vector is projected into the observer's south/east/zenith
    frame; azimuth is measured clockwise from north.

    Args:
        sat_ecef_m: Target ECEF position (meters)
        observer_ecef_m: Observer ECEF position (meters)
        observer_lat_deg: Observer geodetic latitude (degrees)
        observer_lon_deg: Observer longitude (degrees)
    """
    rx, ry, rz = np.asarray(sat_ecef_m) - np.asarray(observer_ecef_m)
    range_m = math.sqrt(rx * rx + ry * ry + rz * rz)

    lat = math.radians(observer_lat_deg)
    lon = math.radians(observer_lon_deg)
    sin_lat, cos_lat = math.sin(lat), math.cos(lat)
    sin_lon, cos_lon = math.sin(lon), math.cos(lon)

    south = sin_lat * cos_lon * rx + sin_lat * sin_lon * ry - cos_lat * rz
    east = -sin_lon * rx + cos_lon * ry
    zenith = cos_lat * cos_lon * rx + cos_lat * sin_lon * ry + sin_lat * rz

    azimuth = normalize_azimuth(math.degrees(math.atan2(east, -south)))

    if range_m == 0.0:
        elevation = 90.0
    else:
        elevation = math.degrees(math.asin(max(-1.0, min(1.0, zenith / range_m))))

    return LookAngles(azimuth=azimuth, elevation=elevation, range_km=range_m / 1000.0)


def look_angles(sat_eci_m: np.ndarray, observer_ecef_m: np.ndarray, gmst_rad: float,
                observer_lat_deg: float, observer_lon_deg: float) -> LookAngles:
    """Look angles to an inertial target position (meters) at sidereal angle gmst_rad."""
    sat_ecef = eci_to_ecef(sat_eci_m, gmst_rad)
    return ecef_to_look_angles(sat_ecef, observer_ecef_m, observer_lat_deg, observer_lon_deg)


def eci_to_geodetic(r_eci_km: np.ndarray, gmst_rad: float) -> Tuple[float, float, float]:
    """
    Sub-satellite point of an inertial position.

    Latitude uses a fixed number of fixed-point iterations on
    N = a / sqrt(1 - e^2 sin^2(lat)); the count is bounded and not
    convergence checked.

    Args:
        r_eci_km: Inertial position (km)
        gmst_rad: Sidereal angle (radians)

    Returns:
        Tuple of (latitude_deg, longitude_deg, altitude_km)
    """
    x, y, z = eci_to_ecef(r_eci_km, gmst_rad)

    lon = math.atan2(y, x)
    p = math.sqrt(x * x + y * y)

    # Pole: latitude is exact, altitude measured along the polar axis
    if p < 1e-9:
        lat = math.copysign(math.pi / 2.0, z) if z != 0.0 else 0.0
        b = WGS84_A_KM * math.sqrt(1.0 - WGS84_E2)
        return math.degrees(lat), math.degrees(lon), abs(z) - b

    lat = math.atan2(z, p * (1.0 - WGS84_E2))
    for _ in range(GEODETIC_ITERATIONS):
        sin_lat = math.sin(lat)
        n = WGS84_A_KM / math.sqrt(1.0 - WGS84_E2 * sin_lat * sin_lat)
        h = p / math.cos(lat) - n
        lat = math.atan2(z, p * (1.0 - WGS84_E2 * n / (n + h)))

    sin_lat = math.sin(lat)
    n = WGS84_A_KM / math.sqrt(1.0 - WGS84_E2 * sin_lat * sin_lat)
    alt = p / math.cos(lat) - n

    return math.degrees(lat), math.degrees(lon), alt

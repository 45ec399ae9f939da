"""
Ground Observer Geometry

Fixed ground station location and its conversion from geodetic coordinates
to Earth-fixed Cartesian coordinates on the WGS-84 ellipsoid.
"""

import math
from dataclasses import dataclass

import numpy as np

from config import WGS84_A_M, WGS84_E2


@dataclass(frozen=True)
class Observer:
    """
    Fixed ground observer.

    Attributes:
        name: Station name
        latitude: Geodetic latitude (degrees, north positive)
        longitude: Longitude (degrees, east positive)
        altitude: Height above the ellipsoid (meters)
    """

    name: str
    latitude: float
    longitude: float
    altitude: float = 0.0

    def to_ecef(self) -> np.ndarray:
        """Observer position in ECEF coordinates (meters)."""
        return to_ecef(self)


def to_ecef(observer: Observer) -> np.ndarray:
    """
    Convert observer geodetic coordinates to ECEF.

    Closed form, no iteration:
        N = a / sqrt(1 - e^2 sin^2(lat))
        x = (N + h) cos(lat) cos(lon)
        y = (N + h) cos(lat) sin(lon)
        z = (N (1 - e^2) + h) sin(lat)

    Args:
        observer: Ground observer

    Returns:
        ECEF position vector [x, y, z] in meters
    """
    lat = math.radians(observer.latitude)
    lon = math.radians(observer.longitude)
    sin_lat = math.sin(lat)
    cos_lat = math.cos(lat)

    n = WGS84_A_M / math.sqrt(1.0 - WGS84_E2 * sin_lat * sin_lat)

    return np.array([
        (n + observer.altitude) * cos_lat * math.cos(lon),
        (n + observer.altitude) * cos_lat * math.sin(lon),
        (n * (1.0 - WGS84_E2) + observer.altitude) * sin_lat,
    ])

"""
Radio Link Heuristics

Doppler shift and a qualitative communication-window assessment for one
live satellite position.

Doppler uses an approximate radial velocity of speed * cos(elevation) while
the satellite is above the horizon. This ignores the true line-of-sight
projection of the velocity vector and always reports a receding satellite,
so the sign of the shift is not meaningful; it is a display aid, not a
tuning reference.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from config import SPEED_OF_LIGHT_M_S


class SignalStrength(Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"
    NO_SIGNAL = "No Signal"


@dataclass(frozen=True)
class DopplerShift:
    downlink_frequency_mhz: float
    downlink_shift_hz: float
    downlink_observed_mhz: float
    uplink_frequency_mhz: float
    uplink_shift_hz: float
    uplink_corrected_mhz: float


@dataclass(frozen=True)
class CommunicationWindow:
    is_viable: bool
    reason: str
    signal_strength: SignalStrength
    recommended_mode: Optional[str] = None


def radial_velocity_m_s(position) -> float:
    """Approximate radial velocity (m/s); zero below the horizon."""
    if position.elevation <= 0.0:
        return 0.0
    return position.velocity_km_s * 1000.0 * math.cos(math.radians(position.elevation))


def evaluate_doppler(position, downlink_mhz: float, uplink_mhz: float) -> DopplerShift:
    """
    Doppler shift for a live position.

    Downlink is observed shifted by -(v/c) f; the uplink is pre-compensated
    by +(v/c) f.

    Args:
        position: SatellitePosition
        downlink_mhz: Satellite transmit frequency (MHz)
        uplink_mhz: Satellite receive frequency (MHz)
    """
    ratio = radial_velocity_m_s(position) / SPEED_OF_LIGHT_M_S

    downlink_shift_hz = -ratio * downlink_mhz * 1e6
    uplink_shift_hz = ratio * uplink_mhz * 1e6

    return DopplerShift(
        downlink_frequency_mhz=downlink_mhz,
        downlink_shift_hz=downlink_shift_hz,
        downlink_observed_mhz=downlink_mhz + downlink_shift_hz / 1e6,
        uplink_frequency_mhz=uplink_mhz,
        uplink_shift_hz=uplink_shift_hz,
        uplink_corrected_mhz=uplink_mhz + uplink_shift_hz / 1e6,
    )


def classify_signal(elevation: float, range_km: float) -> SignalStrength:
    if elevation >= 45.0 and range_km < 2000.0:
        return SignalStrength.EXCELLENT
    if elevation >= 30.0 and range_km < 2500.0:
        return SignalStrength.GOOD
    if elevation >= 15.0 and range_km < 3000.0:
        return SignalStrength.FAIR
    if elevation >= 5.0:
        return SignalStrength.POOR
    return SignalStrength.NO_SIGNAL


def recommended_mode(elevation: float) -> Optional[str]:
    if elevation >= 30.0:
        return "FM/SSB"
    if elevation >= 15.0:
        return "SSB"
    if elevation >= 10.0:
        return "SSB (difficult)"
    return None


def evaluate_comm_window(position) -> CommunicationWindow:
    """Qualitative link assessment from elevation and range."""
    if not position.is_visible:
        return CommunicationWindow(
            is_viable=False,
            reason="below horizon",
            signal_strength=SignalStrength.NO_SIGNAL,
        )

    elevation = position.elevation
    strength = classify_signal(elevation, position.range_km)
    viable = elevation >= 10.0 and strength is not SignalStrength.NO_SIGNAL

    if viable:
        reason = f"Good pass - El: {elevation:.1f}°, Range: {position.range_km:.0f}km"
    else:
        reason = f"Elevation too low ({elevation:.1f}°) for reliable contact"

    return CommunicationWindow(
        is_viable=viable,
        reason=reason,
        signal_strength=strength,
        recommended_mode=recommended_mode(elevation),
    )


def attach_radio(position, radio):
    """Copy of position with Doppler and link data when radio is enabled."""
    if not radio.enabled:
        return position
    return replace(
        position,
        doppler=evaluate_doppler(position, radio.downlink_frequency_mhz,
                                 radio.uplink_frequency_mhz),
        comm_window=evaluate_comm_window(position),
    )

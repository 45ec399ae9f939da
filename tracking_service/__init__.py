"""
Satellite Pass Tracking Package

This package predicts passes of orbiting objects over a fixed ground
observer and derives live tracking data (look angles, Doppler shifts and
link viability) on top of the sgp4 library.

Modules:
    tle_parser: element set parsing and catalog loading
    epoch: epoch decoding and epoch resolution policies
    propagation: SGP4 propagation adapter
    frames: sidereal time and reference frame transforms
    passes: horizon-crossing pass prediction
    radio: Doppler shift and communication window heuristics
    alerts: upcoming-pass alerts
    tracker: single-writer refresh loop and snapshots
"""

__version__ = "1.0.0"

"""
Satellite Pass Tracker Demonstration

This script drives the tracking core from the command line:
- Loads settings (observer, prediction, radio, alerts) from TOML
- Loads an element catalog, or the fallback ISS element set
- Predicts upcoming passes for every tracked satellite
- Runs a few refresh cycles and logs live positions, Doppler and alerts

Usage:
    python demo.py [--config CONFIG] [--tle-file FILE] [--cycles N] [--verbose]

Arguments:
    --config: Settings file (default: $TRACKER_CONFIG or config.toml)
    --tle-file: Element catalog, overrides satellites.tle_file
    --cycles: Number of refresh cycles to run (default: 3)
    --verbose: Enable debug logging
"""

import argparse
import logging
import sys
from pathlib import Path

from config import FALLBACK_ISS_TLE
from logging_config import configure_logging, get_logger
from tracking_service.errors import ConfigurationError, ParseError
from tracking_service.settings import Settings, default_config_path, load_settings
from tracking_service.tracker import Snapshot, Tracker

logger = get_logger(__name__)


def load_demo_settings(path) -> Settings:
    """
    Settings from path; defaults when no file was asked for and none exists.

    A relative satellites.tle_file is taken relative to the settings file.
    """
    if path is None:
        default = default_config_path()
        if not default.exists():
            logger.warning(f"No configuration file at '{default}', using defaults")
            return Settings()
        path = default
    settings = load_settings(path)

    tle_file = settings.satellites.tle_file
    if tle_file is not None and not tle_file.is_absolute():
        satellites = settings.satellites.model_copy(
            update={"tle_file": Path(path).parent / tle_file}
        )
        settings = settings.model_copy(update={"satellites": satellites})
    return settings


def load_satellites(tracker: Tracker, tle_file) -> None:
    """Load the catalog, falling back to the built-in ISS element set."""
    if tle_file is not None:
        text = Path(tle_file).read_text(encoding="utf-8")
        tracker.load_catalog(text)
        return

    logger.info(f"No TLE file configured, tracking {FALLBACK_ISS_TLE['name']}")
    tracker.load_satellite(
        FALLBACK_ISS_TLE["line1"], FALLBACK_ISS_TLE["line2"], FALLBACK_ISS_TLE["name"]
    )


def log_elements(tracker: Tracker) -> None:
    for satellite in tracker.satellites:
        s = satellite.elements.summary()
        logger.info(
            f"{s['name']} (NORAD {s['norad_id']}): epoch {s['epoch']}, "
            f"i={s['inclination_deg']:.4f}°, e={s['eccentricity']:.7f}, "
            f"n={s['mean_motion_rev_per_day']:.8f} rev/day"
        )


def log_passes(tracker: Tracker) -> None:
    for satellite in tracker.satellites:
        for p in satellite.passes:
            logger.info(
                f"{satellite.name}: AOS {p.aos_time:%Y-%m-%d %H:%M:%S} "
                f"az {p.aos_azimuth:5.1f}  "
                f"max {p.max_elevation:4.1f}° at {p.max_elevation_time:%H:%M:%S}  "
                f"LOS {p.los_time:%H:%M:%S} az {p.los_azimuth:5.1f}  "
                f"({p.duration_minutes:.1f} min)"
            )


def log_snapshot(snapshot: Snapshot) -> None:
    logger.info(f"Refresh at {snapshot.time:%Y-%m-%d %H:%M:%S} UTC")
    for pos in snapshot.positions:
        logger.info(
            f"  {pos.name}: lat {pos.latitude:7.2f} lon {pos.longitude:8.2f} "
            f"alt {pos.altitude_km:7.1f}km  az {pos.azimuth:5.1f} el {pos.elevation:5.1f} "
            f"range {pos.range_km:7.0f}km  {'VISIBLE' if pos.is_visible else ''}"
        )
        if pos.doppler is not None:
            logger.info(
                f"    downlink {pos.doppler.downlink_observed_mhz:.6f} MHz "
                f"({pos.doppler.downlink_shift_hz:+.0f} Hz), "
                f"uplink {pos.doppler.uplink_corrected_mhz:.6f} MHz"
            )
        if pos.comm_window is not None:
            logger.info(
                f"    {pos.comm_window.signal_strength.value}: {pos.comm_window.reason}"
            )
    for name, message in snapshot.failures.items():
        logger.warning(f"  {name}: no data this cycle ({message})")
    for alert in snapshot.alerts:
        logger.warning(
            f"  ALERT {alert.satellite_name} rises in {alert.time_until_minutes} min, "
            f"max elevation {alert.satellite_pass.max_elevation:.1f}°"
        )


def main(argv=None) -> int:
    """Main demonstration entry point."""
    parser = argparse.ArgumentParser(description="Satellite Pass Tracker Demonstration")
    parser.add_argument("--config", help="Settings file (TOML)")
    parser.add_argument("--tle-file", help="Element catalog, overrides satellites.tle_file")
    parser.add_argument("--cycles", type=int, default=3, help="Refresh cycles to run")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        settings = load_demo_settings(args.config)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    tracker = Tracker.from_settings(settings)

    tle_file = args.tle_file or settings.satellites.tle_file
    try:
        load_satellites(tracker, tle_file)
    except (OSError, ParseError) as e:
        logger.error(f"Could not load satellites: {e}")
        return 1

    if not tracker.satellites:
        logger.error("No valid satellites found in TLE file")
        return 1

    log_elements(tracker)
    tracker.predict()
    log_passes(tracker)

    tracker.run(cycles=args.cycles, on_refresh=log_snapshot)
    logger.info("Demonstration complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())

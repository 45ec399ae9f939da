"""
Pass Prediction

Sweeps a search window at a fixed time step and detects intervals where the
satellite's elevation stays at or above a threshold.

The sweep is a two-state machine (outside a pass / in a pass):

* outside -> in pass when elevation >= min_elevation. The first sample seeds
  AOS time and azimuth and the running maximum.
* in pass, still above threshold: a strictly higher elevation replaces the
  running maximum (earliest sample wins ties).
* in pass -> outside when elevation < min_elevation. The first sample below
  the threshold is the LOS sample and the pass is emitted.

AOS, LOS and the maximum are sample times, so all three are only as precise
as the time step. A pass still in progress when the window ends is dropped.
A propagation failure ends the sweep; passes completed before it are kept.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from config import STALE_ERROR_DAYS, STALE_WARNING_DAYS
from tracking_service.epoch import EpochResolution, epoch_age_days, ensure_utc
from tracking_service.errors import PredictionError, PropagationError, StaleElementsError
from tracking_service.frames import gmst, look_angles
from tracking_service.observer import Observer
from tracking_service.propagation import Propagator, propagate_position
from tracking_service.results import ObjectResult
from tracking_service.settings import PredictionSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pass:
    """A single pass of a satellite over the observer."""

    aos_time: datetime  # Acquisition of Signal
    los_time: datetime  # Loss of Signal
    max_elevation: float
    max_elevation_time: datetime
    aos_azimuth: float
    max_azimuth: float
    los_azimuth: float
    duration_seconds: float
    max_range_km: float  # range at maximum elevation

    @property
    def duration_minutes(self) -> float:
        return self.duration_seconds / 60.0


def check_staleness(epoch: datetime, now: datetime, name: str = "") -> int:
    """
    Apply the element age policy.

    Returns:
        Age in whole days

    Raises:
        StaleElementsError: If the age exceeds STALE_ERROR_DAYS
    """
    age = epoch_age_days(epoch, now)
    if age > STALE_WARNING_DAYS:
        logger.warning(f"TLE data for {name or 'satellite'} is {age} days old. "
                       f"Predictions may be inaccurate.")
        if age > STALE_ERROR_DAYS:
            raise StaleElementsError(age, STALE_ERROR_DAYS)
    return age


def _absolute_propagation(elements, instant):
    return propagate_position(elements, instant, EpochResolution.ABSOLUTE)


def predict_passes(elements, epoch: Optional[datetime], observer: Observer,
                   settings: PredictionSettings, now: Optional[datetime] = None,
                   propagator: Optional[Propagator] = None) -> List[Pass]:
    """
    Predict upcoming passes of one satellite.

    Args:
        elements: OrbitalElements handle
        epoch: Element set epoch; defaults to elements.epoch
        observer: Ground observer
        settings: num_passes, min_elevation, search_days, time_step
        now: Start of the search window (default: current UTC time)
        propagator: Callable (elements, instant) -> StateVector; defaults
            to SGP4 with absolute epoch resolution

    Returns:
        Passes in chronological order, at most settings.num_passes

    Raises:
        StaleElementsError: If the element set is more than STALE_ERROR_DAYS old
        PredictionError: If the search settings are unusable
    """
    if settings.time_step <= 0 or settings.num_passes < 1 or settings.search_days < 0:
        raise PredictionError(
            f"Invalid prediction settings: time_step={settings.time_step}, "
            f"num_passes={settings.num_passes}, search_days={settings.search_days}"
        )

    start = ensure_utc(now) if now is not None else datetime.now(timezone.utc)
    end = start + timedelta(days=settings.search_days)
    propagate = propagator or _absolute_propagation
    name = getattr(elements, "name", "")

    check_staleness(epoch if epoch is not None else elements.epoch, start, name)

    observer_ecef = observer.to_ecef()
    passes: List[Pass] = []

    in_pass = False
    pass_start = start
    max_elevation = 0.0
    max_elevation_time = start
    aos_azimuth = 0.0
    max_azimuth = 0.0
    max_range = 0.0

    step = 0
    current = start
    while current < end and len(passes) < settings.num_passes:
        try:
            state = propagate(elements, current)
        except PropagationError as e:
            logger.warning(f"Propagation failed at {current.isoformat()}, "
                           f"stopping pass search for {name}: {e}")
            break

        angles = look_angles(
            state.position_km * 1000.0,
            observer_ecef,
            gmst(current),
            observer.latitude,
            observer.longitude,
        )

        if angles.elevation >= settings.min_elevation:
            if not in_pass:
                in_pass = True
                pass_start = current
                aos_azimuth = angles.azimuth
                max_elevation = angles.elevation
                max_elevation_time = current
                max_azimuth = angles.azimuth
                max_range = angles.range_km
            elif angles.elevation > max_elevation:
                max_elevation = angles.elevation
                max_elevation_time = current
                max_azimuth = angles.azimuth
                max_range = angles.range_km
        elif in_pass:
            passes.append(Pass(
                aos_time=pass_start,
                los_time=current,
                max_elevation=max_elevation,
                max_elevation_time=max_elevation_time,
                aos_azimuth=aos_azimuth,
                max_azimuth=max_azimuth,
                los_azimuth=angles.azimuth,
                duration_seconds=(current - pass_start).total_seconds(),
                max_range_km=max_range,
            ))
            in_pass = False

        step += 1
        current = start + timedelta(seconds=step * settings.time_step)

    logger.debug(f"{name}: {len(passes)} passes in {step} samples")
    return passes


def predict_all(satellites: Iterable, observer: Observer, settings: PredictionSettings,
                now: Optional[datetime] = None,
                propagator: Optional[Propagator] = None) -> List[ObjectResult]:
    """
    Predict passes for every satellite, replacing each one's pass list.

    A satellite whose prediction fails gets an empty pass list; the others
    are unaffected.
    """
    now = ensure_utc(now) if now is not None else datetime.now(timezone.utc)
    results = []
    for satellite in satellites:
        result = ObjectResult.capture(
            satellite.name,
            lambda: predict_passes(satellite.elements, satellite.epoch, observer,
                                   settings, now=now, propagator=propagator),
        )
        if result.ok:
            satellite.passes = result.value
            logger.info(f"{satellite.name} - Found {len(result.value)} passes")
        else:
            satellite.passes = []
            logger.error(f"{satellite.name} - Error: {result.error}")
        results.append(result)
    return results

"""
Live Satellite Tracker

Manages the tracked satellites for one observer and runs the synchronous
refresh loop: each cycle recomputes live positions, radio data and alerts
and publishes them as one immutable Snapshot.

The tracker is the only writer. Consumers read tracker.snapshot between
cycles; a cycle builds a complete new Snapshot before swapping it in, so a
reader never sees a partially updated one. Failures for one satellite are
recorded in the snapshot and the error history and never affect the
others.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from tracking_service.alerts import Alert, compute_alerts
from tracking_service.epoch import ensure_utc
from tracking_service.observer import Observer
from tracking_service.passes import Pass, predict_all
from tracking_service.propagation import Propagator
from tracking_service.radio import attach_radio
from tracking_service.results import ObjectResult, failures, successes
from tracking_service.satellite import (
    SatellitePosition,
    TrackedSatellite,
    compute_current_position,
)
from tracking_service.settings import Settings
from tracking_service.tle_parser import TLEParser, parse_elements

logger = logging.getLogger(__name__)

MAX_ERROR_HISTORY = 100


@dataclass(frozen=True)
class Snapshot:
    """Everything one refresh cycle computed."""

    time: Optional[datetime] = None
    positions: Tuple[SatellitePosition, ...] = ()
    passes: Mapping[str, Tuple[Pass, ...]] = field(default_factory=dict)
    alerts: Tuple[Alert, ...] = ()
    failures: Mapping[str, str] = field(default_factory=dict)

    def position(self, name: str) -> Optional[SatellitePosition]:
        for p in self.positions:
            if p.name == name:
                return p
        return None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Tracker:
    """
    Single-writer tracking state for one observer.

    Args:
        observer: Ground observer
        settings: Tracker settings
        clock: UTC "now" source (default: system clock)
        propagator: Optional propagator override for pass prediction
    """

    def __init__(self, observer: Observer, settings: Settings,
                 clock: Callable[[], datetime] = _utc_now,
                 propagator: Optional[Propagator] = None):
        self.observer = observer
        self.settings = settings
        self.clock = clock
        self.propagator = propagator
        self.satellites: List[TrackedSatellite] = []
        self.error_history: Dict[str, List[dict]] = {}
        self._snapshot = Snapshot()

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "Tracker":
        return cls(settings.observer.to_observer(), settings, **kwargs)

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    def load_satellite(self, line1: str, line2: str, name: str) -> TrackedSatellite:
        """Parse and track one element set; raises ParseError."""
        satellite = TrackedSatellite.from_elements(parse_elements(name, line1, line2))
        self.satellites.append(satellite)
        return satellite

    def load_catalog(self, text: str) -> List[ObjectResult]:
        """Track every selected, well-formed element set of a catalog."""
        sat_settings = self.settings.satellites
        parser = TLEParser(sat_settings.tracked_satellites, sat_settings.max_satellites)
        results = parser.parse_catalog(text)
        self.satellites.extend(
            TrackedSatellite.from_elements(elements) for elements in successes(results)
        )
        for result in results:
            if not result.ok:
                self._log_error(result.name, str(result.error), self.clock())
        logger.info(f"Tracking {len(self.satellites)} satellites")
        return results

    def predict(self, now: Optional[datetime] = None) -> List[ObjectResult]:
        """Recompute pass predictions for all satellites."""
        now = ensure_utc(now) if now is not None else self.clock()
        logger.info(f"Predicting passes for {len(self.satellites)} satellites...")
        results = predict_all(self.satellites, self.observer, self.settings.prediction,
                              now=now, propagator=self.propagator)
        for result in results:
            if not result.ok:
                self._log_error(result.name, str(result.error), now)
        return results

    def refresh(self, now: Optional[datetime] = None) -> Snapshot:
        """Run one cycle and publish its snapshot."""
        now = ensure_utc(now) if now is not None else self.clock()

        results = []
        for satellite in self.satellites:
            result = ObjectResult.capture(
                satellite.name,
                lambda: compute_current_position(satellite, self.observer, now),
            )
            if not result.ok:
                logger.debug(f"No position for {satellite.name}: {result.error}")
                self._log_error(satellite.name, str(result.error), now)
            results.append(result)

        positions = tuple(
            attach_radio(r.value, self.settings.radio) for r in results if r.ok
        )

        snapshot = Snapshot(
            time=now,
            positions=positions,
            passes={s.name: tuple(s.passes) for s in self.satellites},
            alerts=tuple(compute_alerts(self.satellites, now, self.settings.alerts)),
            failures=failures(results),
        )
        self._snapshot = snapshot
        return snapshot

    def run(self, cycles: Optional[int] = None,
            on_refresh: Optional[Callable[[Snapshot], None]] = None,
            sleep: Callable[[float], None] = time.sleep) -> Snapshot:
        """
        Synchronous refresh loop.

        Args:
            cycles: Number of cycles to run (default: until interrupted)
            on_refresh: Called with each new snapshot
            sleep: Idle function, receives the refresh interval in seconds
        """
        interval = self.settings.display.refresh_rate / 1000.0
        count = 0
        while cycles is None or count < cycles:
            snapshot = self.refresh()
            if on_refresh is not None:
                on_refresh(snapshot)
            count += 1
            if cycles is None or count < cycles:
                sleep(interval)
        return self._snapshot

    def get_error_history(self, name: str) -> List[dict]:
        return self.error_history.get(name, [])

    def _log_error(self, name: str, message: str, timestamp: datetime) -> None:
        history = self.error_history.setdefault(name, [])
        history.append({"timestamp": timestamp.isoformat(), "error_message": message})

        # Keep only the most recent errors
        if len(history) > MAX_ERROR_HISTORY:
            del history[:-MAX_ERROR_HISTORY]

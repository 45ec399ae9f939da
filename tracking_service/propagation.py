"""
SGP4 Propagation Adapter

Resolves an element set's epoch for a requested instant, invokes the sgp4
library and turns its error codes into PropagationError. The perturbation
model itself is the sgp4 package; nothing here reimplements it.

Positions and velocities are in the TEME inertial frame, in km and km/s.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, List

import numpy as np

from tracking_service.epoch import EpochResolution, ensure_utc, minutes_since_epoch
from tracking_service.errors import PropagationError
from tracking_service.results import ObjectResult

logger = logging.getLogger(__name__)


# SGP4 error code meanings
SGP4_ERROR_CODES = {
    0: "No error",
    1: "Mean eccentricity < 0.0 or > 1.0",
    2: "Mean motion < 0.0",
    3: "Perturbed eccentricity < 0.0 or > 1.0",
    4: "Semi-latus rectum < 0.0",
    5: "Satellite has decayed",
    6: "Satellite has decayed (low altitude)",
}


@dataclass(frozen=True)
class StateVector:
    """Inertial state of a satellite at an instant."""

    time: datetime
    minutes_since_epoch: float
    position_km: np.ndarray
    velocity_km_s: np.ndarray

    @property
    def speed_km_s(self) -> float:
        return float(np.linalg.norm(self.velocity_km_s))


# (elements, instant) -> StateVector; raises PropagationError
Propagator = Callable[..., StateVector]


def propagate_position(elements, instant: datetime,
                       mode: EpochResolution = EpochResolution.ABSOLUTE) -> StateVector:
    """
    Propagate an element set to an instant.

    Args:
        elements: OrbitalElements handle
        instant: Target time (naive values are taken as UTC)
        mode: Epoch resolution policy

    Returns:
        StateVector in the inertial frame

    Raises:
        PropagationError: If the SGP4 model reports an error or returns
            non-finite values
    """
    instant = ensure_utc(instant)
    tsince = minutes_since_epoch(elements, instant, mode)

    error, position, velocity = elements.satrec.sgp4_tsince(tsince)

    if error != 0:
        message = SGP4_ERROR_CODES.get(error, f"Unknown error code {error}")
        raise PropagationError(
            f"SGP4 error {error} for {elements.name} at {instant.isoformat()}: {message}",
            code=error,
        )

    if not all(math.isfinite(c) for c in (*position, *velocity)):
        raise PropagationError(
            f"SGP4 returned non-finite state for {elements.name} at {instant.isoformat()}"
        )

    return StateVector(
        time=instant,
        minutes_since_epoch=tsince,
        position_km=np.array(position),
        velocity_km_s=np.array(velocity),
    )


def propagate_many(elements_list: Iterable, instant: datetime,
                   mode: EpochResolution = EpochResolution.NEAREST_YEAR) -> List[ObjectResult]:
    """Propagate several element sets to one instant, isolating failures."""
    results = []
    for elements in elements_list:
        result = ObjectResult.capture(
            elements.name, lambda: propagate_position(elements, instant, mode)
        )
        if not result.ok:
            logger.warning(str(result.error))
        results.append(result)
    return results

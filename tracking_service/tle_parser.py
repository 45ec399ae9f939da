"""
TLE Parser Module

Parses Two-Line Element (TLE) sets into immutable OrbitalElements handles and
loads multi-satellite catalogs with per-object error isolation.

The sgp4 library does the fixed-width field decoding and model
initialization; this module adds epoch decoding with the 1957 pivot, input
validation, and catalog filtering. Checksums are not validated.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from sgp4.api import Satrec

from tracking_service.epoch import decode_epoch_field, year_day_to_datetime
from tracking_service.errors import ParseError
from tracking_service.propagation import SGP4_ERROR_CODES
from tracking_service.results import ObjectResult

logger = logging.getLogger(__name__)

# Epoch field location on line 1 (YYDDD.DDDDDDDD)
EPOCH_FIELD = slice(18, 32)


@dataclass(frozen=True)
class OrbitalElements:
    """
    Immutable handle on a parsed element set.

    Attributes:
        name: Satellite name (title line of the three-line group)
        line1: TLE line 1 as given
        line2: TLE line 2 as given
        satrec: Initialized sgp4 record
        epoch: Absolute epoch decoded from line 1
        epoch_day_of_year: Fractional day-of-year of the epoch field
    """

    name: str
    line1: str
    line2: str
    satrec: Satrec = field(compare=False, repr=False)
    epoch: datetime
    epoch_day_of_year: float

    @property
    def norad_id(self) -> int:
        return int(self.satrec.satnum)

    def summary(self) -> Dict[str, Any]:
        """Classical elements in conventional units."""
        sat = self.satrec
        return {
            "name": self.name,
            "norad_id": self.norad_id,
            "epoch": self.epoch.isoformat(),
            "inclination_deg": math.degrees(sat.inclo),
            "raan_deg": math.degrees(sat.nodeo),
            "eccentricity": sat.ecco,
            "arg_perigee_deg": math.degrees(sat.argpo),
            "mean_anomaly_deg": math.degrees(sat.mo),
            # rad/min to rev/day
            "mean_motion_rev_per_day": sat.no_kozai * 1440.0 / (2.0 * math.pi),
            "bstar_drag": sat.bstar,
        }


def parse_elements(name: str, line1: str, line2: str) -> OrbitalElements:
    """
    Parse one element set.

    Args:
        name: Satellite name
        line1: First line of TLE
        line2: Second line of TLE

    Returns:
        OrbitalElements handle

    Raises:
        ParseError: If the lines are malformed or the model rejects them
    """
    line1 = line1.rstrip()
    line2 = line2.rstrip()

    if not line1.startswith("1") or not line2.startswith("2"):
        raise ParseError(f"{name}: TLE lines must start with '1' and '2'")
    if len(line1) < EPOCH_FIELD.stop:
        raise ParseError(f"{name}: line 1 too short ({len(line1)} characters)")

    year, day_of_year = decode_epoch_field(line1[EPOCH_FIELD])

    try:
        satrec = Satrec.twoline2rv(line1, line2)
    except (ValueError, RuntimeError) as e:
        raise ParseError(f"{name}: {e}")

    if satrec.error != 0:
        message = SGP4_ERROR_CODES.get(satrec.error, f"Unknown error code {satrec.error}")
        raise ParseError(f"{name}: SGP4 initialization failed ({message})")

    return OrbitalElements(
        name=name,
        line1=line1,
        line2=line2,
        satrec=satrec,
        epoch=year_day_to_datetime(year, day_of_year),
        epoch_day_of_year=day_of_year,
    )


class TLEParser:
    """
    Catalog loader for three-line element files.

    A satellite is kept when its name contains any of the tracked
    substrings; with no tracked names the first max_satellites groups are
    kept.
    """

    def __init__(self, tracked: Sequence[str] = (), max_satellites: Optional[int] = None):
        self.tracked = list(tracked)
        self.max_satellites = max_satellites

    def should_track(self, name: str, accepted: int) -> bool:
        if self.tracked:
            return any(t in name for t in self.tracked)
        return self.max_satellites is None or accepted < self.max_satellites

    def parse_catalog(self, text: str) -> List[ObjectResult]:
        """
        Parse a catalog of name/line1/line2 groups.

        Returns one ObjectResult per selected group. Malformed groups are
        logged and returned as failures; they never stop the rest of the
        catalog from loading.
        """
        lines = [line.rstrip("\r\n") for line in text.splitlines()]
        results: List[ObjectResult] = []
        accepted = 0

        i = 0
        while i + 2 < len(lines):
            name_line, line1, line2 = lines[i], lines[i + 1], lines[i + 2]
            if name_line.strip() and line1.startswith("1") and line2.startswith("2"):
                name = name_line.strip()
                if self.should_track(name, accepted):
                    result = ObjectResult.capture(
                        name, lambda: parse_elements(name, line1, line2)
                    )
                    if result.ok:
                        accepted += 1
                    else:
                        logger.warning(f"Failed to parse TLE for {name}: {result.error}")
                    results.append(result)
                i += 3
            else:
                i += 1

        return results


def parse_catalog(text: str, tracked: Sequence[str] = (),
                  max_satellites: Optional[int] = None) -> List[ObjectResult]:
    """Parse a catalog with a one-off TLEParser."""
    return TLEParser(tracked, max_satellites).parse_catalog(text)

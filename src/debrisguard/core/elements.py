"""Orbital element sets.

Classical elements as consumed by the propagator, with a thin adapter that
reads them out of a two-line element record through the sgp4 library.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sgp4.api import Satrec, WGS72

from debrisguard.utils.constants import (
    EARTH_MU_KM3_S2 as MU,
    EARTH_RADIUS_KM as RE,
    SECONDS_PER_DAY,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrbitalElementSet:
    """A set of classical orbital elements at a reference epoch.

    Attributes:
        inclination_deg: Orbital inclination in degrees.
        raan_deg: Right ascension of ascending node in degrees.
        eccentricity: Orbital eccentricity, in [0, 1).
        arg_perigee_deg: Argument of perigee in degrees.
        mean_anomaly_deg: Mean anomaly at epoch in degrees.
        mean_motion_rev_per_day: Mean motion in revolutions per day.
        epoch: Reference epoch (UTC).
    """

    inclination_deg: float
    raan_deg: float
    eccentricity: float
    arg_perigee_deg: float
    mean_anomaly_deg: float
    mean_motion_rev_per_day: float
    epoch: datetime

    def __post_init__(self) -> None:
        if not 0.0 <= self.eccentricity < 1.0:
            logger.error("Eccentricity out of range: %r", self.eccentricity)
            raise ValueError(
                f"Eccentricity must be in [0, 1), got {self.eccentricity!r}"
            )
        if not self.mean_motion_rev_per_day > 0.0:
            logger.error("Non-positive mean motion: %r", self.mean_motion_rev_per_day)
            raise ValueError(
                f"Mean motion must be positive, got {self.mean_motion_rev_per_day!r}"
            )

    @property
    def semi_major_axis_km(self) -> float:
        n_rad_per_sec = self.mean_motion_rev_per_day * 2 * math.pi / SECONDS_PER_DAY
        return (MU / (n_rad_per_sec ** 2)) ** (1.0 / 3.0)

    @property
    def period_min(self) -> float:
        a = self.semi_major_axis_km
        return 2 * math.pi * math.sqrt(a ** 3 / MU) / 60.0

    @property
    def apogee_altitude_km(self) -> float:
        return self.semi_major_axis_km * (1 + self.eccentricity) - RE

    @property
    def perigee_altitude_km(self) -> float:
        return self.semi_major_axis_km * (1 - self.eccentricity) - RE

    @classmethod
    def from_tle(cls, line1: str, line2: str) -> OrbitalElementSet:
        """Read the elements out of a two-line element record.

        Args:
            line1: TLE line 1 (69 characters).
            line2: TLE line 2 (69 characters).

        Returns:
            The element set at the TLE epoch.

        Raises:
            ValueError: If the TLE lines are malformed.
        """
        line1 = line1.strip()
        line2 = line2.strip()

        if len(line1) != 69 or not line1.startswith("1"):
            logger.error("Invalid TLE line 1: %r", line1)
            raise ValueError(f"Invalid TLE line 1: {line1!r}")
        if len(line2) != 69 or not line2.startswith("2"):
            logger.error("Invalid TLE line 2: %r", line2)
            raise ValueError(f"Invalid TLE line 2: {line2!r}")

        sat = Satrec.twoline2rv(line1, line2, WGS72)

        year = int(line1[18:20])
        year = year + 2000 if year < 57 else year + 1900
        day_of_year = float(line1[20:32])
        epoch = datetime(year, 1, 1, tzinfo=timezone.utc) + timedelta(
            days=day_of_year - 1
        )

        logger.debug("Read elements for NORAD %s (epoch %s)", line1[2:7].strip(), epoch.isoformat())

        return cls(
            inclination_deg=math.degrees(sat.inclo),
            raan_deg=math.degrees(sat.nodeo),
            eccentricity=sat.ecco,
            arg_perigee_deg=math.degrees(sat.argpo),
            mean_anomaly_deg=math.degrees(sat.mo),
            mean_motion_rev_per_day=sat.no_kozai * 1440 / (2 * math.pi),
            epoch=epoch,
        )

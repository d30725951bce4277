"""Swiss Ephemeris backed positions for the bodygraph activations."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

import swisseph as swe

from .interfaces import IEphemerides
from .modes import EphCalculationMode

try:
    SWISSEPH_VERSION = f"swisseph-{swe.version}"
except AttributeError:
    SWISSEPH_VERSION = "swisseph-2.10"

# Earth and South Node are derived from Sun and North Node.
BODIES: Dict[str, int] = {
    "Sun": swe.SUN,
    "NorthNode": swe.TRUE_NODE,
    "Moon": swe.MOON,
    "Mercury": swe.MERCURY,
    "Venus": swe.VENUS,
    "Mars": swe.MARS,
    "Jupiter": swe.JUPITER,
    "Saturn": swe.SATURN,
    "Uranus": swe.URANUS,
    "Neptune": swe.NEPTUNE,
    "Pluto": swe.PLUTO,
}

REQUIRED_FILES: Tuple[str, ...] = ("sepl_18.se1", "semo_18.se1")


class EphemerisUnavailable(FileNotFoundError):
    pass


class SwissEphemerides(IEphemerides):
    def __init__(self, ephe_path: str, strict: bool = True) -> None:
        if not ephe_path:
            raise ValueError("ephe_path is required")
        self.ephe_path = os.fspath(ephe_path)
        self.strict = strict
        if os.path.isdir(self.ephe_path):
            swe.set_ephe_path(self.ephe_path)

    @classmethod
    def moshier_only(cls) -> "SwissEphemerides":
        """Provider that never touches data files."""
        inst = cls.__new__(cls)
        inst.ephe_path = ""
        inst.strict = False
        return inst

    def missing_files(self) -> Tuple[str, ...]:
        if not self.ephe_path:
            return REQUIRED_FILES
        return tuple(
            f for f in REQUIRED_FILES if not os.path.isfile(os.path.join(self.ephe_path, f))
        )

    def _flag(self, mode: Optional[EphCalculationMode]) -> int:
        if mode is None or mode is EphCalculationMode.MOSHIER:
            return swe.FLG_MOSEPH | swe.FLG_SPEED
        missing = self.missing_files()
        if missing:
            raise EphemerisUnavailable(
                f"ephemeris files missing in {self.ephe_path or '<none>'}: {', '.join(missing)}"
            )
        return swe.FLG_SWIEPH | swe.FLG_SPEED

    def julian_day(self, point_in_time: datetime) -> float:
        if point_in_time.tzinfo is None:
            point_in_time = point_in_time.replace(tzinfo=timezone.utc)
        dt = point_in_time.astimezone(timezone.utc)
        hour = dt.hour + dt.minute / 60 + dt.second / 3600 + dt.microsecond / 3_600_000_000
        return swe.julday(dt.year, dt.month, dt.day, hour, swe.GREG_CAL)

    def sun_longitude(self, jd_ut: float, mode: Optional[EphCalculationMode] = None) -> float:
        values, _ = swe.calc_ut(jd_ut, swe.SUN, self._flag(mode))
        return values[0] % 360.0

    def longitudes(self, jd_ut: float, mode: Optional[EphCalculationMode] = None) -> Dict[str, float]:
        flag = self._flag(mode)
        out: Dict[str, float] = {}
        for name, code in BODIES.items():
            values, retflag = swe.calc_ut(jd_ut, code, flag)
            # swisseph silently drops to Moshier when it cannot read the files
            if self.strict and code == swe.SUN and flag & swe.FLG_SWIEPH and not retflag & swe.FLG_SWIEPH:
                raise EphemerisUnavailable(f"swiss ephemeris fell back to moshier for {name}")
            out[name] = values[0] % 360.0
        out["Earth"] = (out["Sun"] + 180.0) % 360.0
        out["SouthNode"] = (out["NorthNode"] + 180.0) % 360.0
        return out

"""Human Design chart computed from two sets of planetary activations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple

from . import mandala
from .interfaces import IEphemerides, IHumanDesignChart
from .modes import EphCalculationMode

DESIGN_ARC = 88.0
MEAN_SOLAR_MOTION = 360.0 / 365.2422


class ChartType(Enum):
    MANIFESTOR = "manifestor"
    GENERATOR = "generator"
    MANIFESTING_GENERATOR = "manifesting_generator"
    PROJECTOR = "projector"
    REFLECTOR = "reflector"


class Authority(Enum):
    EMOTIONAL = "emotional"
    SACRAL = "sacral"
    SPLENIC = "splenic"
    EGO_MANIFESTED = "ego_manifested"
    EGO_PROJECTED = "ego_projected"
    SELF_PROJECTED = "self_projected"
    MENTAL = "mental"
    LUNAR = "lunar"


class Definition(Enum):
    NONE = 0
    SINGLE = 1
    SPLIT = 2
    TRIPLE_SPLIT = 3
    QUADRUPLE_SPLIT = 4


@dataclass(frozen=True)
class Activation:
    body: str
    longitude: float
    gate: int
    line: int


def _activations(longitudes: Dict[str, float]) -> List[Activation]:
    out = []
    for body, lon in longitudes.items():
        gate, line = mandala.gate_and_line(lon)
        out.append(Activation(body=body, longitude=round(lon, 6), gate=gate, line=line))
    return out


class HumanDesignChart(IHumanDesignChart):
    def __init__(
        self,
        point_in_time: datetime,
        ephemerides: IEphemerides,
        mode: EphCalculationMode,
    ) -> None:
        if ephemerides is None:
            raise ValueError("an ephemerides provider is required")
        if not isinstance(mode, EphCalculationMode):
            raise TypeError(f"unsupported calculation mode: {mode!r}")
        self.point_in_time = point_in_time
        self.mode = mode
        jd = ephemerides.julian_day(point_in_time)
        self._compute(jd, ephemerides)

    @classmethod
    def from_julian_day(
        cls,
        jd_ut: float,
        ephemerides: IEphemerides,
        mode: EphCalculationMode,
    ) -> "HumanDesignChart":
        if jd_ut <= 0:
            raise ValueError(f"julian day out of range: {jd_ut}")
        inst = cls.__new__(cls)
        inst.point_in_time = None
        inst.mode = mode
        inst._compute(jd_ut, ephemerides)
        return inst

    def _compute(self, jd_ut: float, eph: IEphemerides) -> None:
        self.julian_day = jd_ut
        personality = eph.longitudes(jd_ut, self.mode)
        self.design_julian_day = self._design_jd(jd_ut, personality["Sun"], eph)
        design = eph.longitudes(self.design_julian_day, self.mode)

        self.personality = _activations(personality)
        self.design = _activations(design)

        gates = frozenset(a.gate for a in self.personality + self.design)
        self.active_gates: FrozenSet[int] = gates
        self.active_channels: List[Tuple[int, int]] = mandala.active_channels(gates)
        self._links = mandala.center_links(self.active_channels)
        centers = [c for c in mandala.CENTER_GATES if c in self._links]
        self._defined: Tuple[str, ...] = tuple(centers)

    def _design_jd(self, jd_ut: float, birth_sun: float, eph: IEphemerides) -> float:
        target = (birth_sun - DESIGN_ARC) % 360.0
        jd = jd_ut - DESIGN_ARC / MEAN_SOLAR_MOTION
        for _ in range(12):
            sun = self._sun(jd, eph)
            diff = (target - sun + 540.0) % 360.0 - 180.0
            if abs(diff) < 1e-7:
                break
            jd += diff / MEAN_SOLAR_MOTION
        return jd

    def _sun(self, jd: float, eph: IEphemerides) -> float:
        sun_only = getattr(eph, "sun_longitude", None)
        if sun_only is not None:
            return sun_only(jd, self.mode)
        return eph.longitudes(jd, self.mode)["Sun"]

    # Derived chart properties -------------------------------------------

    @property
    def defined_centers(self) -> Tuple[str, ...]:
        return self._defined

    @property
    def undefined_centers(self) -> Tuple[str, ...]:
        return tuple(c for c in mandala.CENTER_GATES if c not in self._defined)

    def _motor_to_throat(self) -> bool:
        return mandala.connected(self._links, "THROAT", mandala.MOTORS)

    @property
    def chart_type(self) -> ChartType:
        if not self._defined:
            return ChartType.REFLECTOR
        if "SACRAL" in self._defined:
            if self._motor_to_throat():
                return ChartType.MANIFESTING_GENERATOR
            return ChartType.GENERATOR
        if self._motor_to_throat():
            return ChartType.MANIFESTOR
        return ChartType.PROJECTOR

    @property
    def inner_authority(self) -> Authority:
        defined = self._defined
        if "SOLAR_PLEXUS" in defined:
            return Authority.EMOTIONAL
        if "SACRAL" in defined:
            return Authority.SACRAL
        if "SPLEEN" in defined:
            return Authority.SPLENIC
        if "HEART" in defined:
            if mandala.connected(self._links, "HEART", {"THROAT"}):
                return Authority.EGO_MANIFESTED
            return Authority.EGO_PROJECTED
        if "G" in defined:
            return Authority.SELF_PROJECTED
        if not defined:
            return Authority.LUNAR
        return Authority.MENTAL

    @property
    def profile(self) -> str:
        return f"{self._sun_line(self.personality)}_{self._sun_line(self.design)}"

    @staticmethod
    def _sun_line(activations: List[Activation]) -> Optional[int]:
        for a in activations:
            if a.body == "Sun":
                return a.line
        return None

    @property
    def split_definition(self) -> Definition:
        groups = mandala.components(self._links)
        return Definition(min(len(groups), 4))

    def gate_activations(self) -> Dict[int, str]:
        """Map each active gate to who activates it: personality, design or both."""
        p = {a.gate for a in self.personality}
        d = {a.gate for a in self.design}
        out: Dict[int, str] = {}
        for gate in sorted(p | d):
            out[gate] = "both" if gate in p and gate in d else ("personality" if gate in p else "design")
        return out

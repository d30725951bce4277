"""Abstract capabilities exposed by the engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict


class IEphemerides(ABC):
    """Provides geocentric ecliptic longitudes for a Julian day (UT)."""

    @abstractmethod
    def longitudes(self, jd_ut: float, mode) -> Dict[str, float]:
        ...

    @abstractmethod
    def julian_day(self, point_in_time) -> float:
        ...


class IHumanDesignChart(ABC):
    @property
    @abstractmethod
    def chart_type(self):
        ...

    @property
    @abstractmethod
    def defined_centers(self):
        ...

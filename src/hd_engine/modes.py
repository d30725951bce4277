from enum import Enum


class EphCalculationMode(Enum):
    """Which Swiss Ephemeris backend computes the positions.

    ``SWISS`` needs the ``.se1`` data files; ``MOSHIER`` is the analytic
    fallback built into the library.
    """

    SWISS = "swiss"
    MOSHIER = "moshier"

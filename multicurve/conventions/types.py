"""
Basic enums shared across conventions, instruments and curve set-ups.
"""

from enum import Enum


class Frequency(Enum):
    """Payment frequencies, valued in months."""

    ANNUAL = 12
    SEMIANNUAL = 6
    QUARTERLY = 3
    MONTHLY = 1

    def months(self) -> int:
        return self.value

    def periods_per_year(self) -> int:
        return 12 // self.value

    @classmethod
    def from_tenor(cls, tenor: str) -> "Frequency":
        """Frequency matching a month or year tenor such as '3M' or '1Y'."""
        t = tenor.upper().strip()
        if t.endswith("Y"):
            months = int(t[:-1]) * 12
        elif t.endswith("M"):
            months = int(t[:-1])
        else:
            months = 0
        for frequency in cls:
            if frequency.value == months:
                return frequency
        raise ValueError(f"No frequency for tenor: {tenor}")


class BusinessDayAdjustment(Enum):
    """Business day adjustment rules."""

    NO_ADJUSTMENT = "NO_ADJUSTMENT"
    FOLLOWING = "FOLLOWING"
    MODIFIED_FOLLOWING = "MODIFIED_FOLLOWING"
    PRECEDING = "PRECEDING"
    MODIFIED_PRECEDING = "MODIFIED_PRECEDING"


class CurveFunction(Enum):
    """Parametric (functional) curve forms."""

    NELSON_SIEGEL = "NELSON_SIEGEL"

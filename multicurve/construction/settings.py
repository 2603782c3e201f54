"""Root-finder settings captured by curve set-ups."""

from __future__ import annotations

import os
from dataclasses import dataclass

from multicurve.calibration.root_finding import ROOT_FINDERS
from multicurve.errors import ConfigurationError

DEFAULT_ABSOLUTE_TOLERANCE = 1e-12
DEFAULT_RELATIVE_TOLERANCE = 1e-12
DEFAULT_MAX_STEPS = 100
DEFAULT_METHOD_NAME = "Broyden"


@dataclass
class RootFinderSettings:
    """Tolerances, step budget and method of the calibration root finder."""

    absolute_tolerance: float = DEFAULT_ABSOLUTE_TOLERANCE
    relative_tolerance: float = DEFAULT_RELATIVE_TOLERANCE
    max_steps: int = DEFAULT_MAX_STEPS
    method_name: str = DEFAULT_METHOD_NAME

    def __post_init__(self):
        validate_tolerance(self.absolute_tolerance, "Absolute tolerance")
        validate_tolerance(self.relative_tolerance, "Relative tolerance")
        validate_max_steps(self.max_steps)
        validate_method_name(self.method_name)

    @classmethod
    def from_env(cls) -> "RootFinderSettings":
        """Defaults overridden by MULTICURVE_* environment variables."""
        return cls(
            absolute_tolerance=float(
                os.getenv("MULTICURVE_ABSOLUTE_TOLERANCE", str(DEFAULT_ABSOLUTE_TOLERANCE))
            ),
            relative_tolerance=float(
                os.getenv("MULTICURVE_RELATIVE_TOLERANCE", str(DEFAULT_RELATIVE_TOLERANCE))
            ),
            max_steps=int(os.getenv("MULTICURVE_MAX_STEPS", str(DEFAULT_MAX_STEPS))),
            method_name=os.getenv("MULTICURVE_ROOT_FINDER", DEFAULT_METHOD_NAME),
        )


def validate_tolerance(value: float, label: str = "Tolerance") -> float:
    if value is None or not value > 0:
        raise ConfigurationError(f"{label} must be positive, got {value}")
    return value


def validate_max_steps(value: int) -> int:
    if value is None or isinstance(value, bool) or int(value) != value or value <= 0:
        raise ConfigurationError(f"Maximum steps must be a positive integer, got {value}")
    return int(value)


def validate_method_name(name: str) -> str:
    if not isinstance(name, str) or name.upper() not in ROOT_FINDERS:
        raise ConfigurationError(
            f"Unknown root finder: {name}. Available: {sorted(ROOT_FINDERS)}"
        )
    return name

"""
Calibration units: one curve with its instruments, and a jointly solved group.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np

from multicurve.curves.generators import CurveGenerator
from multicurve.instruments.derivatives import InstrumentDerivative


@dataclass(frozen=True)
class SingleCurveBundle:
    """A curve to calibrate: name, sorted instruments, start vector, generator."""

    curve_name: str
    instruments: Tuple[InstrumentDerivative, ...]
    initial_guess: np.ndarray
    generator: CurveGenerator

    def __post_init__(self):
        object.__setattr__(self, "instruments", tuple(self.instruments))
        object.__setattr__(self, "initial_guess", np.asarray(self.initial_guess, dtype=float))

    @property
    def size(self) -> int:
        return len(self.initial_guess)


@dataclass(frozen=True)
class MultiCurveBundle:
    """Curves of one stage, calibrated as a single system of equations."""

    bundles: Tuple[SingleCurveBundle, ...]

    def __post_init__(self):
        object.__setattr__(self, "bundles", tuple(self.bundles))

    @property
    def curve_names(self) -> List[str]:
        return [bundle.curve_name for bundle in self.bundles]

    @property
    def instruments(self) -> List[InstrumentDerivative]:
        return [instrument for bundle in self.bundles for instrument in bundle.instruments]

    @property
    def initial_guess(self) -> np.ndarray:
        if not self.bundles:
            return np.zeros(0)
        return np.concatenate([bundle.initial_guess for bundle in self.bundles])

    @property
    def sizes(self) -> Dict[str, int]:
        return {bundle.curve_name: bundle.size for bundle in self.bundles}

    def split(self, parameters: np.ndarray) -> List[np.ndarray]:
        """Cut a joint parameter vector into per-curve parameter vectors."""
        bounds = np.cumsum([bundle.size for bundle in self.bundles])[:-1]
        return np.split(np.asarray(parameters, dtype=float), bounds)

    def __len__(self) -> int:
        return len(self.bundles)

"""
Curve sensitivity data produced by calibration.

A ``CurveBuildingBlock`` records where the market quotes of each curve sit in
the columns of a sensitivity matrix. A ``SensitivityBundle`` holds, per
calibrated curve, that block and the matrix of the curve's parameter
sensitivities to those quotes: the quotes of every curve calibrated before
it, then the quotes of its own calibration unit.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Tuple

import numpy as np


@dataclass(frozen=True)
class CurveBuildingBlock:
    """Ordered curve name -> (start, number of quotes) layout."""

    layout: Tuple[Tuple[str, int, int], ...]

    @classmethod
    def from_sizes(cls, sizes: Mapping[str, int]) -> "CurveBuildingBlock":
        entries = []
        start = 0
        for name, count in sizes.items():
            entries.append((name, start, count))
            start += count
        return cls(tuple(entries))

    @property
    def curve_names(self) -> List[str]:
        return [name for name, _, _ in self.layout]

    @property
    def total(self) -> int:
        return sum(count for _, _, count in self.layout)

    def start(self, name: str) -> int:
        return self._entry(name)[1]

    def count(self, name: str) -> int:
        return self._entry(name)[2]

    def _entry(self, name: str) -> Tuple[str, int, int]:
        for entry in self.layout:
            if entry[0] == name:
                return entry
        raise KeyError(name)


@dataclass
class SensitivityBundle:
    """Per-curve (block, sensitivity matrix) pairs."""

    entries: Dict[str, Tuple[CurveBuildingBlock, np.ndarray]] = field(default_factory=dict)

    def add(self, name: str, block: CurveBuildingBlock, matrix: np.ndarray) -> None:
        self.entries[name] = (block, np.array(matrix, dtype=float))

    def add_all(self, other: "SensitivityBundle") -> "SensitivityBundle":
        """New bundle holding the entries of both; ``other`` wins on conflicts."""
        merged = self.copy()
        for name, (block, matrix) in other.entries.items():
            merged.add(name, block, matrix)
        return merged

    def block(self, name: str) -> CurveBuildingBlock:
        return self.entries[name][0]

    def matrix(self, name: str) -> np.ndarray:
        return self.entries[name][1]

    @property
    def curve_names(self) -> List[str]:
        return list(self.entries)

    def copy(self) -> "SensitivityBundle":
        return SensitivityBundle(
            {name: (block, matrix.copy()) for name, (block, matrix) in self.entries.items()}
        )

    def __contains__(self, name: str) -> bool:
        return name in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __eq__(self, other) -> bool:
        if not isinstance(other, SensitivityBundle):
            return NotImplemented
        if self.entries.keys() != other.entries.keys():
            return False
        return all(
            self.entries[name][0] == other.entries[name][0]
            and np.array_equal(self.entries[name][1], other.entries[name][1])
            for name in self.entries
        )

    __hash__ = None

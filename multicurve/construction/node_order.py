"""
Deterministic ordering of calibration instruments by node time.
"""

from typing import List, Sequence

from multicurve.instruments.derivatives import InstrumentDerivative
from multicurve.instruments.node_time import NodeTimeCalculator


class NodeOrderCalculator:
    """Sorts instruments by ascending node time; ties keep insertion order."""

    def __init__(self, node_time_calculator: NodeTimeCalculator):
        self.node_time_calculator = node_time_calculator

    def node_times(self, instruments: Sequence[InstrumentDerivative]) -> List[float]:
        return [self.node_time_calculator(instrument) for instrument in instruments]

    def sort(self, instruments: Sequence[InstrumentDerivative]) -> List[InstrumentDerivative]:
        times = self.node_times(instruments)
        # sorted() is stable
        order = sorted(range(len(instruments)), key=lambda i: times[i])
        return [instruments[i] for i in order]

    __call__ = sort

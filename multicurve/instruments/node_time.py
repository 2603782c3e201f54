"""Node-time calculators: map an instrument to the time of its curve node."""

from .derivatives import InstrumentDerivative


class NodeTimeCalculator:  # pragma: no cover - interface
    name = ""

    def __call__(self, instrument: InstrumentDerivative) -> float:
        raise NotImplementedError

    def __eq__(self, other) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self).__name__)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class InstrumentMaturityCalculator(NodeTimeCalculator):
    """Node at the last payment (maturity) of the instrument."""

    name = "INSTRUMENT_MATURITY"

    def __call__(self, instrument: InstrumentDerivative) -> float:
        return instrument.maturity_time()


class LastFixingEndTimeCalculator(NodeTimeCalculator):
    """Node at the end of the instrument's last fixing period."""

    name = "LAST_FIXING_END"

    def __call__(self, instrument: InstrumentDerivative) -> float:
        return instrument.last_fixing_end_time()

"""
Provider whose ibor curves hold forward rates directly.
"""

from multicurve.market.indices import IborIndex

from .multicurve import MulticurveProvider


class MulticurveForwardProvider(MulticurveProvider):
    """Ibor curves are read as the forward rate fixing at the period start.

    The curve's zero rate at the fixing start time is the forward; the period
    end and accrual do not enter. Overnight curves keep pseudo-discount
    factor semantics.
    """

    def ibor_forward_rate(self, index: IborIndex, start: float, end: float, accrual: float) -> float:
        return self.forward_curve(index).zero(start)

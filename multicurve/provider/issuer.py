"""
Provider with issuer curves for bond discounting.
"""

from typing import Dict, List, Mapping, MutableMapping, Optional

from multicurve.curves.base import BaseCurve
from multicurve.errors import StateError
from multicurve.market.legal_entity import IssuerFilterPair, LegalEntity, matches

from .multicurve import MulticurveProvider


class IssuerProvider(MulticurveProvider):
    """Multi-curve provider plus curves keyed by (issuer key, filter) pairs."""

    def __init__(
        self,
        discounting_curves=None,
        ibor_curves=None,
        overnight_curves=None,
        fx_matrix=None,
        issuer_curves: Optional[Mapping[IssuerFilterPair, BaseCurve]] = None,
    ):
        super().__init__(discounting_curves, ibor_curves, overnight_curves, fx_matrix)
        self.issuer_curves: Dict[IssuerFilterPair, BaseCurve] = dict(issuer_curves or {})

    def set_issuer_curve(self, pair: IssuerFilterPair, curve: BaseCurve) -> None:
        self.issuer_curves[pair] = curve

    def set_all(self, other: MulticurveProvider) -> None:
        super().set_all(other)
        if isinstance(other, IssuerProvider):
            self.issuer_curves.update(other.issuer_curves)

    def _curve_maps(self) -> List[MutableMapping]:
        return super()._curve_maps() + [self.issuer_curves]

    def issuer_curve(self, issuer: LegalEntity) -> BaseCurve:
        """First issuer curve whose filter matches ``issuer``."""
        for pair, curve in self.issuer_curves.items():
            if matches(pair, issuer):
                return curve
        raise StateError(f"No issuer curve for {issuer.short_name}")

    def copy(self) -> "IssuerProvider":
        other = super().copy()
        other.issuer_curves = dict(self.issuer_curves)
        return other

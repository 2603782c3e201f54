"""
Multi-curve provider: discounting curves by currency, forward curves by index.
"""

import copy
from typing import Dict, Iterator, List, Mapping, MutableMapping, Optional, Set, Union

from multicurve.curves.base import BaseCurve
from multicurve.curves.spread import SpreadCurve
from multicurve.errors import StateError
from multicurve.market.currency import Currency
from multicurve.market.fx import FxMatrix
from multicurve.market.indices import IborIndex, OvernightIndex


class MulticurveProvider:
    """Curves used to discount cash flows and project index fixings."""

    def __init__(
        self,
        discounting_curves: Optional[Mapping[Currency, BaseCurve]] = None,
        ibor_curves: Optional[Mapping[IborIndex, BaseCurve]] = None,
        overnight_curves: Optional[Mapping[OvernightIndex, BaseCurve]] = None,
        fx_matrix: Optional[FxMatrix] = None,
    ):
        self.discounting_curves: Dict[Currency, BaseCurve] = dict(discounting_curves or {})
        self.ibor_curves: Dict[IborIndex, BaseCurve] = dict(ibor_curves or {})
        self.overnight_curves: Dict[OvernightIndex, BaseCurve] = dict(overnight_curves or {})
        # Calibrated curves with no discounting or forward usage, by name
        self.other_curves: Dict[str, BaseCurve] = {}
        self.fx_matrix = fx_matrix.copy() if fx_matrix is not None else FxMatrix()

    # ------------------------------------------------------------------
    # Curve registration
    # ------------------------------------------------------------------
    def set_discounting_curve(self, currency: Currency, curve: BaseCurve) -> None:
        self.discounting_curves[currency] = curve

    def set_ibor_curve(self, index: IborIndex, curve: BaseCurve) -> None:
        self.ibor_curves[index] = curve

    def set_overnight_curve(self, index: OvernightIndex, curve: BaseCurve) -> None:
        self.overnight_curves[index] = curve

    def set_curve(self, name: str, curve: BaseCurve) -> None:
        self.other_curves[name] = curve

    def set_all(self, other: "MulticurveProvider") -> None:
        """Add every curve of ``other``; curves of ``other`` win on conflicts.

        The FX matrix of ``other`` is taken only when this provider has none.
        """
        self.discounting_curves.update(other.discounting_curves)
        self.ibor_curves.update(other.ibor_curves)
        self.overnight_curves.update(other.overnight_curves)
        self.other_curves.update(other.other_curves)
        if not len(self.fx_matrix):
            self.fx_matrix = other.fx_matrix.copy()

    def replace_curve(self, name: str, curve: BaseCurve) -> None:
        """Put ``curve`` wherever the curve called ``name`` is used.

        Spread curves built over ``name``, directly or through other spread
        curves, are rebuilt over the new curve.
        """
        def rebased(existing: BaseCurve) -> BaseCurve:
            if existing.name == name:
                return curve
            if isinstance(existing, SpreadCurve):
                base = rebased(existing.base)
                if base is not existing.base:
                    return existing.with_base(base)
            return existing

        for curves in self._curve_maps():
            for key, existing in list(curves.items()):
                curves[key] = rebased(existing)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def _curve_maps(self) -> List[MutableMapping]:
        return [self.discounting_curves, self.ibor_curves, self.overnight_curves, self.other_curves]

    def _all_curves(self) -> Iterator[BaseCurve]:
        for curves in self._curve_maps():
            yield from curves.values()

    def get_curve(self, name: str) -> Optional[BaseCurve]:
        """Curve with the given name, or None."""
        for curve in self._all_curves():
            if curve.name == name:
                return curve
        return None

    def __getitem__(self, name: str) -> BaseCurve:
        curve = self.get_curve(name)
        if curve is None:
            raise KeyError(name)
        return curve

    def __contains__(self, name: str) -> bool:
        return self.get_curve(name) is not None

    @property
    def curve_names(self) -> Set[str]:
        return {curve.name for curve in self._all_curves()}

    def discounting_curve(self, currency: Currency) -> BaseCurve:
        try:
            return self.discounting_curves[currency]
        except KeyError:
            raise StateError(f"No discounting curve for {currency}") from None

    def forward_curve(self, index: Union[IborIndex, OvernightIndex]) -> BaseCurve:
        curves = self.ibor_curves if isinstance(index, IborIndex) else self.overnight_curves
        try:
            return curves[index]
        except KeyError:
            raise StateError(f"No forward curve for {index}") from None

    # ------------------------------------------------------------------
    # Market quantities
    # ------------------------------------------------------------------
    def discount_factor(self, currency: Currency, t: float) -> float:
        return self.discounting_curve(currency).df(t)

    def ibor_forward_rate(self, index: IborIndex, start: float, end: float, accrual: float) -> float:
        return self.forward_curve(index).forward_rate(start, end, accrual)

    def overnight_forward_rate(
        self, index: OvernightIndex, start: float, end: float, accrual: float
    ) -> float:
        return self.forward_curve(index).forward_rate(start, end, accrual)

    def forward_rate(
        self, index: Union[IborIndex, OvernightIndex], start: float, end: float, accrual: float
    ) -> float:
        if isinstance(index, IborIndex):
            return self.ibor_forward_rate(index, start, end, accrual)
        return self.overnight_forward_rate(index, start, end, accrual)

    def copy(self) -> "MulticurveProvider":
        """Copy with new containers; curves themselves are immutable and shared."""
        other = copy.copy(self)
        other.discounting_curves = dict(self.discounting_curves)
        other.ibor_curves = dict(self.ibor_curves)
        other.overnight_curves = dict(self.overnight_curves)
        other.other_curves = dict(self.other_curves)
        other.fx_matrix = self.fx_matrix.copy()
        return other

    def __repr__(self) -> str:
        return f"{type(self).__name__}({sorted(self.curve_names)})"

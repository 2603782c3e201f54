"""
FX rate matrix shared by curve providers.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import numpy as np

from .currency import Currency


class FxMatrix:
    """Symmetric table of FX rates between a set of currencies.

    ``rate(a, b)`` is the number of units of ``b`` worth one unit of ``a``;
    ``rate(b, a)`` is always its reciprocal. An empty matrix knows no
    currencies; a matrix with one currency is the identity.
    """

    def __init__(self, reference: Optional[Currency] = None):
        self._currencies: Dict[Currency, int] = {}
        self._rates = np.zeros((0, 0))
        if reference is not None:
            self._currencies[reference] = 0
            self._rates = np.ones((1, 1))

    def add_currency(self, to_add: Currency, reference: Currency, fx_rate: float) -> "FxMatrix":
        """Add ``to_add`` with 1 ``to_add`` = ``fx_rate`` ``reference``."""
        if fx_rate <= 0:
            raise ValueError(f"FX rate must be positive: {fx_rate}")
        if to_add in self._currencies:
            raise ValueError(f"Currency {to_add} is already in the FX matrix")
        if not self._currencies:
            self._currencies[reference] = 0
            self._rates = np.ones((1, 1))
        if reference not in self._currencies:
            raise ValueError(f"Reference currency {reference} is not in the FX matrix")
        ref = self._currencies[reference]
        n = len(self._currencies)
        # value of one unit of the new currency in each existing currency
        new_row = fx_rate * self._rates[ref, :]
        rates = np.ones((n + 1, n + 1))
        rates[:n, :n] = self._rates
        rates[n, :n] = new_row
        rates[:n, n] = 1.0 / new_row
        self._rates = rates
        self._currencies[to_add] = n
        return self

    def rate(self, ccy1: Currency, ccy2: Currency) -> float:
        if ccy1 == ccy2:
            return 1.0
        try:
            return float(self._rates[self._currencies[ccy1], self._currencies[ccy2]])
        except KeyError as exc:
            raise KeyError(f"No FX rate between {ccy1} and {ccy2}") from exc

    @property
    def currencies(self) -> List[Currency]:
        return list(self._currencies)

    def copy(self) -> "FxMatrix":
        other = FxMatrix()
        other._currencies = dict(self._currencies)
        other._rates = self._rates.copy()
        return other

    def __len__(self) -> int:
        return len(self._currencies)

    def __eq__(self, other) -> bool:
        if not isinstance(other, FxMatrix):
            return NotImplemented
        return self._currencies == other._currencies and np.array_equal(self._rates, other._rates)

    __hash__ = None

    def __repr__(self) -> str:
        return f"FxMatrix({[str(c) for c in self._currencies]})"

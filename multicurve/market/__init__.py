"""Market data primitives: currencies, indices, issuers, FX and fixings."""

from .currency import CHF, EUR, GBP, JPY, USD, Currency
from .fixings import Fixings, empty_fixings, fixing_series, get_fixing
from .fx import FxMatrix
from .indices import IborIndex, OvernightIndex
from .legal_entity import IssuerFilterPair, LegalEntity, LegalEntityFilter, matches

__all__ = [
    "Currency",
    "USD",
    "EUR",
    "GBP",
    "JPY",
    "CHF",
    "IborIndex",
    "OvernightIndex",
    "LegalEntity",
    "LegalEntityFilter",
    "IssuerFilterPair",
    "matches",
    "FxMatrix",
    "Fixings",
    "fixing_series",
    "get_fixing",
    "empty_fixings",
]

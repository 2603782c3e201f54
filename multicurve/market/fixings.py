"""
Historical index fixings.

Fixings are held as ``pandas.Series`` of rates indexed by fixing date, one
series per index.
"""

from datetime import date
from typing import Dict, Mapping, Optional, Union

import pandas as pd

from .indices import IborIndex, OvernightIndex

Index = Union[IborIndex, OvernightIndex]
Fixings = Mapping[Index, pd.Series]


def fixing_series(values: Mapping[date, float]) -> pd.Series:
    """Build a fixing series from a ``{date: rate}`` mapping."""
    series = pd.Series(values, dtype=float)
    series.index = pd.to_datetime(series.index)
    return series.sort_index()


def get_fixing(fixings: Fixings, index: Index, fixing_date: date) -> Optional[float]:
    """Return the fixing of ``index`` on ``fixing_date`` or None when absent."""
    series = fixings.get(index)
    if series is None or series.empty:
        return None
    value = series.get(pd.Timestamp(fixing_date))
    if value is None or pd.isna(value):
        return None
    return float(value)


def empty_fixings() -> Dict[Index, pd.Series]:
    return {}

"""
Definition to derivative conversion and analytic initial guesses.
"""

from datetime import date
from typing import Optional

from multicurve.errors import ConfigurationError
from multicurve.market.fixings import Fixings

from .definitions import InstrumentDefinition
from .derivatives import InstrumentDerivative


def convert(
    definition: InstrumentDefinition,
    fixings: Optional[Fixings],
    valuation_date: date,
) -> InstrumentDerivative:
    """Convert a node definition into the instrument priced at ``valuation_date``."""
    if not isinstance(definition, InstrumentDefinition):
        raise ConfigurationError(f"Unsupported node definition: {type(definition).__name__}")
    return definition.to_derivative(valuation_date, fixings or {})


def rates_initialization(instrument: InstrumentDerivative) -> float:
    """Initial guess for the node value: the instrument's own quoted rate."""
    return instrument.initial_rate()

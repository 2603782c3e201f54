"""
Per-curve configuration: usage, form, node placement and spread base.

Descriptors are created through ``CurveSetUpBuilder.configure`` and keep a
back-reference to that set-up only so that ``done()`` can return to it; all
containers are owned by the set-up.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, List, Optional, Tuple

from multicurve.conventions.daycount import time_between
from multicurve.conventions.types import CurveFunction
from multicurve.curves.generators import (
    CurveGenerator,
    DiscountFactorGenerator,
    NelsonSiegelGenerator,
    PeriodicYieldGenerator,
    SpreadGenerator,
    YieldGenerator,
)
from multicurve.errors import ConfigurationError, StateError
from multicurve.instruments.node_time import NodeTimeCalculator
from multicurve.interpolation.factory import available_interpolators, is_known_interpolator
from multicurve.market.indices import IborIndex, OvernightIndex
from multicurve.market.legal_entity import IssuerFilterPair, LegalEntityFilter

from .forms import (
    ContinuousDiscountFactor,
    ContinuousYield,
    CurveForm,
    Functional,
    NodeTimePolicy,
    PeriodicYield,
)

if TYPE_CHECKING:
    from .flavors import CurveFlavor
    from .setup import CurveSetUpBuilder

logger = logging.getLogger(__name__)


class CurveTypeDescriptor:
    """Describes how one named curve is used and generated."""

    def __init__(self, name: str, flavor: "CurveFlavor", owner: Optional["CurveSetUpBuilder"] = None):
        self.name = name
        self.flavor = flavor
        self._owner = owner
        self.discounting_id: Optional[object] = None
        self.ibor_indices: List[IborIndex] = []
        self.overnight_indices: List[OvernightIndex] = []
        self.issuers: List[IssuerFilterPair] = []
        self.interpolator: Optional[str] = None
        self.form: Optional[CurveForm] = None
        self.node_time_policy: Optional[NodeTimePolicy] = None
        self.node_dates: Optional[Tuple[date, ...]] = None
        self.base_curve_name: Optional[str] = None
        self.subtract_spread = False

    # ------------------------------------------------------------------
    # Usage
    # ------------------------------------------------------------------
    def for_discounting(self, discounting_id) -> "CurveTypeDescriptor":
        if discounting_id is None:
            raise ConfigurationError(f"Discounting id of curve {self.name} is None")
        self.discounting_id = discounting_id
        return self

    def for_index(self, *indices) -> "CurveTypeDescriptor":
        """Forward curve for ibor and/or overnight indices.

        Discounting and forward-direct set-ups take exactly one index per
        call; issuer and Hull-White set-ups accept several and accumulate.
        """
        if not indices:
            raise ConfigurationError(f"No index given for curve {self.name}")
        if self.flavor.single_index_per_call and len(indices) != 1:
            raise ConfigurationError(
                f"Curve {self.name}: {self.flavor.name} set-ups take one index per call, got {len(indices)}"
            )
        for index in indices:
            if isinstance(index, IborIndex):
                self.ibor_indices.append(index)
            elif isinstance(index, OvernightIndex):
                self.overnight_indices.append(index)
            else:
                raise ConfigurationError(f"Curve {self.name}: not an index: {index!r}")
        return self

    def for_issuer(self, *pairs: IssuerFilterPair) -> "CurveTypeDescriptor":
        """Issuer curve for one (key, filter) pair; repeated calls accumulate."""
        if not self.flavor.supports_issuers:
            raise ConfigurationError(f"Curve {self.name}: {self.flavor.name} set-ups have no issuer curves")
        if len(pairs) != 1:
            raise ConfigurationError(f"Curve {self.name}: exactly one issuer pair per call, got {len(pairs)}")
        pair = pairs[0]
        if not isinstance(pair, tuple) or len(pair) != 2 or not isinstance(pair[1], LegalEntityFilter):
            raise ConfigurationError(f"Curve {self.name}: issuer pair must be (key, LegalEntityFilter), got {pair!r}")
        if pair[0] is None:
            raise ConfigurationError(f"Curve {self.name}: issuer key is None")
        self.issuers.append(pair)
        return self

    # ------------------------------------------------------------------
    # Form
    # ------------------------------------------------------------------
    def with_interpolator(self, interpolator: str) -> "CurveTypeDescriptor":
        if isinstance(self.form, Functional):
            raise ConfigurationError(f"Curve {self.name} has a functional form; it cannot be interpolated")
        if not is_known_interpolator(interpolator):
            raise ConfigurationError(
                f"Unknown interpolator {interpolator!r}. Available: {available_interpolators()}"
            )
        self.interpolator = interpolator.upper()
        return self

    def functional_form(self, function: CurveFunction) -> "CurveTypeDescriptor":
        if not isinstance(function, CurveFunction):
            raise ConfigurationError(f"Unknown curve function: {function!r}")
        if self.interpolator is not None:
            raise ConfigurationError(f"Curve {self.name} already has interpolator {self.interpolator}")
        if self.node_dates is not None:
            raise ConfigurationError(f"Curve {self.name} already has node dates")
        if self.form is not None:
            raise ConfigurationError(f"Curve {self.name} already has form {self.form}")
        if self.base_curve_name is not None:
            raise ConfigurationError(f"Curve {self.name} is a spread over {self.base_curve_name}")
        self.form = Functional(function)
        return self

    def continuous_interpolation_on_yield(self) -> "CurveTypeDescriptor":
        return self._set_form(ContinuousYield())

    def periodic_interpolation_on_yield(self, periods_per_year: int) -> "CurveTypeDescriptor":
        form = PeriodicYield(periods_per_year)
        if self.node_dates is not None:
            raise ConfigurationError(f"Curve {self.name} has node dates; periodic yields are not available")
        return self._set_form(form)

    def continuous_interpolation_on_discount_factors(self) -> "CurveTypeDescriptor":
        return self._set_form(ContinuousDiscountFactor())

    def _set_form(self, form: CurveForm) -> "CurveTypeDescriptor":
        if self.form is not None:
            raise ConfigurationError(f"Curve {self.name} already has form {self.form}")
        self.form = form
        return self

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------
    def using_node_dates(self, *dates: date) -> "CurveTypeDescriptor":
        if not dates:
            raise ConfigurationError(f"No node dates given for curve {self.name}")
        if any(d is None for d in dates):
            raise ConfigurationError(f"Curve {self.name}: node dates contain None")
        if isinstance(self.form, Functional):
            raise ConfigurationError(f"Curve {self.name} has a functional form; node dates do not apply")
        if isinstance(self.form, PeriodicYield):
            raise ConfigurationError(f"Curve {self.name} uses periodic yields; node dates are not available")
        self.node_dates = tuple(dates)
        return self

    def using_instrument_maturity(self) -> "CurveTypeDescriptor":
        return self._set_node_time_policy(NodeTimePolicy.INSTRUMENT_MATURITY)

    def using_last_fixing_end_time(self) -> "CurveTypeDescriptor":
        return self._set_node_time_policy(NodeTimePolicy.LAST_FIXING_END)

    def _set_node_time_policy(self, policy: NodeTimePolicy) -> "CurveTypeDescriptor":
        if self.node_time_policy is not None:
            raise ConfigurationError(
                f"Curve {self.name} already places nodes by {self.node_time_policy.value}"
            )
        self.node_time_policy = policy
        return self

    @property
    def node_time_calculator(self) -> NodeTimeCalculator:
        return (self.node_time_policy or NodeTimePolicy.INSTRUMENT_MATURITY).calculator()

    # ------------------------------------------------------------------
    # Spread
    # ------------------------------------------------------------------
    def as_spread_over(self, base_curve_name: str, subtract: bool = False) -> "CurveTypeDescriptor":
        """Make this curve the base curve plus (or, with ``subtract``, minus) a spread."""
        if isinstance(self.form, Functional):
            raise ConfigurationError(f"Curve {self.name} has a functional form; it cannot be a spread")
        if not base_curve_name:
            raise ConfigurationError(f"Curve {self.name}: base curve name is empty")
        if base_curve_name == self.name:
            raise ConfigurationError(f"Curve {self.name} cannot be a spread over itself")
        self.base_curve_name = base_curve_name
        self.subtract_spread = subtract
        return self

    # ------------------------------------------------------------------
    # Generator
    # ------------------------------------------------------------------
    def build_curve_generator(self, valuation_date: date) -> CurveGenerator:
        calculator = self.node_time_calculator

        if isinstance(self.form, Functional):
            if self.form.function is not CurveFunction.NELSON_SIEGEL:
                raise ConfigurationError(f"Curve {self.name}: no generator for {self.form.function}")
            return self._wrap(NelsonSiegelGenerator())

        if self.interpolator is None:
            raise ConfigurationError(f"Curve {self.name} has neither an interpolator nor a functional form")

        if self.node_dates is not None:
            if len(self.node_dates) < 2:
                raise ConfigurationError(f"Curve {self.name} needs at least two node dates")
            times = [time_between(valuation_date, d) for d in self.node_dates]
            if self.form is None or isinstance(self.form, ContinuousYield):
                generator = YieldGenerator(self.interpolator, node_times=times)
            elif isinstance(self.form, ContinuousDiscountFactor):
                generator = DiscountFactorGenerator(self.interpolator, node_times=times)
            else:
                raise ConfigurationError(f"Curve {self.name}: no node-date generator for {self.form}")
            return self._wrap(generator)

        if self.form is None or isinstance(self.form, ContinuousYield):
            generator = YieldGenerator(self.interpolator, node_time_calculator=calculator)
        elif isinstance(self.form, PeriodicYield):
            generator = PeriodicYieldGenerator(
                self.interpolator, self.form.periods_per_year, node_time_calculator=calculator
            )
        elif isinstance(self.form, ContinuousDiscountFactor):
            generator = DiscountFactorGenerator(self.interpolator, node_time_calculator=calculator)
        else:
            raise ConfigurationError(f"Curve {self.name}: no generator for {self.form}")
        return self._wrap(generator)

    def _wrap(self, generator: CurveGenerator) -> CurveGenerator:
        if self.base_curve_name is None:
            return generator
        logger.debug("Curve %s is a spread over %s", self.name, self.base_curve_name)
        return SpreadGenerator(generator, self.base_curve_name, self.subtract_spread)

    # ------------------------------------------------------------------
    # Ownership
    # ------------------------------------------------------------------
    def done(self) -> "CurveSetUpBuilder":
        """Return to the set-up that created this descriptor."""
        if self._owner is None:
            raise StateError(f"Descriptor of curve {self.name} is not attached to a set-up")
        return self._owner

    def copy(self, owner: Optional["CurveSetUpBuilder"] = None) -> "CurveTypeDescriptor":
        other = CurveTypeDescriptor(self.name, self.flavor, owner)
        other.discounting_id = self.discounting_id
        other.ibor_indices = list(self.ibor_indices)
        other.overnight_indices = list(self.overnight_indices)
        other.issuers = list(self.issuers)
        other.interpolator = self.interpolator
        other.form = self.form
        other.node_time_policy = self.node_time_policy
        other.node_dates = self.node_dates
        other.base_curve_name = self.base_curve_name
        other.subtract_spread = self.subtract_spread
        return other

    def __repr__(self) -> str:
        return f"CurveTypeDescriptor({self.name}, form={self.form}, interpolator={self.interpolator})"


class PreConstructedCurveEntry:
    """An already built curve and the usages it covers."""

    def __init__(self, curve, owner: Optional["CurveSetUpBuilder"] = None):
        if curve is None:
            raise ConfigurationError("Pre-constructed curve is None")
        self.curve = curve
        self._owner = owner
        self.discounting_id: Optional[object] = None
        self.ibor_indices: List[IborIndex] = []
        self.overnight_indices: List[OvernightIndex] = []

    @property
    def name(self) -> str:
        return getattr(self.curve, "name", "")

    def for_discounting(self, discounting_id) -> "PreConstructedCurveEntry":
        if discounting_id is None:
            raise ConfigurationError(f"Discounting id of pre-constructed curve {self.name} is None")
        self.discounting_id = discounting_id
        return self

    def for_index(self, *indices) -> "PreConstructedCurveEntry":
        if not indices:
            raise ConfigurationError(f"No index given for pre-constructed curve {self.name}")
        for index in indices:
            if isinstance(index, IborIndex):
                self.ibor_indices.append(index)
            elif isinstance(index, OvernightIndex):
                self.overnight_indices.append(index)
            else:
                raise ConfigurationError(f"Pre-constructed curve {self.name}: not an index: {index!r}")
        return self

    def usage_keys(self) -> List[object]:
        keys: List[object] = []
        if self.discounting_id is not None:
            keys.append(self.discounting_id)
        return keys + list(self.ibor_indices) + list(self.overnight_indices)

    def done(self) -> "CurveSetUpBuilder":
        if self._owner is None:
            raise StateError(f"Pre-constructed curve {self.name} is not attached to a set-up")
        return self._owner

    def copy(self, owner: Optional["CurveSetUpBuilder"] = None) -> "PreConstructedCurveEntry":
        other = PreConstructedCurveEntry(self.curve, owner)
        other.discounting_id = self.discounting_id
        other.ibor_indices = list(self.ibor_indices)
        other.overnight_indices = list(self.overnight_indices)
        return other

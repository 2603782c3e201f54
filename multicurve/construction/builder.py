"""
Finalized curve set-up: turns declared curves into calibration units per
valuation date and runs them through the solver stage by stage.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Dict, List, Mapping, NamedTuple, Optional, Sequence

from multicurve.calibration.bundles import MultiCurveBundle, SingleCurveBundle
from multicurve.calibration.calibrator import CurveCalibrator
from multicurve.errors import StateError, UnsupportedOperationError
from multicurve.instruments.conversion import convert, rates_initialization
from multicurve.instruments.definitions import InstrumentDefinition
from multicurve.market.currency import Currency
from multicurve.market.fixings import Fixings
from multicurve.market.fx import FxMatrix
from multicurve.market.indices import IborIndex, OvernightIndex
from multicurve.market.legal_entity import IssuerFilterPair
from multicurve.provider.multicurve import MulticurveProvider
from multicurve.provider.sensitivity import SensitivityBundle

from .descriptor import CurveTypeDescriptor
from .flavors import CurveFlavor, HullWhiteFlavor
from .forms import Functional
from .node_order import NodeOrderCalculator
from .settings import RootFinderSettings

logger = logging.getLogger(__name__)


class BuildResult(NamedTuple):
    """Calibrated curves and their sensitivities; unpacks as a pair."""

    provider: MulticurveProvider
    sensitivities: SensitivityBundle


class CurveBuilder:
    """Immutable calibration plan produced by ``CurveSetUpBuilder.finalize``.

    ``build_curves`` may be called repeatedly, with different valuation dates
    and fixings; nothing held by the builder is modified by a build.
    """

    def __init__(
        self,
        *,
        stages: Sequence[Sequence[str]],
        descriptors: Mapping[str, CurveTypeDescriptor],
        nodes: Mapping[str, Optional[Sequence[InstrumentDefinition]]],
        discounting: Mapping[str, object],
        ibor: Mapping[str, Sequence[IborIndex]],
        overnight: Mapping[str, Sequence[OvernightIndex]],
        issuers: Mapping[str, Sequence[IssuerFilterPair]],
        known_discounting: Mapping[object, object],
        known_ibor: Mapping[IborIndex, object],
        known_overnight: Mapping[OvernightIndex, object],
        fx_matrix: FxMatrix,
        known_bundle: Optional[SensitivityBundle],
        settings: RootFinderSettings,
        flavor: CurveFlavor,
        solver=None,
    ):
        self._stages = tuple(tuple(stage) for stage in stages)
        self._descriptors = dict(descriptors)
        self._nodes = {name: None if n is None else tuple(n) for name, n in nodes.items()}
        self._discounting = dict(discounting)
        self._ibor = {name: tuple(indices) for name, indices in ibor.items()}
        self._overnight = {name: tuple(indices) for name, indices in overnight.items()}
        self._issuers = {name: tuple(pairs) for name, pairs in issuers.items()}
        self._known_discounting = dict(known_discounting)
        self._known_ibor = dict(known_ibor)
        self._known_overnight = dict(known_overnight)
        self._fx_matrix = fx_matrix.copy()
        self._known_bundle = None if known_bundle is None else known_bundle.copy()
        self._settings = replace(settings)
        self._flavor = flavor
        self._solver = solver

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------
    def build_curves(self, valuation_date: date, fixings: Optional[Fixings] = None) -> BuildResult:
        """Calibrate every stage in declared order at ``valuation_date``."""
        return self._build(self._flavor, valuation_date, fixings)

    def build_curves_without_convexity_adjustment(
        self, valuation_date: date, fixings: Optional[Fixings] = None
    ) -> BuildResult:
        """Hull-White set-ups only: calibrate with futures taken at their forward rate."""
        if not isinstance(self._flavor, HullWhiteFlavor):
            raise UnsupportedOperationError(
                f"{self._flavor.name} set-ups have no convexity adjustment to remove"
            )
        return self._build(self._flavor.without_convexity_adjustment(), valuation_date, fixings)

    def _build(self, flavor: CurveFlavor, valuation_date: date, fixings: Optional[Fixings]) -> BuildResult:
        self._check_discounting_ids()
        units = self.calibration_units(valuation_date, fixings)
        provider = flavor.create_provider(
            self._known_discounting, self._known_ibor, self._known_overnight, self._fx_matrix
        )
        bundle = None if self._known_bundle is None else self._known_bundle.copy()
        solver = self._solver or CurveCalibrator.from_settings(self._settings)
        issuers = self._issuers if flavor.supports_issuers else None

        for i, unit in enumerate(units, start=1):
            logger.info("Stage %s/%s: calibrating %s", i, len(units), unit.curve_names)
            provider, bundle = solver.calibrate(
                unit,
                provider,
                bundle,
                dict(self._discounting),
                dict(self._ibor),
                dict(self._overnight),
                flavor.calculator(),
                flavor.sensitivity_calculator(),
                issuers=None if issuers is None else dict(issuers),
            )
        return BuildResult(provider, bundle if bundle is not None else SensitivityBundle())

    def _check_discounting_ids(self) -> None:
        ids = list(self._discounting.items()) + [
            (getattr(curve, "name", "pre-constructed"), key) for key, curve in self._known_discounting.items()
        ]
        for name, discounting_id in ids:
            if not isinstance(discounting_id, Currency):
                raise UnsupportedOperationError(
                    f"Curve {name} discounts {discounting_id!r}; "
                    f"{self._flavor.name} set-ups only discount by currency"
                )

    def calibration_units(
        self, valuation_date: date, fixings: Optional[Fixings] = None
    ) -> List[MultiCurveBundle]:
        """One bundle per stage, curves in declared order, nodes sorted by node time."""
        return [
            MultiCurveBundle(tuple(self._single_curve_bundle(name, valuation_date, fixings) for name in stage))
            for stage in self._stages
        ]

    def _single_curve_bundle(
        self, name: str, valuation_date: date, fixings: Optional[Fixings]
    ) -> SingleCurveBundle:
        definitions = self._nodes.get(name)
        if definitions is None:
            raise StateError(f"No nodes for curve {name}")
        descriptor = self._descriptors[name]
        instruments = [convert(definition, fixings, valuation_date) for definition in definitions]
        order = NodeOrderCalculator(descriptor.node_time_calculator)
        if descriptor.node_dates is None and not isinstance(descriptor.form, Functional):
            _check_distinct_node_times(name, definitions, order.node_times(instruments))
        instruments = order.sort(instruments)
        seeds = [rates_initialization(instrument) for instrument in instruments]
        generator = descriptor.build_curve_generator(valuation_date).final_generator(instruments)
        return SingleCurveBundle(name, instruments, generator.initial_guess(seeds), generator)

    def with_solver(self, solver) -> "CurveBuilder":
        """Same plan calibrated by ``solver``."""
        return CurveBuilder(
            stages=self._stages,
            descriptors=self._descriptors,
            nodes=self._nodes,
            discounting=self._discounting,
            ibor=self._ibor,
            overnight=self._overnight,
            issuers=self._issuers,
            known_discounting=self._known_discounting,
            known_ibor=self._known_ibor,
            known_overnight=self._known_overnight,
            fx_matrix=self._fx_matrix,
            known_bundle=self._known_bundle,
            settings=self._settings,
            flavor=self._flavor,
            solver=solver,
        )

    # ------------------------------------------------------------------
    # Read accessors (copies)
    # ------------------------------------------------------------------
    @property
    def flavor(self) -> CurveFlavor:
        return self._flavor

    @property
    def stages(self) -> List[List[str]]:
        return [list(stage) for stage in self._stages]

    @property
    def curve_names(self) -> List[str]:
        return [name for stage in self._stages for name in stage]

    @property
    def nodes(self) -> Dict[str, Optional[List[InstrumentDefinition]]]:
        return {name: None if n is None else list(n) for name, n in self._nodes.items()}

    @property
    def discounting_curves(self) -> Dict[str, object]:
        return dict(self._discounting)

    @property
    def ibor_curves(self) -> Dict[str, List[IborIndex]]:
        return {name: list(indices) for name, indices in self._ibor.items()}

    @property
    def overnight_curves(self) -> Dict[str, List[OvernightIndex]]:
        return {name: list(indices) for name, indices in self._overnight.items()}

    @property
    def issuer_curves(self) -> Dict[str, List[IssuerFilterPair]]:
        return {name: list(pairs) for name, pairs in self._issuers.items()}

    @property
    def known_discounting_curves(self) -> Dict[object, object]:
        return dict(self._known_discounting)

    @property
    def known_ibor_curves(self) -> Dict[IborIndex, object]:
        return dict(self._known_ibor)

    @property
    def known_overnight_curves(self) -> Dict[OvernightIndex, object]:
        return dict(self._known_overnight)

    @property
    def fx_matrix(self) -> FxMatrix:
        return self._fx_matrix.copy()

    @property
    def known_bundle(self) -> Optional[SensitivityBundle]:
        return None if self._known_bundle is None else self._known_bundle.copy()

    @property
    def root_finder_settings(self) -> RootFinderSettings:
        return replace(self._settings)

    def __repr__(self) -> str:
        return f"CurveBuilder({self._flavor.name}, stages={[list(s) for s in self._stages]})"


def _check_distinct_node_times(
    name: str, definitions: Sequence[InstrumentDefinition], times: Sequence[float]
) -> None:
    """Nodes placed at instrument times need one instrument per time."""
    seen: Dict[float, InstrumentDefinition] = {}
    for definition, t in zip(definitions, times):
        if t in seen:
            raise StateError(
                f"Curve {name} has nodes with the same node time {t:.6f}: {seen[t]!r}, {definition!r}"
            )
        seen[t] = definition
